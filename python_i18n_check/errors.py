"""
Exceptions raised by the i18n checker.
"""
from typing import List, Sequence

ERROR_LABEL = "I18N ERROR"


class I18nCheckError(Exception):
    """Base class for every error raised by the checker."""


class FailError(I18nCheckError):
    """An expected failure that is shown to the user as a single message."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(FailError):
    """Configuration could not be loaded or merged."""


class ExtractionError(I18nCheckError):
    """Default messages could not be extracted."""


class UntrackedMessagesError(I18nCheckError):
    """Translatable strings were found outside of the configured paths."""


class LocaleFileError(I18nCheckError):
    """A translation file is not compatible with the extracted messages."""


class TaskListError(I18nCheckError):
    """Raised when a stage finished with failed sub-tasks."""

    def __init__(self, errors: Sequence[BaseException]):
        self.errors: List[BaseException] = list(errors)
        super().__init__(f"{len(self.errors)} task(s) failed")


def create_fail_error(reason: str) -> FailError:
    """Build a FailError with the i18n error label in front."""
    return FailError(f"[{ERROR_LABEL}] {reason}")
