"""
Message extraction service for the i18n checker.
This module finds gettext calls in source files with Babel, builds the
default message catalog and looks for translatable strings that live outside
of the configured message paths.
"""
import logging
import os
import tokenize
from typing import Callable, Dict, List, Optional, Tuple

import anyio.to_thread
from babel.messages.extract import DEFAULT_KEYWORDS, extract_from_file

from ..errors import ExtractionError, UntrackedMessagesError, create_fail_error
from ..models.config import I18nConfig
from ..models.messages import MessageCatalog, MessageInfo, describe_key
from ..models.tasks import RunContext, SubTask
from ..utils.gitignore import create_gitignore_parser, is_within, match_extract_method
from ..utils.placeholders import parse_placeholders
from .error_reporter import ErrorReporter


def filter_config_paths(path: Optional[str], config: I18nConfig) -> List[Tuple[str, str]]:
    """
    Select the configured message directories a run should extract from.

    Args:
        path: Optional --path value; only directories under it (or containing it) are kept
        config: Run configuration

    Returns:
        List of (domain, directory) pairs in configuration order
    """
    selected = []
    for domain, dirs in config.paths.items():
        for directory in dirs:
            if path is None or is_within(directory, path) or is_within(path, directory):
                selected.append((domain, directory))
    return selected


class MessageExtractor:
    """Extracts default messages from source code."""

    def __init__(self, comment_tags: Tuple[str, ...] = ("Translators:",)):
        self.comment_tags = comment_tags

    @staticmethod
    def _keywords(config: I18nConfig) -> Dict[str, Optional[tuple]]:
        keywords = dict(DEFAULT_KEYWORDS)
        for keyword in config.keywords:
            keywords.setdefault(keyword, None)
        return keywords

    def extract_file(self, file_path: str, config: I18nConfig, domain: Optional[str] = None) -> List[MessageInfo]:
        """
        Extract the messages of a single source file.

        Args:
            file_path: File to read
            config: Run configuration (extraction methods and keywords)
            domain: Domain the messages belong to

        Returns:
            Messages in the order they appear in the file

        Raises:
            ExtractionError: If the file cannot be read or tokenized
        """
        method = match_extract_method(file_path, config)
        if method is None:
            return []
        try:
            extracted = extract_from_file(
                method, file_path,
                keywords=self._keywords(config),
                comment_tags=self.comment_tags,
                strip_comment_tags=True,
            )
        except (OSError, SyntaxError, UnicodeDecodeError, tokenize.TokenError) as e:
            raise ExtractionError(f"Unable to extract messages from {file_path}: {e}") from e

        messages = []
        for lineno, message, comments, context in extracted:
            if isinstance(message, (list, tuple)):
                msgid = message[0]
                msgid_plural = message[1] if len(message) > 1 else None
            else:
                msgid, msgid_plural = message, None
            messages.append(MessageInfo(
                msgid=msgid,
                msgid_plural=msgid_plural,
                msgctxt=context,
                domain=domain,
                locations=[(file_path, lineno)],
                comments=list(comments),
            ))
        return messages

    @staticmethod
    def _validate_message(message: MessageInfo) -> Optional[str]:
        for text in (message.msgid, message.msgid_plural):
            if text and parse_placeholders(text).mixes_named_and_positional:
                return f"{describe_key(message.key)} mixes named and positional placeholders"
        return None

    def extract_messages_from_dir(self, domain: str, directory: str, config: I18nConfig,
                                  messages: MessageCatalog) -> int:
        """
        Add every message found under directory to the catalog.

        Args:
            domain: Domain the directory belongs to
            directory: Directory to walk
            config: Run configuration
            messages: Catalog to update in place

        Returns:
            Number of messages read from the directory

        Raises:
            ExtractionError: If the directory is missing or its messages are invalid
        """
        if not os.path.isdir(directory):
            raise ExtractionError(f"Message path {directory} does not exist")

        parser = create_gitignore_parser(directory, config)
        problems = []
        count = 0
        for file_path in parser.walk(directory):
            for message in self.extract_file(file_path, config, domain):
                count += 1
                location = "%s:%d" % message.locations[0]
                problem = self._validate_message(message)
                if problem:
                    problems.append(f"{location}: {problem}")
                    continue

                existing = messages.get(message.key)
                if existing is None:
                    messages[message.key] = message
                elif existing.msgid_plural != message.msgid_plural:
                    problems.append(
                        f"{location}: {describe_key(message.key)} has a different plural form "
                        f"than in {'%s:%d' % existing.locations[0]}"
                    )
                else:
                    existing.locations.extend(message.locations)
                    existing.comments.extend(c for c in message.comments if c not in existing.comments)

        if problems:
            raise ExtractionError(
                f"Invalid default messages in {directory}:\n" + "\n".join(f"  {p}" for p in problems)
            )
        logging.debug("Extracted %d messages from %s", count, directory)
        return count

    def default_message_tasks(self, path: Optional[str], config: I18nConfig) -> List[SubTask]:
        """
        Build one extraction sub-task per configured message directory.

        Raises:
            FailError: If --path does not match any configured directory
        """
        selected = filter_config_paths(path, config)
        if path is not None and not selected:
            raise create_fail_error(f"None of the configured message paths is covered by {path}")

        def make_task(domain: str, directory: str) -> SubTask:
            async def run(context: RunContext):
                # Extraction only reads files, so a cancelled run does not wait for it
                await anyio.to_thread.run_sync(
                    self.extract_messages_from_dir, domain, directory, config,
                    context.catalogs.setdefault(domain, {}),
                    abandon_on_cancel=True,
                )
            return SubTask(title=f"Extracting messages from {directory}", run=run)

        return [make_task(domain, directory) for domain, directory in selected]

    def find_untracked_files(self, path: str, config: I18nConfig,
                             on_error: Optional[Callable[[str, ExtractionError], None]] = None) -> List[str]:
        """
        Return files under path with gettext calls outside every configured message directory.

        Args:
            path: Scan root
            config: Run configuration
            on_error: Called with the file and the error for every file that cannot be read;
                the scan then goes on with the next file

        Raises:
            ExtractionError: If a file cannot be read and no on_error callback was given
        """
        if not os.path.isdir(path):
            logging.debug("Skipping missing source path %s", path)
            return []
        message_dirs = config.message_dirs
        parser = create_gitignore_parser(path, config)
        untracked = []
        for file_path in parser.walk(path):
            if any(is_within(file_path, directory) for directory in message_dirs):
                continue
            if match_extract_method(file_path, config) is None:
                continue
            try:
                found = self.extract_file(file_path, config)
            except ExtractionError as e:
                if on_error is None:
                    raise
                on_error(file_path, e)
                continue
            if found:
                untracked.append(file_path)
        return untracked

    def _scan_untracked(self, path: str, config: I18nConfig, reporter: ErrorReporter) -> int:
        unreadable = []

        def report_unreadable(file_path: str, error: ExtractionError):
            unreadable.append(file_path)
            reporter.report(str(error), path=os.path.relpath(file_path))

        untracked = self.find_untracked_files(path, config, on_error=report_unreadable)
        for file_path in untracked:
            reporter.report(
                "File contains i18n calls but is not covered by any configured message path",
                path=os.path.relpath(file_path),
            )
        return len(untracked) + len(unreadable)

    async def extract_untracked_messages(self, path: str, config: I18nConfig, reporter: ErrorReporter):
        """
        Report every file under path that holds messages nobody extracts or that cannot be read.

        The scan runs on a worker thread and reports from there. It is read-only,
        so a cancelled run abandons it instead of waiting for it.

        Raises:
            UntrackedMessagesError: If at least one file was reported
        """
        reported = await anyio.to_thread.run_sync(
            self._scan_untracked, path, config, reporter, abandon_on_cancel=True
        )
        if reported:
            raise UntrackedMessagesError(f"{reported} file(s) in {path} could not be verified")
