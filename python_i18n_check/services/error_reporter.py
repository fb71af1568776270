"""
Error reporter shared by every sub-task of a check run.
"""
import threading
from typing import List, Optional, Tuple

from ..models.messages import ReportedError


class ErrorReporter:
    """Append-only collector of errors found while the stages run.

    Access is guarded by a lock because the untracked message scan reports
    from worker threads.
    """

    def __init__(self):
        self._errors: List[ReportedError] = []
        self._lock = threading.Lock()

    def report(self, message: str, path: Optional[str] = None) -> ReportedError:
        """Record an error and return the stored entry."""
        entry = ReportedError(message=message, path=path)
        with self._lock:
            self._errors.append(entry)
        return entry

    @property
    def errors(self) -> Tuple[ReportedError, ...]:
        """Snapshot of the recorded errors, in report order."""
        with self._lock:
            return tuple(self._errors)

    def __len__(self) -> int:
        with self._lock:
            return len(self._errors)

    def format(self) -> str:
        """Join every recorded error into one message."""
        return "\n\n".join(str(error) for error in self.errors)
