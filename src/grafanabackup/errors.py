"""Domain errors for GrafanaBackup."""

from typing import Optional, Sequence


class BackupError(RuntimeError):
    """Raised when the backup cannot continue safely."""


class ValidationError(BackupError):
    """Raised when caller input is missing or malformed."""


class TransportError(BackupError):
    """Raised on network failure, timeout or a non-2xx response."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ListError(BackupError):
    """Raised when the search response is not a JSON array."""


class PayloadError(BackupError):
    """Raised when a dashboard payload has no `dashboard` object."""


class RunError(BackupError):
    """Terminal failure of a backup run."""

    DIRECTORY_CREATE_FAILED = "directory_create_failed"
    LIST_FAILED = "list_failed"
    ITEM_FAILED = "item_failed"

    def __init__(
        self,
        reason: str,
        message: str,
        uid: Optional[str] = None,
        cause: Optional[BaseException] = None,
        outcomes: Sequence = (),
        output_directory: Optional[str] = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.uid = uid
        self.cause = cause
        self.outcomes = tuple(outcomes)
        self.output_directory = output_directory
