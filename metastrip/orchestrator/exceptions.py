class UploadError(Exception):
    """Base class for errors shown to the user by the orchestrator."""


class FileValidationError(UploadError):
    """Raised when a chosen file fails local validation."""


class UnsupportedFileTypeError(FileValidationError):
    """Raised when the declared MIME type is not an accepted image type."""


class FileTooLargeError(FileValidationError):
    """Raised when the file exceeds the upload size ceiling."""


class RateLimitError(UploadError):
    """Raised when an operation is throttled locally or by the service."""

    def __init__(self, message: str, retry_after_seconds: int | None = None) -> None:
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds


class RemoteError(UploadError):
    """Raised when the remote service fails for a reason other than throttling."""


class FileSourceError(UploadError):
    """Raised when a file picker cannot deliver the chosen file."""


class DownloadError(UploadError):
    """Raised when the stripped copy cannot be saved."""
