class RemoteServiceError(Exception):
    """Raised when the remote metadata service call fails."""


class RemoteNetworkError(RemoteServiceError):
    """Raised when the service cannot be reached (connection, timeout)."""


class RemoteRateLimitError(RemoteServiceError):
    """Raised when the service answers with HTTP 429."""

    def __init__(self, message: str, retry_after_seconds: int | None = None) -> None:
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds
