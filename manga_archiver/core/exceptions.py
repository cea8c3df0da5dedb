from typing import Optional


class UnsupportedSourceError(Exception):
    """Custom exception for unsupported series sources."""
    pass


class FetcherError(Exception):
    """Base exception for fetcher-related errors."""
    pass


class NetworkError(FetcherError):
    """The request could not be completed or ended on a terminal HTTP status."""

    def __init__(self, url: str, status: Optional[int] = None, reason: Optional[str] = None):
        self.url = url
        self.status = status
        self.reason = reason
        message = f"network request failed for {url}"
        if status is not None:
            message += f" (HTTP {status})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class PayloadError(FetcherError):
    """The response body could not be decoded as the expected format."""

    def __init__(self, url: str, reason: Optional[str] = None):
        self.url = url
        self.reason = reason
        message = f"received invalid payload from {url}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ScrapingError(FetcherError):
    """An expected element, attribute or field is missing or malformed."""
    pass


class FilesystemError(FetcherError):
    """A directory creation, write or rename failed."""

    def __init__(self, operation: str, target: str):
        self.operation = operation
        self.target = target
        super().__init__(f"I/O operation failed: {operation} {target}")
