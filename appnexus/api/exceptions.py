"""Custom exceptions for the AppNexus client."""

from typing import Any, Optional


class AppNexusError(Exception):
    """Base class for client exceptions.

    Every error raised by the request-orchestration layer inherits from
    this class, so callers can catch a single type when they do not care
    about the specific failure.
    """

    def __init__(self, message: str = "AppNexus client error"):
        self.message = message
        super().__init__(message)


class CredentialError(AppNexusError):
    """Raised when authorization credentials are missing.

    Covers an empty username or password passed to ``authorize`` and a
    token refresh attempted before any credentials were stored.
    """

    def __init__(self, detail: str = "Authorization credentials are missing!"):
        self.detail = detail
        super().__init__(detail)


class RateLimitError(AppNexusError):
    """Raised when the admission mechanism itself fails.

    Exceeding a limit suspends the caller; this error only signals that
    a bucket could not grant the request at all.
    """

    def __init__(self, message: str = "Rate limiter failure", category: Optional[str] = None):
        self.category = category
        super().__init__(message)


class TransportError(AppNexusError):
    """Raised when the underlying HTTP delegate fails.

    Attributes:
        status_code: HTTP status of the failed response, if one was received
        body: Decoded response body, if available
    """

    def __init__(
        self,
        message: str = "Transport error",
        status_code: Optional[int] = None,
        body: Any = None
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)
