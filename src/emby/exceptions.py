"""Exception classes for the Emby API client."""

from typing import Optional


class EmbyError(Exception):
    """Base exception for all Emby client errors."""

    pass


class EmbyConfigurationError(EmbyError, ValueError):
    """A required configuration value is missing.

    Raised for a missing server URL, no usable credential, or a missing
    user id before a user-scoped call. Never retried.
    """

    pass


class EmbyAuthenticationError(EmbyError):
    """The login endpoint rejected the credentials.

    Attributes:
        status: HTTP status code returned by the login endpoint
        body: Response body text from the server
    """

    def __init__(self, status: int, body: str):
        """Initialize authentication error.

        Args:
            status: HTTP status code
            body: Server-provided message body
        """
        self.status = status
        self.body = body
        super().__init__(f"Emby authentication failed ({status}): {body}")


class EmbyRequestError(EmbyError):
    """A data operation failed after at most one retry.

    Attributes:
        label: Human-readable name of the failed operation
        status: HTTP status code of the final response
        body: Response body text of the final response
    """

    def __init__(self, label: str, status: int, body: Optional[str] = None):
        self.label = label
        self.status = status
        self.body = body or ""
        super().__init__(f"{label} ({status}): {self.body}")
