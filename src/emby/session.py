"""Credential resolution and in-memory session state.

The resolver turns an ``EmbyConfig`` into a ``Session``: the endpoint is
normalized once, and the credential fields are copied so the session can be
updated by logins without touching the caller's configuration.

Credential precedence:
    1. API key (never expires from the client's point of view)
    2. Access token (assumed valid until a 401 says otherwise)
    3. Pending (username + password available, login still required)
"""

from dataclasses import dataclass
from typing import Optional, Union

from .exceptions import EmbyConfigurationError
from .models import EmbyConfig, LoginResult

API_ROOT = "/emby"


@dataclass(frozen=True)
class ApiKeyCredential:
    """Static API key credential."""

    key: str

    @property
    def token(self) -> str:
        return self.key


@dataclass(frozen=True)
class TokenCredential:
    """Access token obtained from a login."""

    token: str


@dataclass(frozen=True)
class PendingCredential:
    """No credential yet; a login is needed before authenticated calls."""

    @property
    def token(self) -> None:
        return None


Credential = Union[ApiKeyCredential, TokenCredential, PendingCredential]


def normalize_endpoint(server_url: str) -> str:
    """Normalize a server URL to the Emby API root.

    Strips one trailing slash and appends the ``/emby`` root if absent.
    Applying it twice gives the same result as applying it once.

    Args:
        server_url: Server URL as entered by the user

    Returns:
        Endpoint ending in ``/emby``

    Examples:
        >>> normalize_endpoint("http://host:8096/")
        'http://host:8096/emby'
        >>> normalize_endpoint("http://host:8096/emby")
        'http://host:8096/emby'
    """
    endpoint = server_url
    if endpoint.endswith("/"):
        endpoint = endpoint[:-1]
    if not endpoint.endswith(API_ROOT):
        endpoint += API_ROOT
    return endpoint


@dataclass
class Session:
    """Authenticated state held by one client instance.

    ``endpoint`` is fixed at construction. ``token`` and ``user_id`` change
    only through ``apply_login_result``.
    """

    endpoint: str
    api_key: Optional[str] = None
    token: Optional[str] = None
    user_id: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def credential(self) -> Credential:
        """Resolve the credential to use for the next request."""
        if self.api_key:
            return ApiKeyCredential(self.api_key)
        if self.token:
            return TokenCredential(self.token)
        return PendingCredential()

    @property
    def can_login(self) -> bool:
        return bool(self.username and self.password)

    @property
    def can_relogin(self) -> bool:
        """True when a 401 may be answered with a fresh login."""
        return self.can_login and not self.api_key

    def apply_login_result(self, result: LoginResult) -> None:
        self.token = result.token
        self.user_id = result.user_id


def resolve_session(config: EmbyConfig) -> Session:
    """Build the session for a configuration.

    No network access happens here.

    Raises:
        EmbyConfigurationError: If the server URL is missing
    """
    if not config.server_url:
        raise EmbyConfigurationError("Emby server URL is not configured")

    return Session(
        endpoint=normalize_endpoint(config.server_url),
        api_key=config.api_key or None,
        token=config.auth_token or None,
        user_id=config.user_id or None,
        username=config.username or None,
        password=config.password or None,
    )
