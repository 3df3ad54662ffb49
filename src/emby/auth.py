"""Emby login exchange and the authentication gate.

Authentication Flow:
    1. POST form-encoded ``Username``/``Pw`` to ``/Users/AuthenticateByName``
       with the ``X-Emby-Authorization`` client identification header
    2. Read ``AccessToken`` and ``User.Id`` from the JSON response
    3. Store both on the session

Example:
    >>> session = resolve_session(config)
    >>> authenticator = SessionAuthenticator(session, httpx.Client(), config)
    >>> authenticator.ensure_authenticated()
    >>> session.token is not None
    True
"""

import logging
import threading

import httpx

from .exceptions import EmbyAuthenticationError, EmbyConfigurationError
from .models import EmbyConfig, LoginResult
from .session import ApiKeyCredential, Session, TokenCredential

logger = logging.getLogger(__name__)

LOGIN_PATH = "/Users/AuthenticateByName"


def build_authorization_header(config: EmbyConfig) -> str:
    """Build the X-Emby-Authorization header value.

    Example:
        >>> build_authorization_header(EmbyConfig(server_url="http://h"))
        'MediaBrowser Client="emby-client", Device="Web", DeviceId="emby-client-web", Version="1.0.0"'
    """
    return (
        f'MediaBrowser Client="{config.client_name}", Device="{config.device}", '
        f'DeviceId="{config.device_id}", Version="{config.client_version}"'
    )


class SessionAuthenticator:
    """Performs logins and gates authenticated calls on a usable credential.

    The check-then-login sequences run under a lock so that concurrent
    callers sharing one session trigger a single login.

    Attributes:
        session: Session updated in place on every successful login
        client: httpx.Client used for the login request
    """

    def __init__(self, session: Session, client: httpx.Client, config: EmbyConfig):
        self.session = session
        self.client = client
        self._authorization = build_authorization_header(config)
        self._lock = threading.Lock()

    def login(self, username: str, password: str) -> LoginResult:
        """Exchange username and password for an access token.

        Args:
            username: Emby username
            password: Emby password

        Returns:
            LoginResult with the new token and user id

        Raises:
            EmbyAuthenticationError: If the server rejects the login or
                returns a response without AccessToken/User.Id
            httpx.HTTPError: For network errors
        """
        url = f"{self.session.endpoint}{LOGIN_PATH}"
        logger.debug(f"Authenticating as {username} at {url}")

        response = self.client.post(
            url,
            data={"Username": username, "Pw": password},
            headers={"X-Emby-Authorization": self._authorization},
        )

        if not response.is_success:
            logger.error(f"Emby authentication failed with status {response.status_code}")
            raise EmbyAuthenticationError(response.status_code, response.text)

        try:
            data = response.json()
            result = LoginResult(token=data["AccessToken"], user_id=data["User"]["Id"])
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Malformed authentication response: {e}")
            raise EmbyAuthenticationError(response.status_code, response.text) from e

        self.session.apply_login_result(result)
        logger.info(f"Authenticated as {username} (user id {result.user_id})")
        return result

    def ensure_authenticated(self) -> None:
        """Make sure the session holds a usable credential.

        Does nothing when an API key or token is already present. Otherwise
        logs in with the configured username and password.

        Raises:
            EmbyConfigurationError: If there is no usable credential
            EmbyAuthenticationError: If the login fails
        """
        with self._lock:
            if isinstance(self.session.credential(), (ApiKeyCredential, TokenCredential)):
                return

            if not self.session.can_login:
                raise EmbyConfigurationError(
                    "No usable Emby credential: configure an API key or username and password"
                )

            logger.info("No Emby token available, logging in with username/password")
            self.login(self.session.username, self.session.password)

    def refresh(self, stale_token: str) -> None:
        """Log in again after the server rejected ``stale_token``.

        If another caller already replaced the stale token, the new one is
        reused instead of logging in a second time.
        """
        with self._lock:
            if self.session.token and self.session.token != stale_token:
                logger.debug("Token already refreshed by another caller")
                return

            logger.warning("Emby token expired, re-authenticating")
            self.login(self.session.username, self.session.password)
