"""HTTP client for the Emby server API."""

import dataclasses
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

from .auth import SessionAuthenticator
from .exceptions import EmbyConfigurationError, EmbyRequestError
from .models import EmbyConfig, EmbyItemsResult, ItemsQuery, LoginResult, Subtitle
from .session import resolve_session
from .urls import image_url, stream_url, subtitle_urls

logger = logging.getLogger(__name__)

# (url, query params, headers) for one attempt of a request
RequestSpec = Tuple[str, Dict[str, str], Dict[str, str]]
RequestBuilder = Callable[[Optional[str], Optional[str]], RequestSpec]

MISSING_USER_ID = "Emby user id is not configured; save the Emby configuration again"

# Never logged
_SECRET_PARAMS = ("api_key", "X-Emby-Token")


class EmbyClient:
    """Synchronous HTTP client for the Emby server API.

    This client implements:
    - API key, cached token, or username/password authentication
    - Lazy login before the first authenticated call
    - A single re-login and retry when the server answers 401
    - Credentialed image, stream and subtitle URLs

    Attributes:
        config: EmbyConfig the client was built from
        session: Session holding endpoint, credential and user id
        client: httpx.Client for HTTP requests

    Example:
        >>> config = EmbyConfig(
        ...     server_url="http://media.local:8096",
        ...     username="john",
        ...     password="secret",
        ... )
        >>> with EmbyClient(config) as client:
        ...     result = client.get_items(ItemsQuery(include_item_types="Movie", recursive=True))
        ...     print(f"Found {result.total_record_count} movies")
    """

    def __init__(self, config: EmbyConfig, http_client: Optional[httpx.Client] = None):
        """Initialize Emby API client.

        Args:
            config: EmbyConfig with server URL and credentials
            http_client: Optional pre-built httpx.Client (used as-is, never closed here)

        Raises:
            EmbyConfigurationError: If the server URL is missing
        """
        self.config = config
        self.session = resolve_session(config)

        self._owns_client = http_client is None
        if http_client is None:
            transport = httpx.HTTPTransport(
                limits=httpx.Limits(
                    max_connections=20,
                    max_keepalive_connections=10,
                    keepalive_expiry=5.0,
                ),
                retries=3,  # connection failures only, never HTTP statuses
            )
            http_client = httpx.Client(
                timeout=httpx.Timeout(config.timeout, connect=10.0),
                transport=transport,
                follow_redirects=True,
            )
        self.client = http_client
        self.authenticator = SessionAuthenticator(self.session, self.client, config)

        logger.info(f"Initialized Emby client for {self.session.endpoint}")

    def _send(self, spec: RequestSpec) -> httpx.Response:
        url, params, headers = spec
        logger.debug(f"GET {url} (params: {sorted(k for k in params if k not in _SECRET_PARAMS)})")
        return self.client.get(url, params=params, headers=headers)

    def _request(
        self, label: str, build: RequestBuilder, require_user_id: bool = True
    ) -> Any:
        """Run an authenticated GET with the single re-login retry.

        Args:
            label: Operation name used in EmbyRequestError
            build: Callable (token, user_id) -> (url, params, headers)
            require_user_id: Fail fast when the session has no user id

        Returns:
            Parsed JSON payload

        Raises:
            EmbyConfigurationError: No usable credential or missing user id
            EmbyAuthenticationError: Login or re-login failed
            EmbyRequestError: Final response was not successful
        """
        self.authenticator.ensure_authenticated()

        if require_user_id and not self.session.user_id:
            raise EmbyConfigurationError(MISSING_USER_ID)

        token = self.session.credential().token
        response = self._send(build(token, self.session.user_id))

        if response.status_code == 401 and self.session.can_relogin:
            self.authenticator.refresh(token)
            response = self._send(
                build(self.session.credential().token, self.session.user_id)
            )

        if not response.is_success:
            logger.error(f"{label}: HTTP {response.status_code}")
            raise EmbyRequestError(label, response.status_code, response.text)

        return response.json()

    def login(
        self, username: Optional[str] = None, password: Optional[str] = None
    ) -> LoginResult:
        """Log in explicitly, defaulting to the configured credentials.

        Raises:
            EmbyConfigurationError: If no username/password is available
            EmbyAuthenticationError: If the server rejects the login
        """
        username = username or self.session.username
        password = password or self.session.password
        if not (username and password):
            raise EmbyConfigurationError("Emby username and password are required to log in")
        return self.authenticator.login(username, password)

    def get_items(self, query: Optional[ItemsQuery] = None) -> EmbyItemsResult:
        """List items visible to the session user.

        Args:
            query: Optional filters (parent, types, paging, search)

        Returns:
            EmbyItemsResult; an absent Items field yields an empty list

        Example:
            >>> result = client.get_items(ItemsQuery(parent_id="lib1", limit=50))
            >>> [item["Name"] for item in result.items]
        """
        filters = (query or ItemsQuery()).to_params()

        def build(token, user_id):
            params = dict(filters)
            if token:
                params["X-Emby-Token"] = token
            return f"{self.session.endpoint}/Users/{user_id}/Items", params, {}

        logger.debug(f"Fetching items: {filters}")
        data = self._request("Failed to list items", build)
        items = data.get("Items") or []
        total = data.get("TotalRecordCount", len(items))
        logger.info(f"Retrieved {len(items)} items (total {total})")
        return EmbyItemsResult(items=items, total_record_count=total)

    def get_item(self, item_id: str) -> Dict[str, Any]:
        """Get one item including its media sources."""

        def build(token, user_id):
            params = {"Fields": "MediaSources"}
            if token:
                params["api_key"] = token
            return f"{self.session.endpoint}/Users/{user_id}/Items/{item_id}", params, {}

        logger.debug(f"Fetching item: {item_id}")
        return self._request("Failed to get item", build)

    def get_seasons(self, series_id: str) -> List[Dict[str, Any]]:
        """List the seasons of a series."""

        def build(token, user_id):
            params = {"userId": user_id}
            if token:
                params["api_key"] = token
            return f"{self.session.endpoint}/Shows/{series_id}/Seasons", params, {}

        logger.debug(f"Fetching seasons for series {series_id}")
        data = self._request("Failed to list seasons", build)
        seasons = data.get("Items") or []
        logger.info(f"Retrieved {len(seasons)} seasons for series {series_id}")
        return seasons

    def get_episodes(
        self, series_id: str, season_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """List the episodes of a series, optionally limited to one season.

        Args:
            series_id: Series item id
            season_id: Optional season item id

        Returns:
            Episode payloads including MediaSources (empty list if none)
        """

        def build(token, user_id):
            params = {"userId": user_id, "Fields": "MediaSources"}
            if season_id:
                params["seasonId"] = season_id
            if token:
                params["api_key"] = token
            return f"{self.session.endpoint}/Shows/{series_id}/Episodes", params, {}

        logger.debug(f"Fetching episodes for series {series_id} (season={season_id})")
        data = self._request("Failed to list episodes", build)
        episodes = data.get("Items") or []
        logger.info(f"Retrieved {len(episodes)} episodes for series {series_id}")
        return episodes

    def get_current_user(self) -> Dict[str, Any]:
        """Get the user the current credential belongs to (``/Users/Me``)."""

        def build(token, user_id):
            headers = {"X-Emby-Token": token} if token else {}
            return f"{self.session.endpoint}/Users/Me", {}, headers

        return self._request("Failed to get current user", build, require_user_id=False)

    def check_connectivity(self) -> bool:
        """Check the public system info endpoint.

        Never raises: any failure, including DNS errors, refused connections
        and timeouts, is reported as False.

        Returns:
            True if the server answered with a success status
        """
        token = self.session.credential().token
        params = {"api_key": token} if token else {}
        try:
            response = self.client.get(
                f"{self.session.endpoint}/System/Info/Public", params=params
            )
        except Exception as e:
            logger.warning(f"Emby connectivity check failed: {e}")
            return False

        logger.info(f"Emby connectivity check returned HTTP {response.status_code}")
        return response.is_success

    def get_image_url(
        self, item_id: str, image_type: str = "Primary", max_width: Optional[int] = None
    ) -> str:
        return image_url(self.session, item_id, image_type, max_width)

    def get_stream_url(self, item_id: str, direct: bool = True) -> str:
        return stream_url(self.session, item_id, direct)

    def get_subtitles(self, item: Dict[str, Any]) -> List[Subtitle]:
        return subtitle_urls(self.session, item)

    def export_config(self) -> EmbyConfig:
        """Return the config updated with the session's current user id and token.

        Example:
            >>> client.get_items()
            >>> store.save(client.export_config().to_dict())
        """
        return dataclasses.replace(
            self.config,
            user_id=self.session.user_id,
            auth_token=self.session.token,
        )

    def close(self):
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self.client.close()
        logger.info("Closed Emby client")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

