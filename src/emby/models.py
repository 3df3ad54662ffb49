"""Data models for Emby API integration."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .exceptions import EmbyConfigurationError

DEFAULT_CLIENT_NAME = "emby-client"
DEFAULT_DEVICE = "Web"
DEFAULT_DEVICE_ID = "emby-client-web"
DEFAULT_CLIENT_VERSION = "1.0.0"

# Persisted blob field name -> EmbyConfig attribute
_BLOB_FIELDS = {
    "ServerURL": "server_url",
    "ApiKey": "api_key",
    "Username": "username",
    "Password": "password",
    "UserId": "user_id",
    "AuthToken": "auth_token",
}


@dataclass
class EmbyConfig:
    """Configuration for connecting to an Emby server.

    The client treats this as input only. Fresh tokens obtained during a
    session are exposed through ``EmbyClient.export_config()``; storing them
    is the caller's job.

    Attributes:
        server_url: Base server URL (e.g., "http://media.local:8096")
        api_key: Optional long-lived API key (bypasses login entirely)
        username: Optional username for the login exchange
        password: Optional password for the login exchange
        user_id: Optional cached user id from a previous login
        auth_token: Optional cached access token from a previous login
        client_name: Client name sent in the X-Emby-Authorization header
        device: Device name sent in the X-Emby-Authorization header
        device_id: Device id sent in the X-Emby-Authorization header
        client_version: Client version sent in the X-Emby-Authorization header
        timeout: Per-request timeout in seconds
    """

    server_url: str
    api_key: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    user_id: Optional[str] = None
    auth_token: Optional[str] = None
    client_name: str = DEFAULT_CLIENT_NAME
    device: str = DEFAULT_DEVICE
    device_id: str = DEFAULT_DEVICE_ID
    client_version: str = DEFAULT_CLIENT_VERSION
    timeout: float = 30.0

    @classmethod
    def from_environment(cls) -> "EmbyConfig":
        """Load configuration from environment variables.

        Reads EMBY_SERVER_URL (required), EMBY_API_KEY, EMBY_USERNAME,
        EMBY_PASSWORD, EMBY_USER_ID, EMBY_AUTH_TOKEN and EMBY_TIMEOUT.
        Empty values are treated as unset.

        Returns:
            EmbyConfig: Loaded configuration object

        Raises:
            EmbyConfigurationError: If EMBY_SERVER_URL is missing
        """
        server_url = os.getenv("EMBY_SERVER_URL")
        if not server_url:
            raise EmbyConfigurationError(
                "Required environment variable missing: EMBY_SERVER_URL\n"
                "Example: export EMBY_SERVER_URL='http://your-server:8096'"
            )

        return cls(
            server_url=server_url,
            api_key=os.getenv("EMBY_API_KEY") or None,
            username=os.getenv("EMBY_USERNAME") or None,
            password=os.getenv("EMBY_PASSWORD") or None,
            user_id=os.getenv("EMBY_USER_ID") or None,
            auth_token=os.getenv("EMBY_AUTH_TOKEN") or None,
            timeout=float(os.getenv("EMBY_TIMEOUT") or "30"),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmbyConfig":
        """Build a config from a persisted blob (ServerURL, ApiKey, ...)."""
        values = {attr: data.get(key) or None for key, attr in _BLOB_FIELDS.items()}
        values["server_url"] = data.get("ServerURL") or ""
        return cls(**values)

    def to_dict(self) -> Dict[str, str]:
        """Convert to the persisted blob form, omitting unset fields."""
        blob = {}
        for key, attr in _BLOB_FIELDS.items():
            value = getattr(self, attr)
            if value:
                blob[key] = value
        return blob


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful AuthenticateByName exchange."""

    token: str
    user_id: str


@dataclass
class ItemsQuery:
    """Filters for the user-scoped item listing.

    Attributes map one-to-one onto Emby query parameters; unset attributes
    are not sent.
    """

    parent_id: Optional[str] = None
    include_item_types: Optional[str] = None
    recursive: Optional[bool] = None
    fields: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    start_index: Optional[int] = None
    limit: Optional[int] = None
    search_term: Optional[str] = None

    def to_params(self) -> Dict[str, str]:
        """Convert to Emby query parameters.

        Example:
            >>> ItemsQuery(parent_id="abc", recursive=True, limit=20).to_params()
            {'ParentId': 'abc', 'Recursive': 'true', 'Limit': '20'}
        """
        params: Dict[str, str] = {}
        if self.parent_id:
            params["ParentId"] = self.parent_id
        if self.include_item_types:
            params["IncludeItemTypes"] = self.include_item_types
        if self.recursive is not None:
            params["Recursive"] = "true" if self.recursive else "false"
        if self.fields:
            params["Fields"] = self.fields
        if self.sort_by:
            params["SortBy"] = self.sort_by
        if self.sort_order:
            params["SortOrder"] = self.sort_order
        if self.start_index is not None:
            params["StartIndex"] = str(self.start_index)
        if self.limit is not None:
            params["Limit"] = str(self.limit)
        if self.search_term:
            params["searchTerm"] = self.search_term
        return params


@dataclass
class EmbyItemsResult:
    """Page of items from the user-scoped listing.

    Attributes:
        items: Raw item payloads as returned by the server
        total_record_count: Total matching items on the server
    """

    items: List[Dict[str, Any]] = field(default_factory=list)
    total_record_count: int = 0


@dataclass(frozen=True)
class Subtitle:
    """A playable subtitle track for an item."""

    url: str
    language: str
    label: str
