"""Emby API client module with session-aware authentication."""

__version__ = "1.0.0"

from .admin import AdminResult, EmbyAdminService, validate_admin_config
from .auth import SessionAuthenticator, build_authorization_header
from .client import EmbyClient
from .exceptions import (
    EmbyAuthenticationError,
    EmbyConfigurationError,
    EmbyError,
    EmbyRequestError,
)
from .models import (
    EmbyConfig,
    EmbyItemsResult,
    ItemsQuery,
    LoginResult,
    Subtitle,
)
from .session import (
    ApiKeyCredential,
    PendingCredential,
    Session,
    TokenCredential,
    normalize_endpoint,
    resolve_session,
)
from .urls import image_url, stream_url, subtitle_urls

__all__ = [
    # Client
    "EmbyClient",
    # Models
    "EmbyConfig",
    "EmbyItemsResult",
    "ItemsQuery",
    "LoginResult",
    "Subtitle",
    # Session
    "Session",
    "ApiKeyCredential",
    "TokenCredential",
    "PendingCredential",
    "normalize_endpoint",
    "resolve_session",
    # Authentication
    "SessionAuthenticator",
    "build_authorization_header",
    # URLs
    "image_url",
    "stream_url",
    "subtitle_urls",
    # Admin
    "AdminResult",
    "EmbyAdminService",
    "validate_admin_config",
    # Exceptions
    "EmbyError",
    "EmbyConfigurationError",
    "EmbyAuthenticationError",
    "EmbyRequestError",
]
