"""Admin-side flows for testing and saving an Emby configuration.

These are the operations behind an admin settings form: validate what the
user entered, prove it works against the server, and hand the resulting
configuration (including a freshly obtained user id and token) to a
persistence callable. How and where the blob is stored is up to the caller.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import httpx

from .client import EmbyClient
from .exceptions import EmbyAuthenticationError, EmbyConfigurationError
from .models import EmbyConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminResult:
    """Outcome of an admin action, ready to show to the user."""

    success: bool
    message: str


def validate_admin_config(config: EmbyConfig) -> None:
    """Check the fields an enabled configuration needs.

    Raises:
        EmbyConfigurationError: If the server URL is missing, or neither an
            API key nor a username/password pair is given
    """
    if not config.server_url:
        raise EmbyConfigurationError("Emby server URL is required")
    if not config.api_key and not (config.username and config.password):
        raise EmbyConfigurationError("Either an API key or username and password is required")


class EmbyAdminService:
    """Tests and saves Emby configurations on behalf of an admin UI.

    Attributes:
        persist: Callable that stores the configuration blob
        client_factory: Callable building an EmbyClient from an EmbyConfig

    Example:
        >>> service = EmbyAdminService(persist=store.save_emby_config)
        >>> result = service.save(EmbyConfig(server_url="http://media:8096", api_key="k"))
        >>> result.success
        True
    """

    def __init__(
        self,
        persist: Callable[[Dict[str, Any]], None],
        client_factory: Callable[[EmbyConfig], EmbyClient] = EmbyClient,
    ):
        self.persist = persist
        self.client_factory = client_factory

    def _verify(self, client: EmbyClient) -> Optional[AdminResult]:
        """Log in if needed and check the server is reachable. Returns a failure or None."""
        if not client.session.api_key:
            try:
                client.login()
            except (EmbyAuthenticationError, httpx.HTTPError) as e:
                logger.warning(f"Emby authentication failed during admin check: {e}")
                return AdminResult(False, f"Emby authentication failed: {e}")

        if not client.check_connectivity():
            return AdminResult(
                False, "Emby connection failed, check the server URL and credentials"
            )
        return None

    def test_connection(self, config: EmbyConfig) -> AdminResult:
        """Check that a configuration can log in and reach the server.

        Raises:
            EmbyConfigurationError: If required fields are missing
        """
        validate_admin_config(config)

        with self.client_factory(config) as client:
            failure = self._verify(client)

        if failure:
            return failure
        logger.info(f"Emby connection test succeeded for {config.server_url}")
        return AdminResult(True, "Emby connection test succeeded")

    def save(
        self,
        config: EmbyConfig,
        enabled: bool = True,
        libraries: Optional[List[Any]] = None,
    ) -> AdminResult:
        """Validate, verify and persist a configuration.

        A disabled configuration is stored as entered without contacting the
        server. An enabled one is only stored once login and the
        connectivity check succeed, together with the resolved user id and
        token.

        Args:
            config: Configuration entered by the admin
            enabled: Whether the Emby integration is switched on
            libraries: Library selection to store alongside the config

        Returns:
            AdminResult describing what happened

        Raises:
            EmbyConfigurationError: If an enabled config misses required fields
        """
        libraries = libraries or []

        if not enabled:
            blob = {**config.to_dict(), "Enabled": False, "Libraries": libraries}
            self.persist(blob)
            logger.info("Saved disabled Emby configuration")
            return AdminResult(True, "Emby configuration saved (disabled)")

        validate_admin_config(config)

        with self.client_factory(config) as client:
            failure = self._verify(client)
            if failure:
                return failure
            resolved = client.export_config()

        blob = {
            **resolved.to_dict(),
            "Enabled": True,
            "Libraries": libraries,
            "LastSyncTime": int(time.time() * 1000),
        }
        self.persist(blob)
        logger.info(f"Saved Emby configuration for {config.server_url}")
        return AdminResult(True, "Emby configuration saved and verified")
