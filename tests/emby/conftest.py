"""Shared fixtures for Emby client tests.

All HTTP calls are mocked - no real server requests are made.
"""

import httpx
import pytest
from pytest_mock import MockerFixture

from src.emby.models import EmbyConfig


@pytest.fixture
def http_client(mocker: MockerFixture):
    """Mocked httpx.Client; tests set get/post return values or side effects."""
    return mocker.MagicMock(spec=httpx.Client)


@pytest.fixture
def password_config() -> EmbyConfig:
    """Configuration with only username and password."""
    return EmbyConfig(
        server_url="http://media.example.com:8096",
        username="alice",
        password="secret",
    )


@pytest.fixture
def api_key_config() -> EmbyConfig:
    """Configuration with an API key, a cached user id and also a password."""
    return EmbyConfig(
        server_url="http://media.example.com:8096",
        api_key="static-key",
        username="alice",
        password="secret",
        user_id="user-1",
    )
