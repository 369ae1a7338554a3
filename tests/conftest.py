from __future__ import annotations

import uuid
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, Mock, patch

import pytest

from aexchange import CancellationToken, HttpMethod, WireRequest
from aexchange.mock import MockRegistry

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make mock response delays instant."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_token_sleep() -> Generator[AsyncMock, None, None]:
    """Patch CancellationToken.sleep to make retry delays instant.

    The mock records the delay of every retry.
    """
    with patch.object(CancellationToken, "sleep", AsyncMock(return_value=None)) as mock:
        yield mock


@pytest.fixture
def mock_url() -> str:
    """Return a URL no other test registers a mock response for."""
    return f"https://mock.example.com/{uuid.uuid4().hex}"


@pytest.fixture
def registry() -> MockRegistry:
    """Create a mock registry isolated from the shared one."""
    return MockRegistry()


@pytest.fixture
def wire_request() -> WireRequest:
    """Create a GET request for testing."""
    return WireRequest(url="https://api.example.com/dogs", method=HttpMethod.GET)


@pytest.fixture
def mock_transport() -> Mock:
    """Create a mock transport for testing chain members."""
    return Mock()


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing callbacks."""
    return Mock()
