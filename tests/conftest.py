"""
Shared pytest fixtures for twist-mcp tests.

The recording client double lives in tests/helpers.py; these fixtures wire
it up and keep retry backoff from actually sleeping.
"""

from typing import Generator
from unittest.mock import AsyncMock, patch

import pytest

from adapters.services import clear_client_cache
from tests.helpers import FakeTwistClient


@pytest.fixture(autouse=True)
def no_backoff_sleep() -> Generator[AsyncMock, None, None]:
    """Retry backoff returns immediately; tests can assert on the waits."""
    with patch("retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        yield mock_sleep


@pytest.fixture(autouse=True)
def fresh_client_cache() -> Generator[None, None, None]:
    """Each test builds its own cached client."""
    clear_client_cache()
    yield
    clear_client_cache()


@pytest.fixture
def fake_client() -> FakeTwistClient:
    """Empty recording client; tests fill in responses/failures."""
    return FakeTwistClient()
