"""
Twist API client initialization.

Shared by all tools. Reads the API token from config and builds one
TwistClient per process. Uses lru_cache so every tool shares the same
connection pool.

The client uses a 60-second timeout (TWIST_API_TIMEOUT) to prevent
indefinite hangs when the API is slow or a connection stalls.
"""

from functools import lru_cache

import config
from adapters.client import TwistClient
from models import ErrorKind, TwistError

__all__ = [
    "get_twist_client",
    "close_twist_client",
    "clear_client_cache",
]


def _get_api_key() -> str:
    """Read the API token from configuration."""
    if not config.TWIST_API_KEY:
        raise TwistError(
            ErrorKind.AUTH_EXPIRED,
            f"{config.API_KEY_ENV} is not set. Create a personal token in "
            "Twist (Settings → Integrations) and export it.",
        )
    return config.TWIST_API_KEY


@lru_cache(maxsize=1)
def get_twist_client() -> TwistClient:
    """Get the authenticated Twist API client (cached)."""
    return TwistClient(
        _get_api_key(),
        base_url=config.TWIST_API_BASE_URL,
        timeout=config.API_TIMEOUT,
    )


async def close_twist_client() -> None:
    """Close the cached client's connection pool, if one was built."""
    if get_twist_client.cache_info().currsize:
        await get_twist_client().aclose()
    clear_client_cache()


def clear_client_cache() -> None:
    """
    Clear the cached client.

    Call this after the token changes so the next call rebuilds the client.
    """
    get_twist_client.cache_clear()
