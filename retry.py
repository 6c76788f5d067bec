"""
Retry decorator with exponential backoff.

Used by adapters to handle transient API failures on reads.
"""

import asyncio
from functools import wraps
from typing import TypeVar, Callable, ParamSpec, Awaitable

import httpx

from logging_config import logger, log_retry
from models import TwistError, ErrorKind

T = TypeVar("T")
P = ParamSpec("P")


# Exceptions that should trigger retry
RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
    httpx.TransportError,  # ConnectError, ReadTimeout, RemoteProtocolError, ...
)

# HTTP status codes that should trigger retry
RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({
    429,  # Rate limited
    500,  # Internal server error
    502,  # Bad gateway
    503,  # Service unavailable
    504,  # Gateway timeout
})


def _get_http_status(exception: Exception) -> int | None:
    """
    Extract HTTP status code from exception if available.

    Works with TwistApiError, httpx.HTTPStatusError and similar.
    """
    # Check for status_code attribute (TwistApiError)
    if hasattr(exception, "status_code"):
        status = exception.status_code
        if isinstance(status, int):
            return status

    # Check for response.status_code (httpx.HTTPStatusError)
    if isinstance(exception, httpx.HTTPStatusError):
        return exception.response.status_code

    return None


def _should_retry(exception: Exception) -> bool:
    """Determine if an exception is retryable."""
    # Check if it's a known retryable exception type
    if isinstance(exception, RETRYABLE_EXCEPTIONS):
        return True

    # Check for HTTP status code
    status = _get_http_status(exception)
    if status is not None and status in RETRYABLE_STATUS_CODES:
        return True

    return False


def _convert_to_twist_error(exception: Exception) -> TwistError:
    """Convert an exception to a TwistError if not already one."""
    if isinstance(exception, TwistError):
        return exception

    # Check HTTP status first (more reliable than string matching)
    status = _get_http_status(exception)
    if status is not None:
        if status == 401:
            return TwistError(ErrorKind.AUTH_EXPIRED, str(exception))
        elif status == 403:
            return TwistError(ErrorKind.PERMISSION_DENIED, str(exception))
        elif status == 404:
            return TwistError(ErrorKind.NOT_FOUND, str(exception))
        elif status == 429:
            return TwistError(ErrorKind.RATE_LIMITED, str(exception), retryable=True)
        elif status >= 500:
            return TwistError(ErrorKind.NETWORK_ERROR, str(exception), retryable=True)

    # Fall back to exception type
    if isinstance(exception, (httpx.TimeoutException, TimeoutError)):
        return TwistError(ErrorKind.TIMEOUT, str(exception) or "Request timed out", retryable=True)
    if isinstance(exception, (httpx.TransportError, ConnectionError)):
        return TwistError(ErrorKind.NETWORK_ERROR, str(exception), retryable=True)

    return TwistError(ErrorKind.UNKNOWN, str(exception))


def with_retry(
    max_attempts: int = 3,
    delay_ms: int = 1000,
    backoff_multiplier: float = 2.0,
    convert_errors: bool = True,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Retry decorator with exponential backoff for coroutine functions.

    Only wrap reads. Mutations go through once so callers (mark-done's
    fallback in particular) see the first real failure.

    Args:
        max_attempts: Maximum number of attempts, including the first
        delay_ms: Initial delay in milliseconds
        backoff_multiplier: Multiplier for exponential backoff
        convert_errors: Convert exceptions to TwistError on final failure

    Example:
        @with_retry(max_attempts=3, delay_ms=1000)
        async def fetch(self, request: ApiRequest) -> Any:
            return await self.execute(request)
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        if not asyncio.iscoroutinefunction(func):
            raise TypeError(f"with_retry expects a coroutine function, got {func.__name__}")

        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not _should_retry(e) or attempt == max_attempts - 1:
                        # Single-shot callers (mutations) report their own failures
                        log = logger.error if max_attempts > 1 else logger.debug
                        log(f"{func.__name__} failed after {attempt + 1} attempts: {e}")
                        if convert_errors:
                            raise _convert_to_twist_error(e) from e
                        raise

                    # Exponential backoff
                    wait_ms = int(delay_ms * (backoff_multiplier ** attempt))
                    log_retry(attempt + 1, max_attempts, wait_ms, str(e))
                    await asyncio.sleep(wait_ms / 1000)

            raise AssertionError("max_attempts must be >= 1")

        return wrapper

    return decorator
