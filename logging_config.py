"""
Logging configuration for twist-mcp.

Simple setup that adapters and tools can import.
Formatters should NOT log (they're pure functions).
"""

import logging
import sys

# Create logger for the package
logger = logging.getLogger("twist")


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging for twist-mcp.

    Always logs to stderr: stdout carries the MCP stdio transport.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    logger.setLevel(getattr(logging, level.upper()))

    # Only add handler if not already configured
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)

        # Concise format for MCP context
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)


# NOTE: Call configure_logging() explicitly in server.py or test setup.
# We don't auto-configure to avoid side effects on import.


# Convenience functions for common patterns
def log_api_call(method: str, path: str, **params: object) -> None:
    """Log an API call with key parameters."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items() if v is not None)
    logger.debug(f"API: {method} {path}({param_str})")


def log_api_result(path: str, result_count: int | None = None) -> None:
    """Log API result summary."""
    if result_count is not None:
        logger.debug(f"API: {path} returned {result_count} results")
    else:
        logger.debug(f"API: {path} completed")


def log_retry(attempt: int, max_attempts: int, delay_ms: int, reason: str) -> None:
    """Log a retry attempt."""
    logger.warning(
        f"Retry {attempt}/{max_attempts} in {delay_ms}ms: {reason}"
    )


def log_fallback(operation: str, item_count: int, reason: str) -> None:
    """Log a batch request falling back to one-by-one execution."""
    logger.warning(
        f"{operation}: batch of {item_count} items failed ({reason}); retrying individually"
    )
