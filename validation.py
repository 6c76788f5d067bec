"""
Input validation and conversion utilities for tool parameters.

Handles:
- YYYY-MM-DD date strings → UTC datetimes
- limit bounds and required text fields

Raises InvalidArgument so server.py can report the problem before any
API call is made.
"""

import re
from datetime import datetime, timezone

from models import InvalidArgument

# =============================================================================
# PATTERNS
# =============================================================================

DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')

MIN_LIMIT = 1
MAX_LIMIT = 100


# =============================================================================
# DATES
# =============================================================================

def parse_date(value: str | None, field_name: str) -> datetime | None:
    """
    Parse a YYYY-MM-DD string as midnight UTC.

    Returns:
        datetime, or None if value is empty

    Raises:
        InvalidArgument: If value isn't a real calendar date in that format
    """
    if not value:
        return None

    value = value.strip()
    if not DATE_PATTERN.match(value):
        raise InvalidArgument(
            f"{field_name} must be a date in YYYY-MM-DD format, got {value!r}",
            {"field": field_name},
        )
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise InvalidArgument(
            f"{field_name} is not a valid date: {value!r}",
            {"field": field_name},
        ) from None
    return parsed.replace(tzinfo=timezone.utc)


# =============================================================================
# SCALARS
# =============================================================================

def validate_limit(limit: int) -> int:
    """Check limit is within 1..100."""
    if not MIN_LIMIT <= limit <= MAX_LIMIT:
        raise InvalidArgument(
            f"limit must be between {MIN_LIMIT} and {MAX_LIMIT}, got {limit}",
            {"field": "limit"},
        )
    return limit


def require_text(value: str | None, field_name: str) -> str:
    """Reject empty or whitespace-only text."""
    if not value or not value.strip():
        raise InvalidArgument(f"{field_name} must not be empty", {"field": field_name})
    return value
