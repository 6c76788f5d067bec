"""
Tests for tool parameter validation.
"""

from datetime import datetime, timezone

import pytest

from models import ErrorKind, InvalidArgument
from validation import parse_date, require_text, validate_limit


class TestParseDate:
    """YYYY-MM-DD strings become midnight UTC."""

    def test_parses_to_utc_midnight(self):
        assert parse_date("2024-03-15", "sinceDate") == datetime(2024, 3, 15, tzinfo=timezone.utc)

    def test_strips_whitespace(self):
        assert parse_date(" 2024-03-15 ", "sinceDate") == datetime(2024, 3, 15, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_is_none(self, value):
        assert parse_date(value, "sinceDate") is None

    @pytest.mark.parametrize("value", ["15/03/2024", "2024-3-15", "2024-03-15T10:00", "today"])
    def test_wrong_format_rejected(self, value):
        with pytest.raises(InvalidArgument, match="sinceDate must be a date in YYYY-MM-DD format"):
            parse_date(value, "sinceDate")

    def test_impossible_date_rejected(self):
        with pytest.raises(InvalidArgument, match="not a valid date") as exc_info:
            parse_date("2024-02-30", "untilDate")
        assert exc_info.value.details == {"field": "untilDate"}
        assert exc_info.value.kind == ErrorKind.INVALID_INPUT


class TestValidateLimit:

    @pytest.mark.parametrize("limit", [1, 50, 100])
    def test_in_range(self, limit):
        assert validate_limit(limit) == limit

    @pytest.mark.parametrize("limit", [0, -1, 101])
    def test_out_of_range(self, limit):
        with pytest.raises(InvalidArgument, match="between 1 and 100"):
            validate_limit(limit)


class TestRequireText:

    def test_keeps_value(self):
        assert require_text(" hi ", "content") == " hi "

    @pytest.mark.parametrize("value", [None, "", "   \n"])
    def test_blank_rejected(self, value):
        with pytest.raises(InvalidArgument, match="content must not be empty"):
            require_text(value, "content")
