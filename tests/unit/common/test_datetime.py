"""Tests for common.datetime module."""

from datetime import datetime, timedelta, timezone

from common.datetime import epoch_ms, parse_timestamp


class TestParseTimestamp:
    def test_rfc822_date(self) -> None:
        result = parse_timestamp("Mon, 01 Jan 2024 12:00:00 GMT")
        assert result == datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_us_timezone_abbreviation(self) -> None:
        result = parse_timestamp("Mon, 01 Jan 2024 12:00:00 EST")
        assert result == datetime(2024, 1, 1, 17, 0, 0, tzinfo=timezone.utc)

    def test_iso_with_offset(self) -> None:
        result = parse_timestamp("2024-01-01T12:00:00+02:00")
        assert result.utcoffset() == timedelta(hours=2)

    def test_naive_assumed_utc(self) -> None:
        result = parse_timestamp("2024-01-01 12:00:00")
        assert result.tzinfo == timezone.utc

    def test_garbage_returns_none(self) -> None:
        assert parse_timestamp("not a date at all") is None

    def test_empty_returns_none(self) -> None:
        assert parse_timestamp("") is None
        assert parse_timestamp(None) is None


class TestEpochMs:
    def test_missing_is_zero(self) -> None:
        assert epoch_ms(None) == 0

    def test_epoch(self) -> None:
        assert epoch_ms(datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)) == 1000

    def test_naive_treated_as_utc(self) -> None:
        assert epoch_ms(datetime(1970, 1, 1, 0, 0, 1)) == 1000
