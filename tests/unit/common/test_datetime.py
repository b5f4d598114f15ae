"""Tests for common.datetime module."""

from datetime import datetime, timedelta, timezone

from common.datetime import ensure_utc, utc_now


class TestUtcNow:
    def test_is_timezone_aware(self) -> None:
        assert utc_now().tzinfo is timezone.utc


class TestEnsureUtc:
    def test_naive_assumed_utc(self) -> None:
        result = ensure_utc(datetime(2024, 1, 1, 12, 0, 0))
        assert result == datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_aware_converted(self) -> None:
        eastern = timezone(timedelta(hours=-5))
        result = ensure_utc(datetime(2024, 1, 1, 7, 0, 0, tzinfo=eastern))
        assert result == datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert result.tzinfo == timezone.utc
