"""Tests for utils/timezone.py - UTC-everywhere time handling."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from utils.timezone import now_utc, today_utc, to_utc, parse_iso


class TestNowUtc:
    """Tests for now_utc()."""

    def test_returns_timezone_aware(self):
        assert now_utc().tzinfo is not None

    def test_is_utc(self):
        assert now_utc().tzinfo == timezone.utc


class TestTodayUtc:
    """Tests for today_utc()."""

    def test_returns_date(self):
        result = today_utc()
        assert type(result) is date

    def test_matches_utc_clock(self):
        assert today_utc() in (now_utc().date(), datetime.now(timezone.utc).date())


class TestToUtc:
    """Tests for to_utc()."""

    def test_raises_on_naive(self):
        naive = datetime(2024, 1, 1, 12, 0, 0)
        with pytest.raises(ValueError, match="naive"):
            to_utc(naive)

    def test_converts_other_timezone(self):
        """Chicago 12:00 in January should become UTC 18:00."""
        chicago = datetime(2024, 1, 1, 12, 0, 0, tzinfo=ZoneInfo("America/Chicago"))
        result = to_utc(chicago)
        assert result.tzinfo == timezone.utc
        assert result.hour == 18

    def test_date_can_roll_over(self):
        """Late evening west of UTC is already tomorrow in UTC."""
        evening = datetime(2024, 1, 1, 20, 0, 0, tzinfo=ZoneInfo("America/Chicago"))
        assert to_utc(evening).date() == date(2024, 1, 2)


class TestParseIso:
    """Tests for parse_iso()."""

    def test_handles_zulu(self):
        result = parse_iso("2024-01-01T12:00:00Z")
        assert result.tzinfo == timezone.utc
        assert result.hour == 12

    def test_handles_offset(self):
        # 12:00-06:00 = 18:00 UTC
        result = parse_iso("2024-01-01T12:00:00-06:00")
        assert result.hour == 18

    def test_raises_on_naive(self):
        with pytest.raises(ValueError, match="timezone"):
            parse_iso("2024-01-01T12:00:00")

    def test_round_trips_isoformat(self):
        original = now_utc()
        assert parse_iso(original.isoformat()) == original
