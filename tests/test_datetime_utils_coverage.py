"""
DateTime Utilities Tests

Tests edge cases and conversions in datetime_utils.
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from guild_music_engine.domain.shared.datetime_utils import UtcDateTime, utcnow


class TestUtcDateTimeEdgeCases:
    """Tests for UtcDateTime construction and formatting."""

    def test_init_with_naive_datetime_raises(self):
        """Should raise ValueError when datetime has no timezone."""
        with pytest.raises(ValueError, match="timezone-aware"):
            UtcDateTime(datetime.now())

    def test_init_with_non_utc_timezone_converts(self):
        eastern = timezone(timedelta(hours=-5))
        dt = datetime(2024, 1, 15, 12, 0, 0, tzinfo=eastern)

        utc_dt = UtcDateTime(dt)

        assert utc_dt.dt.hour == 17
        assert utc_dt.dt.tzinfo == UTC

    def test_from_iso_with_z_suffix(self):
        utc_dt = UtcDateTime.from_iso("2024-01-15T12:00:00Z")

        assert (utc_dt.dt.year, utc_dt.dt.month, utc_dt.dt.day, utc_dt.dt.hour) == (2024, 1, 15, 12)

    def test_iso_round_trip(self):
        """Database rows store ``iso`` and read it back with ``from_iso``."""
        original = UtcDateTime(datetime(2024, 1, 15, 12, 0, 0, 250000, tzinfo=UTC))

        assert original.iso == "2024-01-15T12:00:00.250000+00:00"
        assert UtcDateTime.from_iso(original.iso) == original

    def test_unix_seconds_and_millis(self):
        utc_dt = UtcDateTime(datetime(2024, 1, 1, 0, 0, 0, 123000, tzinfo=UTC))

        assert utc_dt.unix_seconds == 1704067200
        assert utc_dt.unix_millis == 1704067200123

    def test_discord_timestamp_default_style(self):
        utc_dt = UtcDateTime(datetime(2024, 1, 1, tzinfo=UTC))

        assert utc_dt.discord_timestamp() == "<t:1704067200:R>"

    def test_discord_timestamp_custom_style(self):
        utc_dt = UtcDateTime(datetime(2024, 1, 1, tzinfo=UTC))

        assert utc_dt.discord_timestamp(style="d") == "<t:1704067200:d>"

    def test_now_returns_aware_datetime(self):
        assert UtcDateTime.now().dt.tzinfo == UTC

    def test_utcnow_function(self):
        dt = utcnow()

        assert dt.tzinfo == UTC
        assert isinstance(dt, datetime)
