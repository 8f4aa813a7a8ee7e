"""
Unit tests for the daily usage counter.
"""

import pytest
from datetime import datetime, timedelta

from docforge.usage import DailyUsageCounter, QuotaExceeded


class TestDailyUsageCounter:
    """Tests for DailyUsageCounter class."""

    def test_defaults(self):
        """Test the default limit and warning level."""
        counter = DailyUsageCounter()
        assert counter.limit == 80
        assert counter.warning_at == 60
        assert counter.used == 0

    def test_record_increments(self, usage_counter):
        """Test that record returns the running total."""
        assert usage_counter.record() == 1
        assert usage_counter.record(2) == 3
        assert usage_counter.used == 3

    def test_record_negative_raises(self, usage_counter):
        """Test that negative counts are rejected."""
        with pytest.raises(ValueError):
            usage_counter.record(-1)

    def test_remaining_never_negative(self, usage_counter):
        """Test that remaining bottoms out at zero."""
        usage_counter.record(5)
        assert usage_counter.remaining == 0

    def test_warning_and_exhausted(self, usage_counter):
        """Test the warning and exhausted flags."""
        assert not usage_counter.is_warning
        usage_counter.record(2)
        assert usage_counter.is_warning
        assert not usage_counter.is_exhausted
        usage_counter.record()
        assert usage_counter.is_exhausted

    def test_check_raises_when_exhausted(self, usage_counter):
        """Test that check fails once the limit is reached."""
        usage_counter.check()
        usage_counter.record(3)
        with pytest.raises(QuotaExceeded, match="2025-03-10"):
            usage_counter.check()

    def test_rollover_on_new_day(self, usage_counter, clock):
        """Test that the count resets when the date changes."""
        usage_counter.record(3)
        clock.now = clock.now + timedelta(days=1)

        assert usage_counter.used == 0
        assert usage_counter.record() == 1
        assert usage_counter.snapshot()["date"] == "2025-03-11"

    def test_no_rollover_within_day(self, usage_counter, clock):
        """Test that later times on the same day keep the count."""
        usage_counter.record(2)
        clock.now = datetime(2025, 3, 10, 23, 59, 59)
        assert usage_counter.used == 2

    def test_reset(self, usage_counter):
        """Test an explicit reset."""
        usage_counter.record(2)
        usage_counter.reset()
        assert usage_counter.used == 0

    def test_snapshot(self, usage_counter):
        """Test the admin-style usage summary."""
        usage_counter.record()
        assert usage_counter.snapshot() == {
            "date": "2025-03-10",
            "used": 1,
            "limit": 3,
            "remaining": 2,
            "warningAt": 2,
        }

    def test_invalid_limit(self):
        """Test that a non-positive limit is rejected."""
        with pytest.raises(ValueError):
            DailyUsageCounter(limit=0)

    def test_invalid_warning_level(self):
        """Test that the warning level must lie within the limit."""
        with pytest.raises(ValueError):
            DailyUsageCounter(limit=10, warning_at=11)
