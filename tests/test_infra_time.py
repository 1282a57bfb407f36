"""Tests for time utilities."""

from datetime import datetime, timezone
from unittest.mock import patch

from hotelbook.infra.time import today, utc_now


class TestUtcNow:
    def test_returns_utc_datetime(self):
        assert utc_now().tzinfo == timezone.utc

    def test_returns_current_time(self):
        before = datetime.now(timezone.utc)
        now = utc_now()
        after = datetime.now(timezone.utc)

        assert before <= now <= after


def test_today_is_the_utc_date():
    fixed = datetime(2026, 12, 31, 23, 30, tzinfo=timezone.utc)
    with patch("hotelbook.infra.time.utc_now", return_value=fixed):
        assert today().isoformat() == "2026-12-31"
