# app/test/utils/test_datetime_utils.py

# Para Rodar o Script:
# pytest app/test/utils/test_datetime_utils.py -v

import pytest
from datetime import datetime, timedelta, timezone
from app.shared.utils.datetime_utils import DateTimeUtil


class TestDateTimeUtil:
    """Test suite for DateTimeUtil class."""

    def test_utcnow(self):
        """Test utcnow() method generates timezone-aware UTC time."""
        dt = DateTimeUtil.utcnow()
        assert dt.tzinfo is not None
        assert dt.tzinfo == timezone.utc

    def test_utcnow_naive(self):
        """Test utcnow_naive() method generates timezone-naive time."""
        dt = DateTimeUtil.utcnow_naive()
        assert dt.tzinfo is None

    def test_for_storage_converts_aware_to_naive_utc(self):
        """Datetimes in another offset are shifted to UTC before the tzinfo is dropped."""
        dt = datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone(timedelta(hours=-3)))
        stored = DateTimeUtil.for_storage(dt)
        assert stored.tzinfo is None
        assert stored == datetime(2024, 1, 15, 13, 0, 0)

    def test_for_storage_assumes_naive_is_utc(self):
        dt = datetime(2024, 1, 15, 10, 0, 0)
        assert DateTimeUtil.for_storage(dt) == dt

    def test_for_storage_defaults_to_now(self):
        stored = DateTimeUtil.for_storage()
        assert abs((stored - DateTimeUtil.utcnow_naive()).total_seconds()) < 2

    def test_from_storage(self):
        """Stored naive values come back as aware UTC."""
        stored = datetime(2024, 1, 15, 13, 0, 0)
        dt = DateTimeUtil.from_storage(stored)
        assert dt.tzinfo == timezone.utc
        assert dt.hour == 13
        assert DateTimeUtil.from_storage(None) is None

    def test_timestamp_round_trip(self):
        dt = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
        ts = DateTimeUtil.datetime_to_timestamp(dt)
        assert isinstance(ts, int)
        assert DateTimeUtil.timestamp_to_datetime(ts) == dt

    def test_datetime_to_timestamp_naive_is_utc(self):
        naive = datetime(2024, 1, 15, 12, 0, 0)
        aware = naive.replace(tzinfo=timezone.utc)
        assert DateTimeUtil.datetime_to_timestamp(naive) == DateTimeUtil.datetime_to_timestamp(aware)

    @pytest.mark.parametrize("value, expected", [
        ("15m", timedelta(minutes=15)),
        ("7d", timedelta(days=7)),
        ("2h", timedelta(hours=2)),
        ("30s", timedelta(seconds=30)),
        ("3600", timedelta(seconds=3600)),
        (" 10M ", timedelta(minutes=10)),
    ])
    def test_parse_duration(self, value, expected):
        assert DateTimeUtil.parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", None, "m", "15x", "1.5h", "0d", "-1m"])
    def test_parse_duration_invalid(self, value):
        with pytest.raises(ValueError):
            DateTimeUtil.parse_duration(value)
