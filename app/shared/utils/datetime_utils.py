# app/shared/utils/datetime_utils.py

"""
Utilities for datetime operations.

This module provides helper functions for working with dates and times
in a consistent manner throughout the application, handling timezone
awareness, storage conversion and duration strings such as ``15m``.
"""

import re
from datetime import datetime, timezone, timedelta
from typing import Optional


class DateTimeUtil:
    """
    Utility class for datetime operations.

    Provides static methods for common datetime operations like:
    - Getting current UTC time
    - Converting between aware datetimes and naive UTC storage values
    - Converting JWT timestamps
    - Parsing duration strings used in configuration
    """

    # <amount><unit>, unit one of s, m, h, d (bare number means seconds)
    DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)

    _DURATION_UNITS = {
        "": "seconds",
        "s": "seconds",
        "m": "minutes",
        "h": "hours",
        "d": "days",
    }

    @staticmethod
    def utcnow() -> datetime:
        """
        Get current UTC time.

        This is a replacement for datetime.utcnow() which is deprecated in Python 3.12+.
        It returns a timezone-aware datetime object in UTC.

        Returns:
            datetime: Current UTC time with timezone info
        """
        return datetime.now(timezone.utc)

    @staticmethod
    def utcnow_naive() -> datetime:
        """
        Get current UTC time as naive datetime (without timezone).

        Useful for compatibility with columns declared without timezone.

        Returns:
            datetime: Current UTC time without timezone info
        """
        return datetime.now(timezone.utc).replace(tzinfo=None)

    @staticmethod
    def for_storage(dt: Optional[datetime] = None) -> datetime:
        """
        Format a datetime for database storage.

        Converts to UTC and strips timezone info for consistent storage.
        If no datetime is provided, uses current time.

        Args:
            dt: Datetime to format (optional)

        Returns:
            datetime: UTC naive datetime ready for storage
        """
        if dt is None:
            dt = DateTimeUtil.utcnow()

        # Se tem timezone, converter para UTC
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc)
        else:
            # Se não tem timezone, assumir que já é UTC
            dt = dt.replace(tzinfo=timezone.utc)

        return dt.replace(tzinfo=None)

    @staticmethod
    def from_storage(dt: Optional[datetime]) -> Optional[datetime]:
        """
        Convert a stored naive UTC datetime to a timezone-aware UTC datetime.
        """
        if dt is None:
            return None
        if dt.tzinfo is not None:
            return dt.astimezone(timezone.utc)
        return dt.replace(tzinfo=timezone.utc)

    @staticmethod
    def timestamp_to_datetime(timestamp: float) -> datetime:
        """
        Convert a UTC timestamp to datetime.

        Args:
            timestamp: Unix timestamp

        Returns:
            datetime: Datetime object with UTC timezone
        """
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)

    @staticmethod
    def datetime_to_timestamp(dt: datetime) -> int:
        """
        Convert datetime to an integer UTC timestamp (JWT ``exp``/``iat`` format).

        Naive datetimes are assumed to be UTC.
        """
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return int(dt.timestamp())

    @classmethod
    def parse_duration(cls, value: str) -> timedelta:
        """
        Parse a duration string such as ``15m``, ``7d``, ``2h`` or ``3600``.

        Args:
            value: Duration string

        Returns:
            timedelta: Parsed duration

        Raises:
            ValueError: If the value is empty, malformed or zero
        """
        match = cls.DURATION_PATTERN.match(str(value or ""))
        if not match:
            raise ValueError(f"Invalid duration: {value!r} (expected e.g. '15m', '7d')")

        amount = int(match.group(1))
        unit = cls._DURATION_UNITS[match.group(2).lower()]
        if amount <= 0:
            raise ValueError(f"Duration must be positive: {value!r}")

        return timedelta(**{unit: amount})
