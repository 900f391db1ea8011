"""
Time utility functions for GoldWatch.

Provides helpers for timestamp handling and the short labels
used on the trend chart and in the notification log.
"""

from datetime import datetime, timezone
from typing import Optional, Union

import pandas as pd


def utc_now() -> datetime:
    """Current time as a UTC-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(timestamp: Union[datetime, pd.Timestamp, str, int, float]) -> datetime:
    """
    Coerce a timestamp into a UTC-aware datetime.

    Args:
        timestamp: datetime, pandas Timestamp, ISO string or epoch milliseconds

    Returns:
        UTC-aware datetime
    """
    if isinstance(timestamp, (int, float)):
        return datetime.fromtimestamp(timestamp / 1000.0, tz=timezone.utc)
    if isinstance(timestamp, str):
        timestamp = pd.to_datetime(timestamp, utc=True)
    if isinstance(timestamp, pd.Timestamp):
        timestamp = timestamp.to_pydatetime()
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def time_label(timestamp: datetime) -> str:
    """
    Short HH:MM label in local time, as shown on the chart axis.

    Args:
        timestamp: UTC-aware (or naive, assumed UTC) datetime

    Returns:
        String like "14:05"
    """
    return ensure_utc(timestamp).astimezone().strftime("%H:%M")


def log_timestamp(timestamp: Optional[datetime] = None) -> str:
    """Local date and time for notification log entries."""
    if timestamp is None:
        timestamp = utc_now()
    return ensure_utc(timestamp).astimezone().strftime("%Y-%m-%d %H:%M:%S")


def to_iso(timestamp: Optional[datetime]) -> Optional[str]:
    """ISO-8601 string or None."""
    if timestamp is None:
        return None
    return ensure_utc(timestamp).isoformat()
