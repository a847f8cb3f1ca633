"""Timezone-aware clock utilities.

Every timestamp in balloon-quake is UTC-aware.  This module is the single
source of "now" so tests can monkey-patch it trivially.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def from_epoch_millis(value: float) -> datetime:
    """Convert epoch milliseconds into an aware UTC datetime.

    Raises:
        OverflowError, OSError, ValueError: If *value* is out of range.
    """
    return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and normalise aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
