"""Date parsing shared by marker generation and trade formatting."""

from __future__ import annotations

import math

import pandas as pd


def parse_date(value: object) -> pd.Timestamp | None:
    """
    Parse a service date string into a UTC timestamp.

    Date-only strings and naive date-times are read as UTC; strings carrying an
    offset keep it. Returns ``None`` instead of raising when the value cannot be parsed.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    parsed = pd.to_datetime(value, utc=True, errors="coerce")
    if pd.isna(parsed):
        return None
    return pd.Timestamp(parsed)


def epoch_millis(timestamp: pd.Timestamp) -> int:
    """Return whole epoch milliseconds for a UTC timestamp."""
    return int(timestamp.value // 1_000_000)


def millis_to_seconds(millis: int) -> int:
    """Convert epoch milliseconds to seconds, truncating toward zero."""
    return math.trunc(millis / 1000)


def date_to_epoch_seconds(value: object) -> int | None:
    """Parse ``value`` and return epoch seconds, or ``None`` when it is not a date."""
    parsed = parse_date(value)
    if parsed is None:
        return None
    return millis_to_seconds(epoch_millis(parsed))
