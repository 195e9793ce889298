"""
Durations - Step Tokens, Interval Labels, Timestamps

Leaf helpers shared by every scheduling module:
- parse compact step tokens ("30s", "10m", "1d") into milliseconds
- render an interval in milliseconds as a short human label
- ISO-8601 conversion for due times
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone

from core.scheduling.constants import DAY_MS, HOUR_MS, MINUTE_MS, SECOND_MS, UNIT_MS


_DURATION_PATTERN = re.compile(r"([0-9]+)([smhd])")


class DurationParseError(ValueError):
    """A step token that is not <integer><s|m|h|d>."""


class IntervalOverflowError(ValueError):
    """A due time past the last representable date (year 9999)."""


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves toward +infinity.

    Python's round() uses banker's rounding (round(2.5) == 2), which would
    shift interval labels and millisecond values at exact halves.
    """
    return math.floor(value + 0.5)


def parse_duration(token: str) -> int:
    """
    Parse a step token into milliseconds.

    Args:
        token: Count followed by a unit, e.g. "30s", "10m", "2h", "1d"

    Returns:
        count * unit factor, in milliseconds

    Raises:
        DurationParseError: if the token does not match the pattern
    """
    if not isinstance(token, str):
        raise DurationParseError(f"Invalid time string: {token!r}")

    match = _DURATION_PATTERN.fullmatch(token)
    if match is None:
        raise DurationParseError(f"Invalid time string: {token}")

    value = int(match.group(1))
    unit = match.group(2)
    if unit not in UNIT_MS:
        raise DurationParseError(f"Unknown time unit: {unit}")

    return value * UNIT_MS[unit]


def format_interval(interval_ms: int) -> str:
    """
    Render an interval as the label shown under a rating button.

    Bands are checked top to bottom, first match wins:
        < 0        -> "overdue"
        < 1s       -> "now"
        < 1m       -> "<n>s"
        < 1h       -> "<n>m"
        < 1d       -> "<n>h"
        otherwise whole days: "1 day", "<n> days" (< 7),
        "<n> weeks" (< 30), "<n> months" (< 365), "<n> years"

    Only the single day is singular: 7 days reads "1 weeks".
    """
    if interval_ms < 0:
        return "overdue"
    if interval_ms < SECOND_MS:
        return "now"
    if interval_ms < MINUTE_MS:
        return f"{round_half_up(interval_ms / SECOND_MS)}s"
    if interval_ms < HOUR_MS:
        return f"{round_half_up(interval_ms / MINUTE_MS)}m"
    if interval_ms < DAY_MS:
        return f"{round_half_up(interval_ms / HOUR_MS)}h"

    days = round_half_up(interval_ms / DAY_MS)
    if days == 1:
        return "1 day"
    if days < 7:
        return f"{days} days"
    if days < 30:
        return f"{round_half_up(days / 7)} weeks"
    if days < 365:
        return f"{round_half_up(days / 30)} months"
    return f"{round_half_up(days / 365)} years"


# ---- Timestamps ----

def ensure_utc(timestamp: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def to_iso(timestamp: datetime) -> str:
    """
    Format a timestamp as UTC ISO-8601 with a "Z" suffix.

    Milliseconds are only written when non-zero:
    2025-01-08T12:00:00Z, 2025-01-01T00:00:30.250Z
    """
    timestamp = ensure_utc(timestamp)
    timespec = "milliseconds" if timestamp.microsecond else "seconds"
    return timestamp.replace(tzinfo=None).isoformat(timespec=timespec) + "Z"


def add_ms(timestamp: datetime, interval_ms: int) -> datetime:
    try:
        return ensure_utc(timestamp) + timedelta(milliseconds=interval_ms)
    except OverflowError as exc:
        raise IntervalOverflowError(f"Interval too large: {interval_ms} ms") from exc


def ms_between(start: datetime, end: datetime) -> int:
    """Whole milliseconds from start to end (negative if end is earlier)."""
    delta = ensure_utc(end) - ensure_utc(start)
    return round_half_up(delta / timedelta(milliseconds=1))
