# src/betlog/ingest/timestamps.py
# -----------------------------------------------------------------------------
# Sportsbook timestamp parsing
#
# parse_timestamp(text)      : "9 Feb 2025 @ 4:08pm" -> datetime | MalformedTimestamp
# looks_like_timestamp(text) : structural pattern test (no range validation)
# format_timestamp(dt)       : canonical text rendering (inverse of parse)
#
# Behavior
# --------
# - Month is matched on its first three letters, case-insensitive ("Sept" ok).
# - 12-hour clock: 12am -> 0, 1..11pm -> +12, everything else unchanged.
# - Failures are returned as MalformedTimestamp values, never raised and never
#   replaced by the current time.
# - Instants are naive (no timezone is present in the export).
# -----------------------------------------------------------------------------
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

_TIMESTAMP_RE = re.compile(
    r"^\s*(\d{1,2})\s+([A-Za-z]+)\s+(\d{4})\s*@\s*(\d{1,2}):(\d{2})\s*(am|pm)\s*$",
    re.IGNORECASE,
)

MONTH_ABBREVS: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)
_MONTH_INDEX = {m.lower(): i for i, m in enumerate(MONTH_ABBREVS)}


@dataclass(frozen=True)
class MalformedTimestamp:
    """Explicit failure signal for a timestamp that could not be parsed."""

    text: str
    reason: str

    def __bool__(self) -> bool:
        return False


def looks_like_timestamp(text: str | None) -> bool:
    """True when `text` has the timestamp shape; components are not range-checked."""
    if not text:
        return False
    return _TIMESTAMP_RE.match(text) is not None


def month_index(token: str) -> int | None:
    """Zero-based month index from an abbreviation/name, or None."""
    return _MONTH_INDEX.get(token[:3].lower())


def to_24_hour(hour: int, meridiem: str) -> int:
    m = meridiem.lower()
    if hour == 12 and m == "am":
        return 0
    if hour < 12 and m == "pm":
        return hour + 12
    return hour


def parse_timestamp(text: str | None) -> datetime | MalformedTimestamp:
    """
    Parse "<day> <Mon> <year> @ <hour>:<minute><am|pm>" into a naive datetime.

    Returns
    -------
    datetime on success, MalformedTimestamp (falsy) otherwise.
    """
    raw = "" if text is None else str(text)
    if not raw.strip():
        return MalformedTimestamp(raw, "empty timestamp")

    m = _TIMESTAMP_RE.match(raw)
    if not m:
        return MalformedTimestamp(raw, "does not match '<day> <Mon> <year> @ <h>:<mm><am|pm>'")

    day_s, month_s, year_s, hour_s, minute_s, meridiem = m.groups()
    mon = month_index(month_s)
    if mon is None:
        return MalformedTimestamp(raw, f"unknown month {month_s!r}")

    hour = int(hour_s)
    minute = int(minute_s)
    if not 1 <= hour <= 12:
        return MalformedTimestamp(raw, f"hour out of range: {hour}")
    if not 0 <= minute <= 59:
        return MalformedTimestamp(raw, f"minute out of range: {minute}")

    try:
        return datetime(int(year_s), mon + 1, int(day_s), to_24_hour(hour, meridiem), minute)
    except ValueError as e:
        return MalformedTimestamp(raw, str(e))


def format_timestamp(dt: datetime) -> str:
    """Render `dt` in the sportsbook format; seconds are dropped."""
    hour12 = dt.hour % 12 or 12
    meridiem = "am" if dt.hour < 12 else "pm"
    return f"{dt.day} {MONTH_ABBREVS[dt.month - 1]} {dt.year} @ {hour12}:{dt.minute:02d}{meridiem}"
