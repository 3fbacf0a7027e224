"""Parsing helpers for the free-form date and time strings in event listings.

Listings carry human-formatted day headers ("Saturday, January 24th 2026")
and loose show times ("8:00 pm", "[10:00pm]", "20:00").  Nothing here
raises on bad input: unparseable values come back as ``None`` and callers
decide what "unknown" means for them.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum

_ORDINAL_RE = re.compile(r"(\d{1,2})(st|nd|rd|th)\b", re.IGNORECASE)
_TIME_RE = re.compile(
    r"^\s*(\d{1,2})(?:[:.](\d{2}))?\s*(?:([ap])\.?\s*m?\.?)?",
    re.IGNORECASE,
)
_BRACKET_RE = re.compile(r"\[(.*?)\]")

# Tried in order after ordinal suffixes are stripped.
_DATE_FORMATS = (
    "%A, %B %d, %Y",   # Saturday, January 24, 2026
    "%A, %B %d %Y",    # Saturday, January 24th 2026 (ordinal stripped)
    "%Y-%m-%d",        # 2026-01-24
    "%B %d, %Y",       # January 24, 2026
)

_WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


class TimeOfDay(Enum):
    """Four-bucket split of the local day used by profiles and features."""

    MORNING = "morning"        # [6, 12)
    AFTERNOON = "afternoon"    # [12, 17)
    EVENING = "evening"        # [17, 22)
    LATE_NIGHT = "late_night"  # everything else

    @property
    def index(self) -> int:
        return _BUCKET_ORDER.index(self)

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")

    @classmethod
    def from_hour(cls, hour: int) -> TimeOfDay:
        if 6 <= hour < 12:
            return cls.MORNING
        if 12 <= hour < 17:
            return cls.AFTERNOON
        if 17 <= hour < 22:
            return cls.EVENING
        return cls.LATE_NIGHT


_BUCKET_ORDER = (
    TimeOfDay.MORNING,
    TimeOfDay.AFTERNOON,
    TimeOfDay.EVENING,
    TimeOfDay.LATE_NIGHT,
)


def parse_hour(time_str: str | None) -> int | None:
    """Return the 24-hour clock hour in a listing time string, or ``None``.

    ``"8:00 pm"`` -> 20, ``"[10:00pm]"`` -> 22, ``"12am"`` -> 0, ``"20:00"`` -> 20.
    """
    if not time_str:
        return None
    bracketed = _BRACKET_RE.search(time_str)
    text = bracketed.group(1) if bracketed else time_str
    match = _TIME_RE.match(text)
    if not match:
        return None

    hour = int(match.group(1))
    meridiem = match.group(3)
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12 + (12 if meridiem.lower() == "p" else 0)
    if not 0 <= hour <= 23:
        return None
    return hour


def time_of_day(time_str: str | None) -> TimeOfDay | None:
    """Bucket a listing time string; ``None`` when it cannot be parsed."""
    hour = parse_hour(time_str)
    if hour is None:
        return None
    return TimeOfDay.from_hour(hour)


def parse_event_date(date_str: str | None) -> date | None:
    """Parse a listing day header into a :class:`date`; ``None`` if unparseable."""
    if not date_str or not date_str.strip():
        return None
    text = _ORDINAL_RE.sub(r"\1", date_str.strip())
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def is_event_date_past(date_str: str | None, today: date) -> bool:
    """True if the event day is strictly before *today*.

    Unparseable dates are never considered past.
    """
    parsed = parse_event_date(date_str)
    if parsed is None:
        return False
    return parsed < today


def days_until(date_str: str | None, today: date) -> int | None:
    """Whole days from *today* to the event day (negative when past)."""
    parsed = parse_event_date(date_str)
    if parsed is None:
        return None
    return (parsed - today).days


def event_sort_key(date_str: str | None) -> float:
    """Timestamp of local midnight on the event day; 0 when unparseable."""
    parsed = parse_event_date(date_str)
    if parsed is None:
        return 0.0
    return datetime(parsed.year, parsed.month, parsed.day).timestamp()


def weekday_name(date_str: str | None) -> str | None:
    """English weekday name for a listing date, e.g. ``"Saturday"``."""
    parsed = parse_event_date(date_str)
    if parsed is None:
        return None
    return _WEEKDAY_NAMES[parsed.weekday()]
