"""Date and time parsing utilities."""

from datetime import date, datetime, timedelta, UTC
from typing import Optional
import re

from dateutil import parser as date_parser

# DD-MM-YYYY or DD/MM/YYYY
_DAY_MONTH_YEAR = re.compile(r"\b(\d{1,2})[-/](\d{1,2})[-/](\d{4})\b")

# YYYY-MM-DD
_YEAR_MONTH_DAY = re.compile(r"\b(\d{4})[-/](\d{1,2})[-/](\d{1,2})\b")

# DD-MM-YY or DD/MM/YY
_DAY_MONTH_SHORT_YEAR = re.compile(r"\b(\d{1,2})[-/](\d{1,2})[-/](\d{2})\b")

# "15-Dec-2024", "15th Jan", "17-DEC-24", "3 March 2025"
_DAY_MONTH_NAME = re.compile(
    r"\b(\d{1,2})(?:st|nd|rd|th)?[-\s]+"
    r"(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?|"
    r"sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
    r"(?:[-\s,]+(\d{4}|\d{2}))?\b",
    re.IGNORECASE,
)

_RELATIVE_DATE = re.compile(r"\b(today|yesterday|tomorrow)\b", re.IGNORECASE)

# HH:MM, HH:MM:SS, with optional AM/PM
_TIME = re.compile(r"\b(\d{1,2}):(\d{2})(?::(\d{2}))?(?:\s*([ap])\.?m\.?)?(?![\w:])", re.IGNORECASE)

_RELATIVE_OFFSETS = {
    "today": timedelta(days=0),
    "yesterday": timedelta(days=-1),
    "tomorrow": timedelta(days=1),
}


def _expand_year(year: int) -> int:
    """Two-digit years: 00-50 map to 2000-2050, 51-99 to 1951-1999."""
    if year >= 100:
        return year
    return 2000 + year if year <= 50 else 1900 + year


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _first_valid(pattern: re.Pattern[str], text: str, order: tuple[int, int, int]) -> Optional[date]:
    """Return the first match of ``pattern`` that forms a real calendar date.

    ``order`` gives the group numbers holding (year, month, day).
    """
    year_group, month_group, day_group = order
    for match in pattern.finditer(text):
        found = _safe_date(
            _expand_year(int(match.group(year_group))),
            int(match.group(month_group)),
            int(match.group(day_group)),
        )
        if found is not None:
            return found
    return None


def _month_name_date(text: str, fallback: datetime) -> Optional[date]:
    for match in _DAY_MONTH_NAME.finditer(text):
        day, month_name, year_str = match.groups()
        year = _expand_year(int(year_str)) if year_str else fallback.year
        try:
            return date_parser.parse(f"{int(day)} {month_name} {year}", dayfirst=True).date()
        except (ValueError, OverflowError):
            continue
    return None


def extract_date(text: str, fallback: datetime) -> str:
    """Extract the transaction date from message text as ``YYYY-MM-DD``.

    Relative words resolve against ``fallback``'s calendar date; when no date
    is present at all, ``fallback``'s date is used.
    """
    if not text or not text.strip():
        return fallback.date().isoformat()

    relative = _RELATIVE_DATE.search(text)
    if relative:
        return (fallback.date() + _RELATIVE_OFFSETS[relative.group(1).lower()]).isoformat()

    found = (
        _first_valid(_DAY_MONTH_YEAR, text, (3, 2, 1))
        or _first_valid(_YEAR_MONTH_DAY, text, (1, 2, 3))
        or _first_valid(_DAY_MONTH_SHORT_YEAR, text, (3, 2, 1))
        or _month_name_date(text, fallback)
    )
    if found is None:
        return fallback.date().isoformat()
    return found.isoformat()


def _time_from_match(match: re.Match[str]) -> Optional[str]:
    hour = int(match.group(1))
    minute = int(match.group(2))
    second = int(match.group(3)) if match.group(3) else 0
    meridiem = match.group(4)

    if meridiem:
        if not 1 <= hour <= 12:
            return None
        if meridiem.lower() == "p" and hour != 12:
            hour += 12
        elif meridiem.lower() == "a" and hour == 12:
            hour = 0

    if hour > 23 or minute > 59 or second > 59:
        return None
    return f"{hour:02d}:{minute:02d}:{second:02d}"


def extract_time(text: str, fallback: datetime) -> str:
    """Extract the transaction time as 24-hour ``HH:MM:SS``.

    Falls back to the time of day of ``fallback``.
    """
    if text and text.strip():
        for match in _TIME.finditer(text):
            found = _time_from_match(match)
            if found is not None:
                return found
    return fallback.strftime("%H:%M:%S")


def extract_date_time(text: str, fallback: datetime) -> tuple[str, str]:
    """Extract (date, time) from message text, falling back to ``fallback``."""
    return extract_date(text, fallback), extract_time(text, fallback)


def normalize_time(time_str: str) -> Optional[str]:
    """Normalize a time string to ``HH:MM:SS``, or None if it holds no time."""
    if not time_str or not time_str.strip():
        return None
    for match in _TIME.finditer(time_str):
        found = _time_from_match(match)
        if found is not None:
            return found
    return None


def parse_timestamp(value: str, now: Optional[datetime] = None) -> datetime:
    """Parse a receipt timestamp given on the command line or in a file.

    Supports "now", "today", "yesterday" and anything python-dateutil
    understands ("2024-12-15 10:30", "15 Dec 2024 10:30:05"). Relative words
    resolve against UTC now; naive results are taken as UTC downstream.

    Raises:
        ValueError: If the value cannot be parsed
    """
    value = value.strip()
    now = now or datetime.now(UTC)
    lowered = value.lower()

    if lowered == "now":
        return now
    if lowered in _RELATIVE_OFFSETS:
        return now + _RELATIVE_OFFSETS[lowered]

    try:
        return date_parser.parse(value, dayfirst=not _YEAR_MONTH_DAY.match(value))
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse timestamp '{value}': {e}")
