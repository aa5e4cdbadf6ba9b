"""
Calendar Date Utilities

All progression data is keyed by plain ISO calendar dates ("YYYY-MM-DD").
These helpers keep date handling in one place:

1. Dates are naive calendar days, no timezone conversion is ever applied
2. Zero-padded ISO strings compare lexically in chronological order
3. Only the clock provider (today_iso) looks at wall-clock time
4. Engines receive "today" as an explicit argument

PRECONDITION: parse_iso_date() expects well-formed "YYYY-MM-DD" strings and
raises ValueError otherwise. Code on an engine boundary uses
safe_parse_iso_date(), which never raises.
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from prime_officer import config

logger = logging.getLogger(__name__)

ISO_FORMAT = "%Y-%m-%d"
ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

DateLike = Union[str, date]


def parse_iso_date(date_str: str) -> date:
    """
    Parse "YYYY-MM-DD" into a calendar date

    Args:
        date_str: ISO date string

    Returns:
        date object (local midnight semantics, no timezone)

    Raises:
        ValueError: If date_str is not zero-padded YYYY-MM-DD ("2025-1-5" is rejected)
    """
    try:
        if not ISO_DATE_PATTERN.fullmatch(date_str):
            raise ValueError(date_str)
        return datetime.strptime(date_str, ISO_FORMAT).date()
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid date format '{date_str}'. Expected YYYY-MM-DD") from e


def safe_parse_iso_date(date_str: Optional[str]) -> Optional[date]:
    """Parse an ISO date, returning None instead of raising"""
    if not date_str:
        return None
    try:
        return parse_iso_date(date_str)
    except ValueError:
        logger.debug(f"Ignoring malformed date: {date_str!r}")
        return None


def to_iso_date(value: date) -> str:
    """Format a date as YYYY-MM-DD"""
    return value.strftime(ISO_FORMAT)


def _as_date(value: DateLike) -> date:
    if isinstance(value, date):
        return value
    return parse_iso_date(value)


def compare_date_strings(a: str, b: str) -> int:
    """
    Compare two ISO date strings

    Returns:
        negative if a < b, zero if equal, positive if a > b
    """
    if a == b:
        return 0
    return -1 if a < b else 1


def add_days(value: DateLike, days: int) -> str:
    """
    Add (or subtract, with negative days) calendar days

    Returns:
        ISO date string
    """
    return to_iso_date(_as_date(value) + timedelta(days=days))


def diff_days(start: DateLike, end: DateLike) -> int:
    """Signed number of days from start to end"""
    return (_as_date(end) - _as_date(start)).days


def diff_days_inclusive(start: DateLike, end: DateLike) -> int:
    """
    Number of calendar days in [start, end], both ends counted

    Returns:
        0 if end is before start
    """
    delta = diff_days(start, end)
    if delta < 0:
        return 0
    return delta + 1


def is_date_in_range(
    date_str: str,
    from_date: Optional[DateLike] = None,
    to_date: Optional[DateLike] = None
) -> bool:
    """
    Check if an ISO date lies within [from_date, to_date]

    Missing bounds are open. Malformed dates are never in range.
    """
    parsed = safe_parse_iso_date(date_str)
    if parsed is None:
        return False
    if from_date is not None and parsed < _as_date(from_date):
        return False
    if to_date is not None and parsed > _as_date(to_date):
        return False
    return True


def today_iso(tz_name: Optional[str] = None) -> str:
    """
    Clock provider: today's date in the configured timezone

    Args:
        tz_name: IANA timezone, defaults to config.TIMEZONE

    Returns:
        Today's date as YYYY-MM-DD
    """
    tz_name = tz_name or config.TIMEZONE
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.error(f"Invalid timezone '{tz_name}': {e}")
        tz = ZoneInfo("UTC")
    return to_iso_date(datetime.now(tz).date())
