"""Date manipulation utilities"""

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Any, Optional

from dateutil import parser as date_parser

ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

# Components missing from a free-form string are taken from here, never from the clock
PARSE_DEFAULT = datetime(1970, 1, 1)


def normalize_date(value: Any) -> Optional[date]:
    """
    Convert a date-like value into a plain calendar date.

    Accepts date/datetime values and strings. A strict YYYY-MM-DD string is
    read as a local calendar date; any other string goes through the generic
    dateutil parser. Anything that does not yield a valid date returns None.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    match = ISO_DATE_RE.match(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    try:
        return date_parser.parse(text, default=PARSE_DEFAULT).date()
    except (ValueError, OverflowError):
        return None


def shift_date(value: date, days: int) -> Optional[date]:
    """Offset by whole days, or None when the result leaves the calendar"""
    try:
        return value + timedelta(days=days)
    except OverflowError:
        return None


def add_days(value: date, days: int) -> date:
    """Return a new date offset by whole days, saturating at date.min / date.max"""
    shifted = shift_date(value, days)
    if shifted is None:
        return date.max if days > 0 else date.min
    return shifted


def days_between(start: date, end: date) -> int:
    """Signed number of whole days from start to end"""
    return (end - start).days


def to_iso(value: Optional[date]) -> Optional[str]:
    """Format as YYYY-MM-DD, passing None through"""
    if value is None:
        return None
    return value.strftime("%Y-%m-%d")


def clamp_day_of_month(day: int, year: int, month: int) -> int:
    """Cap a day-of-month to the last valid day of the given month (31 in February -> 28/29)"""
    last_day = calendar.monthrange(year, month)[1]
    return min(max(day, 1), last_day)


def weekday_sunday_first(value: date) -> int:
    """Day of week with 0=Sunday .. 6=Saturday"""
    return (value.weekday() + 1) % 7

