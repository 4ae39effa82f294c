"""Payment period calculation from frequency, anchor day and reference date"""

from datetime import date
from typing import Any, List, Optional

from dateutil.relativedelta import relativedelta

from payout_cycles.domain.models import PaymentFrequency, PaymentPeriod
from payout_cycles.utils.date_utils import (
    add_days,
    clamp_day_of_month,
    normalize_date,
    to_iso,
    weekday_sunday_first,
)

NOMINAL_LENGTH_DAYS = {
    PaymentFrequency.DAILY: 1,
    PaymentFrequency.WEEKLY: 7,
    PaymentFrequency.BIWEEKLY: 15,
    PaymentFrequency.MONTHLY: 30,
}

DEFAULT_WEEKLY_ANCHOR = 5  # Friday
DEFAULT_MONTHLY_ANCHOR = 1


def nominal_length(frequency: PaymentFrequency) -> int:
    """Nominal period length in days for a frequency"""
    return NOMINAL_LENGTH_DAYS[PaymentFrequency.coerce(frequency)]


def normalize_anchor_day(anchor_day: Optional[int], fallback: int) -> int:
    if anchor_day is None or isinstance(anchor_day, bool):
        return fallback
    return int(anchor_day)


def format_label(start: date, end: date) -> str:
    """Short human-readable range, e.g. '01 Mar - 30 Mar 2024'"""
    if start == end:
        return start.strftime("%d %b %Y")
    return f"{start.strftime('%d %b')} - {end.strftime('%d %b %Y')}"


def make_period(start: date, end: date) -> PaymentPeriod:
    """Period whose key is derived from its start"""
    return PaymentPeriod(start=start, end=end, label=format_label(start, end), period_key=to_iso(start))


def _weekly_start(reference_date: date, anchor_day: int) -> date:
    days_since_anchor = (weekday_sunday_first(reference_date) - anchor_day) % 7
    return add_days(reference_date, -days_since_anchor)


def _day_of_month_start(reference_date: date, anchor_day: int) -> date:
    """
    Most recent occurrence of the anchor day-of-month on or before the reference date.

    The anchor is clamped to the month being considered, so an anchor of 31
    lands on Feb 28/29 and a reference of Feb 28 with anchor 31 starts that day.
    """
    current_anchor = clamp_day_of_month(anchor_day, reference_date.year, reference_date.month)
    if reference_date.day >= current_anchor:
        return reference_date.replace(day=current_anchor)

    try:
        previous_month = reference_date.replace(day=1) - relativedelta(months=1)
    except ValueError:
        # January of year 1 has no previous month
        return date.min
    previous_anchor = clamp_day_of_month(anchor_day, previous_month.year, previous_month.month)
    return previous_month.replace(day=previous_anchor)


def compute_period(
    reference_date: date,
    frequency: PaymentFrequency,
    anchor_day: Optional[int],
    override_start: Optional[date] = None,
) -> PaymentPeriod:
    """
    Compute the nominal payment period containing the reference date.

    Rules per frequency:
    - daily: the reference date alone
    - weekly: 7 days from the last anchor weekday (0=Sunday, default Friday)
    - biweekly: 15 days from the last anchor day-of-month (default 1st)
    - monthly: 30 days from the last anchor day-of-month (default 1st)

    override_start, when given, replaces the anchor-derived start for every
    frequency except daily.
    """
    frequency = PaymentFrequency.coerce(frequency)
    length = NOMINAL_LENGTH_DAYS[frequency]

    if frequency == PaymentFrequency.DAILY:
        start = reference_date
    elif override_start is not None:
        start = override_start
    elif frequency == PaymentFrequency.WEEKLY:
        start = _weekly_start(reference_date, normalize_anchor_day(anchor_day, DEFAULT_WEEKLY_ANCHOR))
    else:
        start = _day_of_month_start(reference_date, normalize_anchor_day(anchor_day, DEFAULT_MONTHLY_ANCHOR))

    return make_period(start, add_days(start, length - 1))


def is_date_in_period(value: Any, period: PaymentPeriod) -> bool:
    """True when the date falls inside the inclusive period window"""
    day = normalize_date(value)
    if day is None:
        return False
    return period.start <= day <= period.end


def periods_for_year(year: int, frequency: PaymentFrequency, anchor_day: Optional[int]) -> List[PaymentPeriod]:
    """Distinct nominal periods whose reference dates fall within the calendar year"""
    frequency = PaymentFrequency.coerce(frequency)
    if frequency == PaymentFrequency.MONTHLY:
        step = relativedelta(months=1)
    else:
        step = relativedelta(days=NOMINAL_LENGTH_DAYS[frequency])

    periods: List[PaymentPeriod] = []
    seen_keys = set()
    cursor = date(year, 1, 1)
    last_day = date(year, 12, 31)

    while cursor <= last_day:
        period = compute_period(cursor, frequency, anchor_day)
        if period.period_key not in seen_keys:
            seen_keys.add(period.period_key)
            periods.append(period)
        try:
            cursor = cursor + step
        except (ValueError, OverflowError):
            break

    return periods
