"""Payment context assembly - current cycle plus its successor"""

from datetime import date
from typing import Any, Mapping, Optional, Union

from payout_cycles.domain.cycles import build_current_cycle
from payout_cycles.domain.exceptions import InvalidReferenceDateError
from payout_cycles.domain.models import CalendarConfig, CurrentCycle, PaymentContext
from payout_cycles.domain.periods import make_period
from payout_cycles.domain.records import coerce_records
from payout_cycles.utils.date_utils import add_days, normalize_date


def _next_cycle_start(cycle: CurrentCycle) -> date:
    governing = cycle.governing_record

    if governing is not None:
        declared = normalize_date(governing.next_cycle_start)
        if declared is not None:
            return declared
        if governing.is_paid:
            paid_end = normalize_date(governing.cycle_end)
            if paid_end is not None:
                return add_days(paid_end, 1)

    latest_paid = cycle.latest_paid_record
    if latest_paid is not None and latest_paid.period_key == cycle.record_key:
        declared = normalize_date(latest_paid.record.next_cycle_start)
        if declared is not None:
            return declared

    return add_days(cycle.period.end, 1)


def _next_cycle_end(cycle: CurrentCycle, next_start: date) -> date:
    if cycle.governing_record is not None:
        declared = normalize_date(cycle.governing_record.next_cycle_end)
        if declared is not None and declared >= next_start:
            return declared
    return add_days(next_start, cycle.interval_days - 1)


def build_context(
    calendar_config: Union[CalendarConfig, Mapping[str, Any], None],
    records: Optional[Mapping[str, Any]],
    today: Any,
    allow_future_start: bool = True,
) -> PaymentContext:
    """
    Build the full payment context for a calendar.

    Args:
        calendar_config: CalendarConfig or a paymentType/paymentDay/paymentMethod mapping
        records: period key -> PayoutRecord (or raw record mapping)
        today: the caller's "now"; anything normalize_date accepts
        allow_future_start: let record-declared starts after today take effect

    Record contents never make this fail: unreadable dates are skipped and
    arithmetic past the calendar bounds saturates at date.min / date.max.

    Raises:
        InvalidReferenceDateError: today is not a readable date. This is a
            caller contract violation, not a problem with the stored records.
    """
    reference = normalize_date(today)
    if reference is None:
        raise InvalidReferenceDateError(f"Unreadable reference date: {today!r}")

    if not isinstance(calendar_config, CalendarConfig):
        calendar_config = CalendarConfig.from_mapping(calendar_config)
    all_records = coerce_records(records)

    cycle = build_current_cycle(
        reference,
        calendar_config.payment_type,
        calendar_config.payment_day,
        all_records,
        allow_future_start,
    )

    next_start = _next_cycle_start(cycle)
    next_end = _next_cycle_end(cycle, next_start)

    return PaymentContext(
        frequency=calendar_config.payment_type,
        anchor_day=calendar_config.payment_day,
        preferred_method=calendar_config.payment_method,
        current_period=cycle.period,
        next_period=make_period(next_start, next_end),
        interval_days=cycle.interval_days,
        next_cycle_start=next_start,
        next_cycle_end=next_end,
        governing_record=cycle.governing_record,
        latest_record=cycle.latest_record,
        latest_paid_record=cycle.latest_paid_record,
        all_records=all_records,
        start_source=cycle.start_source,
    )
