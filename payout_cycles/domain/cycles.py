"""Current payout cycle resolution - combines nominal periods with stored record history"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, List, Optional, Tuple

from payout_cycles.domain.exceptions import InvalidPeriodKeyError
from payout_cycles.domain.models import (
    CurrentCycle,
    KeyedRecord,
    PaymentFrequency,
    PaymentPeriod,
    PayoutRecord,
)
from payout_cycles.domain.periods import compute_period, format_label, nominal_length
from payout_cycles.domain.records import (
    RecordCollection,
    latest_paid_record,
    latest_record,
    record_reference_date,
)
from payout_cycles.utils.date_utils import add_days, days_between, normalize_date, shift_date, to_iso

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StartResolution:
    """Inputs shared by every cycle-start resolver"""

    today: date
    nominal_length: int
    allow_future_start: bool
    latest: Optional[KeyedRecord]
    latest_paid: Optional[KeyedRecord]


StartResolver = Callable[[StartResolution], Optional[date]]


def _accept_near_future(candidate: Optional[date], ctx: StartResolution) -> bool:
    """
    On or before today, or any date when future starts are allowed, or up to
    one nominal period ahead of today.
    """
    if candidate is None:
        return False
    if candidate <= ctx.today or ctx.allow_future_start:
        return True
    return 0 <= days_between(ctx.today, candidate) <= ctx.nominal_length


def _start_candidates(keyed: KeyedRecord) -> Iterable[Optional[date]]:
    record = keyed.record
    for value in (record.cycle_start, keyed.period_key, record.scheduled_payment_date):
        yield normalize_date(value)


def resolve_from_pending_record(ctx: StartResolution) -> Optional[date]:
    """A pending latest record pins the start of the cycle it opened"""
    if ctx.latest is None or not ctx.latest.record.is_pending:
        return None
    for candidate in _start_candidates(ctx.latest):
        if _accept_near_future(candidate, ctx):
            return candidate
    return None


def resolve_from_paid_next_cycle_start(ctx: StartResolution) -> Optional[date]:
    """The latest paid record's declared successor start"""
    if ctx.latest_paid is None:
        return None
    candidate = normalize_date(ctx.latest_paid.record.next_cycle_start)
    if _accept_near_future(candidate, ctx):
        return candidate
    return None


def resolve_from_paid_cycle_end(ctx: StartResolution) -> Optional[date]:
    """Day after the latest paid cycle closed, never in the future"""
    if ctx.latest_paid is None:
        return None
    cycle_end = normalize_date(ctx.latest_paid.record.cycle_end)
    if cycle_end is None:
        return None
    candidate = shift_date(cycle_end, 1)
    if candidate is not None and candidate <= ctx.today:
        return candidate
    return None


def resolve_from_latest_record(ctx: StartResolution) -> Optional[date]:
    """Reference date of the latest record; future dates only for in-flight cycles"""
    if ctx.latest is None:
        return None
    candidate = record_reference_date(ctx.latest.record, ctx.latest.period_key)
    if candidate is None:
        return None
    if candidate <= ctx.today or ctx.allow_future_start or ctx.latest.record.is_pending:
        return candidate
    return None


START_RESOLVERS: List[Tuple[str, StartResolver]] = [
    ("pending_record", resolve_from_pending_record),
    ("paid_next_cycle_start", resolve_from_paid_next_cycle_start),
    ("paid_cycle_end", resolve_from_paid_cycle_end),
    ("latest_record", resolve_from_latest_record),
]


def resolve_cycle_start(ctx: StartResolution) -> Tuple[Optional[date], str]:
    """Run resolvers in order; first accepted date wins"""
    for source, resolver in START_RESOLVERS:
        candidate = resolver(ctx)
        if candidate is not None:
            return candidate, source
    return None, "none"


def _governed_end(start: date, nominal_end: date, record: Optional[PayoutRecord]) -> date:
    """Closed cycles end at their declared cycleEnd, pending ones at their scheduled date"""
    if record is None:
        return nominal_end

    override = None
    if record.is_paid:
        override = normalize_date(record.cycle_end)
    if override is None:
        override = normalize_date(record.scheduled_payment_date)

    # A declared end before the start would break end >= start
    if override is None or override < start:
        return nominal_end
    return override


def build_current_cycle(
    today: date,
    frequency: PaymentFrequency,
    anchor_day: Optional[int],
    records: Optional[RecordCollection],
    allow_future_start: bool = True,
) -> CurrentCycle:
    """
    Resolve the payout cycle currently in execution.

    The nominal period may be shifted by the record history:
    1. a pending latest record's cycleStart / key / scheduledPaymentDate
    2. the latest paid record's nextCycleStart
    3. the day after the latest paid record's cycleEnd
    4. the latest record's reference date
    The record stored under the resolved start's key (the governing record)
    may then replace the end date.
    """
    frequency = PaymentFrequency.coerce(frequency)
    records = records or {}
    length = nominal_length(frequency)

    latest = latest_record(records)
    latest_paid = latest_paid_record(records)

    override_start, source = resolve_cycle_start(
        StartResolution(
            today=today,
            nominal_length=length,
            allow_future_start=allow_future_start,
            latest=latest,
            latest_paid=latest_paid,
        )
    )
    logger.debug(
        "Cycle start resolved",
        extra={"source": source, "override_start": to_iso(override_start), "frequency": frequency.value},
    )

    base = compute_period(today, frequency, anchor_day, override_start)
    record_key = to_iso(base.start)
    governing = records.get(record_key)
    end = _governed_end(base.start, base.end, governing)

    period = PaymentPeriod(
        start=base.start,
        end=end,
        label=format_label(base.start, end),
        period_key=record_key,
    )

    return CurrentCycle(
        period=period,
        record_key=record_key,
        interval_days=max(1, period.length_days),
        governing_record=governing,
        latest_record=latest,
        latest_paid_record=latest_paid,
        start_source=source,
    )


def build_period_from_record(
    key: str,
    record: Optional[PayoutRecord],
    frequency: PaymentFrequency,
    anchor_day: Optional[int],
) -> PaymentPeriod:
    """
    Period described by a stored record, keyed by the given key.

    Raises:
        InvalidPeriodKeyError: neither the key nor the record holds a usable date
    """
    record = record or PayoutRecord()
    frequency = PaymentFrequency.coerce(frequency)

    declared_start = normalize_date(record.cycle_start)
    override = declared_start
    for value in (record.next_cycle_start, record.scheduled_payment_date):
        if override is None:
            override = normalize_date(value)

    base_date = declared_start or normalize_date(key) or override or record_reference_date(record, key)
    if base_date is None:
        raise InvalidPeriodKeyError(f"No usable date for period key {key!r}")

    recalculated = compute_period(base_date, frequency, anchor_day, override)
    start = declared_start or recalculated.start

    end = normalize_date(record.cycle_end) or normalize_date(record.scheduled_payment_date) or recalculated.end
    if record.is_pending:
        end = normalize_date(record.scheduled_payment_date) or end
    if end < start:
        end = add_days(start, nominal_length(frequency) - 1)

    return PaymentPeriod(start=start, end=end, label=format_label(start, end), period_key=key)
