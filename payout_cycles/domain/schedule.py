"""Schedule summary: previous, current and next payout periods with record state"""

from typing import Any, Mapping, Optional, Union

from payout_cycles.domain.context import build_context
from payout_cycles.domain.cycles import build_period_from_record
from payout_cycles.domain.models import (
    CalendarConfig,
    PaymentPeriod,
    PayoutRecord,
    RecordStatus,
    SchedulePeriod,
    ScheduleSummary,
)
from payout_cycles.utils.date_utils import normalize_date


def to_schedule_period(period: PaymentPeriod, record: Optional[PayoutRecord]) -> SchedulePeriod:
    """Annotate a period with its stored record (pending when there is none)"""
    if record is None:
        return SchedulePeriod(
            period=period,
            status=RecordStatus.PENDING.value,
            scheduled_payment_date=None,
            actual_payment_date=None,
        )
    return SchedulePeriod(
        period=period,
        status=record.status or RecordStatus.PENDING.value,
        scheduled_payment_date=normalize_date(record.scheduled_payment_date),
        actual_payment_date=normalize_date(record.actual_payment_date),
    )


def compute_schedule(
    calendar_config: Union[CalendarConfig, Mapping[str, Any], None],
    records: Optional[Mapping[str, Any]],
    today: Any,
    allow_future_start: bool = True,
) -> ScheduleSummary:
    """
    Summarize the payout schedule around today.

    previous is the period of the latest paid record, if any.
    """
    context = build_context(calendar_config, records, today, allow_future_start)
    all_records = context.all_records

    previous = None
    latest_paid = context.latest_paid_record
    if latest_paid is not None:
        previous_period = build_period_from_record(
            latest_paid.period_key,
            latest_paid.record,
            context.frequency,
            context.anchor_day,
        )
        previous = to_schedule_period(previous_period, all_records.get(previous_period.period_key))

    return ScheduleSummary(
        current=to_schedule_period(context.current_period, all_records.get(context.current_period.period_key)),
        next=to_schedule_period(context.next_period, all_records.get(context.next_period.period_key)),
        previous=previous,
        context=context,
    )
