"""Settlement - record updates for marking a payout period as paid"""

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional, Union

from payout_cycles.domain.context import build_context
from payout_cycles.domain.cycles import build_period_from_record
from payout_cycles.domain.models import CalendarConfig, PayoutRecord, RecordStatus, Settlement
from payout_cycles.utils.date_utils import add_days, normalize_date, to_iso

logger = logging.getLogger(__name__)


def build_settlement(
    calendar_config: Union[CalendarConfig, Mapping[str, Any], None],
    records: Optional[Mapping[str, Any]],
    period_key: str,
    today: Any,
    payment_method: Optional[str] = None,
    maintain_schedule: bool = False,
    note: Optional[str] = None,
) -> Settlement:
    """
    Compute the paid record for a period and the pending record that opens the next one.

    Nothing is written; the caller persists both records under
    Settlement.period_key and Settlement.next_period_key.

    With maintain_schedule the next cycle keeps the boundaries of the current
    payment context. Otherwise it restarts the day after today and keeps the
    settled period's length.

    Raises:
        InvalidReferenceDateError: today is not a readable date
        InvalidPeriodKeyError: period_key is neither the current period nor a datable record
    """
    context = build_context(calendar_config, records, today, allow_future_start=maintain_schedule)
    reference = normalize_date(today)
    existing = context.all_records.get(period_key)

    if context.current_period.period_key == period_key:
        target = context.current_period
    else:
        target = build_period_from_record(period_key, existing, context.frequency, context.anchor_day)

    if maintain_schedule:
        next_start = context.next_cycle_start
        next_end = context.next_cycle_end
    else:
        next_start = add_days(reference, 1)
        next_end = add_days(next_start, max(1, target.length_days) - 1)

    method = payment_method or context.preferred_method
    cleaned_note = note.strip() if note and note.strip() else None

    paid_record = replace(
        existing or PayoutRecord(),
        status=RecordStatus.PAID.value,
        actual_payment_date=to_iso(reference),
        last_payment_date=to_iso(reference),
        scheduled_payment_date=to_iso(target.end),
        cycle_start=to_iso(target.start),
        cycle_end=to_iso(target.end),
        next_cycle_start=to_iso(next_start),
        next_cycle_end=to_iso(next_end),
        payment_method=method,
        note=cleaned_note if cleaned_note is not None else (existing.note if existing else None),
    )

    next_record = PayoutRecord(
        status=RecordStatus.PENDING.value,
        cycle_start=to_iso(next_start),
        cycle_end=to_iso(next_end),
        scheduled_payment_date=to_iso(next_end),
        payment_method=method,
    )

    logger.debug(
        "Settlement prepared",
        extra={"period_key": period_key, "next_period_key": to_iso(next_start), "maintain_schedule": maintain_schedule},
    )

    return Settlement(
        period_key=period_key,
        paid_record=paid_record,
        next_period_key=to_iso(next_start),
        next_record=next_record,
    )
