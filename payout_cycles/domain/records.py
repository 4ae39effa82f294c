"""Reconciliation of sparse, unordered payout record history"""

from datetime import date
from typing import Any, Callable, Dict, Mapping, Optional

from payout_cycles.domain.models import KeyedRecord, PayoutRecord
from payout_cycles.utils.date_utils import normalize_date, to_iso

RecordCollection = Mapping[str, PayoutRecord]


def coerce_records(raw: Optional[Mapping[str, Any]]) -> Dict[str, PayoutRecord]:
    """
    Turn a store snapshot into PayoutRecord values.

    Entries may already be PayoutRecord instances or plain mappings; anything
    else (None, scalars) is dropped. Insertion order is preserved.
    """
    records: Dict[str, PayoutRecord] = {}
    for key, value in (raw or {}).items():
        if isinstance(value, PayoutRecord):
            records[key] = value
        elif isinstance(value, Mapping):
            records[key] = PayoutRecord.from_mapping(value)
    return records


def record_reference_date(record: Optional[PayoutRecord], period_key: str) -> Optional[date]:
    """
    The date a record is ordered by.

    First of actualPaymentDate, lastPaymentDate, scheduledPaymentDate,
    cycleEnd, cycleStart and finally the period key that normalizes.
    """
    if record is None:
        return None

    candidates = (
        record.actual_payment_date,
        record.last_payment_date,
        record.scheduled_payment_date,
        record.cycle_end,
        record.cycle_start,
        period_key,
    )
    for candidate in candidates:
        parsed = normalize_date(candidate)
        if parsed is not None:
            return parsed
    return None


def _latest(
    records: Optional[RecordCollection],
    predicate: Callable[[PayoutRecord], bool],
) -> Optional[KeyedRecord]:
    latest: Optional[KeyedRecord] = None
    latest_date: Optional[date] = None

    for period_key, record in (records or {}).items():
        if record is None or not predicate(record):
            continue
        reference = record_reference_date(record, period_key)
        if reference is None:
            continue
        # >= so that the later entry wins an exact tie
        if latest_date is None or reference >= latest_date:
            latest = KeyedRecord(period_key=period_key, record=record)
            latest_date = reference

    return latest


def latest_record(records: Optional[RecordCollection]) -> Optional[KeyedRecord]:
    """Record with the most recent reference date, any status"""
    return _latest(records, lambda record: True)


def latest_paid_record(records: Optional[RecordCollection]) -> Optional[KeyedRecord]:
    """Record with the most recent reference date among paid records"""
    return _latest(records, lambda record: record.is_paid)


def convert_period_key(old_key: str, payment_date: Any = None) -> str:
    """
    Convert a legacy month key (YYYY-MM) into a day key (YYYY-MM-DD).

    The payment date wins when it parses; otherwise the first of the keyed
    month is used. Keys already in day form, and keys that cannot be read,
    come back unchanged.
    """
    if old_key.count("-") == 2:
        return old_key

    converted = normalize_date(payment_date)
    if converted is None:
        parts = old_key.split("-")
        if len(parts) != 2 or not all(part.isdigit() for part in parts):
            return old_key
        converted = normalize_date(f"{int(parts[0]):04d}-{int(parts[1]):02d}-01")
        if converted is None:
            return old_key

    return to_iso(converted)


def migrate_period_keys(records: Optional[RecordCollection]) -> Dict[str, PayoutRecord]:
    """
    Re-key a collection onto day keys.

    Records carrying a scheduledPaymentDate are keyed by it; older records
    without one keep their key. The input mapping is not modified.
    """
    migrated: Dict[str, PayoutRecord] = {}
    for old_key, record in (records or {}).items():
        if record.scheduled_payment_date:
            new_key = convert_period_key(old_key, record.scheduled_payment_date)
        else:
            new_key = old_key
        migrated[new_key] = record
    return migrated
