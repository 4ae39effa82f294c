"""Domain models - pure Python dataclasses representing payout cycles and records"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

DateLike = Union[str, date, None]


class PaymentFrequency(str, Enum):
    """How often a professional is paid out"""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"

    @classmethod
    def coerce(cls, value: Any) -> "PaymentFrequency":
        """Unknown or missing frequencies fall back to monthly"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.MONTHLY


class RecordStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


# camelCase keys used by the record store -> dataclass field names
_RECORD_FIELDS = {
    "status": "status",
    "cycleStart": "cycle_start",
    "cycleEnd": "cycle_end",
    "scheduledPaymentDate": "scheduled_payment_date",
    "actualPaymentDate": "actual_payment_date",
    "lastPaymentDate": "last_payment_date",
    "nextCycleStart": "next_cycle_start",
    "nextCycleEnd": "next_cycle_end",
    "paymentMethod": "payment_method",
    "note": "note",
}


@dataclass(frozen=True)
class PayoutRecord:
    """
    Historical payout record as stored under its period key.

    Date fields keep whatever the store handed over (ISO strings, dates or
    garbage); they are only interpreted through normalize_date.
    """

    status: str = RecordStatus.PENDING.value
    cycle_start: DateLike = None
    cycle_end: DateLike = None
    scheduled_payment_date: DateLike = None
    actual_payment_date: DateLike = None
    last_payment_date: DateLike = None
    next_cycle_start: DateLike = None
    next_cycle_end: DateLike = None
    payment_method: Optional[str] = None
    note: Optional[str] = None

    @property
    def is_paid(self) -> bool:
        return self.status == RecordStatus.PAID.value

    @property
    def is_pending(self) -> bool:
        return self.status == RecordStatus.PENDING.value

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PayoutRecord":
        """Build from a store document, accepting camelCase or snake_case keys"""
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = _RECORD_FIELDS.get(key, key)
            if name in cls.__dataclass_fields__:
                values[name] = value
        status = values.get("status")
        if isinstance(status, RecordStatus):
            values["status"] = status.value
        elif status is None:
            values.pop("status", None)
        return cls(**values)

    def to_mapping(self) -> Dict[str, Any]:
        """camelCase document with unset fields dropped"""
        return {
            camel: getattr(self, name)
            for camel, name in _RECORD_FIELDS.items()
            if getattr(self, name) is not None
        }


@dataclass(frozen=True)
class KeyedRecord:
    """A record together with the key it is stored under"""

    period_key: str
    record: PayoutRecord


@dataclass(frozen=True)
class PaymentPeriod:
    """Inclusive billing window"""

    start: date
    end: date
    label: str
    period_key: str

    @property
    def length_days(self) -> int:
        return (self.end - self.start).days + 1


@dataclass(frozen=True)
class CalendarConfig:
    """Payout settings of a calendar"""

    payment_type: PaymentFrequency = PaymentFrequency.MONTHLY
    payment_day: Optional[int] = None
    payment_method: str = "transfer"

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "CalendarConfig":
        data = data or {}
        payment_day = data.get("paymentDay", data.get("payment_day"))
        # bool is an int subclass but never a valid day
        if not isinstance(payment_day, int) or isinstance(payment_day, bool):
            payment_day = None
        return cls(
            payment_type=PaymentFrequency.coerce(data.get("paymentType", data.get("payment_type"))),
            payment_day=payment_day,
            payment_method=data.get("paymentMethod", data.get("payment_method")) or "transfer",
        )


@dataclass(frozen=True)
class CurrentCycle:
    """Output of the current-cycle resolution"""

    period: PaymentPeriod
    record_key: str
    interval_days: int
    governing_record: Optional[PayoutRecord]
    latest_record: Optional[KeyedRecord]
    latest_paid_record: Optional[KeyedRecord]
    start_source: str


@dataclass(frozen=True)
class PaymentContext:
    """Everything a scheduling UI or downstream service needs about the payout cycle"""

    frequency: PaymentFrequency
    anchor_day: Optional[int]
    preferred_method: str
    current_period: PaymentPeriod
    next_period: PaymentPeriod
    interval_days: int
    next_cycle_start: date
    next_cycle_end: date
    governing_record: Optional[PayoutRecord]
    latest_record: Optional[KeyedRecord]
    latest_paid_record: Optional[KeyedRecord]
    all_records: Mapping[str, PayoutRecord] = field(default_factory=dict)
    start_source: str = "none"


@dataclass(frozen=True)
class SchedulePeriod:
    """A period annotated with the state of its stored record"""

    period: PaymentPeriod
    status: str
    scheduled_payment_date: Optional[date]
    actual_payment_date: Optional[date]


@dataclass(frozen=True)
class ScheduleSummary:
    current: SchedulePeriod
    next: SchedulePeriod
    previous: Optional[SchedulePeriod]
    context: PaymentContext


@dataclass(frozen=True)
class Settlement:
    """Record updates produced by marking a period as paid"""

    period_key: str
    paid_record: PayoutRecord
    next_period_key: str
    next_record: PayoutRecord
