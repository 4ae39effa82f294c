"""Pydantic schemas for API request/response validation"""

from dataclasses import asdict
from datetime import date
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from payout_cycles.domain.models import (
    CalendarConfig,
    KeyedRecord,
    PaymentContext,
    PaymentFrequency,
    PaymentPeriod,
    PayoutRecord,
    SchedulePeriod,
    Settlement,
)


class CamelModel(BaseModel):
    """Accepts both camelCase aliases and field names; serializes camelCase"""

    model_config = ConfigDict(populate_by_name=True)


class CalendarConfigSchema(CamelModel):
    """Payout settings of a calendar"""

    payment_type: str = Field("monthly", alias="paymentType", description="daily | weekly | biweekly | monthly")
    payment_day: Optional[int] = Field(None, alias="paymentDay", description="Weekday (0=Sunday) or day of month")
    payment_method: Optional[str] = Field(None, alias="paymentMethod")

    def to_domain(self, default_method: str) -> CalendarConfig:
        return CalendarConfig(
            payment_type=PaymentFrequency.coerce(self.payment_type),
            payment_day=self.payment_day,
            payment_method=self.payment_method or default_method,
        )


class PayoutRecordSchema(CamelModel):
    """Stored payout record; dates are kept as the raw strings the store holds"""

    status: str = "pending"
    cycle_start: Optional[str] = Field(None, alias="cycleStart")
    cycle_end: Optional[str] = Field(None, alias="cycleEnd")
    scheduled_payment_date: Optional[str] = Field(None, alias="scheduledPaymentDate")
    actual_payment_date: Optional[str] = Field(None, alias="actualPaymentDate")
    last_payment_date: Optional[str] = Field(None, alias="lastPaymentDate")
    next_cycle_start: Optional[str] = Field(None, alias="nextCycleStart")
    next_cycle_end: Optional[str] = Field(None, alias="nextCycleEnd")
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    note: Optional[str] = None

    def to_domain(self) -> PayoutRecord:
        return PayoutRecord(**self.model_dump())

    @classmethod
    def from_domain(cls, record: PayoutRecord) -> "PayoutRecordSchema":
        values = {
            name: value.isoformat() if isinstance(value, date) else value
            for name, value in asdict(record).items()
        }
        return cls(**values)


class ContextRequest(CamelModel):
    """Request body for POST /v1/payment-context and POST /v1/schedule"""

    calendar: CalendarConfigSchema = Field(default_factory=CalendarConfigSchema)
    records: Dict[str, PayoutRecordSchema] = Field(default_factory=dict)
    today: Optional[str] = Field(None, description="Reference date, defaults to the server date")
    allow_future_start: Optional[bool] = Field(None, alias="allowFutureStart")

    def domain_records(self) -> Dict[str, PayoutRecord]:
        return {key: record.to_domain() for key, record in self.records.items()}


class SettlementRequest(ContextRequest):
    """Request body for POST /v1/settlement"""

    period_key: str = Field(..., min_length=1, alias="periodKey")
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    maintain_schedule: bool = Field(False, alias="maintainSchedule")
    note: Optional[str] = None


class PeriodSchema(CamelModel):
    start: date
    end: date
    label: str
    period_key: str = Field(..., alias="periodKey")

    @classmethod
    def from_domain(cls, period: PaymentPeriod) -> "PeriodSchema":
        return cls(start=period.start, end=period.end, label=period.label, period_key=period.period_key)


class KeyedRecordSchema(CamelModel):
    period_key: str = Field(..., alias="periodKey")
    record: PayoutRecordSchema

    @classmethod
    def from_domain(cls, keyed: Optional[KeyedRecord]) -> Optional["KeyedRecordSchema"]:
        if keyed is None:
            return None
        return cls(period_key=keyed.period_key, record=PayoutRecordSchema.from_domain(keyed.record))


class ContextResponse(CamelModel):
    """Response for POST /v1/payment-context"""

    frequency: str
    anchor_day: Optional[int] = Field(None, alias="anchorDay")
    preferred_method: str = Field(..., alias="preferredMethod")
    current_period: PeriodSchema = Field(..., alias="currentPeriod")
    next_period: PeriodSchema = Field(..., alias="nextPeriod")
    interval_days: int = Field(..., alias="intervalDays")
    next_cycle_start: date = Field(..., alias="nextCycleStart")
    next_cycle_end: date = Field(..., alias="nextCycleEnd")
    governing_record: Optional[PayoutRecordSchema] = Field(None, alias="governingRecord")
    latest_record: Optional[KeyedRecordSchema] = Field(None, alias="latestRecord")
    latest_paid_record: Optional[KeyedRecordSchema] = Field(None, alias="latestPaidRecord")
    start_source: str = Field(..., alias="startSource")
    all_records: Dict[str, PayoutRecordSchema] = Field(default_factory=dict, alias="allRecords")

    @classmethod
    def from_domain(cls, context: PaymentContext) -> "ContextResponse":
        governing = context.governing_record
        return cls(
            frequency=context.frequency.value,
            anchor_day=context.anchor_day,
            preferred_method=context.preferred_method,
            current_period=PeriodSchema.from_domain(context.current_period),
            next_period=PeriodSchema.from_domain(context.next_period),
            interval_days=context.interval_days,
            next_cycle_start=context.next_cycle_start,
            next_cycle_end=context.next_cycle_end,
            governing_record=PayoutRecordSchema.from_domain(governing) if governing else None,
            latest_record=KeyedRecordSchema.from_domain(context.latest_record),
            latest_paid_record=KeyedRecordSchema.from_domain(context.latest_paid_record),
            start_source=context.start_source,
            all_records={key: PayoutRecordSchema.from_domain(record) for key, record in context.all_records.items()},
        )


class SchedulePeriodSchema(CamelModel):
    period: PeriodSchema
    status: str
    scheduled_payment_date: Optional[date] = Field(None, alias="scheduledPaymentDate")
    actual_payment_date: Optional[date] = Field(None, alias="actualPaymentDate")

    @classmethod
    def from_domain(cls, item: Optional[SchedulePeriod]) -> Optional["SchedulePeriodSchema"]:
        if item is None:
            return None
        return cls(
            period=PeriodSchema.from_domain(item.period),
            status=item.status,
            scheduled_payment_date=item.scheduled_payment_date,
            actual_payment_date=item.actual_payment_date,
        )


class ScheduleResponse(CamelModel):
    """Response for POST /v1/schedule"""

    current: SchedulePeriodSchema
    next: SchedulePeriodSchema
    previous: Optional[SchedulePeriodSchema] = None
    interval_days: int = Field(..., alias="intervalDays")
    preferred_method: str = Field(..., alias="preferredMethod")


class SettlementResponse(CamelModel):
    """Response for POST /v1/settlement"""

    period_key: str = Field(..., alias="periodKey")
    paid_record: PayoutRecordSchema = Field(..., alias="paidRecord")
    next_period_key: str = Field(..., alias="nextPeriodKey")
    next_record: PayoutRecordSchema = Field(..., alias="nextRecord")

    @classmethod
    def from_domain(cls, settlement: Settlement) -> "SettlementResponse":
        return cls(
            period_key=settlement.period_key,
            paid_record=PayoutRecordSchema.from_domain(settlement.paid_record),
            next_period_key=settlement.next_period_key,
            next_record=PayoutRecordSchema.from_domain(settlement.next_record),
        )
