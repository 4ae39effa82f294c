"""Unit tests for payment context assembly"""

from datetime import date, datetime, timedelta

import pytest

from payout_cycles.domain.context import build_context
from payout_cycles.domain.exceptions import InvalidReferenceDateError
from payout_cycles.domain.models import CalendarConfig, PaymentFrequency, PayoutRecord


def test_default_configuration_with_no_records():
    context = build_context(None, None, date(2024, 6, 15))

    assert context.frequency == PaymentFrequency.MONTHLY
    assert context.anchor_day is None
    assert context.preferred_method == "transfer"
    assert context.current_period.start == date(2024, 6, 1)
    assert context.current_period.end == date(2024, 6, 30)
    assert context.next_cycle_start == date(2024, 7, 1)
    assert context.next_cycle_end == date(2024, 7, 30)
    assert context.next_period.period_key == "2024-07-01"
    assert context.interval_days == 30
    assert context.governing_record is None
    assert context.all_records == {}


def test_daily_no_override_fallback():
    context = build_context({"paymentType": "daily"}, {}, date(2024, 6, 1))

    assert context.current_period.start == date(2024, 6, 1)
    assert context.current_period.end == date(2024, 6, 1)
    assert context.next_cycle_start == date(2024, 6, 2)
    assert context.next_cycle_end == date(2024, 6, 2)


def test_pending_record_precedence(pending_records, march_15):
    context = build_context({"paymentType": "monthly"}, pending_records, march_15)

    assert context.current_period.start == date(2024, 3, 10)
    assert context.current_period.end == date(2024, 3, 20)
    assert context.next_cycle_start == date(2024, 3, 21)
    assert context.next_cycle_end == date(2024, 3, 31)
    assert context.interval_days == 11


def test_paid_roll_forward(paid_february_records):
    context = build_context({"paymentType": "monthly", "paymentDay": 1}, paid_february_records, date(2024, 3, 5))

    assert context.current_period.start == date(2024, 3, 1)
    assert context.latest_paid_record.period_key == "2024-02-01"


def test_governing_record_declares_successor():
    records = {
        "2024-03-10": PayoutRecord(
            status="pending",
            cycle_start="2024-03-10",
            scheduled_payment_date="2024-03-20",
            next_cycle_start="2024-03-22",
            next_cycle_end="2024-04-19",
        ),
    }
    context = build_context({"paymentType": "monthly"}, records, date(2024, 3, 15))

    assert context.next_cycle_start == date(2024, 3, 22)
    assert context.next_cycle_end == date(2024, 4, 19)
    assert context.next_period.start == date(2024, 3, 22)
    assert context.next_period.end == date(2024, 4, 19)


def test_governing_paid_record_rolls_from_cycle_end():
    records = {
        "2024-03-01": PayoutRecord(
            status="paid",
            cycle_start="2024-03-01",
            cycle_end="2024-03-20",
            actual_payment_date="2024-03-21",
        ),
    }
    context = build_context({"paymentType": "monthly", "paymentDay": 1}, records, date(2024, 3, 10), allow_future_start=False)

    assert context.current_period.end == date(2024, 3, 20)
    assert context.next_cycle_start == date(2024, 3, 21)
    assert context.next_cycle_end == date(2024, 4, 9)


def test_weekly_configuration():
    config = CalendarConfig(payment_type=PaymentFrequency.WEEKLY, payment_day=5, payment_method="cash")
    context = build_context(config, {}, date(2024, 3, 13))

    assert context.current_period.start == date(2024, 3, 8)
    assert context.current_period.end == date(2024, 3, 14)
    assert context.next_cycle_start == date(2024, 3, 15)
    assert context.next_cycle_end == date(2024, 3, 21)
    assert context.preferred_method == "cash"


def test_raw_store_documents_are_accepted():
    records = {"2024-03-10": {"status": "pending", "cycleStart": "2024-03-10", "scheduledPaymentDate": "2024-03-20"}}
    context = build_context({"paymentType": "monthly"}, records, "2024-03-15")

    assert context.current_period.end == date(2024, 3, 20)
    assert context.all_records["2024-03-10"].scheduled_payment_date == "2024-03-20"


def test_today_is_normalized():
    context = build_context(None, {}, datetime(2024, 6, 15, 18, 45))
    assert context.current_period.start == date(2024, 6, 1)


def test_unreadable_today_raises():
    with pytest.raises(InvalidReferenceDateError):
        build_context(None, {}, "someday")


def test_idempotent(pending_records, paid_february_records, march_15):
    records = {**paid_february_records, **pending_records}
    snapshot = dict(records)

    first = build_context({"paymentType": "monthly", "paymentDay": 1}, records, march_15)
    second = build_context({"paymentType": "monthly", "paymentDay": 1}, records, march_15)

    assert first == second
    assert records == snapshot


@pytest.mark.parametrize("frequency", ["daily", "weekly", "biweekly", "monthly"])
def test_context_invariants(frequency, pending_records, paid_february_records):
    records = {**paid_february_records, **pending_records}
    day = date(2024, 1, 1)
    while day < date(2024, 6, 1):
        context = build_context({"paymentType": frequency, "paymentDay": 10}, records, day)

        for period in (context.current_period, context.next_period):
            assert period.end >= period.start
            assert period.period_key == period.start.isoformat()
        assert context.interval_days >= 1
        day += timedelta(days=1)


def test_paid_cycle_end_at_calendar_end_moves_to_next_rule():
    """An open-ended 9999-12-31 cycleEnd never raises"""
    records = {"2024-02-01": {"status": "paid", "cycleStart": "2024-02-01", "cycleEnd": "9999-12-31"}}

    strict = build_context({"paymentType": "monthly"}, records, date(2024, 3, 5), allow_future_start=False)
    assert strict.start_source == "none"
    assert strict.current_period.start == date(2024, 3, 1)
    assert strict.current_period.end == date(2024, 3, 30)

    loose = build_context({"paymentType": "monthly"}, records, date(2024, 3, 5))
    assert loose.start_source == "latest_record"
    assert loose.current_period.start == date(9999, 12, 31)
    assert loose.current_period.end == date.max
    assert loose.next_cycle_start == date.max
    assert loose.next_cycle_end == date.max


def test_pending_start_near_calendar_end_clamps_end():
    records = {"9999-12-20": {"status": "pending", "cycleStart": "9999-12-20"}}

    context = build_context({"paymentType": "monthly"}, records, date(2024, 3, 5))

    assert context.start_source == "pending_record"
    assert context.current_period.start == date(9999, 12, 20)
    assert context.current_period.end == date.max
    assert context.interval_days == 12
    assert context.next_period.start <= context.next_period.end == date.max


def test_weekly_at_calendar_start():
    context = build_context({"paymentType": "weekly"}, None, date(1, 1, 1))

    assert context.current_period.start == date.min
    assert context.current_period.end == date(1, 1, 7)
    assert context.next_cycle_start == date(1, 1, 8)
    assert context.next_cycle_end == date(1, 1, 14)
