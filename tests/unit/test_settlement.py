"""Unit tests for settlement record generation"""

from datetime import date

import pytest

from payout_cycles.domain.exceptions import InvalidPeriodKeyError
from payout_cycles.domain.settlement import build_settlement


def test_settle_current_period_restarting_schedule(pending_records, march_15):
    settlement = build_settlement({"paymentType": "monthly"}, pending_records, "2024-03-10", march_15)

    paid = settlement.paid_record
    assert settlement.period_key == "2024-03-10"
    assert paid.status == "paid"
    assert paid.actual_payment_date == "2024-03-15"
    assert paid.last_payment_date == "2024-03-15"
    assert paid.cycle_start == "2024-03-10"
    assert paid.cycle_end == "2024-03-20"
    assert paid.scheduled_payment_date == "2024-03-20"
    assert paid.next_cycle_start == "2024-03-16"
    assert paid.next_cycle_end == "2024-03-26"
    assert paid.payment_method == "transfer"
    assert paid.note is None

    assert settlement.next_period_key == "2024-03-16"
    assert settlement.next_record.status == "pending"
    assert settlement.next_record.cycle_start == "2024-03-16"
    assert settlement.next_record.cycle_end == "2024-03-26"
    assert settlement.next_record.scheduled_payment_date == "2024-03-26"


def test_settle_current_period_maintaining_schedule(pending_records, march_15):
    settlement = build_settlement(
        {"paymentType": "monthly"},
        pending_records,
        "2024-03-10",
        march_15,
        maintain_schedule=True,
    )

    assert settlement.paid_record.next_cycle_start == "2024-03-21"
    assert settlement.paid_record.next_cycle_end == "2024-03-31"
    assert settlement.next_period_key == "2024-03-21"


def test_settle_older_period_uses_its_record(paid_february_records):
    settlement = build_settlement(
        {"paymentType": "monthly", "paymentDay": 1},
        paid_february_records,
        "2024-02-01",
        date(2024, 3, 5),
    )

    assert settlement.paid_record.cycle_start == "2024-02-01"
    assert settlement.paid_record.cycle_end == "2024-02-29"
    assert settlement.next_period_key == "2024-03-06"
    assert settlement.next_record.cycle_end == "2024-04-03"


def test_payment_method_precedence(pending_records, march_15):
    config = {"paymentType": "monthly", "paymentMethod": "paypal"}

    from_config = build_settlement(config, pending_records, "2024-03-10", march_15)
    explicit = build_settlement(config, pending_records, "2024-03-10", march_15, payment_method="cash")

    assert from_config.paid_record.payment_method == "paypal"
    assert explicit.paid_record.payment_method == "cash"
    assert explicit.next_record.payment_method == "cash"


def test_note_is_trimmed(pending_records, march_15):
    noted = build_settlement({}, pending_records, "2024-03-10", march_15, note="  paid in full  ")
    blank = build_settlement({}, pending_records, "2024-03-10", march_15, note="   ")

    assert noted.paid_record.note == "paid in full"
    assert blank.paid_record.note is None


def test_unknown_undatable_period_key(pending_records, march_15):
    with pytest.raises(InvalidPeriodKeyError):
        build_settlement({}, pending_records, "garbage", march_15)


def test_input_records_are_not_modified(pending_records, march_15):
    original = pending_records["2024-03-10"]
    build_settlement({}, pending_records, "2024-03-10", march_15)

    assert pending_records["2024-03-10"] is original
    assert original.status == "pending"
