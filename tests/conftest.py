"""Pytest fixtures for testing"""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from payout_cycles.api.main import create_app
from payout_cycles.domain.models import PayoutRecord


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def pending_records() -> dict[str, PayoutRecord]:
    """Open March cycle scheduled to close on the 20th"""
    return {
        "2024-03-10": PayoutRecord(
            status="pending",
            cycle_start="2024-03-10",
            scheduled_payment_date="2024-03-20",
        ),
    }


@pytest.fixture
def paid_february_records() -> dict[str, PayoutRecord]:
    """February cycle closed and paid, successor declared to start March 1st"""
    return {
        "2024-02-01": PayoutRecord(
            status="paid",
            cycle_start="2024-02-01",
            cycle_end="2024-02-29",
            actual_payment_date="2024-02-29",
            last_payment_date="2024-02-29",
            next_cycle_start="2024-03-01",
        ),
    }


@pytest.fixture
def march_15() -> date:
    return date(2024, 3, 15)
