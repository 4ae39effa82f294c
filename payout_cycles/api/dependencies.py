"""Dependency helpers for FastAPI endpoints"""

from datetime import date
from typing import Optional

from fastapi import Request

from payout_cycles.config import settings


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def resolve_today(raw_today: Optional[str]) -> str:
    """The request's reference date, or the server's current date when omitted"""
    return raw_today or date.today().isoformat()


def resolve_allow_future_start(raw_value: Optional[bool]) -> bool:
    return settings.allow_future_start if raw_value is None else raw_value
