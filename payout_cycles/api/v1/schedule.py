"""POST /v1/schedule - previous, current and next payout periods"""

import logging

from fastapi import APIRouter, HTTPException, Request

from payout_cycles.api.dependencies import get_request_id, resolve_allow_future_start, resolve_today
from payout_cycles.api.v1.schemas import ContextRequest, SchedulePeriodSchema, ScheduleResponse
from payout_cycles.config import settings
from payout_cycles.domain.exceptions import InvalidPeriodKeyError, InvalidReferenceDateError
from payout_cycles.domain.schedule import compute_schedule
from payout_cycles.infrastructure.observability.metrics import invalid_input_counter, record_context

router = APIRouter()


@router.post("/schedule", response_model=ScheduleResponse)
def get_schedule(request_body: ContextRequest, request: Request):
    """
    Summarize the payout schedule with each period's record status.

    Returns:
        Current and next periods, plus the last paid period when one exists
    """
    request_id = get_request_id(request)

    try:
        summary = compute_schedule(
            request_body.calendar.to_domain(settings.default_payment_method),
            request_body.domain_records(),
            resolve_today(request_body.today),
            allow_future_start=resolve_allow_future_start(request_body.allow_future_start),
        )
    except InvalidReferenceDateError as e:
        invalid_input_counter.labels(reason="reference_date").inc()
        logging.warning(f"Invalid reference date: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except InvalidPeriodKeyError as e:
        invalid_input_counter.labels(reason="period_key").inc()
        logging.warning(f"Invalid period key: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    record_context(summary.context.frequency.value, summary.context.start_source)

    return ScheduleResponse(
        current=SchedulePeriodSchema.from_domain(summary.current),
        next=SchedulePeriodSchema.from_domain(summary.next),
        previous=SchedulePeriodSchema.from_domain(summary.previous),
        interval_days=summary.context.interval_days,
        preferred_method=summary.context.preferred_method,
    )
