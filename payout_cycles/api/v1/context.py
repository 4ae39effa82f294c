"""POST /v1/payment-context - current and next payout cycle for a calendar"""

import logging
import time

from fastapi import APIRouter, HTTPException, Request

from payout_cycles.api.dependencies import get_request_id, resolve_allow_future_start, resolve_today
from payout_cycles.api.v1.schemas import ContextRequest, ContextResponse
from payout_cycles.config import settings
from payout_cycles.domain.context import build_context
from payout_cycles.domain.exceptions import InvalidReferenceDateError
from payout_cycles.infrastructure.observability.logging import log_context_built
from payout_cycles.infrastructure.observability.metrics import invalid_input_counter, record_context

router = APIRouter()


@router.post("/payment-context", response_model=ContextResponse)
def create_payment_context(request_body: ContextRequest, request: Request):
    """
    Resolve the payout cycle in execution and the one after it.

    Flow:
    1. Normalize calendar settings and the record snapshot
    2. Resolve the current cycle against the record history
    3. Derive the next cycle boundaries
    """
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    try:
        payment_context = build_context(
            request_body.calendar.to_domain(settings.default_payment_method),
            request_body.domain_records(),
            resolve_today(request_body.today),
            allow_future_start=resolve_allow_future_start(request_body.allow_future_start),
        )
    except InvalidReferenceDateError as e:
        invalid_input_counter.labels(reason="reference_date").inc()
        logging.warning(f"Invalid reference date: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    record_context(payment_context.frequency.value, payment_context.start_source)
    log_context_built(
        request_id,
        "payment-context",
        payment_context.frequency.value,
        payment_context.current_period.period_key,
        payment_context.start_source,
        (time.perf_counter() - start_time) * 1000,
    )

    return ContextResponse.from_domain(payment_context)
