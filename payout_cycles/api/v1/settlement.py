"""POST /v1/settlement - record updates for marking a period as paid"""

import logging

from fastapi import APIRouter, HTTPException, Request

from payout_cycles.api.dependencies import get_request_id, resolve_today
from payout_cycles.api.v1.schemas import SettlementRequest, SettlementResponse
from payout_cycles.config import settings
from payout_cycles.domain.exceptions import InvalidPeriodKeyError, InvalidReferenceDateError
from payout_cycles.domain.settlement import build_settlement
from payout_cycles.infrastructure.observability.metrics import invalid_input_counter, record_settlement

router = APIRouter()


@router.post("/settlement", response_model=SettlementResponse)
def create_settlement(request_body: SettlementRequest, request: Request):
    """
    Compute the paid record for a period and the pending record opening the next cycle.

    Nothing is persisted; the caller writes both records to its store.
    """
    request_id = get_request_id(request)

    try:
        result = build_settlement(
            request_body.calendar.to_domain(settings.default_payment_method),
            request_body.domain_records(),
            request_body.period_key,
            resolve_today(request_body.today),
            payment_method=request_body.payment_method,
            maintain_schedule=request_body.maintain_schedule,
            note=request_body.note,
        )
    except InvalidReferenceDateError as e:
        invalid_input_counter.labels(reason="reference_date").inc()
        logging.warning(f"Invalid reference date: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except InvalidPeriodKeyError as e:
        invalid_input_counter.labels(reason="period_key").inc()
        logging.warning(f"Invalid period key: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    record_settlement(request_body.maintain_schedule)
    logging.info(
        "Settlement prepared",
        extra={
            "request_id": request_id,
            "period_key": result.period_key,
            "next_period_key": result.next_period_key,
        },
    )

    return SettlementResponse.from_domain(result)
