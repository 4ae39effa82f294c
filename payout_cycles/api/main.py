"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from payout_cycles.api.middleware import MetricsMiddleware, RequestIDMiddleware
from payout_cycles.api.v1 import context, schedule, settlement
from payout_cycles.config import settings
from payout_cycles.infrastructure.observability.logging import setup_logging


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Payout Cycles",
        description="Recurring payout cycle resolution for calendars",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added runs first
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(context.router, prefix="/v1", tags=["context"])
    app.include_router(schedule.router, prefix="/v1", tags=["schedule"])
    app.include_router(settlement.router, prefix="/v1", tags=["settlement"])

    return app


app = create_app()
