"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from payout_cycles.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_context_built(
    request_id: str,
    endpoint: str,
    frequency: str,
    record_key: str,
    start_source: str,
    duration_ms: float,
) -> None:
    """Log structured outcome of a payment context computation"""
    logging.info(
        "Payment context computed",
        extra={
            "request_id": request_id,
            "endpoint": endpoint,
            "frequency": frequency,
            "record_key": record_key,
            "start_source": start_source,
            "duration_ms": duration_ms,
        },
    )
