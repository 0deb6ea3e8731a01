"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Sequence
from pythonjsonlogger import jsonlogger

from installment_ledger.config import settings


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

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_view_built(
    request_id: str,
    view: str,
    input_count: int,
    output_count: int,
    duration_ms: float,
) -> None:
    """Log one computed view (monthly view, plan catalog, expansion)"""
    logging.info(
        "View built",
        extra={
            "request_id": request_id,
            "step": "view_built",
            "view": view,
            "input_count": input_count,
            "output_count": output_count,
            "duration_ms": duration_ms,
        },
    )


def log_orphaned_transactions(request_id: str, view: str, transaction_ids: Sequence[str]) -> None:
    """Warn about installment transactions dropped for an unresolved category"""
    logging.warning(
        "Installment transactions skipped: category not found",
        extra={
            "request_id": request_id,
            "view": view,
            "transaction_ids": list(transaction_ids),
            "orphan_count": len(transaction_ids),
        },
    )
