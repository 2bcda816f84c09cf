"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from payment_tracker.config import settings


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

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_report(
    request_id: str,
    date_from: str,
    date_to: str,
    payment_method: Optional[str],
    payment_count: int,
    duration_ms: float,
) -> None:
    """Log structured report outcome"""
    logging.info(
        "Report generated",
        extra={
            "request_id": request_id,
            "step": "report_complete",
            "date_from": date_from,
            "date_to": date_to,
            "payment_method": payment_method or "all",
            "payment_count": payment_count,
            "duration_ms": duration_ms,
        },
    )


def log_store_write(request_id: str, operation: str, payment_id: str) -> None:
    """Log a committed insert, update or delete"""
    logging.info(
        "Payment %s committed",
        operation,
        extra={
            "request_id": request_id,
            "step": "store_write",
            "operation": operation,
            "payment_id": payment_id,
        },
    )


def log_request(request_id: str, method: str, endpoint: str, status: int, duration_ms: float) -> None:
    """Access log line, one per HTTP request"""
    logging.getLogger("payment_tracker.access").info(
        "%s %s %s",
        method,
        endpoint,
        status,
        extra={
            "request_id": request_id,
            "step": "http_request",
            "status": status,
            "duration_ms": duration_ms,
        },
    )
