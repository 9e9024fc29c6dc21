"""Structured JSON logging for the API and its domain events"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger.json import JsonFormatter

from fintrack.config import settings

# Access lines come from MetricsMiddleware
QUIET_LOGGERS = ("uvicorn.access",)


class CustomJsonFormatter(JsonFormatter):
    """JSON records stamped with UTC time, level and the service name"""

    def __init__(self, *args, service_name: Optional[str] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name or settings.service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: Optional[str] = None) -> None:
    """Send every record to stdout as one JSON object per line"""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", service_name=service_name))
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_expense_created(
    user_id: str,
    card_id: str,
    group_id: str,
    installments: int,
    first_invoice_month: str,
) -> None:
    """Log a card purchase fan-out"""
    logging.info(
        "Card expense created",
        extra={
            "user_id": user_id,
            "card_id": card_id,
            "group_id": group_id,
            "step": "expense_created",
            "installments": installments,
            "first_invoice_month": first_invoice_month,
        },
    )


def log_invoice_gate_rejection(
    user_id: str,
    card_id: str,
    expense_id: str,
    operation: str,
    scope: str,
) -> None:
    """Log a mutation refused because an affected invoice is closed"""
    logging.warning(
        "Invoice closed, mutation rejected",
        extra={
            "user_id": user_id,
            "card_id": card_id,
            "expense_id": expense_id,
            "step": "invoice_gate",
            "operation": operation,
            "scope": scope,
        },
    )


def log_recurring_materialized(user_id: str, recurring_id: str, count: int) -> None:
    logging.info(
        "Recurring transactions materialized",
        extra={
            "user_id": user_id,
            "recurring_expense_id": recurring_id,
            "step": "recurring_materialized",
            "transaction_count": count,
        },
    )
