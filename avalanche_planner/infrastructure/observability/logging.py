"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from pythonjsonlogger import jsonlogger

from avalanche_planner.config import settings


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


def log_strategy(
    request_id: str,
    user_id: str,
    debt_count: int,
    surplus: float,
    target_debt_id: Optional[str],
    duration_ms: float,
) -> None:
    """Log structured strategy outcome for analysis"""
    logging.info(
        "Strategy calculated",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "strategy_complete",
            "debt_count": debt_count,
            "surplus": round(surplus, 2),
            "target_debt_id": target_debt_id,
            "duration_ms": duration_ms,
        },
    )


def log_validation_rejected(request_id: str, user_id: str, errors: List[str]) -> None:
    """Log a debt submission that failed validation"""
    logging.warning(
        "Debt rejected",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "debt_validation",
            "errors": errors,
        },
    )
