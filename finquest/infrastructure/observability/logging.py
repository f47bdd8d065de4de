"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from finquest.config import settings


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


def log_quiz_result(
    request_id: str,
    user_id: str,
    lesson_id: str,
    passed: bool,
    coins_earned: int,
    is_new_completion: bool,
    duration_ms: float,
) -> None:
    """Log structured quiz outcome for analysis"""
    logging.info(
        "Quiz result recorded",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "lesson_id": lesson_id,
            "step": "quiz_recorded",
            "quiz_outcome": "passed" if passed else "failed",
            "coins_earned": coins_earned,
            "is_new_completion": is_new_completion,
            "duration_ms": duration_ms,
        },
    )


def log_simulation_run(
    request_id: str,
    user_id: str,
    simulation_type: str,
    total_coins: int,
) -> None:
    """Log a saved simulator run and the resulting coin balance"""
    logging.info(
        "Simulation run recorded",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "simulation_saved",
            "simulation_type": simulation_type,
            "total_coins": total_coins,
        },
    )
