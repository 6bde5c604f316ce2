"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger
from budget_gateway.infrastructure.observability.metrics import data_quality_counter


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: str = "budget-gateway", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


class DataQualityMetricsHandler(logging.Handler):
    """Counts data-quality notes by reason as they are logged"""

    def emit(self, record: logging.LogRecord) -> None:
        if getattr(record, "step", None) == "data_quality":
            data_quality_counter.labels(reason=getattr(record, "reason", "unknown")).inc()


def setup_logging(level: str = "INFO", service_name: str = "budget-gateway") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.addHandler(DataQualityMetricsHandler())


def log_summary(
    request_id: str,
    client_id: int,
    has_active_plan: bool,
    utilization_percentage: Optional[float],
    unmatched_codes: int,
    duration_ms: float,
) -> None:
    """Log structured budget summary outcome for analysis"""
    logging.info(
        "Budget summary completed",
        extra={
            "request_id": request_id,
            "client_id": client_id,
            "step": "summary_complete",
            "outcome": "computed" if has_active_plan else "no_active_plan",
            "utilization_percentage": utilization_percentage,
            "unmatched_codes": unmatched_codes,
            "duration_ms": duration_ms,
        },
    )
