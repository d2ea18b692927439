"""
logging_config.py - Centralized JSON Logging Configuration

PURPOSE:
    Provides structured JSON logging with timezone-aware timestamps and
    service-specific context injection.

JSON LOG FIELDS:
    - timestamp: ISO 8601 in the configured timezone
    - level: Log level (INFO, ERROR, WARNING, DEBUG, CRITICAL)
    - logger: Module name where the log originated (e.g., "cart_service.cart_store")
    - message: The actual log message
    - service_name: Name of the service (injected automatically)
    - correlation_id, event_type, operation, product_id: copied when passed via `extra=`
    - exception: Full stack trace (only when exc_info is set)

USAGE:
    from shared.logging_config import setup_logging
    setup_logging("cart-service", level="INFO")

    logger = logging.getLogger(__name__)
    logger.info("Added product 42", extra={"operation": "add_product", "product_id": 42})

EXAMPLE JSON OUTPUT:
    {
        "timestamp": "2026-02-23T22:48:51.001014+00:00",
        "level": "INFO",
        "logger": "cart_service.cart_store",
        "message": "Added product 42 to cart",
        "service_name": "cart-service",
        "operation": "add_product",
        "product_id": 42
    }
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from zoneinfo import ZoneInfo

# Optional attributes copied from the LogRecord into the JSON payload
CONTEXT_FIELDS = ("service_name", "correlation_id", "event_type", "operation", "product_id")


class JsonFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per log record."""

    def __init__(self, tz: str = "UTC"):
        super().__init__()
        self.tz = timezone.utc if tz == "UTC" else ZoneInfo(tz)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, self.tz).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ServiceFilter(logging.Filter):
    """Stamps every record with the owning service's name."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = self.service_name
        return True


def setup_logging(service_name: str, level: str = "INFO", tz: str = "UTC") -> None:
    """Setup JSON logging for a service. Safe to call more than once."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(tz))
    handler.addFilter(ServiceFilter(service_name))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing.formatter, JsonFormatter):
            root.removeHandler(existing)

    root.setLevel(level)
    root.addHandler(handler)
