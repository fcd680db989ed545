"""
Logging configuration for the Customs Review Service.

Production emits one JSON object per line with the service name and the
component (scheduler, db, api) the record came from; declaration-scoped
records also carry the ``declaration_id`` passed via ``extra``.
"""

import logging
import sys
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from customs_review.config import get_settings

_HANDLER_NAME = "customs_review_console"

# Logger name prefix -> component label
COMPONENTS = {
    "customs_review.scheduler": "scheduler",
    "customs_review.db": "db",
    "review_api": "api",
    "apscheduler": "scheduler",
    "uvicorn": "api",
}


def component_for(logger_name: str) -> str:
    """Map a logger name to the component it belongs to."""
    for prefix, component in COMPONENTS.items():
        if logger_name == prefix or logger_name.startswith(prefix + "."):
            return component
    return "service"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding service, environment and component fields."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        settings = get_settings()
        log_record["service"] = settings.app_name
        log_record["environment"] = settings.environment
        log_record["level"] = record.levelname
        log_record["component"] = component_for(record.name)
        # Drop empty extras so only declaration-scoped records carry the id
        if log_record.get("declaration_id") is None:
            log_record.pop("declaration_id", None)


def setup_logging() -> None:
    """
    Configure application logging.

    Safe to call more than once: the console handler is replaced, not
    duplicated.
    """
    settings = get_settings()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setLevel(settings.log_level)

    if settings.is_production:
        formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            timestamp=True,
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root_logger.removeHandler(handler)
    root_logger.setLevel(settings.log_level)
    root_logger.addHandler(console_handler)

    # APScheduler logs every job run at INFO
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
