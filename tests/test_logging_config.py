"""
Unit tests for logging configuration.
"""

import json
import logging

import pytest

from customs_review.core.logging_config import (
    CustomJsonFormatter,
    component_for,
    setup_logging,
)


def _record(name: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(name, logging.WARNING, __file__, 1, "review skipped", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.parametrize(
    "logger_name,component",
    [
        ("customs_review.scheduler.review", "scheduler"),
        ("customs_review.db.store", "db"),
        ("review_api.errors", "api"),
        ("apscheduler.executors.default", "scheduler"),
        ("uvicorn.error", "api"),
        ("customs_review.config", "service"),
        ("review_apiary", "service"),
    ],
)
def test_component_for(logger_name, component):
    assert component_for(logger_name) == component


class TestCustomJsonFormatter:
    def test_declaration_fields(self):
        formatter = CustomJsonFormatter("%(message)s")
        payload = json.loads(formatter.format(
            _record("customs_review.scheduler.review", declaration_id="decl-1")
        ))

        assert payload["message"] == "review skipped"
        assert payload["component"] == "scheduler"
        assert payload["level"] == "WARNING"
        assert payload["service"] == "Customs Review Service"
        assert payload["declaration_id"] == "decl-1"

    def test_empty_declaration_id_dropped(self):
        formatter = CustomJsonFormatter("%(message)s")
        payload = json.loads(formatter.format(
            _record("review_api.errors", declaration_id=None)
        ))

        assert "declaration_id" not in payload
        assert payload["component"] == "api"


def test_setup_logging_does_not_duplicate_handler():
    root_logger = logging.getLogger()
    original_level = root_logger.level
    try:
        setup_logging()
        setup_logging()

        named = [h for h in root_logger.handlers if h.get_name() == "customs_review_console"]
        assert len(named) == 1
        assert logging.getLogger("apscheduler").level == logging.WARNING
    finally:
        for handler in list(root_logger.handlers):
            if handler.get_name() == "customs_review_console":
                root_logger.removeHandler(handler)
        root_logger.setLevel(original_level)
