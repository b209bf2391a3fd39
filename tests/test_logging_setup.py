"""Tests for logging configuration."""

import json
import logging

import pytest

from fare_estimator.config import ObservabilityConfig
from fare_estimator.logging_setup import JsonFormatter, configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_formatter_keeps_extra_fields():
    record = logging.makeLogRecord(
        {
            "name": "fare_estimator.services.routing_resolver",
            "levelname": "WARNING",
            "msg": "Routing failed, using straight-line distance",
            "provider": "osrm",
            "no_route": True,
        }
    )

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Routing failed, using straight-line distance"
    assert payload["level"] == "WARNING"
    assert payload["provider"] == "osrm"
    assert payload["no_route"] is True
    assert "msg" not in payload


def test_configure_logging_installs_one_handler(restore_root_logger):
    configure_logging(ObservabilityConfig(level="debug", structured=True))

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JsonFormatter)


def test_plain_format_by_default(restore_root_logger):
    configure_logging(ObservabilityConfig(level="WARNING"))

    formatter = restore_root_logger.handlers[0].formatter
    assert not isinstance(formatter, JsonFormatter)
    assert restore_root_logger.level == logging.WARNING
