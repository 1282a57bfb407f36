"""Tests for JSON logging."""

import json
import logging
import os
from unittest.mock import patch

from hotelbook.observability.logging import JsonFormatter, get_logger
from hotelbook.settings import Settings


def _record(msg="hello", **extra):
    record = logging.LogRecord("hotelbook.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_basic_fields(self):
        payload = json.loads(JsonFormatter().format(_record()))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "hotelbook.test"
        assert payload["message"] == "hello"
        assert "timestamp" in payload

    def test_extra_fields_are_merged(self):
        record = _record(extra_fields={"reservation_id": "res-1", "price_cents": 39000})
        payload = json.loads(JsonFormatter().format(record))

        assert payload["reservation_id"] == "res-1"
        assert payload["price_cents"] == 39000

    def test_non_json_values_are_stringified(self):
        from datetime import date

        record = _record(extra_fields={"start": date(2026, 6, 1)})
        assert json.loads(JsonFormatter().format(record))["start"] == "2026-06-01"


class TestGetLogger:
    def test_single_handler(self):
        first = get_logger("hotelbook.test.single")
        second = get_logger("hotelbook.test.single")

        assert first is second
        assert len(first.handlers) == 1
        assert isinstance(first.handlers[0].formatter, JsonFormatter)
        assert first.propagate is False

    def test_level_follows_log_level_setting(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "warning"}):
            logger = get_logger("hotelbook.test.level")

        assert logger.level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        with patch(
            "hotelbook.observability.logging.load_settings",
            return_value=Settings(log_level="LOUD"),
        ):
            logger = get_logger("hotelbook.test.unknown_level")

        assert logger.level == logging.INFO
