"""Tests for the JSON-lines logging configuration."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from cruxtimer.logging_setup import JsonFormatter, configure_logging


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def _record(msg="hello %s", args=("world",), **extra):
    record = logging.LogRecord("cruxtimer.test", logging.WARNING, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_basic_fields(self):
        payload = json.loads(JsonFormatter().format(_record()))
        assert payload["msg"] == "hello world"
        assert payload["level"] == "WARNING"
        assert payload["logger"] == "cruxtimer.test"
        assert payload["ts"].endswith("Z")

    def test_json_extras_unprefixed(self):
        payload = json.loads(JsonFormatter().format(_record(_json_mark=5000, other=1)))
        assert payload["mark"] == 5000
        assert "other" not in payload

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
        payload = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in payload["exc_info"]


class TestConfigureLogging:
    def test_writes_json_lines(self, tmp_path, restore_root):
        logfile = configure_logging(tmp_path)
        logging.getLogger("cruxtimer.timer.engine").info(
            "countdown started", extra={"_json_mode": "session"})
        for handler in restore_root.handlers:
            handler.flush()

        assert logfile == tmp_path / "logs" / "cruxtimer.log"
        lines = [json.loads(line) for line in logfile.read_text().splitlines()]
        assert lines[0]["phase"] == "startup"
        assert lines[-1]["msg"] == "countdown started"
        assert lines[-1]["mode"] == "session"

    def test_repeat_calls_do_not_duplicate_handlers(self, tmp_path, restore_root):
        configure_logging(tmp_path)
        configure_logging(tmp_path)
        assert len(restore_root.handlers) == 2

    def test_level(self, tmp_path, restore_root):
        configure_logging(tmp_path, logging.DEBUG)
        assert restore_root.level == logging.DEBUG
