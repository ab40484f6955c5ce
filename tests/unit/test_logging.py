"""
Unit Tests: Logging

- stdlib логгеры модулей проходят через structlog
- LOG_JSON: одна JSON-запись на строку, с traceback при exc_info
"""

import json
import logging

import pytest
import structlog

from smart_clinic_bot.core.logging import setup_logging

LOGGER_NAME = "smart_clinic_bot.services.catalog_service"


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def last_json_line(capsys):
    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    return json.loads(lines[-1])


def test_stdlib_record_rendered_as_json(capsys):
    setup_logging("INFO", json_format=True)

    logging.getLogger(LOGGER_NAME).info("📚 Catalog query returned %s items", 3)

    record = last_json_line(capsys)
    assert record["event"] == "📚 Catalog query returned 3 items"
    assert record["level"] == "info"
    assert record["logger"] == LOGGER_NAME
    assert "timestamp" in record


def test_exception_included_in_json(capsys):
    setup_logging("INFO", json_format=True)

    try:
        raise RuntimeError("db down")
    except RuntimeError:
        logging.getLogger(LOGGER_NAME).error("❌ Housekeeping run failed", exc_info=True)

    record = last_json_line(capsys)
    assert "RuntimeError: db down" in record["exception"]


def test_structlog_logger_keeps_context(capsys):
    setup_logging("INFO", json_format=True)

    structlog.get_logger(LOGGER_NAME).info("checkout", telegram_id=42)

    record = last_json_line(capsys)
    assert (record["event"], record["telegram_id"]) == ("checkout", 42)


def test_level_filters_and_console_is_not_json(capsys):
    setup_logging("WARNING", json_format=False)
    logger = logging.getLogger(LOGGER_NAME)

    logger.info("hidden")
    logger.warning("⚠️ visible")

    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "⚠️ visible" in out
    with pytest.raises(json.JSONDecodeError):
        json.loads(out.strip().splitlines()[-1])


def test_repeated_setup_does_not_duplicate_output(capsys):
    setup_logging("INFO", json_format=True)
    setup_logging("INFO", json_format=True)

    logging.getLogger(LOGGER_NAME).info("once")

    out = capsys.readouterr().out
    assert out.count('"once"') == 1
