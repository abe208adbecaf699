"""Unit tests for structlog configuration."""

import io
import json

import pytest
import structlog
from structlog.contextvars import bound_contextvars

import pairrank.config as settings
from pairrank.logging import configure_logging, get_logger

pytestmark = pytest.mark.unit


@pytest.fixture
def buf():
    stream = io.StringIO()
    yield stream
    structlog.reset_defaults()


def _lines(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_json_line_carries_logger_and_bound_ids(buf):
    configure_logging(cli_mode=False, log_level="INFO", stream=buf)

    with bound_contextvars(winner_id="w1", loser_id="l1"):
        get_logger("pairrank.test").info("comparison_recorded", event_id="e1")

    [record] = _lines(buf)
    assert record["event"] == "comparison_recorded"
    assert record["level"] == "info"
    assert record["logger"] == "pairrank.test"
    assert record["winner_id"] == "w1"
    assert record["loser_id"] == "l1"
    assert record["event_id"] == "e1"
    assert "timestamp" in record


def test_bound_ids_do_not_leak_past_block(buf):
    configure_logging(cli_mode=False, log_level="INFO", stream=buf)
    log = get_logger("pairrank.test")

    with bound_contextvars(winner_id="w1"):
        log.info("inside")
    log.info("outside")

    inside, outside = _lines(buf)
    assert inside["winner_id"] == "w1"
    assert "winner_id" not in outside


def test_level_defaults_to_environment(buf, monkeypatch):
    monkeypatch.setattr(settings, "LOG_LEVEL", "WARNING")
    configure_logging(cli_mode=False, stream=buf)
    log = get_logger("pairrank.test")

    log.info("dropped")
    log.warning("kept")

    assert [r["event"] for r in _lines(buf)] == ["kept"]


def test_unknown_level_falls_back_to_info(buf):
    configure_logging(cli_mode=False, log_level="chatty", stream=buf)
    log = get_logger("pairrank.test")

    log.debug("dropped")
    log.info("kept")

    assert [r["event"] for r in _lines(buf)] == ["kept"]


def test_json_flag_off_selects_console_renderer(buf, monkeypatch):
    monkeypatch.setattr(settings, "LOG_JSON", False)
    configure_logging(log_level="INFO", stream=buf)

    get_logger("pairrank.test").info("service_started", tau=0.5)

    output = buf.getvalue()
    assert "service_started" in output
    assert "tau=0.5" in output
    with pytest.raises(json.JSONDecodeError):
        json.loads(output)
