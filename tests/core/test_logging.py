"""Tests for ideagen.core.logging."""

import json

import pytest
import structlog

from ideagen.core.logging import LogContext, configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset():
    yield
    structlog.contextvars.clear_contextvars()
    configure_logging(level="WARNING", json_format=False)


def _last_json_line(captured: str) -> dict:
    lines = [line for line in captured.splitlines() if line.startswith("{")]
    return json.loads(lines[-1])


def test_json_output_uses_ecs_keys(capsys):
    configure_logging(level="INFO", json_format=True, service="ideagen-test")
    get_logger("ideagen.test").info("generation_succeeded", user_id="u-1")

    record = _last_json_line(capsys.readouterr().out)
    assert record["event"] == "generation_succeeded"
    assert record["user_id"] == "u-1"
    assert record["log.level"] == "info"
    assert record["service.name"] == "ideagen-test"
    assert "@timestamp" in record


def test_level_filtering(capsys):
    configure_logging(level="WARNING", json_format=True)
    get_logger("ideagen.test").info("quiet")
    assert "quiet" not in capsys.readouterr().out


def test_log_context_binds_and_unbinds(capsys):
    configure_logging(level="INFO", json_format=True)
    logger = get_logger("ideagen.test")

    with LogContext(user_id="u-7", trigger="sweep"):
        logger.info("attempt_started")
    logger.info("attempt_finished")

    out = capsys.readouterr().out
    started, finished = [json.loads(line) for line in out.splitlines() if line.startswith("{")][-2:]
    assert started["user_id"] == "u-7"
    assert started["trigger"] == "sweep"
    assert "user_id" not in finished
