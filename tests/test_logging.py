"""Tests for structlog setup."""

import json
import logging

import pytest
import structlog

from market_api.logging import get_logger, setup_logging


@pytest.fixture
def restore_logging():
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
    logging.getLogger("uvicorn.access").disabled = False


def test_json_format(capsys: pytest.CaptureFixture, restore_logging) -> None:
    setup_logging("INFO", log_format="json")

    get_logger("market_api.test").info("bot_registered", bot_id=7)

    line = capsys.readouterr().err.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "bot_registered"
    assert record["bot_id"] == 7
    assert record["level"] == "info"
    assert record["logger"] == "market_api.test"


def test_level_filters(capsys: pytest.CaptureFixture, restore_logging) -> None:
    setup_logging("WARNING", log_format="json")

    get_logger("market_api.test").info("quiet")
    get_logger("market_api.test").warning("loud")

    err = capsys.readouterr().err
    assert "quiet" not in err
    assert "loud" in err


def test_uvicorn_access_disabled(restore_logging) -> None:
    setup_logging("INFO", log_format="console")
    assert logging.getLogger("uvicorn.access").disabled is True
