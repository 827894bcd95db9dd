"""Tests for logging setup and engine settings."""

import json
import logging
from collections.abc import Iterator

import pytest

from santorini_engine.game_logic.engine import GameEngine
from santorini_engine.logging_config import (
    PACKAGE_LOGGER,
    JsonFormatter,
    TerminalFormatter,
    configure_logging,
)
from santorini_engine.settings import get_settings


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_settings_defaults() -> None:
    settings = get_settings()

    assert settings.log_level == "WARNING"
    assert settings.log_json is False
    assert settings.journal_limit == 500


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SANTORINI_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("SANTORINI_JOURNAL_LIMIT", "10")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.log_level == "DEBUG"
    assert settings.journal_limit == 10


def test_configure_logging_is_idempotent() -> None:
    logger = configure_logging("INFO")
    configure_logging("DEBUG")

    installed = [
        handler
        for handler in logger.handlers
        if isinstance(handler.formatter, TerminalFormatter)
    ]
    assert len(installed) == 1
    assert logger.level == logging.DEBUG


def test_configure_logging_uses_json_from_settings(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("SANTORINI_LOG_JSON", "true")
    get_settings.cache_clear()

    logger = configure_logging()

    assert any(isinstance(h.formatter, JsonFormatter) for h in logger.handlers)
    assert logger.level == logging.WARNING


def test_json_formatter_emits_one_object() -> None:
    record = logging.LogRecord(
        name="santorini_engine.game_logic.engine",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="%s moved",
        args=("Player 1 Piece 1",),
        exc_info=None,
    )

    entry = json.loads(JsonFormatter().format(record))

    assert entry["level"] == "INFO"
    assert entry["message"] == "Player 1 Piece 1 moved"
    assert entry["logger"] == "santorini_engine.game_logic.engine"


def test_engine_logs_accepted_and_rejected_actions(
    caplog: pytest.LogCaptureFixture,
) -> None:
    engine = GameEngine.configure(5, 2, 1)
    caplog.set_level(logging.DEBUG, logger=PACKAGE_LOGGER)

    assert engine.place_piece(0, 0, 0).ok
    assert not engine.place_piece(0, 1, 1).ok

    messages = [(record.levelno, record.getMessage()) for record in caplog.records]
    assert (logging.INFO, "Player 1 Piece 1 placed on (0, 0)") in messages
    assert any(
        level == logging.DEBUG and text.startswith("Rejected place_piece")
        for level, text in messages
    )
