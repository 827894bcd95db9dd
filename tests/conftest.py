"""Test configuration and fixtures for the engine test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest

from santorini_engine.game_logic.configuration import get_default_game_configuration
from santorini_engine.game_logic.engine import GameEngine
from santorini_engine.settings import get_settings

EngineFactory = Callable[..., GameEngine]


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Ensure settings are loaded with predictable values during tests."""
    for name in (
        "SANTORINI_LOG_LEVEL",
        "SANTORINI_LOG_JSON",
        "SANTORINI_JOURNAL_LIMIT",
        "SANTORINI_GAME_GRID_SIZE",
        "SANTORINI_GAME_NUM_SIDES",
        "SANTORINI_GAME_PIECES_PER_SIDE",
        "SANTORINI_GAME_MOVES_PER_TURN",
        "SANTORINI_GAME_TRAPPED_SIDE_POLICY",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    get_default_game_configuration.cache_clear()
    yield
    get_settings.cache_clear()
    get_default_game_configuration.cache_clear()


@pytest.fixture
def make_engine() -> EngineFactory:
    """Return a factory building engines with test-friendly defaults."""

    def factory(**overrides: object) -> GameEngine:
        params: dict[str, object] = {
            "grid_size": 5,
            "num_sides": 2,
            "pieces_per_side": 2,
            "moves_per_turn": 1,
        }
        params.update(overrides)
        return GameEngine.configure(**params)

    return factory


@pytest.fixture
def playing_engine(make_engine: EngineFactory) -> GameEngine:
    """Two sides with two pieces each, placed and ready for side 0 to move.

    Side 0 stands on (0, 0) and (4, 4); side 1 on (0, 4) and (4, 0).
    """
    engine = make_engine()
    for side, row, col in ((0, 0, 0), (0, 4, 4), (1, 0, 4), (1, 4, 0)):
        assert engine.place_piece(side, row, col).ok
    return engine
