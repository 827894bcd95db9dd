"""Tests for game configuration, defaults and overrides."""

import pytest
from pydantic import ValidationError

from santorini_engine.errors import ConfigurationError
from santorini_engine.game_logic.configuration import (
    ConfigurationOverrides,
    GameConfiguration,
    build_game_configuration,
    get_default_game_configuration,
)
from santorini_engine.game_logic.engine import GameEngine
from santorini_engine.shared.enums import TrappedSidePolicy


def test_defaults_describe_standard_two_player_game() -> None:
    config = get_default_game_configuration()

    assert config.grid_size == 5
    assert config.num_sides == 2
    assert config.pieces_per_side == 2
    assert config.moves_per_turn == 1
    assert config.trapped_side_policy is TrappedSidePolicy.ADVISORY
    assert config.total_pieces == 4


def test_defaults_are_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SANTORINI_GAME_GRID_SIZE", "7")
    monkeypatch.setenv("SANTORINI_GAME_TRAPPED_SIDE_POLICY", "forfeit")
    get_default_game_configuration.cache_clear()

    config = get_default_game_configuration()

    assert config.grid_size == 7
    assert config.trapped_side_policy is TrappedSidePolicy.FORFEIT


def test_overrides_replace_only_given_fields() -> None:
    config = build_game_configuration(
        ConfigurationOverrides(num_sides=3, moves_per_turn=2)
    )

    assert config.num_sides == 3
    assert config.moves_per_turn == 2
    assert config.grid_size == 5


def test_empty_overrides_return_defaults() -> None:
    assert build_game_configuration(ConfigurationOverrides()) == (
        get_default_game_configuration()
    )


@pytest.mark.parametrize(
    "params",
    [
        {"grid_size": 1},
        {"grid_size": 27},
        {"num_sides": 0},
        {"num_sides": 7},
        {"pieces_per_side": 0},
        {"moves_per_turn": 0},
        {"grid_size": 2, "num_sides": 3, "pieces_per_side": 2},
    ],
)
def test_invalid_configuration_is_rejected(params: dict[str, int]) -> None:
    with pytest.raises(ValidationError):
        GameConfiguration(**params)


def test_configure_wraps_validation_errors() -> None:
    with pytest.raises(ConfigurationError):
        GameEngine.configure(grid_size=5, num_sides=0, pieces_per_side=2)


def test_configuration_is_frozen() -> None:
    config = GameConfiguration()

    with pytest.raises(ValidationError):
        config.grid_size = 9  # type: ignore[misc]
