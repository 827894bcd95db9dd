"""Tests for the exception hierarchy and outcome mapping."""

import pytest

from santorini_engine.errors import (
    OUTCOME_ERRORS,
    AbilityInvariantError,
    GameOverError,
    IllegalMoveError,
    InvalidHeightError,
    OutOfBoundsError,
    RuleViolationError,
    SantoriniError,
)
from santorini_engine.game_logic.engine import ActionResult
from santorini_engine.game_logic.phases import GameStage, TurnPhase
from santorini_engine.shared.enums import ActionOutcome


def test_every_failure_outcome_maps_to_an_error() -> None:
    failures = set(ActionOutcome) - {ActionOutcome.SUCCESS}

    assert set(OUTCOME_ERRORS) == failures
    for outcome, error in OUTCOME_ERRORS.items():
        assert error.outcome is outcome


def test_out_of_bounds_is_also_an_index_error() -> None:
    error = OutOfBoundsError(7, 1, 5)

    assert isinstance(error, IndexError)
    assert isinstance(error, SantoriniError)
    assert error.to_dict() == {
        "outcome": "out_of_bounds",
        "message": "Position (7, 1) is outside the 5x5 grid.",
        "row": 7,
        "col": 1,
        "grid_size": 5,
    }


def test_invalid_height_is_a_value_error() -> None:
    assert issubclass(InvalidHeightError, ValueError)
    assert not issubclass(InvalidHeightError, RuleViolationError)


def test_ability_invariant_reports_as_illegal_move() -> None:
    assert issubclass(AbilityInvariantError, IllegalMoveError)
    assert AbilityInvariantError.outcome is ActionOutcome.ILLEGAL_MOVE


def test_game_over_has_default_message() -> None:
    assert str(GameOverError()) == "The game is already over."


def test_failed_result_raises_matching_error() -> None:
    result = ActionResult(
        outcome=ActionOutcome.GAME_OVER,
        message="The game is already over.",
        stage=GameStage.FINISHED,
        phase=TurnPhase.MOVE,
        winner=0,
    )

    assert result.game_over
    with pytest.raises(GameOverError, match="already over"):
        result.raise_for_outcome()
