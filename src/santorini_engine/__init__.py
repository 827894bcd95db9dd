"""Rule engine for a build-and-climb grid strategy game."""

import logging

from santorini_engine.errors import (
    AbilityInvariantError,
    ConfigurationError,
    GameOverError,
    IllegalBuildError,
    IllegalMoveError,
    IllegalPlacementError,
    InvalidHeightError,
    NotYourTurnError,
    OutOfBoundsError,
    RuleViolationError,
    SantoriniError,
)
from santorini_engine.game_logic import (
    AbilityName,
    ActionResult,
    GameConfiguration,
    GameEngine,
    GameStage,
    TurnPhase,
)
from santorini_engine.logging_config import configure_logging
from santorini_engine.shared import ActionOutcome, PieceKey, Position

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AbilityInvariantError",
    "AbilityName",
    "ActionOutcome",
    "ActionResult",
    "ConfigurationError",
    "GameConfiguration",
    "GameEngine",
    "GameOverError",
    "GameStage",
    "IllegalBuildError",
    "IllegalMoveError",
    "IllegalPlacementError",
    "InvalidHeightError",
    "NotYourTurnError",
    "OutOfBoundsError",
    "PieceKey",
    "Position",
    "RuleViolationError",
    "SantoriniError",
    "TurnPhase",
    "configure_logging",
]
