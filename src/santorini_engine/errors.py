"""Exception hierarchy raised by the engine.

Rule violations are recoverable: the public engine entry points catch
:class:`RuleViolationError` and report the matching :class:`ActionOutcome`
instead of propagating it. Configuration errors are not recoverable and are
raised before any game state exists.
"""

from __future__ import annotations

from typing import Any, ClassVar

from santorini_engine.shared.enums import ActionOutcome


class SantoriniError(Exception):
    """Base exception for all engine errors."""


class ConfigurationError(SantoriniError):
    """Raised when a game cannot be configured with the given parameters."""


class InvalidHeightError(SantoriniError, ValueError):
    """Raised when a cell height would leave ``[0, 4]`` or decrease."""


class RuleViolationError(SantoriniError):
    """Base class for caller-facing, recoverable rule violations."""

    outcome: ClassVar[ActionOutcome] = ActionOutcome.ILLEGAL_MOVE

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {"outcome": self.outcome.value, "message": str(self), **self.details}


class OutOfBoundsError(RuleViolationError, IndexError):
    """Raised when a coordinate lies outside the grid."""

    outcome = ActionOutcome.OUT_OF_BOUNDS

    def __init__(self, row: int, col: int, grid_size: int) -> None:
        super().__init__(
            f"Position ({row}, {col}) is outside the {grid_size}x{grid_size} grid.",
            row=row,
            col=col,
            grid_size=grid_size,
        )


class IllegalMoveError(RuleViolationError):
    """Raised when a move fails adjacency, occupancy, height or ability rules."""

    outcome = ActionOutcome.ILLEGAL_MOVE


class IllegalBuildError(RuleViolationError):
    """Raised when a build fails adjacency, occupancy, dome or ability rules."""

    outcome = ActionOutcome.ILLEGAL_BUILD


class IllegalPlacementError(RuleViolationError):
    """Raised when a piece cannot be placed on the requested cell."""

    outcome = ActionOutcome.ILLEGAL_PLACEMENT


class NotYourTurnError(RuleViolationError):
    """Raised when a side or piece acts out of turn or out of phase."""

    outcome = ActionOutcome.NOT_YOUR_TURN


class GameOverError(RuleViolationError):
    """Raised for any mutating call after the game has ended."""

    outcome = ActionOutcome.GAME_OVER

    def __init__(
        self, message: str = "The game is already over.", **details: Any
    ) -> None:
        super().__init__(message, **details)


class AbilityInvariantError(IllegalMoveError):
    """Raised when an ability hook leaves the board in an inconsistent state."""


OUTCOME_ERRORS: dict[ActionOutcome, type[RuleViolationError]] = {
    ActionOutcome.OUT_OF_BOUNDS: OutOfBoundsError,
    ActionOutcome.ILLEGAL_MOVE: IllegalMoveError,
    ActionOutcome.ILLEGAL_BUILD: IllegalBuildError,
    ActionOutcome.ILLEGAL_PLACEMENT: IllegalPlacementError,
    ActionOutcome.NOT_YOUR_TURN: NotYourTurnError,
    ActionOutcome.GAME_OVER: GameOverError,
}


__all__ = [
    "OUTCOME_ERRORS",
    "AbilityInvariantError",
    "ConfigurationError",
    "GameOverError",
    "IllegalBuildError",
    "IllegalMoveError",
    "IllegalPlacementError",
    "InvalidHeightError",
    "NotYourTurnError",
    "OutOfBoundsError",
    "RuleViolationError",
    "SantoriniError",
]
