"""Shared enumerations used across the engine."""

from enum import StrEnum


class SideColor(StrEnum):
    """Palette assigned to sides in configuration order."""

    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    MAGENTA = "magenta"
    CYAN = "cyan"


SIDE_PALETTE: tuple[SideColor, ...] = tuple(SideColor)


class ActionOutcome(StrEnum):
    """Result codes reported by every mutating engine entry point."""

    SUCCESS = "success"
    OUT_OF_BOUNDS = "out_of_bounds"
    ILLEGAL_MOVE = "illegal_move"
    ILLEGAL_BUILD = "illegal_build"
    ILLEGAL_PLACEMENT = "illegal_placement"
    NOT_YOUR_TURN = "not_your_turn"
    GAME_OVER = "game_over"


class TrappedSidePolicy(StrEnum):
    """What happens when the side about to play has no legal move."""

    ADVISORY = "advisory"
    FORFEIT = "forfeit"


__all__ = ["SIDE_PALETTE", "ActionOutcome", "SideColor", "TrappedSidePolicy"]
