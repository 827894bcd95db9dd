"""Phase vocabulary for the turn state machine."""

from __future__ import annotations

from enum import StrEnum


class GameStage(StrEnum):
    """Coarse lifecycle of a game."""

    PLACING = "placing"
    PLAYING = "playing"
    FINISHED = "finished"


class TurnPhase(StrEnum):
    """Sub-step a side must perform next during play."""

    MOVE = "move"
    BUILD = "build"


class BuildFollowUp(StrEnum):
    """Transition requested by a post-build hook.

    ``END_TURN`` lets the engine pass the turn as usual. ``BUILD_AGAIN``
    keeps the same side and piece in the build phase for an optional extra
    build.
    """

    END_TURN = "end_turn"
    BUILD_AGAIN = "build_again"


__all__ = ["BuildFollowUp", "GameStage", "TurnPhase"]
