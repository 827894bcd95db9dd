"""Shared value objects, enumerations and journal primitives."""

from santorini_engine.shared.enums import (
    SIDE_PALETTE,
    ActionOutcome,
    SideColor,
    TrappedSidePolicy,
)
from santorini_engine.shared.events import ActionJournal, JournalEntry
from santorini_engine.shared.value_objects import (
    MAX_HEIGHT,
    MIN_HEIGHT,
    WINNING_HEIGHT,
    PieceKey,
    Position,
)

__all__ = [
    "MAX_HEIGHT",
    "MIN_HEIGHT",
    "SIDE_PALETTE",
    "WINNING_HEIGHT",
    "ActionJournal",
    "ActionOutcome",
    "JournalEntry",
    "PieceKey",
    "Position",
    "SideColor",
    "TrappedSidePolicy",
]
