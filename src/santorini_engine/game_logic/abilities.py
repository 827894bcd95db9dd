"""God Card abilities: per-side overrides of the base move and build rules.

An ability exposes six hooks. The engine calls them in a fixed order for the
side whose turn it is:

``before_move`` → ``is_valid_move`` → base mutation → ``after_move``
``before_build`` → ``is_valid_build`` → base mutation → ``after_build``

Hooks never touch cells directly. They read the grid through
:class:`BoardAccess` and ask the engine to relocate pieces, so the
occupant/position pairing stays intact. The engine verifies that pairing
after every post-hook and rolls the whole action back when it is broken.
"""

from __future__ import annotations

import copy
import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar, Protocol

from pydantic import BaseModel
from pydantic.config import ConfigDict

from santorini_engine.game_logic import rules
from santorini_engine.game_logic.phases import BuildFollowUp
from santorini_engine.shared.value_objects import PieceKey, Position  # noqa: TC001

if TYPE_CHECKING:
    from collections.abc import Callable

    from santorini_engine.game_logic.grid import Grid
    from santorini_engine.game_logic.state import Piece

logger = logging.getLogger(__name__)


class BoardAccess(Protocol):
    """Engine surface available to ability hooks."""

    @property
    def grid(self) -> Grid:
        """Read-only view of the cell store."""

    def piece(self, key: PieceKey) -> Piece:
        """Return the piece registered under *key*."""

    def is_legal_move(self, source: Position, target: Position) -> bool:
        """Base move legality, ignoring every ability."""

    def is_legal_build(self, worker: Position, target: Position) -> bool:
        """Base build legality, ignoring every ability."""

    def relocate_piece(self, key: PieceKey, target: Position) -> None:
        """Move *key* onto the empty cell *target*, keeping both sides in sync."""


class MoveRecord(BaseModel):
    """Describes a move for the pre- and post-move hooks.

    ``displaced`` is the piece that stood on ``target`` before the move. It is
    only ever set when an ability allowed moving onto an occupied cell, and
    the engine holds it off the board until ``after_move`` re-seats it.
    """

    model_config = ConfigDict(frozen=True)

    piece: PieceKey
    source: Position
    target: Position
    displaced: PieceKey | None = None


class BuildRecord(BaseModel):
    """Describes a build for the pre- and post-build hooks."""

    model_config = ConfigDict(frozen=True)

    piece: PieceKey
    worker: Position
    target: Position
    new_height: int | None = None


class Ability:
    """Default ability: every hook falls through to the base rules."""

    name: ClassVar[str] = "Mortal"
    description: ClassVar[str] = "No special power."
    grants_extra_build: ClassVar[bool] = False

    def __init__(self) -> None:
        self._side: int | None = None

    @property
    def side(self) -> int | None:
        """Index of the side this ability is bound to, if any."""
        return self._side

    def bind(self, side: int) -> None:
        if self._side is not None and self._side != side:
            msg = f"{self.name} is already bound to side {self._side}."
            raise ValueError(msg)
        self._side = side

    def before_move(self, board: BoardAccess, move: MoveRecord) -> None:
        """Run before legality is checked. Return value is ignored."""

    def is_valid_move(
        self, board: BoardAccess, source: Position, target: Position, *, side: int
    ) -> bool:
        return board.is_legal_move(source, target)

    def after_move(self, board: BoardAccess, move: MoveRecord) -> None:
        """Run after the mover has been placed on the target cell."""

    def before_build(self, board: BoardAccess, build: BuildRecord) -> None:
        """Run before legality is checked. Return value is ignored."""

    def is_valid_build(
        self, board: BoardAccess, worker: Position, target: Position, *, side: int
    ) -> bool:
        return board.is_legal_build(worker, target)

    def after_build(self, board: BoardAccess, build: BuildRecord) -> BuildFollowUp:
        return BuildFollowUp.END_TURN

    def reset_turn_state(self) -> None:
        """Forget anything remembered during the turn that just ended."""

    def capture_state(self) -> dict[str, Any]:
        return copy.deepcopy(vars(self))

    def restore_state(self, state: dict[str, Any]) -> None:
        vars(self).clear()
        vars(self).update(copy.deepcopy(state))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(side={self._side})"


class ApolloAbility(Ability):
    """Move into an opponent's cell, forcing that worker into the vacated one."""

    name = "Apollo"
    description = (
        "Your worker may move into an opponent worker's space by forcing "
        "their worker to the space yours just vacated."
    )

    def is_valid_move(
        self, board: BoardAccess, source: Position, target: Position, *, side: int
    ) -> bool:
        grid = board.grid
        if not grid.in_bounds(target.row, target.col):
            return False
        if not source.is_adjacent(target):
            return False
        occupant = grid.cell_for(target).occupant
        if occupant is None:
            return board.is_legal_move(source, target)
        if occupant.side == side:
            return False
        return rules.climb_allowed(
            grid.cell_for(source).height, grid.cell_for(target).height
        )

    def after_move(self, board: BoardAccess, move: MoveRecord) -> None:
        if move.displaced is None:
            return
        board.relocate_piece(move.displaced, move.source)
        logger.debug(
            "Apollo swapped %s into (%d, %d)",
            move.displaced,
            move.source.row,
            move.source.col,
        )


class DemeterAbility(Ability):
    """Build one additional time, but not on the same space."""

    name = "Demeter"
    description = (
        "Your worker may build one additional time, but not on the same space."
    )
    grants_extra_build = True

    def __init__(self) -> None:
        super().__init__()
        self.built_once = False
        self.last_build: Position | None = None

    def is_valid_build(
        self, board: BoardAccess, worker: Position, target: Position, *, side: int
    ) -> bool:
        if self.built_once and self.last_build == target:
            return False
        return board.is_legal_build(worker, target)

    def after_build(self, board: BoardAccess, build: BuildRecord) -> BuildFollowUp:
        if not self.built_once:
            self.built_once = True
            self.last_build = build.target
            return BuildFollowUp.BUILD_AGAIN
        self.reset_turn_state()
        return BuildFollowUp.END_TURN

    def reset_turn_state(self) -> None:
        self.built_once = False
        self.last_build = None


class AbilityName(StrEnum):
    """Identifiers of the abilities shipped with the engine."""

    APOLLO = "apollo"
    DEMETER = "demeter"


ABILITY_FACTORIES: dict[AbilityName, Callable[[], Ability]] = {
    AbilityName.APOLLO: ApolloAbility,
    AbilityName.DEMETER: DemeterAbility,
}


def create_ability(name: AbilityName | str) -> Ability:
    """Return a fresh, unbound ability instance for *name*."""
    try:
        key = AbilityName(str(name).lower())
    except ValueError as exc:
        known = ", ".join(item.value for item in AbilityName)
        msg = f"Unknown ability '{name}'. Known abilities: {known}."
        raise ValueError(msg) from exc
    return ABILITY_FACTORIES[key]()


__all__ = [
    "ABILITY_FACTORIES",
    "Ability",
    "AbilityName",
    "ApolloAbility",
    "BoardAccess",
    "BuildRecord",
    "DemeterAbility",
    "MoveRecord",
    "create_ability",
]
