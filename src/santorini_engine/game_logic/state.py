"""Side, piece and turn-state containers mutated by the engine."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from santorini_engine.game_logic.abilities import Ability  # noqa: TC001
from santorini_engine.game_logic.phases import GameStage, TurnPhase
from santorini_engine.shared.enums import SideColor  # noqa: TC001
from santorini_engine.shared.value_objects import PieceKey, Position  # noqa: TC001


class Piece(BaseModel):
    """A worker owned by one side.

    ``position`` mirrors the cell that lists this piece as its occupant and is
    ``None`` until the piece has been placed.
    """

    key: PieceKey
    name: str
    color: SideColor
    position: Position | None = None

    @property
    def side(self) -> int:
        return self.key.side

    @property
    def is_placed(self) -> bool:
        return self.position is not None


class Side(BaseModel):
    """A player: identity, ordered pieces and an optional ability."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    index: int = Field(..., ge=0)
    name: str
    color: SideColor
    pieces: list[Piece] = Field(default_factory=list)
    placed: int = Field(default=0, ge=0)
    ability: Ability | None = None

    def owns(self, key: PieceKey) -> bool:
        return key.side == self.index

    def piece(self, index: int) -> Piece:
        return self.pieces[index]

    def next_unplaced(self) -> Piece | None:
        """Return the next piece waiting to be placed, in declaration order."""
        if self.placed >= len(self.pieces):
            return None
        return self.pieces[self.placed]

    def placed_pieces(self) -> list[Piece]:
        return [piece for piece in self.pieces if piece.position is not None]

    @property
    def all_placed(self) -> bool:
        return self.placed >= len(self.pieces)


class TurnState(BaseModel):
    """The single source of mutable orchestration truth."""

    started: bool = False
    placement_index: int = 0
    current_side_index: int = 0
    phase: TurnPhase = TurnPhase.MOVE
    selected: PieceKey | None = None
    moves_remaining: int = 0
    moved_this_turn: bool = False
    extra_build_pending: bool = False
    game_over: bool = False
    winner: int | None = None

    @property
    def stage(self) -> GameStage:
        if self.game_over:
            return GameStage.FINISHED
        if self.started:
            return GameStage.PLAYING
        return GameStage.PLACING

    def begin_play(self, moves_per_turn: int) -> None:
        """Leave placement and hand the first turn to side 0."""
        self.started = True
        self.current_side_index = 0
        self.phase = TurnPhase.MOVE
        self.selected = None
        self.moves_remaining = moves_per_turn
        self.moved_this_turn = False

    def enter_build(self) -> None:
        self.phase = TurnPhase.BUILD
        self.moves_remaining = 0

    def pass_turn(self, num_sides: int, moves_per_turn: int) -> int:
        """Advance to the next side (wrapping) and return its index."""
        self.current_side_index = (self.current_side_index + 1) % num_sides
        self.phase = TurnPhase.MOVE
        self.selected = None
        self.moves_remaining = moves_per_turn
        self.moved_this_turn = False
        self.extra_build_pending = False
        return self.current_side_index

    def finish(self, winner: int | None) -> None:
        """Freeze the game with *winner* as the winning side index."""
        self.game_over = True
        self.winner = winner
        self.started = False
        self.selected = None
        self.moves_remaining = 0
        self.moved_this_turn = False
        self.extra_build_pending = False
        self.phase = TurnPhase.MOVE


__all__ = ["Piece", "Side", "TurnState"]
