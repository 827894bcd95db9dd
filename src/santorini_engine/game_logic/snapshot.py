"""Read-only, serializable views of a running game for renderers."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from santorini_engine.game_logic.configuration import (  # noqa: TC001
    GameConfiguration,
)
from santorini_engine.game_logic.phases import GameStage, TurnPhase  # noqa: TC001
from santorini_engine.shared.enums import SideColor  # noqa: TC001
from santorini_engine.shared.value_objects import PieceKey, Position  # noqa: TC001


class CellView(BaseModel):
    """Frozen copy of a single cell."""

    model_config = ConfigDict(frozen=True)

    position: Position
    height: int = Field(..., ge=0, le=4)
    occupant: PieceKey | None = None


class PieceView(BaseModel):
    """Frozen copy of a single piece."""

    model_config = ConfigDict(frozen=True)

    key: PieceKey
    name: str
    position: Position | None = None


class SideView(BaseModel):
    """Frozen copy of a side and its pieces."""

    model_config = ConfigDict(frozen=True)

    index: int
    name: str
    color: SideColor
    placed: int
    pieces: tuple[PieceView, ...]
    ability: str | None = None
    grants_extra_build: bool = False


class GameSnapshot(BaseModel):
    """Everything a renderer needs to redraw the board after an action."""

    model_config = ConfigDict(frozen=True)

    configuration: GameConfiguration
    stage: GameStage
    phase: TurnPhase
    current_side: int | None
    selected: PieceKey | None
    moves_remaining: int
    extra_build_pending: bool
    winner: int | None
    cells: tuple[tuple[CellView, ...], ...]
    sides: tuple[SideView, ...]

    def cell(self, row: int, col: int) -> CellView:
        return self.cells[row][col]

    def heights(self) -> tuple[tuple[int, ...], ...]:
        return tuple(tuple(cell.height for cell in row) for row in self.cells)


__all__ = ["CellView", "GameSnapshot", "PieceView", "SideView"]
