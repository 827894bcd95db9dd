"""Immutable value objects shared across the domain layer."""

from __future__ import annotations

from collections.abc import Iterator  # noqa: TC003

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

MIN_HEIGHT = 0
MAX_HEIGHT = 4
WINNING_HEIGHT = 3

_NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = tuple(
    (row_delta, col_delta)
    for row_delta in (-1, 0, 1)
    for col_delta in (-1, 0, 1)
    if (row_delta, col_delta) != (0, 0)
)


class Position(BaseModel):
    """A (row, col) coordinate on the grid.

    Coordinates are not bounds-checked here; the grid owns that concern. The
    model is frozen so positions can be used as dictionary keys and set
    members.
    """

    model_config = ConfigDict(frozen=True)

    row: int
    col: int

    @classmethod
    def of(cls, row: int, col: int) -> Position:
        """Shorthand constructor accepting positional arguments."""
        return cls(row=row, col=col)

    def distance(self, other: Position) -> int:
        """Return the Chebyshev (king-move) distance to *other*."""
        return max(abs(self.row - other.row), abs(self.col - other.col))

    def is_adjacent(self, other: Position) -> bool:
        """Return ``True`` when *other* is one of the eight neighbours."""
        return self.distance(other) == 1

    def neighbors(self) -> Iterator[Position]:
        """Yield the eight surrounding positions, unclipped."""
        for row_delta, col_delta in _NEIGHBOR_OFFSETS:
            yield Position(row=self.row + row_delta, col=self.col + col_delta)

    def as_tuple(self) -> tuple[int, int]:
        return (self.row, self.col)


class PieceKey(BaseModel):
    """Stable identifier of a piece: owning side index plus piece index."""

    model_config = ConfigDict(frozen=True)

    side: int = Field(..., ge=0)
    index: int = Field(..., ge=0)


__all__ = [
    "MAX_HEIGHT",
    "MIN_HEIGHT",
    "WINNING_HEIGHT",
    "PieceKey",
    "Position",
]
