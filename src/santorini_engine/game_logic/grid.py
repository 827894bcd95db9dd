"""Fixed-size cell store backing the board."""

from __future__ import annotations

from collections.abc import Iterator  # noqa: TC003

from pydantic import BaseModel, Field

from santorini_engine.errors import InvalidHeightError, OutOfBoundsError
from santorini_engine.shared.value_objects import (
    MAX_HEIGHT,
    MIN_HEIGHT,
    PieceKey,
    Position,
)

CellCapture = tuple[tuple[PieceKey | None, int], ...]


class Cell(BaseModel):
    """A single square of the grid.

    The occupant is a key into the piece registry, not the piece itself: the
    cell records who stands on it but does not own that piece.
    """

    position: Position
    occupant: PieceKey | None = None
    height: int = Field(default=MIN_HEIGHT, ge=MIN_HEIGHT, le=MAX_HEIGHT)

    @property
    def row(self) -> int:
        return self.position.row

    @property
    def col(self) -> int:
        return self.position.col

    @property
    def has_dome(self) -> bool:
        return self.height == MAX_HEIGHT

    @property
    def is_empty(self) -> bool:
        return self.occupant is None


class Grid:
    """Square array of :class:`Cell` objects with bounds-checked access.

    Cells are created once and never replaced, so repeated lookups of the
    same coordinate return the same object.
    """

    def __init__(self, size: int) -> None:
        if size < 1:
            msg = "Grid size must be positive."
            raise ValueError(msg)
        self._size = size
        self._cells: list[list[Cell]] = [
            [Cell(position=Position(row=row, col=col)) for col in range(size)]
            for row in range(size)
        ]

    @property
    def size(self) -> int:
        return self._size

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._size and 0 <= col < self._size

    def cell_at(self, row: int, col: int) -> Cell:
        """Return the cell at (*row*, *col*) or raise :class:`OutOfBoundsError`."""
        if not self.in_bounds(row, col):
            raise OutOfBoundsError(row, col, self._size)
        return self._cells[row][col]

    def cell_for(self, position: Position) -> Cell:
        return self.cell_at(position.row, position.col)

    def neighbors(self, position: Position) -> Iterator[Cell]:
        """Yield the in-bounds cells adjacent to *position*."""
        for candidate in position.neighbors():
            if self.in_bounds(candidate.row, candidate.col):
                yield self._cells[candidate.row][candidate.col]

    def __iter__(self) -> Iterator[Cell]:
        for row in self._cells:
            yield from row

    def set_occupant(self, cell: Cell, piece: PieceKey | None) -> None:
        cell.occupant = piece

    def set_height(self, cell: Cell, level: int) -> None:
        """Set the build height of *cell*.

        Heights only grow and never leave ``[0, 4]``.
        """
        if not MIN_HEIGHT <= level <= MAX_HEIGHT:
            msg = f"Height {level} is outside [{MIN_HEIGHT}, {MAX_HEIGHT}]."
            raise InvalidHeightError(msg)
        if level < cell.height:
            msg = (
                f"Height of ({cell.row}, {cell.col}) cannot decrease "
                f"from {cell.height} to {level}."
            )
            raise InvalidHeightError(msg)
        cell.height = level

    def occupied_count(self) -> int:
        return sum(1 for cell in self if cell.occupant is not None)

    def total_height(self) -> int:
        return sum(cell.height for cell in self)

    def capture(self) -> CellCapture:
        """Return an immutable copy of every cell's occupant and height."""
        return tuple((cell.occupant, cell.height) for cell in self)

    def restore(self, capture: CellCapture) -> None:
        """Write a :meth:`capture` back in place, keeping cell identities."""
        if len(capture) != self._size * self._size:
            msg = "Capture does not match the grid dimensions."
            raise ValueError(msg)
        for cell, (occupant, height) in zip(self, capture, strict=True):
            cell.occupant = occupant
            cell.height = height


__all__ = ["Cell", "CellCapture", "Grid"]
