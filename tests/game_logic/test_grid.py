"""Tests for the bounds-checked cell store."""

import pytest

from santorini_engine.errors import InvalidHeightError, OutOfBoundsError
from santorini_engine.game_logic.grid import Grid
from santorini_engine.shared.value_objects import PieceKey, Position


def test_new_grid_cells_are_empty_and_flat() -> None:
    grid = Grid(3)

    cells = list(grid)
    assert len(cells) == 9
    assert all(cell.is_empty and cell.height == 0 for cell in cells)
    assert grid.total_height() == 0


def test_cell_at_returns_same_object_and_rejects_out_of_bounds() -> None:
    grid = Grid(3)

    assert grid.cell_at(1, 2) is grid.cell_at(1, 2)
    assert grid.cell_for(Position.of(1, 2)) is grid.cell_at(1, 2)
    with pytest.raises(OutOfBoundsError) as excinfo:
        grid.cell_at(3, 0)
    assert excinfo.value.details == {"row": 3, "col": 0, "grid_size": 3}
    with pytest.raises(IndexError):
        grid.cell_at(0, -1)


def test_neighbors_are_clipped_at_corners() -> None:
    grid = Grid(5)

    corner = {cell.position.as_tuple() for cell in grid.neighbors(Position.of(0, 0))}
    middle = list(grid.neighbors(Position.of(2, 2)))

    assert corner == {(0, 1), (1, 0), (1, 1)}
    assert len(middle) == 8


def test_height_only_grows_and_caps_at_dome() -> None:
    grid = Grid(2)
    cell = grid.cell_at(0, 0)

    grid.set_height(cell, 1)
    grid.set_height(cell, 4)
    assert cell.has_dome

    with pytest.raises(InvalidHeightError):
        grid.set_height(cell, 5)
    with pytest.raises(InvalidHeightError):
        grid.set_height(cell, 3)
    assert cell.height == 4


def test_capture_and_restore_keep_cell_identity() -> None:
    grid = Grid(2)
    cell = grid.cell_at(1, 1)
    capture = grid.capture()

    grid.set_occupant(cell, PieceKey(side=0, index=0))
    grid.set_height(grid.cell_at(0, 0), 2)
    grid.restore(capture)

    assert grid.cell_at(1, 1) is cell
    assert cell.occupant is None
    assert grid.total_height() == 0
    assert grid.occupied_count() == 0


def test_restore_rejects_capture_of_other_size() -> None:
    with pytest.raises(ValueError, match="dimensions"):
        Grid(2).restore(Grid(3).capture())


def test_grid_size_must_be_positive() -> None:
    with pytest.raises(ValueError, match="positive"):
        Grid(0)
