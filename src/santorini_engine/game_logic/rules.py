"""Base movement and build legality, independent of any ability.

Every function here is pure: it reads the grid and never mutates it.
Coordinates outside the grid are simply "not legal"; callers that need to
distinguish the out-of-bounds case check :meth:`Grid.in_bounds` first.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from santorini_engine.shared.value_objects import MAX_HEIGHT, WINNING_HEIGHT, Position

if TYPE_CHECKING:
    from santorini_engine.game_logic.grid import Grid


def climb_allowed(source_height: int, target_height: int) -> bool:
    """Return ``True`` when a worker may step from one height to the other.

    Climbing is limited to one level per move; descending is unrestricted.
    """
    return target_height <= source_height + 1


def is_legal_move(grid: Grid, source: Position, target: Position) -> bool:
    """Return ``True`` when a worker on *source* may move to *target*."""
    if not grid.in_bounds(target.row, target.col):
        return False
    if not grid.in_bounds(source.row, source.col):
        return False
    target_cell = grid.cell_for(target)
    if target_cell.occupant is not None or target_cell.has_dome:
        return False
    if not source.is_adjacent(target):
        return False
    return climb_allowed(grid.cell_for(source).height, target_cell.height)


def is_legal_build(grid: Grid, worker: Position, target: Position) -> bool:
    """Return ``True`` when a worker on *worker* may build on *target*.

    The worker's own height does not matter for building.
    """
    if not grid.in_bounds(target.row, target.col):
        return False
    if not worker.is_adjacent(target):
        return False
    target_cell = grid.cell_for(target)
    if target_cell.occupant is not None:
        return False
    return target_cell.height < MAX_HEIGHT


def is_winning_step(source_height: int, target_height: int) -> bool:
    """Return ``True`` when stepping between these heights wins the game."""
    return source_height < WINNING_HEIGHT and target_height == WINNING_HEIGHT


def legal_move_targets(grid: Grid, source: Position) -> frozenset[Position]:
    return frozenset(
        cell.position
        for cell in grid.neighbors(source)
        if is_legal_move(grid, source, cell.position)
    )


def legal_build_targets(grid: Grid, worker: Position) -> frozenset[Position]:
    return frozenset(
        cell.position
        for cell in grid.neighbors(worker)
        if is_legal_build(grid, worker, cell.position)
    )


__all__ = [
    "climb_allowed",
    "is_legal_build",
    "is_legal_move",
    "is_winning_step",
    "legal_build_targets",
    "legal_move_targets",
]
