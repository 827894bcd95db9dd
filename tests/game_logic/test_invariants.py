"""Seeded random-play checks of the board invariants."""

from __future__ import annotations

from random import Random

import pytest

from santorini_engine.game_logic.engine import GameEngine
from santorini_engine.game_logic.phases import TurnPhase
from santorini_engine.shared.enums import TrappedSidePolicy
from santorini_engine.shared.value_objects import MAX_HEIGHT, Position

MAX_STEPS = 300


def _ordered(positions: frozenset[Position]) -> list[Position]:
    return sorted(positions, key=Position.as_tuple)


def _start_game(
    seed: int,
    *,
    grid_size: int,
    num_sides: int,
    moves_per_turn: int,
    abilities: tuple[str | None, ...],
) -> tuple[GameEngine, Random]:
    rng = Random(seed)
    engine = GameEngine.configure(
        grid_size,
        num_sides,
        2,
        moves_per_turn,
        trapped_side_policy=TrappedSidePolicy.FORFEIT,
    )
    for side, ability in enumerate(abilities):
        if ability is not None:
            engine.assign_ability(side, ability)
    cells = [(row, col) for row in range(grid_size) for col in range(grid_size)]
    for row, col in rng.sample(cells, engine.configuration.total_pieces):
        assert engine.place_next(row, col).ok
    return engine, rng


def _assert_board_consistent(engine: GameEngine, previous: list[int]) -> list[int]:
    placed = [
        piece for side in engine.sides for piece in side.pieces if piece.is_placed
    ]
    positions = [piece.position for piece in placed]
    assert len(set(positions)) == len(positions)
    assert engine.grid.occupied_count() == len(placed)
    for piece in placed:
        assert engine.grid.cell_for(piece.position).occupant == piece.key
    for cell in engine.grid:
        if cell.occupant is not None:
            assert engine.piece(cell.occupant).position == cell.position

    heights = [cell.height for cell in engine.grid]
    assert all(0 <= height <= MAX_HEIGHT for height in heights)
    assert all(now >= before for now, before in zip(heights, previous, strict=True))
    return heights


def _play_one_step(engine: GameEngine, rng: Random) -> bool:
    """Perform one random legal action; return ``False`` when none exists."""
    side = engine.current_side
    if engine.phase is TurnPhase.MOVE:
        selected = engine.selected_piece
        movers = (
            [selected]
            if selected is not None and engine.state.moved_this_turn
            else side.placed_pieces()
        )
        options = [
            (piece, target)
            for piece in movers
            for target in _ordered(engine.query_legal_moves(piece))
        ]
        if not options:
            return False
        piece, target = rng.choice(options)
        result = engine.move(piece, target.row, target.col)
    else:
        if engine.extra_build_pending and rng.random() < 0.3:
            assert engine.skip_extra_build().ok
            return True
        targets = _ordered(engine.query_legal_builds(engine.selected_piece))
        assert targets, "build phase entered without a legal build"
        target = rng.choice(targets)
        result = engine.build(target.row, target.col)
    assert result.ok, result.message
    return True


@pytest.mark.parametrize("seed", range(12))
@pytest.mark.parametrize(
    ("grid_size", "num_sides", "moves_per_turn", "abilities"),
    [
        (5, 2, 1, (None, None)),
        (5, 2, 1, ("apollo", "demeter")),
        (4, 2, 2, ("demeter", "apollo")),
        (5, 3, 1, ("apollo", None, "demeter")),
    ],
)
def test_random_legal_play_preserves_board_invariants(
    seed: int,
    grid_size: int,
    num_sides: int,
    moves_per_turn: int,
    abilities: tuple[str | None, ...],
) -> None:
    engine, rng = _start_game(
        seed,
        grid_size=grid_size,
        num_sides=num_sides,
        moves_per_turn=moves_per_turn,
        abilities=abilities,
    )
    heights = _assert_board_consistent(engine, [0] * grid_size * grid_size)

    for _ in range(MAX_STEPS):
        if engine.is_game_over or not _play_one_step(engine, rng):
            break
        heights = _assert_board_consistent(engine, heights)

    if engine.is_game_over:
        before = engine.snapshot()
        for row in range(grid_size):
            assert not engine.build(row, 0).ok
        assert engine.snapshot() == before


@pytest.mark.parametrize("seed", range(6))
def test_random_illegal_requests_change_nothing(seed: int) -> None:
    engine, rng = _start_game(
        seed, grid_size=5, num_sides=2, moves_per_turn=1, abilities=("apollo", None)
    )

    for _ in range(60):
        if engine.is_game_over:
            break
        before = engine.snapshot()
        row, col = rng.randrange(-1, 6), rng.randrange(-1, 6)
        side = engine.current_side
        piece = rng.choice(side.placed_pieces())
        if engine.phase is TurnPhase.MOVE:
            legal = engine.query_legal_moves(piece)
            result = engine.move(piece, row, col)
            accepted = Position(row=row, col=col) in legal
        else:
            legal = engine.query_legal_builds(engine.selected_piece)
            result = engine.build(row, col)
            accepted = Position(row=row, col=col) in legal
        assert result.ok is accepted
        if not result.ok:
            assert engine.snapshot() == before
        elif engine.is_game_over or not _play_one_step(engine, rng):
            break
