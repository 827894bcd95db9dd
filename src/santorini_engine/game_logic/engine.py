"""Turn orchestration engine enforcing the base rules and ability hooks."""

from __future__ import annotations

import logging
from collections.abc import Callable  # noqa: TC003
from typing import Any, NamedTuple

from pydantic import BaseModel, Field, ValidationError
from pydantic.config import ConfigDict

from santorini_engine.errors import (
    OUTCOME_ERRORS,
    AbilityInvariantError,
    ConfigurationError,
    GameOverError,
    IllegalBuildError,
    IllegalMoveError,
    IllegalPlacementError,
    NotYourTurnError,
    OutOfBoundsError,
    RuleViolationError,
)
from santorini_engine.game_logic import rules
from santorini_engine.game_logic.abilities import (
    Ability,
    AbilityName,
    BuildRecord,
    MoveRecord,
    create_ability,
)
from santorini_engine.game_logic.configuration import (
    GameConfiguration,
    build_game_configuration,
)
from santorini_engine.game_logic.grid import Cell, CellCapture, Grid
from santorini_engine.game_logic.phases import BuildFollowUp, GameStage, TurnPhase
from santorini_engine.game_logic.snapshot import (
    CellView,
    GameSnapshot,
    PieceView,
    SideView,
)
from santorini_engine.game_logic.state import Piece, Side, TurnState
from santorini_engine.settings import get_settings
from santorini_engine.shared.enums import (
    SIDE_PALETTE,
    ActionOutcome,
    TrappedSidePolicy,
)
from santorini_engine.shared.events import ActionJournal, JournalEntry
from santorini_engine.shared.value_objects import PieceKey, Position

logger = logging.getLogger(__name__)


class ActionResult(BaseModel):
    """Outcome of a mutating call plus the state the caller should render."""

    model_config = ConfigDict(frozen=True)

    outcome: ActionOutcome
    message: str = ""
    stage: GameStage
    phase: TurnPhase
    current_side: int | None = None
    winner: int | None = None
    details: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.outcome is ActionOutcome.SUCCESS

    @property
    def game_over(self) -> bool:
        return self.stage is GameStage.FINISHED

    def raise_for_outcome(self) -> None:
        """Raise the exception matching a failed outcome; no-op on success."""
        if self.ok:
            return
        if self.outcome is ActionOutcome.OUT_OF_BOUNDS:
            raise OutOfBoundsError(
                self.details["row"], self.details["col"], self.details["grid_size"]
            )
        raise OUTCOME_ERRORS[self.outcome](self.message, **self.details)


class _Checkpoint(NamedTuple):
    cells: CellCapture
    positions: tuple[Position | None, ...]
    placed: tuple[int, ...]
    turn: TurnState
    abilities: tuple[dict[str, Any] | None, ...]
    journal: int


class GameEngine:
    """Authoritative rule engine for one game.

    All mutation of the grid, the pieces and the turn state goes through the
    public entry points below. Each of them is transactional: when a rule is
    violated the engine restores the exact state it had before the call and
    reports the violation as an :class:`ActionResult`.

    The engine also implements the ``BoardAccess`` protocol that ability
    hooks receive.
    """

    def __init__(
        self,
        configuration: GameConfiguration | None = None,
        *,
        journal_limit: int | None = None,
    ) -> None:
        self._config = configuration or build_game_configuration()
        self._grid = Grid(self._config.grid_size)
        self._sides: tuple[Side, ...] = tuple(
            self._create_side(index) for index in range(self._config.num_sides)
        )
        self._state = TurnState()
        limit = journal_limit if journal_limit is not None else (
            get_settings().journal_limit
        )
        self._journal = ActionJournal(limit=limit)
        self._journal.record(
            "game_configured", payload=self._config.model_dump(mode="json")
        )
        logger.info(
            "Configured %dx%d game for %d sides with %d pieces each",
            self._config.grid_size,
            self._config.grid_size,
            self._config.num_sides,
            self._config.pieces_per_side,
        )

    @classmethod
    def configure(
        cls,
        grid_size: int,
        num_sides: int,
        pieces_per_side: int,
        moves_per_turn: int = 1,
        *,
        trapped_side_policy: TrappedSidePolicy = TrappedSidePolicy.ADVISORY,
        journal_limit: int | None = None,
    ) -> GameEngine:
        """Validate the parameters and return a fresh engine in placement."""
        try:
            configuration = GameConfiguration(
                grid_size=grid_size,
                num_sides=num_sides,
                pieces_per_side=pieces_per_side,
                moves_per_turn=moves_per_turn,
                trapped_side_policy=trapped_side_policy,
            )
        except ValidationError as exc:
            msg = f"Invalid game configuration: {exc}"
            raise ConfigurationError(msg) from exc
        return cls(configuration, journal_limit=journal_limit)

    def _create_side(self, index: int) -> Side:
        color = SIDE_PALETTE[index % len(SIDE_PALETTE)]
        name = f"Player {index + 1}"
        pieces = [
            Piece(
                key=PieceKey(side=index, index=piece_index),
                name=f"{name} Piece {piece_index + 1}",
                color=color,
            )
            for piece_index in range(self._config.pieces_per_side)
        ]
        return Side(index=index, name=name, color=color, pieces=pieces)

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    @property
    def configuration(self) -> GameConfiguration:
        return self._config

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def sides(self) -> tuple[Side, ...]:
        return self._sides

    @property
    def state(self) -> TurnState:
        """Return a copy of the turn state; mutating it has no effect."""
        return self._state.model_copy()

    @property
    def stage(self) -> GameStage:
        return self._state.stage

    @property
    def phase(self) -> TurnPhase:
        return self._state.phase

    @property
    def started(self) -> bool:
        return self._state.started

    @property
    def is_game_over(self) -> bool:
        return self._state.game_over

    @property
    def winner(self) -> Side | None:
        if self._state.winner is None:
            return None
        return self._sides[self._state.winner]

    @property
    def moves_remaining(self) -> int:
        return self._state.moves_remaining

    @property
    def extra_build_pending(self) -> bool:
        return self._state.extra_build_pending

    @property
    def current_side(self) -> Side | None:
        """Side expected to act next: the placing side, the playing side, or none."""
        index = self._expected_side_index()
        return None if index is None else self._sides[index]

    @property
    def placing_side(self) -> Side | None:
        if self._state.started or self._state.game_over:
            return None
        return self._sides[self._state.placement_index]

    @property
    def selected_piece(self) -> Piece | None:
        if self._state.selected is None:
            return None
        return self.piece(self._state.selected)

    @property
    def journal(self) -> tuple[JournalEntry, ...]:
        return self._journal.entries()

    def journal_since(self, sequence: int) -> tuple[JournalEntry, ...]:
        return self._journal.entries(since=sequence)

    def cell_at(self, row: int, col: int) -> Cell:
        return self._grid.cell_at(row, col)

    def piece(self, key: PieceKey) -> Piece:
        try:
            return self._sides[key.side].pieces[key.index]
        except IndexError as exc:
            msg = f"Unknown piece {key}."
            raise IllegalMoveError(msg, piece=key.model_dump()) from exc

    def side(self, index: int) -> Side:
        try:
            return self._sides[index]
        except IndexError as exc:
            msg = f"Unknown side {index}."
            raise NotYourTurnError(msg, side=index) from exc

    def pieces_placed(self, side: Side | int) -> int:
        return self._resolve_side(side).placed

    def unplaced_pieces(self, side: Side | int) -> list[Piece]:
        return [
            piece for piece in self._resolve_side(side).pieces if not piece.is_placed
        ]

    def snapshot(self) -> GameSnapshot:
        """Return a frozen, serializable view of the whole game."""
        cells = tuple(
            tuple(
                CellView(
                    position=cell.position, height=cell.height, occupant=cell.occupant
                )
                for cell in (
                    self._grid.cell_at(row, col) for col in range(self._grid.size)
                )
            )
            for row in range(self._grid.size)
        )
        sides = tuple(
            SideView(
                index=side.index,
                name=side.name,
                color=side.color,
                placed=side.placed,
                pieces=tuple(
                    PieceView(key=piece.key, name=piece.name, position=piece.position)
                    for piece in side.pieces
                ),
                ability=side.ability.name if side.ability else None,
                grants_extra_build=bool(
                    side.ability and side.ability.grants_extra_build
                ),
            )
            for side in self._sides
        )
        return GameSnapshot(
            configuration=self._config,
            stage=self._state.stage,
            phase=self._state.phase,
            current_side=self._expected_side_index(),
            selected=self._state.selected,
            moves_remaining=self._state.moves_remaining,
            extra_build_pending=self._state.extra_build_pending,
            winner=self._state.winner,
            cells=cells,
            sides=sides,
        )

    # ------------------------------------------------------------------
    # BoardAccess protocol used by abilities
    # ------------------------------------------------------------------

    def is_legal_move(self, source: Position, target: Position) -> bool:
        return rules.is_legal_move(self._grid, source, target)

    def is_legal_build(self, worker: Position, target: Position) -> bool:
        return rules.is_legal_build(self._grid, worker, target)

    def relocate_piece(self, key: PieceKey, target: Position) -> None:
        """Move a piece onto an empty cell, updating both sides of the pairing."""
        destination = self._grid.cell_for(target)
        if destination.occupant is not None and destination.occupant != key:
            msg = f"Cannot relocate {key} onto occupied cell {target.as_tuple()}."
            raise AbilityInvariantError(msg, piece=key.model_dump())
        piece = self.piece(key)
        if piece.position is not None:
            origin = self._grid.cell_for(piece.position)
            if origin.occupant == key:
                self._grid.set_occupant(origin, None)
        self._grid.set_occupant(destination, key)
        piece.position = target

    # ------------------------------------------------------------------
    # Rule queries
    # ------------------------------------------------------------------

    def query_legal_moves(self, piece: Piece | PieceKey) -> frozenset[Position]:
        """Return every cell the piece may move to under its side's rules."""
        target = self.piece(self._resolve_key(piece))
        if target.position is None:
            return frozenset()
        return frozenset(
            cell.position
            for cell in self._grid.neighbors(target.position)
            if self._move_allowed(target.side, target.position, cell.position)
        )

    def query_legal_builds(self, piece: Piece | PieceKey) -> frozenset[Position]:
        """Return every cell the piece may build on under its side's rules."""
        worker = self.piece(self._resolve_key(piece))
        if worker.position is None:
            return frozenset()
        return frozenset(
            cell.position
            for cell in self._grid.neighbors(worker.position)
            if self._build_allowed(worker.side, worker.position, cell.position)
        )

    def has_any_legal_move(self, side: Side | int) -> bool:
        """Return ``False`` only when no placed piece of *side* can move."""
        owner = self._resolve_side(side)
        for piece in owner.placed_pieces():
            for cell in self._grid.neighbors(piece.position):
                if self._move_allowed(owner.index, piece.position, cell.position):
                    return True
        return False

    @property
    def current_side_trapped(self) -> bool:
        if not self._state.started:
            return False
        return not self.has_any_legal_move(self._state.current_side_index)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def assign_ability(
        self, side: Side | int, ability: Ability | AbilityName | str
    ) -> Ability:
        """Bind *ability* to *side*. Only allowed before play starts."""
        owner = self._resolve_side(side)
        if self._state.started or self._state.game_over:
            msg = "Abilities can only be assigned before play starts."
            raise ConfigurationError(msg)
        if owner.ability is not None:
            msg = f"{owner.name} already holds {owner.ability.name}."
            raise ConfigurationError(msg)
        try:
            instance = (
                ability if isinstance(ability, Ability) else create_ability(ability)
            )
            instance.bind(owner.index)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        owner.ability = instance
        self._journal.record(
            "ability_assigned",
            side=owner.index,
            message=f"{owner.name} receives {instance.name}",
            payload={"ability": instance.name},
        )
        logger.info("%s assigned to %s", instance.name, owner.name)
        return instance

    # ------------------------------------------------------------------
    # Mutating entry points
    # ------------------------------------------------------------------

    def place_piece(self, side: Side | int, row: int, col: int) -> ActionResult:
        """Place *side*'s next unplaced piece on (*row*, *col*)."""
        return self._run("place_piece", lambda: self._place(side, row, col))

    def place_next(self, row: int, col: int) -> ActionResult:
        """Place the next piece of whichever side is currently placing."""
        if self._state.game_over or self._state.started:
            return self.place_piece(self._state.current_side_index, row, col)
        return self.place_piece(self._state.placement_index, row, col)

    def select_piece(self, piece: Piece | PieceKey) -> ActionResult:
        return self._run("select_piece", lambda: self._select(piece))

    def clear_selection(self) -> ActionResult:
        return self._run("clear_selection", self._clear_selection)

    def move(self, piece: Piece | PieceKey, row: int, col: int) -> ActionResult:
        """Move *piece* to (*row*, *col*) and advance the turn state."""
        return self._run("move", lambda: self._move(piece, row, col))

    def build(self, row: int, col: int) -> ActionResult:
        """Build with the selected piece on (*row*, *col*)."""
        return self._run("build", lambda: self._build(row, col))

    def skip_extra_build(self) -> ActionResult:
        """Decline an optional extra build and end the turn."""
        return self._run("skip_extra_build", self._skip_extra_build)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run(self, action: str, operation: Callable[[], None]) -> ActionResult:
        checkpoint = self._checkpoint()
        try:
            operation()
        except RuleViolationError as exc:
            self._rollback(checkpoint)
            logger.debug("Rejected %s: %s", action, exc)
            return self._result(exc.outcome, str(exc), details=exc.details)
        except Exception:
            self._rollback(checkpoint)
            raise
        return self._result(ActionOutcome.SUCCESS)

    def _result(
        self,
        outcome: ActionOutcome,
        message: str = "",
        *,
        details: dict[str, Any] | None = None,
    ) -> ActionResult:
        return ActionResult(
            outcome=outcome,
            message=message,
            stage=self._state.stage,
            phase=self._state.phase,
            current_side=self._expected_side_index(),
            winner=self._state.winner,
            details=dict(details or {}),
        )

    def _checkpoint(self) -> _Checkpoint:
        return _Checkpoint(
            cells=self._grid.capture(),
            positions=tuple(
                piece.position for side in self._sides for piece in side.pieces
            ),
            placed=tuple(side.placed for side in self._sides),
            turn=self._state.model_copy(),
            abilities=tuple(
                side.ability.capture_state() if side.ability else None
                for side in self._sides
            ),
            journal=self._journal.next_sequence,
        )

    def _rollback(self, checkpoint: _Checkpoint) -> None:
        self._grid.restore(checkpoint.cells)
        self._journal.discard_from(checkpoint.journal)
        pieces = [piece for side in self._sides for piece in side.pieces]
        for piece, position in zip(pieces, checkpoint.positions, strict=True):
            piece.position = position
        for side, placed, ability_state in zip(
            self._sides, checkpoint.placed, checkpoint.abilities, strict=True
        ):
            side.placed = placed
            if side.ability is not None and ability_state is not None:
                side.ability.restore_state(ability_state)
        self._state = checkpoint.turn

    def _expected_side_index(self) -> int | None:
        if self._state.game_over:
            return None
        if self._state.started:
            return self._state.current_side_index
        return self._state.placement_index

    def _resolve_side(self, side: Side | int) -> Side:
        index = side.index if isinstance(side, Side) else side
        return self.side(index)

    def _resolve_key(self, piece: Piece | PieceKey) -> PieceKey:
        key = piece.key if isinstance(piece, Piece) else piece
        self.piece(key)
        return key

    def _require_active(self) -> None:
        if self._state.game_over:
            raise GameOverError

    def _require_playing(self) -> Side:
        self._require_active()
        if not self._state.started:
            msg = "Play has not started; pieces are still being placed."
            raise NotYourTurnError(msg)
        return self._sides[self._state.current_side_index]

    def _move_allowed(self, side: int, source: Position, target: Position) -> bool:
        ability = self._sides[side].ability
        if ability is None:
            return rules.is_legal_move(self._grid, source, target)
        return ability.is_valid_move(self, source, target, side=side)

    def _build_allowed(self, side: int, worker: Position, target: Position) -> bool:
        ability = self._sides[side].ability
        if ability is None:
            return rules.is_legal_build(self._grid, worker, target)
        return ability.is_valid_build(self, worker, target, side=side)

    def _place(self, side: Side | int, row: int, col: int) -> None:
        self._require_active()
        owner = self._resolve_side(side)
        if self._state.started:
            msg = "Placement is over."
            raise NotYourTurnError(msg, side=owner.index)
        if owner.index != self._state.placement_index:
            msg = (
                f"{owner.name} cannot place now; "
                f"waiting for side {self._state.placement_index}."
            )
            raise NotYourTurnError(msg, side=owner.index)
        cell = self._grid.cell_at(row, col)
        if cell.occupant is not None:
            msg = f"Cell ({row}, {col}) is already occupied."
            raise IllegalPlacementError(msg, row=row, col=col)
        piece = owner.next_unplaced()
        if piece is None:
            msg = f"{owner.name} has no pieces left to place."
            raise IllegalPlacementError(msg, side=owner.index)

        self._grid.set_occupant(cell, piece.key)
        piece.position = cell.position
        owner.placed += 1
        self._journal.record(
            "piece_placed",
            side=owner.index,
            message=f"{piece.name} placed on ({row}, {col})",
            payload={"piece": piece.key.model_dump(), "row": row, "col": col},
        )
        logger.info("%s placed on (%d, %d)", piece.name, row, col)

        if not owner.all_placed:
            return
        self._state.placement_index += 1
        if self._state.placement_index < len(self._sides):
            return
        self._state.begin_play(self._config.moves_per_turn)
        self._journal.record(
            "play_started", side=0, message="All pieces placed; play begins"
        )
        logger.info("All pieces placed; %s to move", self._sides[0].name)
        self._apply_trapped_policy(previous_side=None)

    def _select(self, piece: Piece | PieceKey) -> None:
        current = self._require_playing()
        key = self._resolve_key(piece)
        if not current.owns(key):
            msg = f"{self.piece(key).name} does not belong to {current.name}."
            raise NotYourTurnError(msg, piece=key.model_dump())
        if self._state.phase is not TurnPhase.MOVE:
            msg = "Selection is locked during the build phase."
            raise NotYourTurnError(msg)
        if self._state.moved_this_turn and key != self._state.selected:
            msg = "The piece that already moved this turn must finish the turn."
            raise NotYourTurnError(msg, piece=key.model_dump())
        if not self.piece(key).is_placed:
            msg = f"{self.piece(key).name} is not on the board."
            raise IllegalMoveError(msg, piece=key.model_dump())
        self._state.selected = key

    def _clear_selection(self) -> None:
        self._require_playing()
        if self._state.phase is not TurnPhase.MOVE or self._state.moved_this_turn:
            msg = "Selection is locked once the selected piece has moved."
            raise NotYourTurnError(msg)
        self._state.selected = None

    def _move(self, piece: Piece | PieceKey, row: int, col: int) -> None:
        current = self._require_playing()
        key = self._resolve_key(piece)
        mover = self.piece(key)
        if not current.owns(key):
            msg = f"{mover.name} does not belong to {current.name}."
            raise NotYourTurnError(msg, piece=key.model_dump())
        if self._state.phase is not TurnPhase.MOVE:
            msg = f"{current.name} must build before moving again."
            raise NotYourTurnError(msg)
        if self._state.selected is not None and self._state.selected != key:
            if self._state.moved_this_turn:
                msg = "Only the piece that already moved may continue this turn."
                raise NotYourTurnError(msg, piece=key.model_dump())
        if mover.position is None:
            msg = f"{mover.name} is not on the board."
            raise IllegalMoveError(msg, piece=key.model_dump())

        target_cell = self._grid.cell_at(row, col)
        source = mover.position
        target = target_cell.position
        source_cell = self._grid.cell_for(source)
        ability = current.ability

        record = MoveRecord(piece=key, source=source, target=target)
        if ability is not None:
            ability.before_move(self, record)
        if not self._move_allowed(current.index, source, target):
            msg = (
                f"{mover.name} cannot move from {source.as_tuple()} "
                f"to ({row}, {col})."
            )
            raise IllegalMoveError(msg, row=row, col=col)

        source_height = source_cell.height
        target_height = target_cell.height
        displaced = target_cell.occupant
        if displaced is not None:
            self.piece(displaced).position = None
        self._grid.set_occupant(source_cell, None)
        self._grid.set_occupant(target_cell, key)
        mover.position = target
        self._state.selected = key

        if ability is not None:
            ability.after_move(self, record.model_copy(update={"displaced": displaced}))
        self._verify_board()

        self._journal.record(
            "piece_moved",
            side=current.index,
            message=f"{mover.name} moved {source.as_tuple()} -> ({row}, {col})",
            payload={
                "piece": key.model_dump(),
                "from": source.model_dump(),
                "to": target.model_dump(),
                "displaced": displaced.model_dump() if displaced else None,
            },
        )
        logger.info("%s moved %s -> (%d, %d)", mover.name, source.as_tuple(), row, col)

        if rules.is_winning_step(source_height, target_height):
            self._finish(current.index, reason="climbed to level 3")
            return

        self._state.moved_this_turn = True
        self._state.moves_remaining -= 1
        if self._state.moves_remaining > 0 and self.query_legal_moves(key):
            return
        self._state.enter_build()
        if not self.query_legal_builds(key):
            self._block_build(current, mover)

    def _block_build(self, current: Side, mover: Piece) -> None:
        """Leave the build phase when the piece that moved cannot build.

        Under ``forfeit`` the mover's side loses to the next side in order;
        otherwise the turn passes without a build.
        """
        self._journal.record(
            "build_blocked",
            side=current.index,
            message=f"{mover.name} has no legal build",
            payload={"piece": mover.key.model_dump()},
        )
        if self._config.trapped_side_policy is TrappedSidePolicy.FORFEIT:
            winner = (current.index + 1) % len(self._sides)
            self._finish(winner, reason=f"{mover.name} cannot build")
            return
        logger.info("%s has no legal build; passing the turn", mover.name)
        self._end_turn()

    def _build(self, row: int, col: int) -> None:
        current = self._require_playing()
        if self._state.phase is not TurnPhase.BUILD or self._state.selected is None:
            msg = f"{current.name} must move before building."
            raise NotYourTurnError(msg)
        worker = self.piece(self._state.selected)
        target_cell = self._grid.cell_at(row, col)
        target = target_cell.position
        ability = current.ability

        record = BuildRecord(piece=worker.key, worker=worker.position, target=target)
        if ability is not None:
            ability.before_build(self, record)
        if not self._build_allowed(current.index, worker.position, target):
            msg = f"{worker.name} cannot build on ({row}, {col})."
            raise IllegalBuildError(msg, row=row, col=col)

        self._grid.set_height(target_cell, target_cell.height + 1)
        follow_up = BuildFollowUp.END_TURN
        if ability is not None:
            follow_up = ability.after_build(
                self, record.model_copy(update={"new_height": target_cell.height})
            )
        self._verify_board()

        self._journal.record(
            "cell_built",
            side=current.index,
            message=f"{worker.name} built ({row}, {col}) to level {target_cell.height}",
            payload={"row": row, "col": col, "height": target_cell.height},
        )
        logger.info(
            "%s built (%d, %d) to level %d",
            worker.name,
            row,
            col,
            target_cell.height,
        )

        if follow_up is BuildFollowUp.BUILD_AGAIN:
            if self.query_legal_builds(worker.key):
                self._state.extra_build_pending = True
                return
            logger.debug("%s has no legal extra build; ending turn", current.name)
        self._end_turn()

    def _skip_extra_build(self) -> None:
        self._require_playing()
        if not self._state.extra_build_pending:
            msg = "There is no optional extra build to skip."
            raise IllegalBuildError(msg)
        self._end_turn()

    def _end_turn(self) -> None:
        finished = self._sides[self._state.current_side_index]
        if finished.ability is not None:
            finished.ability.reset_turn_state()
        next_index = self._state.pass_turn(
            len(self._sides), self._config.moves_per_turn
        )
        self._journal.record(
            "turn_passed",
            side=next_index,
            message=f"{self._sides[next_index].name} to move",
        )
        self._apply_trapped_policy(previous_side=finished.index)

    def _apply_trapped_policy(self, previous_side: int | None) -> None:
        current = self._sides[self._state.current_side_index]
        if self.has_any_legal_move(current):
            return
        self._journal.record(
            "side_trapped", side=current.index, message=f"{current.name} cannot move"
        )
        if self._config.trapped_side_policy is not TrappedSidePolicy.FORFEIT:
            logger.info("%s has no legal move", current.name)
            return
        if previous_side is None:
            previous_side = (current.index - 1) % len(self._sides)
        self._finish(previous_side, reason=f"{current.name} is trapped")

    def _finish(self, winner: int, *, reason: str) -> None:
        for side in self._sides:
            if side.ability is not None:
                side.ability.reset_turn_state()
        self._state.finish(winner)
        self._journal.record(
            "game_over",
            side=winner,
            message=f"{self._sides[winner].name} wins: {reason}",
            payload={"reason": reason},
        )
        logger.info("Game over: %s wins (%s)", self._sides[winner].name, reason)

    def _verify_board(self) -> None:
        """Check that every piece and every cell agree about occupancy."""
        for side in self._sides:
            for piece in side.pieces[: side.placed]:
                if piece.position is None:
                    msg = f"{piece.name} was left off the board."
                    raise AbilityInvariantError(msg, piece=piece.key.model_dump())
                if self._grid.cell_for(piece.position).occupant != piece.key:
                    msg = f"{piece.name} and its cell disagree about occupancy."
                    raise AbilityInvariantError(msg, piece=piece.key.model_dump())
        for cell in self._grid:
            if cell.occupant is None:
                continue
            if self.piece(cell.occupant).position != cell.position:
                msg = f"Cell {cell.position.as_tuple()} lists a misplaced piece."
                raise AbilityInvariantError(msg, row=cell.row, col=cell.col)


__all__ = ["ActionResult", "GameEngine"]
