"""Core rule engine: grid, rules, abilities and turn orchestration."""

from santorini_engine.game_logic.abilities import (
    ABILITY_FACTORIES,
    Ability,
    AbilityName,
    ApolloAbility,
    BoardAccess,
    BuildRecord,
    DemeterAbility,
    MoveRecord,
    create_ability,
)
from santorini_engine.game_logic.configuration import (
    ConfigurationOverrides,
    GameConfiguration,
    GameDefaults,
    build_game_configuration,
    get_default_game_configuration,
)
from santorini_engine.game_logic.engine import ActionResult, GameEngine
from santorini_engine.game_logic.grid import Cell, Grid
from santorini_engine.game_logic.phases import BuildFollowUp, GameStage, TurnPhase
from santorini_engine.game_logic.snapshot import (
    CellView,
    GameSnapshot,
    PieceView,
    SideView,
)
from santorini_engine.game_logic.state import Piece, Side, TurnState

__all__ = [
    "ABILITY_FACTORIES",
    "Ability",
    "AbilityName",
    "ActionResult",
    "ApolloAbility",
    "BoardAccess",
    "BuildFollowUp",
    "BuildRecord",
    "Cell",
    "CellView",
    "ConfigurationOverrides",
    "DemeterAbility",
    "GameConfiguration",
    "GameDefaults",
    "GameEngine",
    "GameSnapshot",
    "GameStage",
    "Grid",
    "MoveRecord",
    "Piece",
    "PieceView",
    "Side",
    "SideView",
    "TurnPhase",
    "TurnState",
    "build_game_configuration",
    "create_ability",
    "get_default_game_configuration",
]
