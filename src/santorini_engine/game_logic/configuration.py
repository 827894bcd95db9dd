"""Game configuration objects and environment-backed defaults."""

from __future__ import annotations

from functools import cache

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from santorini_engine.shared.enums import SIDE_PALETTE, TrappedSidePolicy

MIN_GRID_SIZE = 2
MAX_GRID_SIZE = 26
MAX_SIDES = len(SIDE_PALETTE)


class GameConfiguration(BaseModel):
    """Immutable parameters fixed for the lifetime of one game."""

    model_config = ConfigDict(frozen=True)

    grid_size: int = Field(default=5, ge=MIN_GRID_SIZE, le=MAX_GRID_SIZE)
    num_sides: int = Field(default=2, ge=1, le=MAX_SIDES)
    pieces_per_side: int = Field(default=2, ge=1)
    moves_per_turn: int = Field(default=1, ge=1)
    trapped_side_policy: TrappedSidePolicy = TrappedSidePolicy.ADVISORY

    @model_validator(mode="after")
    def _validate_capacity(self) -> GameConfiguration:
        """Ensure every piece can be placed on its own cell."""
        total_pieces = self.num_sides * self.pieces_per_side
        if total_pieces > self.grid_size * self.grid_size:
            msg = (
                f"{total_pieces} pieces do not fit on a "
                f"{self.grid_size}x{self.grid_size} grid."
            )
            raise ValueError(msg)
        return self

    @property
    def total_pieces(self) -> int:
        return self.num_sides * self.pieces_per_side


class GameDefaults(BaseSettings):
    """Load default game parameters from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SANTORINI_GAME_",
        extra="ignore",
    )

    grid_size: int = Field(default=5, ge=MIN_GRID_SIZE, le=MAX_GRID_SIZE)
    num_sides: int = Field(default=2, ge=1, le=MAX_SIDES)
    pieces_per_side: int = Field(default=2, ge=1)
    moves_per_turn: int = Field(default=1, ge=1)
    trapped_side_policy: TrappedSidePolicy = TrappedSidePolicy.ADVISORY

    def to_config(self) -> GameConfiguration:
        """Convert defaults into an immutable configuration object."""
        return GameConfiguration(
            grid_size=self.grid_size,
            num_sides=self.num_sides,
            pieces_per_side=self.pieces_per_side,
            moves_per_turn=self.moves_per_turn,
            trapped_side_policy=self.trapped_side_policy,
        )


class ConfigurationOverrides(BaseModel):
    """Optional per-game overrides applied on top of the defaults."""

    model_config = ConfigDict(frozen=True)

    grid_size: int | None = Field(default=None, ge=MIN_GRID_SIZE, le=MAX_GRID_SIZE)
    num_sides: int | None = Field(default=None, ge=1, le=MAX_SIDES)
    pieces_per_side: int | None = Field(default=None, ge=1)
    moves_per_turn: int | None = Field(default=None, ge=1)
    trapped_side_policy: TrappedSidePolicy | None = None

    def apply(self, config: GameConfiguration) -> GameConfiguration:
        """Return a copy of *config* with the non-empty overrides applied."""
        updates = self.model_dump(exclude_none=True)
        if not updates:
            return config
        return GameConfiguration(**{**config.model_dump(), **updates})


@cache
def get_default_game_configuration() -> GameConfiguration:
    """Return the cached default game configuration."""
    return GameDefaults().to_config()


def build_game_configuration(
    overrides: ConfigurationOverrides | None = None,
) -> GameConfiguration:
    """Construct a configuration from the defaults and optional overrides."""
    defaults = get_default_game_configuration()
    if overrides is None:
        return defaults
    return overrides.apply(defaults)


__all__ = [
    "MAX_GRID_SIZE",
    "MAX_SIDES",
    "MIN_GRID_SIZE",
    "ConfigurationOverrides",
    "GameConfiguration",
    "GameDefaults",
    "build_game_configuration",
    "get_default_game_configuration",
]
