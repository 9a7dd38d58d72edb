"""Configuration dataclasses for simulation runs and machine kinds.

All frozen dataclasses that parameterise a run live here: the grid/engine
settings, the machine-kind descriptors supplied by the configuring layer, and
the per-reset overrides of quantity and enabled flag.
"""

from __future__ import annotations

from dataclasses import dataclass

from turmite_world.config.constants import GRID_HEIGHT, GRID_WIDTH, TICKS_PER_BATCH
from turmite_world.domain.rules import (
    AntRules,
    ConfigurationError,
    DragonflyRules,
    RuleTable,
    TurmiteRules,
    normalize_color,
)

__all__ = [
    "KindOverride",
    "MachineKind",
    "SimulationConfig",
]


# ---------------------------------------------------------------------------
# Run settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SimulationConfig:
    """Grid and batching settings for one engine.

    ``background`` defaults to the first palette color of the first machine
    kind. ``seed`` seeds placement, initial headings and dragonfly re-aiming.
    """

    grid_width: int = GRID_WIDTH
    grid_height: int = GRID_HEIGHT
    background: str | None = None
    ticks_per_batch: int = TICKS_PER_BATCH
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.grid_width < 1:
            raise ConfigurationError("grid_width must be >= 1")
        if self.grid_height < 1:
            raise ConfigurationError("grid_height must be >= 1")
        if self.ticks_per_batch < 1:
            raise ValueError("ticks_per_batch must be >= 1")
        if self.background is not None:
            object.__setattr__(self, "background", normalize_color(self.background))

    @property
    def cell_count(self) -> int:
        return self.grid_width * self.grid_height


# ---------------------------------------------------------------------------
# Machine kinds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MachineKind:
    """A configured kind of machine; every spawned machine shares its ``rules``.

    ``kind_id`` is the stable identifier used to enable, disable and override
    the kind. ``name`` is display-only.
    """

    kind_id: str
    name: str
    rules: RuleTable
    default_quantity: int = 1
    enabled: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.kind_id, str) or not self.kind_id.strip():
            raise ConfigurationError(f"kind_id must be a non-empty string, got {self.kind_id!r}")
        if not isinstance(self.name, str):
            raise ConfigurationError(f"kind {self.kind_id!r}: name must be a string")
        if not isinstance(self.rules, (AntRules, TurmiteRules, DragonflyRules)):
            raise ConfigurationError(f"kind {self.kind_id!r} has no valid rule table")
        if isinstance(self.default_quantity, bool) or not isinstance(self.default_quantity, int):
            raise ConfigurationError(f"kind {self.kind_id!r}: default_quantity must be an integer")
        if self.default_quantity < 0:
            raise ConfigurationError(f"kind {self.kind_id!r}: default_quantity must be >= 0")


@dataclass(frozen=True)
class KindOverride:
    """Per-reset override of a kind's quantity and/or enabled flag."""

    quantity: int | None = None
    enabled: bool | None = None

    def __post_init__(self) -> None:
        if self.quantity is not None and self.quantity < 0:
            raise ConfigurationError("quantity must be >= 0")
