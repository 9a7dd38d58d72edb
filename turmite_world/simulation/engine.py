"""Simulation engine: owns the grid and machines and advances them in batches."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from random import Random

import numpy as np

from turmite_world.config.types import KindOverride, MachineKind, SimulationConfig
from turmite_world.domain.grid import Grid
from turmite_world.domain.machine import Machine, Orientation, advance_machine
from turmite_world.domain.rules import ConfigurationError, agent_color
from turmite_world.simulation.spawning import resolve_plan, spawn_machines, validate_kinds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MachineSnapshot:
    """Read-only view of an active machine for renderers and trace logs."""

    machine_id: int
    kind_id: str
    x: int
    y: int
    orientation: int
    color: str


class Engine:
    """Drives every machine over a shared toroidal grid.

    One tick runs each active machine once, in registration order, so a later
    machine sees what earlier machines painted in the same tick. Inactive
    machines keep their position and counters and resume when re-enabled.
    The engine has no clock: callers pull work with ``step(n_ticks)``.
    """

    def __init__(
        self,
        config: SimulationConfig,
        kinds: Sequence[MachineKind],
        rng: Random | None = None,
        overrides: Mapping[str, KindOverride] | None = None,
    ) -> None:
        self.config = config
        self.kinds = validate_kinds(kinds)
        self._kinds_by_id = {kind.kind_id: kind for kind in self.kinds}
        self._rng = rng if rng is not None else Random(config.seed)
        self._enabled = {kind.kind_id: kind.enabled for kind in self.kinds}
        self.grid: Grid
        self.machines: list[Machine] = []
        self.tick_count = 0
        self.reset(overrides)

    @property
    def background(self) -> str:
        if self.config.background is not None:
            return self.config.background
        if not self.kinds:
            raise ConfigurationError("background must be set when no machine kinds are configured")
        return self.kinds[0].rules.palette[0]

    def reset(self, overrides: Mapping[str, KindOverride] | None = None) -> None:
        """Rebuild the grid and every machine from scratch.

        Enabled flags given in *overrides* are remembered for later resets.
        """
        plan = resolve_plan(self.kinds, overrides, self._enabled)
        grid = Grid(self.config.grid_width, self.config.grid_height, self.background)
        machines = spawn_machines(plan, grid.width, grid.height, self._rng)

        self.grid = grid
        self.machines = machines
        self.tick_count = 0
        self._enabled = {kind.kind_id: enabled for kind, _, enabled in plan}
        per_kind = Counter(machine.kind_id for machine in machines)
        logger.info(
            "reset %dx%d grid with %d machines (%s)",
            grid.width,
            grid.height,
            len(machines),
            ", ".join(f"{kind_id}={n}" for kind_id, n in per_kind.items()) or "none",
        )

    def step(self, n_ticks: int) -> int:
        """Advance *n_ticks* ticks and return the total tick count."""
        if n_ticks < 0:
            raise ValueError("n_ticks must be >= 0")
        grid = self.grid
        rng = self._rng
        machines = self.machines
        for _ in range(n_ticks):
            for machine in machines:
                if machine.active:
                    advance_machine(machine, grid, rng)
            self.tick_count += 1
        return self.tick_count

    def touched_cells(self) -> dict[tuple[int, int], str]:
        """Cells written since the previous call, with their current color."""
        return self.grid.drain_touched()

    def snapshots(self) -> list[MachineSnapshot]:
        """Position, heading and draw color of every active machine."""
        return [
            MachineSnapshot(
                machine_id=machine.machine_id,
                kind_id=machine.kind_id,
                x=machine.x,
                y=machine.y,
                orientation=int(machine.orientation),
                color=agent_color(machine.rules),
            )
            for machine in self.machines
            if machine.active
        ]

    def grid_colors(self) -> tuple[np.ndarray, tuple[str, ...]]:
        """Copy of the ``(height, width)`` cell-code matrix and its color table."""
        return self.grid.codes(), self.grid.colors

    @property
    def active_count(self) -> int:
        return sum(1 for machine in self.machines if machine.active)

    def is_kind_enabled(self, kind_id: str) -> bool:
        return self._enabled[kind_id]

    def set_kind_enabled(self, kind_id: str, enabled: bool) -> int:
        """Toggle every machine of *kind_id*; returns how many machines changed."""
        if kind_id not in self._kinds_by_id:
            raise KeyError(kind_id)
        self._enabled[kind_id] = enabled
        changed = 0
        for machine in self.machines:
            if machine.kind_id == kind_id and machine.active != enabled:
                machine.active = enabled
                changed += 1
        logger.info(
            "%s kind %s (%d machines)", "enabled" if enabled else "disabled", kind_id, changed
        )
        return changed

    def place_machine(
        self,
        kind_id: str,
        x: int,
        y: int,
        orientation: int = Orientation.UP,
        active: bool = True,
    ) -> Machine:
        """Append a machine of *kind_id* at an exact cell.

        Unlike ``reset`` this does not avoid occupied cells; it exists to set
        up specific interactions.
        """
        kind = self._kinds_by_id[kind_id]
        self.grid.check_bounds(x, y)
        machine = Machine(
            machine_id=len(self.machines),
            kind_id=kind.kind_id,
            rules=kind.rules,
            x=x,
            y=y,
            orientation=orientation,
            active=active,
        )
        self.machines.append(machine)
        return machine
