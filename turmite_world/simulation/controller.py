"""Start/pause/speed driver that pulls batches from an ``Engine``."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from turmite_world.config.constants import TICKS_PER_BATCH
from turmite_world.config.types import KindOverride
from turmite_world.simulation.engine import Engine, MachineSnapshot


@dataclass(frozen=True)
class FrameUpdate:
    """Everything a renderer needs after one frame."""

    tick: int
    touched: dict[tuple[int, int], str]
    machines: list[MachineSnapshot]


class SimulationController:
    """Runs ``ticks_per_frame`` ticks per ``frame()`` call while running.

    Speed is pure throughput: it changes how many ticks each frame covers,
    never what a tick does.
    """

    def __init__(
        self, engine: Engine, ticks_per_frame: int = TICKS_PER_BATCH, running: bool = True
    ) -> None:
        self.engine = engine
        self.ticks_per_frame = 0
        self.set_speed(ticks_per_frame)
        self._running = running

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._running = True

    def pause(self) -> None:
        self._running = False

    def toggle(self) -> bool:
        """Flip between running and paused; returns the new running state."""
        self._running = not self._running
        return self._running

    def set_speed(self, ticks_per_frame: int) -> None:
        if ticks_per_frame < 1:
            raise ValueError("ticks_per_frame must be >= 1")
        self.ticks_per_frame = ticks_per_frame

    def reset(self, overrides: Mapping[str, KindOverride] | None = None) -> None:
        """Rebuild the engine and resume running."""
        self.engine.reset(overrides)
        self._running = True

    def frame(self) -> FrameUpdate:
        """Advance one batch if running, then report what changed.

        A paused frame still drains cells touched by a reset or toggle.
        """
        if self._running:
            self.engine.step(self.ticks_per_frame)
        return FrameUpdate(
            tick=self.engine.tick_count,
            touched=self.engine.touched_cells(),
            machines=self.engine.snapshots(),
        )
