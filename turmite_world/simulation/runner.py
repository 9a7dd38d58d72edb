"""Headless sessions: run batches and stream a trace log to Parquet."""

from __future__ import annotations

import json
import logging
import math
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from random import Random

from turmite_world.config.constants import FLUSH_THRESHOLD
from turmite_world.config.types import KindOverride, MachineKind, SimulationConfig
from turmite_world.io.kinds import kind_to_payload
from turmite_world.io.paths import logs_dir, machine_trace_path, summary_path, touched_cells_path
from turmite_world.io.schemas import (
    MACHINE_TRACE_SCHEMA,
    SUMMARY_SCHEMA_VERSION,
    TOUCHED_CELLS_SCHEMA,
)
from turmite_world.metrics.coverage import (
    color_histogram,
    coverage_fraction,
    same_color_adjacency_fraction,
)
from turmite_world.simulation.controller import FrameUpdate, SimulationController
from turmite_world.simulation.engine import Engine
from turmite_world.simulation.persistence import TraceLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionResult:
    """Where a session's outputs went, plus the summary written to disk."""

    ticks: int
    machine_trace_path: Path
    touched_cells_path: Path
    summary_path: Path
    summary: dict[str, object]


def run_session(
    config: SimulationConfig,
    kinds: Sequence[MachineKind],
    out_dir: str | Path,
    batches: int,
    overrides: Mapping[str, KindOverride] | None = None,
    rng: Random | None = None,
) -> SessionResult:
    """Run *batches* frames of ``config.ticks_per_batch`` ticks and log every batch.

    Each batch appends one row per active machine to ``logs/machine_trace.parquet``
    and one row per touched cell to ``logs/touched_cells.parquet``. The full-grid
    repaint from the initial reset is not logged: every row describes a change
    made by a machine. ``summary.json`` is written last.
    """
    if batches < 0:
        raise ValueError("batches must be >= 0")

    out_dir = Path(out_dir)
    logs_dir(out_dir).mkdir(parents=True, exist_ok=True)
    trace_path = machine_trace_path(out_dir)
    cells_path = touched_cells_path(out_dir)

    engine = Engine(config, kinds, rng=rng, overrides=overrides)
    controller = SimulationController(engine, ticks_per_frame=config.ticks_per_batch)
    engine.touched_cells()

    trace_log = TraceLog(trace_path, MACHINE_TRACE_SCHEMA, FLUSH_THRESHOLD)
    cell_log = TraceLog(cells_path, TOUCHED_CELLS_SCHEMA, FLUSH_THRESHOLD)

    try:
        for batch in range(batches):
            update = controller.frame()
            _append_frame(batch, update, trace_log, cell_log)
            for label, log in (("machine trace", trace_log), ("touched cell", cell_log)):
                pending = log.pending
                if log.maybe_flush():
                    logger.info("flushed %d %s rows to %s", pending, label, log.path)
        trace_log.flush()
        cell_log.flush()
    finally:
        trace_log.close()
        cell_log.close()
    logger.debug(
        "wrote %d machine trace rows and %d touched cell rows",
        trace_log.rows_written,
        cell_log.rows_written,
    )

    summary = build_summary(engine, batches)
    out_summary = summary_path(out_dir)
    out_summary.write_text(json.dumps(summary, ensure_ascii=False, indent=2))
    logger.info("session finished after %d ticks; summary at %s", engine.tick_count, out_summary)

    return SessionResult(
        ticks=engine.tick_count,
        machine_trace_path=trace_path,
        touched_cells_path=cells_path,
        summary_path=out_summary,
        summary=summary,
    )


def _append_frame(
    batch: int, update: FrameUpdate, trace_log: TraceLog, cell_log: TraceLog
) -> None:
    for snapshot in update.machines:
        trace_log.append(
            batch=batch,
            tick=update.tick,
            machine_id=snapshot.machine_id,
            kind_id=snapshot.kind_id,
            x=snapshot.x,
            y=snapshot.y,
            orientation=snapshot.orientation,
            color=snapshot.color,
        )
    for (x, y), color in sorted(update.touched.items(), key=lambda item: (item[0][1], item[0][0])):
        cell_log.append(batch=batch, tick=update.tick, x=x, y=y, color=color)


def build_summary(engine: Engine, batches: int) -> dict[str, object]:
    """JSON-serializable description of an engine's configuration and final grid."""
    grid = engine.grid
    adjacency = same_color_adjacency_fraction(grid)
    per_kind = Counter(machine.kind_id for machine in engine.machines)
    return {
        "schema_version": SUMMARY_SCHEMA_VERSION,
        "ticks": engine.tick_count,
        "batches": batches,
        "ticks_per_batch": engine.config.ticks_per_batch,
        "seed": engine.config.seed,
        "grid": {"width": grid.width, "height": grid.height, "background": grid.background},
        "kinds": [
            {
                **kind_to_payload(kind),
                "enabled": engine.is_kind_enabled(kind.kind_id),
                "spawned": per_kind.get(kind.kind_id, 0),
            }
            for kind in engine.kinds
        ],
        "machines": {"total": len(engine.machines), "active": engine.active_count},
        "color_histogram": color_histogram(grid),
        "coverage_fraction": coverage_fraction(grid),
        "same_color_adjacency_fraction": None if math.isnan(adjacency) else adjacency,
    }
