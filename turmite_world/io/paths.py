"""Path construction helpers for run output directories."""

from __future__ import annotations

from pathlib import Path


def logs_dir(out_dir: Path) -> Path:
    """Return path to the logs subdirectory within an output directory."""
    return out_dir / "logs"


def machine_trace_path(out_dir: Path) -> Path:
    """Return path to the per-batch machine trace Parquet file."""
    return logs_dir(out_dir) / "machine_trace.parquet"


def touched_cells_path(out_dir: Path) -> Path:
    """Return path to the per-batch touched-cells Parquet file."""
    return logs_dir(out_dir) / "touched_cells.parquet"


def summary_path(out_dir: Path) -> Path:
    """Return path to the run summary JSON file."""
    return out_dir / "summary.json"
