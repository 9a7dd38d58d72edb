"""CLI entrypoint for headless simulation sessions.

This module owns CLI argument parsing and config resolution. Simulation logic
lives in:

- ``turmite_world.config``             – defaults, dataclasses, built-in kinds
- ``turmite_world.io.kinds``           – JSON machine-kind loader
- ``turmite_world.simulation.runner``  – ``run_session`` trace-log driver
"""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Sequence
from pathlib import Path

from turmite_world.config.constants import GRID_HEIGHT, GRID_WIDTH, TICKS_PER_BATCH
from turmite_world.config.presets import DEFAULT_MACHINE_KINDS
from turmite_world.config.types import KindOverride, MachineKind, SimulationConfig
from turmite_world.io.coerce import as_count, as_text
from turmite_world.io.kinds import kinds_document, load_kinds
from turmite_world.simulation.runner import run_session

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

DEFAULT_BATCHES = 20
"""Batches run when neither the CLI nor the config file says otherwise."""

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# ---------------------------------------------------------------------------
# CLI parsing helpers
# ---------------------------------------------------------------------------


def _resolve(cli_val: object, key: str, file_cfg: dict[str, object], default: object) -> object:
    """CLI > file > default resolution."""
    return cli_val if cli_val is not None else file_cfg.get(key, default)


def _get_int(cli_val: int | None, key: str, file_cfg: dict[str, object], default: int) -> int:
    return as_count(_resolve(cli_val, key, file_cfg, default), key)


def _get_optional_int(cli_val: int | None, key: str, file_cfg: dict[str, object]) -> int | None:
    raw = _resolve(cli_val, key, file_cfg, None)
    return None if raw is None else as_count(raw, key)


def _get_str(cli_val: str | None, key: str, file_cfg: dict[str, object], default: str) -> str:
    return as_text(_resolve(cli_val, key, file_cfg, default), key)


def _get_optional_str(cli_val: str | None, key: str, file_cfg: dict[str, object]) -> str | None:
    raw = _resolve(cli_val, key, file_cfg, None)
    return None if raw is None else as_text(raw, key)


def _parse_quantity(raw: str) -> tuple[str, int]:
    """Parse a ``KIND=N`` quantity override."""
    kind_id, sep, count = raw.partition("=")
    if not sep or not kind_id.strip():
        raise ValueError(f"quantity must use KIND=N format, got {raw!r}")
    kind_id = kind_id.strip()
    return kind_id, as_count(count, f"quantity for {kind_id}", minimum=0)


def _file_quantities(file_cfg: dict[str, object]) -> dict[str, int]:
    raw = file_cfg.get("quantities", {})
    if not isinstance(raw, dict):
        raise ValueError("quantities must be an object mapping kind id to count")
    return {
        str(kind_id): as_count(count, f"quantity for {kind_id}", minimum=0)
        for kind_id, count in raw.items()
    }


def _file_kind_list(file_cfg: dict[str, object], key: str) -> list[str]:
    raw = file_cfg.get(key, [])
    if not isinstance(raw, list):
        raise ValueError(f"{key} must be a list of kind ids")
    return [as_text(kind_id, key) for kind_id in raw]


def _build_overrides(
    quantities: dict[str, int], enabled: Sequence[str], disabled: Sequence[str]
) -> dict[str, KindOverride]:
    """Merge quantity and enable/disable requests into per-kind overrides."""
    conflicting = sorted(set(enabled) & set(disabled))
    if conflicting:
        raise ValueError(f"kinds both enabled and disabled: {', '.join(conflicting)}")
    kind_ids = [*quantities, *enabled, *disabled]
    overrides: dict[str, KindOverride] = {}
    for kind_id in dict.fromkeys(kind_ids):
        state: bool | None = None
        if kind_id in enabled:
            state = True
        elif kind_id in disabled:
            state = False
        overrides[kind_id] = KindOverride(quantity=quantities.get(kind_id), enabled=state)
    return overrides


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Run ants, turmites and dragonflies on a toroidal grid"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    parser.add_argument(
        "--kinds",
        type=Path,
        default=None,
        help="JSON machine-kind file (defaults to the built-in kinds)",
    )
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--background", type=str, default=None)
    parser.add_argument("--ticks-per-batch", type=int, default=None)
    parser.add_argument("--batches", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--out-dir", type=Path, default=None)
    parser.add_argument(
        "--quantity",
        action="append",
        default=[],
        metavar="KIND=N",
        help="Override how many machines of KIND spawn (repeatable)",
    )
    parser.add_argument("--enable", action="append", default=[], metavar="KIND")
    parser.add_argument("--disable", action="append", default=[], metavar="KIND")
    parser.add_argument(
        "--list-kinds",
        action="store_true",
        help="Print the resolved machine kinds as JSON and exit",
    )
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=None)
    return parser


# ---------------------------------------------------------------------------
# Main CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for a headless session.

    Supports ``--config path/to/config.json`` for reproducible runs. CLI
    arguments override config-file values; config-file values override
    built-in defaults.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Load config file defaults (CLI overrides file, file overrides built-in)
    file_cfg: dict[str, object] = {}
    if args.config is not None:
        try:
            file_cfg = json.loads(Path(args.config).read_text(encoding="utf-8"))
        except FileNotFoundError:
            parser.error(f"Config file not found: {args.config}")
        except (OSError, UnicodeDecodeError) as exc:
            parser.error(f"Cannot read config file {args.config}: {exc}")
        except json.JSONDecodeError as exc:
            parser.error(f"Config file is not valid JSON: {args.config}: {exc}")
        if not isinstance(file_cfg, dict):
            parser.error(f"Config file must contain a JSON object: {args.config}")

    try:
        log_level = _get_str(args.log_level, "log_level", file_cfg, "WARNING").upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        logging.basicConfig(
            level=getattr(logging, log_level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        kinds_path = _get_optional_str(
            None if args.kinds is None else str(args.kinds), "kinds", file_cfg
        )
        kinds: tuple[MachineKind, ...] = (
            DEFAULT_MACHINE_KINDS if kinds_path is None else load_kinds(Path(kinds_path))
        )
        if args.list_kinds:
            print(json.dumps(kinds_document(kinds), ensure_ascii=False, indent=2))
            return

        config = SimulationConfig(
            grid_width=_get_int(args.width, "width", file_cfg, GRID_WIDTH),
            grid_height=_get_int(args.height, "height", file_cfg, GRID_HEIGHT),
            background=_get_optional_str(args.background, "background", file_cfg),
            ticks_per_batch=_get_int(
                args.ticks_per_batch, "ticks_per_batch", file_cfg, TICKS_PER_BATCH
            ),
            seed=_get_optional_int(args.seed, "seed", file_cfg),
        )
        batches = _get_int(args.batches, "batches", file_cfg, DEFAULT_BATCHES)
        cli_out_dir = None if args.out_dir is None else str(args.out_dir)
        out_dir = Path(_get_str(cli_out_dir, "out_dir", file_cfg, "data"))

        quantities = _file_quantities(file_cfg)
        quantities.update(_parse_quantity(raw) for raw in args.quantity)
        # CLI flags win over a file entry naming the same kind the other way.
        enabled = [
            *(k for k in _file_kind_list(file_cfg, "enable") if k not in args.disable),
            *args.enable,
        ]
        disabled = [
            *(k for k in _file_kind_list(file_cfg, "disable") if k not in args.enable),
            *args.disable,
        ]
        overrides = _build_overrides(quantities, enabled, disabled)

        result = run_session(config, kinds, out_dir, batches, overrides=overrides)
    except ValueError as exc:
        parser.error(str(exc))

    summary = {
        "out_dir": str(out_dir),
        "ticks": result.ticks,
        "grid": result.summary["grid"],
        "machines": result.summary["machines"],
        "coverage_fraction": result.summary["coverage_fraction"],
        "same_color_adjacency_fraction": result.summary["same_color_adjacency_fraction"],
    }
    print(json.dumps(summary, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
