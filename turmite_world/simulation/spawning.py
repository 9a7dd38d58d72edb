"""Collision-free machine placement."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from random import Random

from turmite_world.config.constants import NUM_ORIENTATIONS
from turmite_world.config.types import KindOverride, MachineKind
from turmite_world.domain.machine import Machine
from turmite_world.domain.rules import ConfigurationError


def validate_kinds(kinds: Sequence[MachineKind]) -> tuple[MachineKind, ...]:
    """Return *kinds* as a tuple, rejecting duplicate ids."""
    seen: set[str] = set()
    for kind in kinds:
        if kind.kind_id in seen:
            raise ConfigurationError(f"duplicate kind_id {kind.kind_id!r}")
        seen.add(kind.kind_id)
    return tuple(kinds)


def resolve_plan(
    kinds: Sequence[MachineKind],
    overrides: Mapping[str, KindOverride] | None,
    enabled_state: Mapping[str, bool] | None = None,
) -> list[tuple[MachineKind, int, bool]]:
    """Resolve ``(kind, quantity, enabled)`` per kind, in registration order.

    Precedence for ``enabled``: override > *enabled_state* > the kind's default.
    Quantity comes from the override, else ``default_quantity``.
    """
    overrides = overrides or {}
    known = {kind.kind_id for kind in kinds}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigurationError(f"overrides name unknown kinds: {', '.join(unknown)}")

    plan: list[tuple[MachineKind, int, bool]] = []
    for kind in kinds:
        override = overrides.get(kind.kind_id, KindOverride())
        quantity = kind.default_quantity if override.quantity is None else override.quantity
        if override.enabled is not None:
            enabled = override.enabled
        elif enabled_state is not None and kind.kind_id in enabled_state:
            enabled = enabled_state[kind.kind_id]
        else:
            enabled = kind.enabled
        plan.append((kind, quantity, enabled))
    return plan


def spawn_machines(
    plan: Sequence[tuple[MachineKind, int, bool]],
    grid_width: int,
    grid_height: int,
    rng: Random,
) -> list[Machine]:
    """Place every planned machine on a distinct random cell with a random heading.

    Machine ids follow registration order: all machines of the first kind,
    then the second, and so on.
    """
    total = sum(quantity for _, quantity, _ in plan)
    n_cells = grid_width * grid_height
    if total > n_cells:
        raise ConfigurationError(
            f"cannot place {total} machines on a {grid_width}x{grid_height} grid"
        )

    # Sample unique cells
    cells = rng.sample(range(n_cells), total)

    machines: list[Machine] = []
    for kind, quantity, enabled in plan:
        for _ in range(quantity):
            cell = cells[len(machines)]
            machines.append(
                Machine(
                    machine_id=len(machines),
                    kind_id=kind.kind_id,
                    rules=kind.rules,
                    x=cell % grid_width,
                    y=cell // grid_width,
                    orientation=rng.randrange(NUM_ORIENTATIONS),
                    active=enabled,
                )
            )
    return machines
