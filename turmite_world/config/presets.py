"""Built-in machine kinds offered when no kinds file is supplied."""

from __future__ import annotations

from turmite_world.config.types import MachineKind
from turmite_world.domain.rules import AntRules, DragonflyRules, TurmiteRules

CLASSIC_ANT = MachineKind(
    kind_id="classic-ant",
    name="Classic Ant",
    rules=AntRules.from_string(("#000000", "#E0E0E0"), "RL"),
    default_quantity=1,
)

THREE_COLOR_ANT = MachineKind(
    kind_id="three-color-ant",
    name="3-Color Ant",
    rules=AntRules.from_string(("#000000", "#FF5733", "#33FF57"), "RLL"),
    default_quantity=1,
)

CHAOTIC_WEAVER = MachineKind(
    kind_id="chaotic-weaver",
    name="Chaotic Weaver Turmite",
    rules=TurmiteRules.from_mapping(
        ("#1A1A1A", "#FF5733", "#33FF57", "#33A7FF"),
        {
            0: [[1, 1, 0], [2, -1, 1], [3, 1, 1], [0, 2, 0]],
            1: [[3, -1, 0], [0, 1, 0], [1, -1, 1], [2, 2, 1]],
        },
    ),
    default_quantity=2,
)

DRAGONFLY = MachineKind(
    kind_id="dragonfly",
    name="Dragonfly",
    rules=DragonflyRules(palette=("#101010", "#87CEEB", "#FFD700"), dart_length=8),
    default_quantity=2,
)

SPIRAL_GROWTH = MachineKind(
    kind_id="spiral-growth",
    name="Spiral Growth Turmite",
    rules=TurmiteRules.from_mapping(
        ("#202020", "#FFC300"),
        {
            0: [[1, 1, 0], [1, -1, 1]],
            1: [[0, -1, 1], [0, 1, 0]],
        },
    ),
    default_quantity=1,
)

DEFAULT_MACHINE_KINDS: tuple[MachineKind, ...] = (
    CLASSIC_ANT,
    THREE_COLOR_ANT,
    CHAOTIC_WEAVER,
    DRAGONFLY,
    SPIRAL_GROWTH,
)
"""Presets in registration order; the first kind's background is the grid default."""
