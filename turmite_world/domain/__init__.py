"""Domain layer: grid model, rule families, and machine state."""

from turmite_world.domain.grid import Grid
from turmite_world.domain.machine import (
    Machine,
    Orientation,
    StepOutcome,
    advance_machine,
    evaluate,
)
from turmite_world.domain.rules import (
    AntRules,
    ConfigurationError,
    DragonflyRules,
    RuleTable,
    Transition,
    Turn,
    TurmiteRules,
    agent_color,
    color_index_of,
    normalize_color,
    palette_color,
    rule_family,
)

__all__ = [
    "AntRules",
    "ConfigurationError",
    "DragonflyRules",
    "Grid",
    "Machine",
    "Orientation",
    "RuleTable",
    "StepOutcome",
    "Transition",
    "Turn",
    "TurmiteRules",
    "advance_machine",
    "agent_color",
    "color_index_of",
    "evaluate",
    "normalize_color",
    "palette_color",
    "rule_family",
]
