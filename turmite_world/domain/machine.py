"""Machine state and the per-family step function."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from random import Random
from typing import TYPE_CHECKING, assert_never

from turmite_world.config.constants import NUM_ORIENTATIONS, SQUARE_SIDES
from turmite_world.domain.rules import (
    AntRules,
    DragonflyRules,
    RuleTable,
    Turn,
    TurmiteRules,
    color_index_of,
    rule_family,
)

if TYPE_CHECKING:
    from turmite_world.domain.grid import Grid

logger = logging.getLogger(__name__)


class Orientation(IntEnum):
    """Heading encoded 0-3, clockwise from up."""

    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @property
    def delta(self) -> tuple[int, int]:
        return _MOVES[self.value]


# (dx, dy) per orientation; y grows downward.
_MOVES: tuple[tuple[int, int], ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))


@dataclass
class Machine:
    """A single agent: position, heading, and per-family counters.

    ``rules`` is shared with every other machine of the same kind and never
    mutated. ``internal_state`` is used by turmites; ``steps_taken``,
    ``sides_completed`` and ``squares_completed`` by dragonflies.
    """

    machine_id: int
    kind_id: str
    rules: RuleTable
    x: int
    y: int
    orientation: int = Orientation.UP
    active: bool = True
    internal_state: int = 0
    steps_taken: int = 0
    sides_completed: int = 0
    squares_completed: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.orientation < NUM_ORIENTATIONS:
            raise ValueError(
                f"orientation must be in [0, {NUM_ORIENTATIONS}), got {self.orientation}"
            )
        self.orientation = Orientation(self.orientation)

    @property
    def family(self) -> str:
        return rule_family(self.rules)

    @property
    def position(self) -> tuple[int, int]:
        return self.x, self.y


@dataclass(frozen=True)
class StepOutcome:
    """Color to paint on the current cell and the heading to move along."""

    color: str
    orientation: Orientation


def evaluate(machine: Machine, current_color: str, rng: Random) -> StepOutcome:
    """Apply the machine's rule family to the color under it.

    Updates the machine's internal counters in place; position is left to the
    caller.
    """
    rules = machine.rules
    color_index = color_index_of(rules, current_color)
    match rules:
        case AntRules(palette=palette, turns=turns):
            return StepOutcome(
                color=palette[(color_index + 1) % len(palette)],
                orientation=_turned(machine.orientation, turns[color_index]),
            )
        case TurmiteRules():
            transition = rules.transition(machine.internal_state, color_index)
            machine.internal_state = transition.new_state
            return StepOutcome(
                color=rules.palette[transition.new_color],
                orientation=_turned(machine.orientation, transition.turn),
            )
        case DragonflyRules():
            return _dragonfly_step(machine, rules, rng)
        case _:
            assert_never(rules)


def _turned(orientation: int, turn: int) -> Orientation:
    return Orientation((orientation + turn) % NUM_ORIENTATIONS)


def _dragonfly_step(machine: Machine, rules: DragonflyRules, rng: Random) -> StepOutcome:
    """Dart straight, mark each corner, and pick a random heading after four sides.

    After the first square the walk can settle into a repeating cycle of
    squares; that is accepted behavior.
    """
    color = rules.trail_color
    orientation = Orientation(machine.orientation)
    machine.steps_taken += 1
    if machine.steps_taken >= rules.dart_length:
        color = rules.corner_color
        machine.steps_taken = 0
        machine.sides_completed += 1
        if machine.sides_completed >= SQUARE_SIDES:
            machine.sides_completed = 0
            machine.squares_completed += 1
            orientation = Orientation(rng.randrange(NUM_ORIENTATIONS))
            logger.debug(
                "dragonfly %d finished square %d, new heading %s",
                machine.machine_id,
                machine.squares_completed,
                orientation.name,
            )
        else:
            orientation = _turned(orientation, Turn.RIGHT)
    return StepOutcome(color=color, orientation=orientation)


def advance_machine(machine: Machine, grid: Grid, rng: Random) -> None:
    """Run one full step: wrap, read, evaluate, paint, turn, move, wrap."""
    machine.x, machine.y = grid.wrap(machine.x, machine.y)
    outcome = evaluate(machine, grid.get(machine.x, machine.y), rng)
    grid.set(machine.x, machine.y, outcome.color)
    machine.orientation = outcome.orientation
    dx, dy = outcome.orientation.delta
    machine.x, machine.y = grid.wrap(machine.x + dx, machine.y + dy)
