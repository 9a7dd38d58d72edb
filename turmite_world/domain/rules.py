"""Rule families: classic ant, multi-state turmite, and square-tracing dragonfly.

A rule table is immutable and validated exactly once, at construction. Many
machines may share one rule table by reference; per-agent mutable state lives
on the machine, never here.

Three constructors cover the notations machines are usually described in:

- ``AntRules.from_string``: Langton-style turn strings such as ``"RL"`` or ``"RLL"``.
- ``TurmiteRules.from_mapping``: ``{state: [[new_color, turn, new_state], ...]}`` with
  numeric turns ``1`` right, ``-1`` left, ``2`` u-turn, ``0`` straight.
- ``TurmiteRules.from_pegg_notation``: Ed Pegg Jr.'s brace notation as used by Golly,
  e.g. ``"{{{1, 2, 0}, {0, 8, 0}}}"`` with turns ``1`` none, ``2`` right, ``4`` u-turn,
  ``8`` left.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import NamedTuple, TypeAlias, assert_never

from turmite_world.config.constants import DRAGONFLY_PALETTE_SIZE, MIN_PALETTE_SIZE

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class ConfigurationError(ValueError):
    """Raised when a rule table or machine configuration is malformed."""


class Turn(IntEnum):
    """Relative turn. The value is the clockwise orientation delta (mod 4)."""

    STRAIGHT = 0
    RIGHT = 1
    UTURN = 2
    LEFT = 3


_LETTER_TURNS: dict[str, Turn] = {"R": Turn.RIGHT, "L": Turn.LEFT}

_NUMERIC_TURNS: dict[int, Turn] = {
    1: Turn.RIGHT,
    -1: Turn.LEFT,
    2: Turn.UTURN,
    0: Turn.STRAIGHT,
}

_PEGG_TURNS: dict[int, Turn] = {
    1: Turn.STRAIGHT,
    2: Turn.RIGHT,
    4: Turn.UTURN,
    8: Turn.LEFT,
}


class Transition(NamedTuple):
    """One turmite table entry: what to paint, how to turn, which state next."""

    new_color: int
    turn: Turn
    new_state: int


def normalize_color(raw: object) -> str:
    """Return *raw* as an upper-case ``#RRGGBB`` string."""
    if not isinstance(raw, str) or not _HEX_COLOR.match(raw):
        raise ConfigurationError(f"color must be a #RRGGBB string, got {raw!r}")
    return raw.upper()


def _normalize_palette(palette: Sequence[str], min_size: int) -> tuple[str, ...]:
    if isinstance(palette, str):
        raise ConfigurationError("palette must be a sequence of colors, not a string")
    colors = tuple(normalize_color(color) for color in palette)
    if len(colors) < min_size:
        raise ConfigurationError(f"palette needs at least {min_size} colors, got {len(colors)}")
    if len(set(colors)) != len(colors):
        raise ConfigurationError(f"palette colors must be distinct: {colors}")
    return colors


def _as_index(raw: object, label: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ConfigurationError(f"{label} must be an integer, got {raw!r}")
    return raw


@dataclass(frozen=True)
class AntRules:
    """Classic ant: turn by the current color, then paint the next palette color."""

    palette: tuple[str, ...]
    turns: tuple[Turn, ...]

    def __post_init__(self) -> None:
        palette = _normalize_palette(self.palette, MIN_PALETTE_SIZE)
        try:
            turns = tuple(Turn(turn) for turn in self.turns)
        except ValueError as exc:
            raise ConfigurationError(f"invalid ant turn in {self.turns!r}") from exc
        if any(turn not in (Turn.LEFT, Turn.RIGHT) for turn in turns):
            raise ConfigurationError("ant turns must be LEFT or RIGHT")
        if len(turns) != len(palette):
            raise ConfigurationError(
                f"ant defines {len(turns)} turns for a palette of {len(palette)} colors"
            )
        object.__setattr__(self, "palette", palette)
        object.__setattr__(self, "turns", turns)

    @classmethod
    def from_string(cls, palette: Sequence[str], rules: str) -> AntRules:
        """Build an ant from a turn string such as ``"RL"``."""
        turns: list[Turn] = []
        for letter in rules.strip().upper():
            if letter not in _LETTER_TURNS:
                raise ConfigurationError(f"ant rule letters must be L or R, got {rules!r}")
            turns.append(_LETTER_TURNS[letter])
        return cls(palette=tuple(palette), turns=tuple(turns))

    @property
    def rule_string(self) -> str:
        return "".join("R" if turn is Turn.RIGHT else "L" for turn in self.turns)


@dataclass(frozen=True)
class TurmiteRules:
    """Multi-state turmite. ``transitions[state][color_index]`` is a ``Transition``.

    Every state row must cover every palette index and every ``new_state`` must
    name an existing row, so any (state, color) pair reachable from state 0 has
    an entry.
    """

    palette: tuple[str, ...]
    transitions: tuple[tuple[Transition, ...], ...]

    def __post_init__(self) -> None:
        palette = _normalize_palette(self.palette, MIN_PALETTE_SIZE)
        if not isinstance(self.transitions, (list, tuple)):
            raise ConfigurationError(
                f"turmite transitions must be a sequence of state rows, got {self.transitions!r}"
            )
        if not self.transitions:
            raise ConfigurationError("turmite transition table must define at least one state")
        n_states = len(self.transitions)
        rows: list[tuple[Transition, ...]] = []
        for state, row in enumerate(self.transitions):
            if not isinstance(row, (list, tuple)):
                raise ConfigurationError(f"turmite state {state} must be a row of entries")
            if len(row) != len(palette):
                raise ConfigurationError(
                    f"turmite state {state} defines {len(row)} transitions "
                    f"for a palette of {len(palette)} colors"
                )
            entries: list[Transition] = []
            for color_index, entry in enumerate(row):
                if not isinstance(entry, (list, tuple)) or len(entry) != 3:
                    raise ConfigurationError(
                        f"turmite entry ({state}, {color_index}) must have 3 fields, got {entry!r}"
                    )
                new_color = _as_index(entry[0], "turmite new color")
                new_state = _as_index(entry[2], "turmite new state")
                try:
                    turn = Turn(entry[1])
                except ValueError as exc:
                    raise ConfigurationError(
                        f"turmite entry ({state}, {color_index}) has invalid turn {entry[1]!r}"
                    ) from exc
                if not 0 <= new_color < len(palette):
                    raise ConfigurationError(
                        f"turmite entry ({state}, {color_index}) paints color {new_color}, "
                        f"palette has {len(palette)}"
                    )
                if not 0 <= new_state < n_states:
                    raise ConfigurationError(
                        f"turmite entry ({state}, {color_index}) moves to state {new_state}, "
                        f"which has no transitions"
                    )
                entries.append(Transition(new_color, turn, new_state))
            rows.append(tuple(entries))
        object.__setattr__(self, "palette", palette)
        object.__setattr__(self, "transitions", tuple(rows))

    @property
    def n_states(self) -> int:
        return len(self.transitions)

    def transition(self, state: int, color_index: int) -> Transition:
        return self.transitions[state][color_index]

    @classmethod
    def from_mapping(
        cls, palette: Sequence[str], table: Mapping[int | str, Sequence[Sequence[int]]]
    ) -> TurmiteRules:
        """Build a turmite from ``{state: [[new_color, turn, new_state], ...]}``.

        States must be numbered ``0..n-1``; keys may be ints or numeric strings
        (as they arrive from JSON). Turns use 1 right, -1 left, 2 u-turn, 0 straight.
        """
        rows: dict[int, Sequence[Sequence[int]]] = {}
        for raw_state, row in table.items():
            try:
                state = int(raw_state)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(
                    f"turmite state key must be numeric: {raw_state!r}"
                ) from exc
            if not isinstance(row, (list, tuple)):
                raise ConfigurationError(f"turmite state {state} must map to a list of entries")
            rows[state] = row
        for state in range(len(rows)):
            if state not in rows:
                raise ConfigurationError(f"turmite transition table has no entry for state {state}")
        transitions = tuple(
            tuple(_numeric_entry(entry, _NUMERIC_TURNS) for entry in rows[state])
            for state in range(len(rows))
        )
        return cls(palette=tuple(palette), transitions=transitions)

    @classmethod
    def from_pegg_notation(cls, palette: Sequence[str], notation: str) -> TurmiteRules:
        """Build a turmite from Golly's ``{{{c, t, s}, ...}, ...}`` notation."""
        try:
            parsed = json.loads(notation.replace("{", "[").replace("}", "]"))
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"malformed turmite notation: {notation!r}") from exc
        if not isinstance(parsed, list) or not all(isinstance(row, list) for row in parsed):
            raise ConfigurationError(f"malformed turmite notation: {notation!r}")
        transitions = tuple(
            tuple(_numeric_entry(entry, _PEGG_TURNS) for entry in row) for row in parsed
        )
        return cls(palette=tuple(palette), transitions=transitions)


def _numeric_entry(entry: Sequence[int], turn_codes: Mapping[int, Turn]) -> Transition:
    if not isinstance(entry, (list, tuple)) or len(entry) != 3:
        raise ConfigurationError(
            f"turmite entry must be [new_color, turn, new_state], got {entry!r}"
        )
    new_color, code, new_state = entry
    if isinstance(code, bool) or not isinstance(code, int) or code not in turn_codes:
        valid = ", ".join(str(c) for c in turn_codes)
        raise ConfigurationError(f"turn code must be one of {valid}, got {code!r}")
    return Transition(new_color, turn_codes[code], new_state)


def turn_code(turn: Turn) -> int:
    """Inverse of the numeric turn encoding accepted by ``TurmiteRules.from_mapping``."""
    for code, candidate in _NUMERIC_TURNS.items():
        if candidate is turn:
            return code
    raise ValueError(f"no numeric code for {turn!r}")


@dataclass(frozen=True)
class DragonflyRules:
    """Square tracer: darts ``dart_length`` cells per side, marks corners, then re-aims."""

    palette: tuple[str, ...]
    dart_length: int

    def __post_init__(self) -> None:
        palette = _normalize_palette(self.palette, DRAGONFLY_PALETTE_SIZE)
        if len(palette) != DRAGONFLY_PALETTE_SIZE:
            raise ConfigurationError(
                "dragonfly palette must be [background, trail, corner], "
                f"got {len(palette)} colors"
            )
        dart_length = _as_index(self.dart_length, "dart_length")
        if dart_length < 1:
            raise ConfigurationError(f"dart_length must be >= 1, got {dart_length}")
        object.__setattr__(self, "palette", palette)

    @property
    def trail_color(self) -> str:
        return self.palette[1]

    @property
    def corner_color(self) -> str:
        return self.palette[2]


RuleTable: TypeAlias = AntRules | TurmiteRules | DragonflyRules


def rule_family(rules: RuleTable) -> str:
    """Return the family name (``ant``, ``turmite`` or ``dragonfly``)."""
    match rules:
        case AntRules():
            return "ant"
        case TurmiteRules():
            return "turmite"
        case DragonflyRules():
            return "dragonfly"
        case _:
            assert_never(rules)


def color_index_of(rules: RuleTable, color: str) -> int:
    """Position of *color* in the palette, or 0 when the palette lacks it.

    A miss happens when another machine's trail covers the cell; falling back
    to index 0 keeps the machine moving.
    """
    try:
        return rules.palette.index(color)
    except ValueError:
        logger.debug("color %s not in %s palette, using index 0", color, rule_family(rules))
        return 0


def palette_color(rules: RuleTable, index: int) -> str:
    return rules.palette[index]


def agent_color(rules: RuleTable) -> str:
    """Color a renderer should draw the machine itself in.

    Dragonflies use their corner color; ants and turmites their second color.
    """
    match rules:
        case DragonflyRules():
            return rules.corner_color
        case AntRules() | TurmiteRules():
            return rules.palette[1]
        case _:
            assert_never(rules)
