"""Tests for configuration dataclasses and built-in machine kinds."""

from __future__ import annotations

import pytest

from turmite_world.config import GRID_HEIGHT, GRID_WIDTH, TICKS_PER_BATCH
from turmite_world.config.presets import (
    CHAOTIC_WEAVER,
    CLASSIC_ANT,
    DEFAULT_MACHINE_KINDS,
    DRAGONFLY,
    SPIRAL_GROWTH,
    THREE_COLOR_ANT,
)
from turmite_world.config.types import KindOverride, MachineKind, SimulationConfig
from turmite_world.domain.rules import (
    AntRules,
    ConfigurationError,
    DragonflyRules,
    TurmiteRules,
)


class TestSimulationConfig:
    def test_defaults(self) -> None:
        config = SimulationConfig()
        assert (config.grid_width, config.grid_height) == (GRID_WIDTH, GRID_HEIGHT)
        assert (GRID_WIDTH, GRID_HEIGHT) == (250, 200)
        assert config.ticks_per_batch == TICKS_PER_BATCH == 50
        assert config.background is None
        assert config.seed is None
        assert config.cell_count == 50_000

    @pytest.mark.parametrize(("width", "height"), [(0, 10), (10, 0), (-2, 3)])
    def test_rejects_non_positive_grid(self, width: int, height: int) -> None:
        with pytest.raises(ConfigurationError):
            SimulationConfig(grid_width=width, grid_height=height)

    def test_rejects_non_positive_ticks(self) -> None:
        with pytest.raises(ValueError):
            SimulationConfig(ticks_per_batch=0)

    def test_background_normalized(self) -> None:
        assert SimulationConfig(background="#ff00aa").background == "#FF00AA"

    def test_bad_background(self) -> None:
        with pytest.raises(ConfigurationError):
            SimulationConfig(background="red")

    def test_frozen(self) -> None:
        config = SimulationConfig()
        with pytest.raises(AttributeError):
            config.grid_width = 3  # type: ignore[misc]


class TestMachineKind:
    def test_rejects_empty_id(self) -> None:
        with pytest.raises(ConfigurationError):
            MachineKind(kind_id=" ", name="x", rules=CLASSIC_ANT.rules)

    @pytest.mark.parametrize("kind_id", [7, None, ["ant"]])
    def test_rejects_non_string_id(self, kind_id: object) -> None:
        with pytest.raises(ConfigurationError, match="kind_id must be a non-empty string"):
            MachineKind(
                kind_id=kind_id, name="x", rules=CLASSIC_ANT.rules  # type: ignore[arg-type]
            )

    def test_rejects_non_string_name(self) -> None:
        with pytest.raises(ConfigurationError, match="name must be a string"):
            MachineKind(kind_id="a", name=3, rules=CLASSIC_ANT.rules)  # type: ignore[arg-type]

    @pytest.mark.parametrize("quantity", [True, 1.5, "2"])
    def test_rejects_non_integer_quantity(self, quantity: object) -> None:
        with pytest.raises(ConfigurationError, match="default_quantity must be an integer"):
            MachineKind(
                kind_id="a",
                name="a",
                rules=CLASSIC_ANT.rules,
                default_quantity=quantity,  # type: ignore[arg-type]
            )

    def test_rejects_negative_quantity(self) -> None:
        with pytest.raises(ConfigurationError):
            MachineKind(kind_id="a", name="a", rules=CLASSIC_ANT.rules, default_quantity=-1)

    def test_rejects_missing_rules(self) -> None:
        with pytest.raises(ConfigurationError):
            MachineKind(kind_id="a", name="a", rules="RL")  # type: ignore[arg-type]

    def test_override_rejects_negative_quantity(self) -> None:
        with pytest.raises(ConfigurationError):
            KindOverride(quantity=-3)

    def test_override_defaults_to_no_change(self) -> None:
        override = KindOverride()
        assert override.quantity is None
        assert override.enabled is None


class TestPresets:
    def test_registration_order_and_quantities(self) -> None:
        assert [(kind.kind_id, kind.default_quantity) for kind in DEFAULT_MACHINE_KINDS] == [
            ("classic-ant", 1),
            ("three-color-ant", 1),
            ("chaotic-weaver", 2),
            ("dragonfly", 2),
            ("spiral-growth", 1),
        ]
        assert all(kind.enabled for kind in DEFAULT_MACHINE_KINDS)

    def test_families(self) -> None:
        assert isinstance(CLASSIC_ANT.rules, AntRules)
        assert THREE_COLOR_ANT.rules.rule_string == "RLL"
        assert isinstance(CHAOTIC_WEAVER.rules, TurmiteRules)
        assert CHAOTIC_WEAVER.rules.n_states == 2
        assert isinstance(SPIRAL_GROWTH.rules, TurmiteRules)
        assert isinstance(DRAGONFLY.rules, DragonflyRules)
        assert DRAGONFLY.rules.dart_length == 8

    def test_classic_ant_is_langton(self) -> None:
        assert CLASSIC_ANT.rules.rule_string == "RL"
        assert CLASSIC_ANT.rules.palette == ("#000000", "#E0E0E0")
