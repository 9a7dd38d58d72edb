"""Tests for rule-table construction, parsing, and palette lookup."""

from __future__ import annotations

import logging

import pytest

from turmite_world.domain.rules import (
    AntRules,
    ConfigurationError,
    DragonflyRules,
    Transition,
    Turn,
    TurmiteRules,
    agent_color,
    color_index_of,
    normalize_color,
    palette_color,
    rule_family,
    turn_code,
)

BW = ("#000000", "#FFFFFF")


class TestNormalizeColor:
    def test_upper_cases_hex(self) -> None:
        assert normalize_color("#ffc300") == "#FFC300"

    @pytest.mark.parametrize("raw", ["ffc300", "#FFF", "#GGGGGG", "", None, 0xFFFFFF])
    def test_rejects_malformed(self, raw: object) -> None:
        with pytest.raises(ConfigurationError):
            normalize_color(raw)


class TestAntRules:
    def test_from_string_maps_letters(self) -> None:
        rules = AntRules.from_string(BW, "rl")
        assert rules.turns == (Turn.RIGHT, Turn.LEFT)
        assert rules.rule_string == "RL"

    def test_palette_is_normalized(self) -> None:
        rules = AntRules.from_string(("#abcdef", "#123456"), "RL")
        assert rules.palette == ("#ABCDEF", "#123456")

    def test_rejects_length_mismatch(self) -> None:
        with pytest.raises(ConfigurationError, match="2 turns"):
            AntRules.from_string(("#000000", "#111111", "#222222"), "RL")

    def test_rejects_unknown_letter(self) -> None:
        with pytest.raises(ConfigurationError):
            AntRules.from_string(BW, "RX")

    def test_rejects_non_lr_turn(self) -> None:
        with pytest.raises(ConfigurationError):
            AntRules(palette=BW, turns=(Turn.RIGHT, Turn.UTURN))

    def test_rejects_single_color_palette(self) -> None:
        with pytest.raises(ConfigurationError):
            AntRules.from_string(("#000000",), "R")

    def test_rejects_duplicate_colors(self) -> None:
        with pytest.raises(ConfigurationError, match="distinct"):
            AntRules.from_string(("#000000", "#000000"), "RL")

    def test_rejects_string_palette(self) -> None:
        with pytest.raises(ConfigurationError):
            AntRules.from_string("#000000", "RL")  # type: ignore[arg-type]

    def test_is_immutable(self) -> None:
        rules = AntRules.from_string(BW, "RL")
        with pytest.raises(AttributeError):
            rules.turns = ()  # type: ignore[misc]


class TestTurmiteRules:
    def test_from_mapping_decodes_numeric_turns(self) -> None:
        rules = TurmiteRules.from_mapping(
            ("#000000", "#FFFFFF"),
            {0: [[1, 1, 0], [0, -1, 1]], 1: [[1, 2, 1], [0, 0, 0]]},
        )
        assert rules.n_states == 2
        assert rules.transition(0, 0) == Transition(1, Turn.RIGHT, 0)
        assert rules.transition(0, 1) == Transition(0, Turn.LEFT, 1)
        assert rules.transition(1, 0) == Transition(1, Turn.UTURN, 1)
        assert rules.transition(1, 1) == Transition(0, Turn.STRAIGHT, 0)

    def test_from_mapping_accepts_string_keys(self) -> None:
        rules = TurmiteRules.from_mapping(BW, {"0": [[1, 1, 0], [0, -1, 0]]})
        assert rules.n_states == 1

    def test_missing_state_row_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError, match="no entry for state 1"):
            TurmiteRules.from_mapping(BW, {0: [[1, 1, 0], [0, -1, 0]], 2: [[1, 1, 0], [0, 1, 0]]})

    def test_reference_to_undefined_state_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError, match="state 1"):
            TurmiteRules.from_mapping(BW, {0: [[1, 1, 0], [0, -1, 1]]})

    def test_short_row_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError, match="defines 1 transitions"):
            TurmiteRules.from_mapping(BW, {0: [[1, 1, 0]]})

    def test_color_index_out_of_palette(self) -> None:
        with pytest.raises(ConfigurationError, match="paints color 2"):
            TurmiteRules.from_mapping(BW, {0: [[2, 1, 0], [0, 1, 0]]})

    def test_unknown_turn_code(self) -> None:
        with pytest.raises(ConfigurationError, match="turn code"):
            TurmiteRules.from_mapping(BW, {0: [[1, 5, 0], [0, 1, 0]]})

    @pytest.mark.parametrize("code", [[1], "1", 1.0, None, True])
    def test_non_integer_turn_code(self, code: object) -> None:
        with pytest.raises(ConfigurationError, match="turn code"):
            TurmiteRules.from_mapping(BW, {0: [[1, code, 0], [0, 1, 0]]})

    def test_nested_turn_code_in_pegg_notation(self) -> None:
        with pytest.raises(ConfigurationError, match="turn code"):
            TurmiteRules.from_pegg_notation(BW, "{{{1, {2}, 0}, {0, 8, 0}}}")

    @pytest.mark.parametrize(
        "transitions",
        [3, ((5, 6),), (3,), ((Transition(1, Turn.RIGHT, 0), 7),), "ab"],
        ids=["scalar-table", "scalar-entries", "scalar-row", "mixed-row", "string-table"],
    )
    def test_direct_construction_rejects_malformed_table(self, transitions: object) -> None:
        with pytest.raises(ConfigurationError):
            TurmiteRules(palette=BW, transitions=transitions)  # type: ignore[arg-type]

    def test_empty_table(self) -> None:
        with pytest.raises(ConfigurationError):
            TurmiteRules.from_mapping(BW, {})

    def test_pegg_notation_langtons_ant(self) -> None:
        # Golly's encoding of Langton's ant as a one-state turmite.
        rules = TurmiteRules.from_pegg_notation(BW, "{{{1, 2, 0}, {0, 8, 0}}}")
        assert rules.transitions == (
            (Transition(1, Turn.RIGHT, 0), Transition(0, Turn.LEFT, 0)),
        )

    def test_pegg_notation_straight_and_uturn(self) -> None:
        rules = TurmiteRules.from_pegg_notation(BW, "{{{1, 1, 0}, {0, 4, 0}}}")
        assert rules.transition(0, 0).turn is Turn.STRAIGHT
        assert rules.transition(0, 1).turn is Turn.UTURN

    def test_pegg_notation_malformed(self) -> None:
        with pytest.raises(ConfigurationError, match="malformed"):
            TurmiteRules.from_pegg_notation(BW, "{{{1, 2, 0}")

    def test_turn_code_inverts_numeric_encoding(self) -> None:
        assert [turn_code(turn) for turn in Turn] == [0, 1, 2, -1]


class TestDragonflyRules:
    def test_trail_and_corner_colors(self) -> None:
        rules = DragonflyRules(palette=("#101010", "#87ceeb", "#FFD700"), dart_length=8)
        assert rules.trail_color == "#87CEEB"
        assert rules.corner_color == "#FFD700"

    @pytest.mark.parametrize("dart_length", [0, -3])
    def test_rejects_non_positive_dart_length(self, dart_length: int) -> None:
        with pytest.raises(ConfigurationError, match="dart_length"):
            DragonflyRules(palette=("#101010", "#87CEEB", "#FFD700"), dart_length=dart_length)

    def test_requires_three_colors(self) -> None:
        with pytest.raises(ConfigurationError):
            DragonflyRules(palette=("#101010", "#87CEEB"), dart_length=4)
        with pytest.raises(ConfigurationError):
            DragonflyRules(
                palette=("#101010", "#87CEEB", "#FFD700", "#FFFFFF"), dart_length=4
            )


class TestPaletteLookup:
    @pytest.mark.parametrize(
        "rules",
        [
            AntRules.from_string(("#000000", "#FF5733", "#33FF57"), "RLL"),
            TurmiteRules.from_mapping(BW, {0: [[1, 1, 0], [0, -1, 0]]}),
            DragonflyRules(palette=("#101010", "#87CEEB", "#FFD700"), dart_length=3),
        ],
        ids=["ant", "turmite", "dragonfly"],
    )
    def test_palette_round_trip(self, rules: AntRules | TurmiteRules | DragonflyRules) -> None:
        for index in range(len(rules.palette)):
            assert color_index_of(rules, palette_color(rules, index)) == index

    def test_foreign_color_falls_back_to_zero(self, caplog: pytest.LogCaptureFixture) -> None:
        rules = AntRules.from_string(BW, "RL")
        with caplog.at_level(logging.DEBUG, logger="turmite_world.domain.rules"):
            assert color_index_of(rules, "#123456") == 0
        assert "not in ant palette" in caplog.text


class TestFamilyAndAgentColor:
    def test_rule_family(self) -> None:
        assert rule_family(AntRules.from_string(BW, "RL")) == "ant"
        assert rule_family(TurmiteRules.from_mapping(BW, {0: [[1, 1, 0], [0, 1, 0]]})) == "turmite"
        dragonfly = DragonflyRules(palette=("#101010", "#87CEEB", "#FFD700"), dart_length=2)
        assert rule_family(dragonfly) == "dragonfly"

    def test_agent_color_is_second_color_for_ants(self) -> None:
        assert agent_color(AntRules.from_string(("#000000", "#E0E0E0"), "RL")) == "#E0E0E0"

    def test_agent_color_is_corner_for_dragonfly(self) -> None:
        dragonfly = DragonflyRules(palette=("#101010", "#87CEEB", "#FFD700"), dart_length=2)
        assert agent_color(dragonfly) == "#FFD700"

    def test_agent_color_is_second_color_for_turmites(self) -> None:
        rules = TurmiteRules.from_mapping(
            ("#202020", "#FFC300", "#0000FF"), {0: [[1, 1, 0], [2, 1, 0], [0, 1, 0]]}
        )
        assert agent_color(rules) == "#FFC300"
