"""Machine-kind files: JSON payloads to ``MachineKind`` objects and back.

A kinds document looks like::

    {
      "schema_version": 1,
      "kinds": [
        {"id": "classic-ant", "name": "Classic Ant", "family": "ant",
         "palette": ["#000000", "#E0E0E0"], "rules": "RL",
         "default_quantity": 1, "enabled": true},
        {"id": "spiral", "name": "Spiral", "family": "turmite",
         "palette": ["#202020", "#FFC300"],
         "rules": {"0": [[1, 1, 0], [1, -1, 1]], "1": [[0, -1, 1], [0, 1, 0]]}},
        {"id": "dragonfly", "name": "Dragonfly", "family": "dragonfly",
         "palette": ["#101010", "#87CEEB", "#FFD700"], "dart_length": 8}
      ]
    }

Turmite ``rules`` may also be a Golly-style string such as ``"{{{1, 2, 0}, {0, 8, 0}}}"``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import assert_never

from turmite_world.config.types import MachineKind
from turmite_world.domain.rules import (
    AntRules,
    ConfigurationError,
    DragonflyRules,
    RuleTable,
    TurmiteRules,
    rule_family,
    turn_code,
)
from turmite_world.io.coerce import as_count, as_flag, as_text
from turmite_world.io.schemas import KINDS_SCHEMA_VERSION


def rules_from_payload(payload: Mapping[str, object]) -> RuleTable:
    """Build a rule table from a kind payload's ``family``/``palette``/rule fields."""
    family = payload.get("family")
    palette = payload.get("palette")
    if not isinstance(palette, list):
        raise ConfigurationError("palette must be a list of colors")
    rules = payload.get("rules")
    match family:
        case "ant":
            if not isinstance(rules, str):
                raise ConfigurationError("ant rules must be a string such as 'RL'")
            return AntRules.from_string(palette, rules)
        case "turmite":
            if isinstance(rules, str):
                return TurmiteRules.from_pegg_notation(palette, rules)
            if isinstance(rules, Mapping):
                return TurmiteRules.from_mapping(palette, rules)
            raise ConfigurationError("turmite rules must be a state mapping or notation string")
        case "dragonfly":
            dart_length = as_count(payload.get("dart_length"), "dart_length", minimum=1)
            return DragonflyRules(palette=tuple(palette), dart_length=dart_length)
        case _:
            raise ConfigurationError(
                f"family must be one of ant, turmite, dragonfly; got {family!r}"
            )


def rules_to_payload(rules: RuleTable) -> dict[str, object]:
    """Inverse of ``rules_from_payload``; turmites use the numeric mapping form."""
    payload: dict[str, object] = {"family": rule_family(rules), "palette": list(rules.palette)}
    match rules:
        case AntRules():
            payload["rules"] = rules.rule_string
        case TurmiteRules():
            payload["rules"] = {
                str(state): [
                    [entry.new_color, turn_code(entry.turn), entry.new_state] for entry in row
                ]
                for state, row in enumerate(rules.transitions)
            }
        case DragonflyRules():
            payload["dart_length"] = rules.dart_length
        case _:
            assert_never(rules)
    return payload


def kind_from_payload(payload: Mapping[str, object]) -> MachineKind:
    """Parse one kind entry; every failure surfaces as ``ConfigurationError``."""
    label = payload.get("id", "<unnamed>")
    try:
        kind_id = as_text(payload["id"], "id")
        return MachineKind(
            kind_id=kind_id,
            name=as_text(payload.get("name", kind_id), "name"),
            rules=rules_from_payload(payload),
            default_quantity=as_count(
                payload.get("default_quantity", 1), "default_quantity", minimum=0
            ),
            enabled=as_flag(payload.get("enabled", True), "enabled"),
        )
    except ConfigurationError as exc:
        raise ConfigurationError(f"kind {label!r}: {exc}") from exc
    except KeyError as exc:
        raise ConfigurationError(f"kind {label!r}: missing field {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"kind {label!r}: {exc}") from exc


def kind_to_payload(kind: MachineKind) -> dict[str, object]:
    return {
        "id": kind.kind_id,
        "name": kind.name,
        **rules_to_payload(kind.rules),
        "default_quantity": kind.default_quantity,
        "enabled": kind.enabled,
    }


def parse_kinds(document: object) -> tuple[MachineKind, ...]:
    """Parse a decoded kinds document (an object with ``kinds`` or a bare list)."""
    if isinstance(document, Mapping):
        entries = document.get("kinds")
    else:
        entries = document
    if not isinstance(entries, Sequence) or isinstance(entries, str):
        raise ConfigurationError("kinds document must contain a 'kinds' list")
    if not entries:
        raise ConfigurationError("kinds document defines no machine kinds")
    kinds: list[MachineKind] = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise ConfigurationError(f"kind entry must be an object, got {entry!r}")
        kinds.append(kind_from_payload(entry))
    return tuple(kinds)


def load_kinds(path: Path) -> tuple[MachineKind, ...]:
    """Read and parse a kinds JSON file."""
    try:
        document = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigurationError(f"kinds file not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"cannot read kinds file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"kinds file is not valid JSON: {path}: {exc}") from exc
    return parse_kinds(document)


def kinds_document(kinds: Sequence[MachineKind]) -> dict[str, object]:
    """Serializable document that ``parse_kinds`` reads back."""
    return {
        "schema_version": KINDS_SCHEMA_VERSION,
        "kinds": [kind_to_payload(kind) for kind in kinds],
    }
