"""Field conversion for values read from kinds files, config files and CLI flags.

JSON and command-line sources hand over loosely typed values (``"12"``,
``12.0``, ``"yes"``). Each helper accepts the spellings those sources
produce for one field type and raises ``ConfigurationError`` naming the
field for anything else, so both sources report bad values the same way.
"""

from __future__ import annotations

import re
from pathlib import Path

from turmite_world.domain.rules import ConfigurationError

_INTEGER_TEXT = re.compile(r"^\s*[+-]?\d+\s*$")

_FLAG_WORDS: dict[str, bool] = {
    "true": True,
    "yes": True,
    "on": True,
    "1": True,
    "false": False,
    "no": False,
    "off": False,
    "0": False,
}


def as_flag(raw: object, field: str) -> bool:
    """``True``/``False`` or one of the words in ``_FLAG_WORDS`` (any case)."""
    match raw:
        case bool():
            return raw
        case str() if raw.strip().lower() in _FLAG_WORDS:
            return _FLAG_WORDS[raw.strip().lower()]
    raise ConfigurationError(f"{field} must be true or false, got {raw!r}")


def as_count(raw: object, field: str, minimum: int | None = None) -> int:
    """Whole number from an int, an integral float, or decimal text.

    Booleans are rejected even though ``bool`` subclasses ``int``.
    """
    value: int | None = None
    match raw:
        case bool():
            pass
        case int():
            value = raw
        case float() if raw.is_integer():
            value = int(raw)
        case str() if _INTEGER_TEXT.match(raw):
            value = int(raw)
    if value is None:
        raise ConfigurationError(f"{field} must be a whole number, got {raw!r}")
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"{field} must be >= {minimum}, got {value}")
    return value


def as_text(raw: object, field: str) -> str:
    """String form of text, paths and numbers; containers and booleans are refused."""
    match raw:
        case bool():
            pass
        case str():
            return raw
        case Path() | int() | float():
            return str(raw)
    raise ConfigurationError(f"{field} must be text, got {raw!r}")
