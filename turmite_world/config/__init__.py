"""Configuration layer: constants, typed config dataclasses, and built-in presets.

Only the constants are re-exported here; ``config.types`` and ``config.presets``
depend on the domain layer, which itself reads these constants.
"""

from turmite_world.config.constants import (
    DRAGONFLY_PALETTE_SIZE,
    FLUSH_THRESHOLD,
    GRID_HEIGHT,
    GRID_WIDTH,
    MIN_PALETTE_SIZE,
    NUM_ORIENTATIONS,
    SQUARE_SIDES,
    TICKS_PER_BATCH,
)

__all__ = [
    "DRAGONFLY_PALETTE_SIZE",
    "FLUSH_THRESHOLD",
    "GRID_HEIGHT",
    "GRID_WIDTH",
    "MIN_PALETTE_SIZE",
    "NUM_ORIENTATIONS",
    "SQUARE_SIDES",
    "TICKS_PER_BATCH",
]
