"""Centralized domain constants for the turmite simulation.

All magic numbers that appear across multiple modules are defined here.
Consuming modules should import from this module rather than defining
their own inline literals.
"""

from __future__ import annotations

GRID_WIDTH = 250
"""Default grid width in cells (1000 px canvas at 4 px per cell)."""

GRID_HEIGHT = 200
"""Default grid height in cells (800 px canvas at 4 px per cell)."""

TICKS_PER_BATCH = 50
"""Default number of ticks advanced per external frame."""

NUM_ORIENTATIONS = 4
"""Cardinal directions: up, right, down, left."""

MIN_PALETTE_SIZE = 2
"""Ants and turmites need at least two colors to leave a visible trail."""

DRAGONFLY_PALETTE_SIZE = 3
"""Dragonfly palette layout: background, trail, corner."""

SQUARE_SIDES = 4
"""Sides a dragonfly traces before picking a fresh heading."""

FLUSH_THRESHOLD = 8_192
"""Flush trace rows to Parquet once this in-memory row count is reached."""
