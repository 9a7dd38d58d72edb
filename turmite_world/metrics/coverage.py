"""Grid summary statistics: color counts, coverage, same-color adjacency."""

from __future__ import annotations

import numpy as np

from turmite_world.domain.grid import Grid


def color_histogram(grid: Grid) -> dict[str, int]:
    """Cell count per color present on the grid, in color-table order."""
    counts = np.bincount(grid.codes().ravel(), minlength=len(grid.colors))
    return {color: int(n) for color, n in zip(grid.colors, counts, strict=True) if n > 0}


def coverage_fraction(grid: Grid) -> float:
    """Share of cells not holding the background color. Returns a value in [0, 1]."""
    return grid.count_non_background() / (grid.width * grid.height)


def same_color_adjacency_fraction(grid: Grid) -> float:
    """Fraction of painted torus 4-neighbor pairs sharing the same color.

    Each cell is paired with its right and lower neighbor, so every adjacency is
    counted once on grids at least 3 cells wide and tall. Returns NaN when no
    two painted cells are adjacent.
    """
    codes = grid.codes()
    painted = codes != grid.background_code
    same = 0
    total = 0
    for axis in (0, 1):
        neighbor_codes = np.roll(codes, -1, axis=axis)
        pairs = painted & np.roll(painted, -1, axis=axis)
        total += int(np.count_nonzero(pairs))
        same += int(np.count_nonzero(pairs & (codes == neighbor_codes)))
    if total == 0:
        return float("nan")
    return same / total
