"""Toroidal color grid shared by every machine."""

from __future__ import annotations

import numpy as np

from turmite_world.domain.rules import ConfigurationError, normalize_color


class Grid:
    """Fixed-size toroidal color matrix.

    Colors are interned into a per-grid color table and cells hold the table
    code in an ``(height, width)`` numpy array, indexed ``[y, x]``. The
    background is always code 0 after a reset.

    ``get``/``set`` never wrap: callers wrap coordinates with ``wrap`` first and
    out-of-range access raises ``IndexError``.
    """

    def __init__(self, width: int, height: int, background: str) -> None:
        if width < 1 or height < 1:
            raise ConfigurationError(f"grid dimensions must be >= 1, got {width}x{height}")
        self.width = width
        self.height = height
        self.background = normalize_color(background)
        self._colors: list[str] = []
        self._codes: dict[str, int] = {}
        self._cells = np.zeros((height, width), dtype=np.int32)
        self._touched: set[tuple[int, int]] = set()
        self._all_touched = False
        self.reset(self.background)

    def reset(self, background: str) -> None:
        """Fill every cell with *background* and mark the whole grid touched."""
        self.background = normalize_color(background)
        self._colors.clear()
        self._codes.clear()
        self._cells.fill(self._intern(self.background))
        self._touched.clear()
        self._all_touched = True

    def _intern(self, color: str) -> int:
        code = self._codes.get(color)
        if code is None:
            code = len(self._colors)
            self._colors.append(color)
            self._codes[color] = code
        return code

    def check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} grid")

    def wrap(self, x: int, y: int) -> tuple[int, int]:
        """Map any integer coordinate onto the torus."""
        return (x + self.width) % self.width, (y + self.height) % self.height

    def get(self, x: int, y: int) -> str:
        self.check_bounds(x, y)
        return self._colors[self._cells.item(y, x)]

    def set(self, x: int, y: int, color: str) -> None:
        self.check_bounds(x, y)
        self._cells[y, x] = self._intern(color)
        self._touched.add((x, y))

    def drain_touched(self) -> dict[tuple[int, int], str]:
        """Return ``{(x, y): color}`` for cells written since the last drain, then clear."""
        if self._all_touched:
            coords: list[tuple[int, int]] | set[tuple[int, int]] = [
                (x, y) for y in range(self.height) for x in range(self.width)
            ]
        else:
            coords = self._touched
        touched = {(x, y): self._colors[self._cells.item(y, x)] for x, y in coords}
        self._touched.clear()
        self._all_touched = False
        return touched

    @property
    def colors(self) -> tuple[str, ...]:
        """Color table; ``colors[code]`` is the color a cell code stands for."""
        return tuple(self._colors)

    @property
    def background_code(self) -> int:
        return self._codes[self.background]

    def codes(self) -> np.ndarray:
        """Copy of the ``(height, width)`` cell-code array."""
        return self._cells.copy()

    def count_non_background(self) -> int:
        return int(np.count_nonzero(self._cells != self.background_code))
