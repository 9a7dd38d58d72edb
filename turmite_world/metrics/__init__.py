"""Grid metrics package."""

from turmite_world.metrics.coverage import (
    color_histogram,
    coverage_fraction,
    same_color_adjacency_fraction,
)

__all__ = [
    "color_histogram",
    "coverage_fraction",
    "same_color_adjacency_fraction",
]
