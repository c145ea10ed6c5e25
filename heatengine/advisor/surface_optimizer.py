"""
Branch-and-bound minimum search over a 2-D cost surface.

The surface is sampled on a coarse mesh, from which an estimate of the
steepest slope along each axis is taken.  The mesh rectangles are then
refined round by round: a rectangle is split at its midpoints only while
a lower bound on the cost inside it,

    min(corner costs) - (slope_x * width + slope_y * height),

is below the best cost found so far.  Slopes are scaled down by an
empirical gradient factor, which trades accuracy for fewer evaluations;
the result is therefore approximate unless the factor is 1 and the surface
Lipschitz-bounded by the sampled slopes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


class CostOracle(Protocol):
    def get_or_compute(self, i: int, j: int) -> float: ...


# ---------------------------------------------------------------------------
# Configuration and helpers
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SurfaceSearchConfig:
    """Tuning parameters of :class:`SurfaceOptimizer`.

    Attributes
    ----------
    target_segments : int
        Minimum number of initial mesh segments per axis.
    target_step : int
        Axis length per additional initial segment on large grids.
    gradient_factor_large : float
        Slope scaling used on grids with more than ``small_grid_cells`` cells.
    gradient_factor_small : float
        Slope scaling used on smaller grids.
    small_grid_cells : int
        Cell count separating small from large grids.
    """

    target_segments: int = 3
    target_step: int = 100
    gradient_factor_large: float = 0.12
    gradient_factor_small: float = 0.38
    small_grid_cells: int = 200

    def __post_init__(self) -> None:
        if self.target_segments < 1:
            raise ValueError("target_segments must be at least 1")
        if self.target_step < 1:
            raise ValueError("target_step must be at least 1")
        if self.gradient_factor_large <= 0 or self.gradient_factor_small <= 0:
            raise ValueError("Gradient factors must be positive")

    def gradient_factor(self, cells: int) -> float:
        if cells > self.small_grid_cells:
            return self.gradient_factor_large
        return self.gradient_factor_small

    def segments(self, size: int) -> int:
        """Initial segment count along an axis of *size* points."""
        return min(max(self.target_segments, size // self.target_step), size - 1)


@dataclass(frozen=True)
class SearchRectangle:
    """Axis-aligned block of the grid, corners inclusive."""

    i1: int
    i2: int
    j1: int
    j2: int

    @property
    def width(self) -> int:
        return self.i2 - self.i1

    @property
    def height(self) -> int:
        return self.j2 - self.j1

    @property
    def is_unit(self) -> bool:
        return self.width <= 1 and self.height <= 1

    def corners(self) -> tuple[tuple[int, int], ...]:
        return (
            (self.i1, self.j1),
            (self.i2, self.j1),
            (self.i1, self.j2),
            (self.i2, self.j2),
        )


def linearly_space(span: int, segments: int) -> list[int]:
    """*segments* + 1 integer points spread evenly over [0, span].

    Fractional positions round half up, so the end points are exact and,
    provided ``segments <= span``, the points are strictly increasing.
    """
    if segments < 1:
        raise ValueError("segments must be at least 1")
    return [(2 * k * span + segments) // (2 * segments) for k in range(segments + 1)]


def _split(low: int, high: int) -> list[tuple[int, int]]:
    if high - low <= 1:
        return [(low, high)]
    middle = low + (high - low) // 2
    return [(low, middle), (middle, high)]


def exhaustive_minimum(surface: CostOracle, x_size: int, y_size: int) -> float:
    """Evaluate every cell and return the minimum."""
    best = math.inf
    for i in range(x_size):
        for j in range(y_size):
            best = min(best, surface.get_or_compute(i, j))
    return best


# ---------------------------------------------------------------------------
# Optimizer
# ---------------------------------------------------------------------------
class SurfaceOptimizer:
    """Approximate minimiser of a cost oracle over an ``x_size`` by ``y_size`` grid."""

    def __init__(
        self, surface: CostOracle, config: SurfaceSearchConfig | None = None
    ) -> None:
        self.surface = surface
        self.config = config or SurfaceSearchConfig()
        self.best = math.inf
        self.rounds = 0
        self._visited: set[tuple[int, int]] = set()

    @property
    def evaluations(self) -> int:
        """Distinct cells requested from the oracle."""
        return len(self._visited)

    def _z(self, i: int, j: int) -> float:
        value = self.surface.get_or_compute(i, j)
        self._visited.add((i, j))
        if value < self.best:
            self.best = value
        return value

    def optimize(self, x_size: int, y_size: int) -> float:
        """Return the (approximate) minimum value on the grid."""
        if x_size < 1 or y_size < 1:
            raise ValueError(f"Empty grid {x_size}x{y_size}")
        if x_size < 2 or y_size < 2:
            # No rectangle to refine.
            for i in range(x_size):
                for j in range(y_size):
                    self._z(i, j)
            return self.best

        config = self.config
        factor = config.gradient_factor(x_size * y_size)
        xs = linearly_space(x_size - 1, config.segments(x_size))
        ys = linearly_space(y_size - 1, config.segments(y_size))

        rects = [
            SearchRectangle(xs[a], xs[a + 1], ys[b], ys[b + 1])
            for a in range(len(xs) - 1)
            for b in range(len(ys) - 1)
        ]

        # -- slope estimate from the initial mesh --------------------------
        slope_x = 0.0
        slope_y = 0.0
        for rect in rects:
            z11 = self._z(rect.i1, rect.j1)
            z21 = self._z(rect.i2, rect.j1)
            z12 = self._z(rect.i1, rect.j2)
            z22 = self._z(rect.i2, rect.j2)
            slope_x = max(
                slope_x,
                abs(z21 - z11) / rect.width,
                abs(z22 - z12) / rect.width,
            )
            slope_y = max(
                slope_y,
                abs(z12 - z11) / rect.height,
                abs(z22 - z21) / rect.height,
            )
        slope_x *= factor
        slope_y *= factor

        logger.debug(
            "Surface search %dx%d: %d initial rectangles, slopes (%.3g, %.3g)",
            x_size, y_size, len(rects), slope_x, slope_y,
        )

        # -- refinement ----------------------------------------------------
        while rects:
            threshold = self.best
            survivors: list[SearchRectangle] = []
            for rect in rects:
                corner_min = min(self._z(i, j) for i, j in rect.corners())
                bound = corner_min - (slope_x * rect.width + slope_y * rect.height)
                if bound >= threshold:
                    continue

                i_ranges = _split(rect.i1, rect.i2)
                j_ranges = _split(rect.j1, rect.j2)
                for i1, i2 in i_ranges:
                    for j1, j2 in j_ranges:
                        child = SearchRectangle(i1, i2, j1, j2)
                        for i, j in child.corners():
                            self._z(i, j)
                        if not child.is_unit:
                            survivors.append(child)
            rects = survivors
            self.rounds += 1

        logger.debug(
            "Surface search %dx%d finished after %d rounds, %d/%d cells",
            x_size, y_size, self.rounds, self.evaluations, x_size * y_size,
        )
        return self.best
