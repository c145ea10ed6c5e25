"""Sizing search: cost surfaces, surface optimizer and combination scheduling."""

from .cost_surface import CostSurface, OptimalSpecification
from .scheduler import CombinationOutcome, CombinationScheduler, SearchOptions, optimize_combination
from .sizing import SizingGrid, SizingPoint, sizing_grid
from .surface_optimizer import (
    SearchRectangle,
    SurfaceOptimizer,
    SurfaceSearchConfig,
    exhaustive_minimum,
    linearly_space,
)

__all__ = [
    "CombinationOutcome",
    "CombinationScheduler",
    "CostSurface",
    "OptimalSpecification",
    "SearchOptions",
    "SearchRectangle",
    "SizingGrid",
    "SizingPoint",
    "SurfaceOptimizer",
    "SurfaceSearchConfig",
    "exhaustive_minimum",
    "linearly_space",
    "optimize_combination",
    "sizing_grid",
]
