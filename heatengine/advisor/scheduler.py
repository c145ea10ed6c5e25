"""
Per-combination optimisation and scheduling across all combinations.

Each technology combination owns its cost surface and best-so-far
specification, so combinations are independent of each other and may be
evaluated in separate processes.  Results are always returned in the
order the combinations were given.
"""

from __future__ import annotations

import logging
import multiprocessing
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Sequence

import numpy as np
from numpy.typing import NDArray

from heatengine.building.profile import AnnualInputs
from heatengine.dispatch.simulator import DispatchSimulator
from heatengine.dispatch.technology import ALL_COMBINATIONS, TechnologyCombination
from heatengine.grid.tariff import ALL_TARIFFS, Tariff

from .cost_surface import CostSurface, OptimalSpecification
from .sizing import SizingGrid, sizing_grid
from .surface_optimizer import SurfaceOptimizer, SurfaceSearchConfig, exhaustive_minimum

logger = logging.getLogger(__name__)

# Below this many steps on either axis the surface search has nothing to prune.
MIN_SURFACE_AXIS_STEPS = 4


@dataclass(frozen=True)
class SearchOptions:
    """How each combination's sizing grid is searched.

    Attributes
    ----------
    use_surface_optimization : bool
        Use :class:`SurfaceOptimizer` on grids large enough to benefit.
    exhaustive_max_cells : int
        Grids with at most this many cells are always scanned exhaustively.
    max_workers : int
        Worker processes; 1 runs every combination in-process, as does
        any value when already running in a daemonic process.
    surface : SurfaceSearchConfig
        Tuning of the surface search.
    keep_surfaces : bool
        Attach each combination's evaluated cost surface to its outcome.
    """

    use_surface_optimization: bool = True
    exhaustive_max_cells: int = 55
    max_workers: int = 1
    surface: SurfaceSearchConfig = field(default_factory=SurfaceSearchConfig)
    keep_surfaces: bool = False

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")

    def uses_surface_search(self, grid: SizingGrid) -> bool:
        return (
            self.use_surface_optimization
            and grid.solar_steps >= MIN_SURFACE_AXIS_STEPS
            and grid.storage_steps >= MIN_SURFACE_AXIS_STEPS
            and grid.cells > self.exhaustive_max_cells
        )


@dataclass
class CombinationOutcome:
    """Search result for one combination."""

    specification: OptimalSpecification
    grid: SizingGrid
    cells_evaluated: int
    surface_search: bool
    duration_ms: float
    surface: NDArray[np.float64] | None = None

    @property
    def combination(self) -> TechnologyCombination:
        return self.specification.combination


# ======================================================================
# Single combination
# ======================================================================

def optimize_combination(
    simulator: DispatchSimulator,
    annual: AnnualInputs,
    combination: TechnologyCombination,
    storage_volume_max: float,
    options: SearchOptions,
    tariffs: Sequence[Tariff] = ALL_TARIFFS,
) -> CombinationOutcome:
    """Find the cheapest sizing and tariff for *combination*.

    Module-level so it can be shipped to worker processes.
    """
    start = time.perf_counter()
    grid = sizing_grid(
        combination.solar_option, simulator.profile.house_size, storage_volume_max
    )
    specification = OptimalSpecification(combination)
    surface = CostSurface(
        simulator, annual, combination, grid, specification, tuple(tariffs)
    )

    surface_search = False
    if grid.cells == 0:
        logger.warning("%s: sizing grid is empty, nothing to evaluate", combination)
    elif options.uses_surface_search(grid):
        surface_search = True
        SurfaceOptimizer(surface, options.surface).optimize(
            grid.solar_steps, grid.storage_steps
        )
    else:
        exhaustive_minimum(surface, grid.solar_steps, grid.storage_steps)

    duration_ms = (time.perf_counter() - start) * 1000.0
    logger.info(
        "%s: NPC %.0f after %d/%d cells (%s)",
        combination,
        specification.net_present_cost,
        surface.evaluated_cells,
        grid.cells,
        "surface search" if surface_search else "exhaustive",
        extra={
            "combination": str(combination),
            "evaluations": surface.evaluated_cells,
            "duration_ms": round(duration_ms, 1),
        },
    )
    return CombinationOutcome(
        specification=specification,
        grid=grid,
        cells_evaluated=surface.evaluated_cells,
        surface_search=surface_search,
        duration_ms=duration_ms,
        surface=surface.to_array() if options.keep_surfaces else None,
    )


# ======================================================================
# All combinations
# ======================================================================

class CombinationScheduler:
    """Optimise a set of combinations, sequentially or in a process pool.

    Parameters
    ----------
    simulator : DispatchSimulator
        Simulator bound to the building being assessed.
    annual : AnnualInputs
        Hourly weather and price inputs.
    storage_volume_max : float
        Largest thermal store considered, m3.
    options : SearchOptions or None
        Search behaviour; defaults to :class:`SearchOptions`.
    combinations : sequence of TechnologyCombination
        Combinations to optimise, in output order.
    tariffs : sequence of Tariff
        Tariffs considered at each sizing.
    on_complete : callable or None
        ``callback(outcome, completed, total)`` fired as each combination
        finishes (completion order, not output order).
    """

    def __init__(
        self,
        simulator: DispatchSimulator,
        annual: AnnualInputs,
        storage_volume_max: float,
        options: SearchOptions | None = None,
        combinations: Sequence[TechnologyCombination] = ALL_COMBINATIONS,
        tariffs: Sequence[Tariff] = ALL_TARIFFS,
        on_complete: Callable[[CombinationOutcome, int, int], None] | None = None,
    ) -> None:
        if storage_volume_max < 0.1:
            raise ValueError("storage_volume_max must be at least 0.1 m3")
        if not tariffs:
            raise ValueError("At least one tariff is required")
        self.simulator = simulator
        self.annual = annual
        self.storage_volume_max = storage_volume_max
        self.options = options or SearchOptions()
        self.combinations = tuple(combinations)
        self.tariffs = tuple(tariffs)
        self._on_complete = on_complete

    def optimize_combination(self, combination: TechnologyCombination) -> CombinationOutcome:
        return optimize_combination(
            self.simulator,
            self.annual,
            combination,
            self.storage_volume_max,
            self.options,
            self.tariffs,
        )

    def run(self) -> list[CombinationOutcome]:
        """Optimise every combination; results follow ``self.combinations``."""
        total = len(self.combinations)
        workers = min(self.options.max_workers, max(total, 1))
        if workers > 1 and multiprocessing.current_process().daemon:
            # e.g. a Celery prefork child: daemonic processes cannot fork a pool.
            logger.warning(
                "Daemonic process %s cannot start workers; optimising in-process",
                multiprocessing.current_process().name,
            )
            workers = 1
        logger.info("Optimising %d combinations with %d worker(s)", total, workers)

        if workers == 1:
            outcomes = []
            for combination in self.combinations:
                outcome = self.optimize_combination(combination)
                outcomes.append(outcome)
                self._notify(outcome, len(outcomes), total)
            return outcomes

        by_position: dict[int, CombinationOutcome] = {}
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(
                    optimize_combination,
                    self.simulator,
                    self.annual,
                    combination,
                    self.storage_volume_max,
                    self.options,
                    self.tariffs,
                ): position
                for position, combination in enumerate(self.combinations)
            }
            for future in as_completed(futures):
                outcome = future.result()
                by_position[futures[future]] = outcome
                self._notify(outcome, len(by_position), total)
        return [by_position[position] for position in range(total)]

    def _notify(self, outcome: CombinationOutcome, completed: int, total: int) -> None:
        if self._on_complete is not None:
            self._on_complete(outcome, completed, total)
