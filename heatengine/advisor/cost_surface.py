"""
Memoised cost surface over the sizing grid of one technology combination.

Each cell holds the lowest net present cost over all tariffs at that
(solar, storage) sizing.  A cell is computed at most once; computing it
runs the dispatch simulator once per tariff and, as a side effect, offers
every result to the combination's :class:`OptimalSpecification`.

Neither the cache nor the specification is safe for concurrent mutation;
one combination is always evaluated by a single worker.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from heatengine.building.profile import AnnualInputs
from heatengine.dispatch.simulator import DispatchResult, DispatchSimulator
from heatengine.dispatch.technology import TechnologyCombination
from heatengine.grid.tariff import ALL_TARIFFS, Tariff

from .sizing import SizingGrid, SizingPoint

logger = logging.getLogger(__name__)


@dataclass
class OptimalSpecification:
    """Best sizing and tariff seen so far for one combination.

    Only ever replaced by a strictly cheaper result.
    """

    combination: TechnologyCombination
    pv_size: int = 0
    solar_thermal_size: int = 0
    storage_volume: float = 0.0
    tariff: Tariff | None = None
    point: SizingPoint | None = None
    result: DispatchResult | None = None

    @property
    def net_present_cost(self) -> float:
        if self.result is None:
            return math.inf
        return self.result.net_present_cost

    def offer(
        self,
        point: SizingPoint,
        pv_size: int,
        solar_thermal_size: int,
        storage_volume: float,
        tariff: Tariff,
        result: DispatchResult,
    ) -> bool:
        """Adopt *result* if it is strictly cheaper; return whether it was."""
        if result.net_present_cost >= self.net_present_cost:
            return False
        self.pv_size = pv_size
        self.solar_thermal_size = solar_thermal_size
        self.storage_volume = storage_volume
        self.tariff = tariff
        self.point = point
        self.result = result
        return True


class CostSurface:
    """Lazily evaluated minimum-NPC surface for one combination.

    Parameters
    ----------
    simulator : DispatchSimulator
        Oracle for individual (sizing, tariff) evaluations.
    annual : AnnualInputs
        Hourly inputs passed through to the simulator.
    combination : TechnologyCombination
        Technology being sized.
    grid : SizingGrid
        Index bounds and index-to-size mapping.
    specification : OptimalSpecification or None
        Best-so-far record to update.  A fresh one is created if omitted.
    tariffs : sequence of Tariff
        Tariffs minimised over at each cell.
    """

    def __init__(
        self,
        simulator: DispatchSimulator,
        annual: AnnualInputs,
        combination: TechnologyCombination,
        grid: SizingGrid,
        specification: OptimalSpecification | None = None,
        tariffs: tuple[Tariff, ...] = ALL_TARIFFS,
    ) -> None:
        self.simulator = simulator
        self.annual = annual
        self.combination = combination
        self.grid = grid
        self.specification = specification or OptimalSpecification(combination)
        self.tariffs = tuple(tariffs)
        self._cells: dict[tuple[int, int], float] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_or_compute(self, i: int, j: int) -> float:
        """Minimum NPC over tariffs at solar index *i*, storage index *j*."""
        cached = self._cells.get((i, j))
        if cached is not None:
            return cached
        if not self.grid.contains(i, j):
            raise IndexError(
                f"Sizing point ({i}, {j}) outside grid "
                f"{self.grid.solar_steps}x{self.grid.storage_steps}"
            )

        point = SizingPoint(i, j)
        pv_size = self.grid.pv_size(i)
        solar_thermal_size = self.grid.solar_thermal_size(i)
        volume = self.grid.storage_volume(j)

        best = math.inf
        for tariff in self.tariffs:
            result = self.simulator.evaluate(
                self.combination, pv_size, solar_thermal_size, volume, tariff, self.annual
            )
            if result.net_present_cost < best:
                best = result.net_present_cost
            self.specification.offer(
                point, pv_size, solar_thermal_size, volume, tariff, result
            )

        self._cells[(i, j)] = best
        logger.debug(
            "%s cell (%d, %d): pv=%d m2 st=%d m2 tes=%.1f m3 -> NPC %.0f",
            self.combination, i, j, pv_size, solar_thermal_size, volume, best,
        )
        return best

    def is_computed(self, i: int, j: int) -> bool:
        return (i, j) in self._cells

    @property
    def evaluated_cells(self) -> int:
        """Number of distinct cells computed so far."""
        return len(self._cells)

    def to_array(self) -> NDArray[np.float64]:
        """Cached values as a (solar_steps, storage_steps) array, NaN where unevaluated."""
        surface = np.full(
            (self.grid.solar_steps, self.grid.storage_steps), np.nan, dtype=np.float64
        )
        for (i, j), value in self._cells.items():
            surface[i, j] = value
        return surface
