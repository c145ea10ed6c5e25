"""Heating system assessment orchestrator.

``SimulationRunner`` wires together the building model, the dispatch
simulator and the sizing search into one end-to-end assessment of a
household: it derives (or calibrates) the building's fabric, sizes the
best system for each of the 21 heat source / solar combinations and
costs out the heat-only comparison systems.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Sequence

import numpy as np
from numpy.typing import NDArray

from heatengine.advisor.cost_surface import OptimalSpecification
from heatengine.advisor.scheduler import CombinationOutcome, CombinationScheduler, SearchOptions
from heatengine.building.demand import DemandSummary, calibrate_thermal_transmittance
from heatengine.building.profile import AnnualInputs, BuildingProfile, build_building_profile
from heatengine.building.shapes import DAYS_IN_MONTHS
from heatengine.dispatch.simulator import DispatchSimulator
from heatengine.dispatch.technology import ALL_COMBINATIONS, TechnologyCombination
from heatengine.economics.alternatives import GenericSystem, heat_only_alternatives
from heatengine.economics.metrics import CUMULATIVE_DISCOUNT_FACTOR
from heatengine.grid.tariff import ALL_TARIFFS, Tariff

logger = logging.getLogger(__name__)

# ======================================================================
# Constants
# ======================================================================

DEFAULT_STORAGE_VOLUME_MAX: float = 3.0  # m3


# ======================================================================
# Helpers
# ======================================================================

def _monthly_means(hourly: NDArray[np.float64]) -> NDArray[np.float64]:
    """Collapse an 8760-hour array to twelve calendar-month means."""
    bounds = np.cumsum([0] + [days * 24 for days in DAYS_IN_MONTHS])
    return np.array(
        [hourly[bounds[m]:bounds[m + 1]].mean() for m in range(12)], dtype=np.float64
    )


# ======================================================================
# Inputs and results
# ======================================================================

@dataclass
class HouseholdInputs:
    """Descriptors of the dwelling being assessed.

    Either ``thermal_transmittance`` or ``epc_space_heating`` must be
    given.  When only the EPC figure is known, the transmittance is
    calibrated from it using the monthly EPC climate arrays, which default
    to monthly means of the hourly weather.
    """

    thermostat_temperature: float
    latitude: float
    num_occupants: int
    house_size: float
    thermal_transmittance: float | None = None
    epc_space_heating: float | None = None
    epc_monthly_outside_temperatures: Sequence[float] | None = None
    epc_monthly_solar_irradiances: Sequence[float] | None = None
    coldest_outside_temperature: float | None = None

    def __post_init__(self) -> None:
        if self.thermal_transmittance is None and self.epc_space_heating is None:
            raise ValueError(
                "Either thermal_transmittance or epc_space_heating is required"
            )
        if self.house_size <= 0:
            raise ValueError("house_size must be positive")
        if self.num_occupants < 1:
            raise ValueError("num_occupants must be at least 1")
        if self.thermal_transmittance is not None and self.thermal_transmittance <= 0:
            raise ValueError("thermal_transmittance must be positive")


@dataclass
class SimulationResults:
    """Everything the assessment produces for one household."""

    thermal_transmittance: float
    profile: BuildingProfile
    erh_demand: DemandSummary
    hp_demand: DemandSummary
    specifications: list[OptimalSpecification]
    alternatives: list[GenericSystem]
    outcomes: list[CombinationOutcome] = field(default_factory=list, repr=False)
    epc_matched_demand: float | None = None
    duration_ms: float = 0.0

    def best_specification(self) -> OptimalSpecification:
        """Cheapest of the optimised systems."""
        return min(self.specifications, key=lambda spec: spec.net_present_cost)


# ======================================================================
# Runner
# ======================================================================

class SimulationRunner:
    """End-to-end heating system assessment for one household.

    Parameters
    ----------
    household : HouseholdInputs
        Dwelling descriptors.
    annual : AnnualInputs
        Hourly outside temperature, irradiance and variable tariff price.
    storage_volume_max : float
        Largest thermal store considered, m3.
    options : SearchOptions or None
        Sizing search behaviour.
    combinations : sequence of TechnologyCombination
        Combinations to size; all 21 by default.
    tariffs : sequence of Tariff
        Tariffs considered for every sizing.
    discount_factor : float
        Cumulative discount factor for net present cost.
    progress_callback : callable or None
        Optional ``callback(step: str, fraction: float)`` invoked at
        each major stage.  *fraction* ranges from 0.0 to 1.0.
    """

    def __init__(
        self,
        household: HouseholdInputs,
        annual: AnnualInputs,
        storage_volume_max: float = DEFAULT_STORAGE_VOLUME_MAX,
        options: SearchOptions | None = None,
        combinations: Sequence[TechnologyCombination] = ALL_COMBINATIONS,
        tariffs: Sequence[Tariff] = ALL_TARIFFS,
        discount_factor: float = CUMULATIVE_DISCOUNT_FACTOR,
        progress_callback: Callable[[str, float], None] | None = None,
    ) -> None:
        self.household = household
        self.annual = annual
        self.storage_volume_max = storage_volume_max
        self.options = options or SearchOptions()
        self.combinations = tuple(combinations)
        self.tariffs = tuple(tariffs)
        self.discount_factor = discount_factor
        self._progress = progress_callback

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _report(self, step: str, fraction: float) -> None:
        """Fire the progress callback if one was provided."""
        if self._progress is not None:
            try:
                self._progress(step, fraction)
            except Exception:
                logger.warning("Progress callback failed at %r", step, exc_info=True)

    def _thermal_transmittance(self) -> tuple[float, float | None]:
        household = self.household
        if household.thermal_transmittance is not None:
            return household.thermal_transmittance, None

        monthly_outside = household.epc_monthly_outside_temperatures
        if monthly_outside is None:
            monthly_outside = _monthly_means(self.annual.outside_temperature)
        monthly_irradiance = household.epc_monthly_solar_irradiances
        if monthly_irradiance is None:
            monthly_irradiance = _monthly_means(self.annual.solar_irradiance)

        u, matched = calibrate_thermal_transmittance(
            household.epc_space_heating,
            household.house_size,
            household.latitude,
            np.asarray(monthly_outside, dtype=np.float64),
            np.asarray(monthly_irradiance, dtype=np.float64),
        )
        return u, matched

    def _on_combination(self, outcome: CombinationOutcome, completed: int, total: int) -> None:
        self._report(f"Optimised {outcome.combination}", 0.10 + 0.85 * completed / total)

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def run(self) -> SimulationResults:
        """Execute the assessment and return its results."""
        start = time.perf_counter()
        household = self.household

        # ==============================================================
        # Step 1: Building fabric and demand
        # ==============================================================
        self._report("Deriving building profile", 0.0)
        thermal_transmittance, epc_matched = self._thermal_transmittance()
        profile = build_building_profile(
            thermostat_temperature=household.thermostat_temperature,
            latitude=household.latitude,
            num_occupants=household.num_occupants,
            house_size=household.house_size,
            thermal_transmittance=thermal_transmittance,
            annual=self.annual,
            coldest_outside_temperature=household.coldest_outside_temperature,
        )
        erh_demand = profile.erh_demand
        hp_demand = profile.hp_demand

        # ==============================================================
        # Step 2: Size every combination
        # ==============================================================
        self._report("Optimising system sizes", 0.10)
        simulator = DispatchSimulator(profile, self.discount_factor)
        scheduler = CombinationScheduler(
            simulator,
            self.annual,
            self.storage_volume_max,
            options=self.options,
            combinations=self.combinations,
            tariffs=self.tariffs,
            on_complete=self._on_combination,
        )
        outcomes = scheduler.run()

        # ==============================================================
        # Step 3: Heat-only comparison systems
        # ==============================================================
        self._report("Costing alternative systems", 0.95)
        if household.epc_space_heating is not None:
            epc_space_heating = household.epc_space_heating
        else:
            epc_space_heating = erh_demand.space
        alternatives = heat_only_alternatives(
            erh_demand.total, hp_demand.total, epc_space_heating, self.discount_factor
        )

        duration_ms = (time.perf_counter() - start) * 1000.0
        logger.info(
            "Assessment complete: U=%.2f W/m2.K, %d combinations in %.0f ms",
            thermal_transmittance,
            len(outcomes),
            duration_ms,
            extra={"duration_ms": round(duration_ms, 1)},
        )
        self._report("Assessment complete", 1.0)

        return SimulationResults(
            thermal_transmittance=thermal_transmittance,
            profile=profile,
            erh_demand=erh_demand,
            hp_demand=hp_demand,
            specifications=[outcome.specification for outcome in outcomes],
            alternatives=alternatives,
            outcomes=outcomes,
            epc_matched_demand=epc_matched,
            duration_ms=duration_ms,
        )


def run_simulation(
    household: HouseholdInputs,
    annual: AnnualInputs,
    storage_volume_max: float = DEFAULT_STORAGE_VOLUME_MAX,
    options: SearchOptions | None = None,
    combinations: Sequence[TechnologyCombination] = ALL_COMBINATIONS,
    tariffs: Sequence[Tariff] = ALL_TARIFFS,
    progress_callback: Callable[[str, float], None] | None = None,
) -> SimulationResults:
    """Convenience wrapper around :class:`SimulationRunner`."""
    return SimulationRunner(
        household,
        annual,
        storage_volume_max=storage_volume_max,
        options=options,
        combinations=combinations,
        tariffs=tariffs,
        progress_callback=progress_callback,
    ).run()
