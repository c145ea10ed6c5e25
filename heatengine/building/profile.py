"""Building inputs consumed by the dispatch simulator.

``BuildingProfile`` carries the thermal characteristics of one dwelling
and the shape tables derived from its location and occupancy.
``AnnualInputs`` carries the three 8760-hour arrays (weather and the
variable tariff price).  Both validate their array shapes on construction;
the simulator itself trusts them.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from heatengine.heating.heat_pump import HeatOption

from . import shapes
from .demand import DemandSummary, compute_annual_demand

logger = logging.getLogger(__name__)


def _as_array(name: str, values, length: int) -> NDArray[np.float64]:
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape != (length,):
        raise ValueError(f"{name} must have shape ({length},), got {arr.shape}")
    return arr


# ======================================================================
# Annual hourly arrays
# ======================================================================

@dataclass
class AnnualInputs:
    """Hourly arrays for one (non-leap) year.

    Parameters
    ----------
    outside_temperature : array_like, shape (8760,)
        Ambient air temperature in deg C.
    solar_irradiance : array_like, shape (8760,)
        Global horizontal irradiance in W/m2.
    agile_price : array_like, shape (8760,)
        Variable tariff import price in p/kWh.
    """

    outside_temperature: NDArray[np.float64]
    solar_irradiance: NDArray[np.float64]
    agile_price: NDArray[np.float64]

    def __post_init__(self) -> None:
        n = shapes.HOURS_PER_YEAR
        self.outside_temperature = _as_array("outside_temperature", self.outside_temperature, n)
        self.solar_irradiance = _as_array("solar_irradiance", self.solar_irradiance, n)
        self.agile_price = _as_array("agile_price", self.agile_price, n)


# ======================================================================
# Building profile
# ======================================================================

@dataclass
class BuildingProfile:
    """Thermal model and demand shapes for one dwelling.

    Energy quantities are in kWh, temperatures in deg C, areas in m2.
    ``thermal_transmittance`` is the whole-house heat-loss coefficient per
    unit floor area in W/m2.K.
    """

    house_size: float
    heat_capacity: float
    thermal_transmittance: float
    body_heat_gain: float
    solar_gain_house_factor: float
    hot_water_volume: float
    thermostat_temperature: float
    erh_setpoints: NDArray[np.float64]
    hp_setpoints: NDArray[np.float64]
    monthly_hot_water_factors: NDArray[np.float64]
    monthly_cold_water_temperatures: NDArray[np.float64]
    monthly_solar_gain_ratios_north: NDArray[np.float64]
    monthly_solar_gain_ratios_south: NDArray[np.float64]
    monthly_roof_ratios_south: NDArray[np.float64]
    ground_temperature: float
    coldest_outside_temperature: float
    hot_water_temperature: float = shapes.DEFAULT_HOT_WATER_TEMPERATURE
    erh_peak_hourly_demand: float = 0.0
    hp_peak_hourly_demand: float = 0.0
    # Unconstrained annual demand under each schedule, set by build_building_profile.
    erh_demand: DemandSummary | None = field(default=None, compare=False, repr=False)
    hp_demand: DemandSummary | None = field(default=None, compare=False, repr=False)
    hourly_hot_water_ratios: NDArray[np.float64] = field(
        default_factory=lambda: shapes.HOURLY_HOT_WATER_RATIOS.copy()
    )

    def __post_init__(self) -> None:
        if self.house_size <= 0:
            raise ValueError(f"house_size must be positive, got {self.house_size}")
        if self.heat_capacity <= 0:
            raise ValueError(f"heat_capacity must be positive, got {self.heat_capacity}")

        self.erh_setpoints = _as_array("erh_setpoints", self.erh_setpoints, 24)
        self.hp_setpoints = _as_array("hp_setpoints", self.hp_setpoints, 24)
        self.hourly_hot_water_ratios = _as_array(
            "hourly_hot_water_ratios", self.hourly_hot_water_ratios, 24
        )
        for name in (
            "monthly_hot_water_factors",
            "monthly_cold_water_temperatures",
            "monthly_solar_gain_ratios_north",
            "monthly_solar_gain_ratios_south",
            "monthly_roof_ratios_south",
        ):
            setattr(self, name, _as_array(name, getattr(self, name), 12))

    @property
    def heat_loss_coefficient(self) -> float:
        """Fabric heat loss in kW/K (floor area x transmittance)."""
        return self.house_size * self.thermal_transmittance / 1000.0

    def setpoints(self, heat_option: HeatOption) -> NDArray[np.float64]:
        """Hourly thermostat schedule used with *heat_option*."""
        if heat_option is HeatOption.ELECTRIC_RESISTANCE:
            return self.erh_setpoints
        return self.hp_setpoints

    def monthly_hot_water_demand(self, month: int) -> NDArray[np.float64]:
        """Hourly hot-water heat demand (kWh) for one day of *month* (0-based)."""
        daily_kwh = (
            self.hot_water_volume
            * 4.18
            * (self.hot_water_temperature - self.monthly_cold_water_temperatures[month])
            / 3600.0
        )
        return daily_kwh * self.monthly_hot_water_factors[month] * self.hourly_hot_water_ratios


# ======================================================================
# Construction from household descriptors
# ======================================================================

def build_building_profile(
    thermostat_temperature: float,
    latitude: float,
    num_occupants: int,
    house_size: float,
    thermal_transmittance: float,
    annual: AnnualInputs,
    coldest_outside_temperature: float | None = None,
) -> BuildingProfile:
    """Derive a complete :class:`BuildingProfile` for a household.

    Runs the unconstrained annual demand model for both thermostat
    schedules so that heat sources can be sized from peak hourly demand.

    Parameters
    ----------
    thermostat_temperature : float
        Daytime thermostat setting in deg C.
    latitude : float
        Site latitude in degrees north.
    num_occupants : int
        Number of occupants.
    house_size : float
        Floor area in m2.
    thermal_transmittance : float
        Heat-loss coefficient per floor area in W/m2.K.
    annual : AnnualInputs
        Hourly weather and variable tariff arrays.
    coldest_outside_temperature : float or None
        Design outside temperature for air-source sizing.  Defaults to the
        minimum hourly outside temperature of the year.

    Returns
    -------
    BuildingProfile
    """
    if coldest_outside_temperature is None:
        coldest_outside_temperature = float(np.min(annual.outside_temperature))

    north, south = shapes.window_gain_ratios(latitude)

    profile = BuildingProfile(
        house_size=house_size,
        heat_capacity=shapes.heat_capacity(house_size),
        thermal_transmittance=thermal_transmittance,
        body_heat_gain=shapes.body_heat_gain(num_occupants),
        solar_gain_house_factor=shapes.solar_gain_house_factor(house_size),
        hot_water_volume=shapes.daily_hot_water_volume(num_occupants),
        thermostat_temperature=thermostat_temperature,
        erh_setpoints=shapes.erh_setpoints(thermostat_temperature),
        hp_setpoints=shapes.hp_setpoints(thermostat_temperature),
        monthly_hot_water_factors=shapes.MONTHLY_HOT_WATER_FACTORS.copy(),
        monthly_cold_water_temperatures=shapes.cold_water_temperatures(latitude),
        monthly_solar_gain_ratios_north=north,
        monthly_solar_gain_ratios_south=south,
        monthly_roof_ratios_south=shapes.roof_gain_ratios(latitude),
        ground_temperature=shapes.ground_temperature(latitude),
        coldest_outside_temperature=coldest_outside_temperature,
    )

    erh_demand = compute_annual_demand(profile, annual, profile.erh_setpoints)
    hp_demand = compute_annual_demand(profile, annual, profile.hp_setpoints)
    logger.info(
        "Building demand: ERH %.0f kWh/yr (peak %.2f kW), HP %.0f kWh/yr (peak %.2f kW)",
        erh_demand.total,
        erh_demand.peak_hourly,
        hp_demand.total,
        hp_demand.peak_hourly,
    )

    return dataclasses.replace(
        profile,
        erh_peak_hourly_demand=erh_demand.peak_hourly,
        hp_peak_hourly_demand=hp_demand.peak_hourly,
        erh_demand=erh_demand,
        hp_demand=hp_demand,
    )
