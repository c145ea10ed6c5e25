"""Annual heat demand of a dwelling and EPC-based fabric calibration.

The building is a single thermal node: each hour the interior temperature
moves by (solar gains + body gain - fabric loss) / heat capacity, and any
shortfall against the thermostat setpoint is met instantly by an
unconstrained heater.  Summing that shortfall gives the space-heating
demand; hot-water demand follows the daily volume model.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from . import shapes

if TYPE_CHECKING:
    from .profile import AnnualInputs, BuildingProfile

logger = logging.getLogger(__name__)


# ======================================================================
# Constants
# ======================================================================

# Transmittance search range for EPC calibration (W/m2.K).
TRANSMITTANCE_MIN: float = 0.5
TRANSMITTANCE_MAX: float = 3.0
TRANSMITTANCE_STEP: float = 0.01

# Efficiency assumed by the EPC space-heating figure.
EPC_BOILER_EFFICIENCY: float = 0.9
EPC_START_TEMPERATURE: float = 20.0

# EPC standard occupancy schedules (deg C).
_EPC_SUMMER = np.full(24, 7.0)
_EPC_WEEKEND = np.array([7.0] * 7 + [20.0] * 17)
_EPC_WEEKDAY = np.array([7.0] * 7 + [20.0] * 3 + [7.0] * 6 + [20.0] * 8)
_EPC_SUMMER_MONTHS = range(5, 9)  # Jun - Sep, heating off


@dataclass
class DemandSummary:
    """Annual heat demand for one thermostat schedule (kWh)."""

    total: float
    space: float
    hot_water: float
    peak_hourly: float


# ======================================================================
# Annual demand
# ======================================================================

def compute_annual_demand(
    profile: BuildingProfile,
    annual: AnnualInputs,
    setpoints: NDArray[np.float64],
) -> DemandSummary:
    """Heat demand with an unconstrained heater following *setpoints*.

    Parameters
    ----------
    profile : BuildingProfile
        Building thermal model and shape tables.
    annual : AnnualInputs
        Hourly outside temperature and irradiance.
    setpoints : ndarray, shape (24,)
        Hourly thermostat schedule.

    Returns
    -------
    DemandSummary
    """
    outside = annual.outside_temperature.tolist()
    irradiance = annual.solar_irradiance.tolist()
    schedule = [float(t) for t in setpoints]

    ua = profile.heat_loss_coefficient
    capacity = profile.heat_capacity
    body_gain = profile.body_heat_gain
    gain_factor = profile.solar_gain_house_factor

    inside = profile.thermostat_temperature
    total = 0.0
    hot_water_total = 0.0
    peak = 0.0
    h = 0

    for month, days in enumerate(shapes.DAYS_IN_MONTHS):
        hot_water = profile.monthly_hot_water_demand(month).tolist()
        gain_ratio = (
            profile.monthly_solar_gain_ratios_north[month]
            + profile.monthly_solar_gain_ratios_south[month]
        )
        for _day in range(days):
            for hour in range(24):
                solar_gain = irradiance[h] * gain_ratio * gain_factor
                heat_loss = ua * (inside - outside[h])
                inside += (-heat_loss + solar_gain + body_gain) / capacity

                space = 0.0
                if inside < schedule[hour]:
                    space = (schedule[hour] - inside) * capacity
                    inside = schedule[hour]

                hourly = hot_water[hour] + space
                if hourly > peak:
                    peak = hourly
                total += hourly
                hot_water_total += hot_water[hour]
                h += 1

    return DemandSummary(
        total=total,
        space=total - hot_water_total,
        hot_water=hot_water_total,
        peak_hourly=peak,
    )


# ======================================================================
# EPC calibration
# ======================================================================

def epc_body_gain(house_size: float) -> float:
    """Metabolic gain (kWh/h) for the SAP assumed occupancy of a floor area."""
    x = house_size - 13.9
    occupants = 1.0 + 1.76 * (1.0 - math.exp(-0.000349 * x * x)) + 0.0013 * x
    return occupants * 60.0 / 1000.0


def _epc_space_demand(
    thermal_transmittance: float,
    house_size: float,
    capacity: float,
    body_gain: float,
    monthly_outside: NDArray[np.float64],
    monthly_gains: NDArray[np.float64],
) -> float:
    inside = EPC_START_TEMPERATURE
    demand = 0.0
    ua = house_size * thermal_transmittance / 1000.0

    for month, days in enumerate(shapes.DAYS_IN_MONTHS):
        outside = float(monthly_outside[month])
        gains = float(monthly_gains[month]) + body_gain
        for day in range(days):
            if month in _EPC_SUMMER_MONTHS:
                schedule = _EPC_SUMMER
            elif day % 7 >= 5:
                schedule = _EPC_WEEKEND
            else:
                schedule = _EPC_WEEKDAY
            for desired in schedule:
                inside += (-ua * (inside - outside) + gains) / capacity
                if inside < desired:
                    demand += (desired - inside) * capacity / EPC_BOILER_EFFICIENCY
                    inside = desired
    return demand


def calibrate_thermal_transmittance(
    epc_space_heating: float,
    house_size: float,
    latitude: float,
    monthly_outside_temperatures: NDArray[np.float64],
    monthly_solar_irradiances: NDArray[np.float64],
) -> tuple[float, float]:
    """Find the transmittance whose EPC-schedule demand matches a certificate.

    Scans upward from ``TRANSMITTANCE_MIN`` and stops at the first step
    where the error against *epc_space_heating* stops shrinking (demand is
    monotonic in transmittance).

    Parameters
    ----------
    epc_space_heating : float
        Annual space-heating demand from the energy performance
        certificate, in kWh.
    house_size : float
        Floor area in m2.
    latitude : float
        Site latitude, used for the window gain ratios.
    monthly_outside_temperatures : ndarray, shape (12,)
        Regional monthly mean outside temperature (deg C).
    monthly_solar_irradiances : ndarray, shape (12,)
        Regional monthly mean irradiance (W/m2).

    Returns
    -------
    tuple[float, float]
        ``(thermal_transmittance, matched_demand_kwh)``.
    """
    monthly_outside = np.asarray(monthly_outside_temperatures, dtype=np.float64)
    monthly_irradiance = np.asarray(monthly_solar_irradiances, dtype=np.float64)
    if monthly_outside.shape != (12,) or monthly_irradiance.shape != (12,):
        raise ValueError("monthly EPC climate arrays must have shape (12,)")

    north, south = shapes.window_gain_ratios(latitude)
    monthly_gains = monthly_irradiance * (north + south) * shapes.solar_gain_house_factor(
        house_size
    )
    capacity = shapes.heat_capacity(house_size)
    body_gain = epc_body_gain(house_size)

    best_u = TRANSMITTANCE_MIN
    best_demand = 0.0
    steps = int(
        (TRANSMITTANCE_MAX - TRANSMITTANCE_MIN + TRANSMITTANCE_STEP / 10.0) / TRANSMITTANCE_STEP
    )
    for i in range(steps):
        u = TRANSMITTANCE_MIN + TRANSMITTANCE_STEP * i
        demand = _epc_space_demand(
            u, house_size, capacity, body_gain, monthly_outside, monthly_gains
        )
        if abs(epc_space_heating - demand) < abs(epc_space_heating - best_demand):
            best_u = u
            best_demand = demand
        else:
            break

    logger.info(
        "Calibrated thermal transmittance %.2f W/m2K (EPC %.0f kWh, model %.0f kWh)",
        best_u,
        epc_space_heating,
        best_demand,
    )
    return best_u, best_demand
