"""Monthly and hourly shape tables for a UK dwelling.

Hot-water usage follows the SAP / BREDEM daily volume model with fixed
hourly and monthly distributions.  Solar gain ratios use the SAP
polynomial fits against solar height for vertical windows and a 35 deg
pitched roof.  Cold-water (mains) temperatures are banded by latitude.

All year-long iteration uses the fixed 365-day calendar below; leap years
are not modelled.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray


# ======================================================================
# Calendar
# ======================================================================

HOURS_PER_YEAR: int = 8760
DAYS_IN_MONTHS: tuple[int, ...] = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


# ======================================================================
# Built-in tables
# ======================================================================

# Mid-month solar declination (deg), Jan..Dec.
MONTHLY_SOLAR_DECLINATIONS = np.array(
    [-20.7, -12.8, -1.8, 9.8, 18.8, 23.1, 21.2, 13.7, 2.9, -8.7, -18.4, -23.0],
    dtype=np.float64,
)

# Seasonal scaling of daily hot-water use, Jan..Dec.
MONTHLY_HOT_WATER_FACTORS = np.array(
    [1.10, 1.06, 1.02, 0.98, 0.94, 0.90, 0.90, 0.94, 0.98, 1.02, 1.06, 1.10],
    dtype=np.float64,
)

# Fraction of daily hot-water use in each hour (sums to 0.997).
HOURLY_HOT_WATER_RATIOS = np.array(
    [
        0.025, 0.018, 0.011, 0.010, 0.008, 0.013,  # 00-05
        0.017, 0.044, 0.088, 0.075, 0.060, 0.056,  # 06-11
        0.050, 0.043, 0.036, 0.029, 0.030, 0.036,  # 12-17
        0.053, 0.074, 0.071, 0.059, 0.050, 0.041,  # 18-23
    ],
    dtype=np.float64,
)

# (exclusive upper latitude, monthly mains temperatures in deg C)
_COLD_WATER_BANDS: tuple[tuple[float, tuple[float, ...]], ...] = (
    # South of England
    (52.2, (12.1, 11.4, 12.3, 15.2, 16.1, 19.3, 21.2, 20.1, 19.5, 16.8, 13.7, 12.4)),
    # Midlands and Wales
    (53.3, (12.9, 13.3, 14.4, 16.3, 17.7, 19.7, 21.8, 20.1, 20.3, 17.8, 15.3, 14.0)),
    # North of England and Northern Ireland
    (54.95, (9.6, 9.3, 10.7, 13.7, 15.3, 17.3, 19.3, 18.6, 17.9, 15.5, 12.3, 10.5)),
)
_COLD_WATER_SCOTLAND = (9.6, 9.2, 9.8, 13.2, 14.5, 16.8, 19.4, 18.5, 17.5, 15.1, 13.7, 12.4)

DEFAULT_HOT_WATER_TEMPERATURE: float = 51.0

# Setback applied overnight (22:00 - 06:59) for resistive heating.
ERH_NIGHT_SETBACK: float = 2.0

WINDOW_PITCH: float = 90.0  # deg, vertical glazing
ROOF_PITCH: float = 35.0  # deg from horizontal


# ======================================================================
# Helpers
# ======================================================================

def _cubic(a: float, b: float, c: float, d: float, x: float) -> float:
    return a * x ** 3 + b * x ** 2 + c * x + d


def _pitch_factor(pitch_deg: float) -> float:
    return math.sin(math.radians(pitch_deg / 2.0))


def solar_height_factors(latitude: float) -> NDArray[np.float64]:
    """Cosine of the mid-month solar zenith angle at noon, Jan..Dec."""
    return np.cos(np.radians(latitude - MONTHLY_SOLAR_DECLINATIONS))


def _south_ratios(latitude: float, pitch_deg: float) -> NDArray[np.float64]:
    pf = _pitch_factor(pitch_deg)
    a = _cubic(-0.66, -0.106, 2.93, 0.0, pf)
    b = _cubic(3.63, -0.374, -7.4, 0.0, pf)
    c = _cubic(-2.71, -0.991, 4.59, 1.0, pf)
    h = solar_height_factors(latitude)
    return a * h * h + b * h + c


# ======================================================================
# Public shape functions
# ======================================================================

def window_gain_ratios(latitude: float) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Monthly solar gain ratios ``(north, south)`` for vertical windows."""
    pf = _pitch_factor(WINDOW_PITCH)
    a = _cubic(26.3, -38.5, 14.8, 0.0, pf)
    b = _cubic(-16.5, 27.3, -11.9, 0.0, pf)
    c = _cubic(-1.06, -0.0872, -0.191, 1.0, pf)
    h = solar_height_factors(latitude)
    north = a * h * h + b * h + c
    return north, _south_ratios(latitude, WINDOW_PITCH)


def roof_gain_ratios(latitude: float) -> NDArray[np.float64]:
    """Monthly irradiance ratio for the south-facing 35 deg roof plane."""
    return _south_ratios(latitude, ROOF_PITCH)


def cold_water_temperatures(latitude: float) -> NDArray[np.float64]:
    """Monthly mains water temperature for the latitude band."""
    for upper, temperatures in _COLD_WATER_BANDS:
        if latitude < upper:
            return np.array(temperatures, dtype=np.float64)
    return np.array(_COLD_WATER_SCOTLAND, dtype=np.float64)


def daily_hot_water_volume(num_occupants: int) -> float:
    """Average daily hot-water volume in litres.

    Showers assume a mixer fed from storage; baths assume a shower is also
    present.
    """
    n = float(num_occupants)
    showers = (0.45 * n + 0.65) * 28.8
    baths = (0.13 * n + 0.19) * 50.8
    other = 9.8 * n + 14.0
    return showers + baths + other


def solar_gain_house_factor(house_size: float) -> float:
    """Effective glazed aperture (kW per W/m2 of irradiance).

    Glazing is taken as 15 % of floor area split evenly north/south, with
    frame, shading, transmittance and dirt factors applied.
    """
    return (house_size * 0.15 / 2.0) * 0.77 * 0.7 * 0.76 * 0.9 / 1000.0


def heat_capacity(house_size: float) -> float:
    """Thermal capacity of the dwelling in kWh/K (medium thermal mass)."""
    return 250.0 * house_size / 3600.0


def body_heat_gain(num_occupants: int) -> float:
    """Metabolic gain in kWh per hour (60 W per person)."""
    return num_occupants * 60.0 / 1000.0


def ground_temperature(latitude: float) -> float:
    """Ground temperature at 100 m depth, linear regression across the UK."""
    return 15.0 - (latitude - 50.0) * (4.0 / 9.0)


def erh_setpoints(thermostat_temperature: float) -> NDArray[np.float64]:
    """Hourly thermostat schedule for resistive heating (overnight setback)."""
    setpoints = np.full(24, thermostat_temperature, dtype=np.float64)
    setpoints[:7] -= ERH_NIGHT_SETBACK
    setpoints[22:] -= ERH_NIGHT_SETBACK
    return setpoints


def hp_setpoints(thermostat_temperature: float) -> NDArray[np.float64]:
    """Hourly thermostat schedule for heat pumps (constant)."""
    return np.full(24, thermostat_temperature, dtype=np.float64)
