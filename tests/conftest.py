"""Shared test fixtures for heating engine and service tests."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.typing import NDArray

from heatengine.building.profile import AnnualInputs, BuildingProfile, build_building_profile
from heatengine.building.shapes import heat_capacity
from heatengine.dispatch.simulator import DispatchSimulator

HOURS_PER_YEAR = 8760


# ======================================================================
# Weather fixtures
# ======================================================================

@pytest.fixture
def uk_weather() -> dict[str, NDArray[np.float64]]:
    """Synthetic weather and Agile prices resembling southern England.

    Provides 8760-element arrays for outside temperature, global
    horizontal irradiance and the variable tariff price.
    """
    rng = np.random.default_rng(42)
    hours = np.arange(HOURS_PER_YEAR, dtype=np.float64)
    hour_of_day = hours % 24
    # 0 in mid-January, 1 in mid-July
    season = 0.5 - 0.5 * np.cos(2 * np.pi * (hours - 360.0) / HOURS_PER_YEAR)

    # Temperature: 4 C winter to 17 C summer mean, +/- 3 C diurnal
    temperature = 4.0 + 13.0 * season
    temperature += 3.0 * np.sin(2 * np.pi * (hour_of_day - 9) / 24)
    temperature += rng.normal(0, 1.5, HOURS_PER_YEAR)

    # Irradiance: daytime bell curve, longer and stronger days in summer
    day_length = 8.0 + 8.0 * season
    sunrise = 12.0 - day_length / 2.0
    phase = (hour_of_day - sunrise) / day_length
    daylight = (phase > 0) & (phase < 1)
    irradiance = np.where(daylight, np.sin(np.pi * np.clip(phase, 0, 1)), 0.0)
    irradiance *= 150.0 + 550.0 * season
    irradiance *= rng.uniform(0.3, 1.0, HOURS_PER_YEAR)

    # Agile price: evening peak, cheap overnight
    price = 14.0 + 10.0 * np.exp(-((hour_of_day - 17.5) ** 2) / 4.0)
    price -= 7.0 * ((hour_of_day >= 1) & (hour_of_day <= 5))
    price += rng.normal(0, 1.0, HOURS_PER_YEAR)

    return {
        "outside_temperature": temperature.astype(np.float64),
        "solar_irradiance": np.clip(irradiance, 0, None).astype(np.float64),
        "agile_price": price.astype(np.float64),
    }


@pytest.fixture
def annual(uk_weather) -> AnnualInputs:
    return AnnualInputs(**uk_weather)


@pytest.fixture
def constant_annual() -> AnnualInputs:
    """10 C all year, no sun, Agile flat at 15 p/kWh."""
    return AnnualInputs(
        outside_temperature=np.full(HOURS_PER_YEAR, 10.0),
        solar_irradiance=np.zeros(HOURS_PER_YEAR),
        agile_price=np.full(HOURS_PER_YEAR, 15.0),
    )


# ======================================================================
# Building fixtures
# ======================================================================

@pytest.fixture
def small_profile(annual) -> BuildingProfile:
    """12 m2 dwelling: 2 m2 of roof for solar, so every solar grid is tiny."""
    return build_building_profile(
        thermostat_temperature=20.0,
        latitude=51.5,
        num_occupants=2,
        house_size=12.0,
        thermal_transmittance=1.5,
        annual=annual,
    )


@pytest.fixture
def flat_profile() -> BuildingProfile:
    """100 m2 box: constant 20 C setpoint, no gains, no hot water.

    With 10 C outside the fabric loses exactly 1 kWh every hour.
    """
    return BuildingProfile(
        house_size=100.0,
        heat_capacity=heat_capacity(100.0),
        thermal_transmittance=1.0,
        body_heat_gain=0.0,
        solar_gain_house_factor=0.0,
        hot_water_volume=0.0,
        thermostat_temperature=20.0,
        erh_setpoints=np.full(24, 20.0),
        hp_setpoints=np.full(24, 20.0),
        monthly_hot_water_factors=np.ones(12),
        monthly_cold_water_temperatures=np.full(12, 10.0),
        monthly_solar_gain_ratios_north=np.zeros(12),
        monthly_solar_gain_ratios_south=np.zeros(12),
        monthly_roof_ratios_south=np.zeros(12),
        ground_temperature=10.0,
        coldest_outside_temperature=10.0,
    )


@pytest.fixture
def simulator(small_profile) -> DispatchSimulator:
    return DispatchSimulator(small_profile)
