"""
Hot-water thermal energy storage (TES) model.

The tank is a vertical cylinder whose height is twice its radius.  Its
state is a single number, the stored heat in kWh above the 40 deg C
minimum useful temperature.  Three nested charge thresholds split the tank
into regimes:

* **nominal** -- up to ``charge_full``: hot water at the nominal flow
  temperature above a cold-water layer.
* **boost** -- up to ``charge_boost``: the tank is raised to 60 deg C by
  the heat pump running on surplus PV.
* **maximum** -- up to ``charge_max``: 95 deg C, reachable only with solar
  thermal input.

Within each regime the thermocline height (fraction of the tank, top
down, that sits at the upper temperature) scales linearly with charge.
"""

from __future__ import annotations

import math

# Water properties.
WATER_DENSITY: float = 1000.0  # kg/m3
WATER_SPECIFIC_HEAT: float = 4.18  # kJ/kg.K
SECONDS_PER_HOUR: float = 3600.0

MIN_USEFUL_TEMPERATURE: float = 40.0
BOOST_UPPER_TEMPERATURE: float = 60.0
MAX_UPPER_TEMPERATURE: float = 95.0

# Heat-loss coefficient of the tank wall, kW/m2.K (linearised).
TANK_U_VALUE: float = 1.30 / 1000.0

# Always keep 10 litres of usable hot water, heated from mains at 10 deg C.
MIN_HOT_WATER_LITRES: float = 10.0
MAINS_TEMPERATURE: float = 10.0

STORAGE_VOLUME_STEP: float = 0.1  # m3


def _heat_kwh(volume_m3: float, delta_t: float) -> float:
    return volume_m3 * WATER_DENSITY * WATER_SPECIFIC_HEAT * delta_t / SECONDS_PER_HOUR


class ThermalStore:
    """Geometry, charge thresholds and standing losses of one tank size.

    The object is immutable; the state of charge is owned by the caller so
    that a single store can be shared across tariff evaluations.

    Parameters
    ----------
    volume_m3 : float
        Tank volume in m3.  Must be positive.
    hot_water_temperature : float
        Nominal storage temperature in deg C.  Must exceed 40 deg C.
    """

    def __init__(self, volume_m3: float, hot_water_temperature: float) -> None:
        if volume_m3 <= 0:
            raise ValueError(f"volume_m3 must be positive, got {volume_m3}")
        if hot_water_temperature <= MIN_USEFUL_TEMPERATURE:
            raise ValueError(
                f"hot_water_temperature must exceed {MIN_USEFUL_TEMPERATURE}, "
                f"got {hot_water_temperature}"
            )

        self.volume_m3: float = volume_m3
        self.hot_water_temperature: float = hot_water_temperature

        self.charge_full: float = _heat_kwh(
            volume_m3, hot_water_temperature - MIN_USEFUL_TEMPERATURE
        )
        self.charge_boost: float = _heat_kwh(
            volume_m3, BOOST_UPPER_TEMPERATURE - MIN_USEFUL_TEMPERATURE
        )
        self.charge_max: float = _heat_kwh(
            volume_m3, MAX_UPPER_TEMPERATURE - MIN_USEFUL_TEMPERATURE
        )
        # Independent of volume: a fixed amount of hot water.
        self.charge_min: float = (
            MIN_HOT_WATER_LITRES
            * WATER_SPECIFIC_HEAT
            * (hot_water_temperature - MAINS_TEMPERATURE)
            / SECONDS_PER_HOUR
        )

        radius = (volume_m3 / (2.0 * math.pi)) ** (1.0 / 3.0)
        self.radius: float = radius
        # End cap area and full side-wall area (height = 2r).
        self._end_area: float = math.pi * radius * radius
        self._wall_area: float = math.pi * 2.0 * radius * 2.0 * radius

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def regime(
        self, charge: float, cold_water_temperature: float
    ) -> tuple[float, float, float]:
        """Return ``(upper_temp, lower_temp, thermocline_height)`` for *charge*.

        Parameters
        ----------
        charge : float
            Current stored heat in kWh.
        cold_water_temperature : float
            Mains inlet temperature this month in deg C; the bottom of the
            tank sits at this temperature in the nominal regime.
        """
        if charge <= self.charge_full:
            return (
                self.hot_water_temperature,
                cold_water_temperature,
                charge / self.charge_full,
            )
        if charge <= self.charge_boost:
            return (
                BOOST_UPPER_TEMPERATURE,
                self.hot_water_temperature,
                (charge - self.charge_full) / (self.charge_boost - self.charge_full),
            )
        return (
            MAX_UPPER_TEMPERATURE,
            BOOST_UPPER_TEMPERATURE,
            (charge - self.charge_boost) / (self.charge_max - self.charge_boost),
        )

    def standing_losses(
        self,
        upper_temperature: float,
        lower_temperature: float,
        thermocline_height: float,
        ambient_temperature: float,
    ) -> float:
        """Heat lost through the tank wall over one hour, in kWh.

        The upper layer loses through the top cap and its share of the wall,
        the lower layer through the bottom cap and the rest of the wall.
        """
        upper = (
            (upper_temperature - ambient_temperature)
            * TANK_U_VALUE
            * (self._wall_area * thermocline_height + self._end_area)
        )
        lower = (
            (lower_temperature - ambient_temperature)
            * TANK_U_VALUE
            * (self._wall_area * (1.0 - thermocline_height) + self._end_area)
        )
        return upper + lower

    def clamp(self, charge: float) -> float:
        """Bound *charge* to ``[0, charge_max]``."""
        if charge < 0.0:
            return 0.0
        if charge > self.charge_max:
            return self.charge_max
        return charge

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"ThermalStore(volume_m3={self.volume_m3}, "
            f"charge_full={self.charge_full:.3f}, charge_max={self.charge_max:.3f})"
        )


def storage_volume(index: int) -> float:
    """Tank volume in m3 for storage option *index* (0.1 m3 increments)."""
    return STORAGE_VOLUME_STEP + STORAGE_VOLUME_STEP * index


def storage_steps(volume_max: float) -> int:
    """Number of storage options up to *volume_max* m3."""
    # Small offset absorbs float error in e.g. 3.0 / 0.1.
    return int((volume_max + 0.01) / STORAGE_VOLUME_STEP)
