"""Heat source performance and sizing.

Air- and ground-source heat pumps use quadratic fits of coefficient of
performance (COP) against temperature lift, from *A review of domestic heat
pumps* (Staffell et al., 2012).  Electric resistance heating has COP = 1.

The electrical rating of each heat source is sized from the building's peak
hourly heat demand at the worst-case COP, clamped to the range of domestic
units actually on the market (roughly 4 kWth to 7 kWe).
"""

from __future__ import annotations

from enum import IntEnum


# ======================================================================
# Heat source variants
# ======================================================================

class HeatOption(IntEnum):
    """Heating technology installed in the building."""

    ELECTRIC_RESISTANCE = 0
    AIR_SOURCE_HEAT_PUMP = 1
    GROUND_SOURCE_HEAT_PUMP = 2


ALL_HEAT_OPTIONS: tuple[HeatOption, ...] = tuple(HeatOption)


# ======================================================================
# Constants
# ======================================================================

# (a, b, c) in COP = a*x^2 + b*x + c, x = sink temperature - source temperature
ASHP_COP_COEFFICIENTS: tuple[float, float, float] = (0.00063, -0.121, 6.81)
GSHP_COP_COEFFICIENTS: tuple[float, float, float] = (0.000734, -0.150, 8.77)

# Sink temperature used when boosting storage with surplus PV (deg C).
BOOST_TEMPERATURE: float = 60.0

# Rating conditions for the reference COP: 35 C flow, 7 C air / 0 C ground.
ASHP_REFERENCE_LIFT: float = 35.0 - 7.0
GSHP_REFERENCE_LIFT: float = 35.0

MAX_ELECTRICAL_POWER: float = 7.0  # kW
MIN_THERMAL_POWER_ASHP: float = 4.0  # kWth, smallest ASHP on the market
MIN_THERMAL_POWER_GSHP: float = 6.0  # kWth


def _quadratic(a: float, b: float, c: float, x: float) -> float:
    return a * x * x + b * x + c


def _clamp(value: float, low: float, high: float) -> float:
    if value < low:
        return low
    if value > high:
        return high
    return value


def _unhandled(heat_option: HeatOption) -> AssertionError:
    return AssertionError(f"Unhandled heat option: {heat_option!r}")


# ======================================================================
# Performance
# ======================================================================

def cop_at_lift(heat_option: HeatOption, lift: float) -> float:
    """COP for a given temperature lift in kelvin."""
    if heat_option is HeatOption.ELECTRIC_RESISTANCE:
        return 1.0
    if heat_option is HeatOption.AIR_SOURCE_HEAT_PUMP:
        return _quadratic(*ASHP_COP_COEFFICIENTS, lift)
    if heat_option is HeatOption.GROUND_SOURCE_HEAT_PUMP:
        return _quadratic(*GSHP_COP_COEFFICIENTS, lift)
    raise _unhandled(heat_option)


def reference_cop(heat_option: HeatOption) -> float:
    """COP at rating conditions, used to convert electrical to thermal size."""
    if heat_option is HeatOption.ELECTRIC_RESISTANCE:
        return 1.0
    if heat_option is HeatOption.AIR_SOURCE_HEAT_PUMP:
        return cop_at_lift(heat_option, ASHP_REFERENCE_LIFT)
    if heat_option is HeatOption.GROUND_SOURCE_HEAT_PUMP:
        return cop_at_lift(heat_option, GSHP_REFERENCE_LIFT)
    raise _unhandled(heat_option)


def source_temperature(
    heat_option: HeatOption,
    outside_temperature: float,
    ground_temperature: float,
) -> float:
    """Temperature of the reservoir the heat source draws from."""
    if heat_option is HeatOption.GROUND_SOURCE_HEAT_PUMP:
        return ground_temperature
    return outside_temperature


def operating_cops(
    heat_option: HeatOption,
    hot_water_temperature: float,
    outside_temperature: float,
    ground_temperature: float,
) -> tuple[float, float]:
    """Return ``(cop_current, cop_boost)`` for one hour.

    Parameters
    ----------
    heat_option : HeatOption
        Installed heat source.
    hot_water_temperature : float
        Nominal storage / flow temperature in deg C.
    outside_temperature : float
        Ambient air temperature this hour in deg C.
    ground_temperature : float
        Ground temperature at collector depth in deg C.

    Returns
    -------
    tuple[float, float]
        COP at the nominal flow temperature and at the boost temperature.
    """
    if heat_option is HeatOption.ELECTRIC_RESISTANCE:
        return 1.0, 1.0
    source = source_temperature(heat_option, outside_temperature, ground_temperature)
    return (
        cop_at_lift(heat_option, hot_water_temperature - source),
        cop_at_lift(heat_option, BOOST_TEMPERATURE - source),
    )


# ======================================================================
# Sizing
# ======================================================================

def electrical_power(
    heat_option: HeatOption,
    erh_peak_hourly_demand: float,
    hp_peak_hourly_demand: float,
    hot_water_temperature: float,
    coldest_outside_temperature: float,
    ground_temperature: float,
) -> float:
    """Rated electrical input of the heat source in kW.

    Resistive heating is sized directly from its own peak demand (which uses
    the setback thermostat schedule).  Heat pumps are sized so that their
    worst-case COP still meets the peak heat-pump demand.
    """
    cop_ref = reference_cop(heat_option)
    if heat_option is HeatOption.ELECTRIC_RESISTANCE:
        return _clamp(
            erh_peak_hourly_demand, MIN_THERMAL_POWER_ASHP / cop_ref, MAX_ELECTRICAL_POWER
        )
    if heat_option is HeatOption.AIR_SOURCE_HEAT_PUMP:
        cop_worst = cop_at_lift(
            heat_option, hot_water_temperature - coldest_outside_temperature
        )
        return _clamp(
            hp_peak_hourly_demand / cop_worst,
            MIN_THERMAL_POWER_ASHP / cop_ref,
            MAX_ELECTRICAL_POWER,
        )
    if heat_option is HeatOption.GROUND_SOURCE_HEAT_PUMP:
        cop_worst = cop_at_lift(heat_option, hot_water_temperature - ground_temperature)
        return _clamp(
            hp_peak_hourly_demand / cop_worst,
            MIN_THERMAL_POWER_GSHP / cop_ref,
            MAX_ELECTRICAL_POWER,
        )
    raise _unhandled(heat_option)
