"""
Roof-mounted solar generation: photovoltaics and solar thermal collectors.

Both technologies share the south-facing roof.  Incident irradiance on the
roof plane is the hourly horizontal irradiance scaled by a monthly roof
ratio; PV output is derated by a fixed shading factor and solar thermal
output follows a quadratic collector-efficiency curve in the difference
between collector and ambient temperature.
"""

from __future__ import annotations

from enum import IntEnum


class SolarOption(IntEnum):
    """Solar technology installed on the roof."""

    NONE = 0
    PV = 1
    FLAT_PLATE = 2
    EVACUATED_TUBE = 3
    PV_FLAT_PLATE = 4
    PV_EVACUATED_TUBE = 5
    PV_THERMAL_HYBRID = 6


ALL_SOLAR_OPTIONS: tuple[SolarOption, ...] = tuple(SolarOption)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Monocrystalline module efficiency (Technology Library).
PV_EFFICIENCY: float = 0.1928

# Hybrid panel: 14.7 % at 25 C, falling 0.45 %/K.
PVT_REFERENCE_EFFICIENCY: float = 14.7
PVT_TEMPERATURE_COEFFICIENT: float = 0.0045
PVT_REFERENCE_TEMPERATURE: float = 25.0

SHADING_FACTOR: float = 0.8

# (a, b, c): eta = a*dT^2 + b*dT + c*G, dT = collector - ambient
FLAT_PLATE_COEFFICIENTS: tuple[float, float, float] = (-0.000038, -0.0035, 0.78)
EVACUATED_TUBE_COEFFICIENTS: tuple[float, float, float] = (-0.00002, -0.0009, 0.625)
PVT_COEFFICIENTS: tuple[float, float, float] = (-0.0000176, -0.003325, 0.726)


def _unhandled(solar_option: SolarOption) -> AssertionError:
    return AssertionError(f"Unhandled solar option: {solar_option!r}")


# ---------------------------------------------------------------------------
# Option properties
# ---------------------------------------------------------------------------

def has_pv(solar_option: SolarOption) -> bool:
    """True if the option generates electricity."""
    return solar_option in (
        SolarOption.PV,
        SolarOption.PV_FLAT_PLATE,
        SolarOption.PV_EVACUATED_TUBE,
        SolarOption.PV_THERMAL_HYBRID,
    )


def has_solar_thermal(solar_option: SolarOption) -> bool:
    """True if the option delivers heat to the store."""
    return solar_option not in (SolarOption.NONE, SolarOption.PV)


def shares_roof(solar_option: SolarOption) -> bool:
    """True if separate PV and thermal collectors split the roof budget."""
    return solar_option in (SolarOption.PV_FLAT_PLATE, SolarOption.PV_EVACUATED_TUBE)


def collector_coefficients(solar_option: SolarOption) -> tuple[float, float, float]:
    """Efficiency-curve coefficients of the thermal collector."""
    if solar_option in (SolarOption.FLAT_PLATE, SolarOption.PV_FLAT_PLATE):
        return FLAT_PLATE_COEFFICIENTS
    if solar_option in (SolarOption.EVACUATED_TUBE, SolarOption.PV_EVACUATED_TUBE):
        return EVACUATED_TUBE_COEFFICIENTS
    if solar_option is SolarOption.PV_THERMAL_HYBRID:
        return PVT_COEFFICIENTS
    raise _unhandled(solar_option)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

def pv_efficiency(solar_option: SolarOption, collector_temperature: float) -> float:
    """Module efficiency; temperature dependent only for the hybrid panel."""
    if solar_option is SolarOption.PV_THERMAL_HYBRID:
        return (
            PVT_REFERENCE_EFFICIENCY
            * (
                1.0
                - PVT_TEMPERATURE_COEFFICIENT
                * (collector_temperature - PVT_REFERENCE_TEMPERATURE)
            )
            / 100.0
        )
    return PV_EFFICIENCY


def pv_generation(
    solar_option: SolarOption,
    pv_size: float,
    incident_irradiance: float,
    collector_temperature: float,
) -> float:
    """Electrical output in kWh for one hour.

    Parameters
    ----------
    solar_option : SolarOption
        Installed solar option.
    pv_size : float
        PV area in m2 (zero when no PV is installed).
    incident_irradiance : float
        Irradiance on the roof plane in kW/m2.
    collector_temperature : float
        Mean storage temperature in deg C, which a hybrid panel runs at.
    """
    return (
        pv_size
        * pv_efficiency(solar_option, collector_temperature)
        * incident_irradiance
        * SHADING_FACTOR
    )


def solar_thermal_generation(
    solar_option: SolarOption,
    solar_thermal_size: float,
    incident_irradiance: float,
    collector_temperature: float,
    outside_temperature: float,
) -> float:
    """Heat delivered to storage in kWh for one hour, never negative.

    The collector heats water from the bottom of the tank to the top, so
    *collector_temperature* is the mean of the two layer temperatures.
    """
    if not has_solar_thermal(solar_option) or incident_irradiance == 0.0:
        return 0.0
    a, b, c = collector_coefficients(solar_option)
    dt = collector_temperature - outside_temperature
    generation = (
        SHADING_FACTOR
        * solar_thermal_size
        * (a * dt * dt + b * dt + c * incident_irradiance)
    )
    return generation if generation > 0.0 else 0.0
