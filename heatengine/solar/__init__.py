"""
Solar generation module.

Photovoltaic and solar thermal output for roof-mounted collectors sharing
a south-facing roof.
"""

from .collectors import (
    ALL_SOLAR_OPTIONS,
    SolarOption,
    collector_coefficients,
    has_pv,
    has_solar_thermal,
    pv_efficiency,
    pv_generation,
    shares_roof,
    solar_thermal_generation,
)

__all__ = [
    "ALL_SOLAR_OPTIONS",
    "SolarOption",
    "collector_coefficients",
    "has_pv",
    "has_solar_thermal",
    "pv_efficiency",
    "pv_generation",
    "shares_roof",
    "solar_thermal_generation",
]
