"""Capital cost curves for heating, solar and storage equipment.

Closed-form fits in GBP, installed:

* heat pumps -- power law in thermal capacity (Staffell et al., 2012), with
  a fixed install cost for air source and a per-kW ground loop for ground
  source;
* resistive heating -- fixed install plus the add-on to connect a store;
* PV -- per kWp at 0.2 kWp/m2, cheaper above 4 kWp;
* solar thermal -- per m2 of collector plus pump, controls and fittings;
* storage -- power law in tank volume (Delta-EE for DECC, 2016).
"""

from __future__ import annotations

from heatengine.heating.heat_pump import HeatOption
from heatengine.solar.collectors import SolarOption


# ---------------------------------------------------------------------------
# Cost constants
# ---------------------------------------------------------------------------
ERH_INSTALL_COST = 1_000.0
ERH_STORAGE_ADDON = 100.0
ASHP_INSTALL_COST = 1_500.0
GSHP_LOOP_COST_PER_KW = 800.0

PV_KWP_PER_M2 = 0.2
PV_PRICE_BREAK_KWP = 4.0
PV_COST_PER_KWP_SMALL = 1_100.0
PV_COST_PER_KWP_LARGE = 900.0

# Pump/controls 490, cylinder adaptation 800, install 800.
SOLAR_THERMAL_FITTINGS = 490.0 + 800.0 + 800.0
FLAT_PLATE_COST_PER_M2 = 225.0 + 270.0 / (9.0 * 1.6)
EVACUATED_TUBE_COST_PER_M2 = 280.0 + 270.0 / (9.0 * 1.6)
PVT_PANEL_AREA = 1.6
PVT_COST_PER_PANEL = 480.0 + 270.0 / 9.0
PVT_FITTINGS = 640.0 + 490.0 + 800.0 + 1_440.0

STORAGE_COST_COEFFICIENT = 2_068.3
STORAGE_COST_EXPONENT = 0.553


def _unhandled(option) -> AssertionError:
    return AssertionError(f"Unhandled option: {option!r}")


# ---------------------------------------------------------------------------
# Component curves
# ---------------------------------------------------------------------------

def heat_source_capex(heat_option: HeatOption, thermal_power: float) -> float:
    """Installed cost of the heat source for *thermal_power* kWth."""
    if heat_option is HeatOption.ELECTRIC_RESISTANCE:
        return ERH_INSTALL_COST + ERH_STORAGE_ADDON
    unit = (200.0 + 4_750.0 / thermal_power ** 1.25) * thermal_power
    if heat_option is HeatOption.AIR_SOURCE_HEAT_PUMP:
        return unit + ASHP_INSTALL_COST
    if heat_option is HeatOption.GROUND_SOURCE_HEAT_PUMP:
        return unit + GSHP_LOOP_COST_PER_KW * thermal_power
    raise _unhandled(heat_option)


def pv_capex(solar_option: SolarOption, pv_size: float) -> float:
    """Installed cost of a PV array of *pv_size* m2.

    The hybrid panel's electrical side is costed with its collector.
    """
    if solar_option not in (
        SolarOption.PV,
        SolarOption.PV_FLAT_PLATE,
        SolarOption.PV_EVACUATED_TUBE,
    ):
        return 0.0
    kwp = pv_size * PV_KWP_PER_M2
    if kwp < PV_PRICE_BREAK_KWP:
        return kwp * PV_COST_PER_KWP_SMALL
    return kwp * PV_COST_PER_KWP_LARGE


def solar_thermal_capex(solar_option: SolarOption, solar_thermal_size: float) -> float:
    """Installed cost of *solar_thermal_size* m2 of thermal collector."""
    if solar_option in (SolarOption.NONE, SolarOption.PV):
        return 0.0
    if solar_option in (SolarOption.FLAT_PLATE, SolarOption.PV_FLAT_PLATE):
        return solar_thermal_size * FLAT_PLATE_COST_PER_M2 + SOLAR_THERMAL_FITTINGS
    if solar_option in (SolarOption.EVACUATED_TUBE, SolarOption.PV_EVACUATED_TUBE):
        return solar_thermal_size * EVACUATED_TUBE_COST_PER_M2 + SOLAR_THERMAL_FITTINGS
    if solar_option is SolarOption.PV_THERMAL_HYBRID:
        return (solar_thermal_size / PVT_PANEL_AREA) * PVT_COST_PER_PANEL + PVT_FITTINGS
    raise _unhandled(solar_option)


def storage_capex(volume_m3: float) -> float:
    """Installed cost of a hot-water store (0.1 m3 ~ 579, 3.0 m3 ~ 3797)."""
    return STORAGE_COST_COEFFICIENT * volume_m3 ** STORAGE_COST_EXPONENT


def capital_expenditure(
    heat_option: HeatOption,
    solar_option: SolarOption,
    thermal_power: float,
    pv_size: float,
    solar_thermal_size: float,
    storage_volume: float,
) -> float:
    """Total installed cost of one system specification."""
    return (
        heat_source_capex(heat_option, thermal_power)
        + pv_capex(solar_option, pv_size)
        + solar_thermal_capex(solar_option, solar_thermal_size)
        + storage_capex(storage_volume)
    )
