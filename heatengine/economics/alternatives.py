"""Heat-only comparison systems: hydrogen, gas and biomass.

These systems are not dispatched hour by hour.  Their fuel use is the
building's annual heat demand divided by appliance efficiency, priced at
a flat fuel cost, so each one reduces to a single closed-form calculation.

Fuel prices follow *A greener gas grid: what are the options* (low,
average and high cost for grey, blue and green hydrogen); emission
factors follow POST note 523.
"""

from __future__ import annotations

from dataclasses import dataclass

from heatengine.grid.tariff import GRID_EMISSIONS

from .capex import storage_capex
from .metrics import CUMULATIVE_DISCOUNT_FACTOR, NPC_YEARS, net_present_cost

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
BOILER_EFFICIENCY = 0.9
FUEL_CELL_EFFICIENCY = 0.94

HYDROGEN_PRICES = {"grey": 0.049, "blue": 0.093, "green": 0.184}  # GBP/kWh
HYDROGEN_EMISSIONS = {
    "grey": 382.0,  # SMR without CCS
    "blue": 60.0,  # SMR with CCS
    "green": 1_875.0 * GRID_EMISSIONS / 1_000.0,  # electrolysis on grid power
}

GAS_PRICE = 0.04
GAS_EMISSIONS = 183.0
GAS_BOILER_DISCOUNT = 500.0  # cheaper than an equivalent hydrogen boiler

BIOMASS_PRICE = 0.0411
BIOMASS_EMISSIONS = 90.0

FUEL_CELL_COST = 12_000.0
FUEL_CELL_LIFETIME = 10


@dataclass
class GenericSystem:
    """Lifetime economics of a heat-only system."""

    name: str
    variant: str
    operational_expenditure: float
    capital_expenditure: float
    net_present_cost: float
    operational_emissions: float


def build_generic_system(
    name: str,
    variant: str,
    cost_per_kwh: float,
    yearly_demand: float,
    capital_expenditure: float,
    emissions_per_kwh: float,
    discount_factor: float = CUMULATIVE_DISCOUNT_FACTOR,
) -> GenericSystem:
    """Cost out a system buying *yearly_demand* kWh of fuel per year."""
    opex = yearly_demand * cost_per_kwh
    return GenericSystem(
        name=name,
        variant=variant,
        operational_expenditure=opex,
        capital_expenditure=capital_expenditure,
        net_present_cost=net_present_cost(capital_expenditure, opex, discount_factor),
        operational_emissions=yearly_demand * emissions_per_kwh,
    )


def hydrogen_boiler_capex(epc_space_heating: float) -> float:
    """GBP 2000-3000 depending on building demand."""
    return min(2_000.0 + epc_space_heating / 25.0, 3_000.0)


def biomass_boiler_capex(epc_space_heating: float) -> float:
    """Automatically fed biomass boiler, GBP 10-19k."""
    return min(9_000.0 + epc_space_heating / 4.0, 19_000.0)


def fuel_cell_capex(npc_years: int = NPC_YEARS) -> float:
    """Fuel cell plus the smallest store, replaced every ten years."""
    return (FUEL_CELL_COST + storage_capex(0.1)) * (npc_years // FUEL_CELL_LIFETIME)


def heat_only_alternatives(
    erh_yearly_demand: float,
    hp_yearly_demand: float,
    epc_space_heating: float,
    discount_factor: float = CUMULATIVE_DISCOUNT_FACTOR,
) -> list[GenericSystem]:
    """Build all eight comparison systems.

    Boilers follow the setback (resistive heating) schedule; fuel cells
    supply heat continuously like a heat pump.

    Parameters
    ----------
    erh_yearly_demand : float
        Annual heat demand under the setback schedule, kWh.
    hp_yearly_demand : float
        Annual heat demand under the constant schedule, kWh.
    epc_space_heating : float
        EPC space-heating figure used to scale boiler prices, kWh.
    discount_factor : float
        Cumulative discount factor for the appraisal period.
    """
    boiler_demand = erh_yearly_demand / BOILER_EFFICIENCY
    fuel_cell_demand = hp_yearly_demand / FUEL_CELL_EFFICIENCY
    h2_boiler_capex = hydrogen_boiler_capex(epc_space_heating)
    fc_capex = fuel_cell_capex()

    systems: list[GenericSystem] = []
    for variant, price in HYDROGEN_PRICES.items():
        systems.append(
            build_generic_system(
                "hydrogen_boiler", variant, price, boiler_demand,
                h2_boiler_capex, HYDROGEN_EMISSIONS[variant], discount_factor,
            )
        )
    for variant, price in HYDROGEN_PRICES.items():
        systems.append(
            build_generic_system(
                "hydrogen_fuel_cell", variant, price, fuel_cell_demand,
                fc_capex, HYDROGEN_EMISSIONS[variant], discount_factor,
            )
        )
    systems.append(
        build_generic_system(
            "biomass_boiler", "", BIOMASS_PRICE, boiler_demand,
            biomass_boiler_capex(epc_space_heating), BIOMASS_EMISSIONS, discount_factor,
        )
    )
    systems.append(
        build_generic_system(
            "gas_boiler", "", GAS_PRICE, boiler_demand,
            h2_boiler_capex - GAS_BOILER_DISCOUNT, GAS_EMISSIONS, discount_factor,
        )
    )
    return systems
