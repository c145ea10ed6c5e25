"""Tests for heatengine.economics: discounting, capital cost and alternatives."""

from __future__ import annotations

import pytest

from heatengine.economics.alternatives import (
    BOILER_EFFICIENCY,
    GAS_BOILER_DISCOUNT,
    HYDROGEN_EMISSIONS,
    heat_only_alternatives,
    hydrogen_boiler_capex,
)
from heatengine.economics.capex import (
    ERH_INSTALL_COST,
    ERH_STORAGE_ADDON,
    capital_expenditure,
    heat_source_capex,
    pv_capex,
    solar_thermal_capex,
    storage_capex,
)
from heatengine.economics.metrics import (
    CUMULATIVE_DISCOUNT_FACTOR,
    DISCOUNT_RATE,
    NPC_YEARS,
    _discount_factor,
    cumulative_discount_factor,
    net_present_cost,
)
from heatengine.grid.tariff import GRID_EMISSIONS
from heatengine.heating.heat_pump import HeatOption
from heatengine.solar.collectors import SolarOption


# ======================================================================
# Discounting
# ======================================================================


class TestDiscounting:
    """Tests for discount factors and net_present_cost()."""

    def test_year_zero(self):
        """The first year is not discounted."""
        assert _discount_factor(DISCOUNT_RATE, 0) == 1.0

    def test_cumulative_closed_form(self):
        """Sum over years 0..N-1 matches the annuity-due formula."""
        r, n = DISCOUNT_RATE, NPC_YEARS
        expected = (1 - (1 + r) ** -n) / (1 - 1 / (1 + r))
        assert CUMULATIVE_DISCOUNT_FACTOR == pytest.approx(expected)
        assert CUMULATIVE_DISCOUNT_FACTOR == pytest.approx(14.71, abs=0.01)

    def test_zero_rate(self):
        """Undiscounted, the factor is the number of years."""
        assert cumulative_discount_factor(0.0, 10) == pytest.approx(10.0)

    def test_net_present_cost(self):
        """NPC is capex plus discounted annual opex."""
        assert net_present_cost(1000.0, 100.0, 10.0) == pytest.approx(2000.0)


# ======================================================================
# Capital cost
# ======================================================================


class TestCapex:
    """Tests for equipment cost curves."""

    def test_resistive_fixed(self):
        """Resistive heating costs the same at any size."""
        expected = ERH_INSTALL_COST + ERH_STORAGE_ADDON
        assert heat_source_capex(HeatOption.ELECTRIC_RESISTANCE, 4.0) == expected
        assert heat_source_capex(HeatOption.ELECTRIC_RESISTANCE, 9.0) == expected

    def test_gshp_dearer_than_ashp(self):
        """The ground loop costs more than the ASHP install."""
        assert heat_source_capex(HeatOption.GROUND_SOURCE_HEAT_PUMP, 8.0) > heat_source_capex(
            HeatOption.AIR_SOURCE_HEAT_PUMP, 8.0
        )

    def test_storage_reference_points(self):
        """Storage cost curve passes ~579 at 0.1 m3 and ~3797 at 3.0 m3."""
        assert storage_capex(0.1) == pytest.approx(579, rel=1e-2)
        assert storage_capex(3.0) == pytest.approx(3797, rel=1e-2)

    def test_storage_monotonic(self):
        """Bigger stores cost more."""
        costs = [storage_capex(0.1 * (i + 1)) for i in range(30)]
        assert costs == sorted(costs)

    def test_pv_price_break(self):
        """Arrays of 4 kWp and above are cheaper per kWp."""
        small = pv_capex(SolarOption.PV, 18.0) / 18.0
        large = pv_capex(SolarOption.PV, 20.0) / 20.0
        assert large < small

    def test_hybrid_pv_costed_with_collector(self):
        """Hybrid panels have no separate PV cost."""
        assert pv_capex(SolarOption.PV_THERMAL_HYBRID, 10.0) == 0.0
        assert solar_thermal_capex(SolarOption.PV_THERMAL_HYBRID, 10.0) > 0.0

    def test_no_solar(self):
        """No solar, no solar cost."""
        assert pv_capex(SolarOption.NONE, 0.0) == 0.0
        assert solar_thermal_capex(SolarOption.NONE, 0.0) == 0.0

    def test_total(self):
        """Total capex is the sum of its parts."""
        total = capital_expenditure(
            HeatOption.AIR_SOURCE_HEAT_PUMP, SolarOption.PV_FLAT_PLATE, 6.0, 10.0, 4.0, 0.5
        )
        expected = (
            heat_source_capex(HeatOption.AIR_SOURCE_HEAT_PUMP, 6.0)
            + pv_capex(SolarOption.PV_FLAT_PLATE, 10.0)
            + solar_thermal_capex(SolarOption.PV_FLAT_PLATE, 4.0)
            + storage_capex(0.5)
        )
        assert total == pytest.approx(expected)


# ======================================================================
# Heat-only alternatives
# ======================================================================


class TestAlternatives:
    """Tests for heat_only_alternatives()."""

    @pytest.fixture
    def systems(self):
        return heat_only_alternatives(9000.0, 10_000.0, 8000.0)

    def test_order(self, systems):
        """Eight systems in a fixed order."""
        assert [(s.name, s.variant) for s in systems] == [
            ("hydrogen_boiler", "grey"),
            ("hydrogen_boiler", "blue"),
            ("hydrogen_boiler", "green"),
            ("hydrogen_fuel_cell", "grey"),
            ("hydrogen_fuel_cell", "blue"),
            ("hydrogen_fuel_cell", "green"),
            ("biomass_boiler", ""),
            ("gas_boiler", ""),
        ]

    def test_npc_formula(self, systems):
        """Every NPC is capex plus discounted opex."""
        for system in systems:
            assert system.net_present_cost == pytest.approx(
                system.capital_expenditure
                + CUMULATIVE_DISCOUNT_FACTOR * system.operational_expenditure
            )

    def test_custom_discount_factor(self):
        """The discount factor passed in is the one used for every NPC."""
        for system in heat_only_alternatives(9000.0, 10_000.0, 8000.0, discount_factor=5.0):
            assert system.net_present_cost == net_present_cost(
                system.capital_expenditure, system.operational_expenditure, 5.0
            )

    def test_green_hydrogen_on_grid_power(self):
        """Electrolytic hydrogen carries the grid's carbon intensity."""
        assert HYDROGEN_EMISSIONS["green"] == pytest.approx(1.875 * GRID_EMISSIONS)

    def test_boiler_fuel_use(self, systems):
        """Boilers burn demand over efficiency."""
        grey = systems[0]
        assert grey.operational_expenditure == pytest.approx(9000.0 / BOILER_EFFICIENCY * 0.049)

    def test_gas_boiler_discount(self, systems):
        """Gas boilers are a fixed amount cheaper than hydrogen boilers."""
        assert systems[7].capital_expenditure == pytest.approx(
            hydrogen_boiler_capex(8000.0) - GAS_BOILER_DISCOUNT
        )

    def test_hydrogen_boiler_capex_capped(self):
        """Hydrogen boiler price tops out at 3000."""
        assert hydrogen_boiler_capex(1_000_000.0) == 3000.0

    def test_green_hydrogen_most_expensive(self, systems):
        """Green hydrogen costs the most to run."""
        boilers = systems[:3]
        assert boilers[2].operational_expenditure > boilers[1].operational_expenditure
        assert boilers[1].operational_expenditure > boilers[0].operational_expenditure
