"""Tests for heatengine.dispatch: technology combinations and the hourly simulator."""

from __future__ import annotations

import numpy as np
import pytest

from heatengine.dispatch.simulator import DispatchSimulator
from heatengine.dispatch.technology import ALL_COMBINATIONS, TechnologyCombination
from heatengine.economics.capex import storage_capex
from heatengine.economics.metrics import CUMULATIVE_DISCOUNT_FACTOR, net_present_cost
from heatengine.grid.tariff import FLAT_RATE_PRICE, GRID_EMISSIONS, Tariff
from heatengine.heating.heat_pump import HeatOption
from heatengine.heating.thermal_store import ThermalStore
from heatengine.solar.collectors import SolarOption

ERH_NONE = TechnologyCombination(HeatOption.ELECTRIC_RESISTANCE, SolarOption.NONE)
ASHP_NONE = TechnologyCombination(HeatOption.AIR_SOURCE_HEAT_PUMP, SolarOption.NONE)
ASHP_PV = TechnologyCombination(HeatOption.AIR_SOURCE_HEAT_PUMP, SolarOption.PV)
GSHP_FP = TechnologyCombination(HeatOption.GROUND_SOURCE_HEAT_PUMP, SolarOption.FLAT_PLATE)


# ======================================================================
# Technology combinations
# ======================================================================


class TestCombinations:
    """Tests for TechnologyCombination and ALL_COMBINATIONS."""

    def test_twenty_one(self):
        """Three heat sources times seven solar options."""
        assert len(ALL_COMBINATIONS) == 21
        assert len(set(ALL_COMBINATIONS)) == 21

    def test_heat_major_order(self):
        """Index i pairs heat option i // 7 with solar option i % 7."""
        for i, combination in enumerate(ALL_COMBINATIONS):
            assert combination.index == i
            assert combination.heat_option == i // 7
            assert combination.solar_option == i % 7

    def test_str(self):
        """Readable name for logs."""
        assert str(ASHP_PV) == "air_source_heat_pump+pv"


# ======================================================================
# Simulator
# ======================================================================


class TestSteadyStateDispatch:
    """Resistive heating of a box losing exactly 1 kWh per hour."""

    def test_flat_rate_npc(self, flat_profile, constant_annual):
        """8760 kWh at the flat rate, discounted, plus resistive and store capex."""
        simulator = DispatchSimulator(flat_profile)
        result = simulator.evaluate(ERH_NONE, 0, 0, 0.1, Tariff.FLAT_RATE, constant_annual)

        capex = 1100.0 + storage_capex(0.1)
        opex = FLAT_RATE_PRICE * 8760.0
        assert result.capital_expenditure == pytest.approx(capex)
        assert result.operational_expenditure == pytest.approx(opex, rel=1e-3)
        assert result.net_present_cost == pytest.approx(
            capex + CUMULATIVE_DISCOUNT_FACTOR * opex, rel=1e-3
        )

    def test_flat_rate_all_peak(self, flat_profile, constant_annual):
        """Flat-rate cost is booked entirely as peak."""
        result = DispatchSimulator(flat_profile).evaluate(
            ERH_NONE, 0, 0, 0.1, Tariff.FLAT_RATE, constant_annual
        )
        assert result.operational_expenditure_offpeak == 0.0
        assert result.operational_emissions == pytest.approx(
            GRID_EMISSIONS * result.operational_expenditure / FLAT_RATE_PRICE
        )

    def test_net_present_cost_discounting(self, simulator, annual):
        """NPC is capex plus opex weighted by the simulator's discount factor."""
        result = DispatchSimulator(simulator.profile, discount_factor=10.0).evaluate(
            ASHP_PV, 2, 0, 0.3, Tariff.OCTOPUS_GO, annual
        )
        assert result.net_present_cost == net_present_cost(
            result.capital_expenditure, result.operational_expenditure, 10.0
        )

    def test_economy_7_splits_cost(self, flat_profile, constant_annual):
        """Economy 7 books night imports as off-peak."""
        result = DispatchSimulator(flat_profile).evaluate(
            ERH_NONE, 0, 0, 0.1, Tariff.ECONOMY_7, constant_annual
        )
        assert result.operational_expenditure_peak > 0.0
        assert result.operational_expenditure_offpeak > 0.0


class TestDispatchSimulator:
    """Tests for DispatchSimulator.evaluate() on a realistic year."""

    def test_deterministic(self, simulator, annual):
        """Repeated evaluation gives identical results."""
        first = simulator.evaluate(ASHP_NONE, 0, 0, 0.2, Tariff.OCTOPUS_AGILE, annual)
        second = simulator.evaluate(ASHP_NONE, 0, 0, 0.2, Tariff.OCTOPUS_AGILE, annual)
        assert first == second

    def test_capex_matches_simulator(self, simulator, annual):
        """Reported capex is the tariff-independent installed cost."""
        result = simulator.evaluate(ASHP_PV, 2, 0, 0.3, Tariff.FLAT_RATE, annual)
        assert result.capital_expenditure == pytest.approx(
            simulator.capital_expenditure(ASHP_PV, 2, 0, 0.3)
        )

    def test_heat_pump_cheaper_to_run(self, simulator, annual):
        """A heat pump uses a fraction of the electricity of resistive heating."""
        erh = simulator.evaluate(ERH_NONE, 0, 0, 0.1, Tariff.FLAT_RATE, annual)
        ashp = simulator.evaluate(ASHP_NONE, 0, 0, 0.1, Tariff.FLAT_RATE, annual)
        assert ashp.operational_expenditure < erh.operational_expenditure
        assert ashp.operational_emissions < erh.operational_emissions

    def test_pv_reduces_running_cost(self, simulator, annual):
        """PV offsets imports and earns export credit."""
        without = simulator.evaluate(ASHP_NONE, 0, 0, 0.1, Tariff.FLAT_RATE, annual)
        with_pv = simulator.evaluate(ASHP_PV, 2, 0, 0.1, Tariff.FLAT_RATE, annual)
        assert with_pv.operational_expenditure < without.operational_expenditure

    def test_no_trace_by_default(self, simulator, annual):
        """Hourly traces are only recorded on request."""
        result = simulator.evaluate(ERH_NONE, 0, 0, 0.1, Tariff.FLAT_RATE, annual)
        assert result.trace is None


class TestHourlyTrace:
    """Tests for the optional per-hour trace."""

    @pytest.fixture
    def trace(self, simulator, annual):
        result = simulator.evaluate(
            GSHP_FP, 0, 2, 0.1, Tariff.ECONOMY_7, annual, record_trace=True
        )
        return result.trace

    def test_storage_bounded(self, trace):
        """Stored heat never leaves [0, charge_max]."""
        store = ThermalStore(0.1, 51.0)
        assert trace.storage_charge.min() >= 0.0
        assert trace.storage_charge.max() <= store.charge_max + 1e-9

    def test_solar_thermal_recorded(self, trace):
        """The collector delivers heat on sunny hours."""
        assert trace.solar_thermal_generation.sum() > 0.0
        assert trace.pv_generation.sum() == 0.0

    def test_grid_balance(self, trace):
        """Every hour, import minus export equals demand minus PV."""
        np.testing.assert_allclose(
            trace.grid_import - trace.grid_export,
            trace.electrical_demand - trace.pv_generation,
            atol=1e-9,
        )

    def test_shapes(self, trace):
        """Every trace array covers the year."""
        assert trace.inside_temperature.shape == (8760,)
        assert trace.grid_export.shape == (8760,)
