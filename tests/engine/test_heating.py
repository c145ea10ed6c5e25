"""Tests for heatengine.heating: heat source COP/sizing and the thermal store."""

from __future__ import annotations

import pytest

from heatengine.heating.heat_pump import (
    MAX_ELECTRICAL_POWER,
    MIN_THERMAL_POWER_ASHP,
    HeatOption,
    cop_at_lift,
    electrical_power,
    operating_cops,
    reference_cop,
)
from heatengine.heating.thermal_store import ThermalStore, storage_steps, storage_volume


# ======================================================================
# Heat source performance
# ======================================================================


class TestCop:
    """Tests for cop_at_lift() and reference_cop()."""

    def test_resistive_heating_unity(self):
        """Resistive heating converts electricity 1:1 at any lift."""
        assert cop_at_lift(HeatOption.ELECTRIC_RESISTANCE, 50.0) == 1.0
        assert reference_cop(HeatOption.ELECTRIC_RESISTANCE) == 1.0

    def test_ashp_reference(self):
        """ASHP rated at 35 C flow from 7 C air: COP ~3.9."""
        assert reference_cop(HeatOption.AIR_SOURCE_HEAT_PUMP) == pytest.approx(3.916, abs=1e-3)

    def test_gshp_reference(self):
        """GSHP rated at 35 C lift: COP ~4.4."""
        assert reference_cop(HeatOption.GROUND_SOURCE_HEAT_PUMP) == pytest.approx(4.419, abs=1e-3)

    def test_cop_falls_with_lift(self):
        """Larger temperature lift means lower COP."""
        for option in (HeatOption.AIR_SOURCE_HEAT_PUMP, HeatOption.GROUND_SOURCE_HEAT_PUMP):
            assert cop_at_lift(option, 50.0) < cop_at_lift(option, 30.0)


class TestOperatingCops:
    """Tests for operating_cops()."""

    def test_boost_cop_lower(self):
        """Heating to the 60 C boost temperature is less efficient."""
        cop, cop_boost = operating_cops(HeatOption.AIR_SOURCE_HEAT_PUMP, 51.0, 5.0, 11.0)
        assert cop_boost < cop

    def test_gshp_ignores_air_temperature(self):
        """Ground source draws from the ground, not the air."""
        cold = operating_cops(HeatOption.GROUND_SOURCE_HEAT_PUMP, 51.0, -5.0, 11.0)
        warm = operating_cops(HeatOption.GROUND_SOURCE_HEAT_PUMP, 51.0, 20.0, 11.0)
        assert cold == warm

    def test_ashp_better_in_warm_air(self):
        """Air source COP improves with outside temperature."""
        cold, _ = operating_cops(HeatOption.AIR_SOURCE_HEAT_PUMP, 51.0, -5.0, 11.0)
        warm, _ = operating_cops(HeatOption.AIR_SOURCE_HEAT_PUMP, 51.0, 15.0, 11.0)
        assert warm > cold

    def test_resistive(self):
        """Resistive heating has unity COP in both modes."""
        assert operating_cops(HeatOption.ELECTRIC_RESISTANCE, 51.0, 0.0, 11.0) == (1.0, 1.0)


class TestElectricalPower:
    """Tests for electrical_power() sizing."""

    def test_resistive_lower_clamp(self):
        """Small demand is rounded up to the smallest unit."""
        power = electrical_power(HeatOption.ELECTRIC_RESISTANCE, 1.0, 1.0, 51.0, -2.0, 11.0)
        assert power == pytest.approx(MIN_THERMAL_POWER_ASHP)

    def test_resistive_upper_clamp(self):
        """Demand above the market ceiling is capped."""
        power = electrical_power(HeatOption.ELECTRIC_RESISTANCE, 12.0, 12.0, 51.0, -2.0, 11.0)
        assert power == MAX_ELECTRICAL_POWER

    def test_resistive_tracks_peak(self):
        """Resistive heating is sized to its own peak demand."""
        power = electrical_power(HeatOption.ELECTRIC_RESISTANCE, 5.5, 3.0, 51.0, -2.0, 11.0)
        assert power == pytest.approx(5.5)

    def test_ashp_sized_at_worst_cop(self):
        """ASHP input equals peak demand over the COP at the coldest hour."""
        cop_worst = cop_at_lift(HeatOption.AIR_SOURCE_HEAT_PUMP, 51.0 - (-2.0))
        power = electrical_power(HeatOption.AIR_SOURCE_HEAT_PUMP, 9.0, 9.0, 51.0, -2.0, 11.0)
        assert power == pytest.approx(9.0 / cop_worst)

    def test_ashp_minimum_unit(self):
        """Tiny demand still buys the smallest ASHP on the market."""
        power = electrical_power(HeatOption.AIR_SOURCE_HEAT_PUMP, 0.5, 0.5, 51.0, -2.0, 11.0)
        assert power == pytest.approx(
            MIN_THERMAL_POWER_ASHP / reference_cop(HeatOption.AIR_SOURCE_HEAT_PUMP)
        )


# ======================================================================
# Thermal store
# ======================================================================


class TestThermalStore:
    """Tests for ThermalStore thresholds, regimes and losses."""

    def test_thresholds_ordered(self):
        """Nominal < boost < maximum charge."""
        store = ThermalStore(0.2, 51.0)
        assert 0 < store.charge_full < store.charge_boost < store.charge_max

    def test_charge_full_value(self):
        """0.1 m3 heated 11 K above 40 C holds ~1.28 kWh."""
        store = ThermalStore(0.1, 51.0)
        assert store.charge_full == pytest.approx(0.1 * 1000 * 4.18 * 11 / 3600)

    def test_charge_min_independent_of_volume(self):
        """The minimum charge is a fixed 10 litres of hot water."""
        assert ThermalStore(0.1, 51.0).charge_min == ThermalStore(3.0, 51.0).charge_min

    def test_thresholds_scale_with_volume(self):
        """Doubling the volume doubles every capacity threshold."""
        small, large = ThermalStore(0.5, 51.0), ThermalStore(1.0, 51.0)
        assert large.charge_max == pytest.approx(2 * small.charge_max)

    def test_regimes(self):
        """Charge selects nominal, boost or maximum temperature bands."""
        store = ThermalStore(0.5, 51.0)
        upper, lower, height = store.regime(store.charge_full / 2, 12.0)
        assert (upper, lower) == (51.0, 12.0)
        assert height == pytest.approx(0.5)

        upper, lower, _ = store.regime((store.charge_full + store.charge_boost) / 2, 12.0)
        assert (upper, lower) == (60.0, 51.0)

        upper, lower, height = store.regime(store.charge_max, 12.0)
        assert (upper, lower) == (95.0, 60.0)
        assert height == pytest.approx(1.0)

    def test_losses_grow_with_temperature(self):
        """A hotter tank loses more heat."""
        store = ThermalStore(0.5, 51.0)
        cool = store.standing_losses(51.0, 12.0, 0.5, 20.0)
        hot = store.standing_losses(95.0, 60.0, 0.5, 20.0)
        assert 0 < cool < hot

    def test_clamp(self):
        """Charge is kept within [0, charge_max]."""
        store = ThermalStore(0.3, 51.0)
        assert store.clamp(-1.0) == 0.0
        assert store.clamp(store.charge_max + 5.0) == store.charge_max
        assert store.clamp(1.0) == 1.0

    def test_invalid_volume(self):
        """Non-positive volume raises ValueError."""
        with pytest.raises(ValueError, match="volume_m3"):
            ThermalStore(0.0, 51.0)

    def test_invalid_temperature(self):
        """Storage must be hotter than the minimum useful temperature."""
        with pytest.raises(ValueError, match="hot_water_temperature"):
            ThermalStore(0.1, 35.0)


class TestStorageGrid:
    """Tests for storage_volume() and storage_steps()."""

    def test_volume_steps(self):
        """Volumes start at 0.1 m3 in 0.1 m3 increments."""
        assert storage_volume(0) == pytest.approx(0.1)
        assert storage_volume(29) == pytest.approx(3.0)

    def test_step_count(self):
        """3.0 m3 maximum gives 30 options despite float error."""
        assert storage_steps(3.0) == 30
        assert storage_steps(0.1) == 1
