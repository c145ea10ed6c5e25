"""Hour-by-hour techno-economic dispatch of a domestic heating system.

``DispatchSimulator.evaluate`` runs one technology / sizing / tariff choice
through a full 8760-hour year and returns its operating cost (split into
peak and off-peak), capital cost, net present cost and operational
emissions.

Each hour is processed in a fixed order, and the order matters: space
heating is served before storage is drawn down, off-peak top-up happens
before surplus-PV boosting, and the minimum-charge floor is enforced last.

1. Building thermal balance (fabric loss, solar and body gains).
2. Storage regime and standing losses (losses heat the interior).
3. Heat source COP at the current and boost flow temperatures.
4. PV and solar thermal generation; solar heat goes straight to storage.
5. Space-heating demand, limited to what storage + heat source can deliver.
6. Electrical demand: storage first, then storage + heat source, then cap.
7. Off-peak top-up of storage to full.
8. Surplus-PV boost of storage at the boost COP.
9. Minimum-charge floor.
10. Grid import / export.
11. Tariff cost and export credit.
12. Emissions.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from heatengine.building.profile import AnnualInputs, BuildingProfile
from heatengine.building.shapes import DAYS_IN_MONTHS, HOURS_PER_YEAR
from heatengine.economics.capex import capital_expenditure
from heatengine.economics.metrics import CUMULATIVE_DISCOUNT_FACTOR, net_present_cost
from heatengine.grid.tariff import (
    GRID_EMISSIONS,
    Tariff,
    buy_price,
    in_charging_window,
    is_peak,
    sell_price,
)
from heatengine.heating.heat_pump import (
    HeatOption,
    electrical_power,
    operating_cops,
    reference_cop,
)
from heatengine.heating.thermal_store import ThermalStore
from heatengine.solar.collectors import pv_generation, solar_thermal_generation

from .technology import TechnologyCombination

# ======================================================================
# Emission factors (gCO2e/kWh)
# ======================================================================

PV_EMISSIONS: float = 75.0
SOLAR_THERMAL_EMISSIONS: float = 22.5


# ======================================================================
# Results
# ======================================================================

@dataclass(frozen=True)
class HourlyTrace:
    """Per-hour diagnostics for one evaluation, each of shape (8760,)."""

    inside_temperature: NDArray[np.float64]
    storage_charge: NDArray[np.float64]
    electrical_demand: NDArray[np.float64]
    pv_generation: NDArray[np.float64]
    solar_thermal_generation: NDArray[np.float64]
    grid_import: NDArray[np.float64]
    grid_export: NDArray[np.float64]


@dataclass(frozen=True)
class DispatchResult:
    """Annual economics of one (technology, sizing, tariff) choice.

    Costs in GBP, emissions in gCO2e.
    """

    operational_expenditure_peak: float
    operational_expenditure_offpeak: float
    capital_expenditure: float
    net_present_cost: float
    operational_emissions: float
    trace: HourlyTrace | None = field(default=None, compare=False, repr=False)

    @property
    def operational_expenditure(self) -> float:
        return self.operational_expenditure_peak + self.operational_expenditure_offpeak


# ======================================================================
# Simulator
# ======================================================================

class DispatchSimulator:
    """Evaluate heating system choices for one building.

    The simulator holds no per-evaluation state; every call to
    :meth:`evaluate` starts from the same initial conditions (interior at
    the thermostat temperature, storage full) and is a pure function of
    its arguments.

    Parameters
    ----------
    profile : BuildingProfile
        Pre-processed building inputs.
    discount_factor : float
        Cumulative discount factor applied to annual opex.
    """

    def __init__(
        self,
        profile: BuildingProfile,
        discount_factor: float = CUMULATIVE_DISCOUNT_FACTOR,
    ) -> None:
        self.profile = profile
        self.discount_factor = discount_factor

    def heat_source_power(self, heat_option: HeatOption) -> float:
        """Rated electrical input (kW) of the heat source for this building."""
        p = self.profile
        return electrical_power(
            heat_option,
            p.erh_peak_hourly_demand,
            p.hp_peak_hourly_demand,
            p.hot_water_temperature,
            p.coldest_outside_temperature,
            p.ground_temperature,
        )

    def capital_expenditure(
        self,
        technology: TechnologyCombination,
        pv_size: float,
        solar_thermal_size: float,
        storage_volume: float,
    ) -> float:
        """Installed cost of a specification; independent of tariff."""
        heat_option = technology.heat_option
        thermal_power = self.heat_source_power(heat_option) * reference_cop(heat_option)
        return capital_expenditure(
            heat_option,
            technology.solar_option,
            thermal_power,
            pv_size,
            solar_thermal_size,
            storage_volume,
        )

    def evaluate(
        self,
        technology: TechnologyCombination,
        pv_size: float,
        solar_thermal_size: float,
        storage_volume: float,
        tariff: Tariff,
        annual: AnnualInputs,
        record_trace: bool = False,
    ) -> DispatchResult:
        """Simulate one year of operation.

        Parameters
        ----------
        technology : TechnologyCombination
            Heat source and solar option.
        pv_size : float
            PV area in m2.
        solar_thermal_size : float
            Solar thermal collector area in m2.
        storage_volume : float
            Hot-water store volume in m3.
        tariff : Tariff
            Electricity tariff.
        annual : AnnualInputs
            Hourly outside temperature, irradiance and Agile price.
        record_trace : bool
            Attach an :class:`HourlyTrace` to the result.

        Returns
        -------
        DispatchResult
        """
        p = self.profile
        heat_option = technology.heat_option
        solar_option = technology.solar_option

        hp_power = self.heat_source_power(heat_option)
        capex = self.capital_expenditure(
            technology, pv_size, solar_thermal_size, storage_volume
        )

        store = ThermalStore(storage_volume, p.hot_water_temperature)
        charge_full = store.charge_full
        charge_boost = store.charge_boost
        charge_max = store.charge_max
        charge_min = store.charge_min

        setpoints = p.setpoints(heat_option).tolist()
        ua = p.heat_loss_coefficient
        capacity = p.heat_capacity
        body_gain = p.body_heat_gain
        hot_water_temperature = p.hot_water_temperature
        ground_temperature = p.ground_temperature
        has_pv_array = pv_size > 0

        outside_temperatures = annual.outside_temperature.tolist()
        irradiances = annual.solar_irradiance.tolist()
        agile_prices = annual.agile_price.tolist()

        if record_trace:
            ts_inside = np.zeros(HOURS_PER_YEAR, dtype=np.float64)
            ts_charge = np.zeros(HOURS_PER_YEAR, dtype=np.float64)
            ts_electrical = np.zeros(HOURS_PER_YEAR, dtype=np.float64)
            ts_pv = np.zeros(HOURS_PER_YEAR, dtype=np.float64)
            ts_solar_thermal = np.zeros(HOURS_PER_YEAR, dtype=np.float64)
            ts_import = np.zeros(HOURS_PER_YEAR, dtype=np.float64)
            ts_export = np.zeros(HOURS_PER_YEAR, dtype=np.float64)

        inside = p.thermostat_temperature
        charge = charge_full  # starts full to avoid an initial demand spike
        opex_peak = 0.0
        opex_offpeak = 0.0
        emissions = 0.0
        h = 0

        for month, days in enumerate(DAYS_IN_MONTHS):
            window_gain = (
                p.monthly_solar_gain_ratios_north[month]
                + p.monthly_solar_gain_ratios_south[month]
            ) * p.solar_gain_house_factor
            cold_water_temperature = float(p.monthly_cold_water_temperatures[month])
            roof_ratio = float(p.monthly_roof_ratios_south[month])
            hot_water_demand = p.monthly_hot_water_demand(month).tolist()

            for _day in range(days):
                for hour in range(24):
                    outside = outside_temperatures[h]
                    irradiance = irradiances[h]
                    agile_price = agile_prices[h]

                    # 1) Thermal balance
                    inside += (
                        -ua * (inside - outside) + irradiance * window_gain + body_gain
                    ) / capacity

                    # 2) Storage regime and standing losses
                    upper, lower, thermocline = store.regime(charge, cold_water_temperature)
                    losses = store.standing_losses(upper, lower, thermocline, inside)
                    charge -= losses
                    inside += losses / capacity

                    # 3) Heat source performance
                    cop, cop_boost = operating_cops(
                        heat_option, hot_water_temperature, outside, ground_temperature
                    )
                    hp_heat = hp_power * cop

                    # 4) Generation
                    incident = irradiance * roof_ratio / 1000.0
                    collector_temperature = (upper + lower) / 2.0
                    pv = pv_generation(solar_option, pv_size, incident, collector_temperature)
                    solar_heat = solar_thermal_generation(
                        solar_option, solar_thermal_size, incident,
                        collector_temperature, outside,
                    )
                    charge += solar_heat
                    if charge > charge_max:
                        charge = charge_max  # dump excess to avoid boiling

                    # 5) Space heating demand
                    setpoint = setpoints[hour]
                    hot_water = hot_water_demand[hour]
                    if inside > setpoint:
                        space = 0.0
                    else:
                        space = (setpoint - inside) * capacity
                        if space + hot_water < charge + hp_heat:
                            inside = setpoint
                        else:
                            # Space heating takes priority over storage top-up.
                            if charge > 0.0:
                                space = charge + hp_heat - hot_water
                            else:
                                space = hp_heat - hot_water
                            inside += space / capacity

                    # 6) Electrical demand allocation
                    demand = space + hot_water
                    if demand < charge:
                        charge -= demand
                        electrical = 0.0
                    elif demand < charge + hp_heat:
                        if charge > 0.0:
                            electrical = (demand - charge) / cop
                            charge = 0.0
                        else:
                            electrical = demand / cop
                    else:
                        if charge > 0.0:
                            charge = 0.0
                        electrical = hp_power

                    # 7) Off-peak top-up
                    if charge < charge_full and in_charging_window(tariff, hour, agile_price):
                        if charge_full - charge < (hp_power - electrical) * cop:
                            electrical += (charge_full - charge) / cop
                            charge = charge_full
                        else:
                            charge += (hp_power - electrical) * cop
                            electrical = hp_power

                    # 8) Surplus PV boost, bounded by spare heat source capacity
                    pv_remaining = pv - electrical
                    boost_gap = charge_boost - charge
                    if pv_remaining > 0.0 and boost_gap > 0.0:
                        usable = min(pv_remaining, hp_power - electrical)
                        if usable > 0.0:
                            if boost_gap < usable * cop_boost:
                                electrical += boost_gap / cop_boost
                                charge = charge_boost
                            else:
                                charge += usable * cop_boost
                                electrical += usable

                    # 9) Minimum-charge floor
                    if charge < charge_min:
                        if charge_min - charge < (hp_power - electrical) * cop:
                            electrical += (charge_min - charge) / cop
                            charge = charge_min
                        elif electrical < hp_power:
                            charge += (hp_power - electrical) * cop
                            electrical = hp_power

                    charge = store.clamp(charge)

                    # 10) Grid exchange
                    if pv > electrical:
                        exported = pv - electrical
                        imported = 0.0
                    else:
                        exported = 0.0
                        imported = electrical - pv

                    # 11) Cost
                    peak = is_peak(tariff, hour, agile_price)
                    if imported > 0.0:
                        cost = imported * buy_price(tariff, hour, agile_price)
                        if peak:
                            opex_peak += cost
                        else:
                            opex_offpeak += cost
                    if exported > 0.0:
                        credit = exported * sell_price(tariff, hour, agile_price)
                        if peak:
                            opex_peak -= credit
                        else:
                            opex_offpeak -= credit

                    # 12) Emissions
                    emissions += solar_heat * SOLAR_THERMAL_EMISSIONS + imported * GRID_EMISSIONS
                    if has_pv_array:
                        emissions += (pv - exported) * PV_EMISSIONS + exported * (
                            PV_EMISSIONS - GRID_EMISSIONS
                        )

                    if record_trace:
                        ts_inside[h] = inside
                        ts_charge[h] = charge
                        ts_electrical[h] = electrical
                        ts_pv[h] = pv
                        ts_solar_thermal[h] = solar_heat
                        ts_import[h] = imported
                        ts_export[h] = exported

                    h += 1

        trace = None
        if record_trace:
            trace = HourlyTrace(
                inside_temperature=ts_inside,
                storage_charge=ts_charge,
                electrical_demand=ts_electrical,
                pv_generation=ts_pv,
                solar_thermal_generation=ts_solar_thermal,
                grid_import=ts_import,
                grid_export=ts_export,
            )

        opex = opex_peak + opex_offpeak
        return DispatchResult(
            operational_expenditure_peak=opex_peak,
            operational_expenditure_offpeak=opex_offpeak,
            capital_expenditure=capex,
            net_present_cost=net_present_cost(capex, opex, self.discount_factor),
            operational_emissions=emissions,
            trace=trace,
        )
