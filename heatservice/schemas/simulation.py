from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from heatengine.advisor.cost_surface import OptimalSpecification
from heatengine.building.demand import DemandSummary
from heatengine.building.profile import AnnualInputs
from heatengine.economics.alternatives import GenericSystem
from heatengine.simulation.runner import HouseholdInputs, SimulationResults

HOURS_PER_YEAR = 8760


class SimulationRequest(BaseModel):
    thermostat_temperature: float = Field(ge=5, le=30)
    latitude: float = Field(ge=-90, le=90)
    num_occupants: int = Field(ge=1, le=20)
    house_size: float = Field(gt=0, le=2000)
    thermal_transmittance: float | None = Field(default=None, gt=0)
    epc_space_heating: float | None = Field(default=None, gt=0)
    epc_monthly_outside_temperatures: list[float] | None = Field(
        default=None, min_length=12, max_length=12
    )
    epc_monthly_solar_irradiances: list[float] | None = Field(
        default=None, min_length=12, max_length=12
    )
    coldest_outside_temperature: float | None = None
    storage_volume_max: float | None = Field(default=None, ge=0.1, le=10)

    outside_temperature: list[float] = Field(min_length=HOURS_PER_YEAR, max_length=HOURS_PER_YEAR)
    solar_irradiance: list[float] = Field(min_length=HOURS_PER_YEAR, max_length=HOURS_PER_YEAR)
    agile_price: list[float] = Field(min_length=HOURS_PER_YEAR, max_length=HOURS_PER_YEAR)

    @model_validator(mode="after")
    def check_fabric(self) -> SimulationRequest:
        if self.thermal_transmittance is None and self.epc_space_heating is None:
            raise ValueError("Either thermal_transmittance or epc_space_heating is required")
        return self

    def to_household(self) -> HouseholdInputs:
        return HouseholdInputs(
            thermostat_temperature=self.thermostat_temperature,
            latitude=self.latitude,
            num_occupants=self.num_occupants,
            house_size=self.house_size,
            thermal_transmittance=self.thermal_transmittance,
            epc_space_heating=self.epc_space_heating,
            epc_monthly_outside_temperatures=self.epc_monthly_outside_temperatures,
            epc_monthly_solar_irradiances=self.epc_monthly_solar_irradiances,
            coldest_outside_temperature=self.coldest_outside_temperature,
        )

    def to_annual(self) -> AnnualInputs:
        return AnnualInputs(
            outside_temperature=self.outside_temperature,
            solar_irradiance=self.solar_irradiance,
            agile_price=self.agile_price,
        )


class DemandResponse(BaseModel):
    total: float
    space: float
    hot_water: float
    peak_hourly: float

    @classmethod
    def from_summary(cls, summary: DemandSummary) -> DemandResponse:
        return cls(
            total=summary.total,
            space=summary.space,
            hot_water=summary.hot_water,
            peak_hourly=summary.peak_hourly,
        )


class SystemSpecificationResponse(BaseModel):
    heat_option: str
    solar_option: str
    pv_size: int
    solar_thermal_size: int
    storage_volume: float
    tariff: str | None
    # None when the combination had no feasible sizing to evaluate.
    operational_expenditure: float | None
    capital_expenditure: float | None
    net_present_cost: float | None
    operational_emissions: float | None

    @classmethod
    def from_specification(cls, spec: OptimalSpecification) -> SystemSpecificationResponse:
        result = spec.result
        return cls(
            heat_option=spec.combination.heat_option.name.lower(),
            solar_option=spec.combination.solar_option.name.lower(),
            pv_size=spec.pv_size,
            solar_thermal_size=spec.solar_thermal_size,
            storage_volume=round(spec.storage_volume, 1),
            tariff=spec.tariff.name.lower() if spec.tariff is not None else None,
            operational_expenditure=result.operational_expenditure if result else None,
            capital_expenditure=result.capital_expenditure if result else None,
            net_present_cost=result.net_present_cost if result else None,
            operational_emissions=result.operational_emissions if result else None,
        )


class AlternativeSystemResponse(BaseModel):
    name: str
    variant: str
    operational_expenditure: float
    capital_expenditure: float
    net_present_cost: float
    operational_emissions: float

    @classmethod
    def from_system(cls, system: GenericSystem) -> AlternativeSystemResponse:
        return cls(
            name=system.name,
            variant=system.variant,
            operational_expenditure=system.operational_expenditure,
            capital_expenditure=system.capital_expenditure,
            net_present_cost=system.net_present_cost,
            operational_emissions=system.operational_emissions,
        )


class SimulationResponse(BaseModel):
    thermal_transmittance: float
    epc_matched_demand: float | None
    erh_demand: DemandResponse
    hp_demand: DemandResponse
    systems: list[SystemSpecificationResponse]
    alternatives: list[AlternativeSystemResponse]
    duration_ms: float

    @classmethod
    def from_results(cls, results: SimulationResults) -> SimulationResponse:
        return cls(
            thermal_transmittance=results.thermal_transmittance,
            epc_matched_demand=results.epc_matched_demand,
            erh_demand=DemandResponse.from_summary(results.erh_demand),
            hp_demand=DemandResponse.from_summary(results.hp_demand),
            systems=[
                SystemSpecificationResponse.from_specification(spec)
                for spec in results.specifications
            ],
            alternatives=[
                AlternativeSystemResponse.from_system(system)
                for system in results.alternatives
            ],
            duration_ms=round(results.duration_ms, 1),
        )
