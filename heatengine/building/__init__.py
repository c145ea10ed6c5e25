"""Building thermal model, demand shapes and annual demand."""

from .demand import DemandSummary, calibrate_thermal_transmittance, compute_annual_demand
from .profile import AnnualInputs, BuildingProfile, build_building_profile
from .shapes import DAYS_IN_MONTHS, HOURS_PER_YEAR

__all__ = [
    "AnnualInputs",
    "BuildingProfile",
    "DAYS_IN_MONTHS",
    "DemandSummary",
    "HOURS_PER_YEAR",
    "build_building_profile",
    "calibrate_thermal_transmittance",
    "compute_annual_demand",
]
