"""Heat sources and hot-water storage."""

from .heat_pump import (
    ALL_HEAT_OPTIONS,
    HeatOption,
    cop_at_lift,
    electrical_power,
    operating_cops,
    reference_cop,
)
from .thermal_store import ThermalStore, storage_steps, storage_volume

__all__ = [
    "ALL_HEAT_OPTIONS",
    "HeatOption",
    "cop_at_lift",
    "electrical_power",
    "operating_cops",
    "reference_cop",
    "ThermalStore",
    "storage_steps",
    "storage_volume",
]
