"""Economic analysis module."""

from .alternatives import GenericSystem, heat_only_alternatives
from .capex import capital_expenditure
from .metrics import CUMULATIVE_DISCOUNT_FACTOR, cumulative_discount_factor, net_present_cost

__all__ = [
    "CUMULATIVE_DISCOUNT_FACTOR",
    "GenericSystem",
    "capital_expenditure",
    "cumulative_discount_factor",
    "heat_only_alternatives",
    "net_present_cost",
]
