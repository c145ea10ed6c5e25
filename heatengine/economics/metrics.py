"""Discounting and net present cost.

Costs are in GBP.  Operating expenditure is assumed identical in every
year of the appraisal period, so net present cost reduces to capital
expenditure plus annual opex times a cumulative discount factor.
"""

from __future__ import annotations


# ======================================================================
# Constants
# ======================================================================

DISCOUNT_RATE: float = 0.035  # HM Treasury Green Book
NPC_YEARS: int = 20


# ======================================================================
# Discounting
# ======================================================================

def _discount_factor(rate: float, year: int) -> float:
    """Return ``1 / (1 + rate) ** year``."""
    return 1.0 / (1.0 + rate) ** year


def cumulative_discount_factor(
    rate: float = DISCOUNT_RATE, years: int = NPC_YEARS
) -> float:
    """Sum of discount factors for years 0..N-1.

    The first year's running cost is paid up front, so it is not
    discounted.
    """
    return sum(_discount_factor(rate, y) for y in range(years))


CUMULATIVE_DISCOUNT_FACTOR: float = cumulative_discount_factor()


def net_present_cost(
    capital_expenditure: float,
    operational_expenditure: float,
    discount_factor: float = CUMULATIVE_DISCOUNT_FACTOR,
) -> float:
    """Capex plus discounted lifetime opex."""
    return capital_expenditure + operational_expenditure * discount_factor
