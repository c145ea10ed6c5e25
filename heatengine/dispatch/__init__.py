"""Hourly dispatch of a domestic heating system over one year."""

from .simulator import DispatchResult, DispatchSimulator, HourlyTrace
from .technology import ALL_COMBINATIONS, TechnologyCombination

__all__ = [
    "ALL_COMBINATIONS",
    "DispatchResult",
    "DispatchSimulator",
    "HourlyTrace",
    "TechnologyCombination",
]
