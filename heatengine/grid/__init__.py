"""Electricity tariff module."""

from .tariff import (
    ALL_TARIFFS,
    GRID_EMISSIONS,
    Tariff,
    buy_price,
    in_charging_window,
    is_peak,
    sell_price,
)

__all__ = [
    "ALL_TARIFFS",
    "GRID_EMISSIONS",
    "Tariff",
    "buy_price",
    "in_charging_window",
    "is_peak",
    "sell_price",
]
