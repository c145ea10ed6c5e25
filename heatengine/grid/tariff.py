"""Time-of-use electricity tariffs for domestic heating dispatch.

Five fixed schemes are modelled.  Each one defines an import price, a
peak/off-peak partition of that price, the hours in which spare heat
source capacity is used to top up thermal storage, and an export rate.
The variable (Agile) tariff is driven by an hourly price array in p/kWh;
every other tariff depends only on the hour of day.

All prices are returned in GBP/kWh.
"""

from __future__ import annotations

from enum import IntEnum


# ======================================================================
# Tariff variants
# ======================================================================

class Tariff(IntEnum):
    """Fixed set of electricity tariffs, in evaluation order."""

    FLAT_RATE = 0
    ECONOMY_7 = 1
    BULB_SMART = 2
    OCTOPUS_GO = 3
    OCTOPUS_AGILE = 4


ALL_TARIFFS: tuple[Tariff, ...] = tuple(Tariff)


# ======================================================================
# Constants
# ======================================================================

# Agile half-hourly price (p/kWh) below which an hour counts as off-peak.
AGILE_OFF_PEAK_THRESHOLD: float = 9.0

FLAT_RATE_PRICE: float = 0.163

ECONOMY_7_PEAK: float = 0.199
ECONOMY_7_OFF_PEAK: float = 0.095

BULB_SMART_PEAK: float = 0.2529
BULB_SMART_OFF_PEAK: float = 0.1279

OCTOPUS_GO_PEAK: float = 0.1533
OCTOPUS_GO_OFF_PEAK: float = 0.05

EXPORT_RATES: dict[Tariff, float] = {
    Tariff.FLAT_RATE: 0.035,
    Tariff.ECONOMY_7: 0.035,
    Tariff.BULB_SMART: 0.035,
    Tariff.OCTOPUS_GO: 0.03,
    Tariff.OCTOPUS_AGILE: 0.055,
}

# Carbon intensity of imported grid electricity (gCO2e/kWh).
GRID_EMISSIONS: float = 212.0


def _unhandled(tariff: Tariff) -> AssertionError:
    return AssertionError(f"Unhandled tariff variant: {tariff!r}")


# ======================================================================
# Pricing
# ======================================================================

def is_peak(tariff: Tariff, hour: int, agile_price: float) -> bool:
    """Return True when *hour* falls in the tariff's peak bucket.

    Parameters
    ----------
    tariff : Tariff
        Active tariff.
    hour : int
        Hour of day, 0 -- 23.
    agile_price : float
        Agile price for this hour in p/kWh (ignored by the other tariffs).
    """
    if tariff is Tariff.FLAT_RATE:
        return True
    if tariff is Tariff.ECONOMY_7:
        return not (hour < 6 or hour == 23)
    if tariff is Tariff.BULB_SMART:
        return 15 < hour < 19
    if tariff is Tariff.OCTOPUS_GO:
        return hour >= 5
    if tariff is Tariff.OCTOPUS_AGILE:
        return agile_price >= AGILE_OFF_PEAK_THRESHOLD
    raise _unhandled(tariff)


def buy_price(tariff: Tariff, hour: int, agile_price: float) -> float:
    """Return the import price for one kWh in the given hour.

    Returns
    -------
    float
        Import price in GBP/kWh.
    """
    if tariff is Tariff.FLAT_RATE:
        return FLAT_RATE_PRICE
    if tariff is Tariff.ECONOMY_7:
        return ECONOMY_7_PEAK if is_peak(tariff, hour, agile_price) else ECONOMY_7_OFF_PEAK
    if tariff is Tariff.BULB_SMART:
        return BULB_SMART_PEAK if is_peak(tariff, hour, agile_price) else BULB_SMART_OFF_PEAK
    if tariff is Tariff.OCTOPUS_GO:
        return OCTOPUS_GO_PEAK if is_peak(tariff, hour, agile_price) else OCTOPUS_GO_OFF_PEAK
    if tariff is Tariff.OCTOPUS_AGILE:
        return agile_price / 100.0
    raise _unhandled(tariff)


def sell_price(tariff: Tariff, hour: int, agile_price: float) -> float:
    """Credit for one kWh of exported PV.

    Exported generation is valued at the mean of the import price and the
    tariff's export rate, since part of it would otherwise offset other
    household consumption.
    """
    return (buy_price(tariff, hour, agile_price) + EXPORT_RATES[tariff]) / 2.0


def in_charging_window(tariff: Tariff, hour: int, agile_price: float) -> bool:
    """Return True when storage may be topped up from the grid this hour.

    Flat-rate and smart tariffs charge around the daily peak in air
    temperature; the others follow their cheap-rate hours.
    """
    if tariff is Tariff.FLAT_RATE or tariff is Tariff.BULB_SMART:
        return 12 < hour < 16
    if tariff is Tariff.ECONOMY_7:
        return hour == 23 or hour < 6
    if tariff is Tariff.OCTOPUS_GO:
        return hour < 5
    if tariff is Tariff.OCTOPUS_AGILE:
        return agile_price < AGILE_OFF_PEAK_THRESHOLD
    raise _unhandled(tariff)
