"""
Discrete sizing grid for one technology combination.

The first axis indexes solar size, the second storage volume.  Roof area
available for solar is a quarter of the floor area, rounded down to an
even number of m2; when separate PV and solar thermal collectors are
co-installed they split that budget, thermal collectors taking the index's
share and PV the rest.  Storage volume steps in 0.1 m3 from 0.1 m3 up to the
configured maximum.
"""

from __future__ import annotations

from dataclasses import dataclass

from heatengine.heating.thermal_store import storage_steps, storage_volume
from heatengine.solar.collectors import SolarOption, has_pv, has_solar_thermal, shares_roof


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def solar_maximum(house_size: float) -> int:
    """Roof area usable for solar (m2), an even number."""
    return int(house_size / 8.0) * 2


def solar_steps(solar_option: SolarOption, roof_area: int) -> int:
    """Number of solar sizes to consider (2 m2 increments)."""
    if solar_option is SolarOption.NONE:
        return 1
    if shares_roof(solar_option):
        # At least 2 m2 must be left for PV.
        return max(0, roof_area // 2 - 1)
    return max(0, roof_area // 2)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SizingPoint:
    solar_index: int
    storage_index: int


@dataclass(frozen=True)
class SizingGrid:
    """Bounds of the (solar, storage) grid and index-to-size mapping."""

    solar_option: SolarOption
    solar_maximum: int
    solar_steps: int
    storage_steps: int

    @property
    def cells(self) -> int:
        return self.solar_steps * self.storage_steps

    def contains(self, i: int, j: int) -> bool:
        return 0 <= i < self.solar_steps and 0 <= j < self.storage_steps

    def solar_thermal_size(self, i: int) -> int:
        """Solar thermal collector area (m2) at solar index *i*."""
        if not has_solar_thermal(self.solar_option):
            return 0
        return i * 2 + 2

    def pv_size(self, i: int) -> int:
        """PV area (m2) at solar index *i*."""
        if not has_pv(self.solar_option):
            return 0
        if shares_roof(self.solar_option):
            return self.solar_maximum - self.solar_thermal_size(i)
        return i * 2 + 2

    def storage_volume(self, j: int) -> float:
        """Store volume (m3) at storage index *j*."""
        return storage_volume(j)


def sizing_grid(
    solar_option: SolarOption, house_size: float, storage_volume_max: float
) -> SizingGrid:
    """Build the sizing grid for *solar_option* on a house of *house_size* m2."""
    roof_area = solar_maximum(house_size)
    return SizingGrid(
        solar_option=solar_option,
        solar_maximum=roof_area,
        solar_steps=solar_steps(solar_option, roof_area),
        storage_steps=storage_steps(storage_volume_max),
    )
