"""Heat source / solar technology combinations."""

from __future__ import annotations

from dataclasses import dataclass

from heatengine.heating.heat_pump import HeatOption
from heatengine.solar.collectors import SolarOption


@dataclass(frozen=True)
class TechnologyCombination:
    """One heat source paired with one solar option."""

    heat_option: HeatOption
    solar_option: SolarOption

    @property
    def index(self) -> int:
        """Position in :data:`ALL_COMBINATIONS` (heat-major)."""
        return int(self.heat_option) * len(SolarOption) + int(self.solar_option)

    def __str__(self) -> str:
        return f"{self.heat_option.name.lower()}+{self.solar_option.name.lower()}"


# All 21 combinations; index i pairs heat option i // 7 with solar option i % 7.
ALL_COMBINATIONS: tuple[TechnologyCombination, ...] = tuple(
    TechnologyCombination(heat, solar) for heat in HeatOption for solar in SolarOption
)
