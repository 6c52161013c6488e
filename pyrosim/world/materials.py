"""Materials — physical constants for everything a cell can hold.

Values are per kilogram.  Combustible materials carry a burn-rate
coefficient standing in for exposed surface area: fine grass burns
fast, trunks slowly, and coal smoulders.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Material:
    """Constants for one material.

    Attributes:
        name: Material name, also the matching ``Cell`` attribute.
        specific_heat: Heat capacity per unit mass (J/kgK).
        energy_content: Energy released on combustion (J/kg).
        burn_rate: Burn-rate coefficient (exposed area), 0 if inert.
    """

    name: str
    specific_heat: float
    energy_content: float = 0.0
    burn_rate: float = 0.0

    @property
    def is_combustible(self) -> bool:
        return self.burn_rate > 0.0


WATER = Material("water", specific_heat=4180.0)
GRASS = Material("grass", specific_heat=300.0, energy_content=1.70e7, burn_rate=2.5)
TREE = Material("tree", specific_heat=200.0, energy_content=1.62e7, burn_rate=0.05)
COAL = Material("coal", specific_heat=200.0, energy_content=2.40e7, burn_rate=0.02)
ASH = Material("ash", specific_heat=350.0)

MATERIALS: tuple[Material, ...] = (WATER, GRASS, TREE, COAL, ASH)
FUELS: tuple[Material, ...] = tuple(m for m in MATERIALS if m.is_combustible)

# Water phase change
WATER_ENTHALPY_OF_VAPORIZATION = 2.26e6  # J/kg
BOILING_POINT = 373.0  # K
EVAPORATION_EFFICIENCY = 0.5  # fraction of surplus released over a 1 s step

# Reaction thresholds (K) and the shared rate curve
PYROLYSIS_POINT = 700.0
IGNITION_POINT = 600.0
REACTION_SPAN = 200.0
REACTION_EXPONENT = 0.3

# Maximum combustion heat release per unit area (W/m^2)
BURN_CAPACITY = 1.0e7
