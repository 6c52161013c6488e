"""Cell — a single tile of the burning landscape.

Each cell holds the masses of everything lying on it (water, grass,
tree, coal, ash) plus its total thermal energy.  Temperature is not
stored: it is a view over ``energy / specific_heat``, and the specific
heat is recomputed whenever a mass changes.

Mutations are clamped instead of rejected, so a long unattended run
can never push a cell into negative mass or energy.  Every mutation
also feeds the ``matter_error`` / ``energy_error`` counters, which tell
an observer (e.g. a renderer) how much a cell changed since it last
looked.
"""

from __future__ import annotations

import math

from pyrosim.world.materials import (
    ASH,
    BOILING_POINT,
    BURN_CAPACITY,
    COAL,
    EVAPORATION_EFFICIENCY,
    FUELS,
    GRASS,
    IGNITION_POINT,
    PYROLYSIS_POINT,
    REACTION_EXPONENT,
    REACTION_SPAN,
    TREE,
    WATER,
    WATER_ENTHALPY_OF_VAPORIZATION,
)


def _mass_property(name: str, doc: str) -> property:
    attr = f"_{name}"

    def getter(self: Cell) -> float:
        return getattr(self, attr)

    def setter(self: Cell, value: float) -> None:
        value = max(0.0, value)
        self.matter_error += abs(value - getattr(self, attr))
        setattr(self, attr, value)
        self._recompute_specific_heat()

    return property(getter, setter, doc=doc)


def _reaction_factor(temperature: float, threshold: float) -> float:
    """Rate multiplier for a reaction running above ``threshold``."""
    return ((temperature - threshold) / REACTION_SPAN) ** REACTION_EXPONENT


class Cell:
    """Physical state of one grid location.

    Attributes:
        matter_error: Accumulated absolute mass change (kg) since the
            last ``acknowledge()``.
        energy_error: Accumulated absolute energy change (J) since the
            last ``acknowledge()``.
    """

    water = _mass_property("water", "Water mass (kg).")
    grass = _mass_property("grass", "Grass mass (kg).")
    tree = _mass_property("tree", "Tree mass (kg).")
    coal = _mass_property("coal", "Coal mass (kg).")
    ash = _mass_property("ash", "Ash mass (kg).")

    def __init__(
        self,
        *,
        water: float = 0.0,
        grass: float = 0.0,
        tree: float = 0.0,
        coal: float = 0.0,
        ash: float = 0.0,
        energy: float = 0.0,
    ) -> None:
        self._water = max(0.0, water)
        self._grass = max(0.0, grass)
        self._tree = max(0.0, tree)
        self._coal = max(0.0, coal)
        self._ash = max(0.0, ash)
        self._energy = max(0.0, energy)
        self._specific_heat = 0.0
        self.matter_error = 0.0
        self.energy_error = 0.0
        self._recompute_specific_heat()

    def __repr__(self) -> str:
        return (
            f"Cell(water={self._water:.4g}, grass={self._grass:.4g}, "
            f"tree={self._tree:.4g}, coal={self._coal:.4g}, ash={self._ash:.4g}, "
            f"temperature={self.temperature:.2f})"
        )

    # -- derived state ---------------------------------------------------

    @property
    def energy(self) -> float:
        """Total thermal energy (J), never negative."""
        return self._energy

    @energy.setter
    def energy(self, value: float) -> None:
        value = 0.0 if self.is_empty else max(0.0, value)
        self.energy_error += abs(value - self._energy)
        self._energy = value

    @property
    def specific_heat(self) -> float:
        """Heat capacity of the whole cell (J/K)."""
        return self._specific_heat

    @property
    def is_empty(self) -> bool:
        """True if the cell holds nothing that can store heat."""
        return self._specific_heat <= 0.0

    @property
    def temperature(self) -> float:
        """Temperature (K).  An empty cell reads 0 K."""
        if self.is_empty:
            return 0.0
        return self._energy / self._specific_heat

    @temperature.setter
    def temperature(self, value: float) -> None:
        self.energy = value * self._specific_heat

    def _recompute_specific_heat(self) -> None:
        self._specific_heat = (
            self._water * WATER.specific_heat
            + self._grass * GRASS.specific_heat
            + self._tree * TREE.specific_heat
            + self._coal * COAL.specific_heat
            + self._ash * ASH.specific_heat
        )
        if self._specific_heat <= 0.0:
            # Nothing left to hold heat
            self.energy = 0.0

    # -- dirty tracking --------------------------------------------------

    def mark_dirty(self) -> None:
        """Flag the whole cell as changed beyond any threshold."""
        self.matter_error = math.inf
        self.energy_error = math.inf

    def acknowledge(self) -> None:
        """Reset the change counters once an observer has consumed them."""
        self.matter_error = 0.0
        self.energy_error = 0.0

    def set_masses(
        self,
        *,
        water: float | None = None,
        grass: float | None = None,
        tree: float | None = None,
        coal: float | None = None,
        ash: float | None = None,
    ) -> None:
        """Overwrite the given masses in one go and mark the cell dirty.

        Used when populating a world.  Masses left as ``None`` keep their
        current value.
        """
        if water is not None:
            self._water = max(0.0, water)
        if grass is not None:
            self._grass = max(0.0, grass)
        if tree is not None:
            self._tree = max(0.0, tree)
        if coal is not None:
            self._coal = max(0.0, coal)
        if ash is not None:
            self._ash = max(0.0, ash)
        self._recompute_specific_heat()
        self.mark_dirty()

    # -- physics ---------------------------------------------------------

    def exchange(self, delta: float) -> None:
        """Add (or remove, if negative) ``delta`` joules of heat."""
        self.energy = self._energy + delta

    def update(self, area: float, dt: float) -> None:
        """Advance local reactions by ``dt`` seconds.

        Runs evaporation, pyrolysis and combustion in that order.  All
        three gate on the temperature at the start of the call; masses
        changed by an earlier stage are visible to the later ones.

        Args:
            area: Ground area of the cell (m^2), bounds the burn rate.
            dt: Time step in seconds.
        """
        temperature = self.temperature
        if temperature > BOILING_POINT and self._water > 0.0:
            self._evaporate(dt)
        if temperature > PYROLYSIS_POINT and self._tree > 0.0:
            self._pyrolyse(temperature, dt)
        if temperature > IGNITION_POINT:
            self._burn(temperature, area, dt)

    def _evaporate(self, dt: float) -> None:
        # Relax toward the boiling plateau; the released surplus boils water off
        surplus = self._energy - BOILING_POINT * self._specific_heat
        released = surplus * EVAPORATION_EFFICIENCY**dt
        self.energy = self._energy - released
        self.water = self._water - released / WATER_ENTHALPY_OF_VAPORIZATION

    def _pyrolyse(self, temperature: float, dt: float) -> None:
        rate = self._tree * _reaction_factor(temperature, PYROLYSIS_POINT)
        mass = min(self._tree, rate * dt)
        # Gain before loss, so the cell never passes through empty
        self.coal = self._coal + mass
        self.tree = self._tree - mass

    def _burn(self, temperature: float, area: float, dt: float) -> None:
        factor = _reaction_factor(temperature, IGNITION_POINT)
        rates = {
            fuel: getattr(self, fuel.name) * factor * fuel.burn_rate for fuel in FUELS
        }
        energy_rate = sum(rate * fuel.energy_content for fuel, rate in rates.items())
        if energy_rate <= 0.0:
            return

        # Oxygen/surface-limited: saturates as fuel energy outpaces capacity
        capacity = BURN_CAPACITY * area
        efficiency = capacity / (energy_rate + capacity)

        burned = {
            fuel: min(getattr(self, fuel.name), rate * dt * efficiency)
            for fuel, rate in rates.items()
        }
        self.ash = self._ash + sum(burned.values())
        for fuel, mass in burned.items():
            setattr(self, fuel.name, getattr(self, fuel.name) - mass)
        self.energy = self._energy + sum(
            mass * fuel.energy_content for fuel, mass in burned.items()
        )
