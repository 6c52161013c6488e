"""World grid — the thermal integrator for the whole landscape.

The World owns a fixed ``width x height`` grid of Cells and advances it
in the canonical order:

1. Local reactions in every cell (evaporation, pyrolysis, combustion)
2. Convection toward the ambient air
3. Radiative cooling, solved in closed form
4. One pairwise heat-exchange pass over all adjacent cells

Adjacency comes from the world's ``Topology``.  The world also exposes
the editing API (circular "splotches" that ignite or water an area),
read access for renderers, and the living-biomass score.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from pyrosim.world.cell import Cell
from pyrosim.world.materials import MATERIALS, WATER
from pyrosim.world.topology import Topology

STEFAN_BOLTZMANN = 5.67e-8  # W/m^2K^4
RADIATING_LENGTH = 1.0  # m, edge of the radiating surface
VERTICAL_HEAT_TRANSFER = 5.0e2  # W/Km^2, cell <-> air above
HORIZONTAL_HEAT_TRANSFER = 5.0e2  # W/K, cell <-> adjacent cell
EXCHANGE_DEADBAND = 0.001  # K

# Cell attributes that can be exported as a grid array
SNAPSHOT_FIELDS = frozenset(
    {"water", "grass", "tree", "coal", "ash", "temperature", "energy"},
)

SplotchOp = Callable[[float, Cell], None]
MassSource = Callable[[int, int], tuple[float, float, float]]


@dataclass
class World:
    """A 2D grid of burning landscape.

    Attributes:
        scale: Edge length of one cell (m).
        width: Number of columns.
        height: Number of rows.
        topology: Boundary mode, fixed for the lifetime of the world.
        ambient_temperature: Temperature of the air above the grid (K).
        vertical_heat_transfer: Convective coupling to the air (W/Km^2).
        horizontal_heat_transfer: Coupling between adjacent cells (W/K).
        cells: 2D list of Cell objects indexed as ``cells[j][i]``.
    """

    scale: float
    width: int
    height: int
    topology: Topology | str = Topology.BOUNDED
    ambient_temperature: float = 0.0
    vertical_heat_transfer: float = VERTICAL_HEAT_TRANSFER
    horizontal_heat_transfer: float = HORIZONTAL_HEAT_TRANSFER
    cells: list[list[Cell]] = field(init=False, repr=False)
    _pairs: list[tuple[Cell, Cell]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate dimensions and fill the grid with empty cells."""
        if self.width <= 0 or self.height <= 0:
            msg = f"world dimensions must be positive, got {self.width}x{self.height}"
            raise ValueError(msg)
        if self.scale <= 0:
            msg = f"world scale must be positive, got {self.scale}"
            raise ValueError(msg)
        self.topology = Topology.from_name(self.topology)
        self.cells = [[Cell() for _ in range(self.width)] for _ in range(self.height)]
        # Adjacency never changes, so resolve the exchange pairs once
        self._pairs = [
            (self.cells[aj][ai], self.cells[bj][bi])
            for (ai, aj), (bi, bj) in self.topology.pairs(self.width, self.height)
        ]

    @property
    def cell_area(self) -> float:
        """Ground area of one cell (m^2)."""
        return self.scale * self.scale

    def cell_at(self, i: int, j: int) -> Cell | None:
        """Return the cell at ``(i, j)`` as seen through the topology.

        Args:
            i: Column index (may be out of range).
            j: Row index (may be out of range).

        Returns:
            The cell, or None if a bounded world has no cell there.
        """
        index = self.topology.resolve(i, j, self.width, self.height)
        if index is None:
            return None
        ci, cj = index
        return self.cells[cj][ci]

    def __iter__(self) -> Iterator[tuple[int, int, Cell]]:
        """Iterate ``(i, j, cell)`` over the whole grid."""
        for j, row in enumerate(self.cells):
            for i, cell in enumerate(row):
                yield i, j, cell

    # -- bulk state ------------------------------------------------------

    @property
    def temperature(self) -> float:
        """Mean temperature of all non-empty cells (K)."""
        temps = [cell.temperature for _, _, cell in self if not cell.is_empty]
        if not temps:
            return self.ambient_temperature
        return sum(temps) / len(temps)

    @temperature.setter
    def temperature(self, value: float) -> None:
        """Set every cell and the ambient air to ``value``."""
        for _, _, cell in self:
            cell.temperature = value
            cell.energy_error = math.inf
        self.ambient_temperature = value

    @property
    def score(self) -> float:
        """Living biomass left in the world (kg of grass + tree)."""
        return sum(cell.grass + cell.tree for _, _, cell in self)

    def totals(self) -> dict[str, float]:
        """Sum every material mass and the thermal energy over the grid."""
        totals = {m.name: 0.0 for m in MATERIALS}
        totals["energy"] = 0.0
        for _, _, cell in self:
            for material in MATERIALS:
                totals[material.name] += getattr(cell, material.name)
            totals["energy"] += cell.energy
        return totals

    def snapshot(self, name: str) -> NDArray[np.float64]:
        """Export one cell attribute as a ``(height, width)`` array.

        Args:
            name: One of water, grass, tree, coal, ash, temperature, energy.

        Raises:
            ValueError: If ``name`` is not an exportable attribute.
        """
        if name not in SNAPSHOT_FIELDS:
            options = ", ".join(sorted(SNAPSHOT_FIELDS))
            msg = f"unknown field {name!r} (expected one of: {options})"
            raise ValueError(msg)
        return np.array(
            [[getattr(cell, name) for cell in row] for row in self.cells],
            dtype=np.float64,
        )

    def dirty_cells(
        self,
        matter_threshold: float,
        energy_threshold: float,
    ) -> Iterator[tuple[int, int, Cell]]:
        """Yield cells whose change counters reached either threshold.

        Counters are not reset here; the consumer calls
        ``cell.acknowledge()`` on the cells it actually redrew.
        """
        for i, j, cell in self:
            if (
                cell.matter_error >= matter_threshold
                or cell.energy_error >= energy_threshold
            ):
                yield i, j, cell

    def populate(self, masses: MassSource) -> None:
        """Set the initial grass, tree and water of every cell.

        Args:
            masses: Called as ``masses(i, j)``; returns
                ``(grass, tree, water)`` in kg for that cell.
        """
        for i, j, cell in self:
            grass, tree, water = masses(i, j)
            cell.set_masses(grass=grass, tree=tree, water=water)

    # -- integration -----------------------------------------------------

    def update(self, dt: float) -> None:
        """Advance the whole world by ``dt`` seconds.

        Args:
            dt: Time step in seconds.  Accuracy degrades for large steps;
                callers should keep it at or below half a second.
        """
        area = self.cell_area
        for row in self.cells:
            for cell in row:
                cell.update(area, dt)
                if cell.is_empty:
                    continue
                # Convection
                cell.exchange(
                    (self.ambient_temperature - cell.temperature)
                    * area
                    * self.vertical_heat_transfer
                    * dt,
                )
                self._radiate(cell, dt)

        self.exchange(dt)

    @staticmethod
    def _radiate(cell: Cell, dt: float) -> None:
        # Exact solution of dT/dt = -k T^4, stable for any step size
        temperature = cell.temperature
        if temperature <= 0.0:
            return
        k = STEFAN_BOLTZMANN * RADIATING_LENGTH * RADIATING_LENGTH / cell.specific_heat
        cell.temperature = (3.0 * k * dt + temperature**-3.0) ** (-1.0 / 3.0)

    def exchange(self, dt: float) -> None:
        """Run one heat-exchange pass over every adjacent pair."""
        for a, b in self._pairs:
            self.exchange_pair(dt, a, b, self.horizontal_heat_transfer)

    @staticmethod
    def exchange_pair(
        dt: float,
        a: Cell,
        b: Cell,
        transfer: float = HORIZONTAL_HEAT_TRANSFER,
    ) -> None:
        """Move heat from ``a`` to ``b`` in proportion to their difference.

        What ``a`` loses ``b`` gains, unless the zero-energy floor clips
        the transfer.  Differences within the deadband are ignored, and
        empty cells take no part.
        """
        if a.is_empty or b.is_empty:
            return
        difference = a.temperature - b.temperature
        if abs(difference) > EXCHANGE_DEADBAND:
            amount = difference * transfer * dt
            a.exchange(-amount)
            b.exchange(amount)

    # -- editing ---------------------------------------------------------

    def splotch(self, i: int, j: int, radius: float, op: SplotchOp | None) -> None:
        """Apply ``op`` to every cell in a circle around ``(i, j)``.

        Offsets are scanned over the square spanning ``radius / scale``
        cells.  An offset at distance ``dis`` (in cells) is edited when
        ``dis < radius``, with strength ``1 - dis / radius``: 1 at the
        centre, falling linearly to 0 at the rim.  Edited cells are
        marked fully dirty.

        Args:
            i: Centre column.
            j: Centre row.
            radius: Splotch radius (m).
            op: Called as ``op(strength, cell)``.  None does nothing.
        """
        if op is None or radius <= 0.0:
            return
        span = radius / self.scale
        lo, hi = math.floor(-span), math.ceil(span)
        for di in range(lo, hi + 1):
            for dj in range(lo, hi + 1):
                dis = math.hypot(di, dj)
                if dis >= radius:
                    continue
                cell = self.cell_at(i + di, j + dj)
                if cell is not None:
                    op(1.0 - dis / radius, cell)
                    cell.mark_dirty()

    def ignite_splotch(self, i: int, j: int, radius: float, temperature: float) -> None:
        """Raise temperatures by up to ``temperature`` K around ``(i, j)``."""

        def ignite(strength: float, cell: Cell) -> None:
            cell.temperature += strength * temperature

        self.splotch(i, j, radius, ignite)

    def splash_splotch(self, i: int, j: int, radius: float, amount: float) -> None:
        """Pour ``amount`` kg of water, at ambient temperature, around ``(i, j)``."""
        density = amount / (math.pi * self.scale * self.scale)

        def splash(strength: float, cell: Cell) -> None:
            mass = strength * density
            cell.water += mass
            cell.energy += self.ambient_temperature * WATER.specific_heat * mass

        self.splotch(i, j, radius, splash)
