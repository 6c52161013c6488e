"""Topology — how the grid's edges behave.

A world is either bounded (cells past the edge do not exist) or
toroidal (edges wrap to the opposite side).  The choice is made once,
when the world is built, and decides both single-cell lookups and the
set of adjacent pairs that exchange heat each tick.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum

# Visiting every cell with these offsets touches each adjacent pair once:
# east, north-east, north, north-west.
FORWARD_OFFSETS: tuple[tuple[int, int], ...] = ((1, 0), (1, 1), (0, 1), (-1, 1))

Index = tuple[int, int]


class Topology(Enum):
    """Boundary mode of a world grid."""

    BOUNDED = "bounded"
    TOROIDAL = "toroidal"

    @classmethod
    def from_name(cls, name: str | Topology) -> Topology:
        """Parse a topology from its config name (case-insensitive).

        Raises:
            ValueError: If ``name`` is not a known topology.
        """
        if isinstance(name, Topology):
            return name
        try:
            return cls(name.strip().lower())
        except ValueError:
            options = ", ".join(t.value for t in cls)
            msg = f"unknown topology {name!r} (expected one of: {options})"
            raise ValueError(msg) from None

    def resolve(self, i: int, j: int, width: int, height: int) -> Index | None:
        """Map a possibly out-of-range index onto the grid.

        Returns:
            The in-grid ``(i, j)``, or None if the bounded grid has no
            such cell.
        """
        if self is Topology.TOROIDAL:
            return i % width, j % height
        if 0 <= i < width and 0 <= j < height:
            return i, j
        return None

    def pairs(self, width: int, height: int) -> Iterator[tuple[Index, Index]]:
        """Yield every unordered pair of adjacent cells once.

        On a bounded grid, edge and corner cells simply have fewer
        partners.  On a torus every cell has eight, unless a side is
        shorter than three cells and wrapped offsets land on the same
        partner (or the cell itself); those repeats are dropped.
        """
        seen: set[frozenset[Index]] = set()
        for i in range(width):
            for j in range(height):
                for di, dj in FORWARD_OFFSETS:
                    other = self.resolve(i + di, j + dj, width, height)
                    if other is None or other == (i, j):
                        continue
                    key = frozenset(((i, j), other))
                    if key not in seen:
                        seen.add(key)
                        yield (i, j), other
