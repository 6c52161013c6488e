"""Landscape — initial grass, tree and water distributions.

Initial conditions arrive as two 8-bit intensity channels laid out like
an image (``[row, column]``): green for grass cover, blue for tree
cover.  Decoding an actual image file is left to the caller; this
module turns channel arrays into cell masses, and can synthesise
channels when no map is available.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pyrosim.world.topology import Topology
from pyrosim.world.world import MassSource, World

if TYPE_CHECKING:
    from numpy.random import Generator

# Full-intensity channel value maps to this much mass per m^2
GRASS_DENSITY = 0.1  # kg/m^2
TREE_DENSITY = 4.0  # kg/m^2
# Water held by living matter, as a fraction of its mass
MOISTURE_FRACTION = 0.1


def _jitter(rng: Generator, shape: tuple[int, ...]) -> NDArray[np.float64]:
    # Up to +33% natural variation per cell
    return (3.0 + rng.random(shape)) / 3.0


def channel_masses(
    green: NDArray,
    blue: NDArray,
    area: float,
    rng: Generator,
) -> MassSource:
    """Convert intensity channels into a per-cell mass source.

    Args:
        green: Grass intensities (0-255), shape ``(height, width)``.
        blue: Tree intensities (0-255), same shape as ``green``.
        area: Ground area of one cell (m^2).
        rng: Seeded random generator for the per-cell jitter.

    Returns:
        A callable suitable for ``World.populate``.

    Raises:
        ValueError: If the channels are not 2D arrays of equal shape.
    """
    green = np.asarray(green, dtype=np.float64)
    blue = np.asarray(blue, dtype=np.float64)
    if green.ndim != 2 or green.shape != blue.shape:
        msg = (
            "channels must be 2D arrays of equal shape, "
            f"got {green.shape} and {blue.shape}"
        )
        raise ValueError(msg)

    grass = green / 256.0 * area * GRASS_DENSITY * _jitter(rng, green.shape)
    tree = blue / 256.0 * area * TREE_DENSITY * _jitter(rng, blue.shape)
    water = (grass + tree) * MOISTURE_FRACTION

    def masses(i: int, j: int) -> tuple[float, float, float]:
        return float(grass[j, i]), float(tree[j, i]), float(water[j, i])

    return masses


def generate_channels(
    width: int,
    height: int,
    rng: Generator,
    *,
    num_groves: int = 12,
    grove_radius: int = 6,
    grass_level: float = 160.0,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Synthesise green/blue channels: a grass meadow dotted with groves.

    Each grove is a disc of tree cover with circular falloff, so cells
    near a grove's centre get the densest canopy.  Overlapping groves
    saturate at full intensity.

    Args:
        width: Grid columns.
        height: Grid rows.
        rng: Seeded random generator.
        num_groves: Number of tree groves to place.
        grove_radius: Radius of each grove in cells.
        grass_level: Mean grass intensity (0-255) across the meadow.

    Returns:
        ``(green, blue)`` arrays of shape ``(height, width)``.
    """
    green = np.clip(rng.normal(grass_level, 20.0, (height, width)), 0.0, 255.0)
    blue = np.zeros((height, width), dtype=np.float64)

    rows, cols = np.mgrid[0:height, 0:width]
    for _ in range(num_groves):
        cx = int(rng.integers(0, width))
        cy = int(rng.integers(0, height))
        dist = np.hypot(cols - cx, rows - cy)
        canopy = 255.0 * np.clip(1.0 - dist / (grove_radius + 1), 0.0, 1.0)
        blue = np.minimum(255.0, blue + canopy * rng.uniform(0.6, 1.0))

    # Trees shade out the undergrowth
    green *= 1.0 - 0.5 * blue / 255.0
    return green, blue


def build_world(
    scale: float,
    green: NDArray,
    blue: NDArray,
    rng: Generator,
    topology: Topology | str = Topology.TOROIDAL,
) -> World:
    """Create a world sized to the channels and populate it.

    Args:
        scale: Edge length of one cell (m).
        green: Grass intensities, shape ``(height, width)``.
        blue: Tree intensities, same shape as ``green``.
        rng: Seeded random generator.
        topology: Boundary mode for the new world.

    Returns:
        The populated World.
    """
    height, width = np.shape(green)
    world = World(scale=scale, width=width, height=height, topology=topology)
    world.populate(channel_masses(green, blue, world.cell_area, rng))
    return world
