"""SimulationEngine — the main tick loop.

Owns the world and drives it forward one frame at a time.  Frames can
arrive at any rate, so each step is capped at ``config.max_step``
seconds to bound the error of the explicit parts of the integration.
User edits (ignite, splash) are applied synchronously between steps.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator

from pyrosim.simulation.config import SimulationConfig
from pyrosim.world.cell import Cell
from pyrosim.world.landscape import build_world, generate_channels
from pyrosim.world.world import World

logger = logging.getLogger(__name__)


@dataclass
class SimulationEngine:
    """Drives the simulation forward step by step.

    Attributes:
        config: Loaded simulation configuration.
        world: The landscape grid.
        rng: Master seeded random generator.
        tick: Number of steps taken.
        elapsed: Simulated time (s).
    """

    config: SimulationConfig
    world: World = field(init=False)
    rng: Generator = field(init=False)
    tick: int = 0
    elapsed: float = 0.0

    def __post_init__(self) -> None:
        """Generate and populate the world from config."""
        cfg = self.config
        self.rng = np.random.default_rng(cfg.seed)
        green, blue = generate_channels(
            cfg.world_width,
            cfg.world_height,
            self.rng,
            num_groves=cfg.num_groves,
            grove_radius=cfg.grove_radius,
            grass_level=cfg.grass_level,
        )
        self.world = build_world(cfg.scale, green, blue, self.rng, cfg.topology)
        self.world.vertical_heat_transfer = cfg.vertical_heat_transfer
        self.world.horizontal_heat_transfer = cfg.horizontal_heat_transfer
        self.world.temperature = cfg.ambient_temperature
        logger.info(
            "Built %dx%d %s world (scale %.2f m), biomass %.1f kg",
            self.world.width,
            self.world.height,
            self.world.topology.value,
            self.world.scale,
            self.world.score,
        )

    @property
    def score(self) -> float:
        """Living biomass left in the world (kg)."""
        return self.world.score

    def step(self, dt: float) -> float:
        """Advance the simulation by up to ``dt`` seconds.

        Args:
            dt: Requested time step (s).

        Returns:
            The time step actually taken, after capping.  Zero if ``dt``
            was not positive, in which case nothing happens.
        """
        if dt <= 0.0:
            return 0.0
        if dt > self.config.max_step:
            logger.debug("Capping step of %.3f s to %.3f s", dt, self.config.max_step)
            dt = self.config.max_step

        self.world.update(dt)
        self.tick += 1
        self.elapsed += dt
        return dt

    def run(self, ticks: int, dt: float) -> None:
        """Run the simulation for a fixed number of steps.

        Args:
            ticks: Number of steps to take.
            dt: Requested time step for each.
        """
        for _ in range(ticks):
            self.step(dt)

    def ignite(
        self,
        i: int,
        j: int,
        radius: float | None = None,
        temperature: float | None = None,
    ) -> None:
        """Heat a circular area, defaulting to the configured strength.

        Args:
            i: Centre column (grid cells, not pixels).
            j: Centre row.
            radius: Radius in metres.
            temperature: Peak temperature rise (K) at the centre.
        """
        radius = self.config.ignite_radius if radius is None else radius
        if temperature is None:
            temperature = self.config.ignite_temperature
        logger.debug(
            "Ignite at (%d, %d), radius %.1f m, +%.0f K",
            i,
            j,
            radius,
            temperature,
        )
        self.world.ignite_splotch(i, j, radius, temperature)

    def splash(
        self,
        i: int,
        j: int,
        radius: float | None = None,
        amount: float | None = None,
    ) -> None:
        """Pour water over a circular area, defaulting to the configured amount.

        Args:
            i: Centre column (grid cells, not pixels).
            j: Centre row.
            radius: Radius in metres.
            amount: Water in kg.
        """
        radius = self.config.splash_radius if radius is None else radius
        amount = self.config.splash_amount if amount is None else amount
        logger.debug("Splash at (%d, %d), radius %.1f m, %.2f kg", i, j, radius, amount)
        self.world.splash_splotch(i, j, radius, amount)

    def collect_dirty(self) -> Iterator[tuple[int, int, Cell]]:
        """Yield cells that changed past the configured thresholds."""
        return self.world.dirty_cells(
            self.config.dirty_matter_threshold,
            self.config.dirty_energy_threshold,
        )
