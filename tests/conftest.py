"""Shared fixtures for the Pyrosim test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from pyrosim.simulation.config import SimulationConfig
from pyrosim.world.topology import Topology
from pyrosim.world.world import World


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def bounded_world() -> World:
    """A small 5x4 bounded world with empty cells."""
    return World(scale=1.0, width=5, height=4, topology=Topology.BOUNDED)


@pytest.fixture
def toroidal_world() -> World:
    """A small 5x4 toroidal world with empty cells."""
    return World(scale=1.0, width=5, height=4, topology=Topology.TOROIDAL)


@pytest.fixture
def ash_world() -> World:
    """A 6x6 bounded world where every cell holds 1 kg of ash at 300 K.

    Ash is inert, so only heat transfer changes this world.
    """
    world = World(scale=1.0, width=6, height=6)
    for _, _, cell in world:
        cell.set_masses(ash=1.0)
    world.temperature = 300.0
    return world


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config (no YAML file needed)."""
    return SimulationConfig()


@pytest.fixture
def small_config() -> SimulationConfig:
    """A fast 8x8 config for engine tests."""
    return SimulationConfig(
        seed=7,
        world_width=8,
        world_height=8,
        num_groves=2,
        grove_radius=2,
        ignite_radius=3.0,
    )
