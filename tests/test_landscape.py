"""Tests for pyrosim.world.landscape."""

import numpy as np
import pytest
from numpy.random import Generator

from pyrosim.world.landscape import (
    build_world,
    channel_masses,
    generate_channels,
)
from pyrosim.world.topology import Topology


class TestChannelMasses:
    """Tests for converting intensity channels into cell masses."""

    def test_zero_channels_give_bare_ground(self, rng: Generator) -> None:
        zeros = np.zeros((3, 4))
        masses = channel_masses(zeros, zeros, area=1.0, rng=rng)
        assert masses(2, 1) == (0.0, 0.0, 0.0)

    def test_full_channels_within_jitter(self, rng: Generator) -> None:
        full = np.full((3, 4), 255.0)
        area = 4.0
        masses = channel_masses(full, full, area=area, rng=rng)
        for i in range(4):
            for j in range(3):
                grass, tree, water = masses(i, j)
                base_grass = 255.0 / 256.0 * area * 0.1
                base_tree = 255.0 / 256.0 * area * 4.0
                assert base_grass <= grass < base_grass * 4.0 / 3.0
                assert base_tree <= tree < base_tree * 4.0 / 3.0
                assert water == pytest.approx(0.1 * (grass + tree))

    def test_indexing_is_column_then_row(self, rng: Generator) -> None:
        green = np.zeros((2, 3))
        green[1, 2] = 200.0
        masses = channel_masses(green, np.zeros((2, 3)), area=1.0, rng=rng)
        assert masses(2, 1)[0] > 0.0
        assert masses(1, 1)[0] == 0.0

    def test_mismatched_shapes_raise(self, rng: Generator) -> None:
        with pytest.raises(ValueError, match="equal shape"):
            channel_masses(np.zeros((3, 4)), np.zeros((4, 3)), area=1.0, rng=rng)


class TestGenerateChannels:
    """Tests for the synthetic landscape generator."""

    def test_shape_and_range(self, rng: Generator) -> None:
        green, blue = generate_channels(10, 6, rng, num_groves=3, grove_radius=2)
        assert green.shape == (6, 10)
        assert blue.shape == (6, 10)
        assert np.all((green >= 0.0) & (green <= 255.0))
        assert np.all((blue >= 0.0) & (blue <= 255.0))
        assert blue.max() > 0.0

    def test_no_groves_means_no_trees(self, rng: Generator) -> None:
        _, blue = generate_channels(8, 8, rng, num_groves=0)
        assert np.all(blue == 0.0)

    def test_seeded_generation_is_deterministic(self) -> None:
        a = generate_channels(8, 8, np.random.default_rng(3))
        b = generate_channels(8, 8, np.random.default_rng(3))
        assert np.array_equal(a[0], b[0])
        assert np.array_equal(a[1], b[1])


class TestBuildWorld:
    """Tests for building a populated world from channels."""

    def test_world_matches_channels(self, rng: Generator) -> None:
        green, blue = generate_channels(7, 5, rng, num_groves=2, grove_radius=2)
        world = build_world(2.0, green, blue, rng, topology="bounded")
        assert world.width == 7
        assert world.height == 5
        assert world.scale == 2.0
        assert world.topology is Topology.BOUNDED
        assert world.score > 0.0
        for _, _, cell in world:
            assert cell.water == pytest.approx(0.1 * (cell.grass + cell.tree))
