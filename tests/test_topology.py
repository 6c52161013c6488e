"""Tests for pyrosim.world.topology."""

from collections import Counter

import pytest

from pyrosim.world.topology import Topology


def _partner_counts(topology: Topology, width: int, height: int) -> Counter:
    counts: Counter = Counter()
    for a, b in topology.pairs(width, height):
        counts[a] += 1
        counts[b] += 1
    return counts


class TestFromName:
    """Tests for parsing topology names from config."""

    def test_case_insensitive(self) -> None:
        assert Topology.from_name("Toroidal") is Topology.TOROIDAL
        assert Topology.from_name(" bounded ") is Topology.BOUNDED

    def test_passthrough(self) -> None:
        assert Topology.from_name(Topology.BOUNDED) is Topology.BOUNDED

    def test_unknown_name_raises(self) -> None:
        with pytest.raises(ValueError, match="unknown topology"):
            Topology.from_name("spherical")


class TestResolve:
    """Tests for single-cell lookups."""

    def test_bounded_in_range(self) -> None:
        assert Topology.BOUNDED.resolve(2, 3, 5, 4) == (2, 3)

    def test_bounded_west_of_first_column_is_absent(self) -> None:
        assert Topology.BOUNDED.resolve(-1, 2, 5, 4) is None
        assert Topology.BOUNDED.resolve(5, 0, 5, 4) is None
        assert Topology.BOUNDED.resolve(0, 4, 5, 4) is None

    def test_toroidal_west_of_first_column_wraps(self) -> None:
        assert Topology.TOROIDAL.resolve(-1, 2, 5, 4) == (4, 2)
        assert Topology.TOROIDAL.resolve(5, 0, 5, 4) == (0, 0)
        assert Topology.TOROIDAL.resolve(0, -1, 5, 4) == (0, 3)
        assert Topology.TOROIDAL.resolve(-6, 9, 5, 4) == (4, 1)


class TestPairs:
    """Tests for the pairwise exchange traversal."""

    def test_bounded_pair_count(self) -> None:
        width, height = 5, 4
        pairs = list(Topology.BOUNDED.pairs(width, height))
        expected = (
            (width - 1) * height  # horizontal
            + width * (height - 1)  # vertical
            + 2 * (width - 1) * (height - 1)  # diagonals
        )
        assert len(pairs) == expected

    def test_bounded_pairs_are_unique_and_adjacent(self) -> None:
        pairs = list(Topology.BOUNDED.pairs(5, 4))
        unordered = {frozenset(p) for p in pairs}
        assert len(unordered) == len(pairs)
        for (ai, aj), (bi, bj) in pairs:
            assert max(abs(ai - bi), abs(aj - bj)) == 1

    def test_bounded_edges_have_fewer_partners(self) -> None:
        counts = _partner_counts(Topology.BOUNDED, 5, 4)
        assert counts[(0, 0)] == 3
        assert counts[(4, 3)] == 3
        assert counts[(2, 0)] == 5
        assert counts[(0, 2)] == 5
        assert counts[(2, 2)] == 8

    def test_toroidal_every_cell_has_eight_partners(self) -> None:
        width, height = 5, 4
        counts = _partner_counts(Topology.TOROIDAL, width, height)
        assert len(counts) == width * height
        assert set(counts.values()) == {8}
        assert len(list(Topology.TOROIDAL.pairs(width, height))) == 4 * width * height

    def test_toroidal_includes_wraparound_pairs(self) -> None:
        pairs = {frozenset(p) for p in Topology.TOROIDAL.pairs(5, 4)}
        assert frozenset({(4, 1), (0, 1)}) in pairs
        assert frozenset({(2, 3), (2, 0)}) in pairs
        assert frozenset({(4, 3), (0, 0)}) in pairs

    def test_small_torus_pairs_are_unique(self) -> None:
        pairs = list(Topology.TOROIDAL.pairs(2, 3))
        unordered = {frozenset(p) for p in pairs}
        assert len(unordered) == len(pairs)
        # Every other cell is a neighbour: 6 cells, 15 pairs
        assert len(pairs) == 15
        assert all(a != b for a, b in pairs)

    def test_single_cell_torus_has_no_pairs(self) -> None:
        assert list(Topology.TOROIDAL.pairs(1, 1)) == []
        assert list(Topology.TOROIDAL.pairs(1, 2)) == [((0, 0), (0, 1))]
