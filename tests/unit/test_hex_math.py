"""
Test suite for hex coordinate math operations.

Covers axial/cube identity, distances, neighbor and direction lookup and the
odd-q offset conversion used to lay out rectangular maps.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from hexmarch.utils.hex_math import (
    NEIGHBOR_DIRECTIONS,
    OFF_MAP,
    HexCoord,
    axial_to_offset,
    direction_between,
    hex_distance,
    hex_neighbor,
    hex_neighbors,
    offset_to_axial,
    opposite_direction,
)

coords = st.builds(
    HexCoord,
    q=st.integers(min_value=-50, max_value=50),
    r=st.integers(min_value=-50, max_value=50),
)


class TestHexCoord:
    """Test the HexCoord dataclass."""

    def test_cube_component_is_derived(self) -> None:
        coord = HexCoord(q=1, r=2)
        assert coord.s == -3
        assert coord.q + coord.r + coord.s == 0

    def test_equality_and_hash_by_axial_pair(self) -> None:
        assert HexCoord(q=1, r=2) == HexCoord(q=1, r=2)
        assert HexCoord(q=1, r=2) != HexCoord(q=2, r=1)
        assert len({HexCoord(q=1, r=2), HexCoord(q=1, r=2)}) == 1

    def test_off_map_sentinel_is_a_coordinate(self) -> None:
        assert OFF_MAP == HexCoord(q=-1, r=-1)


class TestDistance:
    def test_same_hex(self) -> None:
        assert hex_distance(HexCoord(q=3, r=-1), HexCoord(q=3, r=-1)) == 0

    def test_neighbors_are_one_apart(self) -> None:
        origin = HexCoord(q=0, r=0)
        for neighbor in hex_neighbors(origin):
            assert hex_distance(origin, neighbor) == 1

    def test_known_distance(self) -> None:
        assert hex_distance(HexCoord(q=0, r=0), HexCoord(q=2, r=1)) == 3
        assert hex_distance(HexCoord(q=0, r=0), HexCoord(q=3, r=-3)) == 3

    @given(coords, coords)
    def test_distance_is_symmetric(self, a: HexCoord, b: HexCoord) -> None:
        assert hex_distance(a, b) == hex_distance(b, a)

    @given(coords, coords, coords)
    def test_triangle_inequality(self, a: HexCoord, b: HexCoord, c: HexCoord) -> None:
        assert hex_distance(a, c) <= hex_distance(a, b) + hex_distance(b, c)


class TestDirections:
    def test_neighbors_follow_direction_order(self) -> None:
        origin = HexCoord(q=2, r=3)
        neighbors = hex_neighbors(origin)
        assert len(neighbors) == 6
        for direction, neighbor in enumerate(neighbors):
            assert hex_neighbor(origin, direction) == neighbor

    def test_hex_neighbor_rejects_bad_direction(self) -> None:
        with pytest.raises(ValueError):
            hex_neighbor(HexCoord(q=0, r=0), 6)

    def test_direction_between_adjacent(self) -> None:
        origin = HexCoord(q=0, r=0)
        for direction, (dq, dr) in enumerate(NEIGHBOR_DIRECTIONS):
            assert direction_between(origin, HexCoord(q=dq, r=dr)) == direction

    def test_direction_between_non_adjacent(self) -> None:
        assert direction_between(HexCoord(q=0, r=0), HexCoord(q=2, r=0)) is None
        assert direction_between(HexCoord(q=0, r=0), HexCoord(q=0, r=0)) is None

    @given(coords, st.integers(min_value=0, max_value=5))
    def test_opposite_direction_leads_back(self, coord: HexCoord, direction: int) -> None:
        neighbor = hex_neighbor(coord, direction)
        assert hex_neighbor(neighbor, opposite_direction(direction)) == coord


class TestOffsetConversion:
    def test_odd_q_examples(self) -> None:
        assert offset_to_axial(0, 0) == HexCoord(q=0, r=0)
        assert offset_to_axial(1, 1) == HexCoord(q=1, r=1)
        assert offset_to_axial(2, 1) == HexCoord(q=2, r=0)
        assert offset_to_axial(3, 0) == HexCoord(q=3, r=-1)

    @given(st.integers(min_value=0, max_value=100), st.integers(min_value=0, max_value=100))
    def test_offset_round_trip(self, col: int, row: int) -> None:
        assert axial_to_offset(offset_to_axial(col, row)) == (col, row)
