"""
Hexagonal coordinate mathematics for the hexmarch map.

Coordinate Systems:
-------------------
1. Axial Coordinates (q, r) - for storage and identity
   - Every hex on the map is keyed by its (q, r) pair
   - Used in the HexCoord dataclass

2. Cube Coordinates (q, r, s) - for distance calculations
   - Constraint q + r + s = 0, so s is always derived, never stored

3. Odd-q offset coordinates (col, row) - for laying out rectangular maps
   and for human-readable locations in reports

Directions are numbered 0-5 in the order of ``NEIGHBOR_DIRECTIONS``; road and
river edge sets on a hex refer to these indices.

References:
-----------
Based on the guide at: https://www.redblobgames.com/grids/hexagons/
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class HexCoord:
    """
    A hexagonal coordinate using the axial coordinate system.

    Attributes:
        q: Column coordinate
        r: Row coordinate

    Equality and hashing are by (q, r); the cube coordinate ``s`` is derived.

    Example:
        >>> HexCoord(q=1, r=2).s
        -3
    """

    q: int
    r: int

    @property
    def s(self) -> int:
        return -self.q - self.r

    def __hash__(self) -> int:
        return hash((self.q, self.r))


OFF_MAP = HexCoord(q=-1, r=-1)
"""Reserved coordinate for entities that are not placed on the map."""


# Direction vectors for the 6 neighbors in axial coordinates
NEIGHBOR_DIRECTIONS: tuple[tuple[int, int], ...] = (
    (1, 0),  # East
    (1, -1),  # Northeast
    (0, -1),  # Northwest
    (-1, 0),  # West
    (-1, 1),  # Southwest
    (0, 1),  # Southeast
)


def hex_distance(a: HexCoord, b: HexCoord) -> int:
    """
    Calculate the distance between two hexes.

    The distance is the minimum number of hex steps between a and b:
        distance = max(|dq|, |dr|, |ds|)

    Example:
        >>> hex_distance(HexCoord(q=0, r=0), HexCoord(q=2, r=1))
        3
    """
    return max(abs(a.q - b.q), abs(a.r - b.r), abs(a.s - b.s))


def hex_neighbor(coord: HexCoord, direction: int) -> HexCoord:
    """Return the hex adjacent to ``coord`` in the given direction (0-5).

    Raises:
        ValueError: If direction is outside 0-5
    """
    if not 0 <= direction < len(NEIGHBOR_DIRECTIONS):
        raise ValueError(f"direction must be in 0..5, got {direction}")
    dq, dr = NEIGHBOR_DIRECTIONS[direction]
    return HexCoord(q=coord.q + dq, r=coord.r + dr)


def hex_neighbors(coord: HexCoord) -> list[HexCoord]:
    """
    Find all 6 adjacent hexes to the given hex, in direction order.

    Example:
        >>> len(hex_neighbors(HexCoord(q=0, r=0)))
        6
    """
    return [HexCoord(q=coord.q + dq, r=coord.r + dr) for dq, dr in NEIGHBOR_DIRECTIONS]


def direction_between(a: HexCoord, b: HexCoord) -> int | None:
    """Return the direction index leading from ``a`` to ``b``.

    Returns None when the two hexes are not adjacent.
    """
    delta = (b.q - a.q, b.r - a.r)
    try:
        return NEIGHBOR_DIRECTIONS.index(delta)
    except ValueError:
        return None


def opposite_direction(direction: int) -> int:
    """Return the direction pointing back across the same edge."""

    return (direction + 3) % 6


def offset_to_axial(col: int, row: int) -> HexCoord:
    """Convert odd-q offset coordinates to axial coordinates.

    Example:
        >>> offset_to_axial(1, 1)
        HexCoord(q=1, r=1)
        >>> offset_to_axial(2, 1)
        HexCoord(q=2, r=0)
    """
    q = col
    r = row - (col - (col & 1)) // 2
    return HexCoord(q=q, r=r)


def axial_to_offset(coord: HexCoord) -> tuple[int, int]:
    """Convert axial coordinates to odd-q offset ``(col, row)``."""

    col = coord.q
    row = coord.r + (coord.q - (coord.q & 1)) // 2
    return col, row
