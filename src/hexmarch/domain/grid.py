"""Indexed, coordinate-addressable view over a campaign map."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from hexmarch.domain.models import CampaignMap, MapHex, TerrainID, TerrainType
from hexmarch.utils.hex_math import (
    OFF_MAP,
    HexCoord,
    direction_between,
    hex_neighbor,
    offset_to_axial,
    opposite_direction,
)


class HexGrid:
    """Lookup structure answering the movement questions asked of the map.

    The grid indexes the hexes it is given by coordinate. Road and river
    edges are treated as symmetric: an edge carries a road if either of its
    two hexes records one on that edge.
    """

    def __init__(
        self,
        hexes: Iterable[MapHex],
        terrain_types: Mapping[TerrainID, TerrainType] | None = None,
    ) -> None:
        self._hexes: dict[HexCoord, MapHex] = {tile.coord: tile for tile in hexes}
        self._terrain_types = dict(terrain_types or {})

    @classmethod
    def from_map(
        cls,
        campaign_map: CampaignMap,
        terrain_types: Mapping[TerrainID, TerrainType] | None = None,
    ) -> HexGrid:
        return cls(campaign_map.hexes, terrain_types)

    def __contains__(self, coord: object) -> bool:
        return coord in self._hexes

    def __len__(self) -> int:
        return len(self._hexes)

    def get_hex(self, coord: HexCoord | None) -> MapHex | None:
        if coord is None or coord == OFF_MAP:
            return None
        return self._hexes.get(coord)

    def all_hexes(self) -> list[MapHex]:
        return list(self._hexes.values())

    def is_water(self, coord: HexCoord) -> bool:
        tile = self._hexes.get(coord)
        if tile is None:
            return False
        terrain = self._terrain_types.get(tile.terrain_id)
        return terrain is not None and terrain.is_water

    def has_road_between(self, a: HexCoord, b: HexCoord) -> bool:
        return self._edge_flag(a, b, "road_directions")

    def has_river_between(self, a: HexCoord, b: HexCoord) -> bool:
        return self._edge_flag(a, b, "river_directions")

    def _edge_flag(self, a: HexCoord, b: HexCoord, attribute: str) -> bool:
        direction = direction_between(a, b)
        if direction is None:
            return False
        tile_a = self._hexes.get(a)
        if tile_a is not None and direction in getattr(tile_a, attribute):
            return True
        tile_b = self._hexes.get(b)
        return tile_b is not None and opposite_direction(direction) in getattr(tile_b, attribute)

    def set_road(self, coord: HexCoord, direction: int, present: bool = True) -> None:
        """Add or remove a road on one edge, updating both adjoining hexes."""

        self._set_edge(coord, direction, "road_directions", present)

    def set_river(self, coord: HexCoord, direction: int, present: bool = True) -> None:
        """Add or remove a river on one edge, updating both adjoining hexes."""

        self._set_edge(coord, direction, "river_directions", present)

    def _set_edge(self, coord: HexCoord, direction: int, attribute: str, present: bool) -> None:
        tile = self._hexes.get(coord)
        if tile is None:
            raise ValueError(f"no hex at ({coord.q}, {coord.r})")
        neighbor = self._hexes.get(hex_neighbor(coord, direction))
        pairs = [(tile, direction)]
        if neighbor is not None:
            pairs.append((neighbor, opposite_direction(direction)))
        for target, edge in pairs:
            edges: set[int] = getattr(target, attribute)
            if present:
                edges.add(edge)
            else:
                edges.discard(edge)


def build_rectangular_map(rows: int, columns: int, terrain_id: TerrainID) -> CampaignMap:
    """Lay out ``rows`` x ``columns`` hexes in odd-q offset order."""

    if rows <= 0 or columns <= 0:
        raise ValueError(f"map dimensions must be positive, got {rows}x{columns}")
    hexes = []
    for row in range(rows):
        for col in range(columns):
            coord = offset_to_axial(col, row)
            hexes.append(MapHex(q=coord.q, r=coord.r, terrain_id=terrain_id))
    return CampaignMap(rows=rows, columns=columns, hexes=hexes)
