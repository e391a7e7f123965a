"""A* route calculation over the hex grid.

Edge cost from a hex is the road cost when a road runs along the crossed
edge, otherwise the off-road cost; armies and supply convoys scale both by
their movement multiplier. Water hexes are never entered. The heuristic is
hex distance times the cheapest edge the traveler could possibly take, which
never overestimates the remaining cost.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from heapq import heappop, heappush

from hexmarch.domain.enums import TravelerKind
from hexmarch.domain.grid import HexGrid
from hexmarch.domain.rules_config import DEFAULT_RULES, MovementRules, RulesConfig
from hexmarch.utils.hex_math import HexCoord, hex_distance, hex_neighbors

logger = logging.getLogger(__name__)

START_MISSING = "Start hex does not exist"
TARGET_MISSING = "Target hex does not exist"
TARGET_IMPASSABLE = "Target hex is water (impassable)"
NO_PATH = "No path exists between the hexes"


@dataclass(slots=True)
class PathResult:
    """Outcome of a path search.

    ``route`` excludes the start hex and ends with the goal; ``total_cost`` is
    the sum of edge costs along it.
    """

    success: bool
    route: list[HexCoord] = field(default_factory=list)
    total_cost: float = 0.0
    failure_reason: str | None = None

    @classmethod
    def failure(cls, reason: str) -> PathResult:
        return cls(success=False, failure_reason=reason)


def cost_multiplier(kind: TravelerKind, movement: MovementRules) -> float:
    """Return the path cost multiplier applied to a traveler kind."""

    if kind is TravelerKind.ARMY:
        return movement.army_movement_multiplier
    if kind is TravelerKind.SUPPLY:
        return movement.supply_movement_multiplier
    return 1.0


def edge_cost(
    grid: HexGrid,
    a: HexCoord,
    b: HexCoord,
    kind: TravelerKind,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> float:
    """Cost for ``kind`` to cross from ``a`` into the adjacent hex ``b``."""

    movement = rules.movement
    base = movement.road_cost if grid.has_road_between(a, b) else movement.off_road_cost
    return base * cost_multiplier(kind, movement)


def find_path(
    grid: HexGrid,
    start: HexCoord,
    end: HexCoord,
    kind: TravelerKind,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> PathResult:
    """Find the least-cost route from ``start`` to ``end`` using A*.

    Invalid endpoints and an exhausted search are reported through
    :class:`PathResult`; this function does not raise for them.
    """

    if grid.get_hex(start) is None:
        return PathResult.failure(START_MISSING)
    if grid.get_hex(end) is None:
        return PathResult.failure(TARGET_MISSING)
    if grid.is_water(end):
        return PathResult.failure(TARGET_IMPASSABLE)
    if start == end:
        return PathResult(success=True)

    min_edge_cost = rules.movement.road_cost * cost_multiplier(kind, rules.movement)
    counter = itertools.count()

    # Priority queue: (f_score, insertion order, coord)
    open_heap: list[tuple[float, int, HexCoord]] = [
        (hex_distance(start, end) * min_edge_cost, next(counter), start)
    ]
    g_score: dict[HexCoord, float] = {start: 0.0}
    came_from: dict[HexCoord, HexCoord] = {}
    closed: set[HexCoord] = set()

    while open_heap:
        _, _, current = heappop(open_heap)
        if current in closed:
            continue
        if current == end:
            route = _reconstruct(came_from, start, end)
            return PathResult(success=True, route=route, total_cost=g_score[end])
        closed.add(current)

        for neighbor in hex_neighbors(current):
            if neighbor in closed or grid.get_hex(neighbor) is None:
                continue
            if grid.is_water(neighbor):
                continue
            tentative = g_score[current] + edge_cost(grid, current, neighbor, kind, rules=rules)
            if tentative < g_score.get(neighbor, float("inf")):
                g_score[neighbor] = tentative
                came_from[neighbor] = current
                f_score = tentative + hex_distance(neighbor, end) * min_edge_cost
                heappush(open_heap, (f_score, next(counter), neighbor))

    logger.debug("no path from %s to %s for %s", start, end, kind)
    return PathResult.failure(NO_PATH)


def _reconstruct(
    came_from: dict[HexCoord, HexCoord], start: HexCoord, end: HexCoord
) -> list[HexCoord]:
    route = [end]
    current = end
    while came_from[current] != start:
        current = came_from[current]
        route.append(current)
    route.reverse()
    return route
