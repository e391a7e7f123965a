"""Hex-by-hex movement of path-following travelers.

Armies, commanders and dispatches share a movement projection (``coord``,
``path`` and ``time_in_transit``) and differ only in their base rate and
kind-specific speed modifiers. Each call to :func:`advance` accumulates
elapsed hours and crosses at most one edge.
"""

from __future__ import annotations

from dataclasses import dataclass

from hexmarch.domain import supply
from hexmarch.domain.enums import TravelerKind
from hexmarch.domain.faction_rules import FactionRuleKeys, FactionRuleSnapshot
from hexmarch.domain.grid import HexGrid
from hexmarch.domain.models import Army, Commander, Dispatch
from hexmarch.domain.rules_config import DEFAULT_RULES, RulesConfig
from hexmarch.utils.hex_math import OFF_MAP

Traveler = Army | Commander | Dispatch

# Absorbs float drift from many small hour increments.
_EPSILON = 1e-9


@dataclass(frozen=True, slots=True)
class MovementContext:
    """Read-only inputs shared by every movement in one tick."""

    grid: HexGrid
    rules: RulesConfig = DEFAULT_RULES
    faction_rules: FactionRuleSnapshot = FactionRuleSnapshot()


def traveler_kind(traveler: Traveler) -> TravelerKind:
    match traveler:
        case Army():
            return TravelerKind.ARMY
        case Commander():
            return TravelerKind.COMMANDER
        case Dispatch():
            return TravelerKind.DISPATCH
    raise TypeError(f"not a traveler: {type(traveler).__name__}")


def effective_rate(traveler: Traveler, ctx: MovementContext) -> float:
    """Base rate for the traveler's kind with army and dispatch modifiers applied."""

    rules = ctx.rules
    rate = rules.movement_rates.for_kind(traveler_kind(traveler))

    match traveler:
        case Army():
            movement = rules.movement
            if supply.marching_column_length(traveler, rules=rules) > movement.long_column_threshold:
                rate = min(rate, movement.long_column_speed_cap)
            if traveler.is_forced_march:
                rate *= movement.forced_march_multiplier
        case Dispatch():
            tile = ctx.grid.get_hex(traveler.coord)
            if (
                tile is not None
                and traveler.sender_faction_id is not None
                and tile.controlling_faction_id == traveler.sender_faction_id
            ):
                rate *= ctx.faction_rules.get(
                    traveler.sender_faction_id,
                    FactionRuleKeys.OWN_TERRITORY_MESSENGER_MULTIPLIER,
                    1.0,
                )
    return rate


def crossing_threshold(traveler: Traveler, ctx: MovementContext) -> float:
    """Hours of transit needed to cross from the current hex into the path head."""

    current = traveler.coord
    target = traveler.path[0]
    movement = ctx.rules.movement
    has_road = ctx.grid.has_road_between(current, target)
    cost = movement.road_cost if has_road else movement.off_road_cost

    extra = 0.0
    if isinstance(traveler, Army) and not has_road and ctx.grid.has_river_between(current, target):
        column = supply.fording_column_length(traveler, rules=ctx.rules)
        extra = column * movement.river_fording_cost_per_column_unit

    return (cost + extra) / effective_rate(traveler, ctx)


def advance(traveler: Traveler, hours: float, ctx: MovementContext) -> int:
    """Advance a traveler by ``hours`` and return the number of hexes crossed (0 or 1).

    Surplus transit time after a crossing carries over to the next edge.
    """

    if traveler.coord is None or traveler.coord == OFF_MAP or not traveler.path:
        return 0

    if isinstance(traveler, Army) and traveler.is_forced_march:
        traveler.forced_march_hours += hours

    threshold = crossing_threshold(traveler, ctx)
    traveler.time_in_transit += hours
    if traveler.time_in_transit + _EPSILON < threshold:
        return 0

    traveler.coord = traveler.path.pop(0)
    traveler.time_in_transit = max(0.0, traveler.time_in_transit - threshold)
    return 1


def can_march(army: Army, hour: int, *, rules: RulesConfig = DEFAULT_RULES) -> bool:
    """Whether the army may move at the given hour of day.

    Garrisoned and resting armies hold position; others march within the
    daytime window unless night marching.
    """

    if army.is_garrison or army.is_resting:
        return False
    if army.is_night_march:
        return True
    movement = rules.movement
    return movement.march_day_start_hour <= hour < movement.march_day_end_hour
