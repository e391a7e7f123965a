"""Unit tests for hex-by-hex movement rules."""

from __future__ import annotations

import pytest

from hexmarch.domain import models as dm
from hexmarch.domain.enums import UnitCategory
from hexmarch.domain.faction_rules import FactionRuleKeys, FactionRuleSnapshot
from hexmarch.domain.grid import HexGrid, build_rectangular_map
from hexmarch.domain.movement import MovementContext, advance, can_march, crossing_threshold
from hexmarch.utils.hex_math import OFF_MAP, HexCoord

A = HexCoord(q=0, r=0)
B = HexCoord(q=1, r=0)
C = HexCoord(q=2, r=0)
FACTION = dm.FactionID(1)


def _grid() -> HexGrid:
    terrain = {dm.TerrainID(1): dm.TerrainType(id=dm.TerrainID(1), name="Grassland")}
    return HexGrid.from_map(build_rectangular_map(3, 3, dm.TerrainID(1)), terrain)


def _ctx(grid: HexGrid | None = None, factions: list[dm.Faction] | None = None) -> MovementContext:
    return MovementContext(
        grid=grid or _grid(),
        faction_rules=FactionRuleSnapshot.from_factions(factions or []),
    )


def _army(**overrides) -> dm.Army:
    values = {
        "id": dm.ArmyID(1),
        "name": "First Army",
        "faction_id": FACTION,
        "coord": A,
        "path": [B, C],
        "brigades": [
            dm.Brigade(id=dm.BrigadeID(1), name="Foot", category=UnitCategory.INFANTRY, number=1000)
        ],
    }
    values.update(overrides)
    return dm.Army(**values)


def _dispatch(**overrides) -> dm.Dispatch:
    values = {
        "id": dm.DispatchID(1),
        "content": "Hold the ford",
        "sender_faction_id": FACTION,
        "coord": A,
        "path": [B],
    }
    values.update(overrides)
    return dm.Dispatch(**values)


def test_message_off_road_threshold_is_six_hours():
    assert crossing_threshold(_dispatch(), _ctx()) == pytest.approx(6.0)


def test_message_road_threshold_is_three_hours():
    grid = _grid()
    grid.set_road(A, 0)
    assert crossing_threshold(_dispatch(), _ctx(grid)) == pytest.approx(3.0)


def test_army_off_road_threshold_is_twelve_hours():
    assert crossing_threshold(_army(), _ctx()) == pytest.approx(12.0)


def test_insufficient_time_only_accumulates():
    army = _army()
    crossed = advance(army, 1.0, _ctx())
    assert crossed == 0
    assert army.coord == A
    assert army.path == [B, C]
    assert army.time_in_transit == pytest.approx(1.0)


def test_crossing_pops_path_and_resets_accumulator():
    army = _army()
    crossed = advance(army, 12.0, _ctx())
    assert crossed == 1
    assert army.coord == B
    assert army.path == [C]
    assert army.time_in_transit == pytest.approx(0.0)


def test_surplus_time_carries_to_next_edge():
    dispatch = _dispatch(path=[B, C])
    assert advance(dispatch, 8.0, _ctx()) == 1
    assert dispatch.time_in_transit == pytest.approx(2.0)
    assert advance(dispatch, 4.0, _ctx()) == 1
    assert dispatch.coord == C


def test_at_most_one_hex_per_call():
    dispatch = _dispatch(path=[B, C])
    assert advance(dispatch, 100.0, _ctx()) == 1
    assert dispatch.coord == B


def test_unplaced_or_idle_travelers_do_not_move():
    assert advance(_army(coord=None), 50.0, _ctx()) == 0
    assert advance(_army(coord=OFF_MAP), 50.0, _ctx()) == 0
    idle = _army(path=[])
    assert advance(idle, 50.0, _ctx()) == 0
    assert idle.time_in_transit == 0.0


def test_forced_march_doubles_speed_and_counts_hours():
    army = _army(is_forced_march=True)
    assert crossing_threshold(army, _ctx()) == pytest.approx(6.0)
    advance(army, 2.0, _ctx())
    assert army.forced_march_hours == pytest.approx(2.0)


def test_long_column_is_capped():
    big = [
        dm.Brigade(id=dm.BrigadeID(1), name="Host", category=UnitCategory.INFANTRY, number=35000)
    ]
    army = _army(brigades=big)
    assert crossing_threshold(army, _ctx()) == pytest.approx(24.0)


def test_long_column_cap_then_forced_march():
    big = [
        dm.Brigade(id=dm.BrigadeID(1), name="Host", category=UnitCategory.INFANTRY, number=35000)
    ]
    army = _army(brigades=big, is_forced_march=True)
    assert crossing_threshold(army, _ctx()) == pytest.approx(12.0)


def test_river_fording_adds_column_cost():
    grid = _grid()
    grid.set_river(A, 0)
    brigades = [
        dm.Brigade(id=dm.BrigadeID(1), name="Foot", category=UnitCategory.INFANTRY, number=10000),
        dm.Brigade(id=dm.BrigadeID(2), name="Horse", category=UnitCategory.CAVALRY, number=4000),
    ]
    army = _army(brigades=brigades)
    # Fording column: 10000 / 5000 = 2 units (cavalry excluded); 12 + 2 * 6 = 24.
    assert crossing_threshold(army, _ctx(grid)) == pytest.approx(24.0)


def test_forced_march_rate_applies_to_fording_threshold():
    grid = _grid()
    grid.set_river(A, 0)
    brigades = [
        dm.Brigade(id=dm.BrigadeID(1), name="Foot", category=UnitCategory.INFANTRY, number=10000)
    ]
    army = _army(brigades=brigades, is_forced_march=True)
    assert crossing_threshold(army, _ctx(grid)) == pytest.approx((12.0 + 12.0) / 2.0)


def test_road_bridges_river():
    grid = _grid()
    grid.set_river(A, 0)
    grid.set_road(A, 0)
    brigades = [
        dm.Brigade(id=dm.BrigadeID(1), name="Foot", category=UnitCategory.INFANTRY, number=10000)
    ]
    assert crossing_threshold(_army(brigades=brigades), _ctx(grid)) == pytest.approx(6.0)


def test_cavalry_only_army_fords_freely():
    grid = _grid()
    grid.set_river(A, 0)
    brigades = [
        dm.Brigade(id=dm.BrigadeID(1), name="Horse", category=UnitCategory.CAVALRY, number=2000)
    ]
    assert crossing_threshold(_army(brigades=brigades), _ctx(grid)) == pytest.approx(12.0)


def test_dispatch_speeds_up_in_own_territory():
    grid = _grid()
    grid.get_hex(A).controlling_faction_id = FACTION
    faction = dm.Faction(
        id=FACTION,
        name="Empire",
        rules={FactionRuleKeys.OWN_TERRITORY_MESSENGER_MULTIPLIER: 1.5},
    )
    assert crossing_threshold(_dispatch(), _ctx(grid, [faction])) == pytest.approx(4.0)


def test_dispatch_multiplier_defaults_when_rule_absent():
    grid = _grid()
    grid.get_hex(A).controlling_faction_id = FACTION
    faction = dm.Faction(id=FACTION, name="Empire")
    assert crossing_threshold(_dispatch(), _ctx(grid, [faction])) == pytest.approx(6.0)


def test_dispatch_multiplier_ignored_in_foreign_territory():
    grid = _grid()
    grid.get_hex(A).controlling_faction_id = dm.FactionID(2)
    faction = dm.Faction(
        id=FACTION,
        name="Empire",
        rules={FactionRuleKeys.OWN_TERRITORY_MESSENGER_MULTIPLIER: 1.5},
    )
    assert crossing_threshold(_dispatch(), _ctx(grid, [faction])) == pytest.approx(6.0)


def test_commander_moves_at_commander_rate():
    commander = dm.Commander(
        id=dm.CommanderID(1), name="Marcus", faction_id=FACTION, coord=A, path=[B]
    )
    assert advance(commander, 6.0, _ctx()) == 1
    assert commander.coord == B


def test_march_window():
    army = _army()
    assert not can_march(army, 7)
    assert can_march(army, 8)
    assert can_march(army, 19)
    assert not can_march(army, 20)


def test_night_march_ignores_window():
    assert can_march(_army(is_night_march=True), 23)


def test_garrison_and_resting_armies_hold():
    assert not can_march(_army(is_garrison=True), 12)
    assert not can_march(_army(is_resting=True, is_night_march=True), 12)


def test_snapshot_not_built_from_factions_yields_default():
    grid = _grid()
    grid.get_hex(A).controlling_faction_id = FACTION
    ctx = MovementContext(grid=grid)
    key = FactionRuleKeys.OWN_TERRITORY_MESSENGER_MULTIPLIER
    assert ctx.faction_rules.get(FACTION, key, 1.0) == 1.0
    assert crossing_threshold(_dispatch(), ctx) == pytest.approx(6.0)


@pytest.mark.parametrize("multiplier", [0.0, -2.0])
def test_non_positive_messenger_multiplier_is_ignored(multiplier):
    grid = _grid()
    grid.get_hex(A).controlling_faction_id = FACTION
    faction = dm.Faction(
        id=FACTION,
        name="Empire",
        rules={FactionRuleKeys.OWN_TERRITORY_MESSENGER_MULTIPLIER: multiplier},
    )
    dispatch = _dispatch()
    ctx = _ctx(grid, [faction])

    assert crossing_threshold(dispatch, ctx) == pytest.approx(6.0)
    assert advance(dispatch, 6.0, ctx) == 1
