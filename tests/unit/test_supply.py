"""Unit tests for supply consumption and column lengths."""

from __future__ import annotations

import pytest

from hexmarch.domain import models as dm
from hexmarch.domain import supply
from hexmarch.domain.enums import UnitCategory


def _army(carried_supply: int = 1000) -> dm.Army:
    return dm.Army(
        id=dm.ArmyID(1),
        name="Mixed Host",
        faction_id=dm.FactionID(1),
        brigades=[
            dm.Brigade(id=dm.BrigadeID(1), name="Foot", category=UnitCategory.INFANTRY, number=100),
            dm.Brigade(id=dm.BrigadeID(2), name="Horse", category=UnitCategory.CAVALRY, number=50),
            dm.Brigade(
                id=dm.BrigadeID(3), name="Slingers", category=UnitCategory.SKIRMISHERS, number=30
            ),
        ],
        noncombatants=50,
        wagons=5,
        carried_supply=carried_supply,
    )


def test_daily_consumption_matches_unit_costs():
    # 100 + 50 * 10 + 30 + 50 noncombatants + 5 wagons * 10
    assert supply.daily_consumption(_army()) == 730


def test_consume_daily_supply_deducts():
    army = _army(carried_supply=1000)
    assert supply.consume_daily_supply(army) == 730
    assert army.carried_supply == 270
    assert army.days_without_supply == 0


def test_consume_daily_supply_runs_out():
    army = _army(carried_supply=100)
    assert supply.consume_daily_supply(army) == 100
    assert army.carried_supply == 0
    assert army.days_without_supply == 1

    supply.consume_daily_supply(army)
    assert army.days_without_supply == 2


def test_resupplied_army_resets_starvation_counter():
    army = _army(carried_supply=5000)
    army.days_without_supply = 3
    supply.consume_daily_supply(army)
    assert army.days_without_supply == 0


def test_marching_column_length():
    army = dm.Army(
        id=dm.ArmyID(1),
        name="Host",
        faction_id=dm.FactionID(1),
        brigades=[
            dm.Brigade(id=dm.BrigadeID(1), name="Foot", category=UnitCategory.INFANTRY, number=10000),
            dm.Brigade(id=dm.BrigadeID(2), name="Horse", category=UnitCategory.CAVALRY, number=4000),
        ],
        noncombatants=5000,
    )
    assert supply.marching_column_length(army) == pytest.approx(2 + 2 + 1)
    assert supply.fording_column_length(army) == pytest.approx(2 + 1)


def test_combat_strength_and_days_of_supply():
    army = _army(carried_supply=1460)
    assert supply.combat_strength(army) == 100 + 100 + 30
    assert supply.days_of_supply(army) == pytest.approx(2.0)


def test_days_of_supply_for_empty_army():
    army = dm.Army(id=dm.ArmyID(2), name="Ghost", faction_id=dm.FactionID(1))
    assert supply.days_of_supply(army) is None
