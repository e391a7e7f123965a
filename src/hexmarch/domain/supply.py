"""Supply consumption and column-length rules."""

from __future__ import annotations

from hexmarch.domain.enums import UnitCategory
from hexmarch.domain.models import Army
from hexmarch.domain.rules_config import DEFAULT_RULES, RulesConfig


def daily_consumption(army: Army, *, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Supply eaten by an army in one day.

    Every man eats according to his brigade category; noncombatants and
    wagons add a flat amount each.
    """

    troops = sum(
        brigade.number * rules.stats_for(brigade.category).supply_consumption
        for brigade in army.brigades
    )
    return (
        troops
        + army.noncombatants * rules.supply.noncombatant_consumption
        + army.wagons * rules.supply.wagon_consumption
    )


def marching_column_length(army: Army, *, rules: RulesConfig = DEFAULT_RULES) -> float:
    """Length of the marching column, in column units."""

    length = sum(
        brigade.number / rules.stats_for(brigade.category).men_per_column_unit
        for brigade in army.brigades
    )
    return length + _noncombatant_length(army, rules)


def fording_column_length(army: Army, *, rules: RulesConfig = DEFAULT_RULES) -> float:
    """Column length that pays the river fording penalty (cavalry excluded)."""

    length = 0.0
    for brigade in army.brigades:
        stats = rules.stats_for(brigade.category)
        if stats.counts_for_fording:
            length += brigade.number / stats.men_per_column_unit
    return length + _noncombatant_length(army, rules)


def _noncombatant_length(army: Army, rules: RulesConfig) -> float:
    return army.noncombatants / rules.stats_for(UnitCategory.INFANTRY).men_per_column_unit


def combat_strength(army: Army, *, rules: RulesConfig = DEFAULT_RULES) -> int:
    return sum(
        brigade.number * rules.stats_for(brigade.category).combat_power
        for brigade in army.brigades
    )


def days_of_supply(army: Army, *, rules: RulesConfig = DEFAULT_RULES) -> float | None:
    """Days the carried supply lasts at the current rate; None if nothing is eaten."""

    consumption = daily_consumption(army, rules=rules)
    if consumption <= 0:
        return None
    return army.carried_supply / consumption


def consume_daily_supply(army: Army, *, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Deduct one day of supply from the army and return the amount consumed.

    When the carried supply cannot cover the day it drops to zero and the
    army's starvation counter increases.
    """

    consumption = daily_consumption(army, rules=rules)
    if army.carried_supply >= consumption:
        army.carried_supply -= consumption
        army.days_without_supply = 0
        return consumption

    eaten = army.carried_supply
    army.carried_supply = 0
    army.days_without_supply += 1
    return eaten
