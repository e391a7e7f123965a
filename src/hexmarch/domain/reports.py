"""Daily army status reports sent to commanders."""

from __future__ import annotations

from hexmarch.domain import supply
from hexmarch.domain.enums import ArmyStatus
from hexmarch.domain.models import Army, Campaign
from hexmarch.domain.notifications import Notification, NotificationKind
from hexmarch.domain.rules_config import DEFAULT_RULES, RulesConfig
from hexmarch.utils.hex_math import OFF_MAP, axial_to_offset


def army_status(army: Army) -> ArmyStatus:
    if army.is_garrison:
        return ArmyStatus.GARRISON
    if army.is_resting:
        return ArmyStatus.RESTING
    return ArmyStatus.ACTIVE


def format_army_report(army: Army, *, rules: RulesConfig = DEFAULT_RULES) -> str:
    """Render a plain-text status report for one army."""

    if army.coord is None or army.coord == OFF_MAP:
        location = "Unknown"
    else:
        col, row = axial_to_offset(army.coord)
        location = f"{col}, {row}"

    days = supply.days_of_supply(army, rules=rules)
    days_text = "n/a" if days is None else f"{days:.1f} days"

    lines = [
        f"Army Report: {army.name}",
        f"Location: {location}",
        f"Status: {army_status(army).value.title()}",
        f"Morale: {army.morale}",
        f"Combat Strength: {supply.combat_strength(army, rules=rules)}",
        f"Supply: {army.carried_supply} ({days_text})",
        f"Non-combatants: {army.noncombatants}",
        f"Wagons: {army.wagons}",
    ]
    if army.days_without_supply:
        lines.append(f"Days without supply: {army.days_without_supply}")
    return "\n".join(lines)


def queue_army_reports(
    campaign: Campaign,
    outbox: list[Notification],
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """Queue a report for every army with a commander; return how many were queued."""

    queued = 0
    for army in campaign.armies.values():
        if army.commander_id is None or army.commander_id not in campaign.commanders:
            continue
        outbox.append(
            Notification(
                army.commander_id,
                format_army_report(army, rules=rules),
                NotificationKind.ARMY_REPORT,
            )
        )
        queued += 1
    return queued
