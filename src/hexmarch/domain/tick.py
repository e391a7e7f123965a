"""Time-advance orchestration for hexmarch campaigns.

A tick runs every subsystem against a private copy of the campaign, one
hour at a time. Only when every step succeeds are the copy's fields written
back to the caller's campaign, so a failing tick leaves no trace.
Notifications produced along the way are returned to the caller for delivery
after the result is committed.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta

from hexmarch.domain import movement, news, reports, supply, weather
from hexmarch.domain.faction_rules import FactionRuleSnapshot
from hexmarch.domain.grid import HexGrid
from hexmarch.domain.models import Campaign, Dispatch
from hexmarch.domain.notifications import Notification, NotificationKind
from hexmarch.domain.rules_config import DEFAULT_RULES, RulesConfig
from hexmarch.utils.hex_math import OFF_MAP

logger = logging.getLogger(__name__)

# Longest stretch of game time simulated in one step.
MAX_STEP = timedelta(hours=1)


@dataclass(slots=True)
class TickSummary:
    """Counts of what happened during one tick."""

    messages_moved: int = 0
    messages_delivered: int = 0
    armies_moved: int = 0
    commanders_moved: int = 0
    armies_supplied: int = 0
    weather_hexes_updated: int = 0
    news_deliveries: int = 0
    army_reports: int = 0


@dataclass(slots=True)
class TickResult:
    """Outcome of :func:`advance_time`."""

    success: bool
    new_time: datetime | None = None
    summary: TickSummary = field(default_factory=TickSummary)
    notifications: list[Notification] = field(default_factory=list)
    error: str | None = None


def gate_crossed(old: datetime, new: datetime, hour: int) -> bool:
    """True if the first ``hour:00`` strictly after ``old`` falls at or before ``new``."""

    candidate = old.replace(hour=hour, minute=0, second=0, microsecond=0)
    if candidate <= old:
        candidate += timedelta(days=1)
    return candidate <= new


def advance_time(
    campaign: Campaign,
    duration: timedelta,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> TickResult:
    """Advance the campaign clock by ``duration`` and apply every subsystem.

    Long durations are played out in steps of at most one hour, so the march
    window and the daily gates see every hour that passes. All-or-nothing:
    on any error the campaign is left exactly as it was and the failure is
    returned rather than raised.
    """

    if duration <= timedelta(0):
        return TickResult(success=False, error=f"duration must be positive, got {duration}")

    summary = TickSummary()
    outbox: list[Notification] = []
    try:
        working = copy.deepcopy(campaign)
        ctx = movement.MovementContext(
            grid=HexGrid.from_map(working.map, working.terrain_types),
            rules=rules,
            faction_rules=FactionRuleSnapshot.from_factions(working.factions.values()),
        )
        remaining = duration
        while remaining > timedelta(0):
            step = min(remaining, MAX_STEP)
            _run_step(working, step, ctx, summary, outbox)
            remaining -= step
    except Exception as exc:
        logger.warning("tick for campaign %d rolled back: %s", int(campaign.id), exc)
        return TickResult(success=False, error=str(exc) or type(exc).__name__)

    for item in fields(Campaign):
        setattr(campaign, item.name, getattr(working, item.name))
    new_time = campaign.clock.current_time
    logger.debug("campaign %d advanced to %s: %s", int(campaign.id), new_time, summary)
    return TickResult(success=True, new_time=new_time, summary=summary, notifications=outbox)


def _run_step(
    campaign: Campaign,
    duration: timedelta,
    ctx: movement.MovementContext,
    summary: TickSummary,
    outbox: list[Notification],
) -> None:
    rules = ctx.rules
    clock = campaign.clock
    old_time = clock.current_time
    new_time = old_time + duration
    hours = duration.total_seconds() / 3600

    for dispatch in campaign.dispatches.values():
        if dispatch.delivered:
            continue
        summary.messages_moved += movement.advance(dispatch, hours, ctx)
        if _has_arrived(dispatch):
            _deliver_dispatch(campaign, dispatch, new_time, outbox)
            summary.messages_delivered += 1

    for army in campaign.armies.values():
        if army.path and movement.can_march(army, old_time.hour, rules=rules):
            summary.armies_moved += movement.advance(army, hours, ctx)

    for commander in campaign.commanders.values():
        followed = (
            campaign.armies.get(commander.following_army_id)
            if commander.following_army_id is not None
            else None
        )
        if followed is not None:
            if commander.coord != followed.coord:
                commander.coord = followed.coord
                summary.commanders_moved += 1
        else:
            summary.commanders_moved += movement.advance(commander, hours, ctx)

    if gate_crossed(old_time, new_time, clock.supply_usage_hour):
        for army in campaign.armies.values():
            supply.consume_daily_supply(army, rules=rules)
            summary.armies_supplied += 1

    clock.current_time = new_time

    if gate_crossed(old_time, new_time, clock.weather_update_hour):
        summary.weather_hexes_updated += weather.update_daily_weather(
            campaign, new_time, rules=rules
        )

    summary.news_deliveries += news.process_deliveries(campaign, new_time, outbox)

    if gate_crossed(old_time, new_time, clock.army_report_hour):
        summary.army_reports += reports.queue_army_reports(campaign, outbox, rules=rules)


def _has_arrived(dispatch: Dispatch) -> bool:
    return dispatch.coord is not None and dispatch.coord != OFF_MAP and not dispatch.path


def _deliver_dispatch(
    campaign: Campaign,
    dispatch: Dispatch,
    when: datetime,
    outbox: list[Notification],
) -> None:
    dispatch.delivered = True
    dispatch.delivered_at = when
    recipient_id = dispatch.recipient_commander_id
    if recipient_id is None or recipient_id not in campaign.commanders:
        return
    sender = campaign.commanders.get(dispatch.sender_commander_id)
    header = f"Dispatch from {sender.name}" if sender is not None else "Dispatch"
    outbox.append(
        Notification(recipient_id, f"{header}:\n{dispatch.content}", NotificationKind.DISPATCH)
    )
