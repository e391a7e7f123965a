"""Referee news events spreading outward across the map.

On creation an event floods travel time from its origin over the whole map
(Dijkstra, road edges cheaper than open country). Each tick compares the
time elapsed since creation with those arrival times and hands each
commander in a reached hex their faction's message, once per event.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Mapping
from datetime import datetime
from heapq import heappop, heappush

from hexmarch.domain.grid import HexGrid
from hexmarch.domain.models import (
    Campaign,
    CommanderID,
    FactionID,
    HexArrival,
    NewsEvent,
    NewsEventID,
)
from hexmarch.domain.notifications import Notification, NotificationKind
from hexmarch.domain.rules_config import DEFAULT_RULES, RulesConfig
from hexmarch.utils.hex_math import OFF_MAP, HexCoord, hex_neighbors

logger = logging.getLogger(__name__)


class NewsEventNotFoundError(LookupError):
    """Raised when a referee operation names an unknown news event."""


def compute_arrivals(
    grid: HexGrid,
    origin: HexCoord,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> tuple[HexArrival, ...]:
    """Return the earliest arrival time (hours) at every hex reachable from ``origin``."""

    news = rules.news
    counter = itertools.count()
    best: dict[HexCoord, float] = {origin: 0.0}
    heap: list[tuple[float, int, HexCoord]] = [(0.0, next(counter), origin)]
    settled: set[HexCoord] = set()

    while heap:
        hours, _, current = heappop(heap)
        if current in settled:
            continue
        settled.add(current)

        for neighbor in hex_neighbors(current):
            if neighbor in settled or grid.get_hex(neighbor) is None:
                continue
            step = (
                news.road_hours_per_hex
                if grid.has_road_between(current, neighbor)
                else news.off_road_hours_per_hex
            )
            candidate = hours + step
            if candidate < best.get(neighbor, float("inf")):
                best[neighbor] = candidate
                heappush(heap, (candidate, next(counter), neighbor))

    return tuple(HexArrival(q=coord.q, r=coord.r, hours=hours) for coord, hours in best.items())


def create_event(
    campaign: Campaign,
    title: str,
    origin: HexCoord,
    game_time: datetime,
    faction_messages: Mapping[FactionID, str],
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> NewsEvent:
    """Create a news event, precompute its spread and store it on the campaign."""

    grid = HexGrid.from_map(campaign.map, campaign.terrain_types)
    if grid.get_hex(origin) is None:
        raise ValueError(f"origin hex ({origin.q}, {origin.r}) does not exist")

    event = NewsEvent(
        id=_next_event_id(campaign),
        title=title,
        origin=origin,
        created_at=game_time,
        faction_messages=dict(faction_messages),
        arrivals=compute_arrivals(grid, origin, rules=rules),
    )
    campaign.news_events[event.id] = event
    logger.info(
        "news event %d '%s' created at (%d, %d) reaching %d hexes",
        int(event.id),
        title,
        origin.q,
        origin.r,
        len(event.arrivals),
    )
    return event


def process_deliveries(
    campaign: Campaign,
    current_time: datetime,
    outbox: list[Notification],
) -> int:
    """Queue news for every commander the active events have reached.

    Returns the number of deliveries made across all events.
    """

    commanders = [
        commander
        for commander in campaign.commanders.values()
        if commander.coord is not None and commander.coord != OFF_MAP
    ]

    total = 0
    for event in campaign.news_events.values():
        if not event.is_active:
            continue
        elapsed = (current_time - event.created_at).total_seconds() / 3600
        if elapsed < 0:
            continue

        reached = {arrival.coord for arrival in event.arrivals if arrival.hours <= elapsed}
        new_recipients: list[CommanderID] = []
        for commander in commanders:
            if commander.id in event.delivered_commander_ids:
                continue
            if commander.coord not in reached:
                continue
            message = event.faction_messages.get(commander.faction_id)
            if message is None:
                continue
            outbox.append(Notification(commander.id, message, NotificationKind.NEWS))
            new_recipients.append(commander.id)

        if new_recipients:
            event.delivered_commander_ids.update(new_recipients)
            logger.info(
                "news event %d delivered to %d commanders", int(event.id), len(new_recipients)
            )
            total += len(new_recipients)

    return total


def list_events(campaign: Campaign, *, active_only: bool = False) -> list[NewsEvent]:
    """Return events newest first."""

    events = sorted(campaign.news_events.values(), key=lambda e: e.created_at, reverse=True)
    if active_only:
        events = [event for event in events if event.is_active]
    return events


def get_event(campaign: Campaign, event_id: NewsEventID) -> NewsEvent:
    event = campaign.news_events.get(event_id)
    if event is None:
        raise NewsEventNotFoundError(f"news event {int(event_id)} not found")
    return event


def update_event(
    campaign: Campaign,
    event_id: NewsEventID,
    *,
    title: str | None = None,
    faction_messages: Mapping[FactionID, str] | None = None,
) -> NewsEvent:
    """Edit the title or messages of an event; arrival times are left alone."""

    event = get_event(campaign, event_id)
    if title is not None:
        event.title = title
    if faction_messages is not None:
        event.faction_messages = dict(faction_messages)
    return event


def set_event_active(campaign: Campaign, event_id: NewsEventID, active: bool) -> NewsEvent:
    """Pause or resume delivery; the delivered set is preserved either way."""

    event = get_event(campaign, event_id)
    event.is_active = active
    return event


def delete_event(campaign: Campaign, event_id: NewsEventID) -> None:
    get_event(campaign, event_id)
    del campaign.news_events[event_id]


def _next_event_id(campaign: Campaign) -> NewsEventID:
    if not campaign.news_events:
        return NewsEventID(1)
    return NewsEventID(max(int(event_id) for event_id in campaign.news_events) + 1)
