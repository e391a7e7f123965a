"""Daily regional weather transitions."""

from __future__ import annotations

import logging
from datetime import datetime

from hexmarch.domain.models import Campaign, MapHex, WeatherID, WeatherType
from hexmarch.domain.rules_config import DEFAULT_RULES, RulesConfig
from hexmarch.utils.rng import generate_seed, weighted_choice

logger = logging.getLogger(__name__)


def update_daily_weather(
    campaign: Campaign,
    game_time: datetime,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """Roll the next day's weather for every hex and return the number updated.

    Runs at most once per calendar date. Each hex draws from the transition
    row of its current weather; hexes without weather draw from the fallback
    row. Hexes whose weather has no row, or whose row names nothing in the
    campaign's weather catalog, keep their weather.
    """

    day = game_time.date()
    if day in campaign.weather_update_dates:
        return 0

    catalog = {weather.name.lower(): weather for weather in campaign.weather_types.values()}
    updates: list[tuple[MapHex, WeatherID]] = []
    for tile in campaign.map.hexes:
        candidates = _eligible_candidates(campaign, tile, catalog, rules)
        if not candidates:
            continue
        seed = generate_seed(int(campaign.id), day.toordinal(), "weather", f"hex:{tile.q}:{tile.r}")
        chosen: WeatherType = weighted_choice(seed, candidates)["choice"]
        updates.append((tile, chosen.id))

    if not updates:
        logger.debug("no eligible weather transitions on %s", day)
        return 0

    for tile, weather_id in updates:
        tile.weather_id = weather_id
    campaign.weather_update_dates.add(day)
    logger.info("weather updated for %d hexes on %s", len(updates), day)
    return len(updates)


def _eligible_candidates(
    campaign: Campaign,
    tile: MapHex,
    catalog: dict[str, WeatherType],
    rules: RulesConfig,
) -> list[tuple[WeatherType, float]]:
    if tile.weather_id is None:
        current_name = rules.weather.fallback_weather
    else:
        current = campaign.weather_types.get(tile.weather_id)
        if current is None:
            return []
        current_name = current.name

    row = rules.weather.row_for(current_name)
    if row is None:
        return []

    candidates = [
        (catalog[name.lower()], weight)
        for name, weight in row.items()
        if name.lower() in catalog and weight > 0
    ]
    return candidates
