"""Runtime primitives backing the hexmarch HTTP API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from contextlib import suppress
from datetime import datetime, timedelta

from hexmarch.config import Settings, get_settings
from hexmarch.domain import models as dm
from hexmarch.domain import news
from hexmarch.domain.enums import TravelerKind
from hexmarch.domain.grid import HexGrid, build_rectangular_map
from hexmarch.domain.notifications import Notification
from hexmarch.domain.pathfinding import PathResult, find_path
from hexmarch.domain.reports import army_status
from hexmarch.domain.rules_config import DEFAULT_RULES, RulesConfig, load_rules
from hexmarch.domain.supply import daily_consumption, marching_column_length
from hexmarch.domain.tick import TickResult, advance_time
from hexmarch.interfaces import INotificationChannel
from hexmarch.repository import JsonCampaignRepository
from hexmarch.utils.hex_math import HexCoord

logger = logging.getLogger(__name__)

DEFAULT_TERRAIN = (
    dm.TerrainType(id=dm.TerrainID(1), name="Grassland"),
    dm.TerrainType(id=dm.TerrainID(2), name="Water", is_water=True),
)
DEFAULT_WEATHER = ("Clear", "Overcast", "Rain", "Fog")


class LoggingNotificationChannel:
    """Notification channel that writes every message to the log."""

    def send_to_commander(self, commander: dm.Commander, text: str) -> bool:
        logger.info("to commander %d (%s): %s", int(commander.id), commander.name, text)
        return True


class CampaignService:
    """Utilities for loading and mutating campaign aggregates."""

    def __init__(
        self,
        repository: JsonCampaignRepository,
        *,
        rules: RulesConfig = DEFAULT_RULES,
    ) -> None:
        self._repository = repository
        self._rules = rules

    def list_campaigns(self) -> list[dm.Campaign]:
        """Return every persisted campaign ordered by identifier."""

        campaigns: list[dm.Campaign] = []
        for campaign_id in self._repository.list_campaigns():
            with suppress(FileNotFoundError):
                campaigns.append(self._repository.load(campaign_id))
        return campaigns

    def get_campaign(self, campaign_id: dm.CampaignID) -> dm.Campaign:
        """Load a single campaign or raise ``FileNotFoundError``."""

        return self._repository.load(campaign_id)

    def save_campaign(self, campaign: dm.Campaign) -> dm.Campaign:
        """Persist the provided campaign and return it."""

        self._repository.save(campaign)
        return campaign

    def create_campaign(
        self,
        name: str,
        *,
        rows: int,
        columns: int,
        start_time: datetime | None = None,
    ) -> dm.Campaign:
        """Create and persist a campaign with a rectangular grassland map."""

        terrain = {terrain.id: terrain for terrain in DEFAULT_TERRAIN}
        weather = {
            dm.WeatherID(index): dm.WeatherType(id=dm.WeatherID(index), name=weather_name)
            for index, weather_name in enumerate(DEFAULT_WEATHER, start=1)
        }
        campaign = dm.Campaign(
            id=self._next_identifier(),
            name=name,
            map=build_rectangular_map(rows, columns, DEFAULT_TERRAIN[0].id),
            terrain_types=terrain,
            weather_types=weather,
        )
        if start_time is not None:
            campaign.clock.current_time = start_time
        self._repository.save(campaign)
        return campaign

    def _next_identifier(self) -> dm.CampaignID:
        existing = self._repository.list_campaigns()
        if not existing:
            return dm.CampaignID(1)
        last = max(existing, key=int)
        return dm.CampaignID(int(last) + 1)

    def find_path(
        self,
        campaign: dm.Campaign,
        start: HexCoord,
        end: HexCoord,
        kind: TravelerKind,
    ) -> PathResult:
        grid = HexGrid.from_map(campaign.map, campaign.terrain_types)
        return find_path(grid, start, end, kind, rules=self._rules)

    def create_news(
        self,
        campaign_id: dm.CampaignID,
        title: str,
        origin: HexCoord,
        faction_messages: Mapping[dm.FactionID, str],
    ) -> dm.NewsEvent:
        """Create a news event at the campaign's current game time."""

        campaign = self.get_campaign(campaign_id)
        event = news.create_event(
            campaign,
            title,
            origin,
            campaign.clock.current_time,
            faction_messages,
            rules=self._rules,
        )
        self.save_campaign(campaign)
        return event

    def update_news(
        self,
        campaign_id: dm.CampaignID,
        event_id: dm.NewsEventID,
        *,
        title: str | None = None,
        faction_messages: Mapping[dm.FactionID, str] | None = None,
    ) -> dm.NewsEvent:
        campaign = self.get_campaign(campaign_id)
        event = news.update_event(
            campaign, event_id, title=title, faction_messages=faction_messages
        )
        self.save_campaign(campaign)
        return event

    def set_news_active(
        self, campaign_id: dm.CampaignID, event_id: dm.NewsEventID, active: bool
    ) -> dm.NewsEvent:
        campaign = self.get_campaign(campaign_id)
        event = news.set_event_active(campaign, event_id, active)
        self.save_campaign(campaign)
        return event

    def delete_news(self, campaign_id: dm.CampaignID, event_id: dm.NewsEventID) -> None:
        campaign = self.get_campaign(campaign_id)
        news.delete_event(campaign, event_id)
        self.save_campaign(campaign)

    @staticmethod
    def to_summary_dict(campaign: dm.Campaign) -> dict[str, object]:
        """Return a JSON-friendly overview of a campaign."""

        return {
            "id": int(campaign.id),
            "name": campaign.name,
            "current_time": campaign.clock.current_time,
            "rows": campaign.map.rows,
            "columns": campaign.map.columns,
            "hex_count": len(campaign.map.hexes),
            "faction_count": len(campaign.factions),
            "commander_count": len(campaign.commanders),
            "army_count": len(campaign.armies),
            "dispatches_in_transit": sum(
                1 for dispatch in campaign.dispatches.values() if not dispatch.delivered
            ),
            "active_news_events": sum(1 for event in campaign.news_events.values() if event.is_active),
        }

    @staticmethod
    def to_news_dict(event: dm.NewsEvent) -> dict[str, object]:
        return {
            "id": int(event.id),
            "title": event.title,
            "origin_q": event.origin.q,
            "origin_r": event.origin.r,
            "created_at": event.created_at,
            "is_active": event.is_active,
            "faction_messages": {int(k): v for k, v in event.faction_messages.items()},
            "delivered_commander_ids": sorted(int(cid) for cid in event.delivered_commander_ids),
            "reachable_hexes": len(event.arrivals),
        }

    def to_army_dict(self, campaign: dm.Campaign, army: dm.Army) -> dict[str, object]:
        commander = campaign.commanders.get(army.commander_id)
        return {
            "id": int(army.id),
            "name": army.name,
            "faction_id": int(army.faction_id),
            "commander_id": int(army.commander_id) if army.commander_id is not None else None,
            "commander_name": commander.name if commander is not None else None,
            "status": str(army_status(army)),
            "q": army.coord.q if army.coord is not None else None,
            "r": army.coord.r if army.coord is not None else None,
            "path_length": len(army.path),
            "carried_supply": army.carried_supply,
            "daily_consumption": daily_consumption(army, rules=self._rules),
            "column_length": marching_column_length(army, rules=self._rules),
            "is_forced_march": army.is_forced_march,
            "is_night_march": army.is_night_march,
        }

    def list_armies(self, campaign: dm.Campaign) -> list[dict[str, object]]:
        return [
            self.to_army_dict(campaign, army)
            for _, army in sorted(campaign.armies.items(), key=lambda item: int(item[0]))
        ]


class TickManager:
    """Serialized time advancement, on demand or on a background schedule."""

    MIN_INTERVAL_SECONDS = 0.1

    def __init__(
        self,
        repository: JsonCampaignRepository,
        *,
        rules: RulesConfig = DEFAULT_RULES,
        channel: INotificationChannel | None = None,
        base_interval_seconds: float,
        tick_hours: int = 1,
        debug_multiplier: float = 1.0,
        lock: asyncio.Lock | None = None,
    ) -> None:
        self._repository = repository
        self._rules = rules
        self._channel: INotificationChannel = channel or LoggingNotificationChannel()
        self._base_interval = max(base_interval_seconds, self.MIN_INTERVAL_SECONDS)
        self._tick_hours = max(tick_hours, 1)
        self._debug_multiplier = max(debug_multiplier, 0.01)
        self._auto_campaigns: set[dm.CampaignID] = set()
        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()
        self._advance_lock = lock or asyncio.Lock()

    @property
    def interval_seconds(self) -> float:
        return max(self.MIN_INTERVAL_SECONDS, self._base_interval * self._debug_multiplier)

    @property
    def base_interval_seconds(self) -> float:
        return self._base_interval

    @property
    def debug_multiplier(self) -> float:
        return self._debug_multiplier

    @property
    def tick_hours(self) -> int:
        return self._tick_hours

    def set_base_interval(self, seconds: float) -> None:
        self._base_interval = max(seconds, self.MIN_INTERVAL_SECONDS)

    def set_debug_multiplier(self, multiplier: float) -> None:
        self._debug_multiplier = max(multiplier, 0.01)

    def set_tick_hours(self, hours: int) -> None:
        self._tick_hours = max(hours, 1)

    def enabled_campaigns(self) -> set[dm.CampaignID]:
        return set(self._auto_campaigns)

    def is_enabled(self, campaign_id: dm.CampaignID) -> bool:
        return campaign_id in self._auto_campaigns

    async def set_enabled(self, campaign_id: dm.CampaignID, enabled: bool) -> None:
        if enabled:
            self._auto_campaigns.add(campaign_id)
            self._ensure_running()
        else:
            self._auto_campaigns.discard(campaign_id)
            if not self._auto_campaigns:
                await self.stop()

    def _ensure_running(self) -> None:
        if self._task is None or self._task.done():
            self._stop_event = asyncio.Event()
            loop = asyncio.get_running_loop()
            self._task = loop.create_task(self._run_loop(), name="hexmarch-tick-loop")

    async def stop(self) -> None:
        task = self._task
        if task is None:
            return
        self._stop_event.set()
        await task
        self._task = None

    async def advance_now(self, campaign_id: dm.CampaignID, hours: int = 1) -> TickResult:
        """Advance one campaign by ``hours`` game hours, serialized with every other tick."""

        async with self._advance_lock:
            result = await asyncio.to_thread(self._advance_campaign_sync, campaign_id, hours)
        if not result.success:
            self._auto_campaigns.discard(campaign_id)
        return result

    async def _run_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
                    break
                except TimeoutError:
                    pass
                await self._run_cycle()
        finally:
            self._task = None

    async def _run_cycle(self) -> None:
        if not self._auto_campaigns:
            return
        ids = list(self._auto_campaigns)
        async with self._advance_lock:
            for campaign_id in ids:
                result = await asyncio.to_thread(
                    self._advance_campaign_sync, campaign_id, self._tick_hours
                )
                if not result.success:
                    self._auto_campaigns.discard(campaign_id)

    def _advance_campaign_sync(self, campaign_id: dm.CampaignID, hours: int) -> TickResult:
        try:
            campaign = self._repository.load(campaign_id)
        except FileNotFoundError:
            logger.warning(
                "campaign %s missing from repository; disabling autotick", int(campaign_id)
            )
            return TickResult(success=False, error=f"campaign {int(campaign_id)} not found")

        result = advance_time(campaign, timedelta(hours=hours), rules=self._rules)
        if not result.success:
            return result

        try:
            self._repository.save(campaign)
        except Exception as exc:
            logger.exception("failed to commit tick for campaign %d", int(campaign_id))
            return TickResult(success=False, error=f"commit failed: {exc}")

        self._deliver(campaign, result.notifications)
        return result

    def _deliver(self, campaign: dm.Campaign, notifications: list[Notification]) -> None:
        for notification in notifications:
            commander = campaign.commanders.get(notification.commander_id)
            if commander is None:
                continue
            try:
                accepted = self._channel.send_to_commander(commander, notification.text)
            except Exception:
                logger.warning(
                    "%s notification to commander %d failed",
                    notification.kind,
                    int(notification.commander_id),
                    exc_info=True,
                )
                continue
            if not accepted:
                logger.warning(
                    "%s notification to commander %d was rejected",
                    notification.kind,
                    int(notification.commander_id),
                )


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        rules: RulesConfig | None = None,
        channel: INotificationChannel | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.rules = rules if rules is not None else load_rules(self.settings.rules_path)
        self.repository = JsonCampaignRepository(self.settings.data_dir)
        self.lock = asyncio.Lock()
        self.campaigns = CampaignService(self.repository, rules=self.rules)
        self.ticks = TickManager(
            self.repository,
            rules=self.rules,
            channel=channel,
            base_interval_seconds=self.settings.tick_interval_seconds,
            tick_hours=self.settings.tick_hours,
            debug_multiplier=self.settings.debug_tick_speed_multiplier,
            lock=self.lock,
        )

    async def shutdown(self) -> None:
        await self.ticks.stop()


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
