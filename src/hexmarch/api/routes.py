"""HTTP routes for the hexmarch API."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, Field

from hexmarch.api.runtime import ApiState
from hexmarch.domain import models as dm
from hexmarch.domain import news
from hexmarch.domain.enums import TravelerKind
from hexmarch.utils.hex_math import HexCoord

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


class CampaignSummary(BaseModel):
    id: int
    name: str
    current_time: datetime
    rows: int
    columns: int
    hex_count: int
    faction_count: int
    commander_count: int
    army_count: int
    dispatches_in_transit: int
    active_news_events: int


class CreateCampaignRequest(BaseModel):
    name: str = Field(min_length=1)
    rows: int = Field(ge=1, le=200)
    columns: int = Field(ge=1, le=200)
    start_time: datetime | None = None


class TickAdvanceRequest(BaseModel):
    hours: int = Field(default=1, ge=1, le=24 * 30)


class TickSummaryModel(BaseModel):
    messages_moved: int
    messages_delivered: int
    armies_moved: int
    commanders_moved: int
    armies_supplied: int
    weather_hexes_updated: int
    news_deliveries: int
    army_reports: int


class TickAdvanceResponse(BaseModel):
    new_time: datetime
    summary: TickSummaryModel


class TickScheduleRequest(BaseModel):
    enabled: bool
    interval_seconds: float | None = Field(default=None, gt=0.0)
    debug_multiplier: float | None = Field(default=None, gt=0.0)
    tick_hours: int | None = Field(default=None, ge=1, le=24)


class TickStatusResponse(BaseModel):
    enabled: bool
    interval_seconds: float
    debug_multiplier: float
    effective_interval_seconds: float
    tick_hours: int


class Coordinate(BaseModel):
    q: int
    r: int


class PathRequest(BaseModel):
    start: Coordinate
    end: Coordinate
    traveler: TravelerKind = TravelerKind.ARMY


class PathResponse(BaseModel):
    success: bool
    route: list[Coordinate]
    total_cost: float
    failure_reason: str | None


class ArmySummary(BaseModel):
    id: int
    name: str
    faction_id: int
    commander_id: int | None
    commander_name: str | None
    status: str
    q: int | None
    r: int | None
    path_length: int
    carried_supply: int
    daily_consumption: int
    column_length: float
    is_forced_march: bool
    is_night_march: bool


class NewsCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    origin: Coordinate
    faction_messages: dict[int, str] = Field(default_factory=dict)


class NewsUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    faction_messages: dict[int, str] | None = None


class NewsSummary(BaseModel):
    id: int
    title: str
    origin_q: int
    origin_r: int
    created_at: datetime
    is_active: bool
    faction_messages: dict[int, str]
    delivered_commander_ids: list[int]
    reachable_hexes: int


def _load_campaign(state: ApiState, campaign_id: int) -> dm.Campaign:
    try:
        return state.campaigns.get_campaign(dm.CampaignID(campaign_id))
    except FileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="campaign not found"
        ) from exc


def _faction_messages(payload: dict[int, str]) -> dict[dm.FactionID, str]:
    return {dm.FactionID(key): value for key, value in payload.items()}


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "rules_version": state.settings.rules_version,
        "tick_interval_seconds": state.ticks.interval_seconds,
        "debug_tick_multiplier": state.ticks.debug_multiplier,
    }


@router.get("/campaigns", response_model=list[CampaignSummary])
async def list_campaigns(state: ApiStateDep) -> list[CampaignSummary]:
    campaigns = state.campaigns.list_campaigns()
    return [CampaignSummary.model_validate(state.campaigns.to_summary_dict(c)) for c in campaigns]


@router.post(
    "/campaigns",
    response_model=CampaignSummary,
    status_code=status.HTTP_201_CREATED,
)
async def create_campaign(request: CreateCampaignRequest, state: ApiStateDep) -> CampaignSummary:
    async with state.lock:
        campaign = state.campaigns.create_campaign(
            request.name,
            rows=request.rows,
            columns=request.columns,
            start_time=request.start_time,
        )
    return CampaignSummary.model_validate(state.campaigns.to_summary_dict(campaign))


@router.get("/campaigns/{campaign_id}", response_model=CampaignSummary)
async def get_campaign(campaign_id: int, state: ApiStateDep) -> CampaignSummary:
    campaign = _load_campaign(state, campaign_id)
    return CampaignSummary.model_validate(state.campaigns.to_summary_dict(campaign))


@router.get("/campaigns/{campaign_id}/armies", response_model=list[ArmySummary])
async def list_armies(campaign_id: int, state: ApiStateDep) -> list[ArmySummary]:
    campaign = _load_campaign(state, campaign_id)
    return [ArmySummary.model_validate(item) for item in state.campaigns.list_armies(campaign)]


@router.post("/campaigns/{campaign_id}/time/advance", response_model=TickAdvanceResponse)
async def advance_time(
    campaign_id: int,
    request: TickAdvanceRequest,
    state: ApiStateDep,
) -> TickAdvanceResponse:
    _load_campaign(state, campaign_id)
    result = await state.ticks.advance_now(dm.CampaignID(campaign_id), hours=request.hours)
    if not result.success or result.new_time is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=result.error)
    return TickAdvanceResponse(
        new_time=result.new_time,
        summary=TickSummaryModel.model_validate(result.summary, from_attributes=True),
    )


@router.get("/campaigns/{campaign_id}/time/schedule", response_model=TickStatusResponse)
async def get_tick_schedule(campaign_id: int, state: ApiStateDep) -> TickStatusResponse:
    return _schedule_status(state, dm.CampaignID(campaign_id))


@router.post("/campaigns/{campaign_id}/time/schedule", response_model=TickStatusResponse)
async def update_tick_schedule(
    campaign_id: int,
    request: TickScheduleRequest,
    state: ApiStateDep,
) -> TickStatusResponse:
    _load_campaign(state, campaign_id)
    if request.interval_seconds is not None:
        state.ticks.set_base_interval(request.interval_seconds)
    if request.debug_multiplier is not None:
        state.ticks.set_debug_multiplier(request.debug_multiplier)
    if request.tick_hours is not None:
        state.ticks.set_tick_hours(request.tick_hours)
    campaign_key = dm.CampaignID(campaign_id)
    await state.ticks.set_enabled(campaign_key, request.enabled)
    return _schedule_status(state, campaign_key)


def _schedule_status(state: ApiState, campaign_id: dm.CampaignID) -> TickStatusResponse:
    return TickStatusResponse(
        enabled=state.ticks.is_enabled(campaign_id),
        interval_seconds=state.ticks.base_interval_seconds,
        debug_multiplier=state.ticks.debug_multiplier,
        effective_interval_seconds=state.ticks.interval_seconds,
        tick_hours=state.ticks.tick_hours,
    )


@router.post("/campaigns/{campaign_id}/paths", response_model=PathResponse)
async def plan_path(campaign_id: int, request: PathRequest, state: ApiStateDep) -> PathResponse:
    campaign = _load_campaign(state, campaign_id)
    result = state.campaigns.find_path(
        campaign,
        HexCoord(q=request.start.q, r=request.start.r),
        HexCoord(q=request.end.q, r=request.end.r),
        request.traveler,
    )
    return PathResponse(
        success=result.success,
        route=[Coordinate(q=coord.q, r=coord.r) for coord in result.route],
        total_cost=result.total_cost,
        failure_reason=result.failure_reason,
    )


@router.get("/campaigns/{campaign_id}/news", response_model=list[NewsSummary])
async def list_news(
    campaign_id: int, state: ApiStateDep, active_only: bool = False
) -> list[NewsSummary]:
    campaign = _load_campaign(state, campaign_id)
    events = news.list_events(campaign, active_only=active_only)
    return [NewsSummary.model_validate(state.campaigns.to_news_dict(event)) for event in events]


@router.post(
    "/campaigns/{campaign_id}/news",
    response_model=NewsSummary,
    status_code=status.HTTP_201_CREATED,
)
async def create_news(
    campaign_id: int, request: NewsCreateRequest, state: ApiStateDep
) -> NewsSummary:
    _load_campaign(state, campaign_id)
    try:
        async with state.lock:
            event = state.campaigns.create_news(
                dm.CampaignID(campaign_id),
                request.title,
                HexCoord(q=request.origin.q, r=request.origin.r),
                _faction_messages(request.faction_messages),
            )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return NewsSummary.model_validate(state.campaigns.to_news_dict(event))


@router.patch("/campaigns/{campaign_id}/news/{event_id}", response_model=NewsSummary)
async def update_news(
    campaign_id: int, event_id: int, request: NewsUpdateRequest, state: ApiStateDep
) -> NewsSummary:
    _load_campaign(state, campaign_id)
    messages = (
        _faction_messages(request.faction_messages)
        if request.faction_messages is not None
        else None
    )
    async with state.lock:
        event = state.campaigns.update_news(
            dm.CampaignID(campaign_id),
            dm.NewsEventID(event_id),
            title=request.title,
            faction_messages=messages,
        )
    return NewsSummary.model_validate(state.campaigns.to_news_dict(event))


@router.post("/campaigns/{campaign_id}/news/{event_id}/deactivate", response_model=NewsSummary)
async def deactivate_news(campaign_id: int, event_id: int, state: ApiStateDep) -> NewsSummary:
    return await _set_news_active(state, campaign_id, event_id, False)


@router.post("/campaigns/{campaign_id}/news/{event_id}/reactivate", response_model=NewsSummary)
async def reactivate_news(campaign_id: int, event_id: int, state: ApiStateDep) -> NewsSummary:
    return await _set_news_active(state, campaign_id, event_id, True)


async def _set_news_active(
    state: ApiState, campaign_id: int, event_id: int, active: bool
) -> NewsSummary:
    _load_campaign(state, campaign_id)
    async with state.lock:
        event = state.campaigns.set_news_active(
            dm.CampaignID(campaign_id), dm.NewsEventID(event_id), active
        )
    return NewsSummary.model_validate(state.campaigns.to_news_dict(event))


@router.delete(
    "/campaigns/{campaign_id}/news/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_news(campaign_id: int, event_id: int, state: ApiStateDep) -> Response:
    _load_campaign(state, campaign_id)
    async with state.lock:
        state.campaigns.delete_news(dm.CampaignID(campaign_id), dm.NewsEventID(event_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
