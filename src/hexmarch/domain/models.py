"""Dataclasses describing every hexmarch game entity.

The rules layer operates purely on these in-memory types; persistence
adapters (see :mod:`hexmarch.repository`) translate them to and from storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import NewType

from hexmarch.domain.enums import UnitCategory
from hexmarch.utils.hex_math import HexCoord

# --- Strongly typed identifiers -------------------------------------------------

CampaignID = NewType("CampaignID", int)
TerrainID = NewType("TerrainID", int)
WeatherID = NewType("WeatherID", int)
FactionID = NewType("FactionID", int)
CommanderID = NewType("CommanderID", int)
ArmyID = NewType("ArmyID", int)
BrigadeID = NewType("BrigadeID", int)
DispatchID = NewType("DispatchID", int)
NewsEventID = NewType("NewsEventID", int)

DEFAULT_START_TIME = datetime(1325, 3, 1, 8, 0)


# --- Catalogs -------------------------------------------------------------------


@dataclass(slots=True)
class TerrainType:
    """Terrain catalog entry."""

    id: TerrainID
    name: str
    is_water: bool = False


@dataclass(slots=True)
class WeatherType:
    """Weather catalog entry; transitions refer to weather by ``name``."""

    id: WeatherID
    name: str


# --- Map ------------------------------------------------------------------------


@dataclass(slots=True)
class MapHex:
    """Map hex tile.

    ``road_directions`` and ``river_directions`` hold direction indices
    (0-5, see :data:`hexmarch.utils.hex_math.NEIGHBOR_DIRECTIONS`) of the
    edges that carry a road or a river.
    """

    q: int
    r: int
    terrain_id: TerrainID
    road_directions: set[int] = field(default_factory=set)
    river_directions: set[int] = field(default_factory=set)
    weather_id: WeatherID | None = None
    controlling_faction_id: FactionID | None = None

    @property
    def coord(self) -> HexCoord:
        return HexCoord(q=self.q, r=self.r)


@dataclass(slots=True)
class CampaignMap:
    """Hex tiles of a campaign; ``rows``/``columns`` describe the offset layout."""

    rows: int = 0
    columns: int = 0
    hexes: list[MapHex] = field(default_factory=list)


# --- Factions and forces ----------------------------------------------------------


@dataclass(slots=True)
class Faction:
    """Faction controlling territory and commanders.

    ``rules`` holds numeric per-faction rule overrides keyed by rule name.
    """

    id: FactionID
    name: str
    rules: dict[str, float] = field(default_factory=dict)


@dataclass(slots=True)
class Brigade:
    """A body of troops of a single category inside an army."""

    id: BrigadeID
    name: str
    category: UnitCategory
    number: int


@dataclass(slots=True)
class Army:
    """Army on the campaign map."""

    id: ArmyID
    name: str
    faction_id: FactionID
    commander_id: CommanderID | None = None
    coord: HexCoord | None = None
    target: HexCoord | None = None
    path: list[HexCoord] = field(default_factory=list)
    time_in_transit: float = 0.0
    brigades: list[Brigade] = field(default_factory=list)
    noncombatants: int = 0
    wagons: int = 0
    carried_supply: int = 0
    days_without_supply: int = 0
    morale: int = 9
    is_forced_march: bool = False
    forced_march_hours: float = 0.0
    is_night_march: bool = False
    is_garrison: bool = False
    is_resting: bool = False


@dataclass(slots=True)
class Commander:
    """Commander; following an army suppresses the commander's own path."""

    id: CommanderID
    name: str
    faction_id: FactionID
    coord: HexCoord | None = None
    target: HexCoord | None = None
    path: list[HexCoord] = field(default_factory=list)
    time_in_transit: float = 0.0
    following_army_id: ArmyID | None = None


@dataclass(slots=True)
class Dispatch:
    """Message carried by a courier along a path towards its recipient."""

    id: DispatchID
    content: str
    sender_commander_id: CommanderID | None = None
    recipient_commander_id: CommanderID | None = None
    sender_faction_id: FactionID | None = None
    coord: HexCoord | None = None
    target: HexCoord | None = None
    path: list[HexCoord] = field(default_factory=list)
    time_in_transit: float = 0.0
    sent_at: datetime | None = None
    delivered: bool = False
    delivered_at: datetime | None = None


# --- News -----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HexArrival:
    """Hours after an event's creation at which its news reaches a hex."""

    q: int
    r: int
    hours: float

    @property
    def coord(self) -> HexCoord:
        return HexCoord(q=self.q, r=self.r)


@dataclass(slots=True)
class NewsEvent:
    """Referee-created news spreading outward from ``origin``.

    ``arrivals`` is computed once at creation and never recomputed.
    """

    id: NewsEventID
    title: str
    origin: HexCoord
    created_at: datetime
    faction_messages: dict[FactionID, str] = field(default_factory=dict)
    arrivals: tuple[HexArrival, ...] = ()
    delivered_commander_ids: set[CommanderID] = field(default_factory=set)
    is_active: bool = True


# --- Aggregate ------------------------------------------------------------------


@dataclass(slots=True)
class GameClock:
    """Current game time plus the hour-of-day gates of scheduled subsystems."""

    current_time: datetime = DEFAULT_START_TIME
    supply_usage_hour: int = 21
    weather_update_hour: int = 0
    army_report_hour: int = 6


@dataclass(slots=True)
class Campaign:
    """Root aggregate representing an entire campaign."""

    id: CampaignID
    name: str
    clock: GameClock = field(default_factory=GameClock)
    map: CampaignMap = field(default_factory=CampaignMap)
    terrain_types: dict[TerrainID, TerrainType] = field(default_factory=dict)
    weather_types: dict[WeatherID, WeatherType] = field(default_factory=dict)
    factions: dict[FactionID, Faction] = field(default_factory=dict)
    commanders: dict[CommanderID, Commander] = field(default_factory=dict)
    armies: dict[ArmyID, Army] = field(default_factory=dict)
    dispatches: dict[DispatchID, Dispatch] = field(default_factory=dict)
    news_events: dict[NewsEventID, NewsEvent] = field(default_factory=dict)
    weather_update_dates: set[date] = field(default_factory=set)
