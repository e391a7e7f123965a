"""Tests for the JSON campaign repository."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from hexmarch.domain import models as dm
from hexmarch.domain.enums import UnitCategory
from hexmarch.domain.grid import HexGrid, build_rectangular_map
from hexmarch.repository import JsonCampaignRepository
from hexmarch.utils.hex_math import HexCoord


def _campaign(campaign_id: int = 1) -> dm.Campaign:
    campaign = dm.Campaign(
        id=dm.CampaignID(campaign_id),
        name="Test",
        map=build_rectangular_map(2, 2, dm.TerrainID(1)),
        terrain_types={dm.TerrainID(1): dm.TerrainType(id=dm.TerrainID(1), name="Grassland")},
    )
    HexGrid.from_map(campaign.map, campaign.terrain_types).set_road(HexCoord(q=0, r=0), 0)
    campaign.factions[dm.FactionID(1)] = dm.Faction(
        id=dm.FactionID(1), name="Empire", rules={"own_territory_messenger_multiplier": 1.5}
    )
    campaign.armies[dm.ArmyID(1)] = dm.Army(
        id=dm.ArmyID(1),
        name="First Army",
        faction_id=dm.FactionID(1),
        coord=HexCoord(q=0, r=0),
        path=[HexCoord(q=1, r=0)],
        brigades=[
            dm.Brigade(id=dm.BrigadeID(1), name="Horse", category=UnitCategory.CAVALRY, number=50)
        ],
    )
    campaign.news_events[dm.NewsEventID(1)] = dm.NewsEvent(
        id=dm.NewsEventID(1),
        title="Rumor",
        origin=HexCoord(q=0, r=0),
        created_at=datetime(1325, 3, 1, 8),
        faction_messages={dm.FactionID(1): "msg"},
        arrivals=(dm.HexArrival(q=0, r=0, hours=0.0), dm.HexArrival(q=1, r=0, hours=12.0)),
        delivered_commander_ids={dm.CommanderID(3)},
    )
    campaign.weather_update_dates.add(date(1325, 3, 1))
    return campaign


def test_save_and_load_campaign(tmp_path):
    repo = JsonCampaignRepository(tmp_path)
    campaign = _campaign()

    path = repo.save(campaign)
    assert path.exists()

    loaded = repo.load(dm.CampaignID(1))
    assert loaded == campaign
    assert loaded.map.hexes[0].road_directions == {0}
    assert loaded.armies[dm.ArmyID(1)].path == [HexCoord(q=1, r=0)]


def test_list_and_delete(tmp_path):
    repo = JsonCampaignRepository(tmp_path)
    repo.save(_campaign(1))
    repo.save(_campaign(2))

    assert repo.list_campaigns() == [dm.CampaignID(1), dm.CampaignID(2)]

    repo.delete(dm.CampaignID(1))
    assert repo.list_campaigns() == [dm.CampaignID(2)]
    assert not repo.exists(dm.CampaignID(1))


def test_load_missing_campaign_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        JsonCampaignRepository(tmp_path).load(dm.CampaignID(7))


def test_failed_save_keeps_previous_snapshot(tmp_path, monkeypatch):
    repo = JsonCampaignRepository(tmp_path)
    campaign = _campaign()
    repo.save(campaign)

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("hexmarch.repository.json_store.os.replace", broken_replace)
    campaign.name = "Renamed"
    with pytest.raises(OSError):
        repo.save(campaign)

    assert repo.load(dm.CampaignID(1)).name == "Test"
    assert [p.name for p in tmp_path.iterdir()] == ["campaign_1.json"]
