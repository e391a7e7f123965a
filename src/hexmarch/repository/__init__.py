"""Persistence adapters for hexmarch campaigns."""

from hexmarch.repository.json_store import JsonCampaignRepository

__all__ = ["JsonCampaignRepository"]
