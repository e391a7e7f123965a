"""Enumerations for the hexmarch domain."""

from __future__ import annotations

from enum import StrEnum


class TravelerKind(StrEnum):
    """Classes of path-following entities; each has its own path cost profile."""

    DISPATCH = "dispatch"
    COMMANDER = "commander"
    ARMY = "army"
    SUPPLY = "supply"


class UnitCategory(StrEnum):
    """Brigade categories carrying distinct supply and column statistics."""

    INFANTRY = "infantry"
    SKIRMISHERS = "skirmishers"
    CAVALRY = "cavalry"


class ArmyStatus(StrEnum):
    """Coarse army state shown in reports."""

    ACTIVE = "active"
    RESTING = "resting"
    GARRISON = "garrison"
