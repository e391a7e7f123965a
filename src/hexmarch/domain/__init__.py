"""Domain model and rules for hexmarch.

This package hosts the in-memory simulation core. It exposes:

* Dataclasses describing every game entity (see :mod:`models`).
* Enumerations and strongly-typed identifiers used across the rules layer.
* Rule configuration objects (see :mod:`rules_config`).
* Pure rule functions: pathfinding, movement, supply, weather, news and the
  time-advance orchestrator (see :mod:`tick`).

Everything operates on plain dataclasses and is persisted through a thin
repository adapter.
"""

from . import (
    enums,
    faction_rules,
    grid,
    models,
    movement,
    news,
    notifications,
    pathfinding,
    reports,
    rules_config,
    supply,
    tick,
    weather,
)

__all__ = [
    "enums",
    "faction_rules",
    "grid",
    "models",
    "movement",
    "news",
    "notifications",
    "pathfinding",
    "reports",
    "rules_config",
    "supply",
    "tick",
    "weather",
]
