"""Declarative rule configuration for the simulation core."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from hexmarch.domain.enums import TravelerKind, UnitCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MovementRules:
    """Edge costs, march window and army speed modifiers."""

    road_cost: float = 6.0
    off_road_cost: float = 12.0
    army_movement_multiplier: float = 1.5
    supply_movement_multiplier: float = 2.0
    march_day_start_hour: int = 8
    march_day_end_hour: int = 20
    long_column_threshold: float = 6.0
    long_column_speed_cap: float = 0.5
    forced_march_multiplier: float = 2.0
    river_fording_cost_per_column_unit: float = 6.0


@dataclass(frozen=True, slots=True)
class MovementRates:
    """Base movement rate (cost units per hour) for each traveler kind."""

    army: float = 1.0
    messenger: float = 2.0
    commander: float = 2.0

    def for_kind(self, kind: TravelerKind) -> float:
        if kind is TravelerKind.DISPATCH:
            return self.messenger
        if kind is TravelerKind.COMMANDER:
            return self.commander
        return self.army


@dataclass(frozen=True, slots=True)
class UnitStats:
    """Per-man statistics for one brigade category."""

    supply_consumption: int = 1
    combat_power: int = 1
    men_per_column_unit: int = 5000
    counts_for_fording: bool = True


def _default_unit_stats() -> dict[UnitCategory, UnitStats]:
    return {
        UnitCategory.INFANTRY: UnitStats(),
        UnitCategory.SKIRMISHERS: UnitStats(),
        UnitCategory.CAVALRY: UnitStats(
            supply_consumption=10,
            combat_power=2,
            men_per_column_unit=2000,
            counts_for_fording=False,
        ),
    }


@dataclass(frozen=True, slots=True)
class SupplyRules:
    """Daily consumption of the army train."""

    noncombatant_consumption: int = 1
    wagon_consumption: int = 10


@dataclass(frozen=True, slots=True)
class NewsRules:
    """Hours for news to cross one hex."""

    off_road_hours_per_hex: float = 24.0
    road_hours_per_hex: float = 12.0


def _default_transitions() -> dict[str, dict[str, float]]:
    return {
        "Clear": {"Clear": 0.40, "Overcast": 0.25, "Rain": 0.20, "Fog": 0.15},
        "Overcast": {"Overcast": 0.40, "Rain": 0.25, "Fog": 0.20, "Clear": 0.15},
        "Rain": {"Fog": 0.40, "Clear": 0.25, "Overcast": 0.20, "Rain": 0.15},
        "Fog": {"Fog": 0.40, "Clear": 0.25, "Overcast": 0.20, "Rain": 0.15},
    }


@dataclass(frozen=True, slots=True)
class WeatherRules:
    """Daily weather transition table keyed by current weather name."""

    transitions: dict[str, dict[str, float]] = field(default_factory=_default_transitions)
    fallback_weather: str = "Clear"

    def row_for(self, weather_name: str) -> dict[str, float] | None:
        """Return the transition row for ``weather_name`` (case-insensitive)."""

        row = self.transitions.get(weather_name)
        if row is not None:
            return row
        lowered = weather_name.lower()
        for name, candidates in self.transitions.items():
            if name.lower() == lowered:
                return candidates
        return None


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container for all subsystems."""

    movement: MovementRules = MovementRules()
    movement_rates: MovementRates = MovementRates()
    unit_stats: dict[UnitCategory, UnitStats] = field(default_factory=_default_unit_stats)
    supply: SupplyRules = SupplyRules()
    news: NewsRules = NewsRules()
    weather: WeatherRules = field(default_factory=WeatherRules)

    def stats_for(self, category: UnitCategory) -> UnitStats:
        stats = self.unit_stats.get(category)
        if stats is None:
            return _DEFAULT_UNIT_STATS.get(category, UnitStats())
        return stats


_DEFAULT_UNIT_STATS = _default_unit_stats()

DEFAULT_RULES = RulesConfig()

_RULES_ADAPTER: TypeAdapter[RulesConfig] = TypeAdapter(RulesConfig)
_DOCUMENT_ADAPTER: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])


def load_rules(path: Path | None) -> RulesConfig:
    """Load rules from a JSON document, falling back to defaults.

    Sections and fields missing from the document keep their default
    values. Unit stats overrides are merged field by field over the
    defaults of their own category. A missing file yields
    :data:`DEFAULT_RULES`; a malformed one raises ``pydantic.ValidationError``.
    """

    if path is None or not path.exists():
        if path is not None:
            logger.info("rules file %s not found; using defaults", path)
        return DEFAULT_RULES
    document = _DOCUMENT_ADAPTER.validate_json(path.read_bytes())
    overrides = document.get("unit_stats")
    if isinstance(overrides, dict):
        document["unit_stats"] = _merge_unit_stats(overrides)
    return _RULES_ADAPTER.validate_python(document)


def _merge_unit_stats(overrides: dict[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = {
        str(category): asdict(stats) for category, stats in _DEFAULT_UNIT_STATS.items()
    }
    for category, values in overrides.items():
        base = merged.get(category)
        if isinstance(base, dict) and isinstance(values, dict):
            merged[category] = {**base, **values}
        else:
            merged[category] = values
    return merged
