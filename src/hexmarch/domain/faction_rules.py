"""Per-faction rule lookups frozen once per tick."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from hexmarch.domain.models import Faction, FactionID


class FactionRuleKeys:
    """Names of the per-faction rules read by the simulation."""

    OWN_TERRITORY_MESSENGER_MULTIPLIER = "own_territory_messenger_multiplier"


@dataclass(frozen=True, slots=True)
class FactionRuleSnapshot:
    """Read-only copy of every faction's rule overrides.

    Built before any movement in a tick so later lookups never depend on
    mutable shared state.
    """

    values: Mapping[FactionID, Mapping[str, float]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_factions(cls, factions: Iterable[Faction]) -> FactionRuleSnapshot:
        return cls(
            MappingProxyType(
                {faction.id: MappingProxyType(dict(faction.rules)) for faction in factions}
            )
        )

    def get(self, faction_id: FactionID | None, key: str, default: float) -> float:
        """Return a faction's rule value; unset or non-positive values yield ``default``."""

        if faction_id is None:
            return default
        value = self.values.get(faction_id, {}).get(key)
        if value is None or value <= 0:
            return default
        return value
