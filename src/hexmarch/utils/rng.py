"""Deterministic random number generation for hexmarch.

All randomness is seeded from campaign state (campaign_id, day, part, context)
so that:
- Reproducibility: the same seed always produces the same result
- Bug reproduction: a tick can be replayed exactly
- Audit trail: every draw reports the seed it used

Examples:
    >>> seed = generate_seed(campaign_id=1, day=738000, part="weather", context="hex:0:0")
    >>> result = weighted_choice(seed, [("Clear", 0.4), ("Rain", 0.6)])
    >>> result["choice"] in ("Clear", "Rain")
    True
"""

from __future__ import annotations

import hashlib
import random
from collections.abc import Sequence
from typing import Any


def generate_seed(campaign_id: int, day: int, part: str, context: str) -> str:
    """Generate a deterministic seed from campaign state.

    Format: "campaign_id:day:part:context"

    Args:
        campaign_id: Campaign identifier
        day: Day number (for calendar dates, ``date.toordinal()``)
        part: Subsystem performing the draw (e.g. 'weather')
        context: What the draw is for (e.g. 'hex:3:-1')

    Examples:
        >>> generate_seed(1, 42, "weather", "hex:0:0")
        '1:42:weather:hex:0:0'

    Raises:
        ValueError: If campaign_id or day is negative
    """
    if campaign_id < 0:
        raise ValueError(f"campaign_id must be non-negative, got {campaign_id}")
    if day < 0:
        raise ValueError(f"day must be non-negative, got {day}")

    return f"{campaign_id}:{day}:{part}:{context}"


def _seed_to_int(seed: str) -> int:
    """Convert seed string to a stable 64-bit integer for random.Random()."""
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=False)


def weighted_choice(seed: str, weighted: Sequence[tuple[Any, float]]) -> dict[str, Any]:
    """Select one entry from ``(option, weight)`` pairs with a deterministic seed.

    The weights are summed and a uniform roll in ``[0, total)`` is drawn; the
    first entry whose cumulative weight exceeds the roll wins. Floating point
    rounding that leaves the roll past every bucket falls back to the last
    entry.

    Returns:
        Dictionary containing:
            - choice: The selected option
            - index: Index of the selected entry
            - roll: The uniform draw
            - total: Sum of all weights
            - seed: The seed used

    Raises:
        ValueError: If no entries are given or a weight is negative
    """
    if not weighted:
        raise ValueError("weighted options cannot be empty")
    if any(weight < 0 for _, weight in weighted):
        raise ValueError("weights must be non-negative")

    total = float(sum(weight for _, weight in weighted))
    rng = random.Random(_seed_to_int(seed))
    roll = rng.random() * total

    index = len(weighted) - 1
    cumulative = 0.0
    for position, (_, weight) in enumerate(weighted):
        cumulative += weight
        if roll < cumulative:
            index = position
            break

    return {
        "choice": weighted[index][0],
        "index": index,
        "roll": roll,
        "total": total,
        "seed": seed,
    }
