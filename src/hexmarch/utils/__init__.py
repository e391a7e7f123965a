"""Utility functions for the hexmarch game system."""

from hexmarch.utils.rng import (
    generate_seed,
    weighted_choice,
)

__all__ = [
    "generate_seed",
    "weighted_choice",
]
