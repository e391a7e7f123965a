"""hexmarch: turn-based simulation core for a hex-grid wargame."""

__version__ = "0.1.0"
