"""Protocol-based interfaces for hexmarch collaborators.

This module exports the protocols the simulation core depends on, providing
a clear contract for implementations and enabling substitution in tests.
"""

from hexmarch.interfaces.notifications import INotificationChannel

__all__ = ["INotificationChannel"]
