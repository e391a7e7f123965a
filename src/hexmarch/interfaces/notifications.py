"""Notification Channel Protocol Interface.

This module defines the protocol for the outward channel that delivers
text to a commander's player (chat bot, mail relay, ...).
"""

from typing import Protocol

from hexmarch.domain.models import Commander


class INotificationChannel(Protocol):
    """Protocol defining the interface for delivering text to commanders.

    Delivery is best-effort: callers log failures and carry on.
    """

    def send_to_commander(self, commander: Commander, text: str) -> bool:
        """Send ``text`` to the commander's channel.

        Args:
            commander: Recipient commander
            text: Message body

        Returns:
            True if the channel accepted the message
        """
        ...
