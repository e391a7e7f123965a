"""Outbound messages produced by a tick and delivered after it commits."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from hexmarch.domain.models import CommanderID


class NotificationKind(StrEnum):
    NEWS = "news"
    DISPATCH = "dispatch"
    ARMY_REPORT = "army_report"


@dataclass(frozen=True, slots=True)
class Notification:
    """Text addressed to one commander's channel."""

    commander_id: CommanderID
    text: str
    kind: NotificationKind
