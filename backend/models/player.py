from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from services.event_hub import Subscription


@dataclass
class Player:
    token: str                               # bearer credential, never logged in full
    name: str
    points: int = 0
    turn: bool = False
    ready: bool = False
    subscription: Subscription | None = None  # live stream, may go stale at any time

    def leaderboard_entry(self) -> dict[str, object]:
        return {
            "name": self.name,
            "points": self.points,
            "ready": self.ready,
            "turn": self.turn,
        }
