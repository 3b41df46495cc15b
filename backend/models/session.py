from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from .card import Card
from .player import Player


class LifecycleState(str, Enum):
    LOBBY = "lobby"
    RUNNING = "running"
    FINISHED = "finished"


@dataclass
class GameSession:
    id: str
    board: list[Card]
    players: dict[str, Player] = field(default_factory=dict)   # token -> Player, insertion ordered
    state: LifecycleState = LifecycleState.LOBBY
    active_turn_index: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def roster(self) -> list[Player]:
        """Players in join order; turn rotation indexes into this list."""
        return list(self.players.values())

    def get_player(self, token: str | None) -> Player | None:
        if token is None:
            return None
        return self.players.get(token)

    def has_name(self, name: str) -> bool:
        return any(p.name == name for p in self.players.values())

    def active_player(self) -> Player | None:
        roster = self.roster()
        if not roster or not 0 <= self.active_turn_index < len(roster):
            return None
        return roster[self.active_turn_index]

    def leaderboard(self) -> list[dict[str, object]]:
        return [p.leaderboard_entry() for p in self.players.values()]
