from .card import Card
from .icons import IMAGE_LINKS
from .player import Player
from .session import GameSession, LifecycleState

__all__ = [
    "Card",
    "Player",
    "GameSession",
    "LifecycleState",
    "IMAGE_LINKS",
]
