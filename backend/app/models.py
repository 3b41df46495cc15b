from pydantic import BaseModel

from models import LifecycleState
from services.player_registry import ReadyStatus
from services.turn_controller import PickResult


class MessageResponse(BaseModel):
    detail: str


class ErrorResponse(BaseModel):
    error: str
    detail: str


class PingResponse(BaseModel):
    id: str
    state: LifecycleState


class JoinResponse(BaseModel):
    token: str


class ReadyResponse(BaseModel):
    status: ReadyStatus


class PickResponse(BaseModel):
    slot: int
    img_path: str
    result: PickResult
    turn: bool
    finished: bool = False


class FlippedCard(BaseModel):
    slot: int
    image: str


class LeaderboardEntry(BaseModel):
    name: str
    points: int
    ready: bool
    turn: bool


class InitStateResponse(BaseModel):
    """What a client needs to redraw the board after (re)connecting."""

    id: str
    state: LifecycleState
    ready: bool
    cards: int
    flipped: list[FlippedCard]
    resolved: list[int]
    players: list[LeaderboardEntry]
