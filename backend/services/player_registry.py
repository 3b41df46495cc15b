"""
Player registry and lobby lifecycle.

These functions mutate a GameSession in place and must be called while the
store's write lock is held (``snapshot_for`` only needs the read lock).
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

from models import GameSession, LifecycleState, Player
from services.board import flipped_slots, resolved_slots
from services.event_hub import EventHub
from services.exceptions import AlreadyRunning, DuplicateName, InvalidToken
from services.player_token import generate_player_token

logger = logging.getLogger(__name__)


class ReadyStatus(str, Enum):
    PENDING = "pending"
    STARTED = "started"


def require_player(session: GameSession, token: str | None) -> Player:
    player = session.get_player(token)
    if player is None:
        raise InvalidToken()
    return player


def join(
    session: GameSession,
    name: str,
    hub: EventHub,
    *,
    token_factory: Callable[[], str] = generate_player_token,
) -> str:
    if session.state is not LifecycleState.LOBBY:
        raise AlreadyRunning()
    if session.has_name(name):
        raise DuplicateName(name)

    token = token_factory()
    while token in session.players:
        token = token_factory()
    session.players[token] = Player(token=token, name=name)
    logger.info("[registry] %s joined game %s (%d players)", name, session.id, len(session.players))

    hub.broadcast_leaderboard(session)
    return token


def mark_ready(session: GameSession, token: str | None, hub: EventHub) -> ReadyStatus:
    """
    Mark a player ready and start the game once everyone is.

    Calling it again for a ready player just re-checks the condition. Once the
    game has left the lobby it reports STARTED without touching the state.
    """
    player = require_player(session, token)
    player.ready = True
    logger.info("[registry] %s is ready", player.name)

    if session.state is not LifecycleState.LOBBY:
        return ReadyStatus.STARTED

    if not all(p.ready for p in session.players.values()):
        hub.broadcast_leaderboard(session)
        return ReadyStatus.PENDING

    session.state = LifecycleState.RUNNING
    session.active_turn_index = 0
    for index, p in enumerate(session.roster()):
        p.turn = index == 0
    first = session.active_player()
    logger.info(
        "[registry] Game %s started with %d players; %s goes first",
        session.id,
        len(session.players),
        first.name if first else None,
    )

    hub.broadcast_leaderboard(session)
    hub.broadcast_turn(session)
    return ReadyStatus.STARTED


def snapshot_for(session: GameSession, token: str | None) -> dict[str, Any]:
    """Everything a (re)connecting client needs to redraw the game."""
    player = require_player(session, token)
    return {
        "id": session.id,
        "state": session.state.value,
        "ready": player.ready,
        "cards": len(session.board),
        "flipped": flipped_slots(session.board),
        "resolved": resolved_slots(session.board),
        "players": session.leaderboard(),
    }
