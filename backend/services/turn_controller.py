"""
Card pick resolution and turn rotation.

A round is two picks by the player holding the turn. The first pick flips a
card and leaves it pending; the second pick either matches it (both cards are
removed, the player scores and keeps the turn) or misses (both go face down and
the turn moves to the next player in join order).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from models import GameSession, LifecycleState, Player
from services import board
from services.event_hub import FLIP, GAME_OVER, HIDE, EventHub
from services.exceptions import AlreadyFlipped, InvalidCard, InvalidToken, NotYetRunning, NotYourTurn

logger = logging.getLogger(__name__)


class PickResult(str, Enum):
    AWAITING_SECOND_PICK = "awaiting_second_pick"
    MATCH = "match"
    MISMATCH = "mismatch"


@dataclass
class PickOutcome:
    slot: int
    image_id: str
    result: PickResult
    turn: bool              # the picking player still holds the turn
    finished: bool = False


def next_turn_index(current: int, player_count: int) -> int:
    return (current + 1) % player_count


def pick(session: GameSession, token: str | None, slot: int, hub: EventHub) -> PickOutcome:
    if session.state is not LifecycleState.RUNNING:
        raise NotYetRunning()
    player = session.get_player(token)
    if player is None:
        raise InvalidToken()
    if not player.turn:
        raise NotYourTurn()
    if not 0 <= slot < len(session.board):
        raise InvalidCard(slot)
    card = session.board[slot]
    if card.flipped or card.resolved:
        raise AlreadyFlipped(slot)

    pending_slot = board.pending_pick(session.board)

    card.flipped = True
    logger.info("[turns] %s picked %d", player.name, slot)
    hub.broadcast(FLIP, {"slot": slot, "image": card.image_id}, session.players.values())

    if pending_slot is None:
        return PickOutcome(slot=slot, image_id=card.image_id, result=PickResult.AWAITING_SECOND_PICK, turn=True)

    pending = session.board[pending_slot]
    if pending.image_id == card.image_id:
        outcome = _resolve_match(session, player, slot, pending_slot, hub)
    else:
        outcome = _resolve_mismatch(session, player, slot, hub)

    hub.broadcast_leaderboard(session)
    return outcome


def _resolve_match(
    session: GameSession, player: Player, slot: int, pending_slot: int, hub: EventHub
) -> PickOutcome:
    player.points += 1
    for resolved in (pending_slot, slot):
        matched = session.board[resolved]
        matched.resolved = True
        matched.flipped = False
        hub.broadcast(HIDE, {"slot": resolved}, session.players.values())
    logger.info("[turns] %s matched %d and %d (%d points)", player.name, pending_slot, slot, player.points)

    finished = board.all_resolved(session.board)
    if finished:
        session.state = LifecycleState.FINISHED
        for p in session.players.values():
            p.turn = False
        logger.info("[turns] Game %s finished", session.id)
        hub.broadcast(GAME_OVER, {"state": session.state.value}, session.players.values())

    return PickOutcome(
        slot=slot,
        image_id=session.board[slot].image_id,
        result=PickResult.MATCH,
        turn=player.turn,
        finished=finished,
    )


def _resolve_mismatch(session: GameSession, player: Player, slot: int, hub: EventHub) -> PickOutcome:
    player.turn = False
    board.hide_unresolved(session.board)

    roster = session.roster()
    session.active_turn_index = next_turn_index(session.active_turn_index, len(roster))
    next_player = roster[session.active_turn_index]
    next_player.turn = True
    logger.info("[turns] %s missed; turn passes to %s", player.name, next_player.name)
    hub.broadcast_turn(session)

    return PickOutcome(
        slot=slot,
        image_id=session.board[slot].image_id,
        result=PickResult.MISMATCH,
        turn=player.turn,
    )
