"""
Process-wide holder of the (single) game session.

Every request goes through a SessionStore. Queries take the shared reader
lock, mutations take the exclusive writer lock for the whole operation,
including the event broadcasts they trigger. Broadcasting only ever does
``put_nowait`` on bounded queues, so the writer lock is never held across a
wait on a client.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import aiorwlock

from models import Card, GameSession, LifecycleState
from services import player_registry, turn_controller
from services.board import DEFAULT_PAIRS, build_board
from services.event_hub import DEFAULT_QUEUE_SIZE, STATE, EventHub, Subscription
from services.exceptions import AlreadyExists, InvalidToken, NoGameExists, Unauthorized
from services.player_registry import ReadyStatus
from services.player_token import redact
from services.turn_controller import PickOutcome

logger = logging.getLogger(__name__)


@dataclass
class StatusReport:
    session_id: str
    state: LifecycleState
    revoked: bool = False   # a token was presented and is not in the roster


class SessionStore:
    def __init__(
        self,
        admin_key: str,
        *,
        board_factory: Callable[[], list[Card]] | None = None,
        board_pairs: int = DEFAULT_PAIRS,
        queue_size: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        self.admin_key = admin_key
        self.current_session: GameSession | None = None
        self.hub = EventHub(queue_size=queue_size)
        self._board_factory = board_factory or (lambda: build_board(board_pairs))
        self._lock = aiorwlock.RWLock()

    def _key_matches(self, key: str | None) -> bool:
        if key is None:
            return False
        return secrets.compare_digest(key.encode(), self.admin_key.encode())

    def _require_admin(self, key: str | None) -> None:
        if not self._key_matches(key):
            logger.warning("[store] Rejected master key")
            raise Unauthorized()

    def _session_for_token(self) -> GameSession:
        # Tokens from a deleted session are simply unknown.
        if self.current_session is None:
            raise InvalidToken()
        return self.current_session

    # ---- admin ----

    async def check_key(self, key: str | None) -> bool:
        async with self._lock.reader_lock:
            return self._key_matches(key)

    async def create(self, admin_key: str | None, session_id: str) -> GameSession:
        async with self._lock.writer_lock:
            self._require_admin(admin_key)
            if self.current_session is not None:
                raise AlreadyExists()
            session = GameSession(id=session_id, board=self._board_factory())
            self.current_session = session
            logger.info("[store] Created game with id=%s (%d cards)", session_id, len(session.board))
            return session

    async def delete(self, admin_key: str | None) -> None:
        async with self._lock.writer_lock:
            self._require_admin(admin_key)
            session = self.current_session
            if session is None:
                logger.info("[store] Delete requested with no game; nothing to do")
                return
            self.hub.close_all(session.players.values())
            self.current_session = None
            logger.info("[store] Deleted game id=%s", session.id)

    # ---- queries ----

    async def status(self, token: str | None = None) -> StatusReport:
        async with self._lock.reader_lock:
            session = self.current_session
            if session is None:
                raise NoGameExists()
            revoked = token is not None and session.get_player(token) is None
            if revoked:
                logger.info("[store] Revoked token presented: %s", redact(token))
            return StatusReport(session_id=session.id, state=session.state, revoked=revoked)

    async def snapshot(self, token: str | None) -> dict[str, Any]:
        async with self._lock.reader_lock:
            return player_registry.snapshot_for(self._session_for_token(), token)

    # ---- players and gameplay ----

    async def join(self, name: str, session_id: str | None = None) -> str:
        async with self._lock.writer_lock:
            session = self.current_session
            if session is None or (session_id is not None and session_id != session.id):
                raise NoGameExists()
            return player_registry.join(session, name, self.hub)

    async def mark_ready(self, token: str | None) -> ReadyStatus:
        async with self._lock.writer_lock:
            return player_registry.mark_ready(self._session_for_token(), token, self.hub)

    async def pick(self, token: str | None, slot: int) -> PickOutcome:
        async with self._lock.writer_lock:
            session = self.current_session
            if session is None:
                raise InvalidToken()
            return turn_controller.pick(session, token, slot, self.hub)

    # ---- live streams ----

    async def subscribe(self, token: str | None) -> Subscription:
        """Attach a new live stream for ``token``; its first event is the full state."""
        async with self._lock.writer_lock:
            session = self._session_for_token()
            player = player_registry.require_player(session, token)
            subscription = self.hub.attach(
                player, resync=lambda: player_registry.snapshot_for(session, token)
            )
            subscription.push(STATE, player_registry.snapshot_for(session, token))
            logger.info("[store] %s subscribed to live updates", player.name)
            return subscription

    async def unsubscribe(self, token: str | None, subscription: Subscription) -> None:
        async with self._lock.writer_lock:
            session = self.current_session
            player = session.get_player(token) if session is not None else None
            if player is None:
                subscription.close()
                return
            self.hub.detach(player, subscription)
            logger.info("[store] %s left live updates", player.name)
