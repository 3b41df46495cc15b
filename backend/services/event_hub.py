from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from typing import Any

from models import GameSession, Player

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 32

# Event names pushed on live streams.
STATE = "state"
FLIP = "flip"
HIDE = "hide"
TURN = "turn"
LEADERBOARD = "leaderboard"
GAME_OVER = "gameOver"

Event = dict[str, Any]


class Subscription:
    """
    A single player's live-update channel.

    Backed by a bounded asyncio.Queue. Pushing never waits. When the queue is
    full the oldest events are never evicted on their own, so a stream that
    opens with a ``state`` frame still opens with one. With a ``resync``
    callback the whole backlog is replaced by a fresh ``state`` frame;
    without one the incoming event is dropped. Closing enqueues a ``None``
    sentinel so the reading task can stop; one slot is kept free for it.
    """

    def __init__(
        self,
        maxsize: int = DEFAULT_QUEUE_SIZE,
        resync: Callable[[], Any] | None = None,
    ) -> None:
        self._maxsize = maxsize
        self._queue: asyncio.Queue[Event | None] = asyncio.Queue(maxsize=maxsize + 1)
        self._resync = resync
        self._closed = False
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def _full(self) -> bool:
        return self._queue.qsize() >= self._maxsize

    def _clear(self) -> int:
        cleared = 0
        while not self._queue.empty():
            self._queue.get_nowait()
            cleared += 1
        return cleared

    def push(self, event: str, data: Any) -> bool:
        if self._closed:
            return False
        if self._full():
            if self._resync is None:
                self.dropped += 1
                return False
            # The snapshot already reflects the incoming event.
            self.dropped += self._clear() + 1
            self._queue.put_nowait({"event": STATE, "data": self._resync()})
            return True
        self._queue.put_nowait({"event": event, "data": data})
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(None)

    async def get(self) -> Event | None:
        """Next event, or None once the subscription has been closed and drained."""
        return await self._queue.get()

    def get_nowait(self) -> Event | None:
        return self._queue.get_nowait()


class EventHub:
    """
    Fan-out of named events to the players' live streams.

    All methods are synchronous and non-blocking so they can be called while
    the store's write lock is held. Players without a stream, or with a closed
    one, are skipped silently.
    """

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self._queue_size = queue_size

    def attach(self, player: Player, resync: Callable[[], Any] | None = None) -> Subscription:
        """Give ``player`` a fresh stream, closing any previous one."""
        previous = player.subscription
        subscription = Subscription(maxsize=self._queue_size, resync=resync)
        player.subscription = subscription
        if previous is not None:
            previous.close()
            logger.info("[event_hub] Replaced live stream for player=%s", player.name)
        return subscription

    def detach(self, player: Player, subscription: Subscription) -> None:
        """Drop ``subscription`` from ``player`` unless a newer one replaced it."""
        subscription.close()
        if player.subscription is subscription:
            player.subscription = None

    def close_all(self, players: Iterable[Player]) -> None:
        for player in players:
            if player.subscription is not None:
                player.subscription.close()
                player.subscription = None

    def send(self, player: Player, event: str, data: Any) -> bool:
        subscription = player.subscription
        if subscription is None or subscription.closed:
            return False
        dropped_before = subscription.dropped
        delivered = subscription.push(event, data)
        if subscription.dropped != dropped_before:
            logger.warning(
                "[event_hub] Stream full for player=%s at %s; backlog dropped",
                player.name,
                event,
            )
        return delivered

    def broadcast(self, event: str, data: Any, recipients: Iterable[Player]) -> int:
        delivered = 0
        for player in recipients:
            if self.send(player, event, data):
                delivered += 1
        logger.debug("[event_hub] %s delivered to %d stream(s)", event, delivered)
        return delivered

    def broadcast_leaderboard(self, session: GameSession) -> int:
        return self.broadcast(LEADERBOARD, session.leaderboard(), session.players.values())

    def broadcast_turn(self, session: GameSession) -> int:
        """Tell every player whose turn it is; each payload says whether it's theirs."""
        active = session.active_player()
        active_name = active.name if active is not None else None
        delivered = 0
        for player in session.players.values():
            payload = {"active": player is active, "player": active_name}
            if self.send(player, TURN, payload):
                delivered += 1
        return delivered
