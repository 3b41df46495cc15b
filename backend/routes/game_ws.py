from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

from fastapi import APIRouter, Cookie, Depends, Query, WebSocket, WebSocketDisconnect

from app.store import get_ws_store
from services.event_hub import Subscription
from services.exceptions import MemoryGameException
from services.session_store import SessionStore

router = APIRouter(tags=["game"])
logger = logging.getLogger(__name__)


async def _close_on_disconnect(websocket: WebSocket, subscription: Subscription) -> None:
    """Clients only listen; a disconnect frame ends the stream without waiting for the next event."""
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                return
    finally:
        subscription.close()


@router.websocket("/game")
async def ws_game(
    websocket: WebSocket,
    token: str | None = Query(default=None),
    memory_token: str | None = Cookie(default=None),
    store: SessionStore = Depends(get_ws_store),
) -> None:
    """
    Live game updates for one player.

    The first frame is the full state, then one frame per event:
      {"event": "state" | "flip" | "hide" | "turn" | "leaderboard" | "gameOver", "data": ...}
    A newer connection for the same player, or deleting the game, ends this one.
    """
    await websocket.accept()
    player_token = token or memory_token
    try:
        subscription = await store.subscribe(player_token)
    except MemoryGameException as e:
        logger.info("[game_ws] Refused live stream: %s", e.detail)
        await websocket.send_json({"event": "error", "data": {"error": e.code, "detail": e.detail}})
        await websocket.close(code=4401)
        return

    watcher = asyncio.create_task(_close_on_disconnect(websocket, subscription))
    try:
        while True:
            event = await subscription.get()
            if event is None:
                if not watcher.done():
                    await websocket.close()
                return
            await websocket.send_json(event)
    except WebSocketDisconnect:
        return
    finally:
        watcher.cancel()
        with suppress(asyncio.CancelledError):
            await watcher
        subscription.close()
        await store.unsubscribe(player_token, subscription)
