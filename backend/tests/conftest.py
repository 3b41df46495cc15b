"""Shared fixtures: fixed boards and seated players."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from models import GameSession
from services import player_registry
from services.board import board_from_images
from services.event_hub import EventHub, Subscription

X = "https://img.example/x.png"
Y = "https://img.example/y.png"
Z = "https://img.example/z.png"


def drain(subscription: Subscription) -> list[dict[str, Any]]:
    events = []
    while True:
        try:
            event = subscription.get_nowait()
        except asyncio.QueueEmpty:
            return events
        if event is not None:
            events.append(event)


def names_of(events: list[dict[str, Any]]) -> list[str]:
    return [e["event"] for e in events]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def hub() -> EventHub:
    return EventHub(queue_size=64)


@pytest.fixture
def make_session(hub: EventHub) -> Callable[..., GameSession]:
    """
    Session with a fixed board and the given players seated, each with a live
    stream attached. Tokens are ``token-<name>``. With ``start`` everyone is
    marked ready so the first player holds the turn.
    """

    def _make(images: list[str], names: list[str], *, start: bool = True) -> GameSession:
        session = GameSession(id="s1", board=board_from_images(images))
        for name in names:
            player_registry.join(session, name, hub, token_factory=lambda n=name: f"token-{n}")
        for player in session.players.values():
            hub.attach(player)
        if start:
            for token in list(session.players):
                player_registry.mark_ready(session, token, hub)
        for player in session.players.values():
            drain(player.subscription)
        return session

    return _make
