"""HTTP tests for the admin, lobby and gameplay endpoints."""

import httpx
import pytest

from app.main import create_app
from conftest import X, Y
from services.board import board_from_images
from services.session_store import SessionStore

KEY = "test-master-key"
ADMIN = {"X-Master-Key": KEY}


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def store() -> SessionStore:
    return SessionStore(KEY, board_factory=lambda: board_from_images([X, Y, X, Y]))


@pytest.fixture
def transport(store: SessionStore) -> httpx.ASGITransport:
    return httpx.ASGITransport(app=create_app(store))


@pytest.mark.anyio
async def test_health(transport) -> None:
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_key_check_sets_cookie(transport) -> None:
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        bad = await client.get("/key", params={"key": "nope"})
        good = await client.get("/key", params={"key": KEY})
    assert bad.status_code == 401
    assert bad.json() == {"error": "unauthorized", "detail": "Invalid master key"}
    assert good.status_code == 200
    assert "master_key=" in good.headers["set-cookie"]


@pytest.mark.anyio
async def test_create_and_delete_game(transport, store) -> None:
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        missing = await client.get("/ping")
        unauthorized = await client.post("/create", params={"id": "s1"})
        created = await client.post("/create", params={"id": "s1"}, headers=ADMIN)
        duplicate = await client.post("/create", params={"id": "s2"}, headers=ADMIN)
        ping = await client.get("/ping")
        deleted = await client.post("/delete", headers={"Cookie": f"master_key={KEY}"})

    assert missing.status_code == 404
    assert missing.json()["error"] == "no_game_exists"
    assert unauthorized.status_code == 401
    assert created.status_code == 200
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "already_exists"
    assert ping.json() == {"id": "s1", "state": "lobby"}
    assert deleted.status_code == 200
    assert store.current_session is None


@pytest.mark.anyio
async def test_join_ready_and_play(transport) -> None:
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        await client.post("/create", params={"id": "s1"}, headers=ADMIN)
        joined = await client.post("/join", params={"name": "Alice", "id": "s1"})
        alice = joined.json()["token"]
        bob = (await client.post("/join", params={"name": "Bob"})).json()["token"]
        duplicate = await client.post("/join", params={"name": "Bob"})

        pending = await client.post("/ready", headers=_auth(alice))
        started = await client.post("/ready", headers=_auth(bob))
        late = await client.post("/join", params={"name": "Carol"})

        first = await client.post("/pick_card", params={"card": 0}, headers=_auth(alice))
        wrong_turn = await client.post("/pick_card", params={"card": 1}, headers=_auth(bob))
        second = await client.post("/pick_card", params={"card": 2}, headers=_auth(alice))
        gone = await client.post("/pick_card", params={"card": 2}, headers=_auth(alice))
        out_of_range = await client.post("/pick_card", params={"card": 9}, headers=_auth(alice))
        state = await client.get("/state", headers=_auth(bob))

    assert joined.status_code == 200
    assert "memory_token=" in joined.headers["set-cookie"]
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "duplicate_name"
    assert pending.json() == {"status": "pending"}
    assert started.json() == {"status": "started"}
    assert late.json()["error"] == "already_running"

    assert first.json() == {
        "slot": 0,
        "img_path": X,
        "result": "awaiting_second_pick",
        "turn": True,
        "finished": False,
    }
    assert wrong_turn.status_code == 403
    assert wrong_turn.json()["error"] == "not_your_turn"
    assert second.json()["result"] == "match"
    assert second.json()["turn"] is True
    assert gone.status_code == 409
    assert gone.json()["error"] == "already_flipped"
    assert out_of_range.status_code == 400
    assert out_of_range.json()["error"] == "invalid_card"

    body = state.json()
    assert body["state"] == "running"
    assert body["resolved"] == [0, 2]
    assert body["flipped"] == []
    assert [p["points"] for p in body["players"]] == [1, 0]


@pytest.mark.anyio
async def test_token_cookie_is_accepted(transport) -> None:
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        await client.post("/create", params={"id": "s1"}, headers=ADMIN)
        token = (await client.post("/join", params={"name": "Alice"})).json()["token"]
        response = await client.post("/ready", headers={"Cookie": f"memory_token={token}"})
    assert response.json() == {"status": "started"}


@pytest.mark.anyio
async def test_requests_without_token_are_rejected(transport) -> None:
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        await client.post("/create", params={"id": "s1"}, headers=ADMIN)
        ready = await client.post("/ready")
        pick = await client.post("/pick_card", params={"card": 0}, headers=_auth("nope"))
    assert ready.status_code == 401
    assert ready.json()["error"] == "invalid_token"
    assert pick.status_code == 409
    assert pick.json()["error"] == "not_yet_running"


@pytest.mark.anyio
async def test_ping_revokes_stale_token(transport) -> None:
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        await client.post("/create", params={"id": "s1"}, headers=ADMIN)
        token = (await client.post("/join", params={"name": "Alice"})).json()["token"]
        valid = await client.get("/ping", headers=_auth(token))

        await client.post("/delete", headers=ADMIN)
        await client.post("/create", params={"id": "s2"}, headers=ADMIN)
        revoked = await client.get("/ping", headers=_auth(token))

    assert valid.status_code == 200
    assert revoked.status_code == 410
    assert revoked.json() == {"id": "s2", "state": "lobby"}
    assert "memory_token=" in revoked.headers["set-cookie"]
