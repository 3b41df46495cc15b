"""Request-scoped access to the app's SessionStore and the caller's credentials."""

from fastapi import Cookie, Header, Request, WebSocket

from services.session_store import SessionStore

TOKEN_COOKIE = "memory_token"
MASTER_KEY_COOKIE = "master_key"


def get_store(request: Request) -> SessionStore:
    return request.app.state.store


def get_ws_store(websocket: WebSocket) -> SessionStore:
    return websocket.app.state.store


def _bearer(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "bearer" or not value.strip():
        return None
    return value.strip()


def player_token(
    memory_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> str | None:
    """Bearer token from the Authorization header, else the token cookie."""
    return _bearer(authorization) or memory_token


def admin_key(
    master_key: str | None = Cookie(default=None),
    x_master_key: str | None = Header(default=None),
) -> str | None:
    return x_master_key or master_key
