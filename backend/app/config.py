"""Environment configuration. Values may come from backend/.env."""

import os

from services.board import DEFAULT_PAIRS
from services.event_hub import DEFAULT_QUEUE_SIZE

DEFAULT_PORT = 8080


def get_master_key() -> str:
    key = os.environ.get("MASTER_KEY", "").strip()
    if not key:
        raise RuntimeError("MASTER_KEY is not set. Set it in backend/.env or the environment.")
    return key


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} is not a valid number: {raw!r}") from None


def get_host() -> str:
    return os.environ.get("HOST", "").strip() or "0.0.0.0"


def get_port() -> int:
    return _int_env("PORT", DEFAULT_PORT)


def get_board_pairs() -> int:
    """Pairs on a new board, clamped to the size of the image catalogue."""
    return max(1, min(_int_env("BOARD_PAIRS", DEFAULT_PAIRS), DEFAULT_PAIRS))


def get_event_queue_size() -> int:
    return max(1, _int_env("EVENT_QUEUE_SIZE", DEFAULT_QUEUE_SIZE))


def get_allowed_origins() -> list[str]:
    raw = os.environ.get("ALLOWED_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()] or ["*"]
