"""Bearer tokens handed to players on join."""

import secrets
import string

TOKEN_ALPHABET = string.ascii_letters + string.digits
TOKEN_LENGTH = 30


def generate_player_token() -> str:
    """Random alphanumeric token; possession of it is the player's identity."""
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


def redact(token: str | None) -> str:
    """Loggable form of a token."""
    if not token:
        return "<none>"
    return f"{token[:4]}…"
