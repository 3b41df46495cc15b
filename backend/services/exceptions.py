"""
Game engine exceptions.

Every expected failure of a store operation raises one of these. The API layer
maps them to HTTP responses through a single exception handler, so each class
carries its status code and a stable machine-readable code.
"""


class MemoryGameException(Exception):
    """Base class for all engine failures."""

    status_code = 400
    code = "error"
    default_detail = "Request rejected"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


# ============ Admin ============

class Unauthorized(MemoryGameException):
    status_code = 401
    code = "unauthorized"
    default_detail = "Invalid master key"


# ============ Session lifecycle ============

class NoGameExists(MemoryGameException):
    status_code = 404
    code = "no_game_exists"
    default_detail = "No game exists"


class AlreadyExists(MemoryGameException):
    status_code = 409
    code = "already_exists"
    default_detail = "Game already exists"


class AlreadyRunning(MemoryGameException):
    """Join after the lobby closed."""
    status_code = 409
    code = "already_running"
    default_detail = "Game already running"


class NotYetRunning(MemoryGameException):
    """Gameplay call while the session is in the lobby or already finished."""
    status_code = 409
    code = "not_yet_running"
    default_detail = "Game is not running"


# ============ Players ============

class DuplicateName(MemoryGameException):
    status_code = 409
    code = "duplicate_name"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Name {name!r} is already taken")


class InvalidToken(MemoryGameException):
    status_code = 401
    code = "invalid_token"
    default_detail = "Invalid token"


class NotYourTurn(MemoryGameException):
    status_code = 403
    code = "not_your_turn"
    default_detail = "It is not your turn"


# ============ Cards ============

class InvalidCard(MemoryGameException):
    status_code = 400
    code = "invalid_card"

    def __init__(self, slot: int) -> None:
        self.slot = slot
        super().__init__(f"Card {slot} does not exist")


class AlreadyFlipped(MemoryGameException):
    status_code = 409
    code = "already_flipped"

    def __init__(self, slot: int) -> None:
        self.slot = slot
        super().__init__(f"Card {slot} is already flipped or removed")
