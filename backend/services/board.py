"""Board construction and queries."""

from __future__ import annotations

import random

from models import IMAGE_LINKS, Card

DEFAULT_PAIRS = len(IMAGE_LINKS)    # 27 pairs -> 9 x 6 board


def build_board(pairs: int = DEFAULT_PAIRS, *, rng: random.Random | None = None) -> list[Card]:
    """Two cards for each of the first ``pairs`` images, shuffled."""
    if not 1 <= pairs <= len(IMAGE_LINKS):
        raise ValueError(f"pairs must be between 1 and {len(IMAGE_LINKS)}, got {pairs}")
    cards = [Card(image_id=image) for image in IMAGE_LINKS[:pairs] for _ in range(2)]
    (rng or random.SystemRandom()).shuffle(cards)
    return cards


def board_from_images(images: list[str]) -> list[Card]:
    """Board with a fixed layout. Every image must appear exactly twice."""
    counts: dict[str, int] = {}
    for image in images:
        counts[image] = counts.get(image, 0) + 1
    unpaired = sorted(image for image, count in counts.items() if count != 2)
    if unpaired:
        raise ValueError(f"every image must appear exactly twice: {unpaired}")
    return [Card(image_id=image) for image in images]


def pending_pick(board: list[Card]) -> int | None:
    """Slot of the face-up, unresolved card waiting for its second pick."""
    for slot, card in enumerate(board):
        if card.flipped and not card.resolved:
            return slot
    return None


def flipped_slots(board: list[Card]) -> list[dict[str, object]]:
    return [
        {"slot": slot, "image": card.image_id}
        for slot, card in enumerate(board)
        if card.flipped and not card.resolved
    ]


def resolved_slots(board: list[Card]) -> list[int]:
    return [slot for slot, card in enumerate(board) if card.resolved]


def all_resolved(board: list[Card]) -> bool:
    return all(card.resolved for card in board)


def hide_unresolved(board: list[Card]) -> list[int]:
    """Turn every face-up, unresolved card back over. Returns the slots touched."""
    hidden = []
    for slot, card in enumerate(board):
        if card.flipped and not card.resolved:
            card.flipped = False
            hidden.append(slot)
    return hidden
