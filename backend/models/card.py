from dataclasses import dataclass


@dataclass
class Card:
    image_id: str              # image URL shared by exactly two cards
    flipped: bool = False      # face up, not yet resolved
    resolved: bool = False     # matched and taken out of play
