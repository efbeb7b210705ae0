"""Card-related data structures and helpers for Tarneeb."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional


class Suit(Enum):
    SPADES = "spades"
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"

    def __str__(self) -> str:
        return self.value


class Rank(Enum):
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        return self.name.lower()


# Rank order from lowest to highest for trick resolution.
RANK_ORDER: list[Rank] = sorted(Rank, key=lambda rank: rank.value)

RANK_STRENGTH: dict[Rank, int] = {rank: index for index, rank in enumerate(RANK_ORDER)}

# Fixed suit order used to sort hands and break ties between equal ranks.
SUIT_ORDER: list[Suit] = [Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS]

SUIT_PRIORITY: dict[Suit, int] = {suit: index for index, suit in enumerate(SUIT_ORDER)}

SUIT_SYMBOLS: dict[Suit, str] = {
    Suit.SPADES: "♠",
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
}


@dataclass(frozen=True)
class Card:
    """Immutable representation of a playing card."""

    rank: Rank
    suit: Suit

    def __lt__(self, other: "Card") -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return hand_sort_key(self) < hand_sort_key(other)

    def __str__(self) -> str:
        return card_label(self)


def card_strength(card: Card) -> int:
    """Return an integer strength used for ordering cards within a suit."""
    return RANK_STRENGTH[card.rank]


def hand_sort_key(card: Card) -> tuple[int, int]:
    return SUIT_PRIORITY[card.suit], card_strength(card)


def is_high_card(card: Card) -> bool:
    return card.rank.value >= Rank.TEN.value


def beats(candidate: Card, current: Card, led_suit: Suit, trump: Optional[Suit]) -> bool:
    """Return True if candidate wins over current within the trick context."""
    if candidate == current:
        return False

    candidate_trump = trump is not None and candidate.suit is trump
    current_trump = trump is not None and current.suit is trump

    if candidate_trump and not current_trump:
        return True
    if current_trump and not candidate_trump:
        return False

    if candidate.suit is current.suit:
        return card_strength(candidate) > card_strength(current)

    if candidate.suit is led_suit and current.suit is not led_suit:
        return True

    return False


def serialize_card(card: Card) -> dict[str, str]:
    return {"rank": card.rank.name.lower(), "suit": card.suit.value}


def deserialize_card(payload: Mapping[str, str]) -> Card:
    rank_name = payload["rank"].upper()
    suit_name = payload["suit"].lower()
    return Card(Rank[rank_name], Suit(suit_name))


def card_label(card: Card) -> str:
    return f"{card.rank.name.title()} of {card.suit.name.title()}"


def short_label(card: Card) -> str:
    if card.rank.value <= 10:
        face = str(card.rank.value)
    else:
        face = card.rank.name[0]
    return f"{face}{SUIT_SYMBOLS[card.suit]}"
