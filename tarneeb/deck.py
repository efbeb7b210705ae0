"""Deck creation utilities for Tarneeb."""

from __future__ import annotations

from random import Random
from typing import List, Optional, Sequence

from .cards import Card, RANK_ORDER, SUIT_ORDER

DECK_SIZE = 52


def build_deck() -> List[Card]:
    """Return the ordered 52-card deck."""
    return [Card(rank, suit) for suit in SUIT_ORDER for rank in RANK_ORDER]


def deal(
    players: int,
    *,
    rng: Optional[Random] = None,
    deck: Optional[Sequence[Card]] = None,
) -> List[List[Card]]:
    """Deal the whole deck evenly, one card at a time, and return sorted hands."""
    if deck is not None:
        cards = list(deck)
    else:
        cards = build_deck()
        if rng is None:
            rng = Random()
        rng.shuffle(cards)
    if len(cards) != DECK_SIZE or len(set(cards)) != DECK_SIZE:
        raise ValueError(f"Deck must contain exactly {DECK_SIZE} distinct cards.")
    if players <= 0 or DECK_SIZE % players != 0:
        raise ValueError(f"Cannot deal {DECK_SIZE} cards evenly to {players} players.")

    hands: List[List[Card]] = [[] for _ in range(players)]
    for index, card in enumerate(cards):
        hands[index % players].append(card)
    return [sorted(hand) for hand in hands]
