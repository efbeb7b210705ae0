"""Legal move generation for Tarneeb."""

from __future__ import annotations

from typing import Iterable, List

from .cards import Card
from .trick import Trick


def legal_moves(hand: Iterable[Card], trick: Trick) -> List[Card]:
    """Return the cards that may be played into the trick, sorted by suit then rank.

    A player holding the led suit must follow it; otherwise any card is legal.
    """
    cards = sorted(hand)
    if trick.is_empty():
        return cards

    led = trick.led_suit()
    in_led = [card for card in cards if card.suit is led]
    return in_led if in_led else cards
