"""Common bot strategy interfaces."""

from __future__ import annotations

from typing import Sequence

from tarneeb.cards import Card
from tarneeb.state import Game


class BotStrategy:
    """Base class for bot policies.

    Strategies are consulted by the engine while it holds the game lock, so
    they must only read ``game`` and must return one of the offered options.
    """

    name: str = "BaseBot"

    def offer_bid(self, game: Game, player: int, valid_bids: Sequence[int]) -> int:
        """Return one of ``valid_bids``."""
        if not valid_bids:
            raise RuntimeError("No legal bids available for bot.")
        return valid_bids[0]

    def play_card(self, game: Game, player: int, legal: Sequence[Card]) -> Card:
        """Return one of ``legal``."""
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        return legal[0]
