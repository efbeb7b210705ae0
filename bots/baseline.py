"""Baseline bot: deterministic legal-move heuristic."""

from __future__ import annotations

from collections import Counter
from typing import Optional, Sequence

from tarneeb.cards import SUIT_PRIORITY, Card, Suit, beats, card_strength, is_high_card
from tarneeb.rules_schema import GameMode
from tarneeb.state import Game

from .base import BotStrategy


def estimate_tricks(hand: Sequence[Card]) -> int:
    """Rough trick count: half the high cards plus a third of the longest suit."""
    if not hand:
        return 0
    high_cards = sum(1 for card in hand if is_high_card(card))
    longest_suit = max(Counter(card.suit for card in hand).values())
    return high_cards // 2 + longest_suit // 3


def _cheap_key(trump: Optional[Suit]):
    def key(card: Card) -> tuple[bool, int, int]:
        return (trump is not None and card.suit is trump, card_strength(card), SUIT_PRIORITY[card.suit])

    return key


class BaselineBot(BotStrategy):
    name = "Baseline"

    def offer_bid(self, game: Game, player: int, valid_bids: Sequence[int]) -> int:
        if not valid_bids:
            raise RuntimeError("No legal bids available for bot.")
        if game.mode is GameMode.CONTRACT:
            return valid_bids[0]

        low, high = valid_bids[0], valid_bids[-1]
        bid = min(max(estimate_tricks(game.players[player].hand), low), high)

        assert game.current_round is not None
        auction = game.current_round.auction
        if len(auction.bids) == len(auction.order) - 1:
            needed = auction.minimum_total - auction.total()
            if bid < needed:
                bid = min(needed, high)
        return bid

    def play_card(self, game: Game, player: int, legal: Sequence[Card]) -> Card:
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        assert game.current_round is not None and game.current_round.current_trick is not None
        trick = game.current_round.current_trick
        trump = game.current_round.trump
        cheapest = _cheap_key(trump)

        if trick.is_empty():
            non_trump = [card for card in legal if card.suit is not trump]
            if non_trump:
                return max(non_trump, key=lambda c: (card_strength(c), -SUIT_PRIORITY[c.suit]))
            return min(legal, key=cheapest)

        winner, winning_card = trick.winning_play(trump)
        if game.players[winner].team_id == game.players[player].team_id:
            return min(legal, key=cheapest)

        led = trick.led_suit()
        assert led is not None
        takers = [card for card in legal if beats(card, winning_card, led, trump)]
        if takers:
            return min(takers, key=cheapest)
        return min(legal, key=cheapest)
