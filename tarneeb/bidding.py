"""Bidding rules and auction management."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import IllegalBid, NotYourTurn
from .rules_schema import GameMode, RuleSet


@dataclass(frozen=True)
class Bid:
    player_id: int
    amount: int
    round_number: int


@dataclass
class Auction:
    """Single pass auction: every seat bids exactly once, in seat order.

    In contract mode no bid may fall below the current highest one and the
    contract goes to the first seat that reached the highest amount. In
    tarneeb41 mode bids are independent and a low total forces a redeal.
    """

    order: Sequence[int]
    hand_sizes: Dict[int, int]
    rules: RuleSet
    round_number: int
    minimum: int
    minimum_total: int
    bids: List[Bid] = field(default_factory=list)
    highest_bid: Optional[int] = None
    highest_bidder: Optional[int] = None

    def __post_init__(self) -> None:
        self.order = list(self.order)
        if sorted(self.order) != sorted(self.hand_sizes):
            raise ValueError("Auction order must cover every seat exactly once.")

    @property
    def current_player(self) -> Optional[int]:
        if self.is_complete():
            return None
        return self.order[len(self.bids)]

    def valid_bids(self, player: int) -> List[int]:
        if player != self.current_player:
            return []
        low = self.minimum
        if self.rules.mode is GameMode.CONTRACT and self.highest_bid is not None:
            low = max(low, self.highest_bid)
        high = min(self.hand_sizes[player], self.rules.max_bid)
        return list(range(low, high + 1))

    def bid(self, player: int, amount: int) -> Bid:
        self._ensure_active(player)
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise IllegalBid(f"Bid {amount!r} is not a whole number of tricks.", player_index=player)
        legal = self.valid_bids(player)
        if amount not in legal:
            if legal:
                allowed = f"{legal[0]}..{legal[-1]}"
            else:
                allowed = "none"
            raise IllegalBid(f"Bid {amount} is outside the legal range ({allowed}).", player_index=player)

        placed = Bid(player_id=player, amount=amount, round_number=self.round_number)
        self.bids.append(placed)
        if self.highest_bid is None or amount > self.highest_bid:
            self.highest_bid = amount
            self.highest_bidder = player
        return placed

    def _ensure_active(self, player: int) -> None:
        if self.is_complete():
            raise IllegalBid("Auction already complete.", player_index=player)
        if player != self.current_player:
            raise NotYourTurn(f"It is seat {self.current_player}'s turn to bid, not seat {player}'s.", player_index=player)

    def is_complete(self) -> bool:
        return len(self.bids) == len(self.order)

    def total(self) -> int:
        return sum(bid.amount for bid in self.bids)

    def bid_of(self, player: int) -> Optional[int]:
        for placed in self.bids:
            if placed.player_id == player:
                return placed.amount
        return None

    def needs_redeal(self) -> bool:
        return (
            self.is_complete()
            and self.rules.mode is GameMode.TARNEEB_41
            and self.total() < self.minimum_total
        )

    def result(self) -> Tuple[int, int]:
        if not self.is_complete():
            raise IllegalBid("Auction not yet complete.")
        assert self.highest_bidder is not None and self.highest_bid is not None
        return self.highest_bidder, self.highest_bid
