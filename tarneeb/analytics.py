"""Per-round statistics derived from a scored round."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .scoring import RoundScoreResult

DOMINANT_MARGIN = 5
CLOSE_MARGIN = 1


@dataclass(frozen=True)
class RoundStatistics:
    round_number: int
    bid_success_rate: float
    total_bids: int
    trick_difference: int
    score_difference: int
    leading_team: Optional[int]
    best_player: Optional[int]
    most_accurate_bidder: Optional[int]

    @property
    def is_dominant(self) -> bool:
        return self.trick_difference >= DOMINANT_MARGIN

    @property
    def is_close(self) -> bool:
        return self.trick_difference <= CLOSE_MARGIN

    def summary(self) -> str:
        best = "N/A" if self.best_player is None else f"seat {self.best_player}"
        lines = [
            f"Round #{self.round_number}",
            f"Bid success rate: {self.bid_success_rate:.0%}",
            f"Total bids: {self.total_bids}",
            f"Trick difference: {self.trick_difference}",
            f"Score difference: {self.score_difference}",
            f"Dominant win: {self.is_dominant}",
            f"Close round: {self.is_close}",
            f"Best player: {best}",
        ]
        return "\n".join(lines)


def round_statistics(result: RoundScoreResult) -> RoundStatistics:
    teams = sorted(result.team_tricks)
    made = sum(1 for team in teams if result.team_made[team])
    tricks = [result.team_tricks[team] for team in teams]
    scores = [result.new_team_scores[team] for team in teams]

    top_score = max(scores)
    leaders = [team for team in teams if result.new_team_scores[team] == top_score]

    best_player = None
    if result.player_tricks:
        # Ties go to the lowest seat.
        best_player = max(sorted(result.player_tricks), key=lambda seat: result.player_tricks[seat])

    most_accurate = None
    bidders = [seat for seat in sorted(result.player_bids) if seat in result.player_tricks]
    if bidders:
        most_accurate = min(
            bidders,
            key=lambda seat: abs(result.player_tricks[seat] - result.player_bids[seat]),
        )

    return RoundStatistics(
        round_number=result.round_number,
        bid_success_rate=made / len(teams) if teams else 0.0,
        total_bids=sum(result.team_bids.values()),
        trick_difference=max(tricks) - min(tricks) if tricks else 0,
        score_difference=max(scores) - min(scores) if scores else 0,
        leading_team=leaders[0] if len(leaders) == 1 else None,
        best_player=best_player,
        most_accurate_bidder=most_accurate,
    )
