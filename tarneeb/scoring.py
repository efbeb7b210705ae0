"""Round scoring helpers for Tarneeb."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence

from .rules_schema import GameMode, RuleSet


class ScoringError(ValueError):
    """Raised when round data cannot be scored."""


@dataclass(frozen=True)
class RoundScoreResult:
    round_number: int
    mode: GameMode
    contract_player: int
    contract_team: int
    contract_amount: int
    player_bids: Dict[int, int]
    player_tricks: Dict[int, int]
    team_bids: Dict[int, int]
    team_tricks: Dict[int, int]
    team_made: Dict[int, bool]
    player_deltas: Dict[int, int]
    team_deltas: Dict[int, int]
    new_team_scores: Dict[int, int]

    @property
    def contract_success(self) -> bool:
        return self.team_made[self.contract_team]


def tier_value(tiers: Mapping[int, int], score: int) -> int:
    """Return the tier value for the highest threshold not above ``score``."""
    value = tiers[0]
    for threshold, amount in sorted(tiers.items()):
        if score >= threshold:
            value = amount
    return value


def minimum_bid(rules: RuleSet, top_score: int) -> int:
    return tier_value(rules.min_bid_tiers, top_score)


def minimum_total_bids(rules: RuleSet, top_score: int) -> int:
    return tier_value(rules.min_total_tiers, top_score)


def points_for_bid(rules: RuleSet, bid: int, top_score: int) -> int:
    if top_score >= rules.score_table_threshold:
        table = rules.score_table_above
    else:
        table = rules.score_table_below
    if bid in table:
        return table[bid]
    if bid > max(table):
        return table[max(table)]
    return 0


def score_round(
    rules: RuleSet,
    *,
    round_number: int,
    player_teams: Mapping[int, int],
    player_bids: Mapping[int, int],
    player_tricks: Mapping[int, int],
    contract_player: int,
    contract_amount: int,
    prior_scores: Mapping[int, int],
) -> RoundScoreResult:
    if set(player_bids) != set(player_teams) or set(player_tricks) != set(player_teams):
        raise ScoringError("Every player needs a bid and a trick count.")
    if contract_player not in player_teams:
        raise ScoringError(f"Unknown contract player {contract_player}.")

    team_ids = sorted(set(player_teams.values()))
    members = {team: [p for p in sorted(player_teams) if player_teams[p] == team] for team in team_ids}
    team_bids = {team: sum(player_bids[p] for p in members[team]) for team in team_ids}
    team_tricks = {team: sum(player_tricks[p] for p in members[team]) for team in team_ids}
    contract_team = player_teams[contract_player]
    # The table follows the leading score, for both teams.
    top_score = max(prior_scores.values())

    player_deltas = {player: 0 for player in player_teams}
    team_deltas = {team: 0 for team in team_ids}

    if rules.mode is GameMode.TARNEEB_41:
        team_made = {team: team_tricks[team] >= team_bids[team] for team in team_ids}
        for team in team_ids:
            for player in members[team]:
                bid = player_bids[player]
                if team_made[team]:
                    delta = points_for_bid(rules, bid, top_score)
                else:
                    delta = -bid
                player_deltas[player] = delta
                team_deltas[team] += delta
    else:
        made = team_tricks[contract_team] >= contract_amount
        team_made = {team: made if team == contract_team else not made for team in team_ids}
        if made:
            team_deltas[contract_team] = points_for_bid(rules, contract_amount, top_score)
        else:
            team_deltas[contract_team] = -contract_amount
            for team in team_ids:
                if team != contract_team:
                    team_deltas[team] = team_tricks[team]

    new_scores = {team: prior_scores[team] + team_deltas[team] for team in team_ids}
    return RoundScoreResult(
        round_number=round_number,
        mode=rules.mode,
        contract_player=contract_player,
        contract_team=contract_team,
        contract_amount=contract_amount,
        player_bids=dict(player_bids),
        player_tricks=dict(player_tricks),
        team_bids=team_bids,
        team_tricks=team_tricks,
        team_made=team_made,
        player_deltas=player_deltas,
        team_deltas=team_deltas,
        new_team_scores=new_scores,
    )


def decide_winner(
    rules: RuleSet,
    team_scores: Mapping[int, int],
    player_scores: Mapping[int, Sequence[int]],
    rounds_played: int,
) -> Optional[int]:
    """Return the winning team id, or None while the game goes on.

    ``player_scores`` maps each team id to its players' cumulative scores.
    Ties between qualifying teams play another round.
    """
    qualified = [
        team
        for team, score in team_scores.items()
        if score >= rules.winning_score
        and (not rules.require_positive_partners or all(s > 0 for s in player_scores[team]))
    ]
    if not qualified and rules.max_rounds is not None and rounds_played >= rules.max_rounds:
        qualified = list(team_scores)
    if not qualified:
        return None

    best = max(team_scores[team] for team in qualified)
    leaders = [team for team in qualified if team_scores[team] == best]
    if len(leaders) > 1:
        return None
    return leaders[0]
