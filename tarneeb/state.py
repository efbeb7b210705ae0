"""Game state management for Tarneeb."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .bidding import Auction, Bid
from .cards import Card, Suit
from .mechanics import legal_moves
from .rules_schema import GameMode, RuleSet
from .scoring import RoundScoreResult
from .trick import Trick


class GamePhase(str, Enum):
    NOT_STARTED = "not_started"
    BIDDING = "bidding"
    PLAYING = "playing"
    ROUND_SCORING = "round_scoring"
    GAME_OVER = "game_over"


@dataclass(eq=False)
class Player:
    id: int
    name: str
    team_id: int
    is_ai: bool = False
    hand: List[Card] = field(default_factory=list)
    score: int = 0
    tricks_won: int = 0


@dataclass(eq=False)
class Team:
    id: int
    name: str
    players: List[Player]
    score: int = 0

    @property
    def player_ids(self) -> List[int]:
        return [player.id for player in self.players]


@dataclass(frozen=True)
class CompletedTrick:
    number: int
    leader: int
    plays: Tuple[Tuple[int, Card], ...]
    winner: int
    winning_card: Card


@dataclass
class Round:
    number: int
    starting_player: int
    trump: Optional[Suit]
    auction: Auction
    tricks_won: Dict[int, int]
    current_trick: Optional[Trick] = None
    turn: Optional[int] = None
    completed_tricks: List[CompletedTrick] = field(default_factory=list)
    contract_player: Optional[int] = None
    contract_amount: Optional[int] = None
    redeals: int = 0

    @property
    def bids(self) -> List[Bid]:
        return list(self.auction.bids)

    @property
    def current_player(self) -> Optional[int]:
        if self.current_trick is None:
            return self.auction.current_player
        return self.turn

    def played_cards(self) -> List[Card]:
        played = [card for trick in self.completed_tricks for _, card in trick.plays]
        if self.current_trick is not None:
            played.extend(self.current_trick.cards())
        return played


@dataclass(eq=False)
class Game:
    id: str
    teams: List[Team]
    players: List[Player]
    rules: RuleSet
    phase: GamePhase = GamePhase.NOT_STARTED
    current_round: Optional[Round] = None
    winning_team_id: Optional[int] = None
    total_rounds: int = 0
    round_history: List[RoundScoreResult] = field(default_factory=list)
    started_at: Optional[float] = None
    finished_at: Optional[float] = None

    @property
    def mode(self) -> GameMode:
        return self.rules.mode

    @property
    def duration(self) -> float:
        """Elapsed seconds, frozen once the game is over."""
        if self.started_at is None or self.finished_at is None:
            return 0.0
        return self.finished_at - self.started_at

    def team(self, team_id: int) -> Team:
        for team in self.teams:
            if team.id == team_id:
                return team
        raise KeyError(team_id)

    def team_of(self, seat: int) -> Team:
        return self.team(self.players[seat].team_id)

    def partner_of(self, seat: int) -> Player:
        return next(player for player in self.team_of(seat).players if player.id != seat)

    def player_teams(self) -> Dict[int, int]:
        return {player.id: player.team_id for player in self.players}

    def team_scores(self) -> Dict[int, int]:
        return {team.id: team.score for team in self.teams}

    def top_score(self) -> int:
        return max(team.score for team in self.teams)

    def next_seat(self, seat: int) -> int:
        return (seat + 1) % len(self.players)

    def current_player(self) -> Optional[int]:
        if self.current_round is None or self.phase not in (GamePhase.BIDDING, GamePhase.PLAYING):
            return None
        return self.current_round.current_player

    def valid_cards(self, seat: int) -> List[Card]:
        if self.phase is not GamePhase.PLAYING or self.current_player() != seat:
            return []
        assert self.current_round is not None and self.current_round.current_trick is not None
        return legal_moves(self.players[seat].hand, self.current_round.current_trick)

    def hands_empty(self) -> bool:
        return all(not player.hand for player in self.players)

    def cards_accounted(self) -> int:
        held = sum(len(player.hand) for player in self.players)
        played = len(self.current_round.played_cards()) if self.current_round else 0
        return held + played

    def play(self, seat: int, card: Card) -> Optional[CompletedTrick]:
        """Apply an already validated card play; return the trick if it completed."""
        round_ = self.current_round
        assert round_ is not None and round_.current_trick is not None
        round_.current_trick.add_play(seat, card)
        self.players[seat].hand.remove(card)

        if round_.current_trick.is_full():
            return self._complete_trick()
        round_.turn = self.next_seat(seat)
        return None

    def _complete_trick(self) -> CompletedTrick:
        round_ = self.current_round
        assert round_ is not None and round_.current_trick is not None
        trick = round_.current_trick
        winner, winning_card = trick.winning_play(round_.trump)

        completed = CompletedTrick(
            number=len(round_.completed_tricks) + 1,
            leader=trick.leader,
            plays=tuple(trick.plays),
            winner=winner,
            winning_card=winning_card,
        )
        round_.completed_tricks.append(completed)
        self.players[winner].tricks_won += 1
        round_.tricks_won[self.players[winner].team_id] += 1

        if self.hands_empty():
            round_.current_trick = None
            round_.turn = None
        else:
            round_.current_trick = Trick(leader=winner, size=len(self.players))
            round_.turn = winner
        return completed
