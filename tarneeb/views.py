"""Immutable snapshots of a game, as published to observers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .bidding import Bid
from .cards import Card, card_label, serialize_card
from .scoring import RoundScoreResult
from .state import CompletedTrick, Game, GamePhase


@dataclass(frozen=True)
class PlayerView:
    id: int
    name: str
    team_id: int
    is_ai: bool
    hand: Tuple[Card, ...]
    score: int
    tricks_won: int
    bid: Optional[int]

    @property
    def hand_size(self) -> int:
        return len(self.hand)


@dataclass(frozen=True)
class TeamView:
    id: int
    name: str
    player_ids: Tuple[int, ...]
    score: int
    tricks_won: int


@dataclass(frozen=True)
class TrickView:
    leader: int
    plays: Tuple[Tuple[int, Card], ...]


@dataclass(frozen=True)
class GameView:
    game_id: str
    phase: GamePhase
    mode: str
    round_number: int
    starting_player: Optional[int]
    current_player: Optional[int]
    trump: Optional[str]
    players: Tuple[PlayerView, ...]
    teams: Tuple[TeamView, ...]
    bids: Tuple[Bid, ...]
    highest_bid: Optional[int]
    contract_player: Optional[int]
    contract_team: Optional[int]
    contract_amount: Optional[int]
    trick: Optional[TrickView]
    tricks_played: int
    last_trick: Optional[CompletedTrick]
    last_round: Optional[RoundScoreResult]
    redeals: int
    valid_bids: Tuple[int, ...]
    valid_cards: Tuple[Card, ...]
    total_rounds: int
    winning_team_id: Optional[int]

    def to_payload(self, perspective: Optional[int] = None) -> dict:
        """Plain dict for collaborators; hides other hands when a perspective is given."""

        def hand_payload(player: PlayerView) -> Optional[list]:
            if perspective is not None and player.id != perspective:
                return None
            return [serialize_card(card) for card in player.hand]

        show_moves = perspective is None or perspective == self.current_player
        return {
            "game_id": self.game_id,
            "phase": self.phase.value,
            "mode": self.mode,
            "round": self.round_number,
            "current_player": self.current_player,
            "trump": self.trump,
            "players": [
                {
                    "id": player.id,
                    "name": player.name,
                    "team_id": player.team_id,
                    "is_ai": player.is_ai,
                    "hand": hand_payload(player),
                    "hand_size": player.hand_size,
                    "score": player.score,
                    "tricks_won": player.tricks_won,
                    "bid": player.bid,
                }
                for player in self.players
            ],
            "teams": [
                {"id": team.id, "name": team.name, "score": team.score, "tricks_won": team.tricks_won}
                for team in self.teams
            ],
            "bids": [{"player": bid.player_id, "amount": bid.amount} for bid in self.bids],
            "contract": {
                "player": self.contract_player,
                "team": self.contract_team,
                "amount": self.contract_amount,
            },
            "trick": None
            if self.trick is None
            else [
                {"player": player, "card": serialize_card(card), "label": card_label(card)}
                for player, card in self.trick.plays
            ],
            "valid_bids": list(self.valid_bids) if show_moves else [],
            "valid_cards": [serialize_card(card) for card in self.valid_cards] if show_moves else [],
            "total_rounds": self.total_rounds,
            "winning_team_id": self.winning_team_id,
        }


def build_game_view(game: Game) -> GameView:
    round_ = game.current_round
    current = game.current_player()

    def bid_for(seat: int) -> Optional[int]:
        return round_.auction.bid_of(seat) if round_ is not None else None

    players = tuple(
        PlayerView(
            id=player.id,
            name=player.name,
            team_id=player.team_id,
            is_ai=player.is_ai,
            hand=tuple(player.hand),
            score=player.score,
            tricks_won=player.tricks_won,
            bid=bid_for(player.id),
        )
        for player in game.players
    )
    teams = tuple(
        TeamView(
            id=team.id,
            name=team.name,
            player_ids=tuple(team.player_ids),
            score=team.score,
            tricks_won=round_.tricks_won.get(team.id, 0) if round_ is not None else 0,
        )
        for team in game.teams
    )

    valid_bids: Tuple[int, ...] = ()
    valid_cards: Tuple[Card, ...] = ()
    trick: Optional[TrickView] = None
    if round_ is not None:
        if current is not None and game.phase is GamePhase.BIDDING:
            valid_bids = tuple(round_.auction.valid_bids(current))
        if current is not None and game.phase is GamePhase.PLAYING:
            valid_cards = tuple(game.valid_cards(current))
        if round_.current_trick is not None:
            trick = TrickView(leader=round_.current_trick.leader, plays=tuple(round_.current_trick.plays))

    contract_player = round_.contract_player if round_ is not None else None
    return GameView(
        game_id=game.id,
        phase=game.phase,
        mode=game.mode.value,
        round_number=round_.number if round_ is not None else 0,
        starting_player=round_.starting_player if round_ is not None else None,
        current_player=current,
        trump=round_.trump.value if round_ is not None and round_.trump is not None else None,
        players=players,
        teams=teams,
        bids=tuple(round_.bids) if round_ is not None else (),
        highest_bid=round_.auction.highest_bid if round_ is not None else None,
        contract_player=contract_player,
        contract_team=game.players[contract_player].team_id if contract_player is not None else None,
        contract_amount=round_.contract_amount if round_ is not None else None,
        trick=trick,
        tricks_played=len(round_.completed_tricks) if round_ is not None else 0,
        last_trick=round_.completed_tricks[-1] if round_ is not None and round_.completed_tricks else None,
        last_round=game.round_history[-1] if game.round_history else None,
        redeals=round_.redeals if round_ is not None else 0,
        valid_bids=valid_bids,
        valid_cards=valid_cards,
        total_rounds=game.total_rounds,
        winning_team_id=game.winning_team_id,
    )
