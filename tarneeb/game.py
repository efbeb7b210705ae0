"""High-level game orchestration for Tarneeb."""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass
from random import Random
from typing import Callable, List, Optional, Type, Union

from pydantic import ValidationError

from bots.base import BotStrategy
from bots.baseline import BaselineBot

from .bidding import Auction
from .cards import Card, card_label
from .deck import deal
from .errors import (
    EngineError,
    GameAlreadyOver,
    GameError,
    GameNotStarted,
    IllegalBid,
    IllegalMove,
    InvalidConfiguration,
    NotYourTurn,
)
from .observable import StateSlot
from .rules_schema import EngineConfig, GameSetup, build_setup
from .scoring import decide_winner, minimum_bid, minimum_total_bids, score_round
from .state import Game, GamePhase, Player, Round, Team
from .trick import Trick
from .views import GameView, build_game_view


@dataclass(frozen=True)
class BidAction:
    player: int
    amount: int


@dataclass(frozen=True)
class PlayAction:
    player: int
    card: Card


Action = Union[BidAction, PlayAction]


class GameEngine:
    """Own one game at a time and serialize every action against it.

    Mutating calls never raise for rule violations: they record a
    ``GameError`` in ``errors``, leave the game untouched and return a falsy
    value. Each state transition publishes a fresh ``GameView`` to ``state``.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        *,
        bot: Optional[BotStrategy] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or EngineConfig()
        self.rules = self.config.rules
        self.bot = bot or BaselineBot()
        self.rng = Random(self.config.seed)
        self.clock = clock
        self.state: StateSlot[GameView] = StateSlot()
        self.errors: StateSlot[GameError] = StateSlot()
        self._lock = threading.RLock()
        self._game: Optional[Game] = None

    @property
    def game(self) -> Optional[Game]:
        return self._game

    # Game lifecycle ----------------------------------------------------

    def initialize_default_game(self, team1_name: str, team2_name: str) -> Optional[Game]:
        """Start a game from two roster strings such as ``"Alice/Charlie(AI)"``."""
        with self._lock:
            try:
                setup = build_setup(team1_name, team2_name, fill_with_ai=self.config.fill_with_ai)
            except EngineError as exc:
                self.record_error(exc)
                return None
            return self._start(setup)

    def start_game(self, setup: Union[GameSetup, dict]) -> Optional[Game]:
        with self._lock:
            if not isinstance(setup, GameSetup):
                try:
                    setup = GameSetup.model_validate(setup)
                except ValidationError as exc:
                    self.record_error(InvalidConfiguration(f"Invalid game setup: {exc}"))
                    return None
            return self._start(setup)

    def next_round(self, game: Optional[Game]) -> bool:
        with self._lock:
            try:
                self._ensure_phase(game, GamePhase.ROUND_SCORING, IllegalMove)
            except EngineError as exc:
                self.record_error(exc)
                return False
            self._deal_round(game, game.current_round.number + 1)
            self._run_ai(game)
            return True

    # Actions -----------------------------------------------------------

    def place_bid(self, game: Optional[Game], player_index: int, bid: int) -> bool:
        with self._lock:
            try:
                self._ensure_phase(game, GamePhase.BIDDING, IllegalBid)
                self._ensure_turn(game, player_index)
                self._apply_bid(game, player_index, bid)
            except EngineError as exc:
                self.record_error(exc)
                return False
            self._run_ai(game)
            return True

    def play_card(self, game: Optional[Game], player_index: int, card: Card) -> bool:
        with self._lock:
            try:
                self._ensure_phase(game, GamePhase.PLAYING, IllegalMove)
                self._ensure_turn(game, player_index)
                self._apply_play(game, player_index, card)
            except EngineError as exc:
                self.record_error(exc)
                return False
            self._run_ai(game)
            return True

    def clear_error(self) -> None:
        with self._lock:
            if self.errors.get() is not None:
                self.errors.set(None)

    # Queries -----------------------------------------------------------

    def get_valid_bids(self, player_index: int, game: Optional[Game] = None) -> List[int]:
        with self._lock:
            game = game or self._game
            if game is None or game.phase is not GamePhase.BIDDING:
                return []
            assert game.current_round is not None
            return game.current_round.auction.valid_bids(player_index)

    def get_valid_cards(self, player_index: int, game: Optional[Game] = None) -> List[Card]:
        with self._lock:
            game = game or self._game
            if game is None:
                return []
            return game.valid_cards(player_index)

    def current_turn(self, game: Optional[Game] = None) -> Optional[int]:
        with self._lock:
            game = game or self._game
            return game.current_player() if game is not None else None

    def snapshot(self) -> Optional[GameView]:
        return self.state.get()

    def select_next_action(self, game: Game, player_index: int) -> Optional[Action]:
        """Return the AI's chosen action, or None when a human must act."""
        with self._lock:
            if game.current_player() != player_index:
                return None
            if not game.players[player_index].is_ai:
                return None
            if game.phase is GamePhase.BIDDING:
                assert game.current_round is not None
                valid = game.current_round.auction.valid_bids(player_index)
                return BidAction(player_index, self.bot.offer_bid(game, player_index, valid))
            if game.phase is GamePhase.PLAYING:
                legal = game.valid_cards(player_index)
                return PlayAction(player_index, self.bot.play_card(game, player_index, legal))
            return None

    # Internals ---------------------------------------------------------

    def _start(self, setup: GameSetup) -> Game:
        players: List[Player] = []
        teams: List[Team] = []
        for team_id, team_setup in ((1, setup.team1), (2, setup.team2)):
            members = []
            for player_setup in team_setup.players:
                player = Player(id=len(players), name=player_setup.name, team_id=team_id, is_ai=player_setup.is_ai)
                players.append(player)
                members.append(player)
            teams.append(Team(id=team_id, name=team_setup.name, players=members))

        game = Game(id=uuid.uuid4().hex, teams=teams, players=players, rules=self.rules, started_at=self.clock())
        self._game = game
        self._deal_round(game, 1)
        self._run_ai(game)
        return game

    def _new_auction(self, game: Game, number: int, starting: int) -> Auction:
        seats = len(game.players)
        top = game.top_score()
        return Auction(
            order=[(starting + offset) % seats for offset in range(seats)],
            hand_sizes={player.id: len(player.hand) for player in game.players},
            rules=self.rules,
            round_number=number,
            minimum=minimum_bid(self.rules, top),
            minimum_total=minimum_total_bids(self.rules, top),
        )

    def _deal_hands(self, game: Game) -> None:
        hands = deal(len(game.players), rng=self.rng)
        for player, hand in zip(game.players, hands):
            player.hand = hand
            player.tricks_won = 0

    def _deal_round(self, game: Game, number: int) -> None:
        starting = (number - 1) % len(game.players)
        self._deal_hands(game)
        game.current_round = Round(
            number=number,
            starting_player=starting,
            trump=self.rules.trump_suit,
            auction=self._new_auction(game, number, starting),
            tricks_won={team.id: 0 for team in game.teams},
        )
        game.phase = GamePhase.BIDDING
        self._publish(game)

    def _redeal(self, game: Game) -> None:
        round_ = game.current_round
        assert round_ is not None
        self._deal_hands(game)
        round_.auction = self._new_auction(game, round_.number, round_.starting_player)
        round_.redeals += 1
        self._publish(game)

    def _apply_bid(self, game: Game, player_index: int, amount: int) -> None:
        round_ = game.current_round
        assert round_ is not None
        round_.auction.bid(player_index, amount)
        self._publish(game)

        if not round_.auction.is_complete():
            return
        if round_.auction.needs_redeal():
            self._redeal(game)
            return

        round_.contract_player, round_.contract_amount = round_.auction.result()
        round_.current_trick = Trick(leader=round_.starting_player, size=len(game.players))
        round_.turn = round_.starting_player
        game.phase = GamePhase.PLAYING
        self._publish(game)

    def _apply_play(self, game: Game, player_index: int, card: Card) -> None:
        legal = game.valid_cards(player_index)
        if card not in legal:
            if card not in game.players[player_index].hand:
                reason = f"{card_label(card)} is not in seat {player_index}'s hand."
            else:
                reason = f"{card_label(card)} does not follow the led suit."
            raise IllegalMove(reason, player_index=player_index)

        game.play(player_index, card)
        self._publish(game)
        assert game.current_round is not None
        if game.current_round.current_trick is None:
            self._score_round(game)

    def _score_round(self, game: Game) -> None:
        round_ = game.current_round
        assert round_ is not None
        assert round_.contract_player is not None and round_.contract_amount is not None
        result = score_round(
            self.rules,
            round_number=round_.number,
            player_teams=game.player_teams(),
            player_bids={bid.player_id: bid.amount for bid in round_.bids},
            player_tricks={player.id: player.tricks_won for player in game.players},
            contract_player=round_.contract_player,
            contract_amount=round_.contract_amount,
            prior_scores=game.team_scores(),
        )
        for seat, delta in result.player_deltas.items():
            game.players[seat].score += delta
        for team in game.teams:
            team.score = result.new_team_scores[team.id]
        game.round_history.append(result)
        game.total_rounds += 1

        winner = decide_winner(
            self.rules,
            game.team_scores(),
            {team.id: [player.score for player in team.players] for team in game.teams},
            game.total_rounds,
        )
        if winner is not None:
            game.winning_team_id = winner
            game.phase = GamePhase.GAME_OVER
            game.finished_at = self.clock()
            self._publish(game)
            return

        game.phase = GamePhase.ROUND_SCORING
        self._publish(game)
        if self.config.auto_advance_rounds:
            self._deal_round(game, round_.number + 1)

    def _run_ai(self, game: Game) -> None:
        while game is self._game:
            seat = game.current_player()
            if seat is None:
                return
            action = self.select_next_action(game, seat)
            if action is None:
                return
            # A rejected bot action leaves the game waiting on that seat.
            try:
                if isinstance(action, BidAction):
                    self._apply_bid(game, seat, action.amount)
                else:
                    self._apply_play(game, seat, action.card)
            except EngineError as exc:
                self.record_error(exc)
                return

    def _ensure_phase(self, game: Optional[Game], expected: GamePhase, wrong_phase: Type[EngineError]) -> None:
        if game is None or game is not self._game or game.phase is GamePhase.NOT_STARTED:
            raise GameNotStarted("No game in progress on this engine.")
        if game.phase is GamePhase.GAME_OVER:
            raise GameAlreadyOver("The game is already over.")
        if game.phase is not expected:
            raise wrong_phase(f"Action not allowed in phase {game.phase.value}; expected {expected.value}.")

    def _ensure_turn(self, game: Game, player_index: int) -> None:
        if not 0 <= player_index < len(game.players):
            raise NotYourTurn(f"Unknown seat {player_index}.", player_index=player_index)
        current = game.current_player()
        if current != player_index:
            raise NotYourTurn(f"It is seat {current}'s turn, not seat {player_index}'s.", player_index=player_index)

    def record_error(self, exc: EngineError) -> None:
        """Publish a rejection without touching the game."""
        self.errors.set(GameError.from_exception(exc))

    def _publish(self, game: Game) -> None:
        if game is self._game:
            self.state.set(build_game_view(game))
