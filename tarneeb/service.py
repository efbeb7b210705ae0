"""Convenience service layer for UI and network collaborators."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from .cards import card_label, deserialize_card
from .errors import GameError, IllegalMove
from .game import GameEngine
from .rules_schema import EngineConfig
from .state import GamePhase
from .views import GameView

LOGGER = logging.getLogger(__name__)


class GameService:
    """Facade around GameEngine that speaks card payloads and seat numbers."""

    def __init__(self, engine: Optional[GameEngine] = None, *, config: Optional[EngineConfig] = None) -> None:
        self.engine = engine or GameEngine(config)
        self.engine.state.subscribe(self._log_transition, replay=False)

    # Session lifecycle -------------------------------------------------

    def start(self, team1_name: str, team2_name: str) -> Optional[GameView]:
        game = self.engine.initialize_default_game(team1_name, team2_name)
        if game is None:
            self._log_rejection("start")
            return None
        LOGGER.info("Started game %s: %s vs %s", game.id, game.teams[0].name, game.teams[1].name)
        return self.view()

    def has_active_game(self) -> bool:
        return self.engine.game is not None

    # Actions -----------------------------------------------------------

    def place_bid(self, player: int, amount: int) -> Optional[GameView]:
        if not self.engine.place_bid(self.engine.game, player, amount):
            self._log_rejection("bid", player)
        return self.view()

    def play_card(self, player: int, card_payload: Mapping[str, str]) -> Optional[GameView]:
        try:
            card = deserialize_card(card_payload)
        except (KeyError, ValueError, AttributeError):
            self.engine.record_error(IllegalMove(f"Malformed card payload {dict(card_payload)!r}.", player_index=player))
            self._log_rejection("play", player)
            return self.view()
        if not self.engine.play_card(self.engine.game, player, card):
            self._log_rejection("play", player)
        return self.view()

    def next_round(self) -> Optional[GameView]:
        if not self.engine.next_round(self.engine.game):
            self._log_rejection("next_round")
        return self.view()

    def clear_error(self) -> None:
        self.engine.clear_error()

    # Views -------------------------------------------------------------

    def view(self) -> Optional[GameView]:
        """Latest snapshot, or None before the first game starts."""
        return self.engine.snapshot()

    def payload(self, perspective: Optional[int] = None) -> dict:
        view = self.view()
        if view is None:
            payload = {"game_id": None, "phase": GamePhase.NOT_STARTED.value}
        else:
            payload = view.to_payload(perspective)
        error = self.last_error()
        payload["error"] = None if error is None else {"kind": error.kind.value, "message": error.message}
        return payload

    def last_error(self) -> Optional[GameError]:
        return self.engine.errors.get()

    def can_act(self, player: int) -> bool:
        """True when the engine is waiting on this seat and the seat is human."""
        game = self.engine.game
        if game is None or not 0 <= player < len(game.players):
            return False
        return self.engine.current_turn() == player and not game.players[player].is_ai

    def legal_labels(self, player: int) -> list[str]:
        return [card_label(card) for card in self.engine.get_valid_cards(player)]

    # Helpers -----------------------------------------------------------

    def _log_rejection(self, action: str, player: Optional[int] = None) -> None:
        error = self.last_error()
        if error is None:
            return
        LOGGER.info("Rejected %s from seat %s: %s (%s)", action, player, error.message, error.kind.value)

    def _log_transition(self, view: Optional[GameView]) -> None:
        if view is None:
            return
        LOGGER.debug(
            "Game %s round %s phase=%s turn=%s",
            view.game_id,
            view.round_number,
            view.phase.value,
            view.current_player,
        )
