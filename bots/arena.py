"""Simple bot arena for Tarneeb: all-AI tables played to completion."""

from __future__ import annotations

import argparse
import logging
from typing import Dict, Iterable, Optional

from tarneeb.game import GameEngine
from tarneeb.records import GameRecord, to_record
from tarneeb.rules_schema import EngineConfig, GameMode, RuleSet
from tarneeb.state import GamePhase

from .base import BotStrategy
from .baseline import BaselineBot

LOGGER = logging.getLogger(__name__)

BOT_REGISTRY: Dict[str, type[BotStrategy]] = {
    "baseline": BaselineBot,
}

TEAM1_ROSTER = "North(AI)/South(AI)"
TEAM2_ROSTER = "East(AI)/West(AI)"


def play_game(engine: GameEngine) -> GameRecord:
    game = engine.initialize_default_game(TEAM1_ROSTER, TEAM2_ROSTER)
    if game is None:
        error = engine.errors.get()
        raise RuntimeError(f"Arena game failed to start: {error.message if error else 'unknown error'}")
    if game.phase is not GamePhase.GAME_OVER:
        raise RuntimeError(f"Arena game {game.id} stalled in phase {game.phase.value}.")
    return to_record(game)


def run_match(
    n_games: int = 10,
    *,
    seed: Optional[int] = None,
    mode: GameMode = GameMode.CONTRACT,
    max_rounds: int = 50,
    bot: Optional[BotStrategy] = None,
) -> dict:
    rules = RuleSet.for_mode(mode, max_rounds=max_rounds)
    records = []
    wins = {1: 0, 2: 0}
    for idx in range(n_games):
        config = EngineConfig(
            rules=rules,
            seed=None if seed is None else seed + idx,
            auto_advance_rounds=True,
        )
        record = play_game(GameEngine(config, bot=bot))
        records.append(record)
        if record.winning_team_id is not None:
            wins[record.winning_team_id] += 1
        LOGGER.info(
            "Game %d: %s %d - %d %s after %d rounds",
            idx + 1,
            record.team1_name,
            record.team1_score,
            record.team2_score,
            record.team2_name,
            record.total_rounds,
        )
    return {"wins": wins, "records": records}


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run an all-AI Tarneeb match.")
    parser.add_argument("--bot", default="baseline", choices=BOT_REGISTRY.keys())
    parser.add_argument("--games", type=int, default=10, help="Number of games to play.")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--mode", default=GameMode.CONTRACT.value, choices=[mode.value for mode in GameMode])
    parser.add_argument("--max-rounds", type=int, default=50, help="Decide on score after this many rounds.")
    parser.add_argument("--log-level", default="info", help="Logging level (debug, info, warning).")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    results = run_match(
        args.games,
        seed=args.seed,
        mode=GameMode(args.mode),
        max_rounds=args.max_rounds,
        bot=BOT_REGISTRY[args.bot](),
    )
    rounds = sum(record.total_rounds for record in results["records"])
    print(f"Wins after {args.games} games: {results['wins']}")
    print(f"Rounds played: {rounds}")


if __name__ == "__main__":
    main()
