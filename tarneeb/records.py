"""Flat persistence records for finished or abandoned games."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .state import Game


class GameRecord(BaseModel):
    game_id: str
    team1_name: str
    team2_name: str
    team1_score: int
    team2_score: int
    winning_team_id: Optional[int] = None
    total_rounds: int = Field(0, ge=0)
    game_mode: str
    duration_ms: int = Field(0, ge=0)
    player_count: int = Field(ge=0)


def to_record(game: Game) -> GameRecord:
    """Map a game to its storage row; unfinished games report no winner and no duration."""
    team1, team2 = game.teams
    return GameRecord(
        game_id=game.id,
        team1_name=team1.name,
        team2_name=team2.name,
        team1_score=team1.score,
        team2_score=team2.score,
        winning_team_id=game.winning_team_id,
        total_rounds=game.total_rounds,
        game_mode=game.mode.value,
        duration_ms=max(0, int(round(game.duration * 1000))),
        player_count=len(game.players),
    )
