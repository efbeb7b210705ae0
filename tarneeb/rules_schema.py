"""Validation schema for Tarneeb rules, engine configuration and rosters."""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .cards import Suit
from .errors import InvalidConfiguration

SUIT_NAMES = tuple(suit.value for suit in Suit)

TEAM_SIZE = 2

AI_MARKER = re.compile(r"^(?P<name>.*?)\s*\(ai\)$", re.IGNORECASE)

DEFAULT_TABLE_BELOW = {2: 2, 3: 3, 4: 4, 5: 10, 6: 12, 7: 14, 8: 16, 9: 27, 10: 40, 11: 40, 12: 40, 13: 40}
DEFAULT_TABLE_ABOVE = {2: 2, 3: 3, 4: 4, 5: 5, 6: 6, 7: 14, 8: 16, 9: 27, 10: 40, 11: 40, 12: 40, 13: 40}


def _validate_suit(value: str) -> str:
    normalized = value.lower()
    if normalized not in SUIT_NAMES:
        raise ValueError(f"Unknown suit: {value!r}")
    return normalized


def _validate_tiers(value: dict[int, int]) -> dict[int, int]:
    if 0 not in value:
        raise ValueError("Tier mapping must start at score 0.")
    if any(amount <= 0 for amount in value.values()):
        raise ValueError("Tier values must be positive.")
    return dict(sorted(value.items()))


class GameMode(str, Enum):
    CONTRACT = "contract"
    TARNEEB_41 = "tarneeb41"


class RuleSet(BaseModel):
    mode: GameMode = GameMode.CONTRACT
    max_bid: int = Field(13, ge=1, le=13, description="Upper bound on a single bid besides the hand size.")
    trump: Optional[str] = Field("hearts", description="Fixed trump suit; None plays without trump.")
    winning_score: int = Field(41, gt=0)
    max_rounds: Optional[int] = Field(None, ge=1, description="Decide the game on score after this many rounds.")
    require_positive_partners: bool = Field(
        False,
        description="A team only wins once both of its players have a positive score.",
    )
    score_table_threshold: int = Field(30, ge=0, description="Team score from which the second table applies.")
    score_table_below: dict[int, int] = Field(default_factory=lambda: dict(DEFAULT_TABLE_BELOW))
    score_table_above: dict[int, int] = Field(default_factory=lambda: dict(DEFAULT_TABLE_ABOVE))
    min_bid_tiers: dict[int, int] = Field(default_factory=lambda: {0: 2, 30: 3, 40: 4, 50: 5})
    min_total_tiers: dict[int, int] = Field(default_factory=lambda: {0: 11, 30: 12, 40: 13, 50: 14})

    @field_validator("trump")
    @classmethod
    def validate_trump(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _validate_suit(value)

    @field_validator("score_table_below", "score_table_above")
    @classmethod
    def validate_table(cls, value: dict[int, int]) -> dict[int, int]:
        if not value:
            raise ValueError("Scoring table cannot be empty.")
        for bid, points in value.items():
            if points <= 0:
                raise ValueError(f"Bid {bid} has non-positive points.")
        return value

    @field_validator("min_bid_tiers", "min_total_tiers")
    @classmethod
    def validate_tiers(cls, value: dict[int, int]) -> dict[int, int]:
        return _validate_tiers(value)

    @model_validator(mode="after")
    def validate_bid_range(self) -> "RuleSet":
        if max(self.min_bid_tiers.values()) > self.max_bid:
            raise ValueError("Minimum bid tiers exceed the maximum bid.")
        return self

    @property
    def trump_suit(self) -> Optional[Suit]:
        return Suit(self.trump) if self.trump else None

    @classmethod
    def for_mode(cls, mode: GameMode, **overrides) -> "RuleSet":
        if GameMode(mode) is GameMode.TARNEEB_41:
            overrides.setdefault("require_positive_partners", True)
        return cls(mode=mode, **overrides)


class EngineConfig(BaseModel):
    rules: RuleSet = Field(default_factory=RuleSet)
    seed: Optional[int] = Field(None, description="Shuffle seed; a fixed seed makes a game replayable.")
    fill_with_ai: bool = Field(True, description="Fill incomplete rosters with AI players.")
    auto_advance_rounds: bool = Field(False, description="Deal the next round as soon as a round is scored.")


class PlayerSetup(BaseModel):
    name: str
    is_ai: bool = False

    @field_validator("name")
    @classmethod
    def ensure_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Player name must not be empty.")
        return value


class TeamSetup(BaseModel):
    name: str
    players: List[PlayerSetup] = Field(min_length=TEAM_SIZE, max_length=TEAM_SIZE)

    @field_validator("name")
    @classmethod
    def ensure_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Team name must not be empty.")
        return value


class GameSetup(BaseModel):
    team1: TeamSetup
    team2: TeamSetup

    @model_validator(mode="after")
    def ensure_unique_players(self) -> "GameSetup":
        names = [player.name.lower() for team in (self.team1, self.team2) for player in team.players]
        if len(set(names)) != len(names):
            raise ValueError("Player names must be unique across both teams.")
        return self


def parse_roster(team_name: str, *, fill_with_ai: bool = True) -> dict:
    """Turn a roster string such as ``"Alice/Charlie(AI)"`` into team setup data."""
    entries = [entry.strip() for entry in (team_name or "").split("/") if entry.strip()]
    if not entries:
        raise InvalidConfiguration(f"Team {team_name!r} names no players.")
    if len(entries) > TEAM_SIZE:
        raise InvalidConfiguration(f"Team {team_name!r} lists more than {TEAM_SIZE} players.")

    players = []
    for entry in entries:
        match = AI_MARKER.match(entry)
        if match:
            players.append({"name": match.group("name"), "is_ai": True})
        else:
            players.append({"name": entry, "is_ai": False})

    if len(players) < TEAM_SIZE:
        if not fill_with_ai:
            raise InvalidConfiguration(f"Team {team_name!r} needs {TEAM_SIZE} players.")
        players.append({"name": f"{players[0]['name']} Partner", "is_ai": True})

    return {"name": team_name, "players": players}


def build_setup(team1_name: str, team2_name: str, *, fill_with_ai: bool = True) -> GameSetup:
    data = {
        "team1": parse_roster(team1_name, fill_with_ai=fill_with_ai),
        "team2": parse_roster(team2_name, fill_with_ai=fill_with_ai),
    }
    try:
        return GameSetup.model_validate(data)
    except ValidationError as exc:
        raise InvalidConfiguration(f"Invalid game setup: {exc}") from exc
