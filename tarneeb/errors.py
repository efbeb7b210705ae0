"""Error kinds raised by the rules and reported through the error slot."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_CONFIGURATION = "InvalidConfiguration"
    ILLEGAL_BID = "IllegalBid"
    ILLEGAL_MOVE = "IllegalMove"
    NOT_YOUR_TURN = "NotYourTurn"
    GAME_NOT_STARTED = "GameNotStarted"
    GAME_ALREADY_OVER = "GameAlreadyOver"


class EngineError(Exception):
    """Base class for rejected actions. Never fatal to the engine."""

    kind: ErrorKind = ErrorKind.ILLEGAL_MOVE

    def __init__(self, message: str, *, player_index: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.player_index = player_index


class InvalidConfiguration(EngineError, ValueError):
    kind = ErrorKind.INVALID_CONFIGURATION


class IllegalBid(EngineError, ValueError):
    kind = ErrorKind.ILLEGAL_BID


class IllegalMove(EngineError, ValueError):
    kind = ErrorKind.ILLEGAL_MOVE


class NotYourTurn(EngineError):
    kind = ErrorKind.NOT_YOUR_TURN


class GameNotStarted(EngineError):
    kind = ErrorKind.GAME_NOT_STARTED


class GameAlreadyOver(EngineError):
    kind = ErrorKind.GAME_ALREADY_OVER


@dataclass(frozen=True)
class GameError:
    """Most recent rejection, as published to observers."""

    kind: ErrorKind
    message: str
    player_index: Optional[int] = None

    @classmethod
    def from_exception(cls, exc: EngineError) -> "GameError":
        return cls(kind=exc.kind, message=exc.message, player_index=exc.player_index)
