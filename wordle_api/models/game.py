"""
Game Data Models

Contains all game-related data structures and enums, and their mapping to
store documents (camelCase field names, as clients of the API expect).
"""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..config.game_settings import MAX_ATTEMPTS
from ..utils.helpers import isoformat


class LetterStatus(Enum):
    """Per-letter evaluation status of a guess."""
    CORRECT_POSITION = "correct_position"
    CORRECT_WRONG_POSITION = "correct_wrong_position"
    ABSENT = "absent"


class GameStatus(Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass
class Game:
    """Server-side game state, one per player identity."""
    user_id: str
    target_word: str
    attempts: List[Dict[str, Any]] = field(default_factory=list)
    attempts_left: int = MAX_ATTEMPTS
    is_won: bool = False
    is_lost: bool = False
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None
    linked_user_id: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.is_won or self.is_lost

    @property
    def status(self) -> GameStatus:
        if self.is_won:
            return GameStatus.WON
        if self.is_lost:
            return GameStatus.LOST
        return GameStatus.PLAYING

    @property
    def attempts_used(self) -> int:
        return MAX_ATTEMPTS - self.attempts_left

    def to_document(self) -> Dict[str, Any]:
        doc = {
            "_id": self.user_id,
            "userId": self.user_id,
            "targetWord": self.target_word,
            "attempts": self.attempts,
            "attemptsLeft": self.attempts_left,
            "isWon": self.is_won,
            "isLost": self.is_lost,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.linked_user_id:
            doc["linkedUserId"] = self.linked_user_id
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Game":
        return cls(
            user_id=doc.get("userId") or doc["_id"],
            target_word=doc["targetWord"],
            attempts=list(doc.get("attempts", [])),
            attempts_left=doc.get("attemptsLeft", MAX_ATTEMPTS),
            is_won=bool(doc.get("isWon", False)),
            is_lost=bool(doc.get("isLost", False)),
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
            linked_user_id=doc.get("linkedUserId"),
        )

    def to_response(self) -> Dict[str, Any]:
        """Client view of the game. The target word is only revealed once the game is over."""
        data = {
            "userId": self.user_id,
            "attempts": self.attempts,
            "attemptsLeft": self.attempts_left,
            "isWon": self.is_won,
            "isLost": self.is_lost,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
            "gameStatus": self.status.value,
        }
        if self.linked_user_id:
            data["linkedUserId"] = self.linked_user_id
        if self.is_terminal:
            data["targetWord"] = self.target_word
        return data


@dataclass
class HistoryEntry:
    """Immutable snapshot of a completed game."""
    user_id: str
    target_word: str
    is_won: bool
    is_lost: bool
    attempts_used: int
    total_attempts: int
    attempts: List[Dict[str, Any]]
    completed_at: datetime.datetime
    game_started_at: Optional[datetime.datetime] = None
    linked_user_id: Optional[str] = None

    @classmethod
    def from_game(cls, game: Game, completed_at: datetime.datetime) -> "HistoryEntry":
        return cls(
            user_id=game.user_id,
            target_word=game.target_word,
            is_won=game.is_won,
            is_lost=game.is_lost,
            attempts_used=game.attempts_used,
            total_attempts=len(game.attempts),
            attempts=list(game.attempts),
            completed_at=completed_at,
            game_started_at=game.created_at,
            linked_user_id=game.linked_user_id,
        )

    def to_document(self) -> Dict[str, Any]:
        doc = {
            "userId": self.user_id,
            "targetWord": self.target_word,
            "isWon": self.is_won,
            "isLost": self.is_lost,
            "attemptsUsed": self.attempts_used,
            "totalAttempts": self.total_attempts,
            "attempts": self.attempts,
            "completedAt": self.completed_at,
            "gameStartedAt": self.game_started_at,
        }
        if self.linked_user_id:
            doc["linkedUserId"] = self.linked_user_id
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "HistoryEntry":
        attempts = list(doc.get("attempts", []))
        attempts_used = doc.get("attemptsUsed")
        if attempts_used is None:
            attempts_used = MAX_ATTEMPTS - doc.get("attemptsLeft", MAX_ATTEMPTS)
        return cls(
            user_id=doc["userId"],
            target_word=doc["targetWord"],
            is_won=bool(doc.get("isWon", False)),
            is_lost=bool(doc.get("isLost", False)),
            attempts_used=attempts_used,
            total_attempts=doc.get("totalAttempts", len(attempts)),
            attempts=attempts,
            completed_at=doc["completedAt"],
            game_started_at=doc.get("gameStartedAt"),
            linked_user_id=doc.get("linkedUserId"),
        )


@dataclass
class GuessOutcome:
    """
    Result of a guess. The game write is authoritative; the history write that
    follows a finished game may fail on its own and is reported separately.
    """
    game: Game
    feedback: List[Dict[str, str]]
    history_saved: Optional[bool] = None  # None while the game is still in progress
    history_error: Optional[str] = None
