"""
Game Service

Contains the core game logic: one persistent game per player identity,
advanced one guess at a time until it is won or lost.
"""

import logging
from typing import Callable, Optional

from ..config.game_settings import MAX_ATTEMPTS, WORD_LENGTH
from ..errors import (
    GameAlreadyOver, InvalidGuessLength, NoActiveGame, NoAttemptsRemaining, UnknownWord,
)
from ..models.game import Game, GuessOutcome, HistoryEntry
from ..utils.helpers import utcnow
from .feedback import evaluate

logger = logging.getLogger(__name__)


class GameService:
    """
    Core game service backed by the game store.

    This class handles:
    - Starting (or recovering) the game of an identity
    - Guess validation and evaluation
    - Win/loss determination and the history snapshot of finished games
    - Never exposing the target word of a game in progress
    """

    def __init__(self, store, word_service, now: Callable = utcnow):
        self.store = store
        self.word_service = word_service
        self.now = now

    def start_game(self, user_id: str, linked_user_id: Optional[str] = None):
        """
        Return the identity's game in progress, or start a new one.

        Returns:
            Tuple of (Game, created) where created is False when an
            unfinished game was recovered unchanged
        """
        game = self.store.get_game(user_id)
        if game is not None and not game.is_terminal:
            return game, False

        now = self.now()
        game = Game(
            user_id=user_id,
            target_word=self.word_service.get_random_word(),
            attempts=[],
            attempts_left=MAX_ATTEMPTS,
            created_at=now,
            updated_at=now,
            linked_user_id=linked_user_id,
        )
        self.store.save_game(game)
        return game, True

    def validate_guess(self, guess: str) -> str:
        """
        Check a guess before any store access.

        Returns:
            The normalized (uppercase) guess
        """
        normalized = (guess or "").strip().upper()
        if len(normalized) != WORD_LENGTH:
            raise InvalidGuessLength()
        if not self.word_service.is_valid_word(normalized):
            raise UnknownWord()
        return normalized

    def guess_word(self, user_id: str, guess: str) -> GuessOutcome:
        """
        Apply one guess to the identity's game.

        The game write happens first and is authoritative. When the guess
        finishes the game a history snapshot is written afterwards; if that
        write fails the guess still succeeds and the failure is reported on
        the outcome.
        """
        normalized = self.validate_guess(guess)

        game = self.store.get_game(user_id)
        if game is None:
            raise NoActiveGame()

        if game.is_terminal:
            raise GameAlreadyOver()

        if game.attempts_left <= 0:
            raise NoAttemptsRemaining()

        feedback = evaluate(normalized, game.target_word)
        game.attempts.append({"guess": normalized, "feedback": feedback})
        game.attempts_left -= 1
        game.is_won = normalized == game.target_word.upper()
        game.is_lost = not game.is_won and game.attempts_left <= 0
        game.updated_at = self.now()

        self.store.save_game(game)

        outcome = GuessOutcome(game=game, feedback=feedback)
        if game.is_terminal:
            try:
                self.store.add_history_entry(HistoryEntry.from_game(game, completed_at=game.updated_at))
                outcome.history_saved = True
            except Exception as e:
                logger.error("Failed to save finished game of %s to history: %s", user_id, e)
                outcome.history_saved = False
                outcome.history_error = str(e)

        return outcome

    def get_current_game(self, user_id: str) -> Game:
        game = self.store.get_game(user_id)
        if game is None:
            raise NoActiveGame()
        return game

    def reset_game(self, user_id: str, linked_user_id: Optional[str] = None):
        """Discard the identity's game, finished or not, and start a fresh one."""
        self.store.delete_game(user_id)
        return self.start_game(user_id, linked_user_id)


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(store, word_service) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService(store, word_service)
    return _game_service
