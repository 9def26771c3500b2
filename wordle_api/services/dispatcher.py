"""
Action Dispatcher

Executes one parsed command against the services and shapes the response.
``dispatch`` never raises: expected failures become ``success: False``
responses with their message, anything unexpected is logged and reported as
a generic internal error.
"""

import datetime
from typing import Any, Callable, Dict, Optional

from ..errors import StoreUnavailable, WordleError
from ..models.commands import (
    CleanupPinsCommand, Command, CurrentCommand, GeneratePinCommand, GuessCommand,
    HealthCommand, HistoryCommand, LinkStatusCommand, MonthlyStatsCommand, ResetCommand,
    StartCommand, StatsCommand, UnlinkCommand, ValidatePinCommand, VocabularyCommand,
    parse_command,
)
from ..models.game import Game
from ..models.user import Caller
from ..utils.game_logger import game_logger

INTERNAL_ERROR = "Internal server error"

# Commands answered without touching the store
STORELESS_COMMANDS = (HealthCommand, VocabularyCommand)

FEATURES = [
    "Game history",
    "Statistics and streaks",
    "Monthly statistics",
    "Account linking with PIN",
    "Voice assistant compatible",
]


def _game_message(game: Game) -> str:
    if game.is_won:
        return f"Game won! The word was: {game.target_word}"
    if game.is_lost:
        return f"Game lost! The word was: {game.target_word}"
    return f"Game in progress. {game.attempts_left} attempts left"


class ActionDispatcher:
    """Maps each command type to its handler."""

    def __init__(self, game_service, stats_service, link_service, word_service,
                 store=None, version: str = "2.1.0"):
        self.game_service = game_service
        self.stats_service = stats_service
        self.link_service = link_service
        self.word_service = word_service
        self.store = store
        self.version = version
        self._handlers: Dict[type, Callable[[Any], Dict[str, Any]]] = {
            StartCommand: self._start,
            GuessCommand: self._guess,
            CurrentCommand: self._current,
            ResetCommand: self._reset,
            StatsCommand: self._stats,
            HistoryCommand: self._history,
            MonthlyStatsCommand: self._monthly_stats,
            GeneratePinCommand: self._generate_pin,
            ValidatePinCommand: self._validate_pin,
            UnlinkCommand: self._unlink,
            LinkStatusCommand: self._link_status,
            CleanupPinsCommand: self._cleanup_pins,
            HealthCommand: self._health,
            VocabularyCommand: self._vocabulary,
        }

    def dispatch(self, params: Dict[str, Any], caller: Caller, request=None) -> Dict[str, Any]:
        action = params.get("action")
        try:
            command = parse_command(params, caller)
            return self.execute(command)
        except WordleError as e:
            return e.to_response()
        except Exception as e:
            game_logger.log_error(request, e, str(action), caller.identity)
            return {"success": False, "error": INTERNAL_ERROR}

    def execute(self, command: Command) -> Dict[str, Any]:
        if self.store is None and not isinstance(command, STORELESS_COMMANDS):
            raise StoreUnavailable()
        handler = self._handlers[type(command)]
        return handler(command)

    def _effective(self, user_id: str) -> str:
        return self.link_service.get_effective_identity(user_id)

    # Game

    def _start(self, command: StartCommand) -> Dict[str, Any]:
        user_id = self._effective(command.user_id)
        game, created = self.game_service.start_game(user_id, command.linked_user_id)
        return {
            "success": True,
            "game": game.to_response(),
            "message": "New game started" if created else "Current game recovered",
        }

    def _guess(self, command: GuessCommand) -> Dict[str, Any]:
        user_id = self._effective(command.user_id)
        outcome = self.game_service.guess_word(user_id, command.guess)
        game = outcome.game

        response = {
            "success": True,
            "feedback": outcome.feedback,
            "attemptsLeft": game.attempts_left,
            "isWon": game.is_won,
            "isLost": game.is_lost,
            "attempts": game.attempts,
            "gameStatus": game.status.value,
        }

        if game.is_won:
            response["message"] = f"Congratulations! You won. The word was: {game.target_word}"
        elif game.is_lost:
            response["message"] = f"Game over! No attempts left. The word was: {game.target_word}"
        else:
            response["message"] = f"{game.attempts_left} attempts left"

        if game.is_terminal:
            response["targetWord"] = game.target_word
            response["historySaved"] = outcome.history_saved
            game_logger.log_game_event(
                user_id, "game_won" if game.is_won else "game_lost",
                attempts_used=game.attempts_used, target_word=game.target_word,
                history_saved=outcome.history_saved, history_error=outcome.history_error
            )

        return response

    def _current(self, command: CurrentCommand) -> Dict[str, Any]:
        game = self.game_service.get_current_game(self._effective(command.user_id))
        data = game.to_response()
        data["message"] = _game_message(game)
        return {"success": True, "game": data}

    def _reset(self, command: ResetCommand) -> Dict[str, Any]:
        game, _ = self.game_service.reset_game(self._effective(command.user_id), command.linked_user_id)
        return {"success": True, "game": game.to_response(), "message": "New game started"}

    # Statistics

    def _stats(self, command: StatsCommand) -> Dict[str, Any]:
        user_id = self._effective(command.user_id)
        return {
            "success": True,
            "stats": self.stats_service.get_user_stats(user_id),
            "effectiveUserId": user_id,
        }

    def _history(self, command: HistoryCommand) -> Dict[str, Any]:
        result = self.stats_service.get_history(
            self._effective(command.user_id),
            limit=command.limit,
            offset=command.offset,
            sort_by=command.sort_by,
            sort_order=command.sort_order,
            result_filter=command.filter,
            date_from=command.date_from,
            date_to=command.date_to,
        )
        return {"success": True, **result}

    def _monthly_stats(self, command: MonthlyStatsCommand) -> Dict[str, Any]:
        stats = self.stats_service.get_monthly_stats(
            self._effective(command.user_id), command.year, command.month
        )
        return {"success": True, "stats": stats}

    # Account linking

    def _generate_pin(self, command: GeneratePinCommand) -> Dict[str, Any]:
        result = self.link_service.generate_link_pin(command.user_id)
        game_logger.log_game_event(command.user_id, "pin_generated", expires_in=result["expiresIn"])
        minutes = result["expiresIn"] // 60
        return {
            "success": True,
            **result,
            "message": f"Say this PIN to your voice assistant within {minutes} minutes",
        }

    def _validate_pin(self, command: ValidatePinCommand) -> Dict[str, Any]:
        link = self.link_service.validate_pin_and_link(command.pin, command.secondary_id)
        game_logger.log_game_event(link.primary_id, "accounts_linked", secondary_id=link.secondary_id)
        return {
            "success": True,
            "message": "Accounts linked successfully",
            "linkedAt": link.linked_at.isoformat(),
        }

    def _unlink(self, command: UnlinkCommand) -> Dict[str, Any]:
        removed = self.link_service.unlink_accounts(command.user_id)
        game_logger.log_game_event(command.user_id, "accounts_unlinked", removed_links=removed)
        return {"success": True, "message": "Accounts unlinked", "removedLinks": removed}

    def _link_status(self, command: LinkStatusCommand) -> Dict[str, Any]:
        return {"success": True, **self.link_service.get_link_status(command.user_id)}

    def _cleanup_pins(self, command: CleanupPinsCommand) -> Dict[str, Any]:
        deleted = self.link_service.cleanup_expired_pins()
        if deleted:
            game_logger.log_game_event(None, "pins_cleaned", deleted_count=deleted)
        return {"success": True, "deletedCount": deleted, "message": f"{deleted} expired PINs removed"}

    # Service

    def _health(self, command: HealthCommand) -> Dict[str, Any]:
        return {
            "success": True,
            "message": "Wordle API running",
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "version": self.version,
            "features": FEATURES,
            "storeAvailable": self.store.ping() if self.store is not None else False,
        }

    def _vocabulary(self, command: VocabularyCommand) -> Dict[str, Any]:
        words = self.word_service.get_words()
        return {
            "success": True,
            "totalWords": len(words),
            "examples": words[:10],
            "source": self.word_service.source,
            "message": f"{len(words)} words loaded",
        }


# Global dispatcher instance
_dispatcher: Optional[ActionDispatcher] = None


def get_dispatcher() -> Optional[ActionDispatcher]:
    """Get the global dispatcher instance."""
    return _dispatcher


def initialize_dispatcher(game_service, stats_service, link_service, word_service,
                          store=None, version: str = "2.1.0") -> ActionDispatcher:
    """Initialize the global dispatcher instance."""
    global _dispatcher
    _dispatcher = ActionDispatcher(game_service, stats_service, link_service, word_service,
                                   store, version)
    return _dispatcher
