"""
Error Taxonomy

Exceptions raised by the services. Every one carries a stable ``code`` and a
human-readable message; the action dispatcher turns them into
``{"success": False, "error": ..., "code": ...}`` responses.
"""


class WordleError(Exception):
    """Base class for all expected (reportable) failures."""
    code = "error"
    default_message = "Request failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self) -> dict:
        return {"success": False, "error": self.message, "code": self.code}


# Validation errors

class ValidationError(WordleError):
    code = "validation_error"
    default_message = "Invalid request"


# Domain errors

class DomainError(WordleError):
    code = "domain_error"


class InvalidGuessLength(DomainError):
    code = "invalid_guess_length"
    default_message = "The guess must be exactly 5 letters"


class UnknownWord(DomainError):
    code = "unknown_word"
    default_message = "Word not in word list"


class NoActiveGame(DomainError):
    code = "no_active_game"
    default_message = "No active game. Start a new game."


class GameAlreadyOver(DomainError):
    code = "game_already_over"
    default_message = "The game is already over"


class NoAttemptsRemaining(DomainError):
    code = "no_attempts_remaining"
    default_message = "No attempts remaining"


class EmptyVocabulary(DomainError):
    code = "empty_vocabulary"
    default_message = "The vocabulary is empty"


# Linking errors

class LinkError(WordleError):
    code = "link_error"


class InvalidPin(LinkError):
    code = "invalid_pin"
    default_message = "Invalid PIN"


class ExpiredPin(LinkError):
    code = "expired_pin"
    default_message = "The PIN has expired. Generate a new one."


class NoLinkExists(LinkError):
    code = "no_link_exists"
    default_message = "No linked account found"


class PinGenerationFailed(LinkError):
    code = "pin_generation_failed"
    default_message = "Could not generate a unique PIN. Try again."


class SelfLinkNotAllowed(LinkError):
    code = "self_link_not_allowed"
    default_message = "An account cannot be linked to itself"


# Infrastructure errors

class StoreUnavailable(WordleError):
    code = "store_unavailable"
    default_message = "Game storage is unavailable. Try again later."
