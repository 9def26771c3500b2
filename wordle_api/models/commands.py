"""
Command Models

One dataclass per API action. ``parse_command`` turns the flat parameter bag
of a request into exactly one of these, validating the fields each action
needs, so the services never see transport-shaped input.
"""

import datetime
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Type

from ..config.game_settings import HISTORY_DEFAULT_LIMIT, HISTORY_MAX_LIMIT
from ..errors import ValidationError
from .user import Caller

HISTORY_FILTERS = ("all", "won", "lost")
HISTORY_SORT_FIELDS = ("completedAt", "attemptsUsed", "targetWord", "duration")
SORT_ORDERS = ("asc", "desc")


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _require_identity(caller: Caller) -> str:
    if not caller.identity:
        raise ValidationError("userId is required")
    return caller.identity


def _require_authenticated(caller: Caller) -> str:
    if not caller.authenticated or not caller.identity:
        raise ValidationError("Authentication required for this action")
    return caller.identity


def _int_param(params: Dict[str, Any], name: str, default: Optional[int] = None,
               minimum: Optional[int] = None, maximum: Optional[int] = None) -> Optional[int]:
    raw = _clean(params.get(name))
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")
    if minimum is not None and value < minimum:
        raise ValidationError(f"{name} must be at least {minimum}")
    if maximum is not None and value > maximum:
        raise ValidationError(f"{name} must be at most {maximum}")
    return value


def _date_param(params: Dict[str, Any], name: str, end_of_range: bool = False) -> Optional[datetime.datetime]:
    """
    Parse an ISO date or datetime. A bare date used as the end of a range
    becomes the start of the following day, so the bound is exclusive.
    """
    raw = _clean(params.get(name))
    if raw is None:
        return None
    try:
        if len(raw) == 10:
            day = datetime.date.fromisoformat(raw)
            value = datetime.datetime(day.year, day.month, day.day)
            if end_of_range:
                value += datetime.timedelta(days=1)
            return value
        value = datetime.datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"{name} must be an ISO date (YYYY-MM-DD)")
    if value.tzinfo is not None:
        value = value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return value


def _choice_param(params: Dict[str, Any], name: str, choices, default: str) -> str:
    value = _clean(params.get(name)) or default
    if value not in choices:
        raise ValidationError(f"{name} must be one of: {', '.join(choices)}")
    return value


class Command:
    """Base class; subclasses declare their wire ``action`` name."""
    action: ClassVar[str] = ""

    @classmethod
    def from_params(cls, params: Dict[str, Any], caller: Caller) -> "Command":
        raise NotImplementedError


@dataclass
class StartCommand(Command):
    action: ClassVar[str] = "start"
    user_id: str
    linked_user_id: Optional[str] = None

    @classmethod
    def from_params(cls, params, caller):
        return cls(user_id=_require_identity(caller), linked_user_id=_clean(params.get("linkedUserId")))


@dataclass
class GuessCommand(Command):
    action: ClassVar[str] = "guess"
    user_id: str
    guess: str

    @classmethod
    def from_params(cls, params, caller):
        user_id = _require_identity(caller)
        guess = _clean(params.get("guess"))
        if not guess:
            raise ValidationError("userId and guess are required")
        return cls(user_id=user_id, guess=guess)


@dataclass
class CurrentCommand(Command):
    action: ClassVar[str] = "current"
    user_id: str

    @classmethod
    def from_params(cls, params, caller):
        return cls(user_id=_require_identity(caller))


@dataclass
class ResetCommand(Command):
    action: ClassVar[str] = "reset"
    user_id: str
    linked_user_id: Optional[str] = None

    @classmethod
    def from_params(cls, params, caller):
        return cls(user_id=_require_identity(caller), linked_user_id=_clean(params.get("linkedUserId")))


@dataclass
class StatsCommand(Command):
    action: ClassVar[str] = "stats"
    user_id: str

    @classmethod
    def from_params(cls, params, caller):
        return cls(user_id=_require_identity(caller))


@dataclass
class HistoryCommand(Command):
    action: ClassVar[str] = "history"
    user_id: str
    limit: int = HISTORY_DEFAULT_LIMIT
    offset: int = 0
    sort_by: str = "completedAt"
    sort_order: str = "desc"
    filter: str = "all"
    date_from: Optional[datetime.datetime] = None
    date_to: Optional[datetime.datetime] = None

    @classmethod
    def from_params(cls, params, caller):
        return cls(
            user_id=_require_identity(caller),
            limit=_int_param(params, "limit", HISTORY_DEFAULT_LIMIT, minimum=1, maximum=HISTORY_MAX_LIMIT),
            offset=_int_param(params, "offset", 0, minimum=0),
            sort_by=_choice_param(params, "sortBy", HISTORY_SORT_FIELDS, "completedAt"),
            sort_order=_choice_param(params, "sortOrder", SORT_ORDERS, "desc"),
            filter=_choice_param(params, "filter", HISTORY_FILTERS, "all"),
            date_from=_date_param(params, "dateFrom"),
            date_to=_date_param(params, "dateTo", end_of_range=True),
        )


@dataclass
class MonthlyStatsCommand(Command):
    action: ClassVar[str] = "monthly-stats"
    user_id: str
    year: Optional[int] = None
    month: Optional[int] = None

    @classmethod
    def from_params(cls, params, caller):
        return cls(
            user_id=_require_identity(caller),
            year=_int_param(params, "year", minimum=1970, maximum=9999),
            month=_int_param(params, "month", minimum=1, maximum=12),
        )


@dataclass
class GeneratePinCommand(Command):
    action: ClassVar[str] = "generate-pin"
    user_id: str

    @classmethod
    def from_params(cls, params, caller):
        return cls(user_id=_require_authenticated(caller))


@dataclass
class ValidatePinCommand(Command):
    action: ClassVar[str] = "validate-pin"
    pin: str
    secondary_id: str

    @classmethod
    def from_params(cls, params, caller):
        pin = _clean(params.get("pin"))
        secondary_id = _clean(params.get("alexaUserId"))
        if not secondary_id:
            # a bearer token names the app account that owns the PIN, never the voice identity
            secondary_id = _clean(params.get("userId")) if caller.authenticated else caller.identity
        if not pin or not secondary_id:
            raise ValidationError("pin and userId are required")
        return cls(pin=pin, secondary_id=secondary_id)


@dataclass
class UnlinkCommand(Command):
    action: ClassVar[str] = "unlink"
    user_id: str

    @classmethod
    def from_params(cls, params, caller):
        return cls(user_id=_require_authenticated(caller))


@dataclass
class LinkStatusCommand(Command):
    action: ClassVar[str] = "link-status"
    user_id: str

    @classmethod
    def from_params(cls, params, caller):
        return cls(user_id=_require_identity(caller))


@dataclass
class CleanupPinsCommand(Command):
    action: ClassVar[str] = "cleanup-pins"

    @classmethod
    def from_params(cls, params, caller):
        return cls()


@dataclass
class HealthCommand(Command):
    action: ClassVar[str] = "health"

    @classmethod
    def from_params(cls, params, caller):
        return cls()


@dataclass
class VocabularyCommand(Command):
    action: ClassVar[str] = "palabras"

    @classmethod
    def from_params(cls, params, caller):
        return cls()


COMMANDS: Dict[str, Type[Command]] = {
    command.action: command
    for command in (
        StartCommand, GuessCommand, CurrentCommand, ResetCommand, StatsCommand,
        HistoryCommand, MonthlyStatsCommand, GeneratePinCommand, ValidatePinCommand,
        UnlinkCommand, LinkStatusCommand, CleanupPinsCommand, HealthCommand,
        VocabularyCommand,
    )
}


def parse_command(params: Dict[str, Any], caller: Caller) -> Command:
    """Build the command named by ``params['action']``."""
    action = _clean(params.get("action"))
    command_class = COMMANDS.get(action)
    if command_class is None:
        raise ValidationError(
            "Invalid action. Available actions: " + ", ".join(COMMANDS)
        )
    return command_class.from_params(params, caller)
