import datetime

import pytest

from wordle_api.errors import ValidationError
from wordle_api.models.commands import (
    COMMANDS, GeneratePinCommand, GuessCommand, HistoryCommand, MonthlyStatsCommand,
    ResetCommand, StartCommand, ValidatePinCommand, parse_command,
)
from wordle_api.models.user import Caller

ANON = Caller(identity="player-1")
AUTHED = Caller(identity="app-user", authenticated=True)


def test_every_action_is_registered():
    assert set(COMMANDS) == {
        "start", "guess", "current", "reset", "stats", "history", "monthly-stats",
        "generate-pin", "validate-pin", "unlink", "link-status", "cleanup-pins",
        "health", "palabras",
    }


def test_unknown_action_lists_available_actions():
    with pytest.raises(ValidationError) as exc:
        parse_command({"action": "dance"}, ANON)
    assert "start" in exc.value.message
    with pytest.raises(ValidationError):
        parse_command({}, ANON)


def test_start_requires_identity():
    with pytest.raises(ValidationError):
        parse_command({"action": "start"}, Caller(identity=None))
    command = parse_command({"action": "start", "linkedUserId": "amzn1.x"}, ANON)
    assert command == StartCommand(user_id="player-1", linked_user_id="amzn1.x")


def test_guess_requires_guess():
    with pytest.raises(ValidationError):
        parse_command({"action": "guess"}, ANON)
    assert parse_command({"action": "guess", "guess": " crane "}, ANON) == GuessCommand("player-1", "crane")


def test_history_defaults():
    command = parse_command({"action": "history"}, ANON)
    assert command == HistoryCommand(user_id="player-1")
    assert command.limit == 20
    assert command.sort_order == "desc"


def test_history_parameters():
    command = parse_command({
        "action": "history", "limit": "5", "offset": "10", "sortBy": "attemptsUsed",
        "sortOrder": "asc", "filter": "won", "dateFrom": "2026-03-01", "dateTo": "2026-03-31",
    }, ANON)
    assert command.limit == 5
    assert command.offset == 10
    assert command.sort_by == "attemptsUsed"
    assert command.filter == "won"
    assert command.date_from == datetime.datetime(2026, 3, 1)
    # a bare end date covers that whole day
    assert command.date_to == datetime.datetime(2026, 4, 1)


@pytest.mark.parametrize("params", [
    {"limit": "abc"},
    {"limit": "0"},
    {"limit": "1000"},
    {"offset": "-1"},
    {"filter": "draw"},
    {"sortOrder": "sideways"},
    {"sortBy": "password"},
    {"dateFrom": "yesterday"},
])
def test_history_rejects_bad_parameters(params):
    with pytest.raises(ValidationError):
        parse_command({"action": "history", **params}, ANON)


def test_monthly_stats_parameters():
    assert parse_command({"action": "monthly-stats"}, ANON) == MonthlyStatsCommand("player-1")
    command = parse_command({"action": "monthly-stats", "year": "2025", "month": "12"}, ANON)
    assert (command.year, command.month) == (2025, 12)
    with pytest.raises(ValidationError):
        parse_command({"action": "monthly-stats", "month": "13"}, ANON)


def test_link_management_requires_authenticated_caller():
    with pytest.raises(ValidationError):
        parse_command({"action": "generate-pin"}, ANON)
    with pytest.raises(ValidationError):
        parse_command({"action": "unlink"}, ANON)
    assert parse_command({"action": "generate-pin"}, AUTHED) == GeneratePinCommand("app-user")


def test_validate_pin_uses_secondary_identity():
    command = parse_command({"action": "validate-pin", "pin": "1234"}, Caller(identity="amzn1.voice"))
    assert command == ValidatePinCommand(pin="1234", secondary_id="amzn1.voice")

    command = parse_command({"action": "validate-pin", "pin": "1234", "alexaUserId": "amzn1.other"}, ANON)
    assert command.secondary_id == "amzn1.other"

    with pytest.raises(ValidationError):
        parse_command({"action": "validate-pin"}, Caller(identity="amzn1.voice"))


def test_parameterless_actions():
    for action in ("health", "palabras", "cleanup-pins"):
        assert parse_command({"action": action}, Caller(identity=None)).action == action


def test_validate_pin_never_uses_token_identity_as_secondary():
    command = parse_command({"action": "validate-pin", "pin": "1234", "userId": "amzn1.voice"}, AUTHED)
    assert command.secondary_id == "amzn1.voice"

    with pytest.raises(ValidationError):
        parse_command({"action": "validate-pin", "pin": "1234"}, AUTHED)


def test_reset_keeps_linked_user_hint():
    command = parse_command({"action": "reset", "linkedUserId": "amzn1.x"}, ANON)
    assert command == ResetCommand(user_id="player-1", linked_user_id="amzn1.x")
