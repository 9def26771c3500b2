import datetime
import os
import sys
import tempfile
from pathlib import Path

import mongomock
import pytest

# Keep test log files out of the working tree
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='wordle-api-logs-'))

# Ensure project root is on sys.path so tests can import the `wordle_api` package
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from wordle_api import create_app  # noqa: E402
from wordle_api.config import TestingConfig  # noqa: E402
from wordle_api.services.game_service import GameService  # noqa: E402
from wordle_api.services.link_service import LinkService  # noqa: E402
from wordle_api.services.stats_service import StatsService  # noqa: E402
from wordle_api.services.store import GameStore  # noqa: E402
from wordle_api.services.word_service import WordService  # noqa: E402

WORDS = [
    "CRANE", "LLAMA", "SLATE", "PLATO", "PRADO", "BRAZO", "CAMPO",
    "PLACA", "TRACE", "STEAM", "OTTER", "EERIE", "JUMPY",
]


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start=None):
        self.current = start or datetime.datetime(2026, 3, 14, 12, 0, 0)

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current += datetime.timedelta(**kwargs)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store():
    return GameStore(mongomock.MongoClient().wordle_game_test)


@pytest.fixture()
def word_service():
    return WordService(words=WORDS)


@pytest.fixture()
def game_service(store, word_service, clock):
    return GameService(store, word_service, now=clock)


@pytest.fixture()
def link_service(store, clock):
    return LinkService(store, pin_ttl_seconds=300, secondary_id_prefix="amzn1.", now=clock)


@pytest.fixture()
def stats_service(store, clock):
    return StatsService(store, now=clock)


@pytest.fixture()
def rigged_target(word_service, monkeypatch):
    """Make every new game use CRANE as its target word."""
    monkeypatch.setattr(word_service, "get_random_word", lambda: "CRANE")
    return "CRANE"


@pytest.fixture()
def api_store():
    db = mongomock.MongoClient().wordle_game_test
    db.words.insert_many([{"word": word.lower()} for word in WORDS])
    return GameStore(db)


@pytest.fixture()
def flask_app(api_store, monkeypatch):
    application = create_app(TestingConfig, store=api_store)
    from wordle_api.services.word_service import get_word_service
    monkeypatch.setattr(get_word_service(), "get_random_word", lambda: "CRANE")
    return application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def auth_headers():
    from wordle_api.services.auth_service import get_auth_service

    def _headers(user_id):
        token = get_auth_service().create_token(user_id)
        return {'Authorization': f'Bearer {token}'}
    return _headers
