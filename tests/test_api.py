from unittest import mock

import jwt

from wordle_api import create_app
from wordle_api.config import TestingConfig as BaseTestingConfig
from wordle_api.services.stats_service import get_stats_service
from wordle_api.utils.game_logger import game_logger

ALEXA_ID = "amzn1.ask.account.API"


def call(client, headers=None, **params):
    res = client.get('/api/wordle', query_string=params, headers=headers or {})
    assert res.status_code == 200
    return res.get_json()


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert res.get_json()['endpoints'] == ['/api/wordle']


def test_health(client):
    data = call(client, action='health')
    assert data['success'] is True
    assert data['version']
    assert 'Account linking with PIN' in data['features']


def test_vocabulary_comes_from_store(client):
    data = call(client, action='palabras')
    assert data['success'] is True
    assert data['source'] == 'store'
    assert data['totalWords'] == 13
    assert data['examples'][0] == 'CRANE'


def test_unknown_action(client):
    data = call(client, action='dance')
    assert data['success'] is False
    assert 'Available actions' in data['error']


def test_missing_user_id(client):
    data = call(client, action='start')
    assert data == {'success': False, 'error': 'userId is required', 'code': 'validation_error'}


def test_play_a_game(client):
    started = call(client, action='start', userId='player-1')
    assert started['success'] is True
    assert started['message'] == 'New game started'
    assert 'targetWord' not in started['game']

    again = call(client, action='start', userId='player-1')
    assert again['message'] == 'Current game recovered'

    miss = call(client, action='guess', userId='player-1', guess='slate')
    assert miss['success'] is True
    assert miss['attemptsLeft'] == 5
    assert miss['gameStatus'] == 'playing'
    assert 'targetWord' not in miss
    assert [item['letter'] for item in miss['feedback']] == list('SLATE')

    current = call(client, action='current', userId='player-1')
    assert current['game']['attemptsLeft'] == 5
    assert 'targetWord' not in current['game']

    win = client.post('/api/wordle', json={'action': 'guess', 'userId': 'player-1', 'guess': 'CRANE'}).get_json()
    assert win['isWon'] is True
    assert win['gameStatus'] == 'won'
    assert win['targetWord'] == 'CRANE'
    assert win['historySaved'] is True

    over = call(client, action='guess', userId='player-1', guess='TRACE')
    assert over['success'] is False
    assert over['code'] == 'game_already_over'

    stats = call(client, action='stats', userId='player-1')
    assert stats['stats']['wins'] == 1
    assert stats['stats']['attemptDistribution'] == [0, 1, 0, 0, 0, 0]
    assert stats['stats']['currentStreak'] == 1

    history = call(client, action='history', userId='player-1')
    assert history['pagination']['total'] == 1
    assert history['history'][0]['score'] == 40


def test_guess_errors(client):
    assert call(client, action='guess', userId='player-1')['code'] == 'validation_error'
    assert call(client, action='guess', userId='player-1', guess='CRANES')['code'] == 'invalid_guess_length'
    assert call(client, action='guess', userId='player-1', guess='ZZZZZ')['code'] == 'unknown_word'
    assert call(client, action='guess', userId='player-1', guess='CRANE')['code'] == 'no_active_game'


def test_body_overrides_query(client):
    res = client.post('/api/wordle?action=health', json={'action': 'start', 'userId': 'player-9'})
    data = res.get_json()
    assert data['game']['userId'] == 'player-9'


def test_reset(client):
    call(client, action='start', userId='player-1')
    call(client, action='guess', userId='player-1', guess='SLATE')
    data = call(client, action='reset', userId='player-1')
    assert data['success'] is True
    assert data['game']['attemptsLeft'] == 6


def test_generate_pin_requires_token(client):
    data = call(client, action='generate-pin', userId='app-user')
    assert data['success'] is False
    assert data['code'] == 'validation_error'


def test_invalid_token_is_rejected(client):
    res = client.get('/api/wordle', query_string={'action': 'stats'},
                     headers={'Authorization': 'Bearer not-a-token'})
    assert res.status_code == 401
    assert res.get_json()['success'] is False


def test_expired_token_is_rejected(client):
    token = jwt.encode({'user_id': 'app-user', 'exp': 1}, 'test-jwt-secret', algorithm='HS256')
    res = client.get('/api/wordle', query_string={'action': 'stats'},
                     headers={'Authorization': f'Bearer {token}'})
    assert res.status_code == 401
    assert res.get_json()['error'] == 'Token has expired'


def test_link_flow(client, auth_headers):
    headers = auth_headers('app-user')

    status = call(client, headers, action='link-status')
    assert status['isLinked'] is False

    issued = call(client, headers, action='generate-pin')
    assert issued['success'] is True
    assert len(issued['pin']) == 4
    assert issued['expiresIn'] == 300

    linked = call(client, action='validate-pin', pin=issued['pin'], userId=ALEXA_ID)
    assert linked['success'] is True

    reused = call(client, action='validate-pin', pin=issued['pin'], userId=ALEXA_ID)
    assert reused['code'] == 'invalid_pin'

    status = call(client, headers, action='link-status')
    assert status['isLinked'] is True
    assert status['linkedUserId'] == ALEXA_ID

    # games played by voice show up in the app account's statistics
    call(client, action='start', userId=ALEXA_ID)
    call(client, action='guess', userId=ALEXA_ID, guess='CRANE')
    stats = call(client, headers, action='stats')
    assert stats['effectiveUserId'] == ALEXA_ID
    assert stats['stats']['wins'] == 1

    current = call(client, headers, action='current')
    assert current['game']['isWon'] is True
    assert current['game']['targetWord'] == 'CRANE'

    unlinked = call(client, headers, action='unlink')
    assert unlinked['removedLinks'] == 1
    assert call(client, headers, action='unlink')['code'] == 'no_link_exists'
    assert call(client, headers, action='stats')['effectiveUserId'] == 'app-user'


def test_cleanup_pins(client, auth_headers):
    call(client, auth_headers('app-user'), action='generate-pin')
    data = call(client, action='cleanup-pins')
    assert data['success'] is True
    assert data['deletedCount'] == 0


def test_monthly_stats_action(client):
    data = call(client, action='monthly-stats', userId='player-1', year='2026', month='1')
    assert data['success'] is True
    assert data['stats']['totalGames'] == 0
    assert data['stats']['bestDay'] is None


def test_unexpected_error_becomes_generic_failure(client, monkeypatch):
    def explode(user_id):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(get_stats_service(), 'get_user_stats', explode)
    data = call(client, action='stats', userId='player-1')
    assert data == {'success': False, 'error': 'Internal server error'}


def test_validate_pin_with_app_token_links_the_voice_identity(client, auth_headers):
    headers = auth_headers('app-user')
    pin = call(client, headers, action='generate-pin')['pin']

    missing = call(client, headers, action='validate-pin', pin=pin)
    assert missing['code'] == 'validation_error'

    own = call(client, action='validate-pin', pin=pin, userId='app-user')
    assert own['code'] == 'self_link_not_allowed'

    linked = call(client, headers, action='validate-pin', pin=pin, userId=ALEXA_ID)
    assert linked['success'] is True

    status = call(client, headers, action='link-status')
    assert status['linkedUserId'] == ALEXA_ID


class StorelessConfig(BaseTestingConfig):
    MONGO_URI = None


def test_storeless_app_still_answers_health_and_vocabulary():
    client = create_app(StorelessConfig).test_client()

    health = call(client, action='health')
    assert health['success'] is True
    assert health['storeAvailable'] is False

    words = call(client, action='palabras')
    assert words['success'] is True
    assert words['source'] == 'file'

    start = call(client, action='start', userId='player-1')
    assert start == {
        'success': False,
        'error': 'Game storage is unavailable. Try again later.',
        'code': 'store_unavailable',
    }


def test_failed_responses_are_logged_as_errors(client):
    with mock.patch.object(game_logger.logger, 'error') as log_error:
        call(client, action='guess', userId='player-1', guess='CRANE')
    assert log_error.call_count == 1
    assert 'SERVER_RESPONSE_ERROR' in log_error.call_args[0][0]
