"""
Wordle Controller

Single action-dispatch endpoint. Parameters may come from the query string,
a form or a JSON body (body wins); the caller identity comes from a bearer
token or, failing that, the ``userId`` parameter.
"""

from datetime import datetime, timezone

from flask import Blueprint, request, jsonify

from ..models.user import Caller
from ..services.auth_service import AuthenticationError, get_auth_service
from ..services.dispatcher import get_dispatcher
from ..utils.game_logger import game_logger
from ..utils.helpers import get_request_params

wordle_bp = Blueprint('wordle', __name__)
index_bp = Blueprint('index', __name__)


def _resolve_caller(params) -> Caller:
    auth_header = request.headers.get('Authorization')
    auth_service = get_auth_service()
    if auth_service:
        return auth_service.resolve_caller(auth_header, params)

    if auth_header and auth_header.startswith('Bearer '):
        raise AuthenticationError('Authentication service unavailable')

    user_id = params.get('userId')
    user_id = str(user_id).strip() if user_id is not None else None
    return Caller(identity=user_id or None, authenticated=False)


@wordle_bp.route('/wordle', methods=['GET', 'POST'])
def wordle_action():
    """Run one game, statistics or account linking action."""
    params = get_request_params()
    action = params.get('action')

    dispatcher = get_dispatcher()
    if not dispatcher:
        return jsonify({
            'success': False,
            'error': 'Game service unavailable'
        }), 500

    try:
        caller = _resolve_caller(params)
    except AuthenticationError as e:
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, str(action), False, error_response)
        return jsonify(error_response), 401

    game_logger.log_user_action(
        request, str(action), caller.identity,
        authenticated=caller.authenticated
    )

    result = dispatcher.dispatch(params, caller, request)

    game_logger.log_server_response(request, str(action), result.get('success', False), result, caller.identity)

    return jsonify(result)


@index_bp.route('/', methods=['GET'])
def index():
    """Liveness probe."""
    return jsonify({
        'success': True,
        'message': 'Wordle API running',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'endpoints': ['/api/wordle']
    })
