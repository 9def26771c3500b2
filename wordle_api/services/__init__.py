"""
Services Package

Contains all business logic and service classes.
"""

from .auth_service import AuthService, get_auth_service
from .dispatcher import ActionDispatcher, get_dispatcher
from .game_service import GameService, get_game_service
from .link_service import LinkService, get_link_service
from .stats_service import StatsService, get_stats_service
from .store import GameStore, get_store
from .word_service import WordService, get_word_service

__all__ = [
    'AuthService', 'get_auth_service',
    'ActionDispatcher', 'get_dispatcher',
    'GameService', 'get_game_service',
    'LinkService', 'get_link_service',
    'StatsService', 'get_stats_service',
    'GameStore', 'get_store',
    'WordService', 'get_word_service'
]
