"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import Game, GameStatus, GuessOutcome, HistoryEntry, LetterStatus
from .link import LinkedAccount, LinkPin
from .user import Caller

__all__ = [
    'Game', 'GameStatus', 'GuessOutcome', 'HistoryEntry', 'LetterStatus',
    'LinkedAccount', 'LinkPin', 'Caller'
]
