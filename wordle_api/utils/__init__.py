"""
Utilities Package

Contains utility functions and helper modules.
"""

from .helpers import get_request_params, utcnow
from .game_logger import game_logger

__all__ = ['get_request_params', 'utcnow', 'game_logger']
