"""
Game Logger Module for the Wordle API

This module provides structured logging for user actions, server responses,
game events and account linking events.
"""

import logging
import json
import os
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path

# Response keys that must never reach the log files
_SECRET_KEYS = ('pin', 'token')


class GameLogger:
    """
    Centralized logging system for the Wordle API.

    Features:
    - User action tracking with IP and player identity
    - Server response logging
    - Game and linking event logging
    - JSON structured logs for easy parsing
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, str(level).upper(), logging.INFO)

        # Setup main game logger
        self.logger = self._setup_logger()

    def _log_file(self) -> Path:
        return self.log_dir / f"game_log_{datetime.now().strftime('%Y-%m-%d')}.log"

    def _setup_logger(self) -> logging.Logger:
        """Setup the main game logger with file handler."""
        logger = logging.getLogger('wordle_api')
        logger.setLevel(self.level)

        # Prevent duplicate handlers
        if logger.handlers:
            logger.handlers.clear()

        # File handler for detailed logs
        file_handler = logging.FileHandler(self._log_file(), encoding='utf-8')
        file_handler.setLevel(self.level)

        # Console handler for only important messages (WARNING and above)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)

        file_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_formatter = logging.Formatter(
            '%(levelname)s: %(message)s'
        )

        file_handler.setFormatter(file_formatter)
        console_handler.setFormatter(console_formatter)

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

        return logger

    def _get_user_identity(self, request, user_id: Optional[str] = None) -> Dict[str, Optional[str]]:
        """Extract user identity information from request."""
        user_ip = getattr(request, 'remote_addr', None) or 'unknown'
        return {
            'user_ip': user_ip,
            'user_id': user_id
        }

    def _create_log_entry(self,
                          event_type: str,
                          action: str,
                          user_info: Dict[str, Optional[str]],
                          details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'user': user_info,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def log_user_action(self,
                        request,
                        action: str,
                        user_id: Optional[str] = None,
                        **kwargs):
        """
        Log user actions with full context.

        Args:
            request: Flask request object
            action: API action (e.g., 'start', 'guess', 'generate-pin')
            user_id: Caller identity if known
            **kwargs: Additional details to log
        """
        user_info = self._get_user_identity(request, user_id)

        details = {
            'endpoint': getattr(request, 'endpoint', None),
            'method': getattr(request, 'method', None),
            **kwargs
        }

        log_message = self._create_log_entry('USER_ACTION', action, user_info, details)
        self.logger.info(log_message)

    def log_server_response(self,
                            request,
                            action: str,
                            success: bool,
                            response_data: Dict[str, Any],
                            user_id: Optional[str] = None,
                            **kwargs):
        """
        Log server responses with full context.

        Args:
            request: Flask request object
            action: Action that was performed
            success: Whether the action succeeded
            response_data: Data being returned to client
            user_id: Caller identity if known
            **kwargs: Additional details to log
        """
        user_info = self._get_user_identity(request, user_id)

        details = {
            'success': success,
            'response_size': len(str(response_data)),
            'response_data': self._sanitize_response_data(response_data),
            **kwargs
        }

        event_type = 'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR'
        log_message = self._create_log_entry(event_type, action, user_info, details)

        if success:
            self.logger.info(log_message)
        else:
            self.logger.error(log_message)

    def log_game_event(self,
                       user_id: Optional[str],
                       event: str,
                       **kwargs):
        """
        Log game and linking events (wins, losses, links, cleanups).

        Args:
            user_id: Identity the event belongs to (None for system events)
            event: Type of event (e.g., 'game_won', 'accounts_linked')
            **kwargs: Additional event details
        """
        user_info = {'user_ip': None, 'user_id': user_id}
        log_message = self._create_log_entry('GAME_EVENT', event, user_info, dict(kwargs))
        self.logger.info(log_message)

    def log_error(self,
                  request,
                  error: Exception,
                  action: str,
                  user_id: Optional[str] = None):
        """
        Log unexpected errors with full context.

        Args:
            request: Flask request object (None outside a request)
            error: Exception that occurred
            action: Action that was being performed
            user_id: Caller identity if known
        """
        user_info = self._get_user_identity(request, user_id)

        details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'action': action
        }

        log_message = self._create_log_entry('ERROR', action, user_info, details)
        self.logger.error(log_message)

    def _sanitize_response_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Remove secrets (PINs, tokens, hidden target words) from response logs."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        sanitized = {key: value for key, value in data.items() if key not in _SECRET_KEYS}

        if 'game' in sanitized and isinstance(sanitized['game'], dict):
            game = sanitized['game']
            sanitized['game'] = {
                'attemptsLeft': game.get('attemptsLeft'),
                'gameStatus': game.get('gameStatus'),
                'attemptsCount': len(game.get('attempts', [])),
                'answerRevealed': 'targetWord' in game
            }

        if 'attempts' in sanitized and isinstance(sanitized['attempts'], list):
            sanitized['attempts'] = len(sanitized['attempts'])

        if 'history' in sanitized and isinstance(sanitized['history'], list):
            sanitized['history'] = len(sanitized['history'])

        return sanitized


# Global logger instance
game_logger = GameLogger(os.getenv('LOG_DIR', 'logs'), os.getenv('LOG_LEVEL', 'INFO'))
