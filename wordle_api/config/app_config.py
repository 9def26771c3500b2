"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env (optional)
load_dotenv(os.getenv('WORDLE_CONFIG_FILE', 'config.env'))

_CONFIG_DIR = os.path.dirname(os.path.abspath(__file__))


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    TESTING = False

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 3000))
    API_VERSION = os.getenv('API_VERSION', '2.1.0')

    # Database Settings
    MONGO_URI = os.getenv('MONGO_URI')
    MONGO_DB_NAME = os.getenv('MONGO_DB_NAME', 'wordle_game')

    # Authentication Settings
    JWT_SECRET = os.getenv('JWT_SECRET')
    JWT_ALGORITHM = os.getenv('JWT_ALGORITHM', 'HS256')
    JWT_EXPIRATION_DAYS = int(os.getenv('JWT_EXPIRATION_DAYS', 7))

    # Account Linking Settings
    PIN_TTL_SECONDS = int(os.getenv('PIN_TTL_SECONDS', 300))
    PIN_CLEANUP_INTERVAL_SECONDS = int(os.getenv('PIN_CLEANUP_INTERVAL_SECONDS', 60))
    SECONDARY_ID_PREFIX = os.getenv('SECONDARY_ID_PREFIX', 'amzn1.')

    # Vocabulary Settings
    WORD_LIST_FILE = os.getenv('WORD_LIST_FILE', os.path.join(_CONFIG_DIR, 'words.json'))

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    JWT_SECRET = 'test-jwt-secret'
    MONGO_DB_NAME = 'wordle_game_test'


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
