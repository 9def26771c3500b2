"""
Wordle API Application Package

Server-side word-guessing game with persistent per-player games, statistics
derived from game history, and PIN-based linking between app accounts and
voice-assistant accounts.
"""

from flask import Flask
from flask_cors import CORS
from .config import Config


def create_app(config_class=Config, store=None):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use
        store: Already-connected GameStore; when omitted one is created
            from MONGO_URI

    Returns:
        Flask application instance with all services initialized
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)

    initialize_services(config_class, store)

    # Register blueprints
    from .controllers.wordle_controller import wordle_bp, index_bp

    app.register_blueprint(wordle_bp, url_prefix='/api')
    app.register_blueprint(index_bp)

    return app


def initialize_services(config_class=Config, store=None):
    """Wire the store and every service singleton. Returns the store (None if unavailable).

    Services are always built so storeless actions keep answering; the
    dispatcher refuses store-backed actions while the store is missing.
    """
    from .services.auth_service import initialize_auth_service
    from .services.dispatcher import initialize_dispatcher
    from .services.game_service import initialize_game_service
    from .services.link_service import initialize_link_service
    from .services.stats_service import initialize_stats_service
    from .services.store import initialize_store, set_store
    from .services.word_service import initialize_word_service

    if store is None and config_class.MONGO_URI:
        store = initialize_store(config_class.MONGO_URI, config_class.MONGO_DB_NAME)
    set_store(store)

    initialize_auth_service(config_class.JWT_SECRET, config_class.JWT_ALGORITHM,
                            config_class.JWT_EXPIRATION_DAYS)

    if store is None:
        print("✗ Store unavailable - only health and vocabulary actions will succeed")

    word_service = initialize_word_service(store, config_class.WORD_LIST_FILE)
    game_service = initialize_game_service(store, word_service)
    stats_service = initialize_stats_service(store)
    link_service = initialize_link_service(store, config_class.PIN_TTL_SECONDS,
                                           config_class.SECONDARY_ID_PREFIX)
    initialize_dispatcher(game_service, stats_service, link_service, word_service,
                          store, config_class.API_VERSION)
    return store
