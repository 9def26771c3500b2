"""
Wordle API - Main Entry Point

Initializes the store and services and starts the Flask application,
together with a background worker that purges expired link PINs.
"""

import threading
import time
from wordle_api import create_app
from wordle_api.config import Config
from wordle_api.services.link_service import get_link_service
from wordle_api.services.store import get_store
from wordle_api.utils.game_logger import game_logger


def pin_cleanup_worker(interval_seconds: int):
    """
    Background worker that periodically removes link PINs past their
    validity window. Runs every ``interval_seconds``.
    """
    print("PIN cleanup worker started")
    while True:
        try:
            link_service = get_link_service()
            if link_service:
                deleted = link_service.cleanup_expired_pins()
                if deleted > 0:
                    game_logger.log_game_event(None, 'pins_cleaned', deleted_count=deleted, automatic=True)
        except Exception as e:
            game_logger.logger.error(f"Error in PIN cleanup worker: {e}")

        time.sleep(interval_seconds)


def main():
    """Main function to initialize services and start the server."""
    try:
        print("Initializing services...")

        if not Config.MONGO_URI:
            print("✗ MongoDB URI not configured")
        if not Config.JWT_SECRET:
            print("✗ JWT secret not configured - only userId fallback identities are accepted")

        app = create_app(Config)
        print("✓ Flask application created successfully")

        if get_store():
            cleanup_thread = threading.Thread(
                target=pin_cleanup_worker,
                args=(Config.PIN_CLEANUP_INTERVAL_SECONDS,),
                daemon=True
            )
            cleanup_thread.start()
            print(f"✓ PIN cleanup worker started - checking every {Config.PIN_CLEANUP_INTERVAL_SECONDS} seconds")

        game_logger.logger.info("Wordle API starting")

        print(f"\nStarting Wordle API on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print("=" * 50)

        app.run(host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Wordle API shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise
    finally:
        store = get_store()
        if store is not None:
            store.close_connection()


if __name__ == '__main__':
    main()
