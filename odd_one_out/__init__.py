"""Application factory."""
import logging
import os

from flask import Flask, jsonify

from .config import config_map
from .extensions import db, migrate, socketio, cors
from .errors import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(env: str | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        env: Configuration environment name. Defaults to FLASK_ENV env var.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Load configuration
    env = env or os.environ.get("FLASK_ENV", "default")
    app.config.from_object(config_map.get(env, config_map["default"]))

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Handlers queued before init_app are attached to every app's server
    from .sockets import register_handlers
    register_handlers()

    # Initialise extensions
    db.init_app(app)
    migrate.init_app(app, db)
    cors_origins = app.config["CORS_ORIGINS"]
    cors.init_app(app, resources={r"/*": {"origins": cors_origins}})
    socketio.init_app(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=app.config["SOCKETIO_ASYNC_MODE"],
        logger=False,
        engineio_logger=False,
    )

    # Import models so Alembic can detect them
    with app.app_context():
        from .models import game, player, round, clue, vote, word_pair  # noqa: F401

        # Auto-create tables if they don't exist (e.g. fresh SQLite volume)
        db.create_all()

        if app.config["SEED_WORD_PAIRS"]:
            from .services.word_pair_service import seed_word_pairs
            seed_word_pairs()

    # Register blueprints
    from .api import register_blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    from .cli import register_commands
    register_commands(app)

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    logger.info("Application created (env=%s)", env)
    return app
