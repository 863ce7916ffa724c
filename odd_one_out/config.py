"""Application configuration classes."""
import os


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


class Config:
    """Base configuration."""

    SECRET_KEY: str = os.environ.get("SECRET_KEY", "dev-secret-change-in-production")
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "sqlite:///odd_one_out.db")
    SQLALCHEMY_DATABASE_URI: str = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    CORS_ORIGINS: str = os.environ.get("CORS_ORIGINS", "*")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
    SOCKETIO_ASYNC_MODE: str = os.environ.get("SOCKETIO_ASYNC_MODE", "eventlet")

    # Game rules
    DEFAULT_TOTAL_ROUNDS: int = int(os.environ.get("DEFAULT_TOTAL_ROUNDS", "5"))
    MAX_TOTAL_ROUNDS: int = int(os.environ.get("MAX_TOTAL_ROUNDS", "10"))
    MIN_PLAYERS: int = int(os.environ.get("MIN_PLAYERS", "3"))
    CLUE_MAX_LENGTH: int = int(os.environ.get("CLUE_MAX_LENGTH", "200"))
    DISPLAY_NAME_MAX_LENGTH: int = 50
    # When False, revealing a round with no votes lets the odd player escape
    REQUIRE_VOTE_TO_REVEAL: bool = _env_flag("REQUIRE_VOTE_TO_REVEAL", "true")
    # Load the default word pool on startup when the table is empty
    SEED_WORD_PAIRS: bool = _env_flag("SEED_WORD_PAIRS", "true")


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG: bool = True
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "DEBUG")


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG: bool = False


class TestingConfig(Config):
    """Test configuration: in-memory database, no eventlet."""

    TESTING: bool = True
    SQLALCHEMY_DATABASE_URI: str = "sqlite://"
    SOCKETIO_ASYNC_MODE: str = "threading"
    LOG_LEVEL: str = "WARNING"
    SEED_WORD_PAIRS: bool = False


config_map = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
