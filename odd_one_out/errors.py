"""Custom exception classes and Flask error handlers."""
import logging
from typing import Any

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error with a machine-readable code and HTTP status."""

    def __init__(self, code: str, message: str, status: int = 400) -> None:
        """Initialise the error.

        Args:
            code: Machine-readable error code.
            message: Human-readable description.
            status: HTTP status code.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.status = status


class GameNotFoundError(AppError):
    """Raised when a game with the given code does not exist."""

    def __init__(self) -> None:
        super().__init__("GAME_NOT_FOUND", "Game not found.", 404)


class PlayerNotFoundError(AppError):
    """Raised when a player is not part of the game."""

    def __init__(self, message: str = "Player not found in this game.") -> None:
        super().__init__("PLAYER_NOT_FOUND", message, 404)


class RoundNotFoundError(AppError):
    """Raised when the game has no round for its current round number."""

    def __init__(self) -> None:
        super().__init__("ROUND_NOT_FOUND", "Round not found.", 404)


class NotAuthenticatedError(AppError):
    """Raised when the caller has no user identity."""

    def __init__(self) -> None:
        super().__init__("NOT_AUTHENTICATED", "Missing user identity.", 401)


class NotAuthorizedError(AppError):
    """Raised when a non-host tries a host-only action."""

    def __init__(self, message: str = "Only the host can perform this action.") -> None:
        super().__init__("NOT_AUTHORIZED", message, 403)


class PhaseMismatchError(AppError):
    """Raised when an action is not valid for the current game phase."""

    def __init__(self, message: str = "Action not valid for the current game phase.") -> None:
        super().__init__("PHASE_MISMATCH", message, 409)


class IllegalTransitionError(AppError):
    """Raised when a phase transition is not allowed from the current phase."""

    def __init__(self, from_phase: str, to_phase: str) -> None:
        super().__init__(
            "ILLEGAL_TRANSITION",
            f"Cannot move from '{from_phase}' to '{to_phase}'.",
            409,
        )
        self.from_phase = from_phase
        self.to_phase = to_phase


class InsufficientPlayersError(AppError):
    """Raised when a round is started with too few players."""

    def __init__(self, minimum: int) -> None:
        super().__init__(
            "INSUFFICIENT_PLAYERS", f"Need at least {minimum} players to start.", 409
        )


class NoVotesError(AppError):
    """Raised when the host reveals a round nobody voted in."""

    def __init__(self) -> None:
        super().__init__("NO_VOTES", "At least one vote is required before revealing.", 409)


class SelfVoteError(AppError):
    """Raised when a player votes for themselves."""

    def __init__(self) -> None:
        super().__init__("SELF_VOTE", "You cannot vote for yourself.", 400)


class PoolExhaustedError(AppError):
    """Raised when there are no word pairs to draw from."""

    def __init__(self) -> None:
        super().__init__("POOL_EXHAUSTED", "No word pairs are available.", 503)


class CodeSpaceExhaustedError(AppError):
    """Raised when no free join code could be drawn."""

    def __init__(self) -> None:
        super().__init__("CODE_SPACE_EXHAUSTED", "Could not allocate a game code.", 503)


class ValidationError(AppError):
    """Raised when request data fails validation."""

    def __init__(self, message: str) -> None:
        super().__init__("VALIDATION_ERROR", message, 400)


def register_error_handlers(app: Any) -> None:
    """Register error handlers on the Flask app.

    Args:
        app: The Flask application instance.
    """
    from .extensions import db

    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        logger.warning("Rejected request: %s (%s)", err.code, err.message)
        return jsonify({"error": err.code, "message": err.message}), err.status

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(err: SQLAlchemyError):
        logger.exception("Storage failure")
        db.session.rollback()
        return jsonify({"error": "STORAGE_ERROR", "message": "A storage error occurred."}), 503

    @app.errorhandler(404)
    def handle_404(err):
        return jsonify({"error": "NOT_FOUND", "message": "The requested resource was not found."}), 404

    @app.errorhandler(405)
    def handle_405(err):
        return jsonify({"error": "METHOD_NOT_ALLOWED", "message": "Method not allowed."}), 405

    @app.errorhandler(500)
    def handle_500(err):
        return jsonify({"error": "INTERNAL_ERROR", "message": "An internal server error occurred."}), 500
