"""Socket.IO emitter helpers — the only place that calls socketio.emit()."""
import logging
from ..extensions import socketio
from ..models.game import Game

logger = logging.getLogger(__name__)

GAME_STATE_EVENT = "game_state_updated"


def emit_game_state(game: Game) -> None:
    """Broadcast the public game state to all clients in the game's room.

    Args:
        game: The Game instance.
    """
    from ..services.state_service import build_game_state_payload
    payload = build_game_state_payload(game)
    socketio.emit(GAME_STATE_EVENT, payload, to=game.code)
    logger.debug("Broadcast state for game %s (phase=%s)", game.code, game.phase.value)


def emit_game_state_to(game: Game, sid: str) -> None:
    """Send the public game state to a single socket.

    Args:
        game: The Game instance.
        sid: The Socket.IO session ID.
    """
    from ..services.state_service import build_game_state_payload
    socketio.emit(GAME_STATE_EVENT, build_game_state_payload(game), to=sid)
