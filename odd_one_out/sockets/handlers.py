"""Socket.IO event handlers."""
import logging
from flask import request
from flask_socketio import join_room, leave_room
from ..extensions import socketio, db
from ..models.player import Player
from ..models.game import Game
from .emitters import emit_game_state_to

logger = logging.getLogger(__name__)


def _resolve(data: dict) -> tuple[Game, Player] | None:
    """Look up the game and the user's player in it from an event payload."""
    if not isinstance(data, dict):
        return None
    game_code = (data.get("game_code") or "").upper()
    user_id = data.get("user_id") or ""
    if not game_code or not user_id:
        return None

    game = db.session.execute(
        db.select(Game).where(Game.code == game_code)
    ).scalar_one_or_none()
    if game is None:
        return None

    player = db.session.execute(
        db.select(Player).where(Player.game_id == game.id, Player.user_id == user_id)
    ).scalar_one_or_none()
    if player is None:
        return None
    return game, player


@socketio.on("join_game_room")
def handle_join_game_room(data: dict) -> None:
    """Subscribe a client to its game's change feed.

    The client is sent the current state straight away so it does not have
    to wait for the next change.

    Args:
        data: Dict containing game_code and user_id.
    """
    resolved = _resolve(data)
    if resolved is None:
        logger.warning("join_game_room rejected for sid %s", request.sid)
        return
    game, player = resolved

    join_room(game.code)
    logger.debug("Player %s subscribed to game %s", player.id, game.code)
    emit_game_state_to(game, request.sid)


@socketio.on("leave_game_room")
def handle_leave_game_room(data: dict) -> None:
    """Unsubscribe a client from its game's change feed.

    Args:
        data: Dict containing game_code and user_id.
    """
    resolved = _resolve(data)
    if resolved is None:
        return
    game, player = resolved
    leave_room(game.code)
    logger.debug("Player %s unsubscribed from game %s", player.id, game.code)
