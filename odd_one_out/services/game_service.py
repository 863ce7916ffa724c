"""Game lifecycle service — creation, joining, and lookups."""
import logging
from datetime import datetime
from typing import Any, Callable
from flask import current_app
from sqlalchemy.exc import IntegrityError
from ..extensions import db
from ..models.game import Game, GameMode, GamePhase
from ..models.player import Player
from ..utils.code_generator import generate_game_code
from ..errors import (
    CodeSpaceExhaustedError,
    GameNotFoundError,
    NotAuthorizedError,
    PhaseMismatchError,
    PlayerNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 50


def create_game(
    user_id: str,
    display_name: str,
    mode: str = GameMode.CLASSIC.value,
    total_rounds: int | None = None,
) -> dict[str, Any]:
    """Create a new game and its host player.

    Args:
        user_id: Identity of the creating user; becomes the host.
        display_name: The host's chosen display name.
        mode: "classic" or "blind".
        total_rounds: Rounds to play. Defaults to DEFAULT_TOTAL_ROUNDS.

    Returns:
        Dict with game_code, player_id, and player data.

    Raises:
        ValidationError: If the mode or round count is invalid.
    """
    try:
        game_mode = GameMode(mode)
    except ValueError:
        raise ValidationError("mode must be 'classic' or 'blind'.") from None

    if total_rounds is None:
        total_rounds = current_app.config["DEFAULT_TOTAL_ROUNDS"]
    max_rounds = current_app.config["MAX_TOTAL_ROUNDS"]
    if not 1 <= total_rounds <= max_rounds:
        raise ValidationError(f"total_rounds must be between 1 and {max_rounds}.")

    for _ in range(MAX_CODE_ATTEMPTS):
        code = _unique_game_code()
        try:
            game, player = _insert_game(code, user_id, display_name, game_mode, total_rounds)
            break
        except IntegrityError:
            # another request stored the same code after our existence check
            db.session.rollback()
            logger.info("Join code %s was taken concurrently; drawing again", code)
    else:
        raise CodeSpaceExhaustedError()

    logger.info("Game %s created by %s (%s, %d rounds)", code, user_id, game_mode.value, total_rounds)
    return {
        "game_code": game.code,
        "player_id": player.id,
        "player": player_dict(player),
    }


def join_game(code: str, user_id: str, display_name: str) -> dict[str, Any]:
    """Join a game, or return the caller's existing seat when rejoining.

    Args:
        code: The game code to join.
        user_id: Identity of the joining user.
        display_name: Desired display name.

    Returns:
        Dict with player_id, player data, and whether this was a rejoin.

    Raises:
        GameNotFoundError: If no game with that code exists.
        PhaseMismatchError: If the game has finished.
    """
    game = get_game_or_404(code)

    existing = find_player(game, user_id)
    if existing is not None:
        return {"player_id": existing.id, "player": player_dict(existing), "rejoined": True}

    if game.phase == GamePhase.FINISHED:
        raise PhaseMismatchError("This game has ended.")

    player = Player(
        game_id=game.id,
        user_id=user_id,
        display_name=display_name,
        score=0,
        is_host=False,
    )
    db.session.add(player)
    db.session.commit()

    logger.info("Player %s joined game %s", player.id, game.code)
    return {"player_id": player.id, "player": player_dict(player), "rejoined": False}


def get_game_or_404(code: str) -> Game:
    """Fetch game by code or raise GameNotFoundError.

    Args:
        code: The game code to look up (case-insensitive).

    Returns:
        The matching Game instance.

    Raises:
        GameNotFoundError: If not found.
    """
    game = db.session.execute(
        db.select(Game).where(Game.code == code.upper())
    ).scalar_one_or_none()
    if game is None:
        raise GameNotFoundError()
    return game


def find_player(game: Game, user_id: str) -> Player | None:
    """Return the user's player in this game, if any."""
    return db.session.execute(
        db.select(Player).where(Player.game_id == game.id, Player.user_id == user_id)
    ).scalar_one_or_none()


def get_player_or_404(game: Game, user_id: str) -> Player:
    """Return the user's player in this game.

    Raises:
        PlayerNotFoundError: If the user has not joined the game.
    """
    player = find_player(game, user_id)
    if player is None:
        raise PlayerNotFoundError("You are not a player in this game.")
    return player


def list_players(game: Game) -> list[Player]:
    """Return the game's players in join order."""
    return list(
        db.session.execute(
            db.select(Player).where(Player.game_id == game.id).order_by(Player.id)
        ).scalars().all()
    )


def assert_host(game: Game, user_id: str) -> None:
    """Raise NotAuthorizedError if the user is not the game's host.

    Args:
        game: The Game instance.
        user_id: The caller's identity.

    Raises:
        NotAuthorizedError: If the caller is not the host.
    """
    if game.host_id != user_id:
        raise NotAuthorizedError()


def player_dict(player: Player) -> dict[str, Any]:
    """Serialise a Player instance to a dict.

    Args:
        player: The Player instance.

    Returns:
        Dict with player fields.
    """
    return {
        "id": player.id,
        "display_name": player.display_name,
        "score": player.score,
        "is_host": player.is_host,
    }


def phase_guard(game: Game, phase: GamePhase, message: str) -> Callable[[], None]:
    """Return a check that the game is still in ``phase`` on its current round.

    The check is a conditional UPDATE on the game row, run inside the
    caller's write transaction. A transition committed first makes it fail;
    a transition arriving later waits on the row until the write commits.

    Args:
        game: The Game instance as the caller loaded it.
        phase: The phase the caller's write belongs to.
        message: Message for the PhaseMismatchError raised on failure.
    """
    game_id, round_number = game.id, game.current_round

    def check() -> None:
        result = db.session.execute(
            db.update(Game)
            .where(
                Game.id == game_id,
                Game.phase == phase,
                Game.current_round == round_number,
            )
            .values(updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            db.session.rollback()
            raise PhaseMismatchError(message)

    return check


def _insert_game(
    code: str,
    user_id: str,
    display_name: str,
    game_mode: GameMode,
    total_rounds: int,
) -> tuple[Game, Player]:
    """Store a new lobby game and its host player in one commit."""
    game = Game(
        code=code,
        host_id=user_id,
        mode=game_mode,
        phase=GamePhase.LOBBY,
        current_round=0,
        total_rounds=total_rounds,
    )
    db.session.add(game)
    db.session.flush()  # Get game.id without committing

    player = Player(
        game_id=game.id,
        user_id=user_id,
        display_name=display_name,
        score=0,
        is_host=True,
    )
    db.session.add(player)
    db.session.commit()
    return game, player


def _unique_game_code() -> str:
    """Draw join codes until one is not used by any stored game."""
    for _ in range(MAX_CODE_ATTEMPTS):
        code = generate_game_code()
        existing = db.session.execute(
            db.select(Game.id).where(Game.code == code)
        ).scalar_one_or_none()
        if existing is None:
            return code
    logger.error("Could not find a free join code after %d attempts", MAX_CODE_ATTEMPTS)
    raise CodeSpaceExhaustedError()
