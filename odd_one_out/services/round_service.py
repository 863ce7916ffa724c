"""Round service — round creation, odd player assignment, and clue handling."""
import logging
import random
from datetime import datetime
from typing import Hashable, Sequence
from flask import current_app
from ..extensions import db
from ..models.game import Game, GamePhase
from ..models.player import Player
from ..models.round import Round
from ..models.clue import Clue
from ..services.game_service import phase_guard
from ..services.word_pair_service import draw_word_pair
from ..utils.upsert import upsert
from ..errors import (
    InsufficientPlayersError,
    PhaseMismatchError,
    RoundNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

CLUE_PHASE_ONLY = "Clues can only be submitted during the clue phase."


def pick_odd_player(player_ids: Sequence[Hashable]) -> Hashable:
    """Pick the round's odd player uniformly at random.

    Each round draws independently, so the same player can be odd twice
    in a row.

    Args:
        player_ids: Ids of every player in the game.

    Returns:
        One of the given ids.
    """
    return random.choice(list(player_ids))


def start_round(game: Game, players: Sequence[Player]) -> Round:
    """Deal a new round: draw a word pair and an odd player.

    The round is added and flushed but not committed, so the caller can
    commit it together with the phase change.

    Args:
        game: The Game instance; the round is numbered current_round + 1.
        players: Everyone in the game.

    Returns:
        The new Round instance.

    Raises:
        InsufficientPlayersError: If fewer than MIN_PLAYERS are given.
        PoolExhaustedError: If there are no word pairs to draw from.
    """
    minimum = current_app.config["MIN_PLAYERS"]
    if len(players) < minimum:
        raise InsufficientPlayersError(minimum)

    pair = draw_word_pair()
    odd_player_id = pick_odd_player([p.id for p in players])

    new_round = Round(
        game_id=game.id,
        round_number=game.current_round + 1,
        group_word=pair.group_word,
        odd_word=pair.odd_word,
        odd_player_id=odd_player_id,
    )
    db.session.add(new_round)
    db.session.flush()

    logger.info("Game %s: dealt round %d", game.code, new_round.round_number)
    return new_round


def should_continue(game: Game) -> bool:
    """Return True if the game has rounds left to play."""
    return game.current_round < game.total_rounds


def get_current_round(game: Game) -> Round | None:
    """Return the round the game is on, or None while in the lobby."""
    if game.current_round == 0:
        return None
    return db.session.execute(
        db.select(Round).where(
            Round.game_id == game.id,
            Round.round_number == game.current_round,
        )
    ).scalar_one_or_none()


def get_current_round_or_404(game: Game) -> Round:
    """Return the current round.

    Raises:
        RoundNotFoundError: If the game has no round for its current number.
    """
    round_obj = get_current_round(game)
    if round_obj is None:
        raise RoundNotFoundError()
    return round_obj


def submit_clue(game: Game, player: Player, clue_text: str) -> Clue:
    """Record or replace a player's clue for the current round.

    Args:
        game: The Game instance.
        player: The submitting player.
        clue_text: The clue; surrounding whitespace is dropped.

    Returns:
        The stored Clue.

    Raises:
        PhaseMismatchError: If the game is not in the clue phase.
        ValidationError: If the clue is empty or too long.
        RoundNotFoundError: If the current round is missing.
    """
    if game.phase != GamePhase.CLUE:
        raise PhaseMismatchError(CLUE_PHASE_ONLY)

    text = (clue_text or "").strip()
    max_length = current_app.config["CLUE_MAX_LENGTH"]
    if not text:
        raise ValidationError("clue_text is required.")
    if len(text) > max_length:
        raise ValidationError(f"clue_text must be {max_length} characters or fewer.")

    round_obj = get_current_round_or_404(game)
    clue = upsert(
        Clue,
        {"round_id": round_obj.id, "player_id": player.id},
        {"clue_text": text, "submitted_at": datetime.utcnow()},
        guard=phase_guard(game, GamePhase.CLUE, CLUE_PHASE_ONLY),
    )
    logger.debug("Game %s round %d: clue from player %s", game.code, round_obj.round_number, player.id)
    return clue


def clue_count(round_obj: Round) -> int:
    """Return how many players have submitted a clue this round."""
    return db.session.execute(
        db.select(db.func.count()).select_from(Clue).where(Clue.round_id == round_obj.id)
    ).scalar() or 0


def clues_for_round(round_obj: Round) -> list[Clue]:
    """Return the round's clues in submission order."""
    return list(
        db.session.execute(
            db.select(Clue).where(Clue.round_id == round_obj.id).order_by(Clue.submitted_at, Clue.id)
        ).scalars().all()
    )
