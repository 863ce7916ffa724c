"""Phase state machine — host-driven transitions between game phases.

Legal moves::

    lobby  -> clue                  (start; needs MIN_PLAYERS, deals round 1)
    clue   -> voting | finished
    voting -> reveal | finished     (reveal scores the round)
    reveal -> clue | finished       (next round while rounds remain)

Every transition is written as one conditional UPDATE on the game row that
only matches while the game is still in the phase and round the caller saw,
so two concurrent requests cannot both advance the same game.
"""
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator
from flask import current_app
from ..extensions import db
from ..models.game import Game, GamePhase
from ..models.round import Round
from ..services.game_service import assert_host, list_players
from ..services.round_service import get_current_round_or_404, should_continue, start_round
from ..services.scoring import ScoringResult
from ..services.vote_service import apply_scoring, score_round, vote_count
from ..errors import IllegalTransitionError, InsufficientPlayersError, NoVotesError

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[GamePhase, frozenset[GamePhase]] = {
    GamePhase.LOBBY: frozenset({GamePhase.CLUE}),
    GamePhase.CLUE: frozenset({GamePhase.VOTING, GamePhase.FINISHED}),
    GamePhase.VOTING: frozenset({GamePhase.REVEAL, GamePhase.FINISHED}),
    GamePhase.REVEAL: frozenset({GamePhase.CLUE, GamePhase.FINISHED}),
    GamePhase.FINISHED: frozenset(),
}


def can_transition(from_phase: GamePhase, to_phase: GamePhase) -> bool:
    """Return True if the state machine allows moving between the phases."""
    return to_phase in ALLOWED_TRANSITIONS[from_phase]


def assert_transition(game: Game, to_phase: GamePhase) -> None:
    """Raise IllegalTransitionError unless the game may move to ``to_phase``."""
    if not can_transition(game.phase, to_phase):
        raise IllegalTransitionError(game.phase.value, to_phase.value)


def start_game(game: Game, user_id: str) -> Round:
    """Move a game from the lobby to the first clue phase.

    Args:
        game: The Game instance.
        user_id: The caller; must be the host.

    Returns:
        The newly dealt round 1.

    Raises:
        NotAuthorizedError: If the caller is not the host.
        IllegalTransitionError: If the game is not in the lobby.
        InsufficientPlayersError: If fewer than MIN_PLAYERS have joined.
        PoolExhaustedError: If there are no word pairs.
    """
    assert_host(game, user_id)
    assert_transition(game, GamePhase.CLUE)

    players = list_players(game)
    minimum = current_app.config["MIN_PLAYERS"]
    if len(players) < minimum:
        raise InsufficientPlayersError(minimum)

    with _transition(game, GamePhase.CLUE, current_round=game.current_round + 1):
        new_round = start_round(game, players)
    return new_round


def advance_to_voting(game: Game, user_id: str) -> None:
    """Close clue submission and open voting.

    The clue count is only a hint for the host; voting can open with
    clues missing.

    Raises:
        NotAuthorizedError: If the caller is not the host.
        IllegalTransitionError: If the game is not in the clue phase.
    """
    assert_host(game, user_id)
    assert_transition(game, GamePhase.VOTING)
    with _transition(game, GamePhase.VOTING):
        pass


def reveal_and_score(game: Game, user_id: str) -> ScoringResult:
    """Close voting, score the round, and reveal the result.

    Score deltas are written in the same transaction as the phase change.

    Args:
        game: The Game instance.
        user_id: The caller; must be the host.

    Returns:
        The round's ScoringResult.

    Raises:
        NotAuthorizedError: If the caller is not the host.
        IllegalTransitionError: If the game is not in the voting phase.
        NoVotesError: If nobody voted and REQUIRE_VOTE_TO_REVEAL is set.
    """
    assert_host(game, user_id)
    assert_transition(game, GamePhase.REVEAL)

    round_obj = get_current_round_or_404(game)
    if current_app.config["REQUIRE_VOTE_TO_REVEAL"] and vote_count(round_obj) == 0:
        raise NoVotesError()

    with _transition(game, GamePhase.REVEAL):
        # votes can no longer change once the phase has left voting
        result = score_round(round_obj)
        apply_scoring(round_obj, result)
    return result


def advance_from_reveal(game: Game, user_id: str) -> dict[str, Any]:
    """Deal the next round, or finish the game after the last one.

    Args:
        game: The Game instance.
        user_id: The caller; must be the host.

    Returns:
        Dict with ``finished`` and, when a round was dealt, ``round_number``.

    Raises:
        NotAuthorizedError: If the caller is not the host.
        IllegalTransitionError: If the game is not in the reveal phase.
    """
    assert_host(game, user_id)
    if game.phase != GamePhase.REVEAL:
        raise IllegalTransitionError(game.phase.value, GamePhase.CLUE.value)

    if not should_continue(game):
        with _transition(game, GamePhase.FINISHED):
            pass
        return {"finished": True}

    players = list_players(game)
    with _transition(game, GamePhase.CLUE, current_round=game.current_round + 1):
        new_round = start_round(game, players)
    return {"finished": False, "round_number": new_round.round_number}


def end_game(game: Game, user_id: str) -> None:
    """Finish the game early from any in-progress phase.

    Raises:
        NotAuthorizedError: If the caller is not the host.
        IllegalTransitionError: If the game is in the lobby or already finished.
    """
    assert_host(game, user_id)
    assert_transition(game, GamePhase.FINISHED)
    with _transition(game, GamePhase.FINISHED):
        pass


@contextmanager
def _transition(game: Game, to_phase: GamePhase, **values: Any) -> Iterator[None]:
    """Conditionally move the game row to ``to_phase`` and commit on exit.

    The UPDATE only matches while the row still has the phase and round
    number loaded into ``game``; otherwise the transition is rejected.
    Writes made inside the block share the transaction. The in-memory
    ``game`` keeps its old values until the commit expires it.
    """
    from_phase = game.phase
    result = db.session.execute(
        db.update(Game)
        .where(
            Game.id == game.id,
            Game.phase == from_phase,
            Game.current_round == game.current_round,
        )
        .values(phase=to_phase, updated_at=datetime.utcnow(), **values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.session.rollback()
        logger.warning("Game %s changed concurrently; %s -> %s rejected", game.code, from_phase.value, to_phase.value)
        raise IllegalTransitionError(from_phase.value, to_phase.value)

    try:
        yield
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info("Game %s: %s -> %s", game.code, from_phase.value, to_phase.value)
