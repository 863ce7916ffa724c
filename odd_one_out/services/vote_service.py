"""Vote service — vote validation, recording, and round scoring."""
import logging
from datetime import datetime
from typing import Hashable, Sequence
from ..extensions import db
from ..models.game import Game, GamePhase
from ..models.player import Player
from ..models.round import Round
from ..models.vote import Vote
from ..services.game_service import phase_guard
from ..services.scoring import CORRECT_VOTE_POINTS, ESCAPE_POINTS, ScoringResult, calculate_scoring
from ..services.round_service import get_current_round_or_404
from ..utils.upsert import upsert
from ..errors import PhaseMismatchError, PlayerNotFoundError, SelfVoteError

logger = logging.getLogger(__name__)

VOTING_PHASE_ONLY = "Votes can only be cast during the voting phase."


def is_vote_valid(voter_id: Hashable, suspect_id: Hashable) -> bool:
    """Return False when a player votes for themselves.

    Any other player in the game is a valid suspect, including one who
    never submitted a clue.
    """
    return voter_id != suspect_id


def submit_vote(game: Game, voter: Player, suspect_id: int) -> Vote:
    """Record or replace a player's vote for the current round.

    Args:
        game: The Game instance.
        voter: The player casting the vote.
        suspect_id: Player id of the suspected odd player.

    Returns:
        The stored Vote.

    Raises:
        PhaseMismatchError: If the game is not in the voting phase.
        SelfVoteError: If the voter names themselves.
        PlayerNotFoundError: If the suspect is not in this game.
    """
    if game.phase != GamePhase.VOTING:
        raise PhaseMismatchError(VOTING_PHASE_ONLY)
    if not is_vote_valid(voter.id, suspect_id):
        raise SelfVoteError()

    suspect = db.session.get(Player, suspect_id)
    if suspect is None or suspect.game_id != game.id:
        raise PlayerNotFoundError("Suspect is not a player in this game.")

    round_obj = get_current_round_or_404(game)
    vote = upsert(
        Vote,
        {"round_id": round_obj.id, "voter_id": voter.id},
        {"suspect_id": suspect.id, "submitted_at": datetime.utcnow()},
        guard=phase_guard(game, GamePhase.VOTING, VOTING_PHASE_ONLY),
    )
    logger.debug("Game %s round %d: vote from player %s", game.code, round_obj.round_number, voter.id)
    return vote


def votes_for_round(round_obj: Round) -> list[Vote]:
    """Return the round's votes in submission order."""
    return list(
        db.session.execute(
            db.select(Vote).where(Vote.round_id == round_obj.id).order_by(Vote.submitted_at, Vote.id)
        ).scalars().all()
    )


def vote_count(round_obj: Round) -> int:
    """Return how many players have voted this round."""
    return db.session.execute(
        db.select(db.func.count()).select_from(Vote).where(Vote.round_id == round_obj.id)
    ).scalar() or 0


def score_round(round_obj: Round) -> ScoringResult:
    """Compute the round's scoring from its stored votes without writing."""
    votes = [(v.voter_id, v.suspect_id) for v in votes_for_round(round_obj)]
    player_ids = db.session.execute(
        db.select(Player.id).where(Player.game_id == round_obj.game_id).order_by(Player.id)
    ).scalars().all()
    return calculate_scoring(votes, round_obj.odd_player_id, player_ids)


def apply_scoring(round_obj: Round, result: ScoringResult) -> None:
    """Add the round's point deltas to player scores and record the summary.

    Scores are incremented in the database and left uncommitted; the caller
    commits them with the phase change so either every delta lands or none.

    Args:
        round_obj: The round being scored.
        result: Output of score_round for this round.
    """
    for player_id, delta in result.deltas.items():
        if delta <= 0:
            continue
        db.session.execute(
            db.update(Player)
            .where(Player.id == player_id, Player.game_id == round_obj.game_id)
            .values(score=Player.score + delta)
        )
    round_obj.correct_votes = result.correct_votes
    round_obj.total_votes = result.total_votes
    round_obj.odd_player_escaped = result.odd_player_escaped
    round_obj.scored_at = datetime.utcnow()
    logger.info(
        "Round %d of game %s scored: %d/%d correct, odd player %s",
        round_obj.round_number,
        round_obj.game_id,
        result.correct_votes,
        result.total_votes,
        "escaped" if result.odd_player_escaped else "caught",
    )


def applied_scoring(round_obj: Round, player_ids: Sequence[int]) -> ScoringResult | None:
    """Rebuild the scoring applied when the round was revealed.

    Counts and the escape flag come from the summary stored at reveal time.
    Votes are frozen once voting closes, so the correct voters are read back
    from them.

    Returns:
        The applied ScoringResult, or None if the round was never scored.
    """
    if round_obj.scored_at is None:
        return None
    correct_voter_ids = [
        v.voter_id for v in votes_for_round(round_obj) if v.suspect_id == round_obj.odd_player_id
    ]
    deltas = {pid: 0 for pid in player_ids}
    for voter_id in correct_voter_ids:
        deltas[voter_id] = CORRECT_VOTE_POINTS
    deltas[round_obj.odd_player_id] = ESCAPE_POINTS if round_obj.odd_player_escaped else 0
    return ScoringResult(
        odd_player_escaped=bool(round_obj.odd_player_escaped),
        total_votes=round_obj.total_votes or 0,
        correct_voter_ids=correct_voter_ids,
        deltas=deltas,
    )
