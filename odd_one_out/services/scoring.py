"""Round scoring rules.

Everything here is a pure function of the votes cast in a round, so it can be
tested without a database. Rules:

- The odd player escapes when fewer than half of the votes name them. A round
  with no votes at all counts as an escape.
- Every voter who named the odd player gets ``CORRECT_VOTE_POINTS``.
- The odd player gets ``ESCAPE_POINTS`` if they escaped and nothing otherwise;
  they never earn the correct-voter point.
"""
from dataclasses import dataclass, field
from typing import Hashable, Iterable, Sequence

CORRECT_VOTE_POINTS = 1
ESCAPE_POINTS = 2


@dataclass(frozen=True)
class ScoringResult:
    """Outcome of a round's vote."""

    odd_player_escaped: bool
    total_votes: int
    correct_voter_ids: list = field(default_factory=list)
    deltas: dict = field(default_factory=dict)

    @property
    def correct_votes(self) -> int:
        return len(self.correct_voter_ids)

    @property
    def points_for_odd_player(self) -> int:
        return ESCAPE_POINTS if self.odd_player_escaped else 0


def calculate_scoring(
    votes: Sequence[tuple[Hashable, Hashable]],
    odd_player_id: Hashable,
    player_ids: Iterable[Hashable] = (),
) -> ScoringResult:
    """Score a round.

    Args:
        votes: ``(voter_id, suspect_id)`` pairs, at most one per voter.
        odd_player_id: The player who was dealt the odd word.
        player_ids: Everyone in the game; each gets an entry in ``deltas``.

    Returns:
        A ScoringResult whose ``deltas`` maps player id to points earned.
    """
    total_votes = len(votes)

    correct_voter_ids: list = []
    for voter_id, suspect_id in votes:
        if suspect_id == odd_player_id and voter_id not in correct_voter_ids:
            correct_voter_ids.append(voter_id)

    if total_votes == 0:
        escaped = True
    else:
        escaped = len(correct_voter_ids) < total_votes / 2

    deltas = {pid: 0 for pid in player_ids}
    for voter_id in correct_voter_ids:
        if voter_id != odd_player_id:
            deltas[voter_id] = CORRECT_VOTE_POINTS
    deltas[odd_player_id] = ESCAPE_POINTS if escaped else 0

    return ScoringResult(
        odd_player_escaped=escaped,
        total_votes=total_votes,
        correct_voter_ids=correct_voter_ids,
        deltas=deltas,
    )
