"""State serialization service — single source of truth for broadcast payloads.

Room-wide payloads never contain the round's words or the odd player until
the round is revealed. Each player's own word goes out only through
``build_player_view``.
"""
from typing import Any
from ..models.game import Game, GameMode, GamePhase
from ..models.player import Player
from ..models.round import Round
from ..services.game_service import list_players, player_dict
from ..services.round_service import clues_for_round, get_current_round
from ..services.vote_service import applied_scoring, votes_for_round

_REVEALED_PHASES = (GamePhase.REVEAL, GamePhase.FINISHED)


def build_game_state_payload(game: Game) -> dict[str, Any]:
    """Build the full public game state for a room-wide broadcast.

    Args:
        game: The Game ORM instance (must be inside an active db session).

    Returns:
        A dict representing the public game state.
    """
    players = list_players(game)
    host = next((p for p in players if p.is_host), None)

    current_round_data = None
    r = get_current_round(game)
    if r is not None:
        current_round_data = _build_round_data(game, r, players)

    return {
        "type": "game_state_updated",
        "game": {
            "code": game.code,
            "mode": game.mode.value,
            "phase": game.phase.value,
            "host_player_id": host.id if host else None,
            "current_round": game.current_round,
            "total_rounds": game.total_rounds,
            "players": [player_dict(p) for p in players],
            "standings": [
                player_dict(p) for p in sorted(players, key=lambda p: (-p.score, p.id))
            ],
            "round": current_round_data,
        },
    }


def _build_round_data(game: Game, round_obj: Round, players: list[Player]) -> dict[str, Any]:
    """Build the current round's section of the public state.

    Clue texts are shared once voting opens; before that only who has
    submitted is shown. Who has voted is public, whom they voted for is not
    until the reveal.
    """
    clues = clues_for_round(round_obj)
    votes = votes_for_round(round_obj)
    player_count = len(players)

    data: dict[str, Any] = {
        "id": round_obj.id,
        "round_number": round_obj.round_number,
        "clue_count": len(clues),
        "vote_count": len(votes),
        "player_count": player_count,
        # quorum hints for the host; they never gate a transition
        "all_clues_in": len(clues) >= player_count,
        "all_votes_in": len(votes) >= player_count,
        "submitted_player_ids": [c.player_id for c in clues],
        "voted_player_ids": [v.voter_id for v in votes],
        "clues": None,
        "reveal": None,
    }

    if game.phase != GamePhase.CLUE:
        data["clues"] = [
            {"player_id": c.player_id, "display_name": c.player.display_name, "clue_text": c.clue_text}
            for c in clues
        ]

    if game.phase in _REVEALED_PHASES:
        data["reveal"] = {
            "group_word": round_obj.group_word,
            "odd_word": round_obj.odd_word,
            "odd_player_id": round_obj.odd_player_id,
            "votes": [{"voter_id": v.voter_id, "suspect_id": v.suspect_id} for v in votes],
        }
        # a round ended before its reveal was never scored
        result = applied_scoring(round_obj, [p.id for p in players])
        if result is not None:
            data["reveal"].update({
                "correct_votes": round_obj.correct_votes,
                "total_votes": round_obj.total_votes,
                "correct_voter_ids": result.correct_voter_ids,
                "odd_player_escaped": result.odd_player_escaped,
                "points": {str(pid): delta for pid, delta in result.deltas.items()},
            })

    return data


def build_player_view(game: Game, player: Player) -> dict[str, Any]:
    """Build the private part of the state for one player.

    In classic mode the odd player is told they are odd; in blind mode
    nobody learns their role until the reveal.

    Args:
        game: The Game instance.
        player: The player requesting the view.

    Returns:
        Dict with the player's word, role (when known), clue and vote.
    """
    view: dict[str, Any] = {
        "player_id": player.id,
        "is_host": player.is_host,
        "word": None,
        "is_odd": None,
        "my_clue": None,
        "my_vote": None,
    }

    r = get_current_round(game)
    if r is None:
        return view

    is_odd = r.odd_player_id == player.id
    view["word"] = r.word_for(player.id)
    if game.mode == GameMode.CLASSIC or game.phase in _REVEALED_PHASES:
        view["is_odd"] = is_odd

    my_clue = next((c for c in clues_for_round(r) if c.player_id == player.id), None)
    if my_clue is not None:
        view["my_clue"] = my_clue.clue_text
    my_vote = next((v for v in votes_for_round(r) if v.voter_id == player.id), None)
    if my_vote is not None:
        view["my_vote"] = my_vote.suspect_id
    return view


def get_game_state_for_player(game: Game, player: Player) -> dict[str, Any]:
    """Return the public game state with the player's private view attached."""
    state = build_game_state_payload(game)
    state["me"] = build_player_view(game, player)
    return state
