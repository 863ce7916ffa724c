"""All /api/games/* REST routes."""
from typing import Any
from flask import Blueprint, request, jsonify, g, current_app
from ..api.auth import require_user
from ..services import game_service, phase_service, round_service, vote_service
from ..services.state_service import get_game_state_for_player
from ..errors import ValidationError
from ..sockets.emitters import emit_game_state

games_bp = Blueprint("games", __name__)


def _json_body() -> dict[str, Any]:
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}


def _display_name(data: dict[str, Any]) -> str:
    """Validate and return the display_name field.

    Raises:
        ValidationError: If missing or too long.
    """
    display_name = (data.get("display_name") or "").strip()
    max_length = current_app.config["DISPLAY_NAME_MAX_LENGTH"]
    if not display_name:
        raise ValidationError("display_name is required.")
    if len(display_name) > max_length:
        raise ValidationError(f"display_name must be {max_length} characters or fewer.")
    return display_name


def _int_field(data: dict[str, Any], name: str, required: bool = True) -> int | None:
    """Return an integer field from the body.

    Raises:
        ValidationError: If required and missing, or not an integer.
    """
    value = data.get(name)
    if value is None:
        if required:
            raise ValidationError(f"{name} is required.")
        return None
    # bool is an int subclass; floats and numeric strings are not accepted
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer.")
    return value


# ---------------------------------------------------------------------------
# Create game
# ---------------------------------------------------------------------------

@games_bp.route("/games", methods=["POST"])
@require_user
def create_game():
    """POST /api/games — create a new game session hosted by the caller."""
    data = _json_body()
    display_name = _display_name(data)
    mode = data.get("mode", "classic")
    total_rounds = _int_field(data, "total_rounds", required=False)

    result = game_service.create_game(
        user_id=g.user_id,
        display_name=display_name,
        mode=mode,
        total_rounds=total_rounds,
    )
    return jsonify(result), 201


# ---------------------------------------------------------------------------
# Join game
# ---------------------------------------------------------------------------

@games_bp.route("/games/<code>/join", methods=["POST"])
@require_user
def join_game(code: str):
    """POST /api/games/<code>/join — join a game, or rejoin an existing seat."""
    data = _json_body()
    display_name = _display_name(data)

    result = game_service.join_game(code=code, user_id=g.user_id, display_name=display_name)

    # Broadcast updated game state so the lobby shows the new player
    if not result["rejoined"]:
        emit_game_state(game_service.get_game_or_404(code))

    return jsonify(result), 200


# ---------------------------------------------------------------------------
# Get game state
# ---------------------------------------------------------------------------

@games_bp.route("/games/<code>", methods=["GET"])
@require_user
def get_game(code: str):
    """GET /api/games/<code> — public state plus the caller's private view."""
    game = game_service.get_game_or_404(code)
    player = game_service.get_player_or_404(game, g.user_id)
    return jsonify(get_game_state_for_player(game, player)), 200


# ---------------------------------------------------------------------------
# Start game (lobby → clue)
# ---------------------------------------------------------------------------

@games_bp.route("/games/<code>/start", methods=["POST"])
@require_user
def start_game(code: str):
    """POST /api/games/<code>/start — host deals round 1."""
    game = game_service.get_game_or_404(code)
    new_round = phase_service.start_game(game, g.user_id)
    emit_game_state(game)
    return jsonify({"phase": game.phase.value, "round_number": new_round.round_number}), 200


# ---------------------------------------------------------------------------
# Submit clue
# ---------------------------------------------------------------------------

@games_bp.route("/games/<code>/clues", methods=["POST"])
@require_user
def submit_clue(code: str):
    """POST /api/games/<code>/clues — submit or replace the caller's clue."""
    game = game_service.get_game_or_404(code)
    player = game_service.get_player_or_404(game, g.user_id)
    data = _json_body()

    clue_text = data.get("clue_text")
    if not isinstance(clue_text, str):
        raise ValidationError("clue_text is required.")

    round_service.submit_clue(game, player, clue_text)
    emit_game_state(game)
    return jsonify({"submitted": True}), 200


# ---------------------------------------------------------------------------
# Open voting (clue → voting)
# ---------------------------------------------------------------------------

@games_bp.route("/games/<code>/voting", methods=["POST"])
@require_user
def advance_to_voting(code: str):
    """POST /api/games/<code>/voting — host closes clues and opens voting."""
    game = game_service.get_game_or_404(code)
    phase_service.advance_to_voting(game, g.user_id)
    emit_game_state(game)
    return jsonify({"phase": game.phase.value}), 200


# ---------------------------------------------------------------------------
# Submit vote
# ---------------------------------------------------------------------------

@games_bp.route("/games/<code>/votes", methods=["POST"])
@require_user
def submit_vote(code: str):
    """POST /api/games/<code>/votes — cast or change the caller's vote."""
    game = game_service.get_game_or_404(code)
    player = game_service.get_player_or_404(game, g.user_id)
    suspect_id = _int_field(_json_body(), "suspect_id")

    vote_service.submit_vote(game, player, suspect_id)
    emit_game_state(game)
    return jsonify({"voted": True}), 200


# ---------------------------------------------------------------------------
# Reveal (voting → reveal)
# ---------------------------------------------------------------------------

@games_bp.route("/games/<code>/reveal", methods=["POST"])
@require_user
def reveal(code: str):
    """POST /api/games/<code>/reveal — host closes voting and scores the round."""
    game = game_service.get_game_or_404(code)
    result = phase_service.reveal_and_score(game, g.user_id)
    emit_game_state(game)
    return jsonify({
        "phase": game.phase.value,
        "odd_player_escaped": result.odd_player_escaped,
        "correct_votes": result.correct_votes,
        "total_votes": result.total_votes,
        "points": {str(pid): delta for pid, delta in result.deltas.items()},
    }), 200


# ---------------------------------------------------------------------------
# Next round (reveal → clue, or finished after the last round)
# ---------------------------------------------------------------------------

@games_bp.route("/games/<code>/next-round", methods=["POST"])
@require_user
def next_round(code: str):
    """POST /api/games/<code>/next-round — host deals the next round or ends the game."""
    game = game_service.get_game_or_404(code)
    result = phase_service.advance_from_reveal(game, g.user_id)
    emit_game_state(game)
    return jsonify({"phase": game.phase.value, **result}), 200


# ---------------------------------------------------------------------------
# End game
# ---------------------------------------------------------------------------

@games_bp.route("/games/<code>/end", methods=["POST"])
@require_user
def end_game(code: str):
    """POST /api/games/<code>/end — host finishes the game early."""
    game = game_service.get_game_or_404(code)
    phase_service.end_game(game, g.user_id)
    emit_game_state(game)
    return jsonify({"phase": game.phase.value}), 200
