"""Anonymous session route."""
from flask import Blueprint, jsonify
from ..utils.identity import generate_user_id

session_bp = Blueprint("session", __name__)


@session_bp.route("/session", methods=["POST"])
def create_session():
    """POST /api/session — issue a new anonymous user id."""
    return jsonify({"user_id": generate_user_id()}), 201
