"""Shared fixtures: a fresh app on an in-memory database per test."""
import pytest

from odd_one_out import create_app
from odd_one_out.extensions import db
from odd_one_out.services import game_service
from odd_one_out.services.word_pair_service import seed_word_pairs


HOST = "user-host"
GUESTS = ["user-2", "user-3", "user-4"]


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        seed_word_pairs()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def headers(user_id):
    return {"X-User-Id": user_id}


def make_game(players=3, host=HOST, **kwargs):
    """Create a game with ``players`` seats (host included) and return its code."""
    result = game_service.create_game(host, "Host", **kwargs)
    code = result["game_code"]
    for i, user_id in enumerate(GUESTS[: players - 1]):
        game_service.join_game(code, user_id, f"Guest {i + 2}")
    return code


@pytest.fixture
def game_code(app):
    return make_game()
