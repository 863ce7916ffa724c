"""Game creation and join code allocation tests."""
import pytest

from odd_one_out.errors import CodeSpaceExhaustedError
from odd_one_out.services import game_service
from tests.conftest import HOST, make_game

FRESH_CODE = "QQQQQQ"


def _draws(*codes):
    """Return a stand-in code source that hands out ``codes`` in order."""
    remaining = iter(codes)
    return lambda: next(remaining)


class TestJoinCodeAllocation:
    def test_taken_code_is_drawn_again(self, app, monkeypatch):
        taken = make_game()
        monkeypatch.setattr(game_service, "generate_game_code", _draws(taken, FRESH_CODE))

        result = game_service.create_game("other-host", "Other")

        assert result["game_code"] == FRESH_CODE

    def test_gives_up_when_every_code_is_taken(self, app, monkeypatch):
        taken = make_game()
        monkeypatch.setattr(game_service, "generate_game_code", lambda: taken)

        with pytest.raises(CodeSpaceExhaustedError) as exc:
            game_service.create_game("other-host", "Other")

        assert exc.value.code == "CODE_SPACE_EXHAUSTED"
        assert exc.value.status == 503

    def test_code_stored_by_a_concurrent_create_is_drawn_again(self, app, monkeypatch):
        taken = make_game()
        # the existence check passed, but the insert hits the unique index
        monkeypatch.setattr(game_service, "_unique_game_code", _draws(taken, FRESH_CODE))

        result = game_service.create_game("other-host", "Other")

        assert result["game_code"] == FRESH_CODE
        assert game_service.get_game_or_404(taken).host_id == HOST
        new_game = game_service.get_game_or_404(FRESH_CODE)
        assert new_game.host_id == "other-host"
        assert [p.user_id for p in game_service.list_players(new_game)] == ["other-host"]
