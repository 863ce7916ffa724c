"""HTTP API and Socket.IO change feed tests."""
from odd_one_out import create_app
from odd_one_out.extensions import db, socketio
from tests.conftest import GUESTS, HOST, headers, make_game


def _create(client, user=HOST, **body):
    body.setdefault("display_name", "Host")
    res = client.post("/api/games", json=body, headers=headers(user))
    assert res.status_code == 201, res.get_json()
    return res.get_json()["game_code"]


def _join(client, code, user, name):
    res = client.post(f"/api/games/{code}/join", json={"display_name": name}, headers=headers(user))
    assert res.status_code == 200, res.get_json()
    return res.get_json()


def _lobby(client, guests=2, **body):
    code = _create(client, **body)
    for i, user in enumerate(GUESTS[:guests]):
        _join(client, code, user, f"Guest {i + 2}")
    return code


def _post(client, code, action, user=HOST, **body):
    return client.post(f"/api/games/{code}/{action}", json=body, headers=headers(user))


def _state(client, code, user=HOST):
    res = client.get(f"/api/games/{code}", headers=headers(user))
    assert res.status_code == 200, res.get_json()
    return res.get_json()


class TestSessionAndIdentity:
    def test_session_issues_user_id(self, client):
        res = client.post("/api/session")
        assert res.status_code == 201
        assert len(res.get_json()["user_id"]) == 32

    def test_missing_identity_is_rejected(self, client):
        res = client.post("/api/games", json={"display_name": "Host"})
        assert res.status_code == 401
        assert res.get_json()["error"] == "NOT_AUTHENTICATED"

    def test_health(self, client):
        assert client.get("/health").get_json() == {"status": "ok"}


class TestCreateAndJoin:
    def test_create_game_defaults(self, client):
        code = _create(client)
        state = _state(client, code)
        game = state["game"]
        assert len(code) == 6
        assert game["phase"] == "lobby"
        assert game["mode"] == "classic"
        assert game["current_round"] == 0
        assert game["total_rounds"] == 5
        assert game["players"][0]["is_host"] is True
        assert state["me"]["word"] is None

    def test_create_validates_input(self, client):
        res = client.post("/api/games", json={"display_name": ""}, headers=headers(HOST))
        assert res.status_code == 400
        res = client.post(
            "/api/games", json={"display_name": "H", "mode": "chaos"}, headers=headers(HOST)
        )
        assert res.get_json()["error"] == "VALIDATION_ERROR"
        res = client.post(
            "/api/games", json={"display_name": "H", "total_rounds": 0}, headers=headers(HOST)
        )
        assert res.status_code == 400
        res = client.post(
            "/api/games", json={"display_name": "H", "total_rounds": 2.5}, headers=headers(HOST)
        )
        assert res.get_json()["error"] == "VALIDATION_ERROR"

    def test_join_is_case_insensitive_and_rejoin_is_idempotent(self, client):
        code = _create(client)
        first = _join(client, code.lower(), GUESTS[0], "Ann")
        again = _join(client, code, GUESTS[0], "Ann again")
        assert again["rejoined"] is True
        assert again["player_id"] == first["player_id"]
        assert len(_state(client, code)["game"]["players"]) == 2

    def test_join_unknown_game(self, client):
        res = client.post("/api/games/ZZZZZZ/join", json={"display_name": "A"}, headers=headers("u"))
        assert res.status_code == 404
        assert res.get_json()["error"] == "GAME_NOT_FOUND"

    def test_cannot_join_finished_game(self, client):
        code = _lobby(client)
        _post(client, code, "start")
        _post(client, code, "end")
        res = client.post(f"/api/games/{code}/join", json={"display_name": "Late"}, headers=headers("late"))
        assert res.status_code == 409
        assert res.get_json()["error"] == "PHASE_MISMATCH"

    def test_state_requires_membership(self, client):
        code = _create(client)
        res = client.get(f"/api/games/{code}", headers=headers("stranger"))
        assert res.status_code == 404
        assert res.get_json()["error"] == "PLAYER_NOT_FOUND"


class TestGameFlow:
    def test_start_needs_three_players(self, client):
        code = _lobby(client, guests=1)
        res = _post(client, code, "start")
        assert res.status_code == 409
        assert res.get_json()["error"] == "INSUFFICIENT_PLAYERS"

    def test_only_host_can_start(self, client):
        code = _lobby(client)
        res = _post(client, code, "start", user=GUESTS[0])
        assert res.status_code == 403
        assert res.get_json()["error"] == "NOT_AUTHORIZED"

    def test_illegal_transition_payload(self, client):
        code = _lobby(client)
        res = _post(client, code, "reveal")
        assert res.status_code == 409
        assert res.get_json()["error"] == "ILLEGAL_TRANSITION"

    def test_words_are_private_until_reveal(self, client):
        code = _lobby(client)
        assert _post(client, code, "start").get_json() == {"phase": "clue", "round_number": 1}

        views = {user: _state(client, code, user)["me"] for user in [HOST] + GUESTS[:2]}
        odd = [v for v in views.values() if v["is_odd"]]
        assert len(odd) == 1
        group_words = {v["word"] for v in views.values() if not v["is_odd"]}
        assert len(group_words) == 1
        assert odd[0]["word"] not in group_words

        round_data = _state(client, code)["game"]["round"]
        assert round_data["reveal"] is None
        assert round_data["clues"] is None

    def test_blind_mode_hides_role(self, client):
        code = _lobby(client, mode="blind")
        _post(client, code, "start")
        for user in [HOST] + GUESTS[:2]:
            me = _state(client, code, user)["me"]
            assert me["word"]
            assert me["is_odd"] is None

    def test_full_round(self, client):
        code = _lobby(client, total_rounds=1)
        _post(client, code, "start")

        res = _post(client, code, "clues", user=GUESTS[0], clue_text="first")
        assert res.status_code == 200
        _post(client, code, "clues", user=GUESTS[0], clue_text="second")
        round_data = _state(client, code)["game"]["round"]
        assert round_data["clue_count"] == 1
        assert round_data["all_clues_in"] is False

        assert _post(client, code, "voting").get_json() == {"phase": "voting"}
        clues = _state(client, code)["game"]["round"]["clues"]
        assert [c["clue_text"] for c in clues] == ["second"]

        res = _post(client, code, "clues", user=HOST, clue_text="too late")
        assert res.status_code == 409

        players = _state(client, code)["game"]["players"]
        host_id = next(p["id"] for p in players if p["is_host"])
        guest_ids = [p["id"] for p in players if not p["is_host"]]

        res = _post(client, code, "votes", user=HOST, suspect_id=host_id)
        assert res.status_code == 400
        assert res.get_json()["error"] == "SELF_VOTE"

        res = _post(client, code, "votes", user=HOST, suspect_id=99999)
        assert res.status_code == 404

        res = _post(client, code, "votes", user=HOST, suspect_id="abc")
        assert res.status_code == 400

        _post(client, code, "votes", user=HOST, suspect_id=guest_ids[0])
        _post(client, code, "votes", user=HOST, suspect_id=guest_ids[1])
        round_data = _state(client, code)["game"]["round"]
        assert round_data["vote_count"] == 1
        assert _state(client, code)["me"]["my_vote"] == guest_ids[1]

        res = _post(client, code, "reveal")
        assert res.status_code == 200
        body = res.get_json()
        assert body["phase"] == "reveal"
        assert body["total_votes"] == 1

        reveal = _state(client, code)["game"]["round"]["reveal"]
        assert reveal["group_word"] != reveal["odd_word"]
        assert reveal["votes"] == [{"voter_id": host_id, "suspect_id": guest_ids[1]}]

        res = _post(client, code, "next-round")
        assert res.get_json() == {"phase": "finished", "finished": True}
        standings = _state(client, code)["game"]["standings"]
        assert [s["score"] for s in standings] == sorted((s["score"] for s in standings), reverse=True)

    def test_vote_needs_an_integer_suspect(self, client):
        code = _lobby(client)
        _post(client, code, "start")
        _post(client, code, "voting")
        guest_id = next(p["id"] for p in _state(client, code)["game"]["players"] if not p["is_host"])

        for bad in (guest_id + 0.9, str(guest_id)):
            res = _post(client, code, "votes", user=HOST, suspect_id=bad)
            assert res.status_code == 400
            assert res.get_json()["error"] == "VALIDATION_ERROR"
        assert _state(client, code)["game"]["round"]["vote_count"] == 0

    def test_next_round_deals_round_two(self, client):
        code = _lobby(client, total_rounds=2)
        _post(client, code, "start")
        _post(client, code, "voting")
        players = _state(client, code)["game"]["players"]
        _post(client, code, "votes", user=GUESTS[0], suspect_id=players[0]["id"])
        _post(client, code, "reveal")

        res = _post(client, code, "next-round")
        assert res.get_json() == {"phase": "clue", "finished": False, "round_number": 2}
        state = _state(client, code)
        assert state["game"]["current_round"] == 2
        assert state["game"]["round"]["vote_count"] == 0
        assert state["me"]["my_vote"] is None

    def test_empty_word_pool_is_reported(self, client):
        from odd_one_out.extensions import db
        from odd_one_out.models.word_pair import WordPair

        db.session.execute(db.delete(WordPair))
        db.session.commit()
        code = _lobby(client)
        res = _post(client, code, "start")
        assert res.status_code == 503
        assert res.get_json()["error"] == "POOL_EXHAUSTED"
        assert _state(client, code)["game"]["phase"] == "lobby"


class TestChangeFeed:
    def test_join_room_sends_current_state(self, app, client):
        code = _lobby(client)
        sock = socketio.test_client(app)
        sock.emit("join_game_room", {"game_code": code.lower(), "user_id": GUESTS[0]})

        received = sock.get_received()
        assert received[-1]["name"] == "game_state_updated"
        assert received[-1]["args"][0]["game"]["code"] == code
        sock.disconnect()

    def test_room_receives_phase_changes(self, app, client):
        code = _lobby(client)
        sock = socketio.test_client(app)
        sock.emit("join_game_room", {"game_code": code, "user_id": GUESTS[0]})
        sock.get_received()

        _post(client, code, "start")

        events = [e for e in sock.get_received() if e["name"] == "game_state_updated"]
        assert events
        assert events[-1]["args"][0]["game"]["phase"] == "clue"
        sock.disconnect()

    def test_strangers_are_not_subscribed(self, app, client):
        code = _lobby(client)
        sock = socketio.test_client(app)
        sock.emit("join_game_room", {"game_code": code, "user_id": "stranger"})
        assert sock.get_received() == []

        _post(client, code, "start")
        assert sock.get_received() == []
        sock.disconnect()

    def test_apps_built_later_still_get_room_handlers(self, app):
        other = create_app("testing")
        with other.app_context():
            code = make_game()
            sock = socketio.test_client(other)
            sock.emit("join_game_room", {"game_code": code, "user_id": HOST})

            received = sock.get_received()
            assert received[-1]["name"] == "game_state_updated"
            assert received[-1]["args"][0]["game"]["code"] == code
            sock.disconnect()
            db.session.remove()
