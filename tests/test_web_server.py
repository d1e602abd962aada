"""Tests for the HTTP API.

Tests cover:
- Session cookies give each client its own game
- Start, flip, draw, replace, discard and round endpoints
- Rejections map to 409, malformed payloads to 422
- Face-down cards are not leaked in the state
"""

import pytest
from fastapi.testclient import TestClient

from playground.web_server import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def _start(client, **overrides):
    payload = {"name1": "Ann", "name2": "Bo", "rounds": 2, "seed": 21}
    payload.update(overrides)
    response = client.post("/api/start", json=payload)
    assert response.status_code == 200
    return response.json()


def _finish_setup(client):
    for player in (1, 2):
        for slot in (0, 2):
            assert client.post("/api/flip", json={"player": player, "slot": slot}).status_code == 200


class TestSession:
    """Tests for session handling."""

    def test_state_before_start(self, client):
        response = client.get("/api/state")
        assert response.status_code == 200
        state = response.json()
        assert state["phase"] == "waiting"
        assert state["legal_actions"] == []
        assert "golf_session" in response.cookies

    def test_clients_have_separate_games(self, client):
        _start(client)
        with TestClient(app) as other:
            assert other.get("/api/state").json()["phase"] == "waiting"
        assert client.get("/api/state").json()["phase"] == "setupFlips"


class TestGameFlow:
    """Tests for game endpoints."""

    def test_start(self, client):
        state = _start(client)
        assert state["round"] == 1
        assert state["rounds"] == 2
        assert state["names"] == {"1": "Ann", "2": "Bo"}
        assert state["stock_count"] == 41
        assert state["legal_actions"] == [0, 1, 2, 3, 4, 5]

    def test_hidden_cards_not_exposed(self, client):
        state = _start(client)
        assert state["hands"]["2"][0] == {"face_up": False, "cleared": False}

    def test_flip_row_rule(self, client):
        _start(client)
        assert client.post("/api/flip", json={"player": 1, "slot": 0}).status_code == 200
        response = client.post("/api/flip", json={"player": 1, "slot": 1})
        assert response.status_code == 409
        assert response.json()["detail"] == "row_used"

    def test_wrong_turn(self, client):
        _start(client)
        response = client.post("/api/flip", json={"player": 2, "slot": 0})
        assert response.status_code == 409
        assert response.json()["detail"] == "wrong_turn"

    def test_draw_and_discard(self, client):
        _start(client)
        _finish_setup(client)
        state = client.post("/api/draw", json={"source": "stock"}).json()
        assert state["held_card"]["face_up"]
        held = state["held_card"]["label"]
        state = client.post("/api/discard").json()
        assert state["held_card"] is None
        assert state["discard_top"]["label"] == held
        assert state["current_player"] == 2

    def test_draw_and_replace(self, client):
        _start(client)
        _finish_setup(client)
        drawn = client.post("/api/draw", json={"source": "discard"}).json()["held_card"]
        state = client.post("/api/replace", json={"player": 1, "slot": 1}).json()
        assert state["hands"]["1"][1]["label"] == drawn["label"]
        assert state["discard_top"]["face_up"]

    def test_turn_flip(self, client):
        _start(client)
        _finish_setup(client)
        state = client.post("/api/flip", json={"player": 1, "slot": 5}).json()
        assert state["hands"]["1"][5]["face_up"]
        assert state["current_player"] == 2

    def test_discard_without_card(self, client):
        _start(client)
        _finish_setup(client)
        response = client.post("/api/discard")
        assert response.status_code == 409
        assert response.json()["detail"] == "no_card_held"

    def test_rounds(self, client):
        _start(client)
        response = client.post("/api/next-round")
        assert response.status_code == 409
        assert response.json()["detail"] == "wrong_phase"

        state = client.post("/api/finish-round").json()
        assert state["phase"] == "ended"
        assert set(state["scores"]["rounds"]["1"]) == {"1", "2"}
        assert state["status"].startswith("Round 1 over.")

        state = client.post("/api/next-round").json()
        assert state["round"] == 2
        assert state["current_player"] == 2

        client.post("/api/finish-round")
        response = client.post("/api/next-round")
        assert response.status_code == 409
        assert response.json()["detail"] == "game_over"
        assert client.get("/api/state").json()["game_over"]

    def test_agent_move(self, client):
        _start(client)
        for _ in range(4):
            state = client.post("/api/agent_move").json()
            assert "agent_action" in state
        assert state["phase"] == "turns"

    def test_agent_move_without_game(self, client):
        response = client.post("/api/agent_move")
        assert response.status_code == 409


class TestValidation:
    """Tests for malformed payloads."""

    def test_bad_slot(self, client):
        _start(client)
        assert client.post("/api/flip", json={"player": 1, "slot": 6}).status_code == 422

    def test_bad_player(self, client):
        _start(client)
        assert client.post("/api/flip", json={"player": 3, "slot": 0}).status_code == 422

    def test_bad_source(self, client):
        _start(client)
        _finish_setup(client)
        assert client.post("/api/draw", json={"source": "pile"}).status_code == 422

    def test_bad_rounds(self, client):
        assert client.post("/api/start", json={"rounds": 0}).status_code == 422
