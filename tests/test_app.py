"""Tests for the HTTP API in web/app.py"""

import chess
import pytest
from fastapi.testclient import TestClient

from web.app import _read_default_difficulty, app
from positions import BACK_RANK_MATE_FEN, BARE_KINGS_FEN, STALEMATE_FEN


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _new_game(client: TestClient, **body) -> dict:
    response = client.post("/api/games", json=body)
    assert response.status_code == 201, response.text
    return response.json()


# --- CREATE / READ / DELETE ----
def test_create_game_defaults(client: TestClient) -> None:
    game = _new_game(client)
    assert game["difficulty"] == "medium"
    assert game["status"]["fen"] == chess.STARTING_FEN
    assert game["status"]["side_to_move"] == "white"
    assert game["status"]["last_move"] is None
    assert game["status"]["game_over"] is False
    assert len(game["legal_moves"]) == 20
    assert game["history"] == []

    fetched = client.get(f"/api/games/{game['game_id']}").json()
    assert fetched == game


def test_beginner_plays_as_easy(client: TestClient) -> None:
    assert _new_game(client, difficulty="Beginner")["difficulty"] == "easy"


def test_unknown_difficulty_is_rejected(client: TestClient) -> None:
    response = client.post("/api/games", json={"difficulty": "impossible"})
    assert response.status_code == 422


@pytest.mark.parametrize(
    "fen",
    ["not a fen", "8/8/8/8/8/8/8/8 w - - 0 1", "k6R/8/8/8/8/8/8/K7 w - - 0 1"],
)
def test_bad_fen_is_rejected(client: TestClient, fen: str) -> None:
    response = client.post("/api/games", json={"fen": fen})
    assert response.status_code == 400
    assert "Invalid FEN" in response.json()["detail"]


def test_unknown_game(client: TestClient) -> None:
    assert client.get("/api/games/nope").status_code == 404
    assert client.post("/api/games/nope/moves", json={"move": "e4"}).status_code == 404


def test_delete_game(client: TestClient) -> None:
    game_id = _new_game(client)["game_id"]
    assert client.delete(f"/api/games/{game_id}").status_code == 204
    assert client.get(f"/api/games/{game_id}").status_code == 404
    assert client.delete(f"/api/games/{game_id}").status_code == 404


# --- MOVES ----
def test_move_gets_computer_reply(client: TestClient) -> None:
    game_id = _new_game(client, difficulty="hard")["game_id"]
    response = client.post(f"/api/games/{game_id}/moves", json={"move": " e4 "})
    assert response.status_code == 200, response.text

    body = response.json()
    assert body["move"] == "e4"
    assert body["reply"] is not None
    assert body["game"]["history"] == ["e4", body["reply"]]
    assert body["game"]["status"]["side_to_move"] == "white"
    assert body["game"]["status"]["last_move"] is not None


def test_invalid_move_changes_nothing(client: TestClient) -> None:
    game = _new_game(client)
    response = client.post(f"/api/games/{game['game_id']}/moves", json={"move": "e5"})
    assert response.status_code == 400
    assert "Illegal move" in response.json()["detail"]
    assert client.get(f"/api/games/{game['game_id']}").json() == game


def test_blank_move_is_rejected(client: TestClient) -> None:
    game_id = _new_game(client)["game_id"]
    response = client.post(f"/api/games/{game_id}/moves", json={"move": "   "})
    assert response.status_code == 422


def test_mating_move_gets_no_reply(client: TestClient) -> None:
    game_id = _new_game(client, fen=BACK_RANK_MATE_FEN)["game_id"]
    body = client.post(f"/api/games/{game_id}/moves", json={"move": "Ra8"}).json()
    assert body["move"] == "Ra8#"
    assert body["reply"] is None
    assert body["game"]["status"]["is_checkmate"] is True
    assert body["game"]["status"]["game_over"] is True
    assert body["game"]["legal_moves"] == []


def test_computer_move_endpoint(client: TestClient) -> None:
    game_id = _new_game(client, difficulty="easy")["game_id"]
    body = client.post(f"/api/games/{game_id}/computer-move").json()
    assert body["game"]["history"] == [body["move"]]
    assert body["game"]["status"]["side_to_move"] == "black"


def test_computer_move_without_legal_moves(client: TestClient) -> None:
    game_id = _new_game(client, fen=STALEMATE_FEN)["game_id"]
    response = client.post(f"/api/games/{game_id}/computer-move")
    assert response.status_code == 409



def test_finished_game_takes_no_more_moves(client: TestClient) -> None:
    game = _new_game(client, fen=BARE_KINGS_FEN)
    assert game["status"]["game_over"] is True
    assert "Kg1" in game["legal_moves"]
    game_id = game["game_id"]

    assert client.post(f"/api/games/{game_id}/moves", json={"move": "Kg1"}).status_code == 409
    assert client.post(f"/api/games/{game_id}/computer-move").status_code == 409
    assert client.get(f"/api/games/{game_id}").json() == game


# --- UNDO / RESET ----
def test_undo(client: TestClient) -> None:
    game_id = _new_game(client)["game_id"]
    assert client.post(f"/api/games/{game_id}/undo").status_code == 409

    client.post(f"/api/games/{game_id}/moves", json={"move": "d4"})
    body = client.post(f"/api/games/{game_id}/undo").json()
    assert body["history"] == []
    assert body["status"]["fen"] == chess.STARTING_FEN
    assert body["status"]["last_move"] is None


def test_reset_keeps_difficulty(client: TestClient) -> None:
    game_id = _new_game(client, difficulty="hard")["game_id"]
    client.post(f"/api/games/{game_id}/moves", json={"move": "Nf3"})
    body = client.post(f"/api/games/{game_id}/reset").json()
    assert body["difficulty"] == "hard"
    assert body["history"] == []
    assert body["status"]["fen"] == chess.STARTING_FEN


# --- TEXT ----
def test_board_and_history_text(client: TestClient) -> None:
    game_id = _new_game(client)["game_id"]
    board = client.get(f"/api/games/{game_id}/board").json()["text"]
    assert board.startswith("Board position:\nRank 8: black rook on a8")

    history = client.get(f"/api/games/{game_id}/history").json()["text"]
    assert history == "Game started. White to move."

    client.post(f"/api/games/{game_id}/moves", json={"move": "e4"})
    history = client.get(f"/api/games/{game_id}/history").json()["text"]
    assert history.startswith("Move history:\n1. White: e4, Black: ")


def test_hint(client: TestClient) -> None:
    game_id = _new_game(client, fen=BACK_RANK_MATE_FEN)["game_id"]
    body = client.get(f"/api/games/{game_id}/hint").json()
    assert body == {"move": "Ra8#", "description": "Rook to a8, checkmate"}

    game_id = _new_game(client, fen=STALEMATE_FEN)["game_id"]
    assert client.get(f"/api/games/{game_id}/hint").json() == {"move": None, "description": None}


# --- CONFIGURATION ----
def test_default_difficulty_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHESS_DEFAULT_DIFFICULTY", "Hard")
    assert _read_default_difficulty() == "hard"
    monkeypatch.delenv("CHESS_DEFAULT_DIFFICULTY")
    assert _read_default_difficulty() == "medium"


def test_unknown_default_difficulty_fails_fast(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHESS_DEFAULT_DIFFICULTY", "grandmaster")
    with pytest.raises(ValueError, match="Unknown difficulty"):
        _read_default_difficulty()
