"""Unit tests for engine/suggest.py"""

from unittest.mock import MagicMock

import chess
import pytest
import requests

from engine.suggest import LichessSuggester


def _session_returning(payload=None, status_code: int = 200, get_error: Exception | None = None) -> MagicMock:
    """A requests.Session stand-in whose get() answers with payload."""
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    if get_error is not None:
        session.get.side_effect = get_error
        return session

    response = MagicMock()
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    session.get.return_value = response
    return session


def test_returns_first_move_of_best_line() -> None:
    session = _session_returning({"pvs": [{"moves": "e2e4 e7e5 g1f3", "cp": 25}]})
    suggester = LichessSuggester(base_url="https://example.test/api/", timeout=2.5, session=session)

    assert suggester.suggest(chess.STARTING_FEN) == "e2e4"
    session.get.assert_called_once_with(
        "https://example.test/api/cloud-eval",
        params={"fen": chess.STARTING_FEN, "multiPv": 1},
        timeout=2.5,
    )
    assert session.headers["Accept"] == "application/json"


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"pvs": []},
        {"pvs": [{"cp": 10}]},
        {"pvs": [{"moves": ""}]},
        {"pvs": [{"moves": 42}]},
        ["not", "a", "dict"],
    ],
)
def test_malformed_payload_is_unavailable(payload) -> None:
    suggester = LichessSuggester(session=_session_returning(payload))
    assert suggester.suggest(chess.STARTING_FEN) is None


@pytest.mark.parametrize("status_code", [404, 429, 500])
def test_http_errors_are_unavailable(status_code: int) -> None:
    suggester = LichessSuggester(session=_session_returning(status_code=status_code))
    assert suggester.suggest(chess.STARTING_FEN) is None


@pytest.mark.parametrize(
    "error",
    [requests.exceptions.Timeout("slow"), requests.exceptions.ConnectionError("down")],
)
def test_network_errors_are_unavailable(error: Exception) -> None:
    suggester = LichessSuggester(session=_session_returning(get_error=error))
    assert suggester.suggest(chess.STARTING_FEN) is None


def test_invalid_json_is_unavailable() -> None:
    suggester = LichessSuggester(session=_session_returning(ValueError("Expecting value")))
    assert suggester.suggest(chess.STARTING_FEN) is None
