"""Unit tests for engine/describe.py"""

import pytest

from engine.constants import EMPTY_HISTORY_TEXT
from engine.describe import board_description, describe_move, move_history_text
from engine.history import MoveRecord
from engine.rules import Rules, Side

STARTING_DESCRIPTION = (
    "Board position:\n"
    "Rank 8: black rook on a8, black knight on b8, black bishop on c8, black queen on d8, "
    "black king on e8, black bishop on f8, black knight on g8, black rook on h8\n"
    "Rank 7: black pawn on a7, black pawn on b7, black pawn on c7, black pawn on d7, "
    "black pawn on e7, black pawn on f7, black pawn on g7, black pawn on h7\n"
    "Rank 6: empty\n"
    "Rank 5: empty\n"
    "Rank 4: empty\n"
    "Rank 3: empty\n"
    "Rank 2: white pawn on a2, white pawn on b2, white pawn on c2, white pawn on d2, "
    "white pawn on e2, white pawn on f2, white pawn on g2, white pawn on h2\n"
    "Rank 1: white rook on a1, white knight on b1, white bishop on c1, white queen on d1, "
    "white king on e1, white bishop on f1, white knight on g1, white rook on h1\n"
)


# --- BOARD DESCRIPTION ----
def test_starting_board_description() -> None:
    assert board_description(Rules()) == STARTING_DESCRIPTION


def test_sparse_board_description() -> None:
    text = board_description(Rules("8/8/8/8/4P3/8/8/k6K w - - 0 1"))
    lines = text.splitlines()
    assert len(lines) == 9
    assert lines[5] == "Rank 4: white pawn on e4"
    assert lines[8] == "Rank 1: black king on a1, white king on h1"
    assert lines[1] == "Rank 8: empty"


# --- MOVE HISTORY ----
def _records(*moves: str, first: Side = Side.WHITE) -> list[MoveRecord]:
    other = Side.BLACK if first is Side.WHITE else Side.WHITE
    return [
        MoveRecord(move, first if i % 2 == 0 else other, "a1", "a2", "fen")
        for i, move in enumerate(moves)
    ]


def test_empty_history_sentinel() -> None:
    assert move_history_text([]) == EMPTY_HISTORY_TEXT


def test_history_pairs_plies() -> None:
    text = move_history_text(_records("e4", "e5", "Nf3"))
    assert text == "Move history:\n1. White: e4, Black: e5\n2. White: Nf3\n"


@pytest.mark.parametrize("count", range(1, 9))
def test_history_line_count(count: int) -> None:
    moves = [f"m{i}" for i in range(count)]
    lines = move_history_text(_records(*moves)).splitlines()[1:]
    assert len(lines) == (count + 1) // 2
    for number, line in enumerate(lines, start=1):
        assert line.startswith(f"{number}. White: ")


def test_history_starting_with_black() -> None:
    text = move_history_text(_records("e5", "Nf3", first=Side.BLACK))
    assert text.splitlines()[1] == "1. Black: e5, White: Nf3"


# --- SPOKEN MOVES ----
@pytest.mark.parametrize(
    "san, expected",
    [
        ("e4", "Pawn to e4"),
        ("Nf3", "Knight to f3"),
        ("exd5", "Pawn captures on d5"),
        ("Qxf7#", "Queen captures on f7, checkmate"),
        ("Bb5+", "Bishop to b5, check"),
        ("Nbd2", "Knight to d2"),
        ("e8=Q", "Pawn to e8"),
        ("dxc8=N+", "Pawn captures on c8, check"),
        ("O-O", "Castle kingside"),
        ("O-O-O+", "Castle queenside, check"),
        ("Kxb2", "King captures on b2"),
        ("Rh1", "Rook to h1"),
    ],
)
def test_describe_move(san: str, expected: str) -> None:
    assert describe_move(san) == expected
