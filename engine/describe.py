"""
Textual rendering of positions and moves for screen readers.

The board description is a contract, not a display nicety: it is the
accessible equivalent of the rendered board, so its format is fixed and the
same position always produces byte-identical text.

Board description format:
    Board position:
    Rank 8: black rook on a8, black knight on b8, ...
    ...
    Rank 4: empty
    ...

Ranks run 8 down to 1 and squares within a rank run a to h, so the text
reads the board top to bottom, left to right from White's side.
"""

import re
from typing import Iterable

import chess

from engine.constants import (
    BOARD_HEADER,
    CAPTURE_MARKER,
    CHECK_MARKER,
    EMPTY_HISTORY_TEXT,
    HISTORY_HEADER,
    MATE_MARKER,
)
from engine.history import MoveRecord
from engine.rules import Rules, Side

_SQUARE_RE = re.compile(r"[a-h][1-8]")

_PIECE_LETTERS: dict[str, str] = {
    "K": "King",
    "Q": "Queen",
    "R": "Rook",
    "B": "Bishop",
    "N": "Knight",
}


def board_description(rules: Rules) -> str:
    """
    Describe every occupied square, one line per rank.

    Example:
        >>> print(board_description(Rules("8/8/8/8/4P3/8/8/k6K w - - 0 1")))
        Board position:
        Rank 8: empty
        ...
        Rank 4: white pawn on e4
        ...
        Rank 1: black king on a1, white king on h1
    """
    lines = [BOARD_HEADER]
    for rank in range(8, 0, -1):
        pieces = []
        for file_name in chess.FILE_NAMES:
            square = f"{file_name}{rank}"
            piece = rules.piece_at(square)
            if piece is None:
                continue
            color = Side.from_color(piece.color).value
            pieces.append(f"{color} {chess.piece_name(piece.piece_type)} on {square}")
        lines.append(f"Rank {rank}: {', '.join(pieces) if pieces else 'empty'}")
    return "\n".join(lines) + "\n"


def move_history_text(records: Iterable[MoveRecord]) -> str:
    """
    Render the move list, one numbered line per full move.

    Each line holds up to two plies ("1. White: e4, Black: e5"), so N
    records give ceil(N/2) numbered lines. The mover names come from the
    records themselves.
    """
    records = list(records)
    if not records:
        return EMPTY_HISTORY_TEXT

    lines = [HISTORY_HEADER]
    for index in range(0, len(records), 2):
        pair = records[index:index + 2]
        plies = ", ".join(f"{r.mover.label}: {r.notation}" for r in pair)
        lines.append(f"{index // 2 + 1}. {plies}")
    return "\n".join(lines) + "\n"


def describe_move(san: str) -> str:
    """
    Spoken description of a SAN move.

    "Nf3" -> "Knight to f3", "exd5+" -> "Pawn captures on d5, check",
    "O-O" -> "Castle kingside". Promotion suffixes do not change the
    destination square.
    """
    base = san.rstrip(CHECK_MARKER + MATE_MARKER)

    if base in ("O-O", "0-0"):
        description = "Castle kingside"
    elif base in ("O-O-O", "0-0-0"):
        description = "Castle queenside"
    else:
        piece = _PIECE_LETTERS.get(base[:1], "Pawn")
        squares = _SQUARE_RE.findall(base)
        target = squares[-1] if squares else base
        if CAPTURE_MARKER in base:
            description = f"{piece} captures on {target}"
        else:
            description = f"{piece} to {target}"

    if san.endswith(MATE_MARKER):
        description += ", checkmate"
    elif san.endswith(CHECK_MARKER):
        description += ", check"
    return description
