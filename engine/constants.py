"""
Engine constants: strategy weights, probabilities, and presentation strings.

All tunable numbers used by the difficulty strategies are defined here so that
tuning a tier never means hunting for magic numbers inside the selector.
The values are simple notation heuristics, not an evaluation function.
"""

import chess

# ---------------------------------------------------------------------------
# Easy tier
# ---------------------------------------------------------------------------
# BLUNDER_PROBABILITY: chance of ignoring every heuristic and playing a
# uniformly random legal move.
# CAPTURE_PREFERENCE: chance of taking a random capture when one exists.

BLUNDER_PROBABILITY: float = 0.3
CAPTURE_PREFERENCE: float = 0.7

# ---------------------------------------------------------------------------
# Hard tier scoring
# ---------------------------------------------------------------------------
# Scores are inferred from notation only. CAPTURE_BONUS applies to any move
# containing the capture marker; the material bonus is keyed by the first
# piece letter found in the notation (pawn when none is present).

CAPTURE_BONUS: int = 10
CHECK_BONUS: int = 5

MATERIAL_BONUS: dict[int, int] = {
    chess.QUEEN:  9,
    chess.ROOK:   5,
    chess.BISHOP: 3,
    chess.KNIGHT: 3,
    chess.PAWN:   1,
}

# Letters are tested in this order; a move containing several letters
# (e.g. "Rxd8=Q") takes the first hit.
MATERIAL_LETTERS: tuple[tuple[str, int], ...] = (
    ("Q", chess.QUEEN),
    ("R", chess.ROOK),
    ("B", chess.BISHOP),
    ("N", chess.KNIGHT),
)

# Jitter is drawn from [0, JITTER_RANGE) and only breaks ties.
JITTER_RANGE: float = 2.0

# Fraction of the sorted candidate list the hard tier samples from.
TOP_FRACTION: float = 0.3

# ---------------------------------------------------------------------------
# Notation markers (standard algebraic notation)
# ---------------------------------------------------------------------------

CAPTURE_MARKER: str = "x"
CHECK_MARKER: str = "+"
MATE_MARKER: str = "#"

# ---------------------------------------------------------------------------
# Game defaults and text
# ---------------------------------------------------------------------------

DEFAULT_DIFFICULTY: str = "medium"

# A turn pair is one human ply plus the computer's reply; undo always
# removes a whole pair so the human is back on move.
UNDO_PLIES: int = 2

EMPTY_HISTORY_TEXT: str = "Game started. White to move."
HISTORY_HEADER: str = "Move history:"
BOARD_HEADER: str = "Board position:"

# ---------------------------------------------------------------------------
# Advisory move-suggestion service
# ---------------------------------------------------------------------------
# The Lichess cloud evaluation endpoint only knows positions that somebody
# has already analysed, so "unavailable" is the common answer. The timeout
# is short because the local selector is always an acceptable answer.

LICHESS_API_URL: str = "https://lichess.org/api"
SUGGESTION_TIMEOUT: float = 5.0
USER_AGENT: str = "AccessChess/1.0"
