"""
Rules adapter: the engine's only window onto move legality.

python-chess does all of the real work (move generation, SAN, check and
draw detection, FEN). This module narrows it to the handful of operations
the game engine needs and translates python-chess parse failures into the
engine's own error taxonomy.

A Rules instance owns exactly one chess.Board. Positions are identified by
their FEN encoding; nothing outside this module inspects board internals
except through piece_at().
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

import chess

from engine.errors import IllegalMove, InvalidMoveSyntax


class Side(enum.Enum):
    """The two players. White always moves first from the starting position."""

    WHITE = "white"
    BLACK = "black"

    @classmethod
    def from_color(cls, color: chess.Color) -> Side:
        return cls.WHITE if color == chess.WHITE else cls.BLACK

    @property
    def label(self) -> str:
        """Capitalised name used in move history text ("White", "Black")."""
        return self.value.capitalize()


@dataclass(frozen=True)
class AppliedMove:
    """
    Result of a successful apply_move() call.

    Attributes:
        san:         Canonical standard algebraic notation, with check/mate suffix.
        mover:       Side that made the move.
        origin:      Square the piece left (e.g. "e2"). For castling this is
                     the king's square.
        destination: Square the piece arrived on (e.g. "e4").
        fen:         Position encoding after the move.
    """

    san: str
    mover: Side
    origin: str
    destination: str
    fen: str


@dataclass(frozen=True)
class RulesStatus:
    """Terminal and check flags for one position, as reported by the rules."""

    side_to_move: Side
    in_check: bool
    is_checkmate: bool
    is_stalemate: bool
    is_insufficient_material: bool
    is_draw: bool


class Rules:
    """
    Stateful wrapper around one python-chess board.

    Mutating operations (apply_move, undo, reset) act on the wrapped board.
    trial_apply() never does: it returns a new Rules over a copy.
    """

    def __init__(self, fen: str | None = None) -> None:
        # chess.Board raises ValueError for a malformed FEN; let it propagate.
        board = chess.Board(fen) if fen is not None else chess.Board()
        if not board.is_valid():
            raise ValueError(f"Not a legal position ({board.status()!r}): {fen!r}")
        self._board = board

    @classmethod
    def _wrap(cls, board: chess.Board) -> Rules:
        rules = cls.__new__(cls)
        rules._board = board
        return rules

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    @property
    def side_to_move(self) -> Side:
        return Side.from_color(self._board.turn)

    def legal_moves(self) -> list[str]:
        """
        All legal moves in SAN, in python-chess generation order.

        The order is stable for a given position but carries no meaning; it
        differs between positions.
        """
        board = self._board
        return [board.san(move) for move in board.legal_moves]

    def status(self) -> RulesStatus:
        """
        Check and terminal flags for the current position.

        is_draw covers stalemate, insufficient material, the fifty-move rule
        and threefold repetition. Repetition needs the move stack, so it is
        only meaningful on the authoritative board, not on trial copies.
        """
        board = self._board
        is_stalemate = board.is_stalemate()
        insufficient = board.is_insufficient_material()
        is_draw = (
            is_stalemate
            or insufficient
            or board.is_fifty_moves()
            or board.is_repetition(3)
        )
        return RulesStatus(
            side_to_move=self.side_to_move,
            in_check=board.is_check(),
            is_checkmate=board.is_checkmate(),
            is_stalemate=is_stalemate,
            is_insufficient_material=insufficient,
            is_draw=is_draw,
        )

    def is_checkmate(self) -> bool:
        return self._board.is_checkmate()

    def has_mating_reply(self) -> bool:
        """
        Return True if the side to move has a move that checkmates immediately.

        Only checking moves can mate, so gives_check() filters the candidates
        before the expensive push/is_checkmate round trip. The board is
        restored before returning.
        """
        board = self._board
        for move in board.legal_moves:
            if not board.gives_check(move):
                continue
            board.push(move)
            try:
                mated = board.is_checkmate()
            finally:
                board.pop()
            if mated:
                return True
        return False

    def piece_at(self, square: str) -> chess.Piece | None:
        """Piece on a named square ("e4"), or None when the square is empty."""
        return self._board.piece_at(chess.parse_square(square))

    def encode(self) -> str:
        """Portable position encoding (FEN)."""
        return self._board.fen()

    # -----------------------------------------------------------------------
    # Parsing
    # -----------------------------------------------------------------------

    def _parse(self, text: str) -> chess.Move:
        """
        Resolve move text to a legal chess.Move.

        SAN is tried first. python-chess's SAN parser also accepts long
        algebraic forms such as "e2e4" and "e1g1", so the UCI fallback only
        catches coordinate spellings the SAN grammar rejects.

        Raises:
            InvalidMoveSyntax: neither SAN nor UCI parses the text.
            IllegalMove:       the text parses but names no legal move, or
                               names more than one (ambiguous SAN).
        """
        board = self._board
        try:
            move = board.parse_san(text)
        except chess.AmbiguousMoveError as exc:
            raise IllegalMove(f"Ambiguous move: {text!r}") from exc
        except chess.IllegalMoveError:
            san_error: Exception = IllegalMove(f"Illegal move: {text!r}")
        except chess.InvalidMoveError:
            san_error = InvalidMoveSyntax(f"Invalid move format: {text!r}")
        else:
            # parse_san maps "--" and friends to the null move, which is
            # never a legal move here.
            if not move:
                raise IllegalMove(f"Illegal move: {text!r}")
            return move

        try:
            move = chess.Move.from_uci(text)
        except chess.InvalidMoveError:
            raise san_error from None

        if not board.is_legal(move):
            raise IllegalMove(f"Illegal move: {text!r}")
        return move

    def normalize(self, text: str) -> str:
        """Canonical SAN for move text, without applying it."""
        return self._board.san(self._parse(text.strip()))

    # -----------------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------------

    def apply_move(self, text: str) -> AppliedMove:
        """
        Apply a move given as SAN (or UCI) text.

        Parsing happens before anything is pushed, so a failed call leaves
        the board untouched.
        """
        board = self._board
        move = self._parse(text.strip())
        san = board.san(move)
        mover = self.side_to_move
        board.push(move)
        return AppliedMove(
            san=san,
            mover=mover,
            origin=chess.square_name(move.from_square),
            destination=chess.square_name(move.to_square),
            fen=board.fen(),
        )

    def trial_apply(self, notation: str) -> Rules:
        """
        Apply a move to a throwaway copy and return it.

        The copy has no move stack, which keeps it cheap; repetition-based
        draws are therefore not visible on trial positions.
        """
        board = self._board.copy(stack=False)
        board.push(self._parse(notation))
        return Rules._wrap(board)

    def undo(self) -> None:
        """Take back the most recent ply. Raises IndexError if none was played."""
        self._board.pop()

    def reset(self) -> None:
        """Return to the standard starting position with an empty move stack."""
        self._board.reset()
