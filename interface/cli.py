"""
Terminal front end: play the engine from a line-oriented prompt.

Every line read from stdin is either a command or a move. Game output goes
to stdout; diagnostics go to stderr so the game transcript stays clean when
stdout is piped to a screen reader or a file.

Commands:
    help     show this list
    moves    list the legal moves, with spoken descriptions
    board    describe every occupied square, rank by rank
    history  show the moves played so far
    hint     suggest a move
    undo     take back your last move and the computer's reply
    new      start a new game at the same difficulty
    quit     leave

Anything else is submitted as a move (e.g. e4, Nf3, O-O, Qxd5). After an
accepted move the computer replies at once unless the game is over.
"""

import argparse
import logging
import random
import sys
from typing import Iterable, TextIO

from engine.constants import DEFAULT_DIFFICULTY
from engine.describe import describe_move
from engine.errors import GameOver, InvalidMove, NoLegalMoves, NothingToUndo
from engine.game import GameEngine
from engine.strategy import Difficulty

_logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Enter your move (e.g., e4, Nf3, O-O, Qxd5).\n"
    "Special commands: help, moves, board, history, hint, undo, new, quit."
)
GAME_OVER_TEXT = "The game is over. Type 'new' to play again."


def _log(message: str) -> None:
    """
    Write a diagnostic message to stderr.

    stdout carries only the game transcript.
    """
    print(message, file=sys.stderr, flush=True)


class CliHandler:
    """
    Stateful handler for one terminal session.

    Attributes:
        engine: The game being played. The human always has the side to
                move when a line is read.
        hints:  When True (beginner mode), a suggested move is printed
                whenever it is the human's turn.
        out:    Stream the transcript is written to.
    """

    def __init__(self, engine: GameEngine, hints: bool = False, out: TextIO | None = None) -> None:
        self.engine = engine
        self.hints = hints
        self.out = out if out is not None else sys.stdout

    def _send(self, line: str) -> None:
        """Write a transcript line and flush so interactive readers see it at once."""
        print(line, file=self.out, flush=True)

    # -----------------------------------------------------------------------
    # Command handlers
    # -----------------------------------------------------------------------

    def handle_help(self) -> None:
        self._send(HELP_TEXT)

    def handle_moves(self) -> None:
        moves = self.engine.legal_moves()
        if not moves:
            self._send("No legal moves.")
            return
        self._send(f"{len(moves)} legal moves:")
        for move in moves:
            self._send(f"  {move}: {describe_move(move)}")

    def handle_board(self) -> None:
        self._send(self.engine.board_description().rstrip("\n"))

    def handle_history(self) -> None:
        self._send(self.engine.move_history_text().rstrip("\n"))

    def handle_hint(self) -> None:
        move = self.engine.best_move()
        if move is None:
            self._send("No legal moves.")
        else:
            self._send(f"Suggested move: {move} ({describe_move(move)})")

    def handle_undo(self) -> None:
        try:
            self.engine.undo()
        except NothingToUndo as exc:
            self._send(f"{exc}.")
            return
        except GameOver:
            self._send(GAME_OVER_TEXT)
            return
        self._send("Took back your last move and the computer's reply.")

    def handle_new(self) -> None:
        self.engine.reset()
        self._send(f"New game at {self.engine.difficulty.value} difficulty. You play White.")

    def handle_move(self, text: str) -> None:
        """
        Submit a human move and play the computer's reply.

        Rejected moves are reported and leave the game unchanged.
        """
        try:
            move = self.engine.submit_move(text)
        except GameOver:
            self._send(GAME_OVER_TEXT)
            return
        except InvalidMove as exc:
            self._send(f"{exc}. Type 'moves' to list legal moves.")
            return

        self._send(f"You played {move}: {describe_move(move)}.")
        if self._announce_result():
            return

        try:
            reply = self.engine.computer_move()
        except NoLegalMoves as exc:
            self._send(f"{exc}.")
            return

        self._send(f"Computer played {reply}: {describe_move(reply)}.")
        if not self._announce_result():
            self.prompt()

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    def _announce_result(self) -> bool:
        """Report check or the end of the game. Returns True if the game is over."""
        status = self.engine.status()
        if status.is_checkmate:
            self._send(f"Checkmate! {status.side_to_move.label} is mated.")
        elif status.is_stalemate:
            self._send("Stalemate! The game is drawn.")
        elif status.is_insufficient_material:
            self._send("Draw by insufficient material.")
        elif status.is_draw:
            self._send("Draw!")
        elif status.in_check:
            self._send(f"{status.side_to_move.label} is in check.")
        return status.game_over

    def prompt(self) -> None:
        """Tell the human it is their move, with a hint in beginner mode."""
        if self.hints:
            self.handle_hint()
        self._send("Your move.")

    def handle_line(self, line: str) -> bool:
        """
        Dispatch one input line.

        Returns:
            False when the session should end, True otherwise.
        """
        text = line.strip()
        if not text:
            return True

        command = text.lower()
        if command == "quit":
            return False
        if command == "help":
            self.handle_help()
        elif command == "moves":
            self.handle_moves()
        elif command == "board":
            self.handle_board()
        elif command == "history":
            self.handle_history()
        elif command == "hint":
            self.handle_hint()
        elif command == "undo":
            self.handle_undo()
        elif command == "new":
            self.handle_new()
            self.prompt()
        else:
            self.handle_move(text)
        return True


def run_cli_loop(handler: CliHandler, lines: Iterable[str]) -> None:
    """
    Main input loop.

    Reads lines until "quit" or end of input. Only GameErrors are
    recoverable and they are handled inside the command handlers; anything
    else (an internal-consistency fault included) is logged and re-raised.
    """
    handler.handle_help()
    handler.prompt()
    for raw_line in lines:
        try:
            if not handler.handle_line(raw_line):
                break
        except Exception:
            _logger.exception("cli: unhandled error for input %r", raw_line.strip())
            raise


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play chess against the computer.")
    parser.add_argument(
        "--difficulty",
        default=DEFAULT_DIFFICULTY,
        help="easy, medium, hard, or beginner (easy with hints)",
    )
    parser.add_argument("--seed", type=int, default=None, help="seed for reproducible games")
    parser.add_argument("--fen", default=None, help="start from this position instead")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING, stream=sys.stderr)

    try:
        difficulty = Difficulty.parse(args.difficulty)
        engine = GameEngine(difficulty=difficulty, rng=random.Random(args.seed), fen=args.fen)
    except ValueError as e:
        _log(f"cli: {e}")
        return 2

    hints = args.difficulty.strip().lower() == "beginner"
    run_cli_loop(CliHandler(engine, hints=hints), sys.stdin)
    return 0


if __name__ == "__main__":
    sys.exit(main())
