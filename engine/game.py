"""
Game engine facade: one human-versus-computer game.

GameEngine owns the authoritative position (a Rules instance), the move
history, the difficulty tier and the random source. Callers drive it with
explicit method calls; every feedback message travels back as a return
value or an exception, never through shared state.

Turn protocol:
    submit_move(human) -> if not status().game_over: computer_move()

Concurrency:
    An instance is not synchronized. Callers must not run two mutating
    calls (submit_move, computer_move, undo, reset) at once, and must not
    read while a mutation is in progress. The web layer keeps one lock per
    game for this.

Failure atomicity:
    Every GameError is raised before anything changes, so a rejected call
    leaves position, history and last-move marker exactly as they were.
"""

import logging
import random
from dataclasses import dataclass

from engine.constants import UNDO_PLIES
from engine.describe import board_description, move_history_text
from engine.errors import (
    GameOver,
    InternalConsistencyError,
    InvalidMove,
    NoLegalMoves,
    NothingToUndo,
)
from engine.history import LastMove, MoveRecord, PositionHistory
from engine.rules import Rules, Side
from engine.strategy import Difficulty, mating_move, select_move
from engine.suggest import MoveSuggester

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameStatus:
    """
    Snapshot of the game, recomputed on every status() call.

    game_over is always checkmate or stalemate or draw; it is derived here
    rather than asked of the rules so the invariant cannot drift.
    """

    side_to_move: Side
    in_check: bool
    is_checkmate: bool
    is_stalemate: bool
    is_insufficient_material: bool
    is_draw: bool
    fen: str
    last_move: LastMove | None

    @property
    def game_over(self) -> bool:
        return self.is_checkmate or self.is_stalemate or self.is_draw


class GameEngine:
    """
    Authoritative state for one game against the computer.

    Attributes:
        difficulty: Tier used by computer_move(). Fixed for the lifetime of
                    the instance and kept across reset().
    """

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.MEDIUM,
        rng: random.Random | None = None,
        fen: str | None = None,
        suggester: MoveSuggester | None = None,
    ) -> None:
        self._difficulty = difficulty
        self._rng = rng if rng is not None else random.Random()
        self._rules = Rules(fen)
        self._history = PositionHistory()
        self._suggester = suggester

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @property
    def history(self) -> tuple[MoveRecord, ...]:
        return self._history.all()

    @property
    def last_move(self) -> LastMove | None:
        return self._history.last_move

    # -----------------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------------

    def submit_move(self, text: str) -> str:
        """
        Apply a move for the side to move.

        Args:
            text: SAN ("Nf3", "exd5", "O-O") or coordinate notation ("g1f3").
                  Surrounding whitespace is ignored.

        Returns:
            The move in canonical SAN.

        Raises:
            InvalidMoveSyntax: text is not move notation.
            IllegalMove:       text is not legal here.
            GameOver:          the game has already ended.
        """
        self._ensure_in_progress()
        return self._apply(text)

    def computer_move(self) -> str:
        """
        Choose and apply a move for the side to move.

        A mate in one is always played. Otherwise the move comes from the
        advisory suggester when one is configured and the tier is Hard and
        its answer is legal, and from the difficulty strategy when not.

        Returns:
            The applied move in SAN.

        Raises:
            NoLegalMoves:             the side to move has no legal move.
            GameOver:                 the game was drawn with moves left.
            InternalConsistencyError: the chosen move was not legal. This is
                                      a bug, never a user error.
        """
        moves = self._rules.legal_moves()
        if not moves:
            raise NoLegalMoves("No legal moves available")
        self._ensure_in_progress()

        move = None
        if self._difficulty is Difficulty.HARD:
            move = self._suggested_move(moves)
        if move is None:
            move = select_move(moves, self._rules, self._difficulty, self._rng)

        if move not in moves:
            _log.error("Strategy returned %r, not in legal moves %s", move, moves)
            raise InternalConsistencyError(f"Chosen move {move!r} is not legal")

        try:
            return self._apply(move)
        except InvalidMove as exc:
            _log.error("Legal move %r was rejected when applied", move)
            raise InternalConsistencyError(f"Chosen move {move!r} could not be applied") from exc

    def undo(self) -> None:
        """
        Take back the last turn pair (computer reply and the human move).

        Refused once the game is over, since the final ply may be the human's
        own and removing two plies would leave the computer's side to move.

        Raises:
            NothingToUndo: fewer than two plies have been played.
            GameOver:      the game has ended.
        """
        if len(self._history) < UNDO_PLIES:
            raise NothingToUndo("No moves to undo")
        self._ensure_in_progress()

        removed = self._history.truncate_last(UNDO_PLIES)
        for _ in range(removed):
            self._rules.undo()
        _log.debug("Undid %d plies; %d remain", removed, len(self._history))

    def reset(self) -> None:
        """Start a new game from the standard position, keeping the difficulty."""
        self._rules.reset()
        self._history.clear()

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    def status(self) -> GameStatus:
        rules_status = self._rules.status()
        return GameStatus(
            side_to_move=rules_status.side_to_move,
            in_check=rules_status.in_check,
            is_checkmate=rules_status.is_checkmate,
            is_stalemate=rules_status.is_stalemate,
            is_insufficient_material=rules_status.is_insufficient_material,
            is_draw=rules_status.is_draw,
            fen=self._rules.encode(),
            last_move=self._history.last_move,
        )

    def legal_moves(self) -> list[str]:
        """Legal moves in SAN. Order is whatever the rules generate."""
        return self._rules.legal_moves()

    def board_description(self) -> str:
        return board_description(self._rules)

    def move_history_text(self) -> str:
        return move_history_text(self._history)

    def best_move(self) -> str | None:
        """
        Hint for the side to move: what the Hard tier would play.

        Works on a copy of the random state so asking for a hint never
        changes the sequence of computer moves. Returns None when there is no
        legal move.
        """
        moves = self._rules.legal_moves()
        if not moves:
            return None
        suggested = self._suggested_move(moves)
        if suggested is not None:
            return suggested
        hint_rng = random.Random()
        hint_rng.setstate(self._rng.getstate())
        return select_move(moves, self._rules, Difficulty.HARD, hint_rng)

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    def _ensure_in_progress(self) -> None:
        if self.status().game_over:
            raise GameOver("The game is over")

    def _apply(self, text: str) -> str:
        applied = self._rules.apply_move(text)
        self._history.append(MoveRecord.from_applied(applied))
        _log.debug("%s played %s (%s-%s)", applied.mover.label, applied.san,
                   applied.origin, applied.destination)
        return applied.san

    def _suggested_move(self, moves: list[str]) -> str | None:
        """
        Ask the advisory suggester, if any, and keep its answer only if legal.

        Every failure mode (no suggester, no answer, unparseable or illegal
        answer) returns None so the caller falls back to the local strategy.
        The suggester is not consulted when a mate in one is on the board;
        the strategy plays it.
        """
        if self._suggester is None:
            return None
        if mating_move(moves, self._rules) is not None:
            return None

        suggestion = self._suggester.suggest(self._rules.encode())
        if suggestion is None:
            return None

        try:
            san = self._rules.normalize(suggestion)
        except InvalidMove:
            _log.warning("Discarding invalid suggestion %r", suggestion)
            return None

        if san not in moves:
            _log.warning("Discarding suggestion %r: not in legal moves", suggestion)
            return None
        return san
