"""
Difficulty strategies: choose the computer's move from the legal-move list.

This module defines the stable entry point the game engine depends on:
select_move(moves, rules, difficulty, rng). It only ever returns one of the
strings it was given, and it never mutates the position. All lookahead goes
through Rules.trial_apply(), which works on a copy.

Tiers:

1. Easy: mostly random. 30% of the time a uniformly random move (a
   "blunder"); otherwise a random capture with probability 0.7 when any
   capture exists, else a random move.

2. Medium: one-ply tactics. Plays checkmate-in-one if available. Otherwise
   drops every move that lets the opponent mate immediately (the "safe"
   subset, falling back to all moves if none is safe) and prefers a random
   capture, then a random check, then anything.

3. Hard: same mate short-circuit and safe subset as Medium, then scores
   each candidate from its notation (capture, captured-material guess,
   check, small jitter) and samples from the top 30%.

Lookahead cost:
    The safe-subset test is two plies deep: for each candidate, every
    opponent reply is examined for mate. Rules.has_mating_reply() only
    pushes replies that give check, which keeps this affordable in Python.

Randomness:
    Every random draw goes through the rng argument, a random.Random.
    Tests seed it; production passes an unseeded instance.
"""

import enum
import logging
import random
from typing import Sequence

import chess

from engine.constants import (
    BLUNDER_PROBABILITY,
    CAPTURE_BONUS,
    CAPTURE_MARKER,
    CAPTURE_PREFERENCE,
    CHECK_BONUS,
    CHECK_MARKER,
    JITTER_RANGE,
    MATERIAL_BONUS,
    MATERIAL_LETTERS,
    TOP_FRACTION,
)
from engine.rules import Rules

_log = logging.getLogger(__name__)


class Difficulty(enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, text: str) -> "Difficulty":
        """
        Parse a tier name case-insensitively.

        "beginner" is accepted as an alias for EASY; beginner mode is Easy
        play plus move hints, and hints are a caller concern.

        Raises:
            ValueError: the name is not a known tier.
        """
        name = text.strip().lower()
        if name == "beginner":
            return cls.EASY
        try:
            return cls(name)
        except ValueError:
            choices = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown difficulty {text!r}; expected one of {choices}") from None


# ---------------------------------------------------------------------------
# Notation predicates
# ---------------------------------------------------------------------------


def is_capture(san: str) -> bool:
    return CAPTURE_MARKER in san


def is_check(san: str) -> bool:
    # Mating moves carry "#" instead; they never reach this test because
    # the mate short-circuit returns first.
    return CHECK_MARKER in san


def _captured_material(san: str) -> int:
    for letter, piece_type in MATERIAL_LETTERS:
        if letter in san:
            return MATERIAL_BONUS[piece_type]
    return MATERIAL_BONUS[chess.PAWN]


# ---------------------------------------------------------------------------
# Lookahead helpers
# ---------------------------------------------------------------------------


def mating_move(moves: Sequence[str], rules: Rules) -> str | None:
    """
    First move in input order that checkmates the opponent, or None.

    No randomness: given the same move list this always returns the same
    move, which is what makes mate-in-one precedence testable.
    """
    for move in moves:
        if rules.trial_apply(move).is_checkmate():
            return move
    return None


def safe_moves(moves: Sequence[str], rules: Rules) -> list[str]:
    """Moves after which the opponent has no immediate mating reply."""
    return [move for move in moves if not rules.trial_apply(move).has_mating_reply()]


def _candidates(moves: Sequence[str], rules: Rules) -> list[str]:
    safe = safe_moves(moves, rules)
    if safe:
        return safe
    _log.debug("No safe moves among %d; considering all", len(moves))
    return list(moves)


def score_move(san: str, rng: random.Random) -> float:
    """
    Hard-tier score for one move, inferred from its notation alone.

    Score formula:
        capture:  CAPTURE_BONUS + material bonus for the first piece letter
                  in the notation (pawn value when there is none)
        check:    + CHECK_BONUS
        jitter:   + uniform [0, JITTER_RANGE), for tie-breaking only
    """
    score = 0.0
    if is_capture(san):
        score += CAPTURE_BONUS + _captured_material(san)
    if is_check(san):
        score += CHECK_BONUS
    return score + rng.random() * JITTER_RANGE


# ---------------------------------------------------------------------------
# Tiers
# ---------------------------------------------------------------------------


def _easy_move(moves: Sequence[str], rng: random.Random) -> str:
    if rng.random() < BLUNDER_PROBABILITY:
        return rng.choice(moves)

    captures = [m for m in moves if is_capture(m)]
    if captures and rng.random() < CAPTURE_PREFERENCE:
        return rng.choice(captures)

    return rng.choice(moves)


def _medium_move(moves: Sequence[str], rules: Rules, rng: random.Random) -> str:
    mate = mating_move(moves, rules)
    if mate is not None:
        return mate

    considered = _candidates(moves, rules)

    captures = [m for m in considered if is_capture(m)]
    if captures:
        return rng.choice(captures)

    checks = [m for m in considered if is_check(m)]
    if checks:
        return rng.choice(checks)

    return rng.choice(considered)


def _hard_move(moves: Sequence[str], rules: Rules, rng: random.Random) -> str:
    mate = mating_move(moves, rules)
    if mate is not None:
        return mate

    considered = _candidates(moves, rules)
    scored = [(score_move(m, rng), m) for m in considered]
    # Sort on the score only: ties keep input order.
    scored.sort(key=lambda pair: pair[0], reverse=True)

    top_count = max(1, int(len(scored) * TOP_FRACTION))
    return rng.choice(scored[:top_count])[1]


def select_move(
    moves: Sequence[str],
    rules: Rules,
    difficulty: Difficulty,
    rng: random.Random,
) -> str:
    """
    Choose one move from moves according to the difficulty tier.

    Args:
        moves:      Legal moves in SAN for the side to move in rules. Must be
                    non-empty; callers check before asking.
        rules:      Current position. Only queried through trial_apply().
        difficulty: Tier to play at.
        rng:        Source of all randomness.

    Returns:
        One element of moves.

    Raises:
        ValueError: moves is empty (a caller bug, not a game condition).
    """
    if not moves:
        raise ValueError("select_move requires at least one legal move")

    if difficulty is Difficulty.EASY:
        move = _easy_move(moves, rng)
    elif difficulty is Difficulty.MEDIUM:
        move = _medium_move(moves, rules, rng)
    else:
        move = _hard_move(moves, rules, rng)

    _log.debug("difficulty=%s chose %s from %d moves", difficulty.value, move, len(moves))
    return move
