"""
Error taxonomy for the game engine.

Every recoverable condition a caller can trigger derives from GameError and
is raised before any state changes, so catching it leaves the game exactly
as it was. InternalConsistencyError is deliberately outside that hierarchy:
it signals a programming defect and must never be caught by a generic
GameError handler.
"""


class GameError(Exception):
    """Base class for recoverable, caller-facing game errors."""


class InvalidMove(GameError):
    """A submitted move was rejected. See the two subclasses for the reason."""


class InvalidMoveSyntax(InvalidMove):
    """The text does not parse as SAN or UCI coordinate notation."""


class IllegalMove(InvalidMove):
    """The text is well formed but not a legal move in the current position."""


class NoLegalMoves(GameError):
    """A computer move was requested in a position with no legal moves."""


class NothingToUndo(GameError):
    """Undo was requested with fewer than one full turn pair recorded."""


class GameOver(GameError):
    """A move or undo was requested after checkmate, stalemate or a draw."""


class InternalConsistencyError(RuntimeError):
    """The engine produced a move outside the legal set, or failed to apply it."""
