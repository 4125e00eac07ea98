"""
Chess game engine package.

This package implements the core of a human-versus-computer chess game:
authoritative game state with undo, and a computer opponent at three
difficulty tiers. Move legality comes from python-chess.

Modules:
    constants — Strategy weights, probabilities, and fixed text
    errors    — Exception taxonomy (GameError and friends)
    rules     — python-chess adapter: legal moves, apply, trial, status
    history   — Move records, last-move marker, and the position log
    strategy  — Difficulty tiers and the computer's move selection
    describe  — Screen-reader text for the board, history, and moves
    suggest   — Advisory remote move suggestions (Lichess cloud eval)
    game      — GameEngine facade composing all of the above
"""
