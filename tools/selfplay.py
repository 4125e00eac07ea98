#!/usr/bin/env python3
"""
Self-play: pit the difficulty tiers against each other.

Run after changing a strategy weight to check that the tiers still rank
Easy < Medium < Hard. Each pairing plays a fixed number of games from the
starting position with seeded random sources, so a run is reproducible.

Usage: python3 -m tools.selfplay [--games N] [--seed S] [--max-plies P]
"""
import argparse
import random

from engine.rules import Rules, Side
from engine.strategy import Difficulty, select_move

PAIRINGS = [
    (Difficulty.EASY,   Difficulty.MEDIUM),
    (Difficulty.MEDIUM, Difficulty.EASY),
    (Difficulty.MEDIUM, Difficulty.HARD),
    (Difficulty.HARD,   Difficulty.MEDIUM),
    (Difficulty.EASY,   Difficulty.HARD),
    (Difficulty.HARD,   Difficulty.EASY),
]


def play_game(white: Difficulty, black: Difficulty, rng: random.Random, max_plies: int) -> tuple[str, int]:
    """Play one game and return (result, plies).

    The result is "white", "black" or "draw". A game that reaches max_plies
    without ending counts as a draw.
    """
    rules = Rules()
    for ply in range(max_plies):
        status = rules.status()
        if status.is_checkmate:
            winner = Side.BLACK if status.side_to_move is Side.WHITE else Side.WHITE
            return winner.value, ply
        if status.is_draw:
            return "draw", ply

        tier = white if rules.side_to_move is Side.WHITE else black
        rules.apply_move(select_move(rules.legal_moves(), rules, tier, rng))
    return "draw", max_plies


def run_pairing(white: Difficulty, black: Difficulty, games: int, seed: int, max_plies: int) -> dict:
    rng = random.Random(seed)
    wins = losses = draws = total_plies = 0
    for _ in range(games):
        result, plies = play_game(white, black, rng, max_plies)
        total_plies += plies
        if result == "white":
            wins += 1
        elif result == "black":
            losses += 1
        else:
            draws += 1
    return {
        "white": white.value,
        "black": black.value,
        "wins": wins,
        "losses": losses,
        "draws": draws,
        "avg_plies": total_plies // max(1, games),
    }


def main() -> None:
    """Run every pairing and print a summary table."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--games", type=int, default=10)
    parser.add_argument("--seed", type=int, default=1)
    parser.add_argument("--max-plies", type=int, default=200)
    args = parser.parse_args()

    print(f"Self-play: {args.games} games per pairing, seed {args.seed}")
    print()
    print(f"{'White':<8} {'Black':<8} {'W':>4} {'L':>4} {'D':>4} {'Plies':>6}")
    print("-" * 38)

    for white, black in PAIRINGS:
        r = run_pairing(white, black, args.games, args.seed, args.max_plies)
        print(
            f"{r['white']:<8} {r['black']:<8} {r['wins']:>4} {r['losses']:>4} "
            f"{r['draws']:>4} {r['avg_plies']:>6}"
        )


if __name__ == "__main__":
    main()
