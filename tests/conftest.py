"""
Shared fixtures for the test suite.

Every randomized test takes its random source from a seeded fixture, so
failures reproduce. Positions live in positions.py.
"""

import random

import pytest

from engine.rules import Rules


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


def _random_walk_positions(count: int, seed: int, max_plies: int = 60) -> list[str]:
    """FENs with at least one legal move, collected from seeded random games."""
    walk_rng = random.Random(seed)
    positions: list[str] = []
    while len(positions) < count:
        rules = Rules()
        for _ in range(max_plies):
            moves = rules.legal_moves()
            if not moves:
                break
            positions.append(rules.encode())
            if len(positions) == count:
                break
            rules.apply_move(walk_rng.choice(moves))
    return positions


@pytest.fixture(scope="session")
def random_positions() -> list[str]:
    """1000 varied positions shared by the property tests."""
    return _random_walk_positions(1000, seed=20240601)
