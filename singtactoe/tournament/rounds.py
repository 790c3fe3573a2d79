"""
Grid construction, joker allocation and line detection.

The grid is a square of side sqrt(grid_size); rounds are stored row-major.
"""

from __future__ import annotations

import math
from typing import Mapping

from singtactoe.tournament.base import Round

# grid size -> ((random team 1, random team 2), (retry team 1, retry team 2))
JOKER_TABLE: Mapping[int, tuple[tuple[int, int], tuple[int, int]]] = {
    9: ((1, 1), (0, 0)),
    16: ((2, 2), (1, 1)),
    25: ((3, 3), (2, 2)),
}


def build_rounds(grid_size: int) -> list[Round]:
    """Return grid_size fresh, unassigned rounds."""
    return [Round() for _ in range(grid_size)]


def compute_jokers(grid_size: int) -> tuple[list[int], list[int]]:
    """
    Return (num_joker_random, num_joker_retry) for a grid size.

    Unsupported sizes get no jokers at all; the configuration step is
    responsible for rejecting them before play.
    """
    random_jokers, retry_jokers = JOKER_TABLE.get(grid_size, ((0, 0), (0, 0)))
    return list(random_jokers), list(retry_jokers)


def grid_side(grid_size: int) -> int:
    side = math.isqrt(grid_size)
    if side * side != grid_size:
        raise ValueError(f"Grid size must be a perfect square, got {grid_size}")
    return side


def grid_lines(grid_size: int) -> list[list[int]]:
    """Every row, column and both diagonals as lists of round indices."""
    side = grid_side(grid_size)
    rows = [[r * side + c for c in range(side)] for r in range(side)]
    cols = [[r * side + c for r in range(side)] for c in range(side)]
    diagonals = [
        [i * side + i for i in range(side)],
        [i * side + (side - 1 - i) for i in range(side)],
    ]
    return rows + cols + diagonals


def line_winner(rounds: list[Round]) -> int:
    """Return the team (1 or 2) owning a complete line, or 0 if nobody does."""
    for line in grid_lines(len(rounds)):
        owners = {rounds[i].winner if rounds[i].finished else 0 for i in line}
        if len(owners) == 1:
            (owner,) = owners
            if owner:
                return owner
    return 0
