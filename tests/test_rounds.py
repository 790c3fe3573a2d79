"""
Tests for grid construction, the joker table and line detection.
"""

from __future__ import annotations

import unittest

from singtactoe.tournament.base import Round
from singtactoe.tournament.rounds import (
    build_rounds,
    compute_jokers,
    grid_lines,
    grid_side,
    line_winner,
)


def won(team: int) -> Round:
    return Round(song_id=0, winner=team, finished=True)


class TestJokerTable(unittest.TestCase):
    def test_supported_sizes(self) -> None:
        cases = [
            (9, [1, 1], [0, 0]),
            (16, [2, 2], [1, 1]),
            (25, [3, 3], [2, 2]),
        ]
        for size, random_jokers, retry_jokers in cases:
            with self.subTest(size=size):
                self.assertEqual(compute_jokers(size), (random_jokers, retry_jokers))

    def test_unsupported_sizes_get_no_jokers(self) -> None:
        for size in (0, 4, 10, 36):
            with self.subTest(size=size):
                self.assertEqual(compute_jokers(size), ([0, 0], [0, 0]))

    def test_returned_lists_are_fresh(self) -> None:
        random_jokers, _ = compute_jokers(9)
        random_jokers[0] -= 1
        self.assertEqual(compute_jokers(9)[0], [1, 1])


class TestBuildRounds:
    def test_builds_empty_rounds(self):
        rounds = build_rounds(9)
        assert len(rounds) == 9
        for r in rounds:
            assert r.song_id is None
            assert not r.assigned
            assert r.winner == 0
            assert not r.finished

    def test_rounds_are_independent_objects(self):
        rounds = build_rounds(16)
        rounds[0].winner = 1
        assert rounds[1].winner == 0
        assert len({id(r) for r in rounds}) == 16


class TestGridLines:
    def test_grid_side(self):
        assert grid_side(9) == 3
        assert grid_side(16) == 4
        assert grid_side(25) == 5

    def test_grid_side_rejects_non_square(self):
        try:
            grid_side(10)
        except ValueError as exc:
            assert "perfect square" in str(exc)
        else:
            raise AssertionError("expected ValueError")

    def test_line_count(self):
        # rows + columns + two diagonals
        assert len(grid_lines(9)) == 8
        assert len(grid_lines(25)) == 12

    def test_diagonals_3x3(self):
        lines = grid_lines(9)
        assert [0, 4, 8] in lines
        assert [2, 4, 6] in lines


class TestLineWinner:
    def test_empty_grid_has_no_winner(self):
        assert line_winner(build_rounds(9)) == 0

    def test_row(self):
        rounds = build_rounds(9)
        for i in (3, 4, 5):
            rounds[i] = won(2)
        assert line_winner(rounds) == 2

    def test_column(self):
        rounds = build_rounds(16)
        for i in (1, 5, 9, 13):
            rounds[i] = won(1)
        assert line_winner(rounds) == 1

    def test_anti_diagonal(self):
        rounds = build_rounds(9)
        for i in (2, 4, 6):
            rounds[i] = won(1)
        assert line_winner(rounds) == 1

    def test_mixed_line_is_not_a_win(self):
        rounds = build_rounds(9)
        rounds[0], rounds[1], rounds[2] = won(1), won(2), won(1)
        assert line_winner(rounds) == 0

    def test_unfinished_cells_do_not_count(self):
        rounds = build_rounds(9)
        rounds[0], rounds[1] = won(1), won(1)
        rounds[2] = Round(song_id=3, winner=0, finished=False)
        assert line_winner(rounds) == 0
