"""
Tests for PlayerAllocator — draw lengths, no repeats within a pass, refill
after exhaustion, and joint vs single-team allocation. A ScriptedRandom
makes every pick deterministic.
"""

from __future__ import annotations

import unittest

from singtactoe.collaborators.base import RandomSource, SeededRandom
from singtactoe.config import GameConfig
from singtactoe.tournament.base import TournamentState
from singtactoe.tournament.players import PlayerAllocator
from singtactoe.tournament.rounds import compute_jokers


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

class ScriptedRandom(RandomSource):
    """Returns the scripted values in order, then 0 forever."""

    def __init__(self, values=()) -> None:
        self.values = list(values)
        self.calls: list[int] = []

    def next_int(self, max_exclusive: int) -> int:
        self.calls.append(max_exclusive)
        return self.values.pop(0) if self.values else 0


def make_state(grid_size: int = 9, sizes=(2, 2)) -> TournamentState:
    config = GameConfig(
        grid_size=grid_size,
        num_players=list(sizes),
        profile_ids=[list(range(100, 100 + sizes[0])), list(range(200, 200 + sizes[1]))],
    )
    state = TournamentState.from_config(config)
    state.num_joker_random, state.num_joker_retry = compute_jokers(grid_size)
    return state


def assert_passes_are_permutations(seq: list[int], roster_size: int) -> None:
    for start in range(0, len(seq), roster_size):
        chunk = seq[start:start + roster_size]
        assert len(set(chunk)) == len(chunk), f"repeat within pass: {chunk}"
        assert set(chunk) <= set(range(roster_size))
        if len(chunk) == roster_size:
            assert sorted(chunk) == list(range(roster_size))


# --------------------------------------------------------------------------- #
# draw_sequence                                                                #
# --------------------------------------------------------------------------- #

class TestDrawSequence:
    def test_first_candidate_every_time(self):
        allocator = PlayerAllocator(ScriptedRandom())
        assert allocator.draw_sequence(3, 7) == [0, 1, 2, 0, 1, 2, 0]

    def test_scripted_picks_remove_from_pool(self):
        allocator = PlayerAllocator(ScriptedRandom([2, 1, 0, 1]))
        assert allocator.draw_sequence(3, 4) == [2, 1, 0, 1]

    def test_bound_shrinks_with_pool(self):
        rng = ScriptedRandom()
        PlayerAllocator(rng).draw_sequence(3, 5)
        assert rng.calls == [3, 2, 1, 3, 2]

    def test_out_of_range_pick_is_clamped(self):
        allocator = PlayerAllocator(ScriptedRandom([9]))
        assert allocator.draw_sequence(4, 1) == [3]

    def test_single_player_roster(self):
        allocator = PlayerAllocator(ScriptedRandom())
        assert allocator.draw_sequence(1, 5) == [0, 0, 0, 0, 0]

    def test_every_player_before_any_repeat(self):
        for seed in range(25):
            seq = PlayerAllocator(SeededRandom(seed)).draw_sequence(4, 11)
            assert len(seq) == 11
            assert_passes_are_permutations(seq, 4)

    def test_empty_roster_raises(self):
        allocator = PlayerAllocator(ScriptedRandom())
        try:
            allocator.draw_sequence(0, 3)
        except ValueError as exc:
            assert "empty roster" in str(exc)
        else:
            raise AssertionError("expected ValueError")


# --------------------------------------------------------------------------- #
# Joint and single-team allocation                                            #
# --------------------------------------------------------------------------- #

class TestAllocateJoint(unittest.TestCase):
    def test_lengths_include_retry_jokers(self) -> None:
        for grid_size, expected in ((9, 9), (16, 17), (25, 27)):
            with self.subTest(grid_size=grid_size):
                state = make_state(grid_size)
                PlayerAllocator(SeededRandom(1)).allocate_joint(state)
                self.assertEqual(len(state.teams[0].draws), expected)
                self.assertEqual(len(state.teams[1].draws), expected)

    def test_independent_pools(self) -> None:
        state = make_state(16, sizes=(3, 1))
        PlayerAllocator(ScriptedRandom()).allocate_joint(state)
        self.assertEqual(state.teams[0].draws[:6], [0, 1, 2, 0, 1, 2])
        self.assertEqual(state.teams[1].draws, [0] * 17)

    def test_lockstep_alternates_between_teams(self) -> None:
        state = make_state(9, sizes=(3, 2))
        rng = ScriptedRandom()
        PlayerAllocator(rng).allocate_joint(state)
        self.assertEqual(rng.calls[:5], [3, 2, 2, 1, 1])

    def test_uneven_targets(self) -> None:
        state = make_state(9)
        state.num_joker_retry = [2, 0]
        PlayerAllocator(SeededRandom(3)).allocate_joint(state)
        self.assertEqual(len(state.teams[0].draws), 11)
        self.assertEqual(len(state.teams[1].draws), 9)

    def test_passes_hold_for_both_teams(self) -> None:
        for seed in range(10):
            state = make_state(25, sizes=(4, 6))
            PlayerAllocator(SeededRandom(seed)).allocate_joint(state)
            assert_passes_are_permutations(state.teams[0].draws, 4)
            assert_passes_are_permutations(state.teams[1].draws, 6)

    def test_replaces_previous_sequences(self) -> None:
        state = make_state(9)
        state.teams[0].draws = [1, 1, 1]
        PlayerAllocator(SeededRandom(0)).allocate_joint(state)
        self.assertEqual(len(state.teams[0].draws), 9)


class TestAllocateTeam(unittest.TestCase):
    def test_only_named_team_changes(self) -> None:
        state = make_state(16)
        state.teams[0].draws = [1]
        PlayerAllocator(SeededRandom(5)).allocate_team(state, 1)
        self.assertEqual(state.teams[0].draws, [1])
        self.assertEqual(len(state.teams[1].draws), 17)

    def test_replenish_refills_empty_teams_only(self) -> None:
        state = make_state(9)
        state.teams[0].draws = []
        state.teams[1].draws = [0]
        refilled = PlayerAllocator(SeededRandom(2)).replenish(state)
        self.assertEqual(refilled, [0])
        self.assertEqual(len(state.teams[0].draws), 9)
        self.assertEqual(state.teams[1].draws, [0])
