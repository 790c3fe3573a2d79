"""
Smoke tests for the Rich display: every event type renders without error
and the grid shows finished cells with their owner's mark.
"""

from __future__ import annotations

import io
import unittest
from unittest.mock import patch

from rich.console import Console

from singtactoe.cli import display
from singtactoe.collaborators.base import Song
from singtactoe.collaborators.memory import InMemorySongCatalog
from singtactoe.config import GameConfig
from singtactoe.tournament.base import TournamentState
from singtactoe.tournament.events import (
    JokerUsedEvent,
    PoolReplenishedEvent,
    RoundScoredEvent,
    RoundSelectedEvent,
    RoundStartEvent,
    StageChangedEvent,
    TournamentCompleteEvent,
    TournamentStartEvent,
)
from singtactoe.tournament.rounds import build_rounds


class DisplayTests(unittest.TestCase):
    def setUp(self) -> None:
        self.buffer = io.StringIO()
        patcher = patch.object(display, "console", Console(file=self.buffer, width=120))
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_all_events_render(self) -> None:
        events = [
            StageChangedEvent(from_stage="names", to_stage="main", screen="main"),
            TournamentStartEvent(
                team_names=["Red", "Blue"], grid_size=9, starting_team=1,
                joker_random=[1, 1], joker_retry=[0, 0], song_pool_size=11,
            ),
            RoundSelectedEvent(round_index=4, team=1, song_id=3, singer_team1=0, singer_team2=1),
            RoundStartEvent(round_index=4, song_id=3, profile_team1=10, profile_team2=21, is_duet=True),
            RoundScoredEvent(round_index=4, points_team1=60, points_team2=60, winner=0, current_round_nr=1),
            JokerUsedEvent(team=0, kind="random", round_index=4, remaining=0),
            PoolReplenishedEvent(pool="songs", team=None, size=11),
            TournamentCompleteEvent(winner=2, winner_name="Blue", cells_team1=2, cells_team2=3),
        ]
        for event in events:
            display.display_event(event)
        out = self.buffer.getvalue()
        self.assertIn("Blue starts", out)
        self.assertIn("Tie on cell 5", out)
        self.assertIn("Joker (random)", out)
        self.assertIn("Tournament Over", out)

    def test_grid_marks_winners(self) -> None:
        state = TournamentState.from_config(GameConfig(profile_ids=[[1, 2], [3, 4]]))
        state.rounds = build_rounds(9)
        state.rounds[0].song_id = 0
        state.rounds[0].winner = 1
        state.rounds[0].finished = True
        state.rounds[8].winner = 2
        state.rounds[8].finished = True
        state.rounds[4].song_id = 1
        catalog = InMemorySongCatalog([Song(id=0, title="Alpha"), Song(id=1, title="Bravo")])

        display.display_grid(state, catalog)
        out = self.buffer.getvalue()
        self.assertIn("X", out)
        self.assertIn("O", out)
        self.assertIn("Bravo", out)
