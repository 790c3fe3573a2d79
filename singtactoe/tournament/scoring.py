"""
Round scoring: turns the singing session's raw points into a round result.

A tie leaves the cell open so it can be sung again later. The round counter
only moves when a cell changes between open and finished, which keeps
current_round_nr == 1 + number of finished cells no matter how often a cell
is evaluated.
"""

from __future__ import annotations

import logging

from singtactoe.collaborators.base import PerformanceSession
from singtactoe.tournament.base import Round, TournamentState

logger = logging.getLogger(__name__)


class ScoreEvaluator:
    def __init__(self, session: PerformanceSession) -> None:
        self.session = session

    def evaluate(self, state: TournamentState) -> Round | None:
        """
        Store the session's points on the round being sung and decide it.

        Returns the updated Round, or None if the session had no results for
        two performers (the round is left untouched).
        """
        results = self.session.get_slot_results()
        if results is None or len(results) < 2:
            logger.warning("No results for two performers; round %d not scored", state.sing_round_nr)
            return None

        rnd = state.current_round
        was_finished = rnd.finished

        rnd.points_team1 = _round_points(results[0])
        rnd.points_team2 = _round_points(results[1])
        rnd.winner = decide_winner(rnd.points_team1, rnd.points_team2)
        rnd.finished = rnd.winner != 0

        _advance_round_counter(state, was_finished, rnd.finished)

        if rnd.finished:
            logger.info(
                "Round %d: %d-%d, team %d wins",
                state.sing_round_nr, rnd.points_team1, rnd.points_team2, rnd.winner,
            )
        else:
            logger.info(
                "Round %d tied %d-%d, cell stays open",
                state.sing_round_nr, rnd.points_team1, rnd.points_team2,
            )
        return rnd


def decide_winner(points_team1: int, points_team2: int) -> int:
    """1 or 2 for the higher score, 0 on a tie."""
    if points_team1 > points_team2:
        return 1
    if points_team1 < points_team2:
        return 2
    return 0


def _round_points(points: float) -> int:
    return int(round(points))


def _advance_round_counter(state: TournamentState, was_finished: bool, is_finished: bool) -> None:
    if is_finished and not was_finished:
        state.current_round_nr += 1
    elif was_finished and not is_finished:
        state.current_round_nr -= 1
