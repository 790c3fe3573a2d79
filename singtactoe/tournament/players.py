"""
Player allocation: which roster member sings for each team, round by round.

Each team draws from a pool of roster indices without replacement. The pool
is refilled only once it is empty, so nobody sings a second time before every
team member has sung once.
"""

from __future__ import annotations

import logging

from singtactoe.collaborators.base import RandomSource
from singtactoe.tournament.base import TournamentState

logger = logging.getLogger(__name__)


class _TeamPool:
    """Working pool of not-yet-drawn roster indices for one pass."""

    def __init__(self, roster_size: int) -> None:
        self.roster_size = roster_size
        self._remaining: list[int] = []

    def draw(self, rng: RandomSource) -> int:
        if not self._remaining:
            self._remaining = list(range(self.roster_size))
        num = rng.next_int(len(self._remaining))
        # Clamp for sources that treat the bound as inclusive
        if num >= len(self._remaining):
            num = len(self._remaining) - 1
        return self._remaining.pop(num)


class PlayerAllocator:
    def __init__(self, rng: RandomSource) -> None:
        self.rng = rng

    def draw_sequence(self, roster_size: int, count: int) -> list[int]:
        """Draw count roster indices, refilling the pool after every full pass."""
        if roster_size < 1:
            raise ValueError("Cannot draw players from an empty roster")
        pool = _TeamPool(roster_size)
        return [pool.draw(self.rng) for _ in range(count)]

    def allocate_joint(self, state: TournamentState) -> None:
        """
        Initial allocation: draw both teams in lockstep.

        Pools are independent, so each team exhausts and refills on its own
        schedule. Both sequences are replaced, never appended to.
        """
        pools = [_TeamPool(team.size) for team in state.teams]
        if any(pool.roster_size < 1 for pool in pools):
            raise ValueError("Cannot draw players from an empty roster")
        draws: list[list[int]] = [[], []]
        targets = [state.player_draw_target(t) for t in (0, 1)]

        while any(len(draws[t]) < targets[t] for t in (0, 1)):
            for t in (0, 1):
                if len(draws[t]) < targets[t]:
                    draws[t].append(pools[t].draw(self.rng))

        for t in (0, 1):
            state.teams[t].draws = draws[t]
            logger.debug("Team %d draw sequence: %s", t + 1, draws[t])
        logger.info("Drew %d and %d singers for the two teams", targets[0], targets[1])

    def allocate_team(self, state: TournamentState, team: int) -> None:
        """Mid-tournament replenishment of a single team's draw sequence."""
        seq = self.draw_sequence(state.teams[team].size, state.player_draw_target(team))
        state.teams[team].draws = seq
        logger.info("Replenished team %d singers: %s", team + 1, seq)

    def replenish(self, state: TournamentState) -> list[int]:
        """Refill every team whose draw sequence is used up. Returns the refilled teams."""
        refilled = []
        for team in (0, 1):
            if not state.teams[team].draws:
                self.allocate_team(state, team)
                refilled.append(team)
        return refilled
