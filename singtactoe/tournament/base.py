"""
Tournament abstractions: the stage enum, the Round cell, the TournamentState
aggregate, and the error taxonomy.

TournamentState is rebuilt (never reset) each time a tournament starts, so a
half-built state from an abandoned attempt cannot leak into the next one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from singtactoe.config import GameConfig


class Stage(Enum):
    CONFIG = "config"
    NAMES = "names"
    MAIN = "main"
    SINGING = "singing"


class TournamentError(Exception):
    """Recoverable tournament condition. The host may report it and carry on."""


class NotEnoughSongsError(TournamentError):
    """The configured song source cannot fill the song pool."""


class JokerUnavailableError(TournamentError):
    """A joker was requested but cannot be played right now."""


class InvalidTransitionError(RuntimeError):
    """
    The stage machine was driven outside its transition table.

    This is a host-side bug, not a runtime condition, so it deliberately does
    not derive from TournamentError.
    """

    def __init__(self, stage: Stage, action: str) -> None:
        super().__init__(f"Invalid stage for {action}(): {stage.name}")
        self.stage = stage
        self.action = action


@dataclass
class Round:
    """One grid cell: a song, a singer from each team, and the result."""

    song_id: int | None = None
    singer_team1: int = -1
    singer_team2: int = -1
    points_team1: int = 0
    points_team2: int = 0
    winner: int = 0   # 0 = undecided, 1 or 2
    finished: bool = False

    @property
    def assigned(self) -> bool:
        return self.song_id is not None


@dataclass
class TeamState:
    """One team's roster and the player indices drawn for it but not yet consumed."""

    name: str
    profile_ids: list[int]
    draws: list[int] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.profile_ids)


@dataclass
class TournamentState:
    """Everything a single tournament needs once it has started."""

    config: GameConfig
    teams: list[TeamState]
    rounds: list[Round] = field(default_factory=list)
    songs: list[int] = field(default_factory=list)
    num_joker_random: list[int] = field(default_factory=lambda: [0, 0])
    num_joker_retry: list[int] = field(default_factory=lambda: [0, 0])
    current_round_nr: int = 0
    sing_round_nr: int = 0
    team: int = 0   # acting team, 0 or 1
    selected: bool = False   # True once the acting team has picked a cell to sing

    @classmethod
    def from_config(cls, config: GameConfig) -> TournamentState:
        teams = [
            TeamState(
                name=config.team_names[i] if i < len(config.team_names) else f"Team {i + 1}",
                profile_ids=list(config.profile_ids[i][: config.num_players[i]]),
            )
            for i in range(2)
        ]
        return cls(config=config, teams=teams)

    @property
    def grid_size(self) -> int:
        return self.config.grid_size

    @property
    def song_pool_target(self) -> int:
        return self.grid_size + sum(self.num_joker_random)

    def player_draw_target(self, team: int) -> int:
        return self.grid_size + self.num_joker_retry[team]

    @property
    def current_round(self) -> Round:
        return self.rounds[self.sing_round_nr]

    @property
    def finished_count(self) -> int:
        return sum(1 for r in self.rounds if r.finished)
