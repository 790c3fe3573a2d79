"""
Tournament event dataclasses: the shared language between the stage machine
and any consumer (CLI display, tests).

All events are frozen and can be serialised with dataclasses.asdict().
The stage machine hands each one to its listener as soon as it happens.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

JokerKind = Literal["random", "retry"]


@dataclass(frozen=True)
class StageChangedEvent:
    from_stage: str
    to_stage: str
    screen: str


@dataclass(frozen=True)
class TournamentStartEvent:
    """Fired once when a tournament is (re)built on entering the main stage."""

    team_names: list[str]
    grid_size: int
    starting_team: int                  # 0 or 1
    joker_random: list[int]
    joker_retry: list[int]
    song_pool_size: int
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class RoundSelectedEvent:
    round_index: int
    team: int
    song_id: int
    singer_team1: int
    singer_team2: int


@dataclass(frozen=True)
class RoundStartEvent:
    round_index: int
    song_id: int
    profile_team1: int
    profile_team2: int
    is_duet: bool


@dataclass(frozen=True)
class RoundScoredEvent:
    round_index: int
    points_team1: int
    points_team2: int
    winner: int          # 0 on a tie
    current_round_nr: int


@dataclass(frozen=True)
class JokerUsedEvent:
    team: int
    kind: JokerKind
    round_index: int
    remaining: int


@dataclass(frozen=True)
class PoolReplenishedEvent:
    pool: Literal["songs", "players"]
    team: int | None        # None for the shared song pool
    size: int


@dataclass(frozen=True)
class TournamentCompleteEvent:
    winner: int              # 0 when the grid filled up without a line
    winner_name: str | None
    cells_team1: int
    cells_team2: int
    timestamp: datetime = field(default_factory=datetime.now)


# Union type for type-safe pattern matching in consumers
TournamentEvent = (
    StageChangedEvent
    | TournamentStartEvent
    | RoundSelectedEvent
    | RoundStartEvent
    | RoundScoredEvent
    | JokerUsedEvent
    | PoolReplenishedEvent
    | TournamentCompleteEvent
)
