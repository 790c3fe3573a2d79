"""
Tournament package.

create_stage_machine() is the single entry point for wiring a tic-tac-toe
tournament to its collaborators.
"""

from __future__ import annotations

from singtactoe.collaborators import Collaborators
from singtactoe.config import GameConfig
from singtactoe.tournament.base import (
    InvalidTransitionError,
    JokerUnavailableError,
    NotEnoughSongsError,
    Round,
    Stage,
    TeamState,
    TournamentError,
    TournamentState,
)
from singtactoe.tournament.events import (
    JokerUsedEvent,
    PoolReplenishedEvent,
    RoundScoredEvent,
    RoundSelectedEvent,
    RoundStartEvent,
    StageChangedEvent,
    TournamentCompleteEvent,
    TournamentEvent,
    TournamentStartEvent,
)
from singtactoe.tournament.machine import (
    PARTY_SCREEN,
    SING_SCREEN,
    SONG_SCREEN,
    TRANSITIONS,
    EventListener,
    ScreenSongOptions,
    StageMachine,
)
from singtactoe.tournament.players import PlayerAllocator
from singtactoe.tournament.rounds import build_rounds, compute_jokers, line_winner
from singtactoe.tournament.scoring import ScoreEvaluator
from singtactoe.tournament.songs import SongPoolBuilder

__all__ = [
    # Base types
    "Round",
    "Stage",
    "TeamState",
    "TournamentState",
    # Errors
    "TournamentError",
    "NotEnoughSongsError",
    "JokerUnavailableError",
    "InvalidTransitionError",
    # Events
    "TournamentEvent",
    "StageChangedEvent",
    "TournamentStartEvent",
    "RoundSelectedEvent",
    "RoundStartEvent",
    "RoundScoredEvent",
    "JokerUsedEvent",
    "PoolReplenishedEvent",
    "TournamentCompleteEvent",
    # Components
    "PlayerAllocator",
    "SongPoolBuilder",
    "ScoreEvaluator",
    "StageMachine",
    "ScreenSongOptions",
    "TRANSITIONS",
    "PARTY_SCREEN",
    "SONG_SCREEN",
    "SING_SCREEN",
    "build_rounds",
    "compute_jokers",
    "line_winner",
    # Factory
    "create_stage_machine",
]


def create_stage_machine(
    config: GameConfig,
    collaborators: Collaborators,
    on_event: EventListener | None = None,
) -> StageMachine:
    """Instantiate a StageMachine bound to one set of collaborators."""
    return StageMachine(
        config,
        rng=collaborators.rng,
        catalog=collaborators.catalog,
        playlists=collaborators.playlists,
        session=collaborators.session,
        navigation=collaborators.navigation,
        on_event=on_event,
    )
