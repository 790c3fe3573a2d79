"""
Collaborator interfaces and their in-memory implementations.

create_collaborators() is the single entry point for wiring a tournament
to the catalog and playlists declared in config.yaml.
"""

from __future__ import annotations

from dataclasses import dataclass

from singtactoe.collaborators.base import (
    GameMode,
    Navigation,
    PerformanceSession,
    PerformerSlot,
    Playlists,
    RandomSource,
    SeededRandom,
    Song,
    SongCatalog,
)
from singtactoe.collaborators.memory import (
    InMemoryPerformanceSession,
    InMemoryPlaylists,
    InMemorySongCatalog,
    RecordingNavigation,
)

__all__ = [
    "GameMode",
    "Navigation",
    "PerformanceSession",
    "PerformerSlot",
    "Playlists",
    "RandomSource",
    "SeededRandom",
    "Song",
    "SongCatalog",
    "InMemoryPerformanceSession",
    "InMemoryPlaylists",
    "InMemorySongCatalog",
    "RecordingNavigation",
    "Collaborators",
    "create_collaborators",
]


@dataclass
class Collaborators:
    rng: RandomSource
    catalog: SongCatalog
    playlists: Playlists
    session: PerformanceSession
    navigation: Navigation


def create_collaborators(
    songs: list[Song],
    playlists: dict[int, list[int]],
    seed: int | None = None,
    session: PerformanceSession | None = None,
) -> Collaborators:
    """
    Build in-memory collaborators from the catalog section of config.yaml.

    Pass session to keep a handle on the performance session the host feeds
    results into.
    """
    return Collaborators(
        rng=SeededRandom(seed),
        catalog=InMemorySongCatalog(songs),
        playlists=InMemoryPlaylists(playlists),
        session=session if session is not None else InMemoryPerformanceSession(),
        navigation=RecordingNavigation(),
    )
