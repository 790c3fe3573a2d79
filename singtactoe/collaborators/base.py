"""
Abstract collaborator interfaces the tournament engine is driven through.

The engine never touches the song database, the singing subsystem or the
screen manager directly. The host injects implementations of these ABCs,
whether that's the real karaoke application, the in-memory versions in
collaborators/memory.py, or a test double.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Literal

GameMode = Literal["normal", "short_song", "duet"]


@dataclass(frozen=True)
class Song:
    """Catalog metadata for one song."""

    id: int
    title: str
    artist: str = ""
    category_id: int = 0
    game_modes: frozenset[str] = field(default_factory=lambda: frozenset({"normal"}))
    is_duet: bool = False

    def supports(self, mode: GameMode) -> bool:
        return mode in self.game_modes


@dataclass
class PerformerSlot:
    """One singer position in a performance session."""

    profile_id: int = -1
    voice_nr: int = 0
    points: float = 0.0


class RandomSource(ABC):
    @abstractmethod
    def next_int(self, max_exclusive: int) -> int:
        """Return an int in [0, max_exclusive). 0 when max_exclusive <= 0."""
        ...


class SeededRandom(RandomSource):
    """RandomSource backed by random.Random; pass a seed for reproducible tournaments."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def next_int(self, max_exclusive: int) -> int:
        if max_exclusive <= 0:
            return 0
        return self._rng.randrange(max_exclusive)


class SongCatalog(ABC):
    @abstractmethod
    def count_all(self) -> int: ...

    @abstractmethod
    def count_visible(self) -> int: ...

    @abstractmethod
    def get_by_id(self, song_id: int) -> Song: ...

    @abstractmethod
    def get_visible(self, index: int) -> Song: ...

    @abstractmethod
    def all_ids(self) -> list[int]:
        """IDs of every song in the catalog, in catalog order."""
        ...

    @abstractmethod
    def set_category_filter(self, category_id: int | None) -> None:
        """Restrict the visible songs to one category; None clears the filter."""
        ...

    @abstractmethod
    def mark_sung(self, song_id: int) -> None: ...

    @abstractmethod
    def reset_sung_flags(self) -> None: ...


class Playlists(ABC):
    @abstractmethod
    def count(self, playlist_id: int) -> int: ...

    @abstractmethod
    def get_entry(self, playlist_id: int, index: int) -> int:
        """Return the song ID at position index of the playlist."""
        ...


class PerformanceSession(ABC):
    """The singing subsystem: who sings which song, and how many points they got."""

    @abstractmethod
    def reset(self) -> None: ...

    @abstractmethod
    def clear_songs(self) -> None: ...

    @abstractmethod
    def set_slot_count(self, n: int) -> None: ...

    @abstractmethod
    def get_slots(self) -> list[PerformerSlot] | None:
        """Live performer slots; mutating them binds singers. None if unavailable."""
        ...

    @abstractmethod
    def get_slot_results(self) -> list[float] | None:
        """Raw points per slot after a performance. None if unavailable."""
        ...

    @abstractmethod
    def add_song(self, song_id: int, mode: GameMode) -> None: ...

    @abstractmethod
    def current_song_id(self) -> int | None:
        """ID of the first song queued in the session, if any."""
        ...


class Navigation(ABC):
    @abstractmethod
    def fade_to(self, screen: str) -> None: ...
