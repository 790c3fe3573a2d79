"""
In-memory collaborator implementations.

Used by the terminal host in main.py (where a person types in the scores)
and by the tests, which script results directly.
"""

from __future__ import annotations

import logging

from singtactoe.collaborators.base import (
    GameMode,
    Navigation,
    PerformanceSession,
    PerformerSlot,
    Playlists,
    Song,
    SongCatalog,
)

logger = logging.getLogger(__name__)


class InMemorySongCatalog(SongCatalog):
    def __init__(self, songs: list[Song]) -> None:
        self._songs: dict[int, Song] = {s.id: s for s in songs}
        self._category: int | None = None
        self.sung: set[int] = set()

    def _visible(self) -> list[Song]:
        if self._category is None:
            return list(self._songs.values())
        return [s for s in self._songs.values() if s.category_id == self._category]

    def count_all(self) -> int:
        return len(self._songs)

    def count_visible(self) -> int:
        return len(self._visible())

    def get_by_id(self, song_id: int) -> Song:
        try:
            return self._songs[song_id]
        except KeyError:
            raise KeyError(f"Unknown song ID: {song_id}") from None

    def get_visible(self, index: int) -> Song:
        return self._visible()[index]

    def all_ids(self) -> list[int]:
        return list(self._songs)

    def set_category_filter(self, category_id: int | None) -> None:
        self._category = category_id

    @property
    def category_filter(self) -> int | None:
        return self._category

    def mark_sung(self, song_id: int) -> None:
        self.sung.add(song_id)

    def reset_sung_flags(self) -> None:
        self.sung.clear()


class InMemoryPlaylists(Playlists):
    def __init__(self, playlists: dict[int, list[int]]) -> None:
        self._playlists = playlists

    def count(self, playlist_id: int) -> int:
        return len(self._playlists.get(playlist_id, []))

    def get_entry(self, playlist_id: int, index: int) -> int:
        return self._playlists[playlist_id][index]


class InMemoryPerformanceSession(PerformanceSession):
    """
    Performance session whose results are supplied by the caller.

    Set max_slots to fewer than 2 to simulate an unavailable session.
    """

    def __init__(self, max_slots: int = 6) -> None:
        self.max_slots = max_slots
        self.slots: list[PerformerSlot] = []
        self.songs: list[tuple[int, GameMode]] = []
        self.resets = 0

    def reset(self) -> None:
        self.resets += 1
        self.slots = []

    def clear_songs(self) -> None:
        self.songs = []

    def set_slot_count(self, n: int) -> None:
        self.slots = [PerformerSlot() for _ in range(min(n, self.max_slots))]

    def get_slots(self) -> list[PerformerSlot] | None:
        return self.slots

    def get_slot_results(self) -> list[float] | None:
        return [slot.points for slot in self.slots]

    def set_results(self, *points: float) -> None:
        for slot, p in zip(self.slots, points):
            slot.points = p

    def add_song(self, song_id: int, mode: GameMode) -> None:
        self.songs.append((song_id, mode))

    def current_song_id(self) -> int | None:
        return self.songs[0][0] if self.songs else None


class RecordingNavigation(Navigation):
    """Remembers every screen the engine asked to fade to."""

    def __init__(self) -> None:
        self.history: list[str] = []

    def fade_to(self, screen: str) -> None:
        logger.debug("Fade to %s", screen)
        self.history.append(screen)

    @property
    def current(self) -> str | None:
        return self.history[-1] if self.history else None
