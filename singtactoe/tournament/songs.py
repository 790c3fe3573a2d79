"""
Song pool construction.

The pool is a shuffled, duplicate-free list of song IDs that support the
configured game mode, sized for every grid cell plus each team's random
jokers. Candidates are gathered fresh each time the pool is (re)built so
catalog changes between refills are picked up.
"""

from __future__ import annotations

import logging

from singtactoe.collaborators.base import Playlists, RandomSource, SongCatalog
from singtactoe.config import GameConfig
from singtactoe.tournament.base import NotEnoughSongsError, TournamentState

logger = logging.getLogger(__name__)


class SongPoolBuilder:
    def __init__(self, rng: RandomSource, catalog: SongCatalog, playlists: Playlists) -> None:
        self.rng = rng
        self.catalog = catalog
        self.playlists = playlists

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def gather(self, config: GameConfig) -> list[int]:
        """Eligible song IDs for the configured source and mode, catalog order, no repeats."""
        match config.song_source:
            case "playlist":
                ids = [
                    self.playlists.get_entry(config.playlist_id, i)
                    for i in range(self.playlists.count(config.playlist_id))
                ]
            case "category":
                self.catalog.set_category_filter(config.category_id)
                try:
                    ids = [
                        self.catalog.get_visible(i).id
                        for i in range(self.catalog.count_visible())
                    ]
                finally:
                    self.catalog.set_category_filter(None)
            case "all_songs":
                ids = self.catalog.all_ids()
            case _:
                raise ValueError(f"Unknown song source: {config.song_source!r}")

        eligible: list[int] = []
        seen: set[int] = set()
        for song_id in ids:
            if song_id in seen:
                continue
            seen.add(song_id)
            if self.catalog.get_by_id(song_id).supports(config.game_mode):
                eligible.append(song_id)
        return eligible

    def build(self, state: TournamentState) -> None:
        """
        Replace state.songs with a freshly drawn pool of song_pool_target IDs.

        Raises:
            NotEnoughSongsError: a gather produced no song that isn't already
                pooled. state.songs is left as it was.
        """
        target = state.song_pool_target
        pool: list[int] = []

        while len(pool) < target:
            candidates = [sid for sid in self.gather(state.config) if sid not in pool]
            if not candidates:
                raise NotEnoughSongsError(
                    f"Need {target} songs for {state.config.game_mode!r} mode from "
                    f"{state.config.song_source!r}, only {len(pool)} available."
                )
            while candidates and len(pool) < target:
                num = self.rng.next_int(len(candidates))
                if num >= len(candidates):
                    num = len(candidates) - 1
                pool.append(candidates.pop(num))

        state.songs = pool
        logger.info("Built song pool of %d songs", len(pool))
        logger.debug("Song pool: %s", pool)

    def replenish(self, state: TournamentState) -> bool:
        """Rebuild the pool if it has been used up. Returns True if it was rebuilt."""
        if state.songs:
            return False
        self.build(state)
        return True
