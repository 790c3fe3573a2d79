"""
Configuration loading from config.yaml.

Uses typed dataclasses throughout so the rest of the app gets IDE
completion and type-checker support without touching raw dicts.

GameConfig doubles as the mutable tournament setup: the host binds team
sizes, names and profile IDs into it during the Config and Names stages,
and the stage machine reads it when the tournament starts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import yaml

from singtactoe.collaborators.base import GameMode, Song

SongSource = Literal["all_songs", "category", "playlist"]

MIN_PLAYERS = 2
MAX_PLAYERS = 20
MIN_TEAMS = 2
MAX_TEAMS = 2
MIN_PLAYERS_PER_TEAM = 1
MAX_PLAYERS_PER_TEAM = 10
DEFAULT_GRID_SIZE = 9
SUPPORTED_GRID_SIZES = (9, 16, 25)

_SONG_SOURCES = ("all_songs", "category", "playlist")
_GAME_MODES = ("normal", "short_song", "duet")


@dataclass
class GameConfig:
    grid_size: int = DEFAULT_GRID_SIZE
    num_players: list[int] = field(default_factory=lambda: [2, 2])
    team_names: list[str] = field(default_factory=lambda: ["Team 1", "Team 2"])
    profile_ids: list[list[int]] = field(default_factory=lambda: [[], []])
    song_source: SongSource = "all_songs"
    category_id: int = 0
    playlist_id: int = 0
    game_mode: GameMode = "normal"


@dataclass
class PlaylistEntry:
    name: str
    song_ids: list[int] = field(default_factory=list)


@dataclass
class Config:
    game: GameConfig
    songs: list[Song] = field(default_factory=list)
    playlists: dict[int, PlaylistEntry] = field(default_factory=dict)
    seed: int | None = None
    log_dir: str = "./logs"

    @property
    def log_dir_path(self) -> Path:
        return Path(self.log_dir)


def load_config(path: str | Path = "config.yaml") -> Config:
    """
    Load and validate config.yaml.

    Raises:
        FileNotFoundError: config.yaml is missing.
        ValueError: required fields are absent or invalid.
    """
    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {cfg_path.resolve()}\n"
            "Copy config.example.yaml to config.yaml and edit the song catalog."
        )

    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    try:
        game_raw = raw.get("tournament") or {}
        game_cfg = GameConfig(
            grid_size=int(game_raw.get("grid_size", DEFAULT_GRID_SIZE)),
            num_players=[int(n) for n in game_raw.get("team_sizes", [2, 2])],
            team_names=[str(n) for n in game_raw.get("team_names", ["Team 1", "Team 2"])],
            profile_ids=[
                [int(pid) for pid in ids]
                for ids in game_raw.get("profile_ids", [[], []])
            ],
            song_source=game_raw.get("song_source", "all_songs"),
            category_id=int(game_raw.get("category_id", 0)),
            playlist_id=int(game_raw.get("playlist_id", 0)),
            game_mode=game_raw.get("game_mode", "normal"),
        )

        catalog_raw = raw.get("catalog") or {}
        songs = [
            Song(
                id=int(s["id"]),
                title=str(s["title"]),
                artist=str(s.get("artist", "")),
                category_id=int(s.get("category", 0)),
                game_modes=frozenset(s.get("modes", ["normal"])),
                is_duet=bool(s.get("duet", False)),
            )
            for s in catalog_raw.get("songs", [])
        ]
        playlists = {
            int(pid): PlaylistEntry(
                name=str((p or {}).get("name", f"Playlist {pid}")),
                song_ids=[int(sid) for sid in (p or {}).get("songs", [])],
            )
            for pid, p in (catalog_raw.get("playlists") or {}).items()
        }

        seed = raw.get("seed")
        config = Config(
            game=game_cfg,
            songs=songs,
            playlists=playlists,
            seed=int(seed) if seed is not None else None,
            log_dir=str(raw.get("log_dir", "./logs")),
        )
        validate_game_config(config.game)
        _validate_catalog(config)
        return config

    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"Invalid config.yaml structure: {exc}") from exc


def validate_game_config(game: GameConfig) -> None:
    """Raise ValueError if the tournament setup cannot be played."""
    if game.grid_size not in SUPPORTED_GRID_SIZES:
        raise ValueError(
            f"tournament.grid_size must be one of {SUPPORTED_GRID_SIZES}, got {game.grid_size}"
        )
    if not MIN_TEAMS <= len(game.num_players) <= MAX_TEAMS:
        raise ValueError(f"tournament.team_sizes must list exactly {MAX_TEAMS} teams")
    for team, size in enumerate(game.num_players):
        if not MIN_PLAYERS_PER_TEAM <= size <= MAX_PLAYERS_PER_TEAM:
            raise ValueError(
                f"team {team + 1} must have {MIN_PLAYERS_PER_TEAM}-{MAX_PLAYERS_PER_TEAM} "
                f"players, got {size}"
            )
    total = sum(game.num_players)
    if not MIN_PLAYERS <= total <= MAX_PLAYERS:
        raise ValueError(f"total players must be {MIN_PLAYERS}-{MAX_PLAYERS}, got {total}")
    if game.song_source not in _SONG_SOURCES:
        raise ValueError(
            f"tournament.song_source must be one of {_SONG_SOURCES}, got '{game.song_source}'"
        )
    if game.game_mode not in _GAME_MODES:
        raise ValueError(
            f"tournament.game_mode must be one of {_GAME_MODES}, got '{game.game_mode}'"
        )


def validate_rosters(game: GameConfig) -> None:
    """Every team needs a profile ID for each of its players before play starts."""
    if len(game.profile_ids) < len(game.num_players):
        raise ValueError("profile_ids must list one roster per team")
    for team, size in enumerate(game.num_players):
        if len(game.profile_ids[team]) < size:
            raise ValueError(
                f"team {team + 1} has {size} players but only "
                f"{len(game.profile_ids[team])} profile IDs"
            )


def _validate_catalog(config: Config) -> None:
    known = {song.id for song in config.songs}
    for pid, playlist in config.playlists.items():
        missing = [sid for sid in playlist.song_ids if sid not in known]
        if missing:
            raise ValueError(f"playlist {pid} references unknown song IDs: {missing}")
