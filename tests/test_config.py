"""
Tests for load_config and the tournament setup validators.
"""

from __future__ import annotations

import textwrap

import pytest

from singtactoe.config import (
    GameConfig,
    load_config,
    validate_game_config,
    validate_rosters,
)

VALID_YAML = textwrap.dedent(
    """
    tournament:
      grid_size: 16
      team_sizes: [3, 2]
      team_names: [Red, Blue]
      profile_ids: [[1, 2, 3], [4, 5]]
      song_source: playlist
      playlist_id: 2
      game_mode: short_song
    seed: 1234
    catalog:
      songs:
        - {id: 0, title: "First", artist: "A", modes: [normal, short_song]}
        - {id: 1, title: "Second", category: 3, modes: [duet], duet: true}
      playlists:
        2: {name: Mix, songs: [0, 1]}
    """
)


def write(tmp_path, text: str):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_valid_file(self, tmp_path):
        config = load_config(write(tmp_path, VALID_YAML))
        assert config.game.grid_size == 16
        assert config.game.num_players == [3, 2]
        assert config.game.profile_ids == [[1, 2, 3], [4, 5]]
        assert config.game.song_source == "playlist"
        assert config.game.game_mode == "short_song"
        assert config.seed == 1234
        assert config.log_dir == "./logs"

        duet = config.songs[1]
        assert duet.is_duet
        assert duet.category_id == 3
        assert duet.supports("duet")
        assert not duet.supports("normal")
        assert config.playlists[2].name == "Mix"
        assert config.playlists[2].song_ids == [0, 1]

    def test_defaults_for_empty_sections(self, tmp_path):
        config = load_config(write(tmp_path, "tournament: {}\n"))
        assert config.game == GameConfig()
        assert config.songs == []
        assert config.seed is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="config.example.yaml"):
            load_config(tmp_path / "nope.yaml")

    def test_bad_grid_size(self, tmp_path):
        with pytest.raises(ValueError, match="grid_size"):
            load_config(write(tmp_path, "tournament: {grid_size: 12}\n"))

    def test_song_without_title(self, tmp_path):
        text = "catalog:\n  songs:\n    - {id: 3}\n"
        with pytest.raises(ValueError, match="Invalid config.yaml structure"):
            load_config(write(tmp_path, text))

    def test_playlist_with_unknown_song(self, tmp_path):
        text = textwrap.dedent(
            """
            catalog:
              songs:
                - {id: 0, title: "Only"}
              playlists:
                1: {songs: [0, 9]}
            """
        )
        with pytest.raises(ValueError, match=r"unknown song IDs: \[9\]"):
            load_config(write(tmp_path, text))


class TestValidateGameConfig:
    @pytest.mark.parametrize(
        "changes, message",
        [
            ({"grid_size": 4}, "grid_size"),
            ({"num_players": [2]}, "exactly 2 teams"),
            ({"num_players": [0, 2]}, "team 1"),
            ({"num_players": [2, 11]}, "team 2"),
            ({"song_source": "radio"}, "song_source"),
            ({"game_mode": "medley"}, "game_mode"),
        ],
    )
    def test_rejects(self, changes, message):
        with pytest.raises(ValueError, match=message):
            validate_game_config(GameConfig(**changes))

    def test_accepts_supported_sizes(self):
        for size in (9, 16, 25):
            validate_game_config(GameConfig(grid_size=size, num_players=[10, 10]))

    def test_rosters(self):
        validate_rosters(GameConfig(num_players=[1, 2], profile_ids=[[7], [8, 9]]))
        with pytest.raises(ValueError, match="team 2 has 2 players"):
            validate_rosters(GameConfig(num_players=[1, 2], profile_ids=[[7], [8]]))
