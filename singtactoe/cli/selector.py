"""
Interactive setup for the Config and Names stages.

Prompts for the grid size, song source and team sizes, then for the team
names and the profile IDs of each singer.
"""

from __future__ import annotations

from rich.console import Console
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from singtactoe.config import (
    MAX_PLAYERS_PER_TEAM,
    MIN_PLAYERS_PER_TEAM,
    SUPPORTED_GRID_SIZES,
    Config,
    GameConfig,
)

console = Console(legacy_windows=False)


def select_tournament_settings(config: Config) -> None:
    """Config stage: fill config.game in place."""
    game = config.game
    console.print("\n[bold]Tournament setup[/]")

    game.grid_size = IntPrompt.ask(
        "  Grid size",
        choices=[str(n) for n in SUPPORTED_GRID_SIZES],
        default=game.grid_size,
    )

    sources = ["all_songs", "category", "playlist"]
    game.song_source = Prompt.ask("  Song source", choices=sources, default=game.song_source)
    if game.song_source == "category":
        game.category_id = IntPrompt.ask("  Category ID", default=game.category_id)
    elif game.song_source == "playlist":
        _print_playlists(config)
        game.playlist_id = IntPrompt.ask(
            "  Playlist",
            choices=[str(pid) for pid in config.playlists],
            default=game.playlist_id,
        )

    game.game_mode = Prompt.ask(
        "  Game mode", choices=["normal", "short_song", "duet"], default=game.game_mode
    )

    sizes = [str(n) for n in range(MIN_PLAYERS_PER_TEAM, MAX_PLAYERS_PER_TEAM + 1)]
    game.num_players = [
        IntPrompt.ask(f"  Players in team {t + 1}", choices=sizes, default=game.num_players[t])
        for t in (0, 1)
    ]


def select_team_names(game: GameConfig) -> None:
    """Names stage: team names plus a profile ID for every singer."""
    console.print("\n[bold]Teams[/]")
    names = list(game.team_names) + ["Team 1", "Team 2"][len(game.team_names):]
    game.team_names = [
        Prompt.ask(f"  Name of team {t + 1}", default=names[t]) for t in (0, 1)
    ]

    profile_ids: list[list[int]] = []
    next_id = 0
    for t in (0, 1):
        known = game.profile_ids[t] if t < len(game.profile_ids) else []
        ids = []
        for p in range(game.num_players[t]):
            default = known[p] if p < len(known) else next_id
            ids.append(IntPrompt.ask(f"    {game.team_names[t]} singer {p + 1} profile", default=default))
            next_id = max(next_id, ids[-1]) + 1
        profile_ids.append(ids)
    game.profile_ids = profile_ids
    console.print()


def _print_playlists(config: Config) -> None:
    table = Table(show_header=True, header_style="bold", border_style="dim")
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Playlist", min_width=20)
    table.add_column("Songs", justify="right")
    for pid, playlist in config.playlists.items():
        table.add_row(str(pid), playlist.name, str(len(playlist.song_ids)))
    console.print(table)
