"""
Rich-based CLI consumer for TournamentEvent objects.

This is the ONLY place where terminal output happens for a running
tournament. The stage machine hands every event to display_event(); the
grid itself is drawn on demand with display_grid().
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from singtactoe.collaborators.base import SongCatalog
from singtactoe.tournament.base import TournamentState
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
from singtactoe.tournament.rounds import grid_side

console = Console(legacy_windows=False)

_TEAM_STYLES = ("bold cyan", "bold magenta")
_MARKS = ("X", "O")


def display_event(event: TournamentEvent) -> None:
    """Dispatch a TournamentEvent to the appropriate display function."""
    match event:
        case StageChangedEvent():
            console.print(f"[dim]→ {event.to_stage} ({event.screen})[/]")
        case TournamentStartEvent():
            _tournament_start(event)
        case RoundSelectedEvent():
            console.print(
                f"\n[{_TEAM_STYLES[event.team]}]Team {event.team + 1}[/] picks cell "
                f"[bold]{event.round_index + 1}[/]"
            )
        case RoundStartEvent():
            duet = "  [yellow](duet)[/]" if event.is_duet else ""
            console.print(f"[bold bright_blue]▶ Round {event.round_index + 1}[/]{duet}")
        case RoundScoredEvent():
            _round_scored(event)
        case JokerUsedEvent():
            console.print(
                f"  [yellow]Joker ({event.kind})[/] used by team {event.team + 1}, "
                f"{event.remaining} left"
            )
        case PoolReplenishedEvent():
            who = "songs" if event.team is None else f"team {event.team + 1} singers"
            console.print(f"  [dim]Refilled {who} ({event.size})[/]")
        case TournamentCompleteEvent():
            _tournament_complete(event)


# --------------------------------------------------------------------------- #
# Display functions                                                            #
# --------------------------------------------------------------------------- #

def display_grid(state: TournamentState, catalog: SongCatalog | None = None) -> None:
    side = grid_side(state.grid_size)
    table = Table(show_header=False, show_lines=True, border_style="dim")
    for _ in range(side):
        table.add_column(justify="center", min_width=9)

    for row in range(side):
        cells = []
        for col in range(side):
            i = row * side + col
            rnd = state.rounds[i]
            if rnd.finished:
                style = _TEAM_STYLES[rnd.winner - 1]
                cells.append(f"[{style}]{_MARKS[rnd.winner - 1]}[/]\n[dim]{rnd.points_team1}:{rnd.points_team2}[/]")
            elif rnd.assigned and catalog is not None:
                cells.append(f"{i + 1}\n[dim]{catalog.get_by_id(rnd.song_id).title[:9]}[/]")
            else:
                cells.append(str(i + 1))
        table.add_row(*cells)

    acting = state.team
    console.print()
    console.print(table)
    console.print(
        f"  Round [bold]{state.current_round_nr}[/]  •  "
        f"[{_TEAM_STYLES[acting]}]{state.teams[acting].name}[/] to pick  •  "
        f"jokers random {state.num_joker_random[0]}/{state.num_joker_random[1]}, "
        f"retry {state.num_joker_retry[0]}/{state.num_joker_retry[1]}"
    )


def _tournament_start(event: TournamentStartEvent) -> None:
    console.print()
    console.print(
        Panel(
            f"[{_TEAM_STYLES[0]}]{event.team_names[0]}[/]  vs  "
            f"[{_TEAM_STYLES[1]}]{event.team_names[1]}[/]\n\n"
            f"[dim]Grid: {event.grid_size} cells  •  Songs pooled: {event.song_pool_size}\n"
            f"{event.timestamp.strftime('%Y-%m-%d %H:%M:%S')}[/]",
            title="[bold green] Tic Tac Toe [/]",
            border_style="green",
            expand=False,
        )
    )
    console.print(f"  {event.team_names[event.starting_team]} starts.")


def _round_scored(event: RoundScoredEvent) -> None:
    if event.winner:
        summary = (
            f"[green]✓[/] Team {event.winner} takes cell {event.round_index + 1}  "
            f"[dim]({event.points_team1} : {event.points_team2})[/]"
        )
    else:
        summary = (
            f"[yellow]=[/] Tie on cell {event.round_index + 1}, it stays open "
            f"[dim]({event.points_team1} : {event.points_team2})[/]"
        )
    console.print(f"\n  {summary}")


def _tournament_complete(event: TournamentCompleteEvent) -> None:
    if event.winner_name:
        headline = f"[bold yellow]★  {event.winner_name}[/]"
    else:
        headline = "[bold]No line completed[/]"
    console.print()
    console.print(
        Panel(
            f"{headline}\n\n"
            f"[dim]Cells won: {event.cells_team1} : {event.cells_team2}  •  "
            f"{event.timestamp.strftime('%Y-%m-%d %H:%M:%S')}[/]",
            title="[bold green] Tournament Over [/]",
            border_style="yellow",
            expand=False,
        )
    )
