"""
Tic Tac Toe singing tournament — terminal entry point.

Usage:
    python main.py [config.yaml]

Wires together:
    config → setup prompts → collaborators → stage machine → CLI display

The terminal stands in for the karaoke screens: the acting team picks a
cell, may play a joker, and the two performers' points are typed in.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

from rich.prompt import FloatPrompt, IntPrompt, Prompt

from singtactoe.cli.display import console, display_event, display_grid
from singtactoe.cli.selector import select_team_names, select_tournament_settings
from singtactoe.collaborators import InMemoryPerformanceSession, create_collaborators
from singtactoe.config import load_config
from singtactoe.tournament import (
    JokerUnavailableError,
    Stage,
    StageMachine,
    TournamentError,
    create_stage_machine,
)

logger = logging.getLogger("singtactoe")


def _setup_logging(log_dir: Path) -> None:
    log_dir.mkdir(parents=True, exist_ok=True)
    stream = logging.StreamHandler()
    stream.setLevel(logging.WARNING)  # keep the console for the game itself
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        handlers=[
            stream,
            logging.handlers.RotatingFileHandler(
                log_dir / "singtactoe.log", maxBytes=2 * 1024 * 1024, backupCount=3,
                encoding="utf-8",
            ),
        ],
    )


def _main(config_path: Path) -> None:
    try:
        config = load_config(config_path)
    except FileNotFoundError as exc:
        console.print(f"[red]Error:[/] {exc}")
        sys.exit(1)
    except ValueError as exc:
        console.print(f"[red]Config error:[/] {exc}")
        sys.exit(1)

    _setup_logging(config.log_dir_path)
    logger.info("Loaded %s: %d songs, %d playlists", config_path, len(config.songs), len(config.playlists))

    session = InMemoryPerformanceSession()
    collaborators = create_collaborators(
        config.songs,
        {pid: list(p.song_ids) for pid, p in config.playlists.items()},
        seed=config.seed,
        session=session,
    )
    machine = create_stage_machine(config.game, collaborators, on_event=display_event)

    # ── Config and Names stages ──────────────────────────────────────── #
    while machine.stage is Stage.CONFIG:
        select_tournament_settings(config)
        try:
            machine.next()
        except ValueError as exc:
            console.print(f"[red]{exc}[/]")

    select_team_names(config.game)
    try:
        machine.next()
    except TournamentError as exc:
        console.print(f"[red]Cannot start the tournament:[/] {exc}")
        sys.exit(1)

    # ── Main / Singing loop ──────────────────────────────────────────── #
    while not machine.is_over():
        display_grid(machine.state, collaborators.catalog)
        try:
            _play_turn(machine, session)
        except TournamentError as exc:
            console.print(f"[red]{exc}[/]")
            sys.exit(1)

    display_grid(machine.state, collaborators.catalog)


def _play_turn(machine: StageMachine, session: InMemoryPerformanceSession) -> None:
    state = machine.state
    open_cells = [str(i + 1) for i, r in enumerate(state.rounds) if not r.finished]
    cell = IntPrompt.ask(f"\n{state.teams[state.team].name}, pick a cell", choices=open_cells)
    rnd = machine.select_round(cell - 1)

    while True:
        song = machine.catalog.get_by_id(rnd.song_id)
        console.print(
            f"  [bold]{song.title}[/] [dim]{song.artist}[/]\n"
            f"  {state.teams[0].name}: singer {rnd.singer_team1 + 1}  vs  "
            f"{state.teams[1].name}: singer {rnd.singer_team2 + 1}"
        )
        choice = Prompt.ask("  s = sing, r = random-song joker, t = retry-singer joker", choices=["s", "r", "t"], default="s")
        if choice == "s":
            break
        try:
            if choice == "r":
                machine.use_random_joker(state.team)
            else:
                machine.use_retry_joker(state.team)
        except JokerUnavailableError as exc:
            console.print(f"  [yellow]{exc}[/]")

    machine.next()
    if machine.stage is not Stage.SINGING:
        console.print("[yellow]The round could not be started, try again.[/]")
        return

    session.set_results(
        FloatPrompt.ask(f"  Points for {state.teams[0].name}"),
        FloatPrompt.ask(f"  Points for {state.teams[1].name}"),
    )
    machine.leaving_highscore()


def main() -> None:
    config_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("config.yaml")
    try:
        _main(config_path)
    except KeyboardInterrupt:
        console.print("\n[yellow]Tournament abandoned.[/]")
        sys.exit(1)


if __name__ == "__main__":
    main()
