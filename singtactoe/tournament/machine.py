"""
Stage machine: the top-level controller for a tic-tac-toe singing tournament.

The host UI drives it with next()/back() and a handful of callbacks
(select_round, song_selected, leaving_highscore). Every stage change is a
lookup in TRANSITIONS; anything missing from the table is a host bug and
raises InvalidTransitionError.

Flow:
    Config -> Names -> Main -> Singing -> Main -> Singing -> ...

Entering Main from Names builds a brand-new TournamentState. Returning to
Main from Singing hands the turn to the other team; once Main is entered,
whichever pools have run dry are refilled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Literal, Mapping

from singtactoe import config as limits
from singtactoe.collaborators.base import (
    Navigation,
    PerformanceSession,
    Playlists,
    RandomSource,
    SongCatalog,
)
from singtactoe.config import GameConfig, validate_game_config, validate_rosters
from singtactoe.tournament.base import (
    InvalidTransitionError,
    JokerUnavailableError,
    Round,
    Stage,
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
from singtactoe.tournament.players import PlayerAllocator
from singtactoe.tournament.rounds import build_rounds, compute_jokers, line_winner
from singtactoe.tournament.scoring import ScoreEvaluator
from singtactoe.tournament.songs import SongPoolBuilder

logger = logging.getLogger(__name__)

Action = Literal["next", "back"]
EventListener = Callable[[TournamentEvent], None]

PARTY_SCREEN = "party"     # the party-mode hub the tournament is launched from
SONG_SCREEN = "song"       # shared song screen, used while a round is being sung
SING_SCREEN = "sing"       # the performance itself

DEFAULT_SCREENS: Mapping[Stage, str] = {
    Stage.CONFIG: "PartyScreenTicTacToeConfig",
    Stage.NAMES: "PartyScreenTicTacToeNames",
    Stage.MAIN: "PartyScreenTicTacToeMain",
    Stage.SINGING: SONG_SCREEN,
}

# (stage, action) -> next stage; None leaves the party mode entirely
TRANSITIONS: Mapping[tuple[Stage, Action], Stage | None] = {
    (Stage.CONFIG, "next"): Stage.NAMES,
    (Stage.NAMES, "next"): Stage.MAIN,
    (Stage.MAIN, "next"): Stage.SINGING,
    (Stage.SINGING, "next"): Stage.MAIN,
    (Stage.CONFIG, "back"): None,
    (Stage.NAMES, "back"): Stage.CONFIG,
    (Stage.MAIN, "back"): Stage.CONFIG,
}


@dataclass
class ScreenSongOptions:
    """What the shared song screen may offer while this party mode is active."""

    party_mode: bool = True
    random_only: bool = False
    category_change_allowed: bool = True
    num_jokers: list[int] = field(default_factory=lambda: [0, 0])
    team_names: list[str] = field(default_factory=list)
    search_string: str = ""
    search_active: bool = False


class StageMachine:
    """Owns the TournamentState and every transition that mutates it."""

    def __init__(
        self,
        config: GameConfig,
        *,
        rng: RandomSource,
        catalog: SongCatalog,
        playlists: Playlists,
        session: PerformanceSession,
        navigation: Navigation,
        screens: Mapping[Stage, str] = DEFAULT_SCREENS,
        on_event: EventListener | None = None,
    ) -> None:
        self.config = config
        self.rng = rng
        self.catalog = catalog
        self.session = session
        self.navigation = navigation
        self.screens = screens
        self.on_event = on_event

        self.players = PlayerAllocator(rng)
        self.song_pool = SongPoolBuilder(rng, catalog, playlists)
        self.scoring = ScoreEvaluator(session)

        self._stage = Stage.CONFIG
        self._state: TournamentState | None = None
        self._complete_announced = False
        self._search = ("", False)

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def state(self) -> TournamentState | None:
        """The running tournament, or None before the first Names -> Main."""
        return self._state

    @property
    def start_screen(self) -> str:
        return self.screens[Stage.CONFIG]

    def reset(self) -> None:
        """Re-enter the party mode from scratch."""
        self._stage = Stage.CONFIG
        self._state = None
        self._complete_announced = False

    def next(self) -> None:
        self._transition("next")

    def back(self) -> None:
        self._transition("back")

    def select_round(self, index: int) -> Round:
        """
        The acting team picks a grid cell to sing next.

        Consumes the next pooled song and the next drawn singer of each team.
        """
        state = self._require_main("select_round")
        if not 0 <= index < len(state.rounds):
            raise IndexError(f"Round index {index} outside grid of {len(state.rounds)}")
        rnd = state.rounds[index]
        if rnd.finished:
            raise ValueError(f"Round {index} is already finished")

        self._replenish_pools(state)
        rnd.song_id = state.songs.pop(0)
        rnd.singer_team1 = state.teams[0].draws.pop(0)
        rnd.singer_team2 = state.teams[1].draws.pop(0)
        state.sing_round_nr = index
        state.selected = True

        self._emit(RoundSelectedEvent(
            round_index=index,
            team=state.team,
            song_id=rnd.song_id,
            singer_team1=rnd.singer_team1,
            singer_team2=rnd.singer_team2,
        ))
        return rnd

    def use_random_joker(self, team: int) -> int:
        """Swap the selected round's song for the next one in the pool. Returns the new song ID."""
        state, rnd = self._joker_target("random", team)
        if not state.songs:
            self.song_pool.build(state)
            self._emit(PoolReplenishedEvent(pool="songs", team=None, size=len(state.songs)))
        rnd.song_id = state.songs.pop(0)
        state.num_joker_random[team] -= 1
        logger.info("Team %d random joker: round %d now song %d", team + 1, state.sing_round_nr, rnd.song_id)
        self._emit(JokerUsedEvent(
            team=team, kind="random", round_index=state.sing_round_nr,
            remaining=state.num_joker_random[team],
        ))
        return rnd.song_id

    def use_retry_joker(self, team: int) -> int:
        """Redraw one team's singer for the selected round. Returns the new roster index."""
        state, rnd = self._joker_target("retry", team)
        if not state.teams[team].draws:
            self.players.allocate_team(state, team)
            self._emit(PoolReplenishedEvent(pool="players", team=team, size=len(state.teams[team].draws)))
        singer = state.teams[team].draws.pop(0)
        if team == 0:
            rnd.singer_team1 = singer
        else:
            rnd.singer_team2 = singer
        state.num_joker_retry[team] -= 1
        logger.info("Team %d retry joker: round %d singer now %d", team + 1, state.sing_round_nr, singer)
        self._emit(JokerUsedEvent(
            team=team, kind="retry", round_index=state.sing_round_nr,
            remaining=state.num_joker_retry[team],
        ))
        return singer

    def song_selected(self, song_id: int) -> None:
        """Queue the chosen song in the session and go sing it."""
        self.session.add_song(song_id, self.config.game_mode)
        self.navigation.fade_to(SING_SCREEN)

    def leaving_highscore(self) -> None:
        """Called when the results screen closes: record the song, score the round, move on."""
        song_id = self.session.current_song_id()
        if song_id is not None:
            self.catalog.mark_sung(song_id)
        self.evaluate_score()
        self.next()

    def evaluate_score(self) -> Round | None:
        state = self._state
        if state is None:
            raise InvalidTransitionError(self._stage, "evaluate_score")
        rnd = self.scoring.evaluate(state)
        if rnd is not None:
            state.selected = False
            self._emit(RoundScoredEvent(
                round_index=state.sing_round_nr,
                points_team1=rnd.points_team1,
                points_team2=rnd.points_team2,
                winner=rnd.winner,
                current_round_nr=state.current_round_nr,
            ))
        return rnd

    def line_winner(self) -> int:
        return line_winner(self._state.rounds) if self._state else 0

    def is_over(self) -> bool:
        state = self._state
        if state is None:
            return False
        return bool(line_winner(state.rounds)) or all(r.finished for r in state.rounds)

    # Song screen integration

    def screen_song_options(self) -> ScreenSongOptions:
        state = self._state
        return ScreenSongOptions(
            num_jokers=list(state.num_joker_random) if state else [0, 0],
            team_names=[t.name for t in state.teams] if state else list(self.config.team_names),
            search_string=self._search[0],
            search_active=self._search[1],
        )

    def set_search_string(self, search: str, visible: bool) -> None:
        self._search = (search, visible)

    # Configuration accessors

    def max_players(self) -> int:
        return limits.MAX_PLAYERS

    def min_players(self) -> int:
        return limits.MIN_PLAYERS

    def max_teams(self) -> int:
        return limits.MAX_TEAMS

    def min_teams(self) -> int:
        return limits.MIN_TEAMS

    def min_players_per_team(self) -> int:
        return limits.MIN_PLAYERS_PER_TEAM

    def max_players_per_team(self) -> int:
        return limits.MAX_PLAYERS_PER_TEAM

    def max_rounds(self) -> int:
        return self.config.grid_size

    # ------------------------------------------------------------------ #
    # Transitions                                                          #
    # ------------------------------------------------------------------ #

    def _transition(self, action: Action) -> None:
        key = (self._stage, action)
        if key not in TRANSITIONS:
            raise InvalidTransitionError(self._stage, action)
        target = TRANSITIONS[key]

        if target is None:
            logger.info("Leaving party mode from %s", self._stage.name)
            self.navigation.fade_to(PARTY_SCREEN)
            return

        if action == "next":
            hook = _NEXT_HOOKS[self._stage]
            if hook(self) is False:
                return

        previous = self._stage
        self._stage = target
        screen = self.screens[target]
        logger.info("Stage %s -> %s", previous.name, target.name)
        self._emit(StageChangedEvent(from_stage=previous.value, to_stage=target.value, screen=screen))
        self.navigation.fade_to(screen)

        if action == "next" and previous in _AFTER_NEXT_HOOKS:
            _AFTER_NEXT_HOOKS[previous](self)

    def _enter_names(self) -> None:
        validate_game_config(self.config)

    def _start_tournament(self) -> None:
        """Build a fresh TournamentState. Nothing is committed unless every step succeeds."""
        validate_rosters(self.config)
        state = TournamentState.from_config(self.config)
        state.team = 0 if self.rng.next_int(100) < 50 else 1
        self.catalog.reset_sung_flags()
        state.current_round_nr = 1
        state.rounds = build_rounds(state.grid_size)
        state.num_joker_random, state.num_joker_retry = compute_jokers(state.grid_size)
        self.players.allocate_joint(state)
        self.song_pool.build(state)

        self._state = state
        self._complete_announced = False
        logger.info(
            "Tournament started: %d cells, %s vs %s, team %d begins",
            state.grid_size, state.teams[0].name, state.teams[1].name, state.team + 1,
        )
        self._emit(TournamentStartEvent(
            team_names=[t.name for t in state.teams],
            grid_size=state.grid_size,
            starting_team=state.team,
            joker_random=list(state.num_joker_random),
            joker_retry=list(state.num_joker_retry),
            song_pool_size=len(state.songs),
        ))

    def _enter_singing(self) -> bool:
        return self.start_round(self._state.sing_round_nr)

    def _return_to_main(self) -> None:
        state = self._state
        state.team = 1 - state.team
        if not self._complete_announced and self.is_over():
            self._complete_announced = True
            winner = line_winner(state.rounds)
            cells = [sum(1 for r in state.rounds if r.finished and r.winner == t) for t in (1, 2)]
            logger.info("Tournament over, winner: %s", state.teams[winner - 1].name if winner else "none")
            self._emit(TournamentCompleteEvent(
                winner=winner,
                winner_name=state.teams[winner - 1].name if winner else None,
                cells_team1=cells[0],
                cells_team2=cells[1],
            ))

    def _refill_after_singing(self) -> None:
        # Runs once Main is committed, so a NotEnoughSongsError surfaces from Main.
        self._replenish_pools(self._state)

    def start_round(self, round_nr: int) -> bool:
        """
        Bind the round's two singers and its song to the performance session.

        Returns False, changing nothing in the tournament, if the round has no
        song yet or the session cannot provide two performer slots.
        """
        state = self._state
        rnd = state.rounds[round_nr]
        if not rnd.assigned:
            logger.warning("Round %d has no song assigned; not starting", round_nr)
            return False

        self.session.reset()
        self.session.clear_songs()
        self.session.set_slot_count(2)
        slots = self.session.get_slots()
        if slots is None or len(slots) < 2:
            logger.warning("Performance session has fewer than 2 slots; round %d not started", round_nr)
            return False

        is_duet = self.catalog.get_by_id(rnd.song_id).is_duet
        for slot in slots[:2]:
            slot.profile_id = -1

        slots[0].profile_id = state.teams[0].profile_ids[rnd.singer_team1]
        slots[1].profile_id = state.teams[1].profile_ids[rnd.singer_team2]
        if is_duet:
            slots[0].voice_nr = 0
            slots[1].voice_nr = 1

        self._emit(RoundStartEvent(
            round_index=round_nr,
            song_id=rnd.song_id,
            profile_team1=slots[0].profile_id,
            profile_team2=slots[1].profile_id,
            is_duet=is_duet,
        ))
        self.song_selected(rnd.song_id)
        return True

    # ------------------------------------------------------------------ #
    # Internal helpers                                                     #
    # ------------------------------------------------------------------ #

    def _replenish_pools(self, state: TournamentState) -> None:
        if self.song_pool.replenish(state):
            self._emit(PoolReplenishedEvent(pool="songs", team=None, size=len(state.songs)))
        for team in self.players.replenish(state):
            self._emit(PoolReplenishedEvent(pool="players", team=team, size=len(state.teams[team].draws)))

    def _require_main(self, action: str) -> TournamentState:
        if self._stage is not Stage.MAIN or self._state is None:
            raise InvalidTransitionError(self._stage, action)
        return self._state

    def _joker_target(self, kind: str, team: int) -> tuple[TournamentState, Round]:
        state = self._state
        if state is None or self._stage is not Stage.MAIN or not state.selected:
            raise JokerUnavailableError(f"No round selected for a {kind} joker")
        if team not in (0, 1):
            raise ValueError(f"team must be 0 or 1, got {team}")
        remaining = state.num_joker_random if kind == "random" else state.num_joker_retry
        if remaining[team] <= 0:
            raise JokerUnavailableError(f"Team {team + 1} has no {kind} jokers left")
        return state, state.current_round

    def _emit(self, event: TournamentEvent) -> None:
        if self.on_event is not None:
            self.on_event(event)


_NEXT_HOOKS: Mapping[Stage, Callable[[StageMachine], bool | None]] = {
    Stage.CONFIG: StageMachine._enter_names,
    Stage.NAMES: StageMachine._start_tournament,
    Stage.MAIN: StageMachine._enter_singing,
    Stage.SINGING: StageMachine._return_to_main,
}

_AFTER_NEXT_HOOKS: Mapping[Stage, Callable[[StageMachine], None]] = {
    Stage.SINGING: StageMachine._refill_after_singing,
}
