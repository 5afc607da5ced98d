"""GameSession: the turn state machine the host device drives.

Phases run ``awaiting_data -> waiting -> playing -> waiting -> ... -> finished``.
Every command and every timer firing is one event; a turn ending and the
word pool running dry are handled inside the same event, so a countdown
tick can never slip in between them.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from . import round_timer
from .errors import GameDataError, InvalidTransition, ScoreCommitError
from .models import Contestant, GameData, LeaveEvent, ScoreCommit
from .reveal import RevealController
from .scoreboard import Scoreboard
from .sequencer import build_order
from .timers import TimerSlot
from .word_pool import WordPool


class Phase(str, Enum):
    AWAITING_DATA = 'awaiting_data'
    WAITING = 'waiting'
    PLAYING = 'playing'
    FINISHED = 'finished'


class SessionEvents:
    """Outbound hooks. Subclass and override what the transport needs."""

    def state_changed(self, session: 'GameSession') -> None:
        pass

    def score_committed(self, commit: ScoreCommit) -> None:
        """Deliver a score commit. Raise ScoreCommitError on delivery failure."""

    def commit_failed(self, commit: ScoreCommit, exc: ScoreCommitError) -> None:
        pass

    def player_left(self, event: LeaveEvent) -> None:
        pass


class GameSession:
    def __init__(self, game_id: str, scheduler, events: Optional[SessionEvents] = None,
                 rng=None, logger: Optional[logging.Logger] = None, heartbeat_sec: int = 0):
        self.game_id = str(game_id)
        self.scheduler = scheduler
        self.events = events or SessionEvents()
        self.logger = logger or logging.getLogger(__name__)
        self.heartbeat_sec = int(heartbeat_sec or 0)
        self._rng = rng

        self.phase = Phase.AWAITING_DATA
        self.closed = False
        self.game: Optional[GameData] = None
        self.contestants: tuple = ()
        self.contestant_index = 0
        self.pool: Optional[WordPool] = None
        self.scoreboard = Scoreboard()

        self.round_number = 1
        self.time_left = 0
        self.current_word: Optional[str] = None
        self.turn: Optional[Dict[str, Any]] = None
        self.history: List[Dict[str, Any]] = []
        self.failed_commits: List[ScoreCommit] = []

        self._countdown = TimerSlot(scheduler)
        self.reveal = RevealController(scheduler, on_change=self._notify)

    # ---- read-only views ----

    @property
    def round_active(self) -> bool:
        return self.phase == Phase.PLAYING

    @property
    def word_visible(self) -> bool:
        return self.reveal.visible

    @property
    def holding(self) -> bool:
        return self.reveal.holding

    @property
    def current_contestant(self) -> Optional[Contestant]:
        if not self.contestants:
            return None
        return self.contestants[self.contestant_index]

    # ---- commands ----

    def load(self, payload: Optional[Dict[str, Any]]) -> bool:
        """Load game data. Returns False and keeps awaiting data if it is invalid."""
        self._require(Phase.AWAITING_DATA)
        try:
            game = GameData.from_payload(payload)
        except GameDataError as exc:
            self.logger.warning(f"[awaiting-data] game={self.game_id} reason={exc}")
            return False
        self.game = game
        self.contestants = build_order(game.teams, game.players_per_team)
        self.pool = WordPool(game.words, rng=self._rng)
        self.scoreboard = Scoreboard(game.teams)
        self.contestant_index = 0
        self.round_number = 1
        self.time_left = 0
        self.phase = Phase.WAITING
        self.logger.info(
            f"[session-loaded] game={self.game_id} teams={len(game.teams)} "
            f"contestants={len(self.contestants)} words={len(game.words)}"
        )
        self._notify()
        return True

    def start_turn(self) -> None:
        self._require(Phase.WAITING)
        contestant = self.current_contestant
        self.time_left = round_timer.duration(self.round_number, self.time_left)
        self.turn = {
            'contestant_id': contestant.id,
            'round': self.round_number,
            'duration': self.time_left,
            'words_drawn': 0,
            'words_scored': 0,
            'words_skipped': 0,
        }
        self.phase = Phase.PLAYING
        self.logger.info(
            f"[turn-start] game={self.game_id} contestant={contestant.name} "
            f"team={contestant.team_index} round={self.round_number} duration={self.time_left}s"
        )
        self._countdown.arm(round_timer.TICK_SEC, self._tick)
        self._draw()
        self._notify()

    def word_advance(self) -> None:
        """Score the current word and move on to the next one."""
        self._require(Phase.PLAYING)
        self.pool.remove(self.current_word)
        self.turn['words_scored'] += 1
        try:
            self._commit_score()
        finally:
            # the removed word must never stay current
            if self.pool.is_exhausted():
                self._end_turn(expired=False)
            else:
                self._draw()
            self._notify()

    def word_skip(self) -> None:
        self._require(Phase.PLAYING)
        self.turn['words_skipped'] += 1
        if self.pool.is_exhausted():
            self._end_turn(expired=False)
        else:
            self._draw()
        self._notify()

    def timer_expire(self) -> None:
        self._require(Phase.PLAYING)
        self.time_left = 0
        self._end_turn(expired=True)
        self._notify()

    def pool_exhausted(self) -> None:
        """Refill the pool and move to the next round, or finish the game."""
        if self.closed or self.pool is None or not self.pool.is_exhausted():
            raise InvalidTransition('word pool is not exhausted')
        if self.pool.can_refill():
            self.pool.refill()
            self.round_number = min(self.round_number + 1, round_timer.LAST_ROUND)
            self.logger.info(
                f"[pool-refill] game={self.game_id} passes={self.pool.passes_completed} "
                f"round={self.round_number}"
            )
        else:
            self._finish()

    def hold_start(self) -> None:
        if not self._can_hold():
            return
        self.reveal.on_hold_start()
        self._notify()

    def hold_end(self) -> None:
        if not self._can_hold():
            return
        self.reveal.on_hold_end()
        self._notify()

    def leave(self, player_id: str, player_name: str) -> LeaveEvent:
        event = LeaveEvent(
            game_id=self.game_id,
            player_id=str(player_id),
            player_name=player_name,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        self.logger.info(f"[player-leave] game={self.game_id} player={player_name}")
        self.events.player_left(event)
        return event

    def close(self) -> None:
        """Cancel every pending timer. Nothing fires after this."""
        self._countdown.cancel()
        self.reveal.reset()
        self.closed = True
        self.logger.info(f"[session-closed] game={self.game_id} phase={self.phase.value}")

    # ---- internals ----

    def _require(self, phase: Phase) -> None:
        if self.closed:
            raise InvalidTransition('session is closed')
        if self.phase != phase:
            raise InvalidTransition(f'expected phase {phase.value}, session is {self.phase.value}')

    def _can_hold(self) -> bool:
        return not self.closed and self.round_active and self.current_word is not None

    def _draw(self) -> None:
        self.current_word = self.pool.draw()
        self.turn['words_drawn'] += 1
        self.reveal.on_word_drawn()

    def _tick(self) -> None:
        result = round_timer.tick(self.time_left)
        self.time_left = result.remaining
        if self.heartbeat_sec and self.time_left % self.heartbeat_sec == 0:
            self.logger.info(f"[timer-heartbeat] game={self.game_id} remaining={self.time_left}s")
        if result.expired:
            self.timer_expire()
            return
        self._countdown.arm(round_timer.TICK_SEC, self._tick)
        self._notify()

    def _commit_score(self) -> None:
        commit = ScoreCommit(game_id=self.game_id, contestant_id=self.current_contestant.id)
        try:
            self.events.score_committed(commit)
        except ScoreCommitError as exc:
            self.logger.warning(
                f"[score-commit-failed] game={self.game_id} contestant={commit.contestant_id} error={exc}"
            )
            self.failed_commits.append(commit)
            self.events.commit_failed(commit, exc)

    def _end_turn(self, expired: bool) -> None:
        self._countdown.cancel()
        self.reveal.reset()
        self.current_word = None
        self.phase = Phase.WAITING
        if self.turn is not None:
            self.turn['ended_by'] = 'timer' if expired else 'pool'
            self.turn['time_left'] = self.time_left
            self.history.append(self.turn)
            self.turn = None
        self.logger.info(
            f"[turn-end] game={self.game_id} by={'timer' if expired else 'pool'} "
            f"time_left={self.time_left}s"
        )
        if expired:
            self.contestant_index = (self.contestant_index + 1) % len(self.contestants)
        if self.pool.is_exhausted():
            self.pool_exhausted()

    def _finish(self) -> None:
        self._countdown.cancel()
        self.reveal.reset()
        self.current_word = None
        self.phase = Phase.FINISHED
        self.logger.info(f"[game-finished] game={self.game_id} turns={len(self.history)}")

    def _notify(self) -> None:
        if self.closed:
            return
        self.events.state_changed(self)

    def to_dict(self, reveal_word: bool = True) -> Dict[str, Any]:
        contestant = self.current_contestant
        show_word = reveal_word and self.word_visible and self.current_word is not None
        return {
            'game_id': self.game_id,
            'phase': self.phase.value,
            'round': self.round_number,
            'time_left': self.time_left,
            'round_active': self.round_active,
            'contestant_index': self.contestant_index,
            'contestant': contestant.to_dict() if contestant else None,
            'word_visible': self.word_visible,
            'holding': self.holding,
            'word': self.current_word if show_word else None,
            'words_remaining': len(self.pool) if self.pool is not None else 0,
            'passes_completed': self.pool.passes_completed if self.pool is not None else 0,
            'turn': dict(self.turn) if self.turn else None,
            'turns_played': len(self.history),
            'failed_commits': len(self.failed_commits),
        }
