"""Live game sessions, keyed by game code.

The registry is runtime-only state, like the socket bookkeeping it sits
next to. Every command reaches a session through ``dispatch`` so it is
serialised with the session's own timer firings.
"""

import random
import time
from typing import Dict, Optional

from associations import socketio
from associations.engine import GameSession, Phase, SessionEvents
from associations.models import Game
from .scheduler import make_scheduler
from .scoring import commit_score

NAMESPACE = '/ws'

_sessions: Dict[str, GameSession] = {}
_host_count: Dict[str, int] = {}
_end_deadline: Dict[str, float] = {}


def game_room(game_code: str) -> str:
    return f"game:{game_code}"


def host_room(game_code: str) -> str:
    return f"host:{game_code}"


class RoomEvents(SessionEvents):
    """Bridges engine output to Socket.IO rooms and the score store."""

    def __init__(self, game_code: str):
        self.game_code = game_code

    def state_changed(self, session):
        socketio.emit('turn_state', session.to_dict(), to=host_room(self.game_code), namespace=NAMESPACE)
        socketio.emit('turn_update', session.to_dict(reveal_word=False), to=game_room(self.game_code),
                      namespace=NAMESPACE)

    def score_committed(self, commit):
        broadcast_scores(self.game_code, commit_score(commit.game_id, commit.contestant_id))

    def commit_failed(self, commit, exc):
        payload = dict(commit.to_dict(), error=str(exc))
        socketio.emit('score_commit_failed', payload, to=host_room(self.game_code), namespace=NAMESPACE)

    def player_left(self, event):
        socketio.emit('player_leave', event.to_dict(), to=game_room(self.game_code), namespace=NAMESPACE)


def broadcast_scores(game_code: str, teams: list) -> None:
    """Merge updated team points into the live scoreboard and push them to the room."""
    session = _sessions.get(game_code.upper())
    if session is not None:
        session.scoreboard.merge(teams)
        teams = session.scoreboard.standings()
    socketio.emit('score', {'event': 'score', 'teams': teams}, to=game_room(game_code.upper()),
                  namespace=NAMESPACE)


def get_session(game_code: str) -> Optional[GameSession]:
    return _sessions.get(game_code.upper())


def open_session(app, game_code: str) -> GameSession:
    """Return the live session for a game, creating and loading it if needed."""
    code = game_code.upper()
    session = _sessions.get(code)
    if session is not None:
        return session

    seed = app.config.get('WORD_DRAW_SEED')
    session = GameSession(
        code,
        make_scheduler(app, code),
        events=RoomEvents(code),
        rng=random.Random(seed) if seed is not None else None,
        logger=app.logger,
        heartbeat_sec=app.config.get('TIMER_HEARTBEAT_SEC', 0),
    )
    _sessions[code] = session
    app.logger.info(f"[session-open] game={code}")

    game = Game.query.filter_by(game_code=code).first()
    if game:
        session.scheduler.dispatch(_load, session, game)
    else:
        app.logger.info(f"[awaiting-data] game={code} no game data stored yet")
    return session


def supply_game_data(game_code: str) -> Optional[GameSession]:
    """Load freshly stored game data into a session still waiting for it."""
    session = get_session(game_code)
    if session is None or session.phase != Phase.AWAITING_DATA:
        return session
    game = Game.query.filter_by(game_code=session.game_id).first()
    if game:
        session.scheduler.dispatch(_load, session, game)
    return session


def _load(session: GameSession, game: Game) -> None:
    if session.load(game.to_payload()):
        session.scoreboard.merge(game.leaderboard())


def dispatch(session: GameSession, command: str, *args):
    return session.scheduler.dispatch(getattr(session, command), *args)


def end_session(game_code: str) -> None:
    """End the session: cancel its timers and notify clients."""
    code = game_code.upper()
    session = _sessions.pop(code, None)
    if session is not None:
        session.scheduler.dispatch(session.close)
    socketio.emit('session_ended', {'game_code': code}, to=game_room(code), namespace=NAMESPACE)
    _host_count.pop(code, None)
    _end_deadline.pop(code, None)


# ---- host presence ----

def host_joined(game_code: str) -> None:
    code = game_code.upper()
    _host_count[code] = _host_count.get(code, 0) + 1
    _end_deadline.pop(code, None)


def host_left(app, game_code: str) -> None:
    """Tear the session down once no host has been present for the grace period."""
    code = game_code.upper()
    _host_count[code] = max(0, _host_count.get(code, 0) - 1)
    if _host_count[code] > 0:
        return
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        end_session(code)
        return
    deadline = time.time() + float(app.config.get('HOST_GRACE_SEC', 2.0))
    _end_deadline[code] = deadline

    def _runner(c: str, d: float):
        sleep_for = max(0.0, d - time.time())
        if sleep_for:
            socketio.sleep(sleep_for)
        if _host_count.get(c, 0) == 0 and _end_deadline.get(c) == d:
            app.logger.info(f"[session-end] game={c} host did not return")
            end_session(c)

    socketio.start_background_task(_runner, code, deadline)
