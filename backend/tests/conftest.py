import os
import sys
import random
import pytest

# Ensure the backend root (containing the `associations` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from associations import create_app, db, socketio
from associations.engine import GameSession, ManualScheduler, SessionEvents
from associations.services import sessions as live_sessions


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WORD_DRAW_SEED = 7


class LiveTimerConfig(TestConfig):
    ENABLE_SCHEDULER_IN_TESTS = True
    HOST_GRACE_SEC = 0.3


def make_payload(game_id='ABCD', words=None, teams=2, players=2, players_per_team=None):
    colors = ['green', 'blue', 'red', 'orange']
    return {
        'id': game_id,
        'playersPerTeam': players_per_team or players,
        'teams': [
            {
                'colorId': colors[t],
                'players': [{'name': f'{colors[t]}-{p}', 'id': f'{colors[t]}-{p}'} for p in range(players)],
            }
            for t in range(teams)
        ],
        'words': list(words) if words is not None else ['apple', 'river', 'piano', 'rocket'],
    }


class RecordingEvents(SessionEvents):
    def __init__(self):
        self.states = 0
        self.commits = []
        self.failures = []
        self.leaves = []
        self.fail_with = None

    def state_changed(self, session):
        self.states += 1

    def score_committed(self, commit):
        if self.fail_with is not None:
            raise self.fail_with
        self.commits.append(commit)

    def commit_failed(self, commit, exc):
        self.failures.append((commit, exc))

    def player_left(self, event):
        self.leaves.append(event)


@pytest.fixture()
def payload_factory():
    return make_payload


@pytest.fixture()
def clock():
    return ManualScheduler()


@pytest.fixture()
def events():
    return RecordingEvents()


@pytest.fixture()
def make_session(clock, events):
    def _make(payload=None, seed=1):
        session = GameSession('ABCD', clock, events=events, rng=random.Random(seed))
        session.load(payload if payload is not None else make_payload())
        return session
    return _make


def _running_app(config_class):
    application = create_app(config_class)
    with application.app_context():
        # Ensure models are imported so tables are created
        import associations.models  # noqa: F401
        db.create_all()
        yield application
        for code in list(live_sessions._sessions):
            live_sessions.end_session(code)
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def flask_app():
    yield from _running_app(TestConfig)


@pytest.fixture()
def live_app():
    yield from _running_app(LiveTimerConfig)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')
