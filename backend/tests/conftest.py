import os
import sys
import pytest

# Ensure the backend root (containing the `gridclaim` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from gridclaim import ENGINE_EXTENSION, create_app, socketio
from gridclaim.models import ADMIN_CELL_ID, ADMIN_COLOR, SENTINEL_ADMIN_ID, Phase
from gridclaim.services.game import GameEngine
from gridclaim.services.game.scheduler import Clock


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ALLOWED_ORIGINS = '*'
    ROUND_DURATION_SEC = 60
    COOLDOWN_DURATION_SEC = 10
    TICK_INTERVAL_SEC = 1.0


class RecordingBroadcaster:
    """Stands in for Socket.IO; keeps every push for inspection."""

    def __init__(self):
        self.broadcasts = []
        self.direct = []
        self.admin_notices = []

    def broadcast_all(self, session):
        snapshot = session.snapshot()
        self.broadcasts.append(snapshot)
        return snapshot

    def send_to(self, connection_id, session):
        snapshot = session.snapshot()
        self.direct.append((connection_id, snapshot))
        return snapshot

    def notify_admin_status(self, connection_id, is_admin):
        self.admin_notices.append((connection_id, is_admin))

    @property
    def last(self):
        return self.broadcasts[-1]


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def engine(broadcaster):
    # No spawn function: tickers never run on their own, tests call engine.tick()
    return GameEngine(broadcaster, clock=Clock(interval=1.0))


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application


@pytest.fixture()
def app_engine(flask_app):
    return flask_app.extensions[ENGINE_EXTENSION]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
    )
    yield test_client
    try:
        test_client.disconnect()
    except Exception:
        pass


def invariant_violations(engine):
    """Everything that must hold after each handled event."""
    session = engine.session
    problems = []
    admin_cell = session.grid[ADMIN_CELL_ID]
    expected_owner = session.admin_id if session.admin_id is not None else SENTINEL_ADMIN_ID
    if admin_cell.owner_id != expected_owner or admin_cell.color != ADMIN_COLOR:
        problems.append(f'cell 0 owned by {admin_cell.owner_id!r} ({admin_cell.color})')
    if session.players and session.admin_id is None:
        problems.append(f'{len(session.players)} players and no admin')

    counts = session.owned_counts()
    for p in session.players:
        if p.score != counts.get(p.id, 0):
            problems.append(f'score of {p.name} is {p.score}, owns {counts.get(p.id, 0)}')
        for cell in session.grid:
            if cell.owner_id == p.id and (cell.color, cell.owner_name) != (p.color, p.name):
                problems.append(f'cell {cell.id} shows {cell.color}/{cell.owner_name} for {p.name}')

    names = [p.name for p in session.players]
    if len(set(names)) != len(names):
        problems.append(f'duplicate names: {names}')
    colors = [p.color for p in session.players]
    if len(set(colors)) != len(colors):
        problems.append(f'duplicate colors: {colors}')

    phase = session.phase
    if (phase == Phase.LOBBY) != (len(session.players) == 0):
        problems.append(f'phase {phase.value} with {len(session.players)} players')
    if engine.rounds.round_timer_active != (phase == Phase.ACTIVE):
        problems.append(f'round timer active={engine.rounds.round_timer_active} in phase {phase.value}')
    if phase == Phase.COOLDOWN and (session.countdown is None or session.winner is None):
        problems.append('cooldown without countdown or winner')
    if phase != Phase.COOLDOWN and (session.countdown is not None or session.winner is not None):
        problems.append(f'countdown/winner set in phase {phase.value}')
    return problems


@pytest.fixture()
def assert_invariants():
    def _check(engine):
        assert invariant_violations(engine) == []
    return _check
