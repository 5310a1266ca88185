import os
import sys
import pytest

# Ensure the repo root (containing the `chessroom` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from chessroom import create_app, socketio
from chessroom.coordinator import Coordinator
from chessroom.registry import SessionRegistry
from chessroom.services.sessions.rules import ChessRules


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SESSION_GRACE_PERIOD_SEC = 0.2
    SOCKETIO_NAMESPACE = '/ws'
    CORS_ALLOWED_ORIGINS = ['http://localhost:3000']
    PORT = 3000


class RecordingTransport:
    """Collects everything the coordinator would have put on the wire."""

    def __init__(self):
        self.sent = []
        self.rooms = {}

    def send(self, sid, event, payload=None):
        self.sent.append(('send', sid, event, payload))

    def broadcast(self, room, event, payload=None):
        self.sent.append(('room', room, event, payload))

    def broadcast_all(self, event, payload=None):
        self.sent.append(('all', None, event, payload))

    def join(self, sid, room):
        self.rooms.setdefault(room, set()).add(sid)

    def events(self, event=None):
        return [entry for entry in self.sent if event is None or entry[2] == event]

    def to(self, sid):
        return [(event, payload) for kind, target, event, payload in self.sent if kind == 'send' and target == sid]

    def clear(self):
        self.sent.clear()


class ManualScheduler:
    """Holds deferred calls until the test fires them."""

    def __init__(self):
        self.pending = []

    def call_later(self, delay, func, *args):
        self.pending.append((delay, func, args))

    def run_all(self):
        pending, self.pending = self.pending, []
        return [func(*args) for _, func, args in pending]


@pytest.fixture()
def rules():
    return ChessRules()


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def coordinator(rules, transport, scheduler):
    return Coordinator(
        registry=SessionRegistry(rules),
        rules=rules,
        transport=transport,
        scheduler=scheduler,
        grace_period=60,
    )


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        test_client.get_received('/ws')  # flush the connect greeting
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass


@pytest.fixture()
def sio_client(make_sio_client):
    return make_sio_client()
