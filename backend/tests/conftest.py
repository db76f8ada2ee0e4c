import os
import sys
import pytest

# Ensure the backend root (containing the `app` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from app import create_app, db, socketio
from app.services.match import MatchController, MatchRules


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:5173']


class ManualScheduler:
    """Records background tasks instead of running them.

    ``run_pending`` lets the clock run out: each recorded round timer ticks
    down and expires synchronously. Tasks spawned while running are kept for
    the next call.
    """

    def __init__(self):
        self.tasks = []

    def spawn(self, target, *args, **kwargs):
        self.tasks.append((target, args, kwargs))

    def sleep(self, seconds):
        pass

    def run_pending(self, name=None):
        tasks, self.tasks = self.tasks, []
        for target, args, kwargs in tasks:
            if name is None or target.__name__ == name:
                target(*args, **kwargs)
            else:
                self.tasks.append((target, args, kwargs))


class Outbox:
    """Collects (event, payload, to) triples emitted by a controller."""

    def __init__(self):
        self.sent = []

    def __call__(self, event, payload, to):
        self.sent.append((event, payload, to))

    def events(self, to=None):
        return [e for e, _, t in self.sent if to is None or t == to]

    def payloads(self, event, to=None):
        return [p for e, p, t in self.sent if e == event and (to is None or t == to)]

    def clear(self):
        self.sent.clear()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def outbox():
    return Outbox()


@pytest.fixture()
def summaries():
    return []


@pytest.fixture()
def make_controller(scheduler, outbox, summaries):
    def _make(**overrides):
        rules = MatchRules(**{'round_duration': 5, **overrides})
        return MatchController(
            rules,
            emit=outbox,
            spawn=scheduler.spawn,
            sleep=scheduler.sleep,
            on_match_over=summaries.append,
        )
    return _make


@pytest.fixture()
def controller(make_controller):
    return make_controller()


@pytest.fixture()
def started(controller, outbox):
    """A controller with both seats filled and round 1 running."""
    controller.join('sid-a')
    controller.join('sid-b')
    outbox.clear()
    return controller


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import app.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _connect():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        if test_client.is_connected('/ws'):
            test_client.disconnect(namespace='/ws')


@pytest.fixture()
def sio_client(sio_factory):
    return sio_factory()
