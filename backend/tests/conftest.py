import os
import sys

import pytest

# Ensure the backend root (containing the `adedonha` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from adedonha.config import Config
from adedonha.game import service as service_module
from adedonha.game.directory import RoomDirectory
from adedonha.game.registry import UserRegistry
from adedonha.game.scheduler import TimerHandle
from adedonha.game.service import GameService
from adedonha.server import create_app


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SOCKETIO_ASYNC_MODE = "threading"
    TRUST_PROXY_HEADERS = False
    LOG_LEVEL = "WARNING"


class ManualScheduler:
    """Timers that only fire when a test says so."""

    def __init__(self):
        self.intervals = []
        self.delayed = []
        self.requested_intervals = []
        self.requested_delays = []

    def every(self, room_id, interval, callback):
        self.requested_intervals.append(interval)
        handle = TimerHandle(room_id)
        self.intervals.append((handle, callback))
        return handle

    def later(self, room_id, delay, callback):
        self.requested_delays.append(delay)
        handle = TimerHandle(room_id)
        self.delayed.append((handle, callback))
        return handle

    def active(self, room_id):
        return [h for h, _ in self.intervals if h.room_id == room_id and not h.cancelled]

    def tick(self, room_id, times=1):
        for _ in range(times):
            for handle, callback in list(self.intervals):
                if handle.room_id == room_id and not handle.cancelled:
                    callback(room_id, handle)

    def run_delayed(self, room_id):
        for entry in list(self.delayed):
            handle, callback = entry
            if handle.room_id != room_id:
                continue
            self.delayed.remove(entry)
            if not handle.cancelled:
                callback(room_id, handle)


class RecordingBroadcaster:
    def __init__(self):
        self.sent = []
        self.closed = []

    def emit(self, event, payload, to):
        self.sent.append((event, payload, to))

    def close_room(self, room_id):
        self.closed.append(room_id)

    def payloads(self, event, to=None):
        return [p for e, p, t in self.sent if e == event and (to is None or t == to)]

    def last(self, event, to=None):
        found = self.payloads(event, to)
        return found[-1] if found else None


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def registry():
    return UserRegistry(starting_coins=100)


@pytest.fixture()
def service(registry, scheduler, broadcaster):
    return GameService(
        registry=registry,
        directory=RoomDirectory(),
        scheduler=scheduler,
        broadcaster=broadcaster,
    )


@pytest.fixture()
def fixed_letter(monkeypatch):
    def _fix(letter):
        monkeypatch.setattr(service_module, "random_letter", lambda: letter)

    return _fix


@pytest.fixture()
def seat():
    """Identify ``count`` connections and put them all in one new room."""

    def _seat(service, count, **options):
        sids = [f"sid-{i}" for i in range(count)]
        for i, sid in enumerate(sids):
            service.identify(sid, f"user-{i}", f"Player {i}")
        room = service.create_room(sids[0], **options)
        for sid in sids[1:]:
            service.join_room(sid, room.id, options.get("password"))
        return room, sids

    return _seat


@pytest.fixture()
def app_and_socketio():
    return create_app(TestConfig, scheduler=ManualScheduler())


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(app_and_socketio):
    flask_app, socketio = app_and_socketio
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        if test_client.is_connected():
            test_client.disconnect()
