import os

# Must be set before importing app. load_dotenv() does not override existing
# env vars, so these take precedence over whatever is in .env.
os.environ.setdefault("HEARTBEAT_TIMEOUT", "0")

import pytest
from fastapi.testclient import TestClient

from app import app, get_heartbeat, get_store
from heartbeat import Heartbeat
from storage import DataStore


class FakeClock:
    """A monotonic clock that only moves when told to."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def heartbeat(clock):
    return Heartbeat(timeout=10, clock=clock)


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data.json"


@pytest.fixture
def store(data_file):
    return DataStore(data_file)


@pytest.fixture
def client(store, heartbeat):
    """
    A TestClient backed by a per-test data file and a fake-clock heartbeat.

    TestClient is intentionally used without the context manager so the app's
    startup event (which starts the heartbeat watcher) does not run.
    """
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_heartbeat] = lambda: heartbeat
    yield TestClient(app, raise_server_exceptions=True)
    app.dependency_overrides.clear()
