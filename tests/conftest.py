import pytest

from scopedstorage import events
from scopedstorage.backing import InMemoryStore
from scopedstorage.config import Environment


class Captured:
    def __init__(self):
        self.events = []

    def __call__(self, _sender, **kw):
        self.events.append(kw)

    def __len__(self):
        return len(self.events)


@pytest.fixture
def capture():
    """capture(signal_name) -> list of payloads received while the test runs"""
    connected = []

    def _capture(signal_name):
        receiver = Captured()
        sig = events.signal(signal_name)
        sig.connect(receiver)
        connected.append((sig, receiver))
        return receiver

    yield _capture
    for sig, receiver in connected:
        sig.disconnect(receiver)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def environment(tmp_path):
    return Environment(tmp_path / "home")
