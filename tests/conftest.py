import pytest

from peak_progress.stores import MemoryStore


@pytest.fixture
def store():
    return MemoryStore()


class BrokenStore:
    """Store whose backend is down: reads and writes raise."""

    def read_raw(self, key):
        raise ConnectionError("store offline")

    def write_raw(self, key, value):
        raise ConnectionError("store offline")


@pytest.fixture
def broken_store():
    return BrokenStore()
