"""
Shared test fixtures and configuration.
"""

import os
import tempfile

import pytest

# Set test environment variables before importing package modules
os.environ.setdefault("PHOTOCOACH_STORAGE_PATH", os.path.join(tempfile.gettempdir(), "photocoach_test_data"))
os.environ.setdefault("PHOTOCOACH_LOG_FILE_ENABLED", "false")
os.environ.setdefault("PHOTOCOACH_LOG_CONSOLE_ENABLED", "false")

from photocoach.storage import LocalStorage, MemoryStorage, SessionStore  # noqa: E402

HOUR_MS = 60 * 60 * 1000
START_MS = 1_700_000_000_000


class FakeClock:
    """Deterministic millisecond clock."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def local_storage(tmp_path):
    return LocalStorage(str(tmp_path / "data"))


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def store(local_storage):
    return SessionStore(local_storage)
