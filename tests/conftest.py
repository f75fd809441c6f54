"""
Shared pytest fixtures for proj-facts tests.

Provides an in-memory storage backend and a fixed clock so tests run
without touching the real filesystem or depending on the current time.
"""

from datetime import datetime, timezone
from pathlib import Path, PurePosixPath

import pytest

from projfacts.api import FactStore
from projfacts.config import FactsConfig
from projfacts.errors import NotFoundError, StorageError
from projfacts.storage import LocalStorage
from projfacts.types import InsightRecord


FIXED_NOW = datetime(2026, 1, 15, 10, 30, 0, tzinfo=timezone.utc)


class MemoryStorage:
    """
    Dict-backed StorageProtocol implementation.

    ``fail_read`` / ``fail_write`` hold paths whose operations raise
    StorageError, to simulate unreadable or unwritable files.
    ``fail_os_read`` paths raise a bare OSError, as a third-party backend
    might.
    """

    def __init__(self):
        self.files: dict[PurePosixPath, str] = {}
        self.dirs: set[PurePosixPath] = set()
        self.fail_read: set[PurePosixPath] = set()
        self.fail_write: set[PurePosixPath] = set()
        self.fail_os_read: set[PurePosixPath] = set()
        self.reads: list[PurePosixPath] = []
        self.writes: list[PurePosixPath] = []

    @staticmethod
    def _key(path) -> PurePosixPath:
        return PurePosixPath(str(path))

    def exists(self, path) -> bool:
        key = self._key(path)
        return key in self.files or key in self.dirs

    def read(self, path) -> str:
        key = self._key(path)
        self.reads.append(key)
        if key in self.fail_read:
            raise StorageError(f"Simulated read failure: {path}")
        if key in self.fail_os_read:
            raise OSError(f"Simulated I/O error: {path}")
        if key not in self.files:
            raise NotFoundError(f"File not found: {path}")
        return self.files[key]

    def write(self, path, text: str) -> None:
        key = self._key(path)
        if key in self.fail_write:
            raise StorageError(f"Simulated write failure: {path}")
        self.mkdir(key.parent)
        self.files[key] = text
        self.writes.append(key)

    def list(self, directory) -> list[str]:
        key = self._key(directory)
        if key not in self.dirs:
            return []
        names = {p.name for p in list(self.files) + list(self.dirs) if p.parent == key and p != key}
        return sorted(names)

    def mkdir(self, path) -> None:
        key = self._key(path)
        while key not in self.dirs and key != key.parent:
            self.dirs.add(key)
            key = key.parent

    def add(self, path, text: str) -> None:
        """Place a file directly (test setup, not counted as a write)."""
        key = self._key(path)
        self.mkdir(key.parent)
        self.files[key] = text


@pytest.fixture
def clock():
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def project_path(tmp_path) -> Path:
    return tmp_path / "project"


@pytest.fixture
def config(project_path, clock) -> FactsConfig:
    return FactsConfig(project_path=project_path, clock=clock)


@pytest.fixture
def store(config) -> FactStore:
    """FactStore on the real filesystem under tmp_path."""
    return FactStore(config, storage=LocalStorage())


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def memory_store(config, memory_storage) -> FactStore:
    """FactStore over in-memory storage."""
    return FactStore(config, storage=memory_storage)


def _make_insight(**overrides) -> InsightRecord:
    fields = {
        "task": "implement login",
        "solution": "use JWT",
        "reasoning": "stateless",
        "evidence": [],
        "category": "technical",
        "confidence": "high",
    }
    fields.update(overrides)
    return InsightRecord(**fields)


@pytest.fixture
def make_insight():
    """Factory for InsightRecords with sensible defaults."""
    return _make_insight


@pytest.fixture
def insight() -> InsightRecord:
    return _make_insight()
