"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/fakes required for testing multiple layers.
"""

from datetime import datetime
from typing import Any, Callable, Iterator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base
from src.puzzle.clock import Clock
from src.services.persistence import PersistenceGateway, SaveThrottle
from src.services.seed_clock import SeedClock

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

# 2026-10-19 08:17:30 local time -> daily key '2026-10-19', 5-minute key '2026-10-19 08:15'
FIXED_NOW = datetime(2026, 10, 19, 8, 17, 30)


# --- FAKES ----
class FakeTime:
    """Monotonic time source (milliseconds) that only moves when told to."""

    def __init__(self, start_ms: float = 10_000.0) -> None:
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


class FakeHandle:
    def __init__(self, delay: float, callback: Callable[[], Any]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Records call_later requests. run_pending() fires every callback that is still armed, once."""

    def __init__(self) -> None:
        self.handles: list[FakeHandle] = []

    def call_later(self, delay: float, callback: Callable[[], Any]) -> FakeHandle:
        handle = FakeHandle(delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled]

    def run_pending(self) -> int:
        due = self.pending
        self.handles = []
        for handle in due:
            handle.callback()
        return len(due)


class MockKeyValueStore:
    """Mock the KeyValueStore using a dictionary. Counts writes so throttling can be observed."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}
        self.writes = 0

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.writes += 1
        self._items[key] = value


# --- FIXTURES ----
@pytest.fixture
def db_session_repo() -> Iterator[Session]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def fake_time() -> FakeTime:
    return FakeTime()


@pytest.fixture
def clock_factory(fake_time: FakeTime) -> Callable[[], Clock]:
    return lambda: Clock(fake_time)


@pytest.fixture
def fake_scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def mock_store() -> MockKeyValueStore:
    return MockKeyValueStore()


@pytest.fixture
def gateway(mock_store: MockKeyValueStore, fake_time: FakeTime) -> PersistenceGateway:
    return PersistenceGateway(mock_store, SaveThrottle(700, fake_time))


@pytest.fixture
def seed_clock() -> SeedClock:
    return SeedClock(now=lambda: FIXED_NOW)
