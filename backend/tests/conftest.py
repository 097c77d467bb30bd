"""Pytest fixtures for backend tests."""
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient

from reelstack.logic.game_config import GameConfig
from reelstack.logic.rng import RNGBase
from reelstack.main import app
from reelstack.redis_service import RedisService
from reelstack.telemetry import telemetry_service


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (long simulations)"
    )


class MockRedis:
    """Mock Redis client for testing."""

    def __init__(self):
        self._store: dict[str, str] = {}
        self._last_set_ex: int | None = None

    async def get(self, key: str) -> str | None:
        return self._store.get(key)

    async def set(
        self, key: str, value: str, nx: bool = False, ex: int | None = None
    ) -> bool | None:
        if nx and key in self._store:
            return None
        self._store[key] = value
        self._last_set_ex = ex
        return True

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        self._store[key] = value
        return True

    async def delete(self, key: str) -> int:
        if key in self._store:
            del self._store[key]
            return 1
        return 0

    async def eval(self, script: str, numkeys: int, *args) -> int:
        """Compare-and-delete, matching RELEASE_LOCK_SCRIPT."""
        key = args[0]
        expected_value = args[1]
        if self._store.get(key) == expected_value:
            del self._store[key]
            return 1
        return 0

    async def close(self) -> None:
        pass

    def clear(self) -> None:
        self._store.clear()
        self._last_set_ex = None


class RecordingSink:
    """Telemetry sink that keeps every event for assertions."""

    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        self.events.append((event_name, data))

    def named(self, event_name: str) -> list[dict[str, Any]]:
        return [data for name, data in self.events if name == event_name]


class FirstChoiceRNG(RNGBase):
    """Always picks the first candidate."""

    def randint(self, a: int, b: int) -> int:
        return a


class LastChoiceRNG(RNGBase):
    """Always picks the last candidate."""

    def randint(self, a: int, b: int) -> int:
        return b


@pytest.fixture
def game_config() -> GameConfig:
    """Default game definition: 5x3, 20 paylines, scatter 0, wildcards 12-14."""
    return GameConfig()


@pytest.fixture
def mock_redis() -> MockRedis:
    """Create a fresh mock Redis for each test."""
    return MockRedis()


@pytest.fixture
def recording_sink() -> Generator[RecordingSink, None, None]:
    """Route telemetry into a RecordingSink for the duration of a test."""
    sink = RecordingSink()
    original_sink = telemetry_service._sink
    telemetry_service.set_sink(sink)
    yield sink
    telemetry_service.set_sink(original_sink)


@pytest.fixture
def redis_service_with_mock(mock_redis: MockRedis) -> Generator[RedisService, None, None]:
    """Create RedisService with mock client."""
    service = RedisService()
    service._client = mock_redis
    yield service
    mock_redis.clear()


@pytest.fixture
def client_with_mock_redis(mock_redis: MockRedis) -> Generator[TestClient, None, None]:
    """Create TestClient with mocked Redis."""
    from reelstack.redis_service import redis_service

    original_client = redis_service._client
    redis_service._client = mock_redis

    with TestClient(app) as client:
        yield client

    redis_service._client = original_client
    mock_redis.clear()


@pytest.fixture
def test_client() -> TestClient:
    """Create basic TestClient (for tests that don't need Redis)."""
    return TestClient(app)
