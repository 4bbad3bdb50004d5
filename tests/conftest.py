"""
kvcache - Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
from collections.abc import AsyncGenerator, Generator
from unittest.mock import AsyncMock

import pytest

from kvcache.cache.backends.redis import RedisCache

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"


@pytest.fixture
def test_redis_address() -> str:
    """Address of the Redis server used by integration tests."""
    host = os.environ.get("TEST_REDIS_HOST", "localhost")
    port = os.environ.get("TEST_REDIS_PORT", "6379")
    return f"{host}:{port}"


@pytest.fixture
def fake_client() -> AsyncMock:
    """
    Stand-in for redis.asyncio.Redis.

    Defaults mirror an empty, healthy server; tests override per call.
    """
    client = AsyncMock()
    client.ping.return_value = True
    client.get.return_value = None
    client.set.return_value = True
    client.psetex.return_value = True
    client.exists.return_value = 0
    client.keys.return_value = []
    client.delete.return_value = 1
    client.flushall.return_value = True
    client.scan.return_value = (0, [])
    return client


@pytest.fixture
async def cache(fake_client: AsyncMock) -> AsyncGenerator[RedisCache, None]:
    """RedisCache wired to the fake client, 5 second default expiration."""
    cache = RedisCache(address="localhost", db=11, default_expire_ms=5000, client=fake_client)
    yield cache
    await cache.close()


@pytest.fixture(autouse=True)
def reset_global_state() -> Generator[None, None, None]:
    """Reset cache registry and config singleton after each test to prevent state leakage."""
    yield
    from kvcache.cache.factory import reset_cache_factory
    from kvcache.config import reset_config

    reset_cache_factory()
    reset_config()
