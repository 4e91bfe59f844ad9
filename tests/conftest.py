"""Root test fixtures shared across all test modules."""

import os

# Settings are required at import time; point them at a fake gateway
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("GATEWAY_URL", "http://gateway.test")
os.environ.setdefault("GATEWAY_API_KEY", "test-api-key-0123456789")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import AsyncGenerator

import pytest
from fakeredis import aioredis as fakeredis_aio
from redis.asyncio import Redis

from src.taskboard.core import redis as redis_core
from src.taskboard.core.config import get_settings
from src.taskboard.store.feedback import FeedbackChannel
from src.taskboard.store.store import SyncStore
from tests.helpers import World, build_world
from tests.utils import InMemoryFeed, InMemoryGateway, RecordingProvisioner

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


# --- Redis Test Fixtures ---


@pytest.fixture
async def fake_redis() -> AsyncGenerator[Redis]:
    """Provides a fakeredis client for testing.

    Returns an in-memory Redis implementation that behaves like
    a real Redis server but doesn't require external dependencies.
    """
    client = fakeredis_aio.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
async def mock_redis(fake_redis: Redis, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[Redis]:
    """Patches get_redis() to return the fakeredis client."""
    redis_core.reset_redis_state()

    async def _get_fake_redis() -> Redis:
        return fake_redis

    monkeypatch.setattr("src.taskboard.realtime.feed.get_redis", _get_fake_redis)
    yield fake_redis
    redis_core.reset_redis_state()


# --- Store Fixtures ---


@pytest.fixture
def gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
def world(gateway: InMemoryGateway) -> World:
    """Standard tenants seeded into the in-memory gateway."""
    return build_world(gateway)


@pytest.fixture
def provisioner(gateway: InMemoryGateway) -> RecordingProvisioner:
    return RecordingProvisioner(gateway)


@pytest.fixture
def feed() -> InMemoryFeed:
    return InMemoryFeed()


@pytest.fixture
def feedback() -> FeedbackChannel:
    return FeedbackChannel()


@pytest.fixture
async def store(
    gateway: InMemoryGateway,
    provisioner: RecordingProvisioner,
    feed: InMemoryFeed,
    feedback: FeedbackChannel,
) -> AsyncGenerator[SyncStore]:
    """A signed-out store wired to the in-memory collaborators."""
    store = SyncStore(gateway, provisioner=provisioner, feed=feed, feedback=feedback)
    yield store
    await store.sign_out()
