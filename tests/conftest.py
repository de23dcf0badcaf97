"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import time
import pytest
from typing import Generator

from shardcache.cache.engine import Cache
from shardcache.cache.shard import Shard, ShardTable


class FakeClock:
    """
    Controllable replacement for time.monotonic_ns.

    Starts at the real monotonic time and only moves when advance() is called.

    Usage:
        def test_something(cache, clock):
            cache.set("key", "value", 10)
            clock.advance(11)
    """

    def __init__(self, start: int):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        """Move the clock forward."""
        self.now += int(seconds * 1_000_000_000)


# ============================================================================
# Cache Fixtures
# ============================================================================

@pytest.fixture
def cache() -> Generator[Cache, None, None]:
    """Create a cache with no default expiration and no janitor."""
    c = Cache(default_expiration=0, cleanup_interval=0, num_shards=256)
    yield c
    c.stop()


@pytest.fixture
def expiring_cache() -> Generator[Cache, None, None]:
    """Create a cache whose entries expire after 5 minutes by default."""
    c = Cache(default_expiration=300, cleanup_interval=0)
    yield c
    c.stop()


@pytest.fixture
def small_cache() -> Generator[Cache, None, None]:
    """Create a cache with only 4 shards, so keys share shards."""
    c = Cache(default_expiration=0, cleanup_interval=0, num_shards=4)
    yield c
    c.stop()


# ============================================================================
# Shard Fixtures
# ============================================================================

@pytest.fixture
def shard() -> Shard:
    """Create an empty shard."""
    return Shard()


@pytest.fixture
def table() -> ShardTable:
    """Create a shard table with 8 shards."""
    return ShardTable(num_shards=8)


# ============================================================================
# Clock Fixtures
# ============================================================================

@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    """Freeze the monotonic clock used for expiration."""
    fake = FakeClock(time.monotonic_ns())
    monkeypatch.setattr(time, "monotonic_ns", fake)
    return fake


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
