"""
Cache Engine Module

The public cache object. Keys are hashed to 64 bits, routed to one of a fixed
number of shards, and stored there with an absolute expiration time.

Expiration:
- Reads treat an expired entry as missing (logical expiration)
- Expired entries stay in memory until overwritten, deleted, flushed,
  or removed by delete_expired() (physical removal)
- With a positive cleanup interval a Janitor thread calls delete_expired()
  periodically

TTL arguments are seconds (int or float) or a datetime.timedelta.
Two sentinels are accepted wherever a TTL is:
- NO_EXPIRATION: the entry never expires
- DEFAULT_EXPIRATION: use the default given when the cache was created
"""

import logging
import weakref
from datetime import datetime, timedelta, timezone
from typing import Dict, Generic, Optional, Tuple, TypeVar, Union

from ..config.settings import settings
from .errors import KeyExistsError, KeyNotFoundError
from .hasher import Key, key_to_hash
from .janitor import Janitor
from .shard import Entry, ShardTable, nanotime

logger = logging.getLogger(__name__)

V = TypeVar("V")

Duration = Union[int, float, timedelta]

# For use with methods that take a TTL
NO_EXPIRATION = -1
# Equivalent to passing the default expiration given to the constructor
DEFAULT_EXPIRATION = 0

NANOS_PER_SECOND = 1_000_000_000


def to_seconds(duration: Duration) -> float:
    """Normalize a duration to seconds."""
    if isinstance(duration, timedelta):
        return duration.total_seconds()
    return duration


class Cache(Generic[V]):
    """
    Sharded in-process cache with per-entry TTL.

    Every operation is thread-safe. Operations on one key lock only the shard
    that key routes to; table-wide operations lock one shard at a time.

    Parametrize with a value type to narrow a cache to one kind of value:
        sessions: Cache[Session] = Cache(default_expiration=300)

    Usage:
        cache = Cache(default_expiration=300, cleanup_interval=600)
        cache.set("foo", "bar", NO_EXPIRATION)
        value, found = cache.get("foo")
        cache.stop()

    A cache with a janitor should be stopped with stop() (or used as a
    context manager). If it is not, the janitor is stopped when the cache
    object is garbage collected.

    Attributes:
        default_expiration: Default TTL in seconds (negative = never expires)
        num_shards: Number of shards in the table
    """

    def __init__(
            self,
            default_expiration: Optional[Duration] = None,
            cleanup_interval: Optional[Duration] = None,
            num_shards: Optional[int] = None,
    ):
        """
        Initialize the cache.

        Args:
            default_expiration: Default TTL (default from settings). A value
                <= 0 means entries never expire unless a call sets a TTL.
            cleanup_interval: Seconds between janitor sweeps (default from
                settings). A value <= 0 disables the janitor.
            num_shards: Number of shards (default from settings)

        Raises:
            ValueError: If num_shards is not positive
        """
        if default_expiration is None:
            default_expiration = settings.DEFAULT_EXPIRATION
        if cleanup_interval is None:
            cleanup_interval = settings.CLEANUP_INTERVAL
        if num_shards is None:
            num_shards = settings.NUM_SHARDS

        default_seconds = to_seconds(default_expiration)
        self._default_expiration: float = NO_EXPIRATION if default_seconds == 0 else default_seconds
        self._table = ShardTable(num_shards)

        self._janitor: Optional[Janitor] = None
        self._finalizer: Optional[weakref.finalize] = None
        interval = to_seconds(cleanup_interval)
        if interval > 0:
            # The janitor only sees the shard table, so this object can still
            # be collected; the finalizer then stops the janitor.
            self._janitor = Janitor(interval, self._table.delete_expired)
            self._janitor.start()
            self._finalizer = weakref.finalize(self, self._janitor.stop)

        logger.debug(
            f"Cache created: shards={self.num_shards}, "
            f"default_expiration={self.default_expiration}, cleanup_interval={interval}"
        )

    @property
    def default_expiration(self) -> float:
        """Default TTL in seconds; fixed at construction."""
        return self._default_expiration

    @property
    def num_shards(self) -> int:
        """Number of shards; fixed at construction."""
        return self._table.num_shards

    def _expires_at(self, ttl: Duration) -> int:
        seconds = to_seconds(ttl)
        if seconds == DEFAULT_EXPIRATION:
            seconds = self.default_expiration
        if seconds > 0:
            return nanotime() + max(1, int(seconds * NANOS_PER_SECOND))
        return 0

    def set(self, key: Key, value: V, ttl: Duration = DEFAULT_EXPIRATION) -> None:
        """
        Add an item to the cache, replacing any existing item.

        Args:
            key: The key to store under
            value: The value, stored by reference
            ttl: Seconds until expiry, NO_EXPIRATION or DEFAULT_EXPIRATION

        Raises:
            UnsupportedKeyError: If the key type is not supported
        """
        key_hash = key_to_hash(key)
        self._table.shard_for(key_hash).set(key_hash, Entry(value, self._expires_at(ttl)))

    def set_default(self, key: Key, value: V) -> None:
        """Add an item to the cache, replacing any existing item, using the default expiration."""
        self.set(key, value, DEFAULT_EXPIRATION)

    def add(self, key: Key, value: V, ttl: Duration = DEFAULT_EXPIRATION) -> None:
        """
        Add an item only if no live item exists for the key.

        An expired item that has not been swept yet counts as absent.

        Raises:
            KeyExistsError: If a live item already exists for the key
        """
        key_hash = key_to_hash(key)
        if not self._table.shard_for(key_hash).add(key_hash, Entry(value, self._expires_at(ttl))):
            raise KeyExistsError(key)

    def replace(self, key: Key, value: V, ttl: Duration = DEFAULT_EXPIRATION) -> None:
        """
        Set a new value for the key only if a live item already exists.

        Raises:
            KeyNotFoundError: If there is no live item for the key
        """
        key_hash = key_to_hash(key)
        if not self._table.shard_for(key_hash).replace(key_hash, Entry(value, self._expires_at(ttl))):
            raise KeyNotFoundError(key)

    def get(self, key: Key) -> Tuple[Optional[V], bool]:
        """
        Get an item from the cache.

        Returns:
            (value, True) if a live item was found, (None, False) otherwise
        """
        key_hash = key_to_hash(key)
        entry = self._table.shard_for(key_hash).get(key_hash)
        if entry is None:
            return None, False
        return entry.value, True

    def get_with_expiration(self, key: Key) -> Tuple[Optional[V], Optional[datetime], bool]:
        """
        Get an item and the time it expires.

        Returns:
            (value, expires, True) if a live item was found, where expires is
            an aware UTC datetime, or None if the item never expires.
            (None, None, False) otherwise.
        """
        key_hash = key_to_hash(key)
        entry = self._table.shard_for(key_hash).get(key_hash)
        if entry is None:
            return None, None, False
        if entry.expires_at == 0:
            return entry.value, None, True
        remaining = entry.expires_at - nanotime()
        expires = datetime.now(timezone.utc) + timedelta(microseconds=remaining / 1000)
        return entry.value, expires, True

    def delete(self, key: Key) -> None:
        """Delete an item from the cache. Does nothing if the key is not in the cache."""
        key_hash = key_to_hash(key)
        self._table.shard_for(key_hash).delete(key_hash)

    def delete_expired(self) -> int:
        """
        Delete all expired items from the cache.

        Returns:
            Number of items removed
        """
        return self._table.delete_expired()

    def item_count(self) -> int:
        """
        Number of items in the cache.

        This may include items that have expired but have not yet been
        cleaned up.
        """
        return self._table.count()

    def items(self) -> Dict[int, V]:
        """
        Snapshot of the live items, keyed by key hash.

        Keys are not stored, so the snapshot maps each key's 64-bit hash
        (see key_to_hash) to its value. Shards are copied one at a time, so
        the snapshot is not atomic across shards.
        """
        return {h: entry.value for h, entry in self._table.items().items()}

    def flush(self) -> None:
        """Delete all items from the cache."""
        self._table.flush()

    @property
    def janitor(self) -> Optional[Janitor]:
        """The janitor sweeping this cache, or None if cleanup is disabled."""
        return self._janitor

    def stop(self) -> None:
        """Stop the janitor. The cache stays usable; expired items are no longer swept."""
        if self._finalizer is not None:
            self._finalizer()

    close = stop

    def __enter__(self) -> "Cache[V]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def __len__(self) -> int:
        return self.item_count()

    def __contains__(self, key: Key) -> bool:
        return self.get(key)[1]

    def __repr__(self) -> str:
        return (f"Cache(shards={self.num_shards}, "
                f"default_expiration={self.default_expiration}, "
                f"janitor={self._janitor!r})")


def new(default_expiration: Duration, cleanup_interval: Duration) -> Cache:
    """
    Return a new cache with a given default expiration and cleanup interval.

    If the default expiration is less than or equal to zero, items never
    expire by default and must be deleted manually. If the cleanup interval
    is less than or equal to zero, expired items are not removed until
    delete_expired() is called.
    """
    return Cache(default_expiration=default_expiration, cleanup_interval=cleanup_interval)
