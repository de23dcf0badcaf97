"""
Shard Module

The cache's key space is split across a fixed number of shards. Each shard
owns its own lock and its own hash -> Entry map, so callers addressing
different shards never contend.

Locking rules:
- A shard's map is only mutated while its write lock is held
- Lookups take the read lock, so concurrent readers proceed together
- Table-wide operations (sweep, count, flush) visit shards in table order
  and never hold more than one shard lock at a time
"""

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

NUM_SHARDS = 256


def nanotime() -> int:
    """Current time in nanoseconds from the monotonic clock."""
    return time.monotonic_ns()


class RWLock:
    """
    A shared/exclusive lock.

    Any number of readers may hold the lock at once; a writer holds it alone.
    Once a writer is waiting, new readers queue behind it so a steady stream
    of reads cannot starve writes.

    The lock is not reentrant. A thread holding it must not acquire it again
    in either mode.

    Usage:
        lock = RWLock()
        with lock.read():
            ...
        with lock.write():
            ...
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read(self) -> Iterator[None]:
        """Hold the lock in shared mode for the duration of the block."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self) -> Iterator[None]:
        """Hold the lock in exclusive mode for the duration of the block."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


@dataclass(frozen=True, slots=True)
class Entry:
    """
    One stored value.

    Attributes:
        value: The caller's object, stored by reference
        expires_at: Absolute monotonic time in nanoseconds (0 = never expires)
    """
    value: Any
    expires_at: int = 0

    def expired(self, now: int) -> bool:
        """Check if the entry has expired as of now."""
        return self.expires_at > 0 and now > self.expires_at


class Shard:
    """
    One independently locked partition of the cache.

    All methods take the shard's own lock; none of them touch another shard.
    """

    def __init__(self):
        self.lock = RWLock()
        self.data: Dict[int, Entry] = {}

    def get(self, key_hash: int) -> Optional[Entry]:
        """
        Look up a live entry under the read lock.

        An expired entry is reported as missing but left in place; the sweep
        reclaims it later so reads never need the write lock.
        """
        with self.lock.read():
            entry = self.data.get(key_hash)
            if entry is None or entry.expired(nanotime()):
                return None
            return entry

    def set(self, key_hash: int, entry: Entry) -> None:
        """Insert or overwrite the entry for a hash."""
        with self.lock.write():
            self.data[key_hash] = entry

    def add(self, key_hash: int, entry: Entry) -> bool:
        """
        Insert only if no live entry exists.

        Returns:
            True if inserted, False if a live entry was already present
        """
        with self.lock.write():
            existing = self.data.get(key_hash)
            if existing is not None and not existing.expired(nanotime()):
                return False
            self.data[key_hash] = entry
            return True

    def replace(self, key_hash: int, entry: Entry) -> bool:
        """
        Overwrite only if a live entry exists.

        Returns:
            True if replaced, False if there was no live entry
        """
        with self.lock.write():
            existing = self.data.get(key_hash)
            if existing is None or existing.expired(nanotime()):
                return False
            self.data[key_hash] = entry
            return True

    def delete(self, key_hash: int) -> None:
        """Remove the entry for a hash. Does nothing if absent."""
        with self.lock.write():
            self.data.pop(key_hash, None)

    def delete_expired(self, now: int) -> int:
        """
        Physically remove every entry that expired before now.

        Returns:
            Number of entries removed
        """
        with self.lock.write():
            expired = [h for h, entry in self.data.items() if entry.expired(now)]
            for h in expired:
                del self.data[h]
        return len(expired)

    def count(self) -> int:
        """Number of entries physically present, expired or not."""
        with self.lock.read():
            return len(self.data)

    def items(self) -> List[Tuple[int, Entry]]:
        """Snapshot of the live (hash, entry) pairs, taken under the read lock."""
        with self.lock.read():
            now = nanotime()
            return [(h, entry) for h, entry in self.data.items() if not entry.expired(now)]

    def flush(self) -> None:
        """Drop every entry."""
        with self.lock.write():
            self.data = {}


class ShardTable:
    """
    A fixed-size array of shards.

    A hash is routed to shard ``hash % num_shards``. The shard count is fixed
    at construction and entries are never moved between shards.

    Attributes:
        num_shards: Number of shards in the table
    """

    def __init__(self, num_shards: int = NUM_SHARDS):
        """
        Initialize the shard table.

        Args:
            num_shards: Number of shards (must be positive)

        Raises:
            ValueError: If num_shards is not positive
        """
        if num_shards <= 0:
            raise ValueError("num_shards must be positive")
        self._num_shards = num_shards
        self._shards: Tuple[Shard, ...] = tuple(Shard() for _ in range(num_shards))

    @property
    def num_shards(self) -> int:
        return self._num_shards

    def route(self, key_hash: int) -> int:
        """Index of the shard that owns a hash."""
        return key_hash % self._num_shards

    def shard_for(self, key_hash: int) -> Shard:
        """The shard that owns a hash."""
        return self._shards[key_hash % self._num_shards]

    def __getitem__(self, index: int) -> Shard:
        return self._shards[index]

    def __iter__(self) -> Iterator[Shard]:
        return iter(self._shards)

    def __len__(self) -> int:
        return self._num_shards

    def delete_expired(self) -> int:
        """
        Sweep every shard for expired entries.

        The clock is sampled once and that instant is applied to every shard.
        Shards are locked one at a time in table order.

        Returns:
            Total number of entries removed
        """
        now = nanotime()
        removed = 0
        for shard in self._shards:
            removed += shard.delete_expired(now)
        if removed:
            logger.debug(f"Swept {removed} expired entries")
        return removed

    def count(self) -> int:
        """Total entries across all shards, including expired but unswept ones."""
        return sum(shard.count() for shard in self._shards)

    def items(self) -> Dict[int, Entry]:
        """Live entries across all shards, snapshotted one shard at a time."""
        snapshot: Dict[int, Entry] = {}
        for shard in self._shards:
            snapshot.update(shard.items())
        return snapshot

    def flush(self) -> None:
        """Empty every shard."""
        for shard in self._shards:
            shard.flush()
