"""Cache module for ShardCache."""

from .engine import DEFAULT_EXPIRATION, NO_EXPIRATION, Cache, new
from .errors import CacheError, KeyExistsError, KeyNotFoundError, UnsupportedKeyError
from .hasher import key_to_hash
from .janitor import Janitor, JanitorState
from .shard import Entry, RWLock, Shard, ShardTable

__all__ = [
    "Cache",
    "CacheError",
    "DEFAULT_EXPIRATION",
    "Entry",
    "Janitor",
    "JanitorState",
    "KeyExistsError",
    "KeyNotFoundError",
    "NO_EXPIRATION",
    "RWLock",
    "Shard",
    "ShardTable",
    "UnsupportedKeyError",
    "key_to_hash",
    "new",
]
