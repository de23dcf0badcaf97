"""
ShardCache: In-Process Sharded TTL Cache

A thread-safe key/value cache for single-machine applications. Keys are
hashed to 64 bits and spread over independently locked shards; entries
expire lazily on read and are swept by an optional background janitor.
"""

from .cache import (
    DEFAULT_EXPIRATION,
    NO_EXPIRATION,
    Cache,
    CacheError,
    KeyExistsError,
    KeyNotFoundError,
    UnsupportedKeyError,
    new,
)
from .config import setup_logging

__version__ = "1.0.0"

__all__ = [
    "Cache",
    "CacheError",
    "DEFAULT_EXPIRATION",
    "KeyExistsError",
    "KeyNotFoundError",
    "NO_EXPIRATION",
    "UnsupportedKeyError",
    "new",
    "setup_logging",
]
