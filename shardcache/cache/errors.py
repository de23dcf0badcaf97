"""Exceptions raised by the cache."""

from typing import Any


class CacheError(Exception):
    """Base class for cache errors."""


class UnsupportedKeyError(CacheError, TypeError):
    """A key of a type the hasher cannot handle. Always a programming error."""

    def __init__(self, key: Any, reason: str = None):
        self.key = key
        if reason is None:
            reason = f"key type not supported: {type(key).__name__}"
        super().__init__(reason)


class KeyExistsError(CacheError, KeyError):
    """Raised by add() when a live entry already exists for the key."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"item {key!r} already exists")

    def __str__(self) -> str:
        return self.args[0]


class KeyNotFoundError(CacheError, KeyError):
    """Raised by replace() when no live entry exists for the key."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"item {key!r} doesn't exist")

    def __str__(self) -> str:
        return self.args[0]
