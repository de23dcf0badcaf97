"""
Key Hasher Module

Converts a supported key into the 64-bit hash the shard table routes on.

Supported keys:
- int: hashed to itself, reduced to 64 bits (two's complement for negatives)
- str: xxh64 over the UTF-8 encoding
- bytes, bytearray, memoryview: xxh64 over the raw bytes

Keys are never stored, only their hash. Two keys with the same hash address
the same entry.

NOTE: The seed changes for every process, so these hashes cannot be persisted
or compared across processes.
"""

import secrets
from typing import Union

import xxhash

from .errors import UnsupportedKeyError

Key = Union[int, str, bytes, bytearray, memoryview]

MASK_64 = (1 << 64) - 1
MIN_INT_64 = -(1 << 63)

# Drawn once at import, never persisted
HASH_SEED: int = secrets.randbits(64)


def hash_bytes(data: Union[bytes, bytearray, memoryview]) -> int:
    """Hash raw bytes with the per-process seed."""
    if isinstance(data, memoryview) and not data.c_contiguous:
        # Strided views (e.g. view[::2]) don't expose a flat buffer
        data = data.tobytes()
    return xxhash.xxh64_intdigest(data, seed=HASH_SEED)


def hash_string(text: str) -> int:
    """
    Hash a string over its UTF-8 encoding.

    Lone surrogates (from os.fsdecode or surrogateescape decoding) are
    encoded as-is so every str is hashable.
    """
    return xxhash.xxh64_intdigest(text.encode("utf-8", "surrogatepass"), seed=HASH_SEED)


def key_to_hash(key: Key) -> int:
    """
    Interpret the type of key and convert it to a 64-bit hash.

    Args:
        key: The key to hash

    Returns:
        An integer in [0, 2**64)

    Raises:
        UnsupportedKeyError: If the key is not a supported type, or is an
            integer that does not fit in 64 bits
    """
    # bool is an int subclass but not a supported key
    if isinstance(key, int) and not isinstance(key, bool):
        if key < MIN_INT_64 or key > MASK_64:
            raise UnsupportedKeyError(key, "integer key does not fit in 64 bits")
        return key & MASK_64
    if isinstance(key, str):
        return hash_string(key)
    if isinstance(key, (bytes, bytearray, memoryview)):
        return hash_bytes(key)
    raise UnsupportedKeyError(key)
