"""
Public Key Validation Cache

LRU cache of normalized public keys, keyed by object identity (not content).

An entry keeps a strong reference to the key object it was created for, so
its id() cannot be recycled while the entry lives, and a hit additionally
requires `entry.key is key`. Only immutable `bytes` objects are cached: a
bytearray could be mutated after validation and is always re-validated.

Thread-safe; scoped to the ECIESEngine instance that owns it.

Author: ECIES Core Project
Date: October 2026
"""

from collections import OrderedDict
from threading import Lock
from typing import Any, Dict, NamedTuple, Optional


class _CacheEntry(NamedTuple):
    key: bytes
    normalized: bytes


class PublicKeyValidationCache:
    """
    Identity-keyed cache for hot public keys.

    Args:
        maxsize: Maximum entries kept (0 disables caching)
    """

    def __init__(self, maxsize: int = 256):
        if maxsize < 0:
            raise ValueError("maxsize must be >= 0")
        self.maxsize = maxsize
        self._entries: "OrderedDict[int, _CacheEntry]" = OrderedDict()
        self._lock = Lock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def is_cacheable(key: Any) -> bool:
        return type(key) is bytes

    def get(self, key: Any) -> Optional[bytes]:
        """Return the normalized form cached for this exact object, or None."""
        if self.maxsize == 0 or not self.is_cacheable(key):
            return None
        with self._lock:
            entry = self._entries.get(id(key))
            if entry is None or entry.key is not key:
                self._misses += 1
                return None
            self._entries.move_to_end(id(key))
            self._hits += 1
            return entry.normalized

    def put(self, key: Any, normalized: bytes) -> None:
        """Remember that `key` (this object) validated to `normalized`."""
        if self.maxsize == 0 or not self.is_cacheable(key):
            return
        with self._lock:
            self._entries[id(key)] = _CacheEntry(key, normalized)
            self._entries.move_to_end(id(key))
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> Dict[str, Any]:
        """
        Cache statistics for monitoring

        Returns:
            dict: hits, misses, size, maxsize, hit_rate
        """
        with self._lock:
            total = self._hits + self._misses
            return {
                "hits": self._hits,
                "misses": self._misses,
                "size": len(self._entries),
                "maxsize": self.maxsize,
                "hit_rate": self._hits / total if total > 0 else 0.0,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
