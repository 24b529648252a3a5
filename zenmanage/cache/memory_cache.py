"""
In-process cache. Entries live as long as the interpreter.
"""

import time
from typing import Dict, Optional

from .base import Cache


class _CacheEntry:
    __slots__ = ("value", "expires_at")

    def __init__(self, value: str, ttl: Optional[float]):
        self.value = value
        self.expires_at: Optional[float] = (
            time.monotonic() + ttl if ttl is not None else None
        )

    def is_expired(self) -> bool:
        return self.expires_at is not None and time.monotonic() >= self.expires_at


class InMemoryCache(Cache):
    """Dictionary-backed cache with lazy expiry.

    Expired entries are evicted when read; there is no background sweep.
    """

    def __init__(self):
        self._store: Dict[str, _CacheEntry] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._store.get(key)
        if entry is None:
            return None

        if entry.is_expired():
            del self._store[key]
            return None

        return entry.value

    async def set(self, key: str, value: str, ttl: Optional[float] = None) -> None:
        self._store[key] = _CacheEntry(value, ttl)

    async def has(self, key: str) -> bool:
        return await self.get(key) is not None

    async def delete(self, key: str) -> None:
        self._store.pop(key, None)

    async def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
