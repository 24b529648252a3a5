"""
Cache interface for storing the fetched rule set.
"""

from abc import ABC, abstractmethod
from typing import Optional


class Cache(ABC):
    """Asynchronous key/value store with optional per-entry TTL.

    Implementations report a miss by returning None and never raise for an
    absent or expired key.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl: Optional[float] = None) -> None:
        """Store ``value``; ``ttl`` is in seconds, None means no expiry."""

    @abstractmethod
    async def has(self, key: str) -> bool:
        """Check whether a live entry exists for ``key``."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key`` if present."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry managed by this cache."""
