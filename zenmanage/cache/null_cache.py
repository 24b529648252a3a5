"""
Cache that stores nothing, forcing every load to hit the API.
"""

from typing import Optional

from .base import Cache


class NullCache(Cache):
    """No-op cache."""

    async def get(self, key: str) -> Optional[str]:
        return None

    async def set(self, key: str, value: str, ttl: Optional[float] = None) -> None:
        return None

    async def has(self, key: str) -> bool:
        return False

    async def delete(self, key: str) -> None:
        return None

    async def clear(self) -> None:
        return None
