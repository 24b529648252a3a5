"""
Cache package.

Backends for the fetched rule set. All of them share the ``Cache``
interface and signal a miss by returning None:

- InMemoryCache: per-process dictionary with lazy TTL expiry.
- FileSystemCache: one JSON file per key, survives restarts.
- NullCache: stores nothing.
"""

from typing import Optional

from ..config import ZenmanageSettings
from ..errors import ConfigurationError
from ..logging import Logger
from .base import Cache
from .filesystem_cache import FileSystemCache
from .memory_cache import InMemoryCache
from .null_cache import NullCache


def create_cache(settings: ZenmanageSettings, logger: Optional[Logger] = None) -> Cache:
    """Build the cache backend selected by ``settings.cache_backend``."""
    if settings.cache_backend == "filesystem":
        if not settings.cache_directory:
            raise ConfigurationError("Cache directory is required for filesystem cache")
        return FileSystemCache(settings.cache_directory, logger=logger)

    if settings.cache_backend == "memory":
        return InMemoryCache()

    if settings.cache_backend == "null":
        return NullCache()

    raise ConfigurationError(f"Invalid cache backend: {settings.cache_backend}")


__all__ = [
    "Cache",
    "FileSystemCache",
    "InMemoryCache",
    "NullCache",
    "create_cache",
]
