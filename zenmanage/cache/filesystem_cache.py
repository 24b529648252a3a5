"""
Filesystem cache: one JSON document per key.

Each file holds ``{"value": <str>, "expires": <epoch ms> | null}``. Only files
named ``zenmanage-<encoded key>.json`` are treated as belonging to the cache;
anything else in the directory is left alone.
"""

import base64
import json
import os
import sys
import time
import uuid
from typing import Optional

import aiofiles
import aiofiles.os

from ..logging import Logger, NullLogger
from .base import Cache

FILE_PREFIX = "zenmanage-"
FILE_SUFFIX = ".json"

# Interpreters without a usable host filesystem
RESTRICTED_PLATFORMS = ("emscripten", "wasi")


def _now_ms() -> float:
    return time.time() * 1000


class FileSystemCache(Cache):
    """Durable cache stored under ``cache_directory``.

    Availability is decided once, at construction. When the platform has no
    usable filesystem or the directory cannot be created, every operation is
    a no-op and reads miss.
    """

    def __init__(self, cache_directory: str, logger: Optional[Logger] = None):
        self.cache_directory = os.fspath(cache_directory)
        self.logger = logger or NullLogger()
        self.available = self._prepare_directory()

    def _prepare_directory(self) -> bool:
        if sys.platform in RESTRICTED_PLATFORMS:
            self.logger.info("Filesystem cache unavailable on this platform", platform=sys.platform)
            return False

        try:
            os.makedirs(self.cache_directory, exist_ok=True)
        except OSError as e:
            self.logger.error(
                "Failed to create cache directory",
                directory=self.cache_directory,
                error=str(e)
            )
            return False

        return True

    def _file_path(self, key: str) -> str:
        encoded = base64.urlsafe_b64encode(key.encode("utf-8")).decode("ascii").rstrip("=")
        return os.path.join(self.cache_directory, f"{FILE_PREFIX}{encoded}{FILE_SUFFIX}")

    @staticmethod
    def _is_managed(filename: str) -> bool:
        return filename.startswith(FILE_PREFIX) and filename.endswith(FILE_SUFFIX)

    async def get(self, key: str) -> Optional[str]:
        if not self.available:
            return None

        file_path = self._file_path(key)

        try:
            async with aiofiles.open(file_path, encoding="utf-8") as f:
                content = await f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            self.logger.warning("Failed to read cache file", path=file_path, error=str(e))
            return None

        try:
            item = json.loads(content)
            value = item["value"]
            expires = item.get("expires")
            if not isinstance(value, str):
                raise ValueError("cached value is not a string")
            expired = expires is not None and float(expires) <= _now_ms()
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            self.logger.debug("Ignoring unreadable cache file", path=file_path, error=str(e))
            return None

        if expired:
            await self.delete(key)
            return None

        return value

    async def set(self, key: str, value: str, ttl: Optional[float] = None) -> None:
        if not self.available:
            return

        file_path = self._file_path(key)
        item = {
            "value": value,
            "expires": _now_ms() + ttl * 1000 if ttl is not None else None,
        }
        temp_path = f"{file_path}.{uuid.uuid4().hex}.tmp"

        try:
            async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(item))
            await aiofiles.os.replace(temp_path, file_path)
        except OSError as e:
            self.logger.error("Failed to write cache file", path=file_path, error=str(e))
            await self._remove_quietly(temp_path)

    async def _remove_quietly(self, path: str) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.debug("Failed to remove temporary cache file", path=path, error=str(e))

    async def has(self, key: str) -> bool:
        return await self.get(key) is not None

    async def delete(self, key: str) -> None:
        if not self.available:
            return

        file_path = self._file_path(key)

        try:
            await aiofiles.os.remove(file_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.warning("Failed to delete cache file", path=file_path, error=str(e))

    async def clear(self) -> None:
        if not self.available:
            return

        try:
            filenames = await aiofiles.os.listdir(self.cache_directory)
        except OSError as e:
            self.logger.error("Failed to clear cache", directory=self.cache_directory, error=str(e))
            return

        for filename in filenames:
            if not self._is_managed(filename):
                continue
            try:
                await aiofiles.os.remove(os.path.join(self.cache_directory, filename))
            except FileNotFoundError:
                pass
            except OSError as e:
                self.logger.warning("Failed to delete cache file", path=filename, error=str(e))
