"""
Cache backend configurations.

Run with ZENMANAGE_ENVIRONMENT_TOKEN set.
"""

import asyncio
import os
import tempfile

from zenmanage import Zenmanage, ZenmanageSettings, configure_logging, get_logger


async def main():
    configure_logging("caching-example", "debug")
    logger = get_logger(__name__)

    settings = ZenmanageSettings()

    # In-memory: fastest, lost on restart
    async with Zenmanage(settings, logger=logger, cache_backend="memory", cache_ttl=3600) as zenmanage:
        await zenmanage.flags().single("example-flag", True)
        # Served from memory
        await zenmanage.flags().single("example-flag", True)

    # Filesystem: survives restarts and is shared between processes on one host
    cache_directory = os.path.join(tempfile.gettempdir(), "zenmanage-cache")
    async with Zenmanage(
        settings,
        logger=logger,
        cache_backend="filesystem",
        cache_directory=cache_directory,
        cache_ttl=7200
    ) as zenmanage:
        await zenmanage.flags().single("example-flag", True)
        logger.info("Rules cached on disk", directory=cache_directory)

    # Null: every new client fetches from the API
    async with Zenmanage(settings, logger=logger, cache_backend="null") as zenmanage:
        flags = zenmanage.flags()
        await flags.single("example-flag", True)

        # Force a fresh copy of the rules
        await flags.refresh_rules()


if __name__ == "__main__":
    asyncio.run(main())
