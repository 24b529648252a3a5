"""
Fallback values for flags that are not published yet or cannot be fetched.

Run with ZENMANAGE_ENVIRONMENT_TOKEN set.
"""

import asyncio

from zenmanage import DefaultsCollection, FetchRulesError, Zenmanage, configure_logging, get_logger


async def main():
    configure_logging("defaults-example", "info")
    logger = get_logger(__name__)

    defaults = DefaultsCollection.from_dict({
        "new-dashboard": False,
        "api-rate-limit": 100,
        "support-email": "support@example.com",
    })
    defaults.set("maintenance-mode", False)

    async with Zenmanage(logger=logger) as zenmanage:
        flags = zenmanage.flags().with_defaults(defaults)

        try:
            await flags.all()
        except FetchRulesError as e:
            # Defaults keep working after a failed fetch
            logger.warning("Rules unavailable, using defaults", **e.to_dict())

        for key in defaults:
            flag = await flags.single(key)
            logger.info("Resolved", key=key, value=flag.value)

        # A per-call default takes priority over the collection
        limit = await flags.single("api-rate-limit", 250)
        logger.info("Resolved with inline default", key=limit.key, value=limit.as_number())


if __name__ == "__main__":
    asyncio.run(main())
