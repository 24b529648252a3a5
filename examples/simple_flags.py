"""
Reading flags without targeting.

Run with ZENMANAGE_ENVIRONMENT_TOKEN set.
"""

import asyncio

from zenmanage import EvaluationError, Zenmanage, configure_logging, get_logger


async def main():
    configure_logging("simple-flags-example", "info")
    logger = get_logger(__name__)

    async with Zenmanage(logger=logger) as zenmanage:
        flags = zenmanage.flags()

        dark_mode = await flags.single("dark-mode", False)
        logger.info("Boolean flag", key=dark_mode.key, enabled=dark_mode.is_enabled())

        welcome = await flags.single("welcome-message", "Hello!")
        logger.info("String flag", key=welcome.key, value=welcome.as_string())

        max_uploads = await flags.single("max-uploads", 10)
        logger.info("Number flag", key=max_uploads.key, value=max_uploads.as_number())

        for flag in await flags.all():
            logger.info("Loaded flag", key=flag.key, type=flag.type, value=flag.value)

        try:
            await flags.single("does-not-exist")
        except EvaluationError as e:
            logger.warning("Missing flag", **e.to_dict())


if __name__ == "__main__":
    asyncio.run(main())
