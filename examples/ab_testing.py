"""
A/B testing with string flags.

Variants are string values targeted at user segments; the default is the
control variant. Run with ZENMANAGE_ENVIRONMENT_TOKEN set.
"""

import asyncio

from zenmanage import Attribute, Context, ZenmanageError, Zenmanage, configure_logging, get_logger

USERS = [
    {"id": "user-001", "name": "Alice", "country": "US"},
    {"id": "user-002", "name": "Bob", "country": "CA"},
    {"id": "user-003", "name": "Charlie", "country": "UK"},
]

VISITORS = [
    {"id": "visitor-001", "source": "google", "device": "mobile"},
    {"id": "visitor-002", "source": "facebook", "device": "desktop"},
    {"id": "visitor-003", "source": "direct", "device": "tablet"},
]

SEGMENTS = [
    {"segment": "new-users", "days_since_signup": 5},
    {"segment": "power-users", "days_since_signup": 365},
]


async def main():
    configure_logging("ab-testing-example", "info")
    logger = get_logger(__name__)

    async with Zenmanage(logger=logger) as zenmanage:
        flags = zenmanage.flags()

        # Two variants split by country
        for user in USERS:
            context = Context(
                "user",
                name=user["name"],
                identifier=user["id"],
                attributes=[Attribute("country", [user["country"]])]
            )
            try:
                variant = await flags.with_context(context).single("checkout-flow", "control")
            except ZenmanageError as e:
                logger.error("Evaluation failed", user=user["name"], **e.to_dict())
                continue
            logger.info("Checkout variant", user=user["name"], variant=variant.as_string())

        # Several variants targeted on two attributes
        for visitor in VISITORS:
            context = Context(
                "user",
                identifier=visitor["id"],
                attributes=[
                    Attribute("traffic_source", [visitor["source"]]),
                    Attribute("device_type", [visitor["device"]]),
                ]
            )
            variant = await flags.with_context(context).single("landing-page-variant", "original")
            logger.info("Landing page variant", visitor=visitor["id"], variant=variant.as_string())

        # Numeric rules, e.g. gte on days since signup
        for entry in SEGMENTS:
            context = Context(
                "user",
                name=entry["segment"],
                identifier=f"user-{entry['segment']}",
                attributes=[
                    Attribute("segment", [entry["segment"]]),
                    Attribute("days_since_signup", [entry["days_since_signup"]]),
                ]
            )
            variant = await flags.with_context(context).single("onboarding-flow", "standard")
            logger.info("Onboarding variant", segment=entry["segment"], variant=variant.as_string())

        # Report an exposure explicitly, e.g. when automatic reporting is disabled
        tracked = Context.single("user", "user-metrics-test", name="Metrics User")
        variant = await flags.with_context(tracked).single("pricing-page-variant", "control")
        await flags.report_usage("pricing-page-variant", tracked)
        logger.info("Exposure tracked", variant=variant.as_string())


if __name__ == "__main__":
    asyncio.run(main())
