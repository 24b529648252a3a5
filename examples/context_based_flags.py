"""
Targeting flags at users and organizations.

Run with ZENMANAGE_ENVIRONMENT_TOKEN set.
"""

import asyncio

from zenmanage import Attribute, Context, Zenmanage, configure_logging, get_logger

USERS = [
    {"id": "user-001", "name": "Alice", "country": "US", "plan": "enterprise"},
    {"id": "user-002", "name": "Bob", "country": "CA", "plan": "free"},
    {"id": "user-003", "name": "Charlie", "country": "UK", "plan": "pro"},
]


async def main():
    configure_logging("context-example", "info")
    logger = get_logger(__name__)

    async with Zenmanage(logger=logger) as zenmanage:
        for user in USERS:
            context = Context(
                "user",
                name=user["name"],
                identifier=user["id"],
                attributes=[
                    Attribute("country", [user["country"]]),
                    Attribute("plan", [user["plan"]]),
                ]
            )
            flags = zenmanage.flags().with_context(context)

            checkout = await flags.single("new-checkout", False)
            variant = await flags.single("checkout-flow", "control")

            logger.info(
                "Evaluated for user",
                user=user["name"],
                new_checkout=checkout.is_enabled(),
                checkout_flow=variant.as_string()
            )

        organization = Context.single("organization", "org-42", name="Acme")
        sso = await zenmanage.flags().with_context(organization).single("sso-login", False)
        logger.info("Evaluated for organization", organization="Acme", sso=sso.is_enabled())

        # Usage can also be reported by hand
        await zenmanage.flags().report_usage("checkout-flow", organization)


if __name__ == "__main__":
    asyncio.run(main())
