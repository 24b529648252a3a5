"""
Entry point wiring settings, cache, API client and flag manager together.
"""

from typing import Optional

import httpx

from .adapters.api_client import ApiClient
from .cache import Cache, create_cache
from .config import ZenmanageSettings, get_config
from .flag_manager import FlagManager
from .logging import Logger, NullLogger
from .rules.engine import RuleEngine


class Zenmanage:
    """Zenmanage client.

    Usage::

        async with Zenmanage(environment_token="tok_...") as zenmanage:
            flag = await zenmanage.flags().single("new-checkout", False)
            if flag.is_enabled():
                ...

    Settings not passed explicitly are read from ``ZENMANAGE_*`` environment
    variables. Raises ``ConfigurationError`` for an unusable configuration.
    """

    def __init__(self,
                 config: Optional[ZenmanageSettings] = None,
                 *,
                 logger: Optional[Logger] = None,
                 cache: Optional[Cache] = None,
                 http_client: Optional[httpx.AsyncClient] = None,
                 **overrides):
        if config is None:
            config = get_config(**overrides)
        else:
            if overrides:
                config = config.model_copy(update=overrides)
            config.ensure_valid()

        self.config = config
        self.logger = logger or NullLogger()
        self.cache = cache if cache is not None else create_cache(config, logger=self.logger)
        self.api_client = ApiClient(
            config.environment_token,
            api_endpoint=config.api_endpoint,
            logger=self.logger,
            enable_usage_reporting=config.enable_usage_reporting,
            http_client=http_client,
            timeout=config.request_timeout
        )
        self._flag_manager = FlagManager(
            self.api_client,
            self.cache,
            RuleEngine(logger=self.logger),
            config.cache_ttl,
            logger=self.logger
        )

    def flags(self) -> FlagManager:
        """The client's flag manager; use ``with_context`` to target a context."""
        return self._flag_manager

    async def aclose(self) -> None:
        await self.api_client.aclose()

    async def __aenter__(self) -> "Zenmanage":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
