"""
Flag manager: loads the rule set, evaluates flags and resolves defaults.
"""

from typing import List, Optional, Sequence

from pydantic import ValidationError

from .adapters.api_client import ApiClient, RulesDocument
from .cache.base import Cache
from .context import Context
from .defaults import DefaultsCollection
from .errors import EvaluationError, InvalidRulesError
from .flag import Flag
from .logging import Logger, NullLogger
from .models import FlagValue
from .rules.engine import RuleEngine

CACHE_KEY = "zenmanage_rules"


class FlagManager:
    """Resolves flags for one context and one set of defaults.

    ``with_context`` and ``with_defaults`` return new managers; an instance is
    never reconfigured in place, so differently configured managers can be
    used side by side.
    """

    def __init__(self,
                 api_client: ApiClient,
                 cache: Cache,
                 rule_engine: RuleEngine,
                 cache_ttl: Optional[float],
                 logger: Optional[Logger] = None,
                 context: Optional[Context] = None,
                 defaults: Optional[DefaultsCollection] = None,
                 flags: Optional[Sequence[Flag]] = None):
        self.api_client = api_client
        self.cache = cache
        self.rule_engine = rule_engine
        self.cache_ttl = cache_ttl
        self.logger = logger or NullLogger()
        self.context = context if context is not None else Context.anonymous()
        self.defaults = defaults if defaults is not None else DefaultsCollection()
        # None until the first load
        self._flags: Optional[List[Flag]] = list(flags) if flags is not None else None

    @property
    def loaded(self) -> bool:
        return self._flags is not None

    def _copy(self, **changes) -> "FlagManager":
        fields = {
            "api_client": self.api_client,
            "cache": self.cache,
            "rule_engine": self.rule_engine,
            "cache_ttl": self.cache_ttl,
            "logger": self.logger,
            "context": self.context,
            "defaults": self.defaults,
            "flags": self._flags,
        }
        fields.update(changes)
        return FlagManager(**fields)

    def with_context(self, context: Context) -> "FlagManager":
        """New manager evaluating against ``context``."""
        return self._copy(context=context)

    def with_defaults(self, defaults: DefaultsCollection) -> "FlagManager":
        """New manager falling back to ``defaults`` for missing flags."""
        return self._copy(defaults=defaults)

    async def all(self) -> List[Flag]:
        """Every loaded flag evaluated against the current context, in load order."""
        await self._ensure_rules_loaded()

        return [self._evaluate_flag(flag) for flag in self._flags or []]

    async def single(self, key: str, default: Optional[FlagValue] = None) -> Flag:
        """Resolve one flag.

        A loaded flag always wins. For a key missing from the rule set the
        per-call ``default`` is used, then the manager's defaults collection;
        otherwise ``EvaluationError`` is raised.
        """
        await self._ensure_rules_loaded()

        for flag in self._flags or []:
            if flag.key == key:
                await self.report_usage(key, self.context)
                return self._evaluate_flag(flag)

        if default is not None:
            self.logger.debug("Flag not loaded, using inline default", key=key)
            await self.report_usage(key, self.context)
            return Flag.from_default(key, default)

        stored = self.defaults.get(key)
        if stored is not None:
            self.logger.debug("Flag not loaded, using defaults collection", key=key)
            await self.report_usage(key, self.context)
            return Flag.from_default(key, stored)

        raise EvaluationError(f"Flag not found: {key}", details={"key": key})

    async def report_usage(self, key: str, context: Optional[Context] = None) -> None:
        """Report flag usage. Failures are logged, never raised."""
        try:
            await self.api_client.report_usage(key, context)
        except Exception as e:
            self.logger.warning("Failed to report usage", key=key, error=str(e))

    async def refresh_rules(self) -> None:
        """Reload rules from the API, bypassing the cached copy."""
        self.logger.info("Refreshing rules from API")
        await self._load_rules_from_api()

    async def _ensure_rules_loaded(self) -> None:
        if self._flags is not None:
            return

        try:
            cached = await self.cache.get(CACHE_KEY)
        except Exception as e:
            self.logger.warning("Failed to read rules from cache", error=str(e))
            cached = None

        if cached is not None:
            self.logger.debug("Loading rules from cache")

            try:
                document = RulesDocument.model_validate_json(cached)
                self._flags = self._parse_flags(document)
                return
            except (ValidationError, ValueError, InvalidRulesError) as e:
                self.logger.warning("Failed to parse cached rules", error=str(e))

        await self._load_rules_from_api()

    async def _load_rules_from_api(self) -> None:
        self.logger.info("Fetching rules from API")

        try:
            document = await self.api_client.get_rules()
            flags = self._parse_flags(document)
        except Exception as e:
            self.logger.error("Failed to load rules from API", error=str(e))
            self._flags = []
            raise

        self._flags = flags

        try:
            await self.cache.set(CACHE_KEY, document.model_dump_json(), self.cache_ttl)
        except Exception as e:
            self.logger.warning("Failed to write rules to cache", error=str(e))

        self.logger.info("Rules loaded and cached", count=len(flags))

    def _evaluate_flag(self, flag: Flag) -> Flag:
        if not flag.rules:
            return flag

        rule = self.rule_engine.evaluate(flag.rules, self.context)

        if rule is None:
            return flag

        return flag.with_target_value(rule.value)

    @staticmethod
    def _parse_flags(document: RulesDocument) -> List[Flag]:
        try:
            return [Flag.from_dict(data) for data in document.flags]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise InvalidRulesError("Malformed flag in rule set", details={"error": repr(e)}) from e
