"""
Zenmanage feature flag client.

Fetches the environment's rule set, caches it locally and evaluates flags
against a caller-supplied context:

- client: Zenmanage entry point wiring the pieces together
- flag_manager: loading, evaluation and default-value resolution
- rules: targeting rule model and first-match engine
- cache: memory, filesystem and no-op rule caches
- adapters: HTTP client for the Zenmanage API
- config: settings via pydantic-settings (ZENMANAGE_* variables)
- logging: structlog configuration and the logger protocol
- errors: client error types
"""

from .adapters.api_client import CLIENT_VERSION as __version__
from .cache import Cache, FileSystemCache, InMemoryCache, NullCache
from .client import Zenmanage
from .config import ZenmanageSettings, get_config
from .context import Attribute, Context
from .defaults import DefaultsCollection
from .errors import (
    ConfigurationError,
    EvaluationError,
    FetchRulesError,
    InvalidRulesError,
    ZenmanageError,
)
from .flag import Flag
from .flag_manager import FlagManager
from .logging import NullLogger, configure_logging, get_logger
from .models import FlagTarget, FlagType, FlagValue, TypedValue, ValueEnvelope
from .rules import Rule, RuleCondition, RuleConditionOperator, RuleEngine

__all__ = [
    "Attribute",
    "Cache",
    "ConfigurationError",
    "Context",
    "DefaultsCollection",
    "EvaluationError",
    "FetchRulesError",
    "FileSystemCache",
    "Flag",
    "FlagManager",
    "FlagTarget",
    "FlagType",
    "FlagValue",
    "InMemoryCache",
    "InvalidRulesError",
    "NullCache",
    "NullLogger",
    "Rule",
    "RuleCondition",
    "RuleConditionOperator",
    "RuleEngine",
    "TypedValue",
    "ValueEnvelope",
    "Zenmanage",
    "ZenmanageError",
    "ZenmanageSettings",
    "configure_logging",
    "get_config",
    "get_logger",
    "__version__",
]
