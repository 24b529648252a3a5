"""
Rules package.

Defines the targeting rule model and the engine that picks the rule applying
to a context:

- models: Rule, RuleCondition and the supported operators.
- engine: first-match evaluation of a flag's ordered rule list.
"""

from .engine import RuleEngine
from .models import Rule, RuleCondition, RuleConditionOperator

__all__ = [
    "Rule",
    "RuleCondition",
    "RuleConditionOperator",
    "RuleEngine",
]
