"""
Rule evaluation engine for flag targeting.
"""

import operator
from typing import Callable, List, Optional, Sequence

from ..context import Context
from ..logging import Logger, NullLogger
from ..models import parse_float
from .models import ClauseValue, Rule, RuleCondition, RuleConditionOperator

_NUMERIC_COMPARATORS = {
    RuleConditionOperator.GREATER_THAN: operator.gt,
    RuleConditionOperator.GREATER_THAN_OR_EQUAL: operator.ge,
    RuleConditionOperator.LESS_THAN: operator.lt,
    RuleConditionOperator.LESS_THAN_OR_EQUAL: operator.le,
}

_NEGATED = {
    RuleConditionOperator.NOT_EQUALS: RuleConditionOperator.EQUALS,
    RuleConditionOperator.NOT_CONTAINS: RuleConditionOperator.CONTAINS,
    RuleConditionOperator.NOT_IN: RuleConditionOperator.IN,
}


class RuleEngine:
    """Selects the first rule of a flag that matches a context.

    Rules are evaluated in list order; there is no scoring and ``position`` is
    not consulted. A rule without conditions always matches.
    """

    def __init__(self, logger: Optional[Logger] = None):
        self.logger = logger or NullLogger()

    def evaluate(self, rules: Sequence[Rule], context: Context) -> Optional[Rule]:
        """Return the first rule matching ``context``, or None."""
        for rule in rules:
            if self.matches(rule, context):
                self.logger.debug(
                    "Rule matched",
                    description=rule.description,
                    context_type=context.type
                )
                return rule

        return None

    def matches(self, rule: Rule, context: Context) -> bool:
        """Check whether every condition of ``rule`` holds for ``context``."""
        for condition in rule.conditions:
            if not self._evaluate_condition(condition, context):
                return False

        return True

    def _evaluate_condition(self, condition: RuleCondition, context: Context) -> bool:
        """Evaluate a single condition."""
        attribute = context.get_attribute(condition.attribute)

        # Absent attributes never match, negated operators included
        if attribute is None:
            return False

        if not isinstance(condition.operator, RuleConditionOperator):
            self.logger.warning("Unknown condition operator", operator=condition.operator)
            return False

        values = attribute.values

        if condition.operator in _NEGATED:
            return not self._evaluate_positive(_NEGATED[condition.operator], values, condition.value)

        return self._evaluate_positive(condition.operator, values, condition.value)

    def _evaluate_positive(self, op: RuleConditionOperator, values: List[str],
                           clause_value: Optional[ClauseValue]) -> bool:
        if clause_value is None:
            return False

        if op == RuleConditionOperator.IN:
            targets = clause_value if isinstance(clause_value, list) else [clause_value]
            return any(value in targets for value in values)

        target = self._single_target(clause_value)
        if target is None:
            return False

        if op == RuleConditionOperator.EQUALS:
            return any(value == target for value in values)

        elif op == RuleConditionOperator.CONTAINS:
            return any(target in value for value in values)

        elif op == RuleConditionOperator.STARTS_WITH:
            return any(value.startswith(target) for value in values)

        elif op == RuleConditionOperator.ENDS_WITH:
            return any(value.endswith(target) for value in values)

        elif op in _NUMERIC_COMPARATORS:
            return self._compare_numbers(values, target, _NUMERIC_COMPARATORS[op])

        return False

    @staticmethod
    def _single_target(clause_value: ClauseValue) -> Optional[str]:
        if isinstance(clause_value, list):
            return clause_value[0] if clause_value else None
        return clause_value

    @staticmethod
    def _compare_numbers(values: List[str], target: str,
                         compare: Callable[[float, float], bool]) -> bool:
        target_number = parse_float(target)
        if target_number is None:
            return False

        for value in values:
            number = parse_float(value)
            if number is not None and compare(number, target_number):
                return True

        return False
