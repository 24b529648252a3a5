"""
Rule data models for flag targeting.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from ..models import ValueEnvelope, coerce_enum, stringify


class RuleConditionOperator(str, Enum):
    """Rule condition operators."""
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    IN = "in"
    NOT_IN = "not_in"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "gt"
    GREATER_THAN_OR_EQUAL = "gte"
    LESS_THAN = "lt"
    LESS_THAN_OR_EQUAL = "lte"


ClauseValue = Union[str, List[str]]


def _clause_value(value: Any) -> Optional[ClauseValue]:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [stringify(item) for item in value]
    return stringify(value)


@dataclass(frozen=True)
class RuleCondition:
    """Single attribute comparison.

    ``operator`` holds the raw string when the service sends an operator this
    client does not know; such a condition never matches.
    """
    attribute: str
    operator: Union[RuleConditionOperator, str]
    value: Optional[ClauseValue] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RuleCondition":
        if not isinstance(data, Mapping):
            raise TypeError(f"Expected a mapping for a rule condition, got {type(data).__name__}")
        return cls(
            attribute=data["attribute"],
            operator=coerce_enum(RuleConditionOperator, data.get("operator")),
            value=_clause_value(data.get("value"))
        )

    def to_dict(self) -> Dict[str, Any]:
        operator = self.operator.value if isinstance(self.operator, RuleConditionOperator) else self.operator
        result: Dict[str, Any] = {"attribute": self.attribute, "operator": operator}
        if self.value is not None:
            result["value"] = list(self.value) if isinstance(self.value, list) else self.value
        return result


@dataclass(frozen=True)
class Rule:
    """Targeting rule: a condition (or conjunction of clauses) and the value it yields."""
    value: ValueEnvelope = field(default_factory=ValueEnvelope)
    criteria: Optional[RuleCondition] = None
    clauses: List[RuleCondition] = field(default_factory=list)
    version: Optional[str] = None
    description: Optional[str] = None
    position: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rule":
        if not isinstance(data, Mapping):
            raise TypeError(f"Expected a mapping for a rule, got {type(data).__name__}")
        criteria = data.get("criteria")
        return cls(
            value=ValueEnvelope.from_dict(data.get("value") or {}),
            criteria=RuleCondition.from_dict(criteria) if criteria else None,
            clauses=[RuleCondition.from_dict(clause) for clause in data.get("clauses") or []],
            version=data.get("version"),
            description=data.get("description"),
            position=data.get("position")
        )

    @property
    def conditions(self) -> List[RuleCondition]:
        """Conditions that must all hold: the clauses, else the criteria."""
        if self.clauses:
            return list(self.clauses)
        if self.criteria is not None:
            return [self.criteria]
        return []

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for name in ("version", "description", "position"):
            if getattr(self, name) is not None:
                result[name] = getattr(self, name)
        if self.criteria is not None:
            result["criteria"] = self.criteria.to_dict()
        if self.clauses:
            result["clauses"] = [clause.to_dict() for clause in self.clauses]
        result["value"] = self.value.to_dict()
        return result
