"""
Feature flag value object.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Union

from .models import (
    FlagTarget, FlagType, FlagValue, ValueEnvelope, coerce_enum, parse_float, stringify
)
from .rules.models import Rule


@dataclass(frozen=True)
class Flag:
    """A flag with its metadata, its effective target and its targeting rules.

    Instances are never mutated; evaluating a flag for a context produces a new
    ``Flag`` whenever a rule changes the target value.
    """

    version: str
    type: Union[FlagType, str]
    key: str
    name: str
    target: FlagTarget
    rules: List[Rule] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Flag":
        """Create a flag from its wire representation."""
        return cls(
            version=data["version"],
            type=coerce_enum(FlagType, data["type"]),
            key=data["key"],
            name=data["name"],
            target=FlagTarget.from_dict(data["target"]),
            rules=[Rule.from_dict(rule) for rule in data.get("rules") or []]
        )

    @classmethod
    def from_default(cls, key: str, value: FlagValue) -> "Flag":
        """Synthesize a rule-less flag from a fallback value."""
        if isinstance(value, bool):
            flag_type = FlagType.BOOLEAN
        elif isinstance(value, (int, float)):
            flag_type = FlagType.NUMBER
        else:
            flag_type = FlagType.STRING
        return cls(
            version="1",
            type=flag_type,
            key=key,
            name=key,
            target=FlagTarget(value=ValueEnvelope.of(value))
        )

    def with_target_value(self, value: ValueEnvelope) -> "Flag":
        """Copy of this flag whose target takes ``value``; target metadata is kept."""
        return replace(self, target=self.target.with_value(value))

    def is_enabled(self) -> bool:
        """True for an enabled boolean flag; False for every other type."""
        if self.type != FlagType.BOOLEAN:
            return False
        return self.as_bool()

    def as_bool(self) -> bool:
        kind, value = self.target.value.value.pick(
            FlagType.BOOLEAN, FlagType.NUMBER, FlagType.STRING
        )
        if kind is None:
            return False
        if isinstance(value, float) and value != value:
            return False
        return bool(value)

    def as_string(self) -> str:
        kind, value = self.target.value.value.pick(
            FlagType.STRING, FlagType.BOOLEAN, FlagType.NUMBER
        )
        if kind is None:
            return ""
        return stringify(value)

    def as_number(self) -> float:
        kind, value = self.target.value.value.pick(
            FlagType.NUMBER, FlagType.STRING, FlagType.BOOLEAN
        )
        if kind == FlagType.NUMBER.value and isinstance(value, (int, float)) and not isinstance(value, bool):
            return value
        if kind == FlagType.BOOLEAN.value:
            return 1 if value else 0
        if kind is None or value is None:
            return 0
        number = parse_float(value)
        return 0 if number is None else number

    @property
    def value(self) -> FlagValue:
        """Raw value, preferring boolean, then string, then number."""
        kind, value = self.target.value.value.pick(
            FlagType.BOOLEAN, FlagType.STRING, FlagType.NUMBER
        )
        if kind is None:
            return ""
        return value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "type": self.type.value if isinstance(self.type, FlagType) else self.type,
            "key": self.key,
            "name": self.name,
            "target": self.target.to_dict(),
            "rules": [rule.to_dict() for rule in self.rules],
        }
