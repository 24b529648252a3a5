"""
Value models shared by flags and rules.

A flag's value travels on the wire as ``{"value": {"boolean": true}}``: an
envelope around an object keyed by the value's type. ``TypedValue`` keeps
those entries in wire order and names the primary one as ``kind``.
"""

import math
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

FlagValue = Union[bool, str, int, float]


class FlagType(str, Enum):
    """Flag value types."""
    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"


_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")


def parse_float(text: Any) -> Optional[float]:
    """Parse the leading number of ``text``; None when there is none."""
    if isinstance(text, bool):
        text = stringify(text)
    if isinstance(text, (int, float)):
        return None if math.isnan(text) else float(text)
    match = _FLOAT_PREFIX.match(str(text))
    if not match:
        return None
    return float(match.group(1).replace("Infinity", "inf"))


def stringify(value: Any) -> str:
    """Render a wire value the way the flag service prints it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return str(value)


def coerce_enum(enum_cls, value: Any):
    """Return the enum member for ``value``, or the raw value if unknown."""
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class TypedValue:
    """Typed flag value as ordered ``(kind, value)`` entries."""

    entries: Tuple[Tuple[str, Any], ...] = ()

    @classmethod
    def of(cls, value: FlagValue) -> "TypedValue":
        """Tag a plain Python value with its flag type."""
        # bool first: bool is an int subclass
        if isinstance(value, bool):
            return cls(((FlagType.BOOLEAN.value, value),))
        if isinstance(value, (int, float)):
            return cls(((FlagType.NUMBER.value, value),))
        return cls(((FlagType.STRING.value, str(value)),))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TypedValue":
        if not isinstance(data, Mapping):
            raise TypeError(f"Expected a mapping for a flag value, got {type(data).__name__}")
        return cls(tuple(data.items()))

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.entries)

    @property
    def kind(self) -> Optional[str]:
        """Primary type of the value, ``None`` when empty."""
        return self.pick(FlagType.BOOLEAN, FlagType.STRING, FlagType.NUMBER)[0]

    def pick(self, *order: Union[FlagType, str]) -> Tuple[Optional[str], Any]:
        """Return the first entry whose kind appears in ``order``.

        Falls back to the first entry of any kind, then to ``(None, None)``.
        """
        found = dict(self.entries)
        for kind in order:
            name = kind.value if isinstance(kind, FlagType) else kind
            if name in found:
                return name, found[name]
        if self.entries:
            return self.entries[0]
        return None, None


@dataclass(frozen=True)
class ValueEnvelope:
    """Versioned wrapper around a ``TypedValue``."""

    value: TypedValue = field(default_factory=TypedValue)
    version: Optional[str] = None

    @classmethod
    def of(cls, value: FlagValue) -> "ValueEnvelope":
        return cls(value=TypedValue.of(value))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ValueEnvelope":
        if not isinstance(data, Mapping):
            raise TypeError(f"Expected a mapping for a value envelope, got {type(data).__name__}")
        return cls(
            value=TypedValue.from_dict(data.get("value") or {}),
            version=data.get("version")
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.version is not None:
            result["version"] = self.version
        result["value"] = self.value.to_dict()
        return result


@dataclass(frozen=True)
class FlagTarget:
    """Currently effective value of a flag.

    The timestamps are carried through from the service and never interpreted.
    """

    value: ValueEnvelope = field(default_factory=ValueEnvelope)
    version: Optional[str] = None
    expired_at: Optional[str] = None
    published_at: Optional[str] = None
    scheduled_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FlagTarget":
        if not isinstance(data, Mapping):
            raise TypeError(f"Expected a mapping for a flag target, got {type(data).__name__}")
        return cls(
            value=ValueEnvelope.from_dict(data.get("value") or {}),
            version=data.get("version"),
            expired_at=data.get("expired_at"),
            published_at=data.get("published_at"),
            scheduled_at=data.get("scheduled_at")
        )

    def with_value(self, value: ValueEnvelope) -> "FlagTarget":
        """Copy of this target with ``value`` replaced."""
        return replace(self, value=value)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for name in ("version", "expired_at", "published_at", "scheduled_at"):
            if getattr(self, name) is not None:
                result[name] = getattr(self, name)
        result["value"] = self.value.to_dict()
        return result
