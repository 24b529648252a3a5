"""
Evaluation context supplied by the caller.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional


class Attribute:
    """Named attribute carrying one or more string values."""

    def __init__(self, key: str, values: Optional[Iterable[Any]] = None):
        self.key = key
        self._values: List[str] = [str(value) for value in (values or [])]

    @property
    def values(self) -> List[str]:
        return list(self._values)

    def add_value(self, value: Any) -> "Attribute":
        self._values.append(str(value))
        return self

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Attribute":
        values = []
        for item in data.get("values") or []:
            # values arrive as {"value": "..."} objects; bare strings are accepted too
            values.append(item.get("value") if isinstance(item, Mapping) else item)
        return cls(data["key"], values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "values": [{"value": value} for value in self._values]
        }

    def __repr__(self) -> str:
        return f"Attribute(key={self.key!r}, values={self._values!r})"


class Context:
    """Entity (user, organization, ...) that flag rules are evaluated against."""

    def __init__(self,
                 type: str,
                 name: Optional[str] = None,
                 identifier: Optional[str] = None,
                 attributes: Optional[Iterable[Attribute]] = None):
        self.type = type
        self.name = name
        self.identifier = identifier
        self._attributes: Dict[str, Attribute] = {}
        for attribute in attributes or []:
            self.add_attribute(attribute)

    @classmethod
    def single(cls, type: str, identifier: str, name: Optional[str] = None) -> "Context":
        """Context with an identifier and no attributes."""
        return cls(type, name=name, identifier=identifier)

    @classmethod
    def anonymous(cls) -> "Context":
        return cls("anonymous")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Context":
        return cls(
            data["type"],
            name=data.get("name"),
            identifier=data.get("identifier"),
            attributes=[Attribute.from_dict(item) for item in data.get("attributes") or []]
        )

    def add_attribute(self, attribute: Attribute) -> "Context":
        """Add an attribute, replacing any attribute with the same key."""
        self._attributes[attribute.key] = attribute
        return self

    def get_attribute(self, key: str) -> Optional[Attribute]:
        return self._attributes.get(key)

    def has_attribute(self, key: str) -> bool:
        return key in self._attributes

    @property
    def attributes(self) -> List[Attribute]:
        return list(self._attributes.values())

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.type}
        if self.name is not None:
            result["name"] = self.name
        if self.identifier is not None:
            result["identifier"] = self.identifier
        if self._attributes:
            result["attributes"] = [attribute.to_dict() for attribute in self._attributes.values()]
        return result

    def __repr__(self) -> str:
        return (
            f"Context(type={self.type!r}, name={self.name!r}, "
            f"identifier={self.identifier!r}, attributes={self.attributes!r})"
        )
