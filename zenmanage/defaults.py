"""
Fallback values for flags missing from the fetched rule set.
"""

from typing import Dict, Iterator, List, Mapping, Optional

from .models import FlagValue


class DefaultsCollection:
    """Ordered mapping of flag key to fallback value. Last ``set`` wins."""

    def __init__(self, defaults: Optional[Mapping[str, FlagValue]] = None):
        self._defaults: Dict[str, FlagValue] = {}
        for key, value in (defaults or {}).items():
            self.set(key, value)

    @classmethod
    def from_dict(cls, defaults: Mapping[str, FlagValue]) -> "DefaultsCollection":
        return cls(defaults)

    def set(self, key: str, value: FlagValue) -> "DefaultsCollection":
        self._defaults[key] = value
        return self

    def get(self, key: str) -> Optional[FlagValue]:
        return self._defaults.get(key)

    def has(self, key: str) -> bool:
        return key in self._defaults

    def delete(self, key: str) -> bool:
        """Remove a default; False when the key was not set."""
        if key in self._defaults:
            del self._defaults[key]
            return True
        return False

    def clear(self) -> None:
        self._defaults.clear()

    def keys(self) -> List[str]:
        return list(self._defaults)

    def size(self) -> int:
        return len(self._defaults)

    def __len__(self) -> int:
        return len(self._defaults)

    def __contains__(self, key: object) -> bool:
        return key in self._defaults

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._defaults))

    def __repr__(self) -> str:
        return f"DefaultsCollection({self._defaults!r})"
