from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import Any, Dict, List

from .exceptions import InvalidArgumentError, StoreClosedError
from .utils import deep_merge, to_plain

_MISSING = object()


class ParameterBag:
    """
    Nested key/value container addressed by separator-joined key paths.

    With the default separator, ``bag.get("database.host")`` reads
    ``{"database": {"host": ...}}``. Mappings are stored as plain dict
    copies; every other value is stored as-is.

    With ``nested=False`` keys are flat and the separator is not interpreted.
    """

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        separator: str = ".",
        nested: bool = True,
    ):
        if not separator:
            raise InvalidArgumentError("Separator must not be empty.")
        if data is not None and not isinstance(data, Mapping):
            raise InvalidArgumentError(
                f"Initial data must be a mapping, got {type(data).__name__}."
            )
        self._separator = separator
        self._nested = nested
        self._data: Dict[str, Any] | None = to_plain(data) if data else {}

    @property
    def separator(self) -> str:
        return self._separator

    @property
    def closed(self) -> bool:
        return self._data is None

    def get(self, key: str, default: Any = None) -> Any:
        value = self._lookup(key)
        if value is _MISSING:
            return default
        return value

    def has(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING

    def set(self, key: str, value: Any) -> None:
        data = self._root()
        *parents, leaf = self._split(key)
        current = data
        for part in parents:
            child = current.get(part)
            if not isinstance(child, dict):
                child = {}
                current[part] = child
            current = child
        current[leaf] = to_plain(value)

    def remove(self, key: str) -> None:
        data = self._root()
        *parents, leaf = self._split(key)
        current: Any = data
        for part in parents:
            current = current.get(part)
            if not isinstance(current, dict):
                return
        current.pop(leaf, None)

    def merge(self, *mappings: Mapping[str, Any]) -> None:
        """Recursively merge mappings into the root; later values win."""
        merged = self._root()
        for mapping in mappings:
            if not isinstance(mapping, Mapping):
                raise InvalidArgumentError(
                    f"Only mappings can be merged, got {type(mapping).__name__}."
                )
            merged = deep_merge(merged, mapping)
        self._data = to_plain(merged)

    def all(self) -> Dict[str, Any]:
        """Return a deep copy of the whole tree."""
        return deepcopy(self._root())

    def close(self) -> None:
        self._data = None

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __len__(self) -> int:
        return len(self._root())

    def __repr__(self) -> str:
        if self._data is None:
            return "<ParameterBag closed>"
        keys_preview = ", ".join(list(self._data.keys())[:5])
        more = "..." if len(self._data) > 5 else ""
        return f"<ParameterBag keys=[{keys_preview}{more}]>"

    def _root(self) -> Dict[str, Any]:
        if self._data is None:
            raise StoreClosedError("The configuration store has been closed.")
        return self._data

    def _split(self, key: str) -> List[str]:
        if not isinstance(key, str):
            raise InvalidArgumentError(
                f"Configuration keys must be strings, got {type(key).__name__}."
            )
        if not self._nested:
            return [key]
        return key.split(self._separator)

    def _lookup(self, key: str) -> Any:
        current: Any = self._root()
        for part in self._split(key):
            if not isinstance(current, dict) or part not in current:
                return _MISSING
            current = current[part]
        return current
