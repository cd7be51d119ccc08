from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Union


class Node(Mapping[str, Any]):
    """
    Read-only view of a configuration subtree.

    Provides both mapping access (node["section"]["key"]) and
    attribute-style access (node.section.key). Nested mappings are wrapped
    in Node on access; leaves are returned as-is.

    Keys named like Mapping or Node methods (``get``, ``items``, ``keys``,
    ``values``, ``to_dict``) are shadowed for attribute access; use item
    access or ``get()`` for them.
    """

    def __init__(self, data: Mapping[str, Any]):
        self._data: Dict[str, Any] = dict(data)

    def __getitem__(self, key: str) -> Any:
        return wrap(self._data[key])

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            value = self._data[name]
        except KeyError as exc:
            raise AttributeError(name) from exc
        return wrap(value)

    def to_dict(self) -> Dict[str, Any]:
        """Return a deep copy of the underlying data."""
        from copy import deepcopy

        return deepcopy(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        """Return value for key if present, else default."""
        if key in self._data:
            return wrap(self._data[key])
        return default

    def __repr__(self) -> str:
        keys_preview = ", ".join(list(self._data.keys())[:5])
        more = "..." if len(self._data) > 5 else ""
        return f"<Node keys=[{keys_preview}{more}]>"


@dataclass(frozen=True)
class Scalar:
    """A leaf value returned by ``Library.navigate``."""

    value: Any


class NotFound:
    """Marker returned by ``Library.navigate`` for paths that do not resolve."""

    _instance: "NotFound | None" = None

    def __new__(cls) -> "NotFound":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = NotFound()

Resolved = Union[Node, Scalar, NotFound]


def wrap(value: Any) -> Any:
    """
    Wrap nested mappings in Node so attribute access works recursively.
    """
    if isinstance(value, Mapping) and not isinstance(value, Node):
        return Node(value)
    return value


def resolve(value: Any) -> Node | Scalar:
    """Tag a stored value as a subtree or a leaf."""
    if isinstance(value, Mapping):
        return wrap(value)
    return Scalar(value)
