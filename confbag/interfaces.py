from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict


class ConfigInterface(ABC):
    """Operations shared by every dot-addressable configuration container."""

    @abstractmethod
    def set(self, key: str, value: Any) -> ConfigInterface:
        """Set ``value`` at ``key`` and return the container for chaining."""
        raise NotImplementedError

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value at ``key``, or ``default`` if it does not resolve."""
        raise NotImplementedError

    @abstractmethod
    def has(self, key: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def remove(self, key: str) -> ConfigInterface:
        raise NotImplementedError

    @abstractmethod
    def all(self) -> Dict[str, Any]:
        raise NotImplementedError
