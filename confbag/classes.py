from __future__ import annotations

from typing import Any, Dict

from .bag import ParameterBag
from .interfaces import ConfigInterface
from .sources import Exportable, declared_defaults


class ClassConfig(Exportable, ConfigInterface):
    """
    Base class for configuration declared as class attributes.

    Each instance owns its own store, seeded from the public defaults the
    subclass declares:

        class Mail(ClassConfig):
            host = "localhost"
            port = 25

        with Mail() as mail:
            mail.set("port", 587).get("port")

    Changes stay on the instance; class attributes keep their defaults, so
    read current values with ``get()``. Passing a subclass to
    ``Library.set_class`` imports the declared defaults.
    """

    def __init__(self) -> None:
        self._bag = ParameterBag(declared_defaults(type(self)))

    def __enter__(self) -> ClassConfig:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._bag.closed

    def close(self) -> None:
        self._bag.close()

    def set(self, key: str, value: Any) -> ClassConfig:
        self._bag.set(key, value)
        return self

    def get(self, key: str, default: Any = None) -> Any:
        return self._bag.get(key, default)

    def has(self, key: str) -> bool:
        return self._bag.has(key)

    def remove(self, key: str) -> ClassConfig:
        self._bag.remove(key)
        return self

    def all(self) -> Dict[str, Any]:
        return self._bag.all()
