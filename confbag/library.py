from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Dict, FrozenSet

import logging

from .bag import ParameterBag
from .exceptions import ConfigSourceError, InvalidArgumentError
from .interfaces import ConfigInterface
from .node import NOT_FOUND, Resolved, resolve, wrap
from .sources import SUPPORTED_SUFFIXES, ClassSource, ConfigSource, FileSource
from .utils import deep_merge

logger = logging.getLogger(__name__)


class Library(ConfigInterface):
    """
    Hierarchical configuration store.

    Values are addressed with dot-separated keys and can be imported from
    mappings, configuration files, directories of configuration files and
    classes:

        config = Library()
        config.set_dir(None, "config/", exclude=["local"])
        config.set_class(DatabaseDefaults)

        config.get("app.debug", False)
        config.app.debug

    Attribute access only reaches keys that do not collide with a method or
    property of this class (``get``, ``set``, ``all``, ``merge``, ``closed``,
    ``version``, ...); use ``get()`` or ``navigate()`` for those.

    ``close()`` releases the data; the store can also be used as a context
    manager.
    """

    VERSION = "1.0"

    def __init__(self, data: Mapping[str, Any] | None = None, *, separator: str = "."):
        self._separator = separator
        self._bag = ParameterBag(data, separator=separator)

    def __enter__(self) -> Library:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return wrap(self._bag.get(name))

    def __repr__(self) -> str:
        if self.closed:
            return f"<Library version={self.VERSION!r} closed>"
        keys = list(self._bag.all())
        keys_preview = ", ".join(keys[:5])
        more = "..." if len(keys) > 5 else ""
        return f"<Library version={self.VERSION!r} keys=[{keys_preview}{more}]>"

    @property
    def closed(self) -> bool:
        return self._bag.closed

    def close(self) -> None:
        """Release all configuration data. Further use raises StoreClosedError."""
        self._bag.close()

    def version(self) -> str:
        return self.VERSION

    def set(self, key: str | None, value: Any) -> Library:
        """
        Set the value at ``key``.

        A ``None`` key replaces the entire configuration; ``value`` must then
        be a mapping.
        """
        if key is not None:
            self._bag.set(key, value)
            return self
        if not isinstance(value, Mapping):
            raise InvalidArgumentError(
                "The value must be a mapping to set the entire configuration."
            )
        bag = ParameterBag(value, separator=self._separator)
        self._bag.close()
        self._bag = bag
        logger.debug("Replaced entire configuration (%d top-level keys)", len(bag))
        return self

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value at ``key``, or ``default`` if it does not resolve."""
        return self._bag.get(key, default)

    def has(self, key: str) -> bool:
        return self._bag.has(key)

    def remove(self, key: str) -> Library:
        self._bag.remove(key)
        return self

    def all(self) -> Dict[str, Any]:
        """Return a deep copy of the entire configuration."""
        return self._bag.all()

    def merge(self, name: str | None, data: Mapping[str, Any]) -> Library:
        """
        Recursively merge ``data`` into the configuration.

        Unlike ``set``, existing keys missing from ``data`` are kept. With a
        ``name`` the merge happens inside that subtree.
        """
        if not isinstance(data, Mapping):
            raise InvalidArgumentError("Only mappings can be merged into the configuration.")
        if name is None:
            self._bag.merge(data)
            return self
        current = self._bag.get(name)
        if isinstance(current, Mapping):
            data = deep_merge(current, data)
        self._bag.set(name, data)
        return self

    def navigate(self, path: str) -> Resolved:
        """Return the subtree (Node) or leaf (Scalar) at ``path``, or NOT_FOUND."""
        if not self._bag.has(path):
            return NOT_FOUND
        return resolve(self._bag.get(path))

    def set_array(self, name: str | None, assoc: Mapping[str, Any] | None = None) -> Library:
        """
        Import a mapping.

        With ``name=None`` the mapping replaces the whole configuration,
        otherwise it is stored under ``name``.
        """
        return self.set(name, {} if assoc is None else assoc)

    def set_dir(
        self,
        name: str | None,
        path: str | Path,
        exclude: Iterable[str] = (),
        *,
        suffixes: Iterable[str] | None = None,
    ) -> Library:
        """
        Import every configuration file found directly inside ``path``.

        Each file is stored under its lower-cased stem, prefixed with
        ``name + "."`` when a name is given. Files whose stem (case
        insensitive) appears in ``exclude`` are skipped; an ``exclude`` entry
        may carry one of the matched extensions, which is stripped. The first
        file that fails to import aborts the call.
        """
        directory = Path(path).expanduser()
        if not directory.is_dir():
            raise ConfigSourceError(f'"{directory}" is not a valid directory.')

        allowed = _normalize_suffixes(suffixes)
        try:
            files = sorted(
                entry
                for entry in directory.iterdir()
                if entry.suffix.lower() in allowed and entry.is_file()
            )
        except OSError as exc:
            raise ConfigSourceError(f'Could not read directory "{directory}": {exc}') from exc

        prefix = f"{name}{self._separator}" if name else ""
        excluded = {_strip_suffix(Path(item).name, allowed).lower() for item in exclude}

        for file in files:
            basename = file.stem.lower()
            if basename in excluded:
                logger.debug("Skipping excluded configuration file %s", file)
                continue
            self.set_file(prefix + basename, file)
        return self

    def set_file(self, name: str | None, path: str | Path, *, optional: bool = False) -> Library:
        """
        Import a configuration file.

        The file must produce a mapping. With ``name=None`` it replaces the
        whole configuration, otherwise it is stored under the lower-cased name.
        """
        data = FileSource(path, optional=optional).load()
        if data is None:
            logger.debug("Optional configuration file %s not found", path)
            return self
        if name is not None:
            name = name.lower()
        logger.debug("Importing %s as %r", path, name)
        return self.set(name, data)

    def set_class(self, class_or_object: Any) -> Library:
        """
        Import the configuration exported by a class.

        Accepts a class, an instance, or an import path such as
        ``"myapp.settings.Database"``. The values are stored under the class
        name, case preserved.
        """
        source = ClassSource(class_or_object)
        logger.debug("Importing class %s", source.name)
        return self.set(source.name, source.load())

    def set_source(self, name: str | None, source: ConfigSource) -> Library:
        """Import any ConfigSource; sources returning None are ignored."""
        data = source.load()
        if data is None:
            return self
        return self.set(name, data)


def _strip_suffix(filename: str, suffixes: Iterable[str]) -> str:
    lowered = filename.lower()
    for suffix in suffixes:
        if lowered.endswith(suffix):
            return filename[: -len(suffix)]
    return filename


def _normalize_suffixes(suffixes: Iterable[str] | None) -> FrozenSet[str]:
    if suffixes is None:
        return SUPPORTED_SUFFIXES
    normalized = set()
    for suffix in suffixes:
        suffix = suffix.lower()
        if not suffix.startswith("."):
            suffix = "." + suffix
        normalized.add(suffix)
    return frozenset(normalized)
