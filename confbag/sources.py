from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, FrozenSet

import configparser
import dataclasses
import importlib
import inspect
import json
import logging
import runpy

from .exceptions import ConfigSourceError, InvalidFormatError, NotFoundError

# Optional TOML support:
# - Python >= 3.11: stdlib `tomllib`
# - Older: `tomli` fallback
tomllib: Any | None
try:
    import tomllib as _tomllib
    tomllib = _tomllib
except ImportError:  # pragma: no cover
    try:
        import tomli as _tomli
        tomllib = _tomli
    except ImportError:  # pragma: no cover
        tomllib = None

# Optional YAML support (PyYAML)
yaml: Any | None
try:
    import yaml as _yaml
    yaml = _yaml
except ImportError:  # pragma: no cover
    yaml = None

logger = logging.getLogger(__name__)

#: Name a ``.py`` configuration file must bind its mapping to.
PYTHON_CONFIG_NAME = "CONFIG"

SUPPORTED_SUFFIXES: FrozenSet[str] = frozenset(
    {".py", ".json", ".toml", ".ini", ".cfg", ".conf", ".yaml", ".yml"}
)


class ConfigSource(ABC):
    """Abstract base class for configuration sources."""

    @abstractmethod
    def load(self) -> Mapping[str, Any] | None:
        """Return a mapping with configuration values or None if nothing was loaded."""
        raise NotImplementedError


class FileSource(ConfigSource):
    """
    Load configuration from a single file.

    Supported formats (by extension):
      - .py    (executed; must bind a mapping to ``CONFIG``)
      - .json
      - .toml  (requires Python 3.11+ or tomli)
      - .ini, .cfg, .conf (ConfigParser, values are kept as strings)
      - .yaml, .yml (requires PyYAML)

    Values are returned as a nested mapping.
    """

    def __init__(self, path: str | Path, *, optional: bool = False):
        self._path = Path(path).expanduser()
        self._optional = optional

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Mapping[str, Any] | None:
        if not self._path.is_file():
            if self._optional and not self._path.exists():
                return None
            raise ConfigSourceError(f'"{self._path}" file not found.')

        suffix = self._path.suffix.lower()

        if suffix == ".py":
            data = self._load_python()
        elif suffix == ".json":
            data = self._load_json()
        elif suffix == ".toml":
            data = self._load_toml()
        elif suffix in {".ini", ".cfg", ".conf"}:
            data = self._load_ini()
        elif suffix in {".yaml", ".yml"}:
            data = self._load_yaml()
        else:
            raise InvalidFormatError(
                f"Unsupported configuration file format: {self._path} "
                f"(extension '{suffix}')"
            )

        if not isinstance(data, Mapping):
            raise InvalidFormatError(f'The "{self._path}" file should return a mapping.')
        logger.debug("Loaded %d top-level keys from %s", len(data), self._path)
        return data

    def _load_python(self) -> Any:
        try:
            namespace = runpy.run_path(str(self._path))
        except Exception as exc:
            raise InvalidFormatError(f"Error executing {self._path}: {exc}") from exc

        if PYTHON_CONFIG_NAME not in namespace:
            raise InvalidFormatError(
                f'The "{self._path}" file does not define {PYTHON_CONFIG_NAME}.'
            )
        return namespace[PYTHON_CONFIG_NAME]

    def _load_json(self) -> Any:
        try:
            with self._path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except OSError as exc:
            raise ConfigSourceError(f"Could not read {self._path}: {exc}") from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidFormatError(f"Invalid JSON in {self._path}: {exc}") from exc

    def _load_toml(self) -> Any:
        if tomllib is None:
            raise InvalidFormatError(
                "TOML configuration requested but neither 'tomllib' (Python 3.11+) "
                "nor 'tomli' is available. Install 'tomli' to enable TOML support."
            )
        try:
            with self._path.open("rb") as f:
                return tomllib.load(f)
        except OSError as exc:
            raise ConfigSourceError(f"Could not read {self._path}: {exc}") from exc
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            raise InvalidFormatError(f"Invalid TOML in {self._path}: {exc}") from exc

    def _load_ini(self) -> Dict[str, Dict[str, str]]:
        # Disable interpolation for predictable behavior
        parser = configparser.ConfigParser(interpolation=None)
        try:
            with self._path.open("r", encoding="utf-8") as f:
                parser.read_file(f)
        except OSError as exc:
            raise ConfigSourceError(f"Could not read {self._path}: {exc}") from exc
        except (configparser.Error, UnicodeDecodeError) as exc:
            raise InvalidFormatError(
                f"Error reading INI file {self._path}: {exc}"
            ) from exc

        return {section: dict(parser.items(section)) for section in parser.sections()}

    def _load_yaml(self) -> Any:
        if yaml is None:
            raise InvalidFormatError(
                "YAML configuration requested but 'PyYAML' is not installed."
            )
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as exc:
            raise ConfigSourceError(f"Could not read {self._path}: {exc}") from exc
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            raise InvalidFormatError(f"Invalid YAML in {self._path}: {exc}") from exc

        if data is None:
            return {}
        return data


class Exportable:
    """
    Base for classes meant to be imported with ``Library.set_class``.

    The default ``to_mapping`` exports the declared public defaults of the
    class. Override it to control exactly what gets imported.
    """

    @classmethod
    def to_mapping(cls) -> Mapping[str, Any]:
        return declared_defaults(cls)


class ClassSource(ConfigSource):
    """
    Configuration taken from a class, an instance, or a dotted class path.

    ``name`` is the class's own name, ``load()`` returns its exported mapping.
    """

    def __init__(self, target: Any):
        self._target = target
        self._cls = resolve_class(target)

    @property
    def name(self) -> str:
        return self._cls.__name__

    def load(self) -> Mapping[str, Any]:
        data = self._export()
        if not isinstance(data, Mapping):
            raise InvalidFormatError(
                f"{self._cls.__qualname__}.to_mapping() should return a mapping."
            )
        return data

    def _export(self) -> Any:
        if not isinstance(self._target, (type, str)):
            exporter = getattr(self._target, "to_mapping", None)
            if callable(exporter):
                return exporter()
        elif isinstance(
            inspect.getattr_static(self._cls, "to_mapping", None),
            (classmethod, staticmethod),
        ):
            return self._cls.to_mapping()
        return declared_defaults(self._cls)


def resolve_class(target: Any) -> type:
    """
    Resolve an instance, a class or an import path to a class.

    Import paths may be written ``"package.module.Class"`` or
    ``"package.module:Class"``. Instances of builtin types (numbers, None,
    lists, ...) are not accepted.
    """
    if isinstance(target, type):
        return target
    if not isinstance(target, str):
        if type(target).__module__ == "builtins":
            raise NotFoundError(f'Class "{target!r}" not found.')
        return type(target)

    if ":" in target:
        module_name, _, qualname = target.partition(":")
    else:
        module_name, _, qualname = target.rpartition(".")
    if not module_name or not qualname:
        raise NotFoundError(f'Class "{target}" not found.')

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise NotFoundError(f'Class "{target}" not found.') from exc
    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise NotFoundError(f'Class "{target}" not found.') from exc
    if not isinstance(obj, type):
        raise NotFoundError(f'"{target}" is not a class.')
    return obj


def declared_defaults(cls: type) -> Dict[str, Any]:
    """
    Collect the public default values a class declares.

    Dataclasses contribute their fields that have a default or a default
    factory. Other classes contribute every public, non-callable class
    attribute found along the MRO, subclasses overriding base classes.
    """
    if dataclasses.is_dataclass(cls):
        defaults: Dict[str, Any] = {}
        for field in dataclasses.fields(cls):
            if field.name.startswith("_"):
                continue
            if field.default is not dataclasses.MISSING:
                defaults[field.name] = field.default
            elif field.default_factory is not dataclasses.MISSING:
                defaults[field.name] = field.default_factory()
        return defaults

    result: Dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name, value in vars(klass).items():
            if name.startswith("_"):
                continue
            if callable(value) or hasattr(type(value), "__get__"):
                result.pop(name, None)
                continue
            result[name] = value
    return result
