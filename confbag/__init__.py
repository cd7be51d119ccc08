from __future__ import annotations

"""
confbag - Hierarchical, dot-addressable configuration store.

This package provides:
- Library: configuration store importing mappings, files, directories and classes.
- Config: process-wide facade over one shared Library.
- ClassConfig: base class for configuration declared as class attributes.
- ParameterBag: the nested key/value container behind Library.
- Node / Scalar / NOT_FOUND: typed views returned by Library.navigate().
"""

from .bag import ParameterBag
from .classes import ClassConfig
from .exceptions import (
    ConfigSourceError,
    ConfigurationError,
    InvalidArgumentError,
    InvalidFormatError,
    NotFoundError,
    StoreClosedError,
)
from .facade import Config
from .interfaces import ConfigInterface
from .library import Library
from .node import NOT_FOUND, Node, NotFound, Scalar
from .sources import ClassSource, ConfigSource, Exportable, FileSource

__version__ = Library.VERSION

__all__ = [
    "ConfigurationError",
    "ConfigSourceError",
    "InvalidArgumentError",
    "InvalidFormatError",
    "NotFoundError",
    "StoreClosedError",
    "ParameterBag",
    "ConfigInterface",
    "Library",
    "ClassConfig",
    "Config",
    "Node",
    "Scalar",
    "NotFound",
    "NOT_FOUND",
    "ConfigSource",
    "FileSource",
    "ClassSource",
    "Exportable",
]
