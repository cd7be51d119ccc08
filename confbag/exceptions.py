from __future__ import annotations


class ConfigurationError(Exception):
    """Raised when there is a problem loading or accessing configuration."""

class InvalidArgumentError(ConfigurationError, ValueError):
    """Raised when a value has the wrong shape for the requested operation."""

class ConfigSourceError(ConfigurationError):
    """Raised when a configuration file or directory cannot be read."""

class InvalidFormatError(ConfigSourceError):
    """Raised when a source does not produce a configuration mapping."""

class NotFoundError(ConfigurationError, LookupError):
    """Raised when a referenced class cannot be resolved."""

class StoreClosedError(ConfigurationError):
    """Raised when a closed store is used."""
