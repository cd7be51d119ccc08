from __future__ import annotations

from typing import Any

from .library import Library


class _FacadeType(type):
    """Forwards class-level attribute lookups to the shared Library."""

    def __getattr__(cls, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(cls.instance(), name)


class Config(metaclass=_FacadeType):
    """
    Process-wide access to one shared Library.

    Every Library operation works both on the class and on instances, and
    they all see the same data:

        Config.set_dir(None, "config/")
        Config.get("app.debug")
        Config().app.debug

    The shared library is created on first use. ``Config.use()`` installs a
    library built by the caller instead. Closing through any reference closes
    the shared library; call ``Config.reset()`` to start over.

    The shared state is not synchronized.
    """

    _library: Library | None = None

    def __init__(self) -> None:
        type(self).instance()

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(type(self).instance(), name)

    def __repr__(self) -> str:
        return f"<Config {type(self).instance()!r}>"

    @classmethod
    def instance(cls) -> Library:
        """Return the shared Library, creating it on first use."""
        if Config._library is None:
            Config._library = Library()
        return Config._library

    @classmethod
    def use(cls, library: Library) -> Library:
        """Install ``library`` as the shared instance and return it."""
        if not isinstance(library, Library):
            raise TypeError(f"Expected a Library, got {type(library).__name__}.")
        Config._library = library
        return library

    @classmethod
    def reset(cls) -> None:
        """Close and forget the shared Library."""
        if Config._library is not None:
            Config._library.close()
            Config._library = None
