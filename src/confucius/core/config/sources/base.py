"""
Base class for source adapters.

A source adapter exposes one origin of raw configuration (a file, the process
environment, an in-memory mapping) as a read-only snapshot of key to string
value pairs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable


class SourceAdapter(ABC):
    """
    Abstract base class for configuration sources.

    ## Implementation Requirements

    - `origin`: identifier used in diagnostics (a file path, ``"env"``, ...)
    - `get`: return the raw value for a key, or ``None`` when the key is absent
    - `keys`: every key the source defines

    ## Optional Methods

    - `reload`: return a new adapter holding a fresh snapshot (default: ``self``)

    ## Snapshot Semantics

    Adapters load their data once, when constructed, and never change it
    afterwards. A resolver may therefore read the same adapter from many
    threads, and a resolution in progress never observes a half-updated
    source. Picking up changes is done by calling `reload()`, which returns
    a new adapter and leaves the original untouched.

    ## Implementation Example

    ```python
    class SecretsDirSource(SourceAdapter):
        '''One key per file in a directory, like Docker secrets.'''

        def __init__(self, directory: Path):
            self.directory = directory
            self._values = {
                p.name: p.read_text(encoding="utf-8").strip()
                for p in directory.iterdir()
                if p.is_file()
            }

        @property
        def origin(self) -> str:
            return f"secrets:{self.directory}"

        def get(self, key: str) -> str | None:
            return self._values.get(key)

        def keys(self) -> Iterable[str]:
            return self._values.keys()

        def reload(self) -> "SecretsDirSource":
            return SecretsDirSource(self.directory)
    ```
    """

    @property
    @abstractmethod
    def origin(self) -> str:
        """Return the identifier of this source for diagnostics."""
        pass

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the raw value for ``key``, or ``None`` if it is not defined."""
        pass

    @abstractmethod
    def keys(self) -> Iterable[str]:
        """Return all keys defined by this source."""
        pass

    def reload(self) -> "SourceAdapter":
        """Return an adapter with a fresh snapshot. Override for sources backed by I/O."""
        return self

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(origin={self.origin!r})"
