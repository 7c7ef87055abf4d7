"""
Ordered source chain.

The chain fixes the precedence of its sources at construction time: the source
at position 0 wins whenever several sources define the same key. Values are
atomic. A key is overridden as a whole, structured values are never merged,
and an empty string is a real override distinct from an absent key.
"""

import logging
from collections.abc import Iterable, Iterator

from .errors import InvalidSourceChainError
from .failures import SourceLookup
from .sources.base import SourceAdapter

logger = logging.getLogger(__name__)


class SourceChain:
    """
    Immutable, ordered list of source adapters.

    Example:
        ```python
        chain = SourceChain([
            MapSource({"PORT": "9090"}, origin="overrides"),
            PropertiesFileSource("app.properties"),
        ])
        chain.lookup("PORT").origin   # "overrides"
        ```

    Raises:
        InvalidSourceChainError: If ``sources`` is empty or contains an entry
            that is not a SourceAdapter.
    """

    def __init__(self, sources: Iterable[SourceAdapter]):
        sources = tuple(sources)
        if not sources:
            raise InvalidSourceChainError("A source chain needs at least one source")
        for position, source in enumerate(sources):
            if source is None:
                raise InvalidSourceChainError(f"Source at position {position} is None")
            if not isinstance(source, SourceAdapter):
                raise InvalidSourceChainError(
                    f"Source at position {position} is not a SourceAdapter: "
                    f"{type(source).__name__}"
                )
        self._sources = sources
        logger.debug(f"Built source chain: {' > '.join(self.origins)}")

    @property
    def sources(self) -> tuple[SourceAdapter, ...]:
        return self._sources

    @property
    def origins(self) -> tuple[str, ...]:
        """Origins of the sources, highest precedence first."""
        return tuple(source.origin for source in self._sources)

    def lookup(self, key: str) -> SourceLookup | None:
        """Return the raw value from the highest-precedence source defining ``key``."""
        for rank, source in enumerate(self._sources):
            value = source.get(key)
            if value is not None:
                return SourceLookup(key=key, value=value, origin=source.origin, rank=rank)
        return None

    def keys(self) -> list[str]:
        """Sorted union of the keys of every source."""
        keys: set[str] = set()
        for source in self._sources:
            keys.update(source.keys())
        return sorted(keys)

    def reload(self) -> "SourceChain":
        """New chain of reloaded sources in the same order."""
        return SourceChain(source.reload() for source in self._sources)

    def __iter__(self) -> Iterator[SourceAdapter]:
        return iter(self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    def __repr__(self) -> str:
        return f"SourceChain({list(self.origins)!r})"
