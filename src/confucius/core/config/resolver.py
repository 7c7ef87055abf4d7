"""
Configuration resolver.

This module provides the Resolver class, the entry point of the engine. A
Resolver merges an ordered chain of sources into one key space, substitutes
placeholders, and converts values to typed results on demand.
"""

import logging
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .chain import SourceChain
from .converters import (
    DEFAULT_LIST_DELIMITER,
    Converter,
    ConverterRegistry,
    TypeTag,
    check_delimiter,
)
from .errors import InvalidSourceChainError, ProgrammingError
from .failures import ConversionFailure, Failure, MissingKey, ResolvedEntry
from .loader import build_sources, load_settings
from .models import PlaceholderSyntax, ResolverSettingsModel
from .placeholders import resolve_placeholders
from .sources.base import SourceAdapter

logger = logging.getLogger(__name__)

_MISSING: Any = object()


class Resolver:
    """
    Layered configuration resolver.

    ## Key Features

    - **Ordered sources**: the first source in the chain that defines a key wins.
      An empty string is a real value and overrides lower sources.
    - **Placeholders**: ``${other.key}`` tokens are replaced by the resolved value
      of the referenced key, through the whole chain, to any depth.
    - **Typed lookups**: values are converted by a per-resolver converter registry.
    - **Explicit failures**: lookups return ``Failure`` values instead of raising;
      ``require`` raises them for mandatory settings.

    ## Usage Examples

    ### Basic Usage

    ```python
    from confucius import EnvSource, PropertiesFileSource, Resolver

    resolver = Resolver([
        EnvSource(),
        PropertiesFileSource("conf/app.properties", context="production"),
    ])

    port = resolver.resolve("port", int)
    if isinstance(port, Failure):
        port = 8080

    timeout = resolver.require("timeout", int)   # raises when missing
    hosts = resolver.resolve_list("hosts")      # ["a", "b"]
    ```

    ### From a Settings File

    ```python
    resolver = Resolver.from_config_file("confucius.yaml")
    ```

    ### Custom Converters

    ```python
    from datetime import timedelta

    resolver.register_converter("seconds", lambda v: timedelta(seconds=int(v)))
    resolver.resolve("session.ttl", "seconds")
    ```

    ## Error Handling

    - ``resolve`` and friends return ``MissingKey``, ``UnresolvedPlaceholder``,
      ``CircularPlaceholder`` or ``ConversionFailure`` values.
    - ``require`` raises the matching ``ConfigurationError`` subclass.
    - Misuse of the API (unknown type tag, duplicate converter, invalid chain)
      raises a ``ProgrammingError`` at the offending call.

    ## Thread Safety

    Resolvers are safe for concurrent lookups. Resolved entries are cached per
    key with insert-once semantics: two threads resolving the same key for the
    first time may both compute it, but only the first result is stored and
    every caller receives the stored result. The cache only changes through
    ``invalidate``.

    ## Reloading

    Sources are snapshots. ``reload()`` returns a new Resolver whose sources
    re-read their data; the existing resolver keeps answering from its own
    snapshot.
    """

    def __init__(
        self,
        sources: SourceChain | Iterable[SourceAdapter],
        placeholder: PlaceholderSyntax | None = None,
        list_delimiter: str = DEFAULT_LIST_DELIMITER,
        cache: bool = True,
        converters: ConverterRegistry | None = None,
    ):
        """
        Initialize the Resolver.

        Args:
            sources: A SourceChain, or the sources to build one from, highest
                     precedence first.
            placeholder: Placeholder delimiters. Defaults to ``${`` and ``}``.
            list_delimiter: Delimiter of the ``list`` converter. Ignored when
                            ``converters`` is given.
            cache: Whether resolved entries are cached.
            converters: Converter registry to use instead of a fresh one.
        """
        if sources is None:
            raise InvalidSourceChainError("A resolver needs a source chain")
        self.chain = sources if isinstance(sources, SourceChain) else SourceChain(sources)
        self.placeholder = placeholder or PlaceholderSyntax()
        self.converters = converters or ConverterRegistry(list_delimiter)
        self.cache_enabled = cache
        self._cache: dict[str, ResolvedEntry | Failure] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: ResolverSettingsModel) -> "Resolver":
        """
        Create a Resolver from a settings model.

        Args:
            settings: Resolver settings

        Returns:
            Resolver instance
        """
        return cls(
            build_sources(settings),
            placeholder=settings.placeholder,
            list_delimiter=settings.list_delimiter,
            cache=settings.cache,
        )

    @classmethod
    def from_config_file(cls, config_path: str | Path | None = None) -> "Resolver":
        """
        Create a Resolver from a settings file.

        Args:
            config_path: Path to the settings file. If None, the locations
                         documented in ``load_settings`` are searched.

        Returns:
            Resolver instance
        """
        path_to_load = Path(config_path) if config_path else None
        return cls.from_settings(load_settings(path_to_load))

    @property
    def list_delimiter(self) -> str:
        return self.converters.list_delimiter

    def register_converter(self, type_tag: TypeTag, converter: Converter) -> None:
        """
        Register a converter for a new type tag.

        Raises:
            DuplicateConverterError: If the tag is already registered.
        """
        self.converters.register(type_tag, converter)

    def list_types(self) -> list[str]:
        return self.converters.list_types()

    def resolve_entry(self, key: str) -> ResolvedEntry | Failure:
        """
        Resolve a key to its substituted value with provenance.

        Returns:
            ResolvedEntry, or MissingKey / UnresolvedPlaceholder / CircularPlaceholder
        """
        if not isinstance(key, str):
            raise ProgrammingError(f"Configuration keys must be strings, got {type(key).__name__}")

        if self.cache_enabled:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

        result = resolve_placeholders(
            key, self.chain, self.placeholder, self._cache if self.cache_enabled else None
        )
        if isinstance(result, Failure):
            logger.debug(f"Resolution failed: {result.message}")

        if self.cache_enabled:
            with self._lock:
                result = self._cache.setdefault(key, result)
        return result

    def resolve(self, key: str, type: TypeTag | None = None) -> Any:
        """
        Resolve a key, optionally converting it.

        Args:
            key: Key to resolve
            type: Type tag (``"integer"``, ``int``, a custom tag...). None
                  returns the substituted string.

        Returns:
            The value, or a Failure describing why there is none.

        Raises:
            UnknownConverterError: If ``type`` has no registered converter.
        """
        if type is not None:
            self.converters.get(type)

        entry = self.resolve_entry(key)
        if isinstance(entry, Failure):
            return entry
        if type is None:
            return entry.value
        return self.converters.convert(key, entry.value, type)

    def resolve_list(
        self,
        key: str,
        item_type: TypeTag = "string",
        delimiter: str | None = None,
    ) -> list[Any] | Failure:
        """
        Resolve a key as a list, converting every element.

        Args:
            key: Key to resolve
            item_type: Type tag of the elements
            delimiter: Overrides the resolver's list delimiter

        Returns:
            The list, or a Failure. A failing element yields a
            ConversionFailure naming the element.
        """
        self.converters.get(item_type)
        if delimiter is not None:
            check_delimiter(delimiter)

        entry = self.resolve_entry(key)
        if isinstance(entry, Failure):
            return entry
        result = self.converters.convert_list(key, entry.value, item_type, delimiter)
        if isinstance(result, ConversionFailure):
            logger.debug(result.message)
        return result

    def require(self, key: str, type: TypeTag | None = None) -> Any:
        """
        Resolve a mandatory key.

        Raises:
            MissingKeyError: No source defines the key
            UnresolvedPlaceholderError: A placeholder references a missing key
            CircularPlaceholderError: Placeholders form a cycle
            ConversionError: The value does not fit ``type``
        """
        result = self.resolve(key, type)
        if isinstance(result, Failure):
            logger.error(f"Required configuration unavailable: {result.message}")
            result.raise_error()
        return result

    def get(self, key: str, type: TypeTag | None = None, default: Any = _MISSING) -> Any:
        """
        Resolve an optional key.

        ``default`` is returned only when no source defines ``key``. Any other
        failure is raised, so a default never hides a malformed value. Without
        a default this behaves like ``require``.
        """
        result = self.resolve(key, type)
        if isinstance(result, MissingKey) and default is not _MISSING:
            return default
        if isinstance(result, Failure):
            result.raise_error()
        return result

    def keys(self) -> list[str]:
        """All keys defined by any source, sorted."""
        return self.chain.keys()

    def describe(self, key: str) -> ResolvedEntry | Failure:
        """Provenance of a key. Alias of ``resolve_entry``."""
        return self.resolve_entry(key)

    def snapshot(self) -> dict[str, ResolvedEntry | Failure]:
        """Resolve every key."""
        return {key: self.resolve_entry(key) for key in self.keys()}

    def invalidate(self, key: str | None = None) -> None:
        """Drop one cached entry, or the whole cache when ``key`` is None."""
        with self._lock:
            if key is None:
                self._cache.clear()
            else:
                self._cache.pop(key, None)
        logger.debug(f"Invalidated cache entry: {key}" if key else "Invalidated resolver cache")

    def reload(self) -> "Resolver":
        """
        Create a new Resolver over freshly reloaded sources.

        Converters registered on this resolver are carried over.
        """
        logger.info(f"Reloading sources: {', '.join(self.chain.origins)}")
        return Resolver(
            self.chain.reload(),
            placeholder=self.placeholder,
            cache=self.cache_enabled,
            converters=self.converters.copy(),
        )

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.chain.lookup(key) is not None

    def __repr__(self) -> str:
        return f"Resolver(chain={self.chain!r})"
