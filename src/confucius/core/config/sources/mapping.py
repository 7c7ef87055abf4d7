"""
In-memory source.

This module provides the MapSource class, used for programmatic overrides and
for tests.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .base import SourceAdapter


class MapSource(SourceAdapter):
    """Source backed by a mapping of string keys to string values."""

    def __init__(self, values: Mapping[str, str], origin: str = "memory"):
        for key, value in values.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise TypeError(
                    f"MapSource requires str keys and values, got "
                    f"{type(key).__name__} -> {type(value).__name__} for {key!r}"
                )
        self._origin = origin
        self._values = MappingProxyType(dict(values))

    @property
    def origin(self) -> str:
        return self._origin

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def keys(self) -> Iterable[str]:
        return self._values.keys()
