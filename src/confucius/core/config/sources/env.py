"""
Environment variable source.

This module provides the EnvSource class, which snapshots the process
environment (or any given mapping) when it is constructed.
"""

import logging
import os
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .base import SourceAdapter

logger = logging.getLogger(__name__)


class EnvSource(SourceAdapter):
    """
    Source backed by environment variables.

    Args:
        prefix: Only variables starting with this prefix are exposed.
        strip_prefix: Expose ``APP_PORT`` as ``PORT`` when the prefix is ``APP_``.
        environ: Mapping to read instead of ``os.environ``.
        origin: Identifier used in diagnostics.
    """

    def __init__(
        self,
        prefix: str | None = None,
        strip_prefix: bool = False,
        environ: Mapping[str, str] | None = None,
        origin: str = "env",
    ):
        self.prefix = prefix
        self.strip_prefix = strip_prefix
        self._environ = environ
        self._origin = origin

        source = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for name, value in source.items():
            if prefix:
                if not name.startswith(prefix):
                    continue
                if strip_prefix:
                    name = name[len(prefix) :]
                    if not name:
                        continue
            values[name] = value

        self._values = MappingProxyType(values)
        logger.debug(f"Captured {len(values)} environment variables for source {origin}")

    @property
    def origin(self) -> str:
        return self._origin

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def keys(self) -> Iterable[str]:
        return self._values.keys()

    def reload(self) -> "EnvSource":
        return EnvSource(
            prefix=self.prefix,
            strip_prefix=self.strip_prefix,
            environ=self._environ,
            origin=self._origin,
        )
