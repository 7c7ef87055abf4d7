"""Exceptions raised by the configuration resolution engine.

Three families are kept apart:

- ``ConfigurationError``: a data-level failure surfaced by ``require`` or
  ``get``. The underlying failure value is attached as ``failure``.
- ``ProgrammingError``: misuse of the API by caller code (duplicate converter,
  unknown type tag, malformed source chain). Raised at the call that misused
  the API.
- ``SourceError``: a source adapter could not load its data.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .failures import Failure


class ConfuciusError(Exception):
    """Base class for every Confucius exception."""


class ConfigurationError(ConfuciusError):
    """A configuration entry is missing or malformed."""

    def __init__(self, failure: "Failure"):
        super().__init__(failure.message)
        self.failure = failure

    @property
    def key(self) -> str:
        return self.failure.key

    def to_dict(self) -> dict[str, Any]:
        """Structured payload describing the failure."""
        return self.failure.to_dict()


class MissingKeyError(ConfigurationError):
    """No source in the chain defines the key."""


class UnresolvedPlaceholderError(ConfigurationError):
    """A placeholder references a key that no source defines."""


class CircularPlaceholderError(ConfigurationError):
    """Placeholders reference each other in a cycle."""


class ConversionError(ConfigurationError, ValueError):
    """A resolved value does not satisfy the grammar of the requested type."""


class ProgrammingError(ConfuciusError):
    """The API was used incorrectly by the caller."""


class InvalidSourceChainError(ProgrammingError):
    """A source chain was constructed from an invalid list of sources."""


class DuplicateConverterError(ProgrammingError):
    """A converter is already registered for the type tag."""


class UnknownConverterError(ProgrammingError):
    """No converter is registered for the type tag."""


class SourceError(ConfuciusError):
    """A source adapter failed to load its data."""


class SourceSyntaxError(SourceError, ValueError):
    """A configuration file could not be parsed."""

    def __init__(self, message: str, path: str | None = None, line: int | None = None):
        location = ""
        if path is not None:
            location = f"{path}:{line}: " if line is not None else f"{path}: "
        super().__init__(f"{location}{message}")
        self.path = path
        self.line = line
