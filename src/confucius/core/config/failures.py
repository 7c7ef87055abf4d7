"""
Resolution results and structured failure values.

Lookups on a ``Resolver`` never raise for data-level problems. They return
either a successful value (or a ``ResolvedEntry`` carrying provenance) or one
of the ``Failure`` subclasses defined here:

- ``MissingKey``: no source in the chain defines the key
- ``UnresolvedPlaceholder``: a placeholder references a key no source defines
- ``CircularPlaceholder``: placeholders reference each other in a cycle
- ``ConversionFailure``: the resolved string does not fit the requested type

Callers decide what to do with a failure: supply a default, escalate with
``failure.raise_error()``, or halt. ``Resolver.require`` does the escalation.

Example:
    ```python
    result = resolver.resolve("port", int)
    if isinstance(result, Failure):
        logger.error(result.message)
        result.raise_error()
    ```
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar, NoReturn

from .errors import (
    CircularPlaceholderError,
    ConfigurationError,
    ConversionError,
    MissingKeyError,
    UnresolvedPlaceholderError,
)


@dataclass(frozen=True)
class SourceLookup:
    """Raw value found in the chain, with the source that supplied it."""

    key: str
    value: str
    origin: str
    rank: int


@dataclass(frozen=True)
class ResolvedEntry:
    """
    A key whose placeholders have all been substituted.

    Attributes:
        key: The key that was resolved.
        value: The final string, placeholders substituted.
        raw_value: The unsubstituted value from the winning source.
        origin: Origin of the source that supplied ``raw_value``. The final
                string may still combine values from several sources.
        rank: Position of that source in the chain (0 is highest precedence).
        references: Keys substituted into the value, in first-use order,
                    including keys reached through nested placeholders.
    """

    key: str
    value: str
    raw_value: str
    origin: str
    rank: int
    references: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "value": self.value,
            "raw_value": self.raw_value,
            "origin": self.origin,
            "rank": self.rank,
            "references": list(self.references),
        }


@dataclass(frozen=True)
class Failure:
    """Base class for data-level resolution failures."""

    kind: ClassVar[str] = "failure"
    error_class: ClassVar[type[ConfigurationError]] = ConfigurationError

    key: str

    @property
    def message(self) -> str:
        return f"Configuration failure for key '{self.key}'"

    def to_dict(self) -> dict[str, Any]:
        """Structured, JSON-serializable description of the failure."""
        payload: dict[str, Any] = {"kind": self.kind, "message": self.message}
        for name, value in asdict(self).items():
            payload[name] = list(value) if isinstance(value, tuple) else value
        return payload

    def to_exception(self) -> ConfigurationError:
        return self.error_class(self)

    def raise_error(self) -> NoReturn:
        raise self.to_exception()

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class MissingKey(Failure):
    """No source defines the key. ``searched`` lists the origins inspected."""

    kind: ClassVar[str] = "missing_key"
    error_class: ClassVar[type[ConfigurationError]] = MissingKeyError

    searched: tuple[str, ...]

    @property
    def message(self) -> str:
        origins = ", ".join(self.searched)
        return f"Unable to find configuration value for key '{self.key}' (searched: {origins})"


@dataclass(frozen=True)
class UnresolvedPlaceholder(Failure):
    """A placeholder references a key that no source defines."""

    kind: ClassVar[str] = "unresolved_placeholder"
    error_class: ClassVar[type[ConfigurationError]] = UnresolvedPlaceholderError

    placeholder: str
    token: str
    referenced_by: str
    searched: tuple[str, ...]

    @property
    def message(self) -> str:
        via = "" if self.referenced_by == self.key else f" (via '{self.referenced_by}')"
        return (
            f"Unresolved placeholder {self.token} in key '{self.key}'{via}: "
            f"no source defines '{self.placeholder}'"
        )


@dataclass(frozen=True)
class CircularPlaceholder(Failure):
    """
    Placeholders form a cycle.

    ``cycle`` is the key path that closes the loop, starting and ending with
    the repeated key, e.g. ``("a", "b", "a")``.
    """

    kind: ClassVar[str] = "circular_placeholder"
    error_class: ClassVar[type[ConfigurationError]] = CircularPlaceholderError

    cycle: tuple[str, ...]

    @property
    def message(self) -> str:
        path = " -> ".join(self.cycle)
        return f"Circular placeholder reference while resolving '{self.key}': {path}"


@dataclass(frozen=True)
class ConversionFailure(Failure):
    """The resolved value does not satisfy the grammar of the target type."""

    kind: ClassVar[str] = "conversion_error"
    error_class: ClassVar[type[ConfigurationError]] = ConversionError

    raw_value: str
    type_name: str
    reason: str

    @property
    def message(self) -> str:
        return (
            f"Configuration value for key '{self.key}' is not a valid {self.type_name}: "
            f"{self.raw_value!r} ({self.reason})"
        )
