"""
Type conversion for resolved configuration values.

A converter is a callable taking the final (placeholder-substituted) string
and returning a typed value. Converters signal that a string does not fit
their type by raising ``ValueError`` (or ``TypeError``), which the registry
turns into a ``ConversionFailure`` result, or by returning a ``Failure``
themselves, which is passed through unchanged. Inside typed lists a returned
``Failure`` becomes a ``ConversionFailure`` naming the element.

Built-in type tags:

| tag       | alias   | accepts |
|-----------|---------|---------|
| `string`  | `str`   | anything |
| `boolean` | `bool`  | `true` / `false`, any case |
| `integer` | `int`   | optional sign followed by digits |
| `float`   | `float` | decimal number with optional fraction and exponent |
| `char`    |         | exactly one character |
| `list`    | `list`  | delimiter-separated strings |

## List Values

Lists are split on a single delimiter (``,`` by default) at the top level.
A backslash escapes the following character, so ``a\\,b,c`` splits into
``["a,b", "c"]`` and ``\\\\`` stands for one backslash. Elements are stripped
of surrounding whitespace, and an empty value is the empty list.
"""

import logging
import math
import re
import threading
from collections.abc import Callable, Hashable, Iterable
from functools import partial
from typing import Any

from .errors import DuplicateConverterError, ProgrammingError, UnknownConverterError
from .failures import ConversionFailure, Failure

logger = logging.getLogger(__name__)

Converter = Callable[[str], Any]
TypeTag = Hashable

DEFAULT_LIST_DELIMITER = ","

# Python builtins accepted in place of the builtin tag names
TYPE_ALIASES: dict[type, str] = {
    str: "string",
    bool: "boolean",
    int: "integer",
    float: "float",
    list: "list",
}

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def to_string(value: str) -> str:
    return value


def to_boolean(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise ValueError("expected 'true' or 'false'")


def to_integer(value: str) -> int:
    text = value.strip()
    if not _INTEGER_RE.fullmatch(text):
        raise ValueError("expected an integer")
    return int(text)


def to_float(value: str) -> float:
    text = value.strip()
    if not _FLOAT_RE.fullmatch(text):
        raise ValueError("expected a decimal number")
    result = float(text)
    if not math.isfinite(result):
        raise ValueError("number is out of range")
    return result


def to_char(value: str) -> str:
    if len(value) != 1:
        raise ValueError(f"expected exactly one character, got {len(value)}")
    return value


def split_list(value: str, delimiter: str = DEFAULT_LIST_DELIMITER) -> list[str]:
    """Split a list value, honouring backslash escapes. See the module docstring."""
    if not value.strip():
        return []

    items: list[str] = []
    current: list[str] = []
    i = 0
    while i < len(value):
        char = value[i]
        if char == "\\":
            if i + 1 >= len(value):
                raise ValueError("dangling escape character at end of list")
            current.append(value[i + 1])
            i += 2
            continue
        if value.startswith(delimiter, i):
            items.append("".join(current).strip())
            current = []
            i += len(delimiter)
            continue
        current.append(char)
        i += 1
    items.append("".join(current).strip())
    return items


def join_list(items: Iterable[str], delimiter: str = DEFAULT_LIST_DELIMITER) -> str:
    """Inverse of `split_list` for elements without surrounding whitespace."""
    escaped = []
    for item in items:
        item = item.replace("\\", "\\\\")
        escaped.append(item.replace(delimiter, "".join(f"\\{c}" for c in delimiter)))
    return delimiter.join(escaped)


def check_delimiter(delimiter: str) -> None:
    """Raise ProgrammingError for an empty delimiter or one containing a backslash."""
    if not delimiter or "\\" in delimiter:
        raise ProgrammingError(f"Invalid list delimiter: {delimiter!r}")


class ConverterRegistry:
    """
    Registry mapping type tags to converters.

    Every resolver owns its own registry. Registration is checked atomically,
    so registering a tag twice always fails and leaves the first converter in
    place.

    Example:
        ```python
        def to_port(value: str) -> int:
            port = to_integer(value)
            if not 0 < port < 65536:
                raise ValueError("port out of range")
            return port

        registry = ConverterRegistry()
        registry.register("port", to_port)
        registry.convert("server.port", "8080", "port")   # 8080
        registry.convert("server.port", "99999", "port")  # ConversionFailure
        ```
    """

    def __init__(self, list_delimiter: str = DEFAULT_LIST_DELIMITER, builtins: bool = True):
        check_delimiter(list_delimiter)
        self.list_delimiter = list_delimiter
        self._converters: dict[TypeTag, Converter] = {}
        self._lock = threading.Lock()

        if builtins:
            self.register("string", to_string)
            self.register("boolean", to_boolean)
            self.register("integer", to_integer)
            self.register("float", to_float)
            self.register("char", to_char)
            self.register("list", partial(split_list, delimiter=list_delimiter))

    @staticmethod
    def normalize(tag: TypeTag) -> TypeTag:
        """Map builtin Python types to their tag names."""
        try:
            return TYPE_ALIASES.get(tag, tag)  # type: ignore[call-overload]
        except TypeError as e:
            raise ProgrammingError(f"Type tag must be hashable, got {type(tag).__name__}") from e

    @staticmethod
    def type_name(tag: TypeTag) -> str:
        tag = ConverterRegistry.normalize(tag)
        if isinstance(tag, str):
            return tag
        return getattr(tag, "__name__", repr(tag))

    def register(self, tag: TypeTag, converter: Converter) -> None:
        """
        Register a converter for a type tag.

        Raises:
            DuplicateConverterError: If a converter is already registered for the tag.
            ProgrammingError: If the converter is not callable.
        """
        if not callable(converter):
            raise ProgrammingError(f"Converter for {self.type_name(tag)} is not callable")
        key = self.normalize(tag)
        with self._lock:
            if key in self._converters:
                raise DuplicateConverterError(
                    f"A converter is already registered for type {self.type_name(tag)}"
                )
            self._converters[key] = converter
        logger.debug(f"Registered converter: {self.type_name(tag)}")

    def get(self, tag: TypeTag) -> Converter:
        """Return the converter for a tag, or raise UnknownConverterError."""
        converter = self._converters.get(self.normalize(tag))
        if converter is None:
            raise UnknownConverterError(
                f"No converter registered for type {self.type_name(tag)}; "
                f"known types: {', '.join(self.list_types())}"
            )
        return converter

    def list_types(self) -> list[str]:
        return [self.type_name(tag) for tag in self._converters]

    def __contains__(self, tag: object) -> bool:
        try:
            return self.normalize(tag) in self._converters  # type: ignore[arg-type]
        except ProgrammingError:
            return False

    def convert(self, key: str, value: str, tag: TypeTag) -> Any:
        """
        Convert a resolved value.

        Returns:
            The converted value, or a ConversionFailure.

        Raises:
            UnknownConverterError: If no converter is registered for the tag.
        """
        converter = self.get(tag)
        try:
            result = converter(value)
        except (ValueError, TypeError) as e:
            failure = ConversionFailure(key, value, self.type_name(tag), str(e))
            logger.debug(failure.message)
            return failure
        if isinstance(result, Failure):
            logger.debug(result.message)
        return result

    def convert_list(
        self,
        key: str,
        value: str,
        item_tag: TypeTag = "string",
        delimiter: str | None = None,
    ) -> list[Any] | ConversionFailure:
        """Split a list value and convert every element with the item converter."""
        delimiter = self.list_delimiter if delimiter is None else delimiter
        check_delimiter(delimiter)
        converter = self.get(item_tag)
        type_name = f"list of {self.type_name(item_tag)}"

        try:
            items = split_list(value, delimiter)
        except ValueError as e:
            return ConversionFailure(key, value, type_name, str(e))

        converted = []
        for index, item in enumerate(items):
            try:
                result = converter(item)
            except (ValueError, TypeError) as e:
                return ConversionFailure(key, value, type_name, f"element {index} {item!r}: {e}")
            if isinstance(result, Failure):
                return ConversionFailure(
                    key, value, type_name, f"element {index} {item!r}: {result.message}"
                )
            converted.append(result)
        return converted

    def copy(self) -> "ConverterRegistry":
        """Independent registry with the same converters."""
        clone = ConverterRegistry(self.list_delimiter, builtins=False)
        with self._lock:
            clone._converters = dict(self._converters)
        return clone
