"""
Properties file source.

This module provides the PropertiesFileSource class, reading ``key=value``
files with optional named contexts:

```ini
# shared by every context
[Default]
db.host = localhost
db.port = 5432

[Production]
db.host = db.internal
```

When a file contains at least one ``[Section]`` header it is sectioned: the
``[Default]`` section is loaded first and the section named by ``context``
(matched case-insensitively) overrides it. Lines outside these two sections
are ignored. A file without headers is a plain properties file.
"""

import logging
from pathlib import Path

from ..errors import SourceSyntaxError
from .file import FileSource

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT = "Default"

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _unescape(text: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\\" and i + 1 < len(text):
            nxt = text[i + 1]
            if nxt == "u" and i + 6 <= len(text):
                try:
                    out.append(chr(int(text[i + 2 : i + 6], 16)))
                    i += 6
                    continue
                except ValueError:
                    pass
            out.append(_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        out.append(char)
        i += 1
    return "".join(out)


def _find_separator(line: str) -> int:
    """Index of the first unescaped ``=`` or ``:``, or -1."""
    i = 0
    while i < len(line):
        if line[i] == "\\":
            i += 2
            continue
        if line[i] in "=:":
            return i
        i += 1
    return -1


def _ends_with_continuation(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _logical_lines(text: str) -> list[tuple[int, str]]:
    """Join backslash-continued lines. Returns (first line number, content) pairs."""
    result: list[tuple[int, str]] = []
    buffer: list[str] = []
    start = 0
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.lstrip() if buffer else raw
        if not buffer:
            start = number
            stripped = line.strip()
            if not stripped or stripped[0] in "#!":
                result.append((number, ""))
                continue
        if _ends_with_continuation(line):
            buffer.append(line[:-1])
            continue
        buffer.append(line)
        result.append((start, "".join(buffer)))
        buffer = []
    if buffer:
        result.append((start, "".join(buffer)))
    return result


def _is_section(line: str) -> bool:
    return line.startswith("[") and line.endswith("]")


class PropertiesFileSource(FileSource):
    """
    Source backed by a properties file.

    Args:
        path: File to read.
        context: Section to apply on top of ``[Default]`` in sectioned files.
        optional: Treat a missing file as an empty source.
        encoding: File encoding.
    """

    def __init__(
        self,
        path: str | Path,
        context: str | None = None,
        optional: bool = False,
        encoding: str = "utf-8",
    ):
        self.context = context
        super().__init__(path, optional=optional, encoding=encoding)

    def _parse_entry(self, number: int, line: str) -> tuple[str, str]:
        index = _find_separator(line)
        if index < 0:
            raise SourceSyntaxError(f"Unparsable line: [{line.strip()}]", str(self.path), number)
        key = _unescape(line[:index].strip())
        if not key:
            raise SourceSyntaxError(f"Missing key: [{line.strip()}]", str(self.path), number)
        return key, _unescape(line[index + 1 :].strip())

    def _parse(self, text: str) -> dict[str, str]:
        entries: list[tuple[str | None, str, str]] = []
        sectioned = False
        section: str | None = None

        for number, line in _logical_lines(text):
            line = line.strip()
            if not line:
                continue
            if _is_section(line):
                sectioned = True
                section = line[1:-1].strip().lower()
                continue
            key, value = self._parse_entry(number, line)
            entries.append((section, key, value))

        if not sectioned:
            return {key: value for _, key, value in entries}

        values = {key: value for sec, key, value in entries if sec == DEFAULT_CONTEXT.lower()}
        if self.context and self.context.lower() != DEFAULT_CONTEXT.lower():
            wanted = self.context.lower()
            values.update({key: value for sec, key, value in entries if sec == wanted})
        logger.debug(f"Applied context {self.context or DEFAULT_CONTEXT} from {self.path}")
        return values

    @property
    def origin(self) -> str:
        if self.context:
            return f"{self.path}[{self.context}]"
        return str(self.path)

    def reload(self) -> "PropertiesFileSource":
        return PropertiesFileSource(
            self.path, context=self.context, optional=self.optional, encoding=self.encoding
        )
