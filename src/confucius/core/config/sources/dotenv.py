"""
Dotenv file source.

Parses ``.env`` files with python-dotenv:

* blank and comment lines
* ``export VAR=value``
* quoted values (single or double), including escapes and multiple lines
* inline ``# comments`` after a value

Values are taken literally. ``${VAR}`` references are left in place for the
resolver's placeholder substitution instead of being expanded by dotenv.
"""

import io

from dotenv import dotenv_values
from dotenv.parser import parse_stream

from ..errors import SourceSyntaxError
from .file import FileSource


class DotenvFileSource(FileSource):
    """Source backed by a ``.env`` file. A bare ``KEY`` line defines an empty value."""

    def _parse(self, text: str) -> dict[str, str]:
        for binding in parse_stream(io.StringIO(text)):
            if binding.error:
                raise SourceSyntaxError(
                    f"Unparsable line: [{binding.original.string.strip()}]",
                    str(self.path),
                    binding.original.line,
                )

        values = dotenv_values(stream=io.StringIO(text), interpolate=False)
        return {key: value or "" for key, value in values.items()}
