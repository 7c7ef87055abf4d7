"""
YAML file source.

Nested mappings are flattened into dot-separated keys:

```yaml
database:
  host: localhost
  port: 5432
  replicas: [db1, db2]
```

exposes ``database.host = "localhost"``, ``database.port = "5432"`` and
``database.replicas = "db1,db2"``. JSON files are read the same way, since
YAML is a superset of JSON.
"""

from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import yaml

from ..converters import DEFAULT_LIST_DELIMITER, join_list
from ..errors import SourceSyntaxError
from .file import FileSource


def _render_scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


class YamlFileSource(FileSource):
    """
    Source backed by a YAML (or JSON) document with a mapping at its root.

    Scalars are rendered as strings (``true``/``false`` for booleans, the empty
    string for null). Lists of scalars are joined with ``list_delimiter``,
    escaping the delimiter and backslashes inside elements, so a ``list``
    converter using the same delimiter gives back the original elements.
    """

    def __init__(
        self,
        path: str | Path,
        optional: bool = False,
        encoding: str = "utf-8",
        list_delimiter: str = DEFAULT_LIST_DELIMITER,
    ):
        self.list_delimiter = list_delimiter
        super().__init__(path, optional=optional, encoding=encoding)

    def reload(self) -> "YamlFileSource":
        return YamlFileSource(
            self.path,
            optional=self.optional,
            encoding=self.encoding,
            list_delimiter=self.list_delimiter,
        )

    def _parse(self, text: str) -> dict[str, str]:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise SourceSyntaxError(f"Invalid YAML: {e}", str(self.path)) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SourceSyntaxError(
                f"Config root must be a mapping, got {type(data).__name__}", str(self.path)
            )

        result: dict[str, str] = {}
        self._flatten(data, "", result)
        return result

    def _flatten(self, data: dict[Any, Any], prefix: str, out: dict[str, str]) -> None:
        for key, value in data.items():
            name = f"{prefix}{key}"
            if isinstance(value, dict):
                self._flatten(value, f"{name}.", out)
            elif isinstance(value, list):
                if any(isinstance(item, (dict, list)) for item in value):
                    raise SourceSyntaxError(
                        f"Key '{name}' holds a list of containers; only lists of scalars are supported",
                        str(self.path),
                    )
                out[name] = join_list(
                    [_render_scalar(item) for item in value], self.list_delimiter
                )
            else:
                out[name] = _render_scalar(value)
