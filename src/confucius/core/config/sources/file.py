"""
Common base for sources read from a file.
"""

import logging
from abc import abstractmethod
from collections.abc import Iterable
from pathlib import Path
from types import MappingProxyType

from .base import SourceAdapter

logger = logging.getLogger(__name__)


class FileSource(SourceAdapter):
    """
    Source whose snapshot is parsed from a file when the adapter is created.

    Subclasses implement `_parse`, turning the file text into a flat mapping.
    A missing file raises ``FileNotFoundError`` unless ``optional`` is set, in
    which case the source is empty.
    """

    def __init__(self, path: str | Path, optional: bool = False, encoding: str = "utf-8"):
        self.path = Path(path)
        self.optional = optional
        self.encoding = encoding

        if not self.path.exists():
            if not optional:
                raise FileNotFoundError(f"Configuration file not found: {self.path}")
            logger.debug(f"Optional configuration file {self.path} not found, source is empty")
            values: dict[str, str] = {}
        else:
            values = self._parse(self.path.read_text(encoding=encoding))
            logger.debug(f"Loaded {len(values)} keys from {self.path}")

        self._values = MappingProxyType(values)

    @abstractmethod
    def _parse(self, text: str) -> dict[str, str]:
        """Parse the file content into a flat key/value mapping."""
        pass

    @property
    def origin(self) -> str:
        return str(self.path)

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def keys(self) -> Iterable[str]:
        return self._values.keys()

    def reload(self) -> "FileSource":
        return type(self)(self.path, optional=self.optional, encoding=self.encoding)
