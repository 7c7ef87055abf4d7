"""
Sources subpackage.

This subpackage contains the source adapter contract and its built-in
implementations for different origins of configuration.
"""

from .base import SourceAdapter
from .dotenv import DotenvFileSource
from .env import EnvSource
from .file import FileSource
from .mapping import MapSource
from .properties import PropertiesFileSource
from .yaml_file import YamlFileSource

__all__ = [
    "SourceAdapter",
    "FileSource",
    "MapSource",
    "EnvSource",
    "PropertiesFileSource",
    "DotenvFileSource",
    "YamlFileSource",
]
