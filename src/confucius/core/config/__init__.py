"""
Layered configuration resolution.

This package merges ordered configuration sources, substitutes placeholders
between entries and converts values to typed results.

## Main Classes

- `Resolver`: answers lookups over a source chain
- `SourceChain`: ordered, immutable list of sources
- `ConverterRegistry`: type tag to converter mapping
- Sources: `EnvSource`, `MapSource`, `PropertiesFileSource`,
  `DotenvFileSource`, `YamlFileSource`

## Results

- `ResolvedEntry`: substituted value with provenance
- `Failure` subclasses: `MissingKey`, `UnresolvedPlaceholder`,
  `CircularPlaceholder`, `ConversionFailure`
"""

from .chain import SourceChain
from .converters import ConverterRegistry, join_list, split_list
from .errors import (
    CircularPlaceholderError,
    ConfigurationError,
    ConfuciusError,
    ConversionError,
    DuplicateConverterError,
    InvalidSourceChainError,
    MissingKeyError,
    ProgrammingError,
    SourceError,
    SourceSyntaxError,
    UnknownConverterError,
    UnresolvedPlaceholderError,
)
from .failures import (
    CircularPlaceholder,
    ConversionFailure,
    Failure,
    MissingKey,
    ResolvedEntry,
    SourceLookup,
    UnresolvedPlaceholder,
)
from .loader import build_source, build_sources, load_settings, source_for_path
from .models import (
    DotenvSourceModel,
    EnvSourceModel,
    MapSourceModel,
    PlaceholderSyntax,
    PropertiesSourceModel,
    ResolverSettingsModel,
    YamlSourceModel,
)
from .resolver import Resolver
from .sources import (
    DotenvFileSource,
    EnvSource,
    FileSource,
    MapSource,
    PropertiesFileSource,
    SourceAdapter,
    YamlFileSource,
)

__all__ = [
    # Engine
    "Resolver",
    "SourceChain",
    "ConverterRegistry",
    "PlaceholderSyntax",
    "split_list",
    "join_list",
    # Sources
    "SourceAdapter",
    "FileSource",
    "MapSource",
    "EnvSource",
    "PropertiesFileSource",
    "DotenvFileSource",
    "YamlFileSource",
    # Results
    "ResolvedEntry",
    "SourceLookup",
    "Failure",
    "MissingKey",
    "UnresolvedPlaceholder",
    "CircularPlaceholder",
    "ConversionFailure",
    # Errors
    "ConfuciusError",
    "ConfigurationError",
    "MissingKeyError",
    "UnresolvedPlaceholderError",
    "CircularPlaceholderError",
    "ConversionError",
    "ProgrammingError",
    "InvalidSourceChainError",
    "DuplicateConverterError",
    "UnknownConverterError",
    "SourceError",
    "SourceSyntaxError",
    # Settings
    "ResolverSettingsModel",
    "EnvSourceModel",
    "MapSourceModel",
    "PropertiesSourceModel",
    "DotenvSourceModel",
    "YamlSourceModel",
    "load_settings",
    "build_source",
    "build_sources",
    "source_for_path",
]
