"""Confucius - layered configuration for Python applications.

Confucius builds one view of configuration out of ordered sources (environment
variables, properties, dotenv and YAML files, in-memory overrides), resolves
``${placeholder}`` references between entries and converts values to typed
results, reporting exactly which entries are missing or malformed.

## Quick Start

```python
from confucius import EnvSource, Failure, PropertiesFileSource, Resolver

resolver = Resolver([
    EnvSource(),                                  # highest precedence
    PropertiesFileSource("app.properties"),
])

port = resolver.require("port", int)
debug = resolver.get("debug", bool, default=False)

result = resolver.resolve("greeting")
if isinstance(result, Failure):
    print(result.message)
```
"""

from confucius.core.config import (
    CircularPlaceholder,
    CircularPlaceholderError,
    ConfigurationError,
    ConfuciusError,
    ConversionError,
    ConversionFailure,
    ConverterRegistry,
    DotenvFileSource,
    DuplicateConverterError,
    EnvSource,
    Failure,
    InvalidSourceChainError,
    MapSource,
    MissingKey,
    MissingKeyError,
    PlaceholderSyntax,
    ProgrammingError,
    PropertiesFileSource,
    ResolvedEntry,
    Resolver,
    SourceAdapter,
    SourceChain,
    SourceError,
    SourceSyntaxError,
    UnknownConverterError,
    UnresolvedPlaceholder,
    UnresolvedPlaceholderError,
    YamlFileSource,
)
from confucius.core.version import PACKAGE_VERSION as __version__

__all__ = [
    "Resolver",
    "SourceChain",
    "ConverterRegistry",
    "PlaceholderSyntax",
    "SourceAdapter",
    "MapSource",
    "EnvSource",
    "PropertiesFileSource",
    "DotenvFileSource",
    "YamlFileSource",
    "ResolvedEntry",
    "Failure",
    "MissingKey",
    "UnresolvedPlaceholder",
    "CircularPlaceholder",
    "ConversionFailure",
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
    "__version__",
]
