"""Pydantic models for resolver settings.

These models describe how a Resolver is built: its placeholder delimiters,
list delimiter, cache policy and the ordered list of sources. They can be
loaded from a YAML file:

```yaml
placeholder:
  prefix: "${"
  suffix: "}"
list_delimiter: ","
cache: true
sources:            # highest precedence first
  - type: env
    prefix: APP_
    strip_prefix: true
  - type: properties
    path: conf/app.properties
    context: production
  - type: yaml
    path: config.yaml
```
"""

from typing import Annotated, Literal, Union

from pydantic import Field, field_validator

from confucius.models import ConfuciusBaseModel


class PlaceholderSyntax(ConfuciusBaseModel):
    """Delimiters of placeholder tokens.

    Example:
        >>> PlaceholderSyntax(prefix="%{", suffix="}")
    """

    prefix: str = Field(default="${", min_length=1)
    suffix: str = Field(default="}", min_length=1)


class EnvSourceModel(ConfuciusBaseModel):
    """Environment variables, optionally filtered by prefix."""

    type: Literal["env"] = "env"
    prefix: str | None = None
    strip_prefix: bool = False
    origin: str = "env"


class MapSourceModel(ConfuciusBaseModel):
    """Inline key/value pairs."""

    type: Literal["map"] = "map"
    values: dict[str, str] = Field(default_factory=dict)
    origin: str = "memory"


class PropertiesSourceModel(ConfuciusBaseModel):
    """Properties file, with an optional context section."""

    type: Literal["properties"] = "properties"
    path: str
    context: str | None = None
    optional: bool = False
    encoding: str = "utf-8"


class DotenvSourceModel(ConfuciusBaseModel):
    """``.env`` file."""

    type: Literal["dotenv"] = "dotenv"
    path: str
    optional: bool = False
    encoding: str = "utf-8"


class YamlSourceModel(ConfuciusBaseModel):
    """YAML or JSON file flattened to dotted keys."""

    type: Literal["yaml"] = "yaml"
    path: str
    optional: bool = False
    encoding: str = "utf-8"


SourceModel = Annotated[
    Union[
        EnvSourceModel,
        MapSourceModel,
        PropertiesSourceModel,
        DotenvSourceModel,
        YamlSourceModel,
    ],
    Field(discriminator="type"),
]


class ResolverSettingsModel(ConfuciusBaseModel):
    """Root settings of a Resolver.

    Attributes:
        placeholder: Placeholder delimiters
        list_delimiter: Delimiter used by the ``list`` converter
        cache: Whether resolved entries are cached
        sources: Sources in precedence order, highest first. When empty, a
                 single environment source is used.

    Example:
        >>> settings = ResolverSettingsModel(
        ...     sources=[MapSourceModel(values={"port": "8080"})]
        ... )
    """

    placeholder: PlaceholderSyntax = Field(default_factory=PlaceholderSyntax)
    list_delimiter: str = Field(default=",", min_length=1)
    cache: bool = True
    sources: list[SourceModel] = Field(default_factory=list)

    @field_validator("list_delimiter")
    @classmethod
    def _no_escape_in_delimiter(cls, value: str) -> str:
        if "\\" in value:
            raise ValueError("list_delimiter cannot contain a backslash")
        return value
