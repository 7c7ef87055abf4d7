"""Loader for resolver settings.

This module loads ResolverSettingsModel instances from YAML files and builds
source adapters from their models.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from .converters import DEFAULT_LIST_DELIMITER
from .models import (
    DotenvSourceModel,
    EnvSourceModel,
    MapSourceModel,
    PropertiesSourceModel,
    ResolverSettingsModel,
    SourceModel,
    YamlSourceModel,
)
from .sources import (
    DotenvFileSource,
    EnvSource,
    MapSource,
    PropertiesFileSource,
    SourceAdapter,
    YamlFileSource,
)

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CONFUCIUS_CONFIG"

# File suffixes understood by source_for_path
SUFFIX_TYPES = {
    ".properties": "properties",
    ".env": "dotenv",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "yaml",
}


def load_settings(config_path: Path | None = None) -> ResolverSettingsModel:
    """Load resolver settings from a YAML file.

    Args:
        config_path: Optional path to the settings file.
                    If not provided, looks for:
                    1. CONFUCIUS_CONFIG environment variable
                    2. ~/.confucius/config.yaml
                    3. ./confucius.yaml

    Returns:
        ResolverSettingsModel. Relative source paths are resolved against the
        directory of the settings file.

    Raises:
        FileNotFoundError: If an explicitly requested file doesn't exist
        ValueError: If the file is not valid YAML or the settings are invalid
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            config_path = Path(env_path)
        else:
            candidates = [Path.home() / ".confucius" / "config.yaml", Path.cwd() / "confucius.yaml"]
            for candidate in candidates:
                if candidate.exists():
                    config_path = candidate
                    break

            if config_path is None:
                logger.info("No settings file found, using environment variables only")
                return ResolverSettingsModel()

    if not config_path.exists():
        raise FileNotFoundError(f"Settings file not found at {config_path}")

    logger.debug(f"Loading settings from: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            raw_settings = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML settings file {config_path}: {e}") from e

    if not raw_settings:
        logger.info("Empty settings file, using default settings")
        return ResolverSettingsModel()

    if not isinstance(raw_settings, dict):
        raise ValueError(f"Settings file {config_path} must contain a mapping")

    try:
        settings = ResolverSettingsModel.model_validate(raw_settings)
    except ValidationError as e:
        raise ValueError(f"Invalid settings in {config_path}: {e}") from e

    return _anchor_paths(settings, config_path.parent)


def _anchor_paths(settings: ResolverSettingsModel, base_dir: Path) -> ResolverSettingsModel:
    """Resolve relative source paths against ``base_dir``.

    Since models are frozen, updated copies are created.
    """
    sources = []
    for source in settings.sources:
        path = getattr(source, "path", None)
        if path is not None and not Path(path).is_absolute():
            source = source.model_copy(update={"path": str(base_dir / path)})
        sources.append(source)
    return settings.model_copy(update={"sources": sources})


def build_source(
    model: SourceModel, list_delimiter: str = DEFAULT_LIST_DELIMITER
) -> SourceAdapter:
    """Create the source adapter described by a source model.

    ``list_delimiter`` is used to join YAML lists into single values.
    """
    if isinstance(model, EnvSourceModel):
        return EnvSource(prefix=model.prefix, strip_prefix=model.strip_prefix, origin=model.origin)
    if isinstance(model, MapSourceModel):
        return MapSource(model.values, origin=model.origin)
    if isinstance(model, PropertiesSourceModel):
        return PropertiesFileSource(
            model.path, context=model.context, optional=model.optional, encoding=model.encoding
        )
    if isinstance(model, DotenvSourceModel):
        return DotenvFileSource(model.path, optional=model.optional, encoding=model.encoding)
    if isinstance(model, YamlSourceModel):
        return YamlFileSource(
            model.path,
            optional=model.optional,
            encoding=model.encoding,
            list_delimiter=list_delimiter,
        )
    raise TypeError(f"Unsupported source model: {type(model).__name__}")


def build_sources(settings: ResolverSettingsModel) -> list[SourceAdapter]:
    """Build the sources of ``settings`` in precedence order."""
    if not settings.sources:
        return [EnvSource()]
    return [build_source(model, settings.list_delimiter) for model in settings.sources]


def source_for_path(
    path: str | Path,
    context: str | None = None,
    list_delimiter: str = DEFAULT_LIST_DELIMITER,
) -> SourceAdapter:
    """Create a file source, choosing its type from the file suffix.

    Files named ``.env`` or ``something.env`` are dotenv files.

    Raises:
        ValueError: If the suffix is not recognised
    """
    path = Path(path)
    suffix = ".env" if path.name == ".env" else path.suffix.lower()
    source_type = SUFFIX_TYPES.get(suffix)
    if source_type is None:
        raise ValueError(
            f"Unsupported configuration file type: {path} "
            f"(expected one of {', '.join(sorted(SUFFIX_TYPES))})"
        )
    if source_type == "properties":
        return PropertiesFileSource(path, context=context)
    if source_type == "dotenv":
        return DotenvFileSource(path)
    return YamlFileSource(path, list_delimiter=list_delimiter)
