import json
import logging
import os
import traceback
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from confucius.core.config import (
    ConfigurationError,
    Resolver,
    SourceChain,
    build_sources,
    load_settings,
    source_for_path,
)


def get_env_flag(env_var: str, default: bool = False) -> bool:
    """Get a boolean flag from an environment variable.

    Args:
        env_var: Name of the environment variable
        default: Default value if environment variable is not set

    Returns:
        True if the environment variable is set to "1", "true", or "yes" (case insensitive)
        False otherwise
    """
    value = os.environ.get(env_var, "").lower()
    return value in ("1", "true", "yes") if value else default


def configure_logging(debug: bool = False) -> None:
    """Configure logging for all modules.

    Args:
        debug: Whether to enable debug logging
    """
    if not debug:
        debug = get_env_flag("CONFUCIUS_DEBUG")

    log_level = logging.DEBUG if debug else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers to avoid duplicate messages
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(log_level)
    formatter = logging.Formatter("%(levelname)s:%(name)s:%(message)s")
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    for logger_name in logging.root.manager.loggerDict:
        logger = logging.getLogger(logger_name)
        logger.setLevel(log_level)
        logger.propagate = True


def format_error(error: Exception, debug: bool = False) -> dict[str, Any]:
    """Format an error for output.

    Configuration errors include their structured failure payload.
    """
    error_info: dict[str, Any] = {"error": str(error)}

    if isinstance(error, ConfigurationError):
        error_info["failure"] = error.to_dict()

    if debug:
        error_info["traceback"] = traceback.format_exc()
        error_info["type"] = error.__class__.__name__

    return error_info


def output_result(result: Any, json_output: bool = False, debug: bool = False) -> None:
    """Output a result in either JSON or human-readable format.

    Args:
        result: The result to output
        json_output: Whether to output in JSON format
        debug: Whether to include debug information
    """
    if json_output:
        click.echo(json.dumps({"status": "ok", "result": result}, indent=2, default=str))
    else:
        if isinstance(result, list):
            for row in result:
                click.echo(format_value(row))
        else:
            click.echo(format_value(result))


def output_error(error: Exception, json_output: bool = False, debug: bool = False) -> None:
    """Output an error in either JSON or human-readable format, then abort."""
    error_info = format_error(error, debug)

    if json_output:
        click.echo(json.dumps({"status": "error", **error_info}, indent=2, default=str))
    else:
        click.echo(f"Error: {error_info['error']}", err=True)
        if debug and "traceback" in error_info:
            click.echo("\nTraceback:", err=True)
            click.echo(error_info["traceback"], err=True)

    raise click.Abort()


def format_value(value: Any) -> str:
    """Render a resolved value the way it would be written in a config file."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_resolver(
    config_path: str | None = None,
    source_paths: tuple[str, ...] = (),
    context: str | None = None,
) -> Resolver:
    """Build a resolver from CLI options.

    Files given with ``--source`` take precedence over the sources of the
    settings file, in the order they were given.
    """
    settings = load_settings(Path(config_path) if config_path else None)
    extra = [
        source_for_path(path, context=context, list_delimiter=settings.list_delimiter)
        for path in source_paths
    ]
    if extra and not settings.sources:
        sources = extra
    else:
        sources = extra + build_sources(settings)
    return Resolver(
        SourceChain(sources),
        placeholder=settings.placeholder,
        list_delimiter=settings.list_delimiter,
        cache=settings.cache,
    )


_RESOLVER_OPTIONS = [
    click.option("--config", "config_path", type=click.Path(), help="Resolver settings file"),
    click.option(
        "--source",
        "source_paths",
        multiple=True,
        type=click.Path(),
        help="Configuration file (.properties, .env, .yaml, .json); repeatable, first wins",
    ),
    click.option("--context", help="Context section to apply in properties files"),
    click.option("--json-output", is_flag=True, help="Output in JSON format"),
    click.option("--debug", is_flag=True, help="Show detailed debug information"),
]


def resolver_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that builds a resolver."""
    for option in reversed(_RESOLVER_OPTIONS):
        func = option(func)
    return func
