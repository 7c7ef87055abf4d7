import click

from confucius.cli.utils import (
    build_resolver,
    configure_logging,
    output_error,
    output_result,
    resolver_options,
)
from confucius.core.config import Failure, MissingKey


@click.command(name="get")
@click.argument("key")
@click.option(
    "--type",
    "type_tag",
    help="Convert the value: string, boolean, integer, float, char or list",
)
@click.option(
    "--default",
    help="Value used when no source defines the key, converted like a configured value",
)
@resolver_options
def get_value(
    key: str,
    type_tag: str | None,
    default: str | None,
    config_path: str | None,
    source_paths: tuple[str, ...],
    context: str | None,
    json_output: bool,
    debug: bool,
) -> None:
    """Print the resolved value of a key.

    Placeholders are substituted and the value is converted when --type is
    given. A missing key is an error unless --default is set.

    Examples:
        confucius get db.url --source app.properties
        confucius get port --type integer --default 8080
        confucius get hosts --type list --json-output
    """
    configure_logging(debug)

    try:
        resolver = build_resolver(config_path, source_paths, context)
        value = resolver.resolve(key, type_tag)
        if isinstance(value, MissingKey) and default is not None:
            # The default goes through the same converter as a configured value
            if type_tag is None:
                value = default
            else:
                value = resolver.converters.convert(key, default, type_tag)
        if isinstance(value, Failure):
            value.raise_error()
        output_result(value, json_output, debug)
    except Exception as e:
        output_error(e, json_output, debug)
