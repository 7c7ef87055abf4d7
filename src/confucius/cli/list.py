import json
from typing import Any

import click

from confucius.cli.utils import build_resolver, configure_logging, output_error, resolver_options
from confucius.core.config import Failure, ResolvedEntry


def format_entries(entries: dict[str, ResolvedEntry | Failure], show_origin: bool) -> str:
    """Format resolved entries for human-readable output"""
    if not entries:
        return "No configuration keys found"

    output = []
    failed = 0
    for key, entry in entries.items():
        if isinstance(entry, Failure):
            failed += 1
            output.append(f"✗ {key}: {entry.message}")
            continue
        line = f"{key} = {entry.value}"
        if show_origin:
            line += f"    ({entry.origin})"
        output.append(line)

    if failed:
        output.append("")
        output.append(f"{len(entries)} keys, {failed} failed")
    return "\n".join(output)


@click.command(name="list")
@click.option("--show-origin", is_flag=True, help="Show which source supplied each value")
@resolver_options
def list_keys(
    show_origin: bool,
    config_path: str | None,
    source_paths: tuple[str, ...],
    context: str | None,
    json_output: bool,
    debug: bool,
) -> None:
    """List every key with its resolved value.

    Keys that fail to resolve are listed with the reason.

    Examples:
        confucius list --source app.properties --source .env
        confucius list --show-origin
        confucius list --json-output
    """
    configure_logging(debug)

    try:
        resolver = build_resolver(config_path, source_paths, context)
        entries = resolver.snapshot()
    except Exception as e:
        output_error(e, json_output, debug)
        return

    if json_output:
        result: list[dict[str, Any]] = [entry.to_dict() for entry in entries.values()]
        click.echo(json.dumps({"status": "ok", "result": result}, indent=2))
    else:
        click.echo(format_entries(entries, show_origin))
