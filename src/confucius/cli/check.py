import json

import click

from confucius.cli.utils import build_resolver, configure_logging, output_error, resolver_options
from confucius.core.config import Failure


@click.command(name="check")
@click.argument("keys", nargs=-1, required=True)
@click.option("--type", "type_tag", help="Type every key must convert to")
@resolver_options
@click.pass_context
def check_keys(
    ctx: click.Context,
    keys: tuple[str, ...],
    type_tag: str | None,
    config_path: str | None,
    source_paths: tuple[str, ...],
    context: str | None,
    json_output: bool,
    debug: bool,
) -> None:
    """Check that required keys resolve.

    Every key is checked and every failure is reported. The exit code is 1
    when at least one key fails.

    Examples:
        confucius check db.url db.user --source app.properties
        confucius check port timeout --type integer
    """
    configure_logging(debug)

    try:
        resolver = build_resolver(config_path, source_paths, context)
        results = {key: resolver.resolve(key, type_tag) for key in keys}
    except Exception as e:
        output_error(e, json_output, debug)
        return

    failures = {key: r for key, r in results.items() if isinstance(r, Failure)}

    if json_output:
        payload = {
            "status": "error" if failures else "ok",
            "checked": list(keys),
            "failures": [failure.to_dict() for failure in failures.values()],
        }
        click.echo(json.dumps(payload, indent=2))
    else:
        for key in keys:
            if key in failures:
                click.echo(f"  ✗ {key}")
                click.echo(f"    Error: {failures[key].message}")
            else:
                click.echo(f"  ✓ {key}")
        click.echo(f"\n{len(keys)} keys checked, {len(failures)} failed")

    if failures:
        ctx.exit(1)
