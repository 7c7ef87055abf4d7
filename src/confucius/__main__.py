import click

from confucius.cli.check import check_keys
from confucius.cli.get import get_value
from confucius.cli.list import list_keys
from confucius.core.version import PACKAGE_VERSION


@click.group(invoke_without_command=True)
@click.version_option(PACKAGE_VERSION, prog_name="confucius")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Confucius CLI"""
    # Show help when no subcommand is provided
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(get_value)
cli.add_command(list_keys)
cli.add_command(check_keys)


if __name__ == "__main__":
    cli()
