"""go-inspector CLI - goinspect command."""

import click

from goinspect import __version__
from goinspect.cli.inspect import inspect_command
from goinspect.cli.rename import rename_command
from goinspect.cli.serve import serve_command
from goinspect.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="goinspect")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """go-inspector - Go source inspection for AI coding agents."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(inspect_command, name="inspect")
cli.add_command(rename_command, name="rename")
cli.add_command(serve_command, name="serve")


if __name__ == "__main__":
    cli()
