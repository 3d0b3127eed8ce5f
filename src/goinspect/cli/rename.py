"""goinspect rename command - rename a symbol through gopls."""

from pathlib import Path

import click

from goinspect.cli.utils import build_engine, load_cli_config
from goinspect.core.errors import InspectorError


@click.command()
@click.argument("file_path", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("line", type=int)
@click.argument("old_name")
@click.argument("new_name")
def rename_command(file_path: Path, line: int, old_name: str, new_name: str) -> None:
    """Rename OLD_NAME at FILE_PATH:LINE to NEW_NAME across the workspace."""
    config = load_cli_config(file_path.parent.resolve())
    engine = build_engine(config)

    try:
        message = engine.rename(str(file_path), line, old_name, new_name)
    except InspectorError as e:
        raise click.ClickException(e.message) from e

    click.echo(message)
