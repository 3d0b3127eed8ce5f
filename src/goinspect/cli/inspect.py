"""goinspect inspect command - summarize a Go file, package or symbol."""

from pathlib import Path

import click

from goinspect.cli.utils import build_engine, load_cli_config
from goinspect.core.errors import InspectorError


@click.command()
@click.argument("target")
@click.option(
    "-w",
    "--workspace",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace root (default: current directory)",
)
@click.option("--only-exported", is_flag=True, help="Show only exported declarations")
@click.option("--body", "include_body", is_flag=True, help="Show full function bodies")
def inspect_command(
    target: str, workspace: Path | None, only_exported: bool, include_body: bool
) -> None:
    """Inspect a Go target.

    TARGET is a file (main.go), a line or symbol in a file (main.go:42,
    main.go:Run, main.go:42:Run), or a package (./pkg, example.com/mod/pkg)
    optionally followed by :Symbol.
    """
    workspace_root = (workspace or Path.cwd()).resolve()
    config = load_cli_config(workspace_root)
    engine = build_engine(config)

    try:
        output = engine.inspect(
            target,
            str(workspace_root),
            only_exported=only_exported or None,
            include_body=include_body or None,
        )
    except InspectorError as e:
        raise click.ClickException(e.message) from e

    click.echo(output)
