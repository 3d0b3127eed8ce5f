"""goinspect serve command - run the MCP server."""

from pathlib import Path

import click
import structlog

from goinspect.cli.utils import build_engine, load_cli_config
from goinspect.core.logging import configure_logging
from goinspect.mcp.server import create_mcp_server

log = structlog.get_logger(__name__)


@click.command()
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http"]),
    default=None,
    help="MCP transport (default: from config, stdio)",
)
@click.option("--host", default=None, help="Bind address for http transport")
@click.option("--port", type=int, default=None, help="Port for http transport")
@click.pass_context
def serve_command(
    ctx: click.Context, transport: str | None, host: str | None, port: int | None
) -> None:
    """Serve the inspect and rename tools over MCP."""
    config = load_cli_config(Path.cwd())

    # -v on the group overrides the configured level, outputs stay as configured
    logging_config = config.logging
    if ctx.obj and ctx.obj.get("verbose"):
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)

    server_config = config.server
    transport = transport or server_config.transport
    host = host or server_config.host
    port = port if port is not None else server_config.port

    mcp = create_mcp_server(build_engine(config))

    log.info("server_starting", transport=transport, host=host, port=port)
    if transport == "http":
        mcp.run(transport="http", host=host, port=port)
    else:
        mcp.run(transport="stdio")
