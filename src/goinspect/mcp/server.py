"""FastMCP server exposing the inspect and rename tools."""

from __future__ import annotations

import asyncio
import time

import structlog
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from goinspect.analysis.ops import InspectionEngine
from goinspect.core.errors import InspectorError
from goinspect.core.logging import clear_request_id, set_request_id

log = structlog.get_logger(__name__)

INSPECT_DESCRIPTION = (
    "Inspect a Go file, package or symbol. Targets: 'file.go' (whole file), "
    "'file.go:42' (declaration at line), 'file.go:42:Name' or 'file.go:Name' "
    "(named declaration), 'example.com/mod/pkg' or './pkg' (whole package), "
    "'./pkg:Name' (named declaration in a package)."
)


def run_inspect(
    engine: InspectionEngine,
    path: str,
    workspace_dir: str,
    only_exported: bool | None = None,
) -> str:
    """Run an inspection, converting failures into tool errors."""
    set_request_id()
    start = time.monotonic()
    log.info("tool_start", tool="inspect", target=path)
    try:
        result = engine.inspect(path, workspace_dir, only_exported=only_exported)
        log.info(
            "tool_complete",
            tool="inspect",
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        return result
    except InspectorError as e:
        log.info("tool_failed", tool="inspect", error=e.to_dict())
        raise ToolError(f"Error inspecting symbol: {e.message}") from e
    finally:
        clear_request_id()


def run_rename(
    engine: InspectionEngine,
    file_path: str,
    line_number: int,
    old_name: str,
    new_name: str,
) -> str:
    """Run a rename, converting failures into tool errors."""
    set_request_id()
    log.info("tool_start", tool="rename", file_path=file_path, line=line_number)
    try:
        return engine.rename(file_path, line_number, old_name, new_name)
    except InspectorError as e:
        log.info("tool_failed", tool="rename", error=e.to_dict())
        raise ToolError(f"Error renaming symbol: {e.message}") from e
    finally:
        clear_request_id()


def create_mcp_server(engine: InspectionEngine) -> FastMCP:
    """Create a FastMCP server bound to one engine (and its parse cache)."""
    mcp = FastMCP(
        "goinspect",
        instructions="Go source inspection: declarations, scopes, references and renames.",
    )

    @mcp.tool(description=INSPECT_DESCRIPTION)
    async def inspect(
        path: str = Field(..., description="Target: file, file:line[:symbol] or package[:symbol]"),
        workspace_dir: str = Field(..., description="Absolute path of the workspace root"),
        only_exported: bool | None = Field(
            None, description="Show only exported declarations (default: from config)"
        ),
    ) -> str:
        return await asyncio.to_thread(run_inspect, engine, path, workspace_dir, only_exported)

    @mcp.tool(description="Rename a Go symbol throughout the workspace using gopls.")
    async def rename(
        file_path: str = Field(..., description="Path to the Go file containing the symbol"),
        line_number: int = Field(..., description="Line number where the symbol appears"),
        old_name: str = Field(..., description="Current name of the symbol"),
        new_name: str = Field(..., description="New name for the symbol"),
    ) -> str:
        return await asyncio.to_thread(
            run_rename, engine, file_path, line_number, old_name, new_name
        )

    log.info("mcp_server_created", tool_count=2)
    return mcp
