"""MCP server module - FastMCP tool registration."""

from goinspect.mcp.server import create_mcp_server, run_inspect, run_rename

__all__ = ["create_mcp_server", "run_inspect", "run_rename"]
