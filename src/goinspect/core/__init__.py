"""Core module exports."""

from goinspect.core.errors import (
    ConfigError,
    ErrorCode,
    ExternalToolError,
    InspectorError,
    InternalError,
    ParseError,
    SymbolError,
    TargetError,
)
from goinspect.core.logging import (
    clear_request_id,
    configure_logging,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "ExternalToolError",
    "InspectorError",
    "InternalError",
    "ParseError",
    "SymbolError",
    "TargetError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_request_id",
    "set_request_id",
]
