"""go-inspector error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Target resolution
- 4xxx: Parsing
- 5xxx: Symbol lookup
- 6xxx: External tools (gopls, go)
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Target (3xxx)
    INVALID_TARGET = 3001
    FILE_NOT_FOUND = 3002
    MODULE_NOT_FOUND = 3003

    # Parse (4xxx)
    PARSE_FAILURE = 4001

    # Symbol (5xxx)
    SYMBOL_NOT_FOUND = 5001
    POSITION_NOT_FOUND = 5002

    # External tools (6xxx)
    EXTERNAL_TOOL_FAILURE = 6001

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class InspectorError(Exception):
    """Base error with structured context for tool responses."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'FILE_NOT_FOUND')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON/MCP responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(InspectorError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class TargetError(InspectorError):
    """Inspection target could not be parsed or located."""

    @classmethod
    def invalid(cls, reason: str, **details: Any) -> "TargetError":
        return cls(
            code=ErrorCode.INVALID_TARGET,
            message=reason,
            details=details,
        )

    @classmethod
    def file_not_found(cls, path: str, searched: str | None = None) -> "TargetError":
        message = f"File not found: {path}"
        if searched:
            message += f" (searched relative to {searched})"
        return cls(
            code=ErrorCode.FILE_NOT_FOUND,
            message=message,
            details={"path": path, "searched": searched},
        )

    @classmethod
    def module_not_found(cls, path: str, reason: str) -> "TargetError":
        return cls(
            code=ErrorCode.MODULE_NOT_FOUND,
            message=f"Failed to resolve package {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def no_source_files(cls, path: str) -> "TargetError":
        return cls(
            code=ErrorCode.MODULE_NOT_FOUND,
            message=f"Package has no eligible Go source files: {path}",
            details={"path": path},
        )


class ParseError(InspectorError):
    """A file produced no syntax tree at all."""

    @classmethod
    def failure(cls, path: str, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_FAILURE,
            message=f"Failed to parse file {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class SymbolError(InspectorError):
    """A declaration or token could not be located."""

    @classmethod
    def not_found(cls, symbol: str, where: str) -> "SymbolError":
        return cls(
            code=ErrorCode.SYMBOL_NOT_FOUND,
            message=f"Symbol '{symbol}' not found in {where}",
            details={"symbol": symbol, "where": where},
        )

    @classmethod
    def no_symbol_at_line(cls, line: int, path: str) -> "SymbolError":
        return cls(
            code=ErrorCode.SYMBOL_NOT_FOUND,
            message=f"No symbol found at line {line} in {path}",
            details={"line": line, "path": path},
        )

    @classmethod
    def position_not_found(cls, symbol: str, line: int, reason: str) -> "SymbolError":
        return cls(
            code=ErrorCode.POSITION_NOT_FOUND,
            message=f"Symbol '{symbol}' not found at line {line}: {reason}",
            details={"symbol": symbol, "line": line, "reason": reason},
        )


class ExternalToolError(InspectorError):
    """An external tool (gopls, go) failed or is unavailable."""

    @classmethod
    def failure(cls, tool: str, command: str, reason: str) -> "ExternalToolError":
        return cls(
            code=ErrorCode.EXTERNAL_TOOL_FAILURE,
            message=f"{tool} {command} failed: {reason}",
            retryable=True,
            details={"tool": tool, "command": command, "reason": reason},
        )


class InternalError(InspectorError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
