"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (GOINSPECT__SECTION__KEY)
3. Workspace YAML (<workspace>/.goinspect.yaml)
4. Global YAML (~/.config/goinspect/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    GOINSPECT__<SECTION>__<KEY>=<VALUE>

Examples:
    GOINSPECT__LOGGING__LEVEL=DEBUG
    GOINSPECT__GOPLS__BINARY=/usr/local/bin/gopls
    GOINSPECT__GOPLS__TIMEOUT_SEC=30
    GOINSPECT__SERVER__PORT=8080
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        GOINSPECT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every cache hit and gopls call.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class GoplsConfig(BaseModel):
    """gopls invocation settings.

    Env vars:
        GOINSPECT__GOPLS__BINARY: gopls executable (name on PATH or absolute path)
        GOINSPECT__GOPLS__TIMEOUT_SEC: Per-call timeout; unset means wait forever
    """

    binary: str = Field(
        default="gopls",
        description="gopls executable used for references, implementers, "
        "call hierarchy and rename.",
    )
    timeout_sec: float | None = Field(
        default=None,
        description="Per-call timeout in seconds. None waits indefinitely. "
        "RISK: a hung gopls hangs the whole request when unset.",
    )

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v


class GoToolConfig(BaseModel):
    """go toolchain settings (package path resolution).

    Env vars:
        GOINSPECT__GO__BINARY: go executable used for `go list`
    """

    binary: str = Field(
        default="go",
        description="go executable used to resolve import paths outside the workspace module.",
    )


class InspectConfig(BaseModel):
    """Default inspection flags.

    Env vars:
        GOINSPECT__INSPECT__ONLY_EXPORTED: Show only exported declarations
        GOINSPECT__INSPECT__INCLUDE_BODY: Show full function bodies
    """

    only_exported: bool = Field(
        default=False,
        description="Show only exported declarations in file and package output.",
    )
    include_body: bool = Field(
        default=False,
        description="Show full function bodies instead of signatures.",
    )


class ServerConfig(BaseModel):
    """MCP server configuration.

    Env vars:
        GOINSPECT__SERVER__TRANSPORT: stdio or http
        GOINSPECT__SERVER__HOST: Bind address (default: localhost)
        GOINSPECT__SERVER__PORT: Port number (default: 8080)
    """

    transport: Literal["stdio", "http"] = "stdio"
    host: str = Field(
        default="localhost",
        description="Bind address for http transport.",
    )
    port: int = Field(
        default=8080,
        description="Port for http transport.",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not (0 <= v <= 65535):
            raise ValueError(f"Port must be 0-65535, got {v}")
        return v


class GoInspectConfig(BaseModel):
    """Root configuration for go-inspector."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    gopls: GoplsConfig = Field(default_factory=GoplsConfig)
    go: GoToolConfig = Field(default_factory=GoToolConfig)
    inspect: InspectConfig = Field(default_factory=InspectConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
