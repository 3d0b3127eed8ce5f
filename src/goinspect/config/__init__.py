"""Config module exports."""

from goinspect.config.loader import load_config
from goinspect.config.models import (
    GoInspectConfig,
    GoplsConfig,
    GoToolConfig,
    InspectConfig,
    LoggingConfig,
    LogOutputConfig,
    ServerConfig,
)

__all__ = [
    "load_config",
    "GoInspectConfig",
    "GoplsConfig",
    "GoToolConfig",
    "InspectConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ServerConfig",
]
