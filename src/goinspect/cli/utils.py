"""CLI utilities."""

from pathlib import Path

import click

from goinspect.analysis.ops import InspectionEngine
from goinspect.config import GoInspectConfig, load_config
from goinspect.core.errors import ConfigError


def load_cli_config(workspace: Path | None = None) -> GoInspectConfig:
    """Load configuration, reporting errors as CLI errors.

    Raises:
        click.ClickException: If a config file is malformed or invalid.
    """
    try:
        return load_config(workspace)
    except ConfigError as e:
        raise click.ClickException(e.message) from e


def build_engine(config: GoInspectConfig) -> InspectionEngine:
    return InspectionEngine(config=config)
