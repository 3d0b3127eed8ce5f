"""gopls subprocess client.

Cross-file analysis (references, implementers, call hierarchy) and renames
are delegated to gopls. The engine depends only on the
:class:`CodeIntelligence` protocol so tests can substitute a stub.
"""

from __future__ import annotations

import os
import subprocess
from typing import Protocol

import structlog

from goinspect.config.models import GoplsConfig
from goinspect.core.errors import ExternalToolError
from goinspect.parsing.position import Position

log = structlog.get_logger(__name__)


class CodeIntelligence(Protocol):
    """Code intelligence backend operating on resolved positions."""

    def references(self, position: Position) -> str:
        """Newline-delimited ``path:line:startCol-endCol`` locations."""
        ...

    def implementers(self, position: Position) -> str:
        """Newline-delimited locations of types implementing an interface."""
        ...

    def call_hierarchy(self, position: Position) -> str:
        """Free-form call hierarchy text, shown verbatim."""
        ...

    def rename(self, position: Position, new_name: str) -> None:
        """Rename the identifier at position across the workspace, in place.

        Raises:
            ExternalToolError: On any failure.
        """
        ...


class GoplsClient:
    """Runs one gopls process per request. No retry and no cancellation."""

    def __init__(self, config: GoplsConfig | None = None) -> None:
        self._config = config or GoplsConfig()

    @property
    def binary(self) -> str:
        return self._config.binary

    def references(self, position: Position) -> str:
        return self._run("references", str(position), cwd=_dir_of(position))

    def implementers(self, position: Position) -> str:
        return self._run("implementation", str(position), cwd=_dir_of(position))

    def call_hierarchy(self, position: Position) -> str:
        return self._run("call_hierarchy", str(position), cwd=_dir_of(position))

    def rename(self, position: Position, new_name: str) -> None:
        output = self._run("rename", "-w", str(position), new_name, cwd=_dir_of(position))
        if output:
            log.warning("gopls_rename_unexpected_output", position=str(position), output=output)
            raise ExternalToolError.failure("gopls", "rename", output)

    def _run(self, command: str, *args: str, cwd: str) -> str:
        argv = [self._config.binary, command, *args]
        log.debug("gopls_command_start", command=command, args=list(args), cwd=cwd)
        try:
            result = subprocess.run(
                argv,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self._config.timeout_sec,
            )
        except FileNotFoundError as e:
            log.warning("gopls_not_found", binary=self._config.binary)
            raise ExternalToolError.failure(
                "gopls", command, f"executable not found: {self._config.binary}"
            ) from e
        except subprocess.TimeoutExpired as e:
            log.warning("gopls_command_timeout", command=command, timeout=self._config.timeout_sec)
            raise ExternalToolError.failure(
                "gopls", command, f"timed out after {self._config.timeout_sec}s"
            ) from e

        output = (result.stdout + result.stderr).strip()
        if result.returncode != 0:
            log.warning(
                "gopls_command_failed",
                command=command,
                exit_code=result.returncode,
                output=output,
            )
            reason = f"exit status {result.returncode}"
            if output:
                reason = f"{reason} ({output})"
            raise ExternalToolError.failure("gopls", command, reason)

        log.debug("gopls_command_complete", command=command, output_len=len(output))
        return result.stdout.strip()


def _dir_of(position: Position) -> str:
    return os.path.dirname(position.path)
