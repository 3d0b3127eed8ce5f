"""Target string parsing and file resolution.

Grammar::

    target := filePath (":" line (":" symbol)?)?
            | packagePath (":" symbol)?

File-shaped targets contain ``.go`` or start with ``/``, ``./`` or ``../``.
For package paths the last ``:`` suffix is only taken as a symbol when it is
an identifier, so ``host:8080``-like suffixes stay part of the path.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from goinspect.analysis.models import InspectTarget
from goinspect.core.errors import TargetError

_IDENT_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_DIGITS_RE = re.compile(r"^\d+(/|$)")
_RELATIVE_PREFIXES = ("./", "../")


def is_file_shaped(target: str) -> bool:
    return ".go" in target or target.startswith(("/", *_RELATIVE_PREFIXES))


def parse_target(target: str) -> InspectTarget:
    """Split a target string into path, optional line and optional symbol.

    Raises:
        TargetError: If the target is empty or has an unusable line number.
    """
    target = target.strip()
    if not target:
        raise TargetError.invalid("Target must not be empty")

    if is_file_shaped(target):
        parts = target.split(":")
        path = parts[0]
        if not path:
            raise TargetError.invalid(f"Target has no path: {target}", target=target)
        if len(parts) == 1:
            return InspectTarget(path=path)
        try:
            line = int(parts[1])
        except ValueError:
            return InspectTarget(path=path, symbol=parts[1] or None)
        if line <= 0:
            raise TargetError.invalid(f"Line number must be positive, got {line}", target=target)
        symbol = parts[2] if len(parts) > 2 and parts[2] else None
        return InspectTarget(path=path, line=line, symbol=symbol)

    path, sep, suffix = target.rpartition(":")
    if sep and path and _IDENT_RE.match(suffix) and not _DIGITS_RE.match(suffix):
        return InspectTarget(path=path, symbol=suffix)
    return InspectTarget(path=target)


def require_workspace(workspace: str | Path | None) -> Path:
    """Validate the workspace root: required and absolute."""
    if workspace is None or not str(workspace):
        raise TargetError.invalid("workspace_dir is required for file analysis")
    if not os.path.isabs(workspace):
        raise TargetError.invalid(
            f"workspace_dir must be an absolute path, got: {workspace}",
            workspace=str(workspace),
        )
    return Path(workspace)


def resolve_file(path: str, workspace: str | Path) -> Path:
    """Locate a Go file on disk.

    Absolute paths must exist as given. ``./`` and ``../`` paths are joined
    to the workspace; bare relative paths try the plain join, then an
    explicit ``./`` join.

    Raises:
        TargetError: If no candidate exists.
    """
    workspace_abs = os.path.abspath(workspace)

    if os.path.isabs(path):
        if os.path.exists(path):
            return Path(path)
        raise TargetError.file_not_found(path)

    if path.startswith(_RELATIVE_PREFIXES):
        candidates = [os.path.join(workspace_abs, path)]
    else:
        candidates = [
            os.path.join(workspace_abs, path),
            os.path.join(workspace_abs, "./" + path),
        ]

    for candidate in candidates:
        if os.path.exists(candidate):
            return Path(os.path.normpath(candidate))
    raise TargetError.file_not_found(path, searched=workspace_abs)
