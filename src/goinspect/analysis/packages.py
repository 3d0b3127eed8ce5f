"""Go package resolution: directories and import paths to source files."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from goinspect.config.models import GoToolConfig
from goinspect.core.errors import TargetError

log = structlog.get_logger(__name__)

GO_MOD = "go.mod"


@dataclass
class GoPackage:
    """A resolved package: its directory, import path and source files."""

    dir: Path
    import_path: str
    files: list[Path] = field(default_factory=list)


def find_module(start: Path) -> tuple[Path, str] | None:
    """Nearest go.mod at or above start, as (module root, module path)."""
    current = start
    while True:
        go_mod = current / GO_MOD
        if go_mod.is_file():
            module_path = _module_path(go_mod)
            if module_path:
                return current, module_path
        if current.parent == current:
            return None
        current = current.parent


def _module_path(go_mod: Path) -> str | None:
    try:
        text = go_mod.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    for raw in text.splitlines():
        line = raw.split("//", 1)[0].strip()
        if line.startswith("module"):
            rest = line[len("module") :].strip()
            if rest:
                return rest.strip('"`')
    return None


def import_path_for(directory: Path) -> str:
    """Import path of a directory, derived from its module's go.mod."""
    found = find_module(directory)
    if found is None:
        return directory.name
    root, module = found
    rel = directory.relative_to(root).as_posix()
    return module if rel == "." else f"{module}/{rel}"


def source_files(directory: Path) -> list[Path]:
    """Non-test Go files of a directory, sorted by name."""
    return sorted(
        p
        for p in directory.iterdir()
        if p.is_file() and p.suffix == ".go" and not p.name.endswith("_test.go")
    )


class PackageLoader:
    """Resolves package targets relative to a workspace."""

    def __init__(self, config: GoToolConfig | None = None) -> None:
        self._config = config or GoToolConfig()

    def load(self, path: str, workspace: Path) -> GoPackage:
        """Resolve path to a package with at least one eligible file.

        Raises:
            TargetError: If the package cannot be found or has no files.
        """
        directory = self._resolve_dir(path, workspace)
        files = source_files(directory)
        if not files:
            raise TargetError.no_source_files(path)
        pkg = GoPackage(dir=directory, import_path=import_path_for(directory), files=files)
        log.debug("package_loaded", path=path, dir=str(directory), files=len(files))
        return pkg

    def _resolve_dir(self, path: str, workspace: Path) -> Path:
        if path in (".", "..") or path.startswith(("./", "../")):
            candidate = Path(os.path.normpath(os.path.join(workspace, path)))
            if candidate.is_dir():
                return candidate
            raise TargetError.module_not_found(path, f"directory not found: {candidate}")

        if os.path.isabs(path):
            candidate = Path(path)
            if candidate.is_dir():
                return candidate
            raise TargetError.module_not_found(path, "directory not found")

        module = find_module(workspace)
        if module is not None:
            root, module_path = module
            if path == module_path:
                return root
            if path.startswith(module_path + "/"):
                candidate = root / path[len(module_path) + 1 :]
                if candidate.is_dir():
                    return candidate

        local = Path(os.path.normpath(os.path.join(workspace, path)))
        if local.is_dir():
            return local

        return self._go_list(path, workspace)

    def _go_list(self, path: str, workspace: Path) -> Path:
        argv = [self._config.binary, "list", "-f", "{{.Dir}}", path]
        try:
            result = subprocess.run(
                argv,
                cwd=workspace,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise TargetError.module_not_found(
                path, f"go executable not found: {self._config.binary}"
            ) from e

        if result.returncode != 0:
            reason = result.stderr.strip() or f"go list exit status {result.returncode}"
            log.info("go_list_failed", path=path, exit_code=result.returncode)
            raise TargetError.module_not_found(path, reason)

        directory = result.stdout.strip().splitlines()
        if not directory or not Path(directory[0]).is_dir():
            raise TargetError.module_not_found(path, "go list returned no directory")
        return Path(directory[0])
