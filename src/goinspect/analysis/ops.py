"""Inspection operations - inspect and rename."""

from __future__ import annotations

import time
from pathlib import Path

import structlog

from goinspect.analysis.declarations import extract_declarations, file_doc, import_lines
from goinspect.analysis.formatter import DeclarationFormatter
from goinspect.analysis.models import Declaration, FormatOptions
from goinspect.analysis.packages import GoPackage, PackageLoader
from goinspect.analysis.targets import parse_target, require_workspace, resolve_file
from goinspect.config.models import GoInspectConfig
from goinspect.core.errors import SymbolError, TargetError
from goinspect.core.logging import clear_request_id, get_request_id, set_request_id
from goinspect.gopls.client import CodeIntelligence, GoplsClient
from goinspect.parsing.cache import ParseCache
from goinspect.parsing.position import resolve_position
from goinspect.parsing.treesitter import SourceFile

log = structlog.get_logger(__name__)


def _bind_request_id() -> bool:
    """Bind a request id unless the caller already bound one.

    Returns True when this call bound it and must clear it.
    """
    if get_request_id() is not None:
        return False
    set_request_id()
    return True


def find_declaration(
    decls: list[Declaration],
    symbol: str | None,
    line: int | None,
) -> Declaration | None:
    """Look up a declaration by name and/or line.

    With both a name and a line, a declaration of that name containing the
    line wins, falling back to the first declaration of that name. With only
    a line, the first declaration containing it is returned.
    """
    if symbol:
        named = [d for d in decls if d.declares(symbol)]
        if line is not None:
            for decl in named:
                if decl.contains(line):
                    return decl
        return named[0] if named else None
    if line is not None:
        for decl in decls:
            if decl.contains(line):
                return decl
    return None


def format_file(
    source_file: SourceFile,
    formatter: DeclarationFormatter,
    *,
    only_exported: bool = False,
    include_imports: bool = True,
    include_body: bool = False,
) -> str:
    """Whole-file summary: path, file doc, imports, then every declaration."""
    items = [f"File: {source_file.path}"]

    doc = file_doc(source_file)
    if doc:
        items.append(f"File Docstring:\n{doc}")

    if include_imports:
        imports = import_lines(source_file)
        if imports:
            items.append("Imports:\n" + "".join(f"{imp}\n" for imp in imports))

    decls = extract_declarations(source_file)
    options = FormatOptions(include_body=include_body)
    for decl in decls:
        if only_exported and not decl.exported:
            continue
        items.append(formatter.format(decl, source_file, options, decls))

    return "\n\n".join(items)


class InspectionEngine:
    """Inspects Go files and packages and forwards renames to gopls.

    Holds the parse cache shared by all requests; everything else is
    per-request.
    """

    def __init__(
        self,
        cache: ParseCache | None = None,
        intelligence: CodeIntelligence | None = None,
        config: GoInspectConfig | None = None,
        packages: PackageLoader | None = None,
    ) -> None:
        self._config = config or GoInspectConfig()
        self._cache = cache or ParseCache()
        self._intelligence = intelligence or GoplsClient(self._config.gopls)
        self._packages = packages or PackageLoader(self._config.go)

    @property
    def cache(self) -> ParseCache:
        return self._cache

    def inspect(
        self,
        target: str,
        workspace_dir: str | Path | None,
        *,
        only_exported: bool | None = None,
        include_body: bool | None = None,
    ) -> str:
        """Inspect a target string such as ``main.go:12:Run`` or ``./pkg:Type``.

        Raises:
            InspectorError: For invalid targets, missing files or packages,
                unparsable files and symbols that are not found.
        """
        parsed = parse_target(target)
        return self.inspect_path(
            parsed.path,
            workspace_dir,
            line=parsed.line,
            symbol=parsed.symbol,
            only_exported=only_exported,
            include_body=include_body,
        )

    def inspect_path(
        self,
        path: str,
        workspace_dir: str | Path | None,
        *,
        line: int | None = None,
        symbol: str | None = None,
        only_exported: bool | None = None,
        include_body: bool | None = None,
    ) -> str:
        if only_exported is None:
            only_exported = self._config.inspect.only_exported
        if include_body is None:
            include_body = self._config.inspect.include_body

        owns_request = _bind_request_id()
        try:
            workspace = require_workspace(workspace_dir)
            start = time.monotonic()
            formatter = DeclarationFormatter(self._cache, self._intelligence, workspace)

            if path.endswith(".go"):
                output = self._inspect_file(
                    path,
                    workspace,
                    formatter,
                    line=line,
                    symbol=symbol,
                    only_exported=only_exported,
                    include_body=include_body,
                )
            else:
                output = self._inspect_package(
                    path,
                    workspace,
                    formatter,
                    symbol=symbol,
                    only_exported=only_exported,
                    include_body=include_body,
                )

            log.info(
                "inspect_complete",
                path=path,
                line=line,
                symbol=symbol,
                duration_ms=int((time.monotonic() - start) * 1000),
            )
            return output
        finally:
            if owns_request:
                clear_request_id()

    def _inspect_file(
        self,
        path: str,
        workspace: Path,
        formatter: DeclarationFormatter,
        *,
        line: int | None,
        symbol: str | None,
        only_exported: bool,
        include_body: bool,
    ) -> str:
        resolved = resolve_file(path, workspace)
        source_file = self._cache.get_or_parse(resolved)
        warning = source_file.warning_text()

        if line is None and not symbol:
            body = format_file(
                source_file,
                formatter,
                only_exported=only_exported,
                include_body=include_body,
            )
            return warning + body

        decls = extract_declarations(source_file)
        decl = find_declaration(decls, symbol, line)
        if decl is None:
            if symbol:
                raise SymbolError.not_found(symbol, str(resolved))
            raise SymbolError.no_symbol_at_line(line or 0, str(resolved))

        options = FormatOptions.full(include_body=include_body)
        return warning + formatter.format(decl, source_file, options, decls)

    def _inspect_package(
        self,
        path: str,
        workspace: Path,
        formatter: DeclarationFormatter,
        *,
        symbol: str | None,
        only_exported: bool,
        include_body: bool,
    ) -> str:
        pkg = self._packages.load(path, workspace)
        files = [self._cache.get_or_parse(f) for f in pkg.files]
        warning = "".join(f.warning_text() for f in files)

        if symbol:
            for source_file in files:
                decls = extract_declarations(source_file)
                decl = find_declaration(decls, symbol, None)
                if decl is not None:
                    options = FormatOptions.full(include_body=include_body)
                    return warning + formatter.format(decl, source_file, options, decls)
            raise SymbolError.not_found(symbol, f"package {pkg.import_path}")

        return warning + format_package(
            pkg, files, formatter, only_exported=only_exported, include_body=include_body
        )

    def rename(self, file_path: str, line: int, old_name: str, new_name: str) -> str:
        """Rename the symbol old_name declared or used at line via gopls.

        Raises:
            TargetError: On invalid arguments or a missing file.
            SymbolError: If old_name is not on the line.
            ExternalToolError: If gopls fails.
        """
        if not file_path:
            raise TargetError.invalid("File path must not be empty")
        if line <= 0:
            raise TargetError.invalid(f"Line number must be positive, got {line}", line=line)
        if not old_name:
            raise TargetError.invalid("Symbol name must not be empty")
        if not new_name:
            raise TargetError.invalid("New name must not be empty")

        if old_name == new_name:
            return f"Symbol '{old_name}' already has the desired name"

        owns_request = _bind_request_id()
        try:
            position = resolve_position(file_path, line, old_name)
            self._intelligence.rename(position, new_name)
            self._cache.remove(position.path)
            log.info("rename_complete", position=str(position), old=old_name, new=new_name)
        finally:
            if owns_request:
                clear_request_id()
        return f"Symbol '{old_name}' renamed to '{new_name}'"


def format_package(
    pkg: GoPackage,
    files: list[SourceFile],
    formatter: DeclarationFormatter,
    *,
    only_exported: bool = False,
    include_body: bool = False,
) -> str:
    """Package summary: directory, import path, then each file without imports."""
    header = f"Directory: {pkg.dir}\nImport Path: {pkg.import_path}\n"
    bodies = [
        format_file(
            source_file,
            formatter,
            only_exported=only_exported,
            include_imports=False,
            include_body=include_body,
        )
        for source_file in files
    ]
    return header + "\n\n" + "\n---\n".join(bodies)
