"""Text rendering of a single declaration.

Output layout::

    Lines: <start>[-<end>]
    Docstring: <text>
    Code:
    <source>

    <Scope / Implementers / methods / References / Call Hierarchy>

Cross-file sections (implementers, references, call hierarchy) are only
rendered for files inside the workspace root, and a failing gopls call only
degrades its own section.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import structlog

from goinspect.analysis.declarations import extract_declarations, methods_of
from goinspect.analysis.models import Declaration, DeclKind, FormatOptions
from goinspect.analysis.references import ReferenceAggregator
from goinspect.analysis.scope import build_scope, render_scope
from goinspect.core.errors import ExternalToolError, InspectorError, InternalError
from goinspect.gopls.client import CodeIntelligence
from goinspect.parsing.cache import ParseCache
from goinspect.parsing.position import Position, resolve_position
from goinspect.parsing.treesitter import SourceFile

log = structlog.get_logger(__name__)


def is_in_workspace(path: Path | str, workspace: Path | str | None) -> bool:
    """Whether path lies inside the workspace root."""
    if workspace is None:
        return False
    return Path(os.path.abspath(path)).is_relative_to(os.path.abspath(workspace))


class DeclarationFormatter:
    """Formats declarations of files obtained from a shared ParseCache."""

    def __init__(
        self,
        cache: ParseCache,
        intelligence: CodeIntelligence,
        workspace: Path | str | None = None,
    ) -> None:
        self._cache = cache
        self._intelligence = intelligence
        self._workspace = workspace
        self._aggregator = ReferenceAggregator(cache, self)

    @property
    def workspace(self) -> Path | str | None:
        return self._workspace

    def format(
        self,
        decl: Declaration,
        source_file: SourceFile,
        options: FormatOptions | None = None,
        decls: list[Declaration] | None = None,
    ) -> str:
        """Render decl. ``decls`` may pass the file's declarations to avoid re-extracting."""
        options = options or FormatOptions()
        if decl.kind.is_callable:
            return self._format_callable(decl, source_file, options)
        if decl.kind is DeclKind.TYPE:
            return self._format_type(decl, source_file, options, decls)
        if decl.kind.is_value:
            return self._format_value(decl, source_file, options, decls)
        raise InternalError.unexpected(f"unknown declaration kind {decl.kind!r}")

    def _header(self, decl: Declaration, code: str) -> str:
        if decl.end_line > decl.start_line:
            lines = [f"Lines: {decl.start_line}-{decl.end_line}"]
        else:
            lines = [f"Lines: {decl.start_line}"]
        if decl.docstring:
            lines.append(f"Docstring: {decl.docstring}")
        lines.append("Code:")
        lines.append(code)
        return "\n".join(lines)

    def _format_callable(
        self, decl: Declaration, source_file: SourceFile, options: FormatOptions
    ) -> str:
        if options.include_body:
            code = source_file.read_lines(decl.start_line, decl.end_line)
        else:
            sig_end = decl.signature_end_line or decl.end_line
            code = source_file.read_lines(decl.start_line, sig_end).strip()
            if code.endswith("{"):
                code = code[:-1].strip()

        sections = [self._header(decl, code)]
        if self._cross_file(source_file):
            if options.include_references:
                sections.append(self._references(source_file, decl.start_line, decl.name))
            if options.include_call_hierarchy:
                sections.append(self._call_hierarchy(source_file, decl.start_line, decl.name))
        return "\n\n".join(sections)

    def _format_type(
        self,
        decl: Declaration,
        source_file: SourceFile,
        options: FormatOptions,
        decls: list[Declaration] | None,
    ) -> str:
        sections = [self._header(decl, source_file.read_lines(decl.start_line, decl.end_line))]
        cross_file = self._cross_file(source_file)

        if decl.is_interface and options.include_implementers and cross_file:
            sections.append(self._implementers(source_file, decl.start_line, decl.name))

        if options.include_methods:
            if decls is None:
                decls = extract_declarations(source_file)
            for method in methods_of(decls, decl.name):
                sections.append(self._format_callable(method, source_file, FormatOptions()))

        if options.include_references and cross_file:
            sections.append(self._references(source_file, decl.start_line, decl.name))
        return "\n\n".join(sections)

    def _format_value(
        self,
        decl: Declaration,
        source_file: SourceFile,
        options: FormatOptions,
        decls: list[Declaration] | None,
    ) -> str:
        sections = [self._header(decl, source_file.read_lines(decl.start_line, decl.end_line))]

        if options.include_scope:
            frames = build_scope(source_file, decl.start_line, decls)
            sections.append("Scope:\n" + render_scope(frames))

        if options.include_references and self._cross_file(source_file):
            for name in decl.names:
                sections.append(self._references(source_file, decl.start_line, name))
        return "\n\n".join(sections)

    def _cross_file(self, source_file: SourceFile) -> bool:
        return is_in_workspace(source_file.path, self._workspace)

    def _references(self, source_file: SourceFile, line: int, name: str) -> str:
        return self._collaborator_section(
            "References",
            "references",
            source_file,
            line,
            name,
            self._intelligence.references,
            self._aggregator.render_references,
        )

    def _implementers(self, source_file: SourceFile, line: int, name: str) -> str:
        return self._collaborator_section(
            "Implementers",
            "implementers",
            source_file,
            line,
            name,
            self._intelligence.implementers,
            self._aggregator.render_implementers,
        )

    def _call_hierarchy(self, source_file: SourceFile, line: int, name: str) -> str:
        return self._collaborator_section(
            "Call Hierarchy",
            "call hierarchy",
            source_file,
            line,
            name,
            self._intelligence.call_hierarchy,
            lambda output: output,
        )

    def _collaborator_section(
        self,
        title: str,
        what: str,
        source_file: SourceFile,
        line: int,
        name: str,
        query: Callable[[Position], str],
        render: Callable[[str], str],
    ) -> str:
        header = f"{title}:\n"
        try:
            position = resolve_position(source_file.path, line, name)
        except InspectorError as e:
            return f"{header}Failed to find {what}: {e.message}"

        try:
            output = query(position)
        except ExternalToolError as e:
            log.info("section_degraded", section=what, position=str(position), error=e.message)
            return header + e.message

        body = render(output) if output else ""
        if not body:
            return f"{header}No {what} found"
        return header + body
