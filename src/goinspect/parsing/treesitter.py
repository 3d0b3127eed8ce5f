"""Tree-sitter parsing for Go source files.

Produces a :class:`SourceFile` holding the syntax tree together with the
decoded source lines and any syntax issues found. Tree-sitter always yields a
tree; broken regions show up as ERROR or MISSING nodes and are reported as
non-fatal issues. A file without a parsable ``package`` clause is treated as
not being Go source at all.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter
import tree_sitter_go

from goinspect.core.errors import ParseError, TargetError

_GO_LANGUAGE = tree_sitter.Language(tree_sitter_go.language())


@dataclass(frozen=True)
class SyntaxIssue:
    """A syntax error reported as a warning (1-based line and column)."""

    line: int
    column: int
    message: str

    def render(self, path: str) -> str:
        return f"{path}:{self.line}:{self.column}: {self.message}"


@dataclass
class SourceFile:
    """A parsed Go file. Read-only once constructed."""

    path: Path
    source: bytes
    lines: list[str]
    tree: Any = field(repr=False)  # tree-sitter Tree
    package_name: str
    issues: list[SyntaxIssue]
    mtime_ns: int

    @property
    def root_node(self) -> Any:
        return self.tree.root_node

    @property
    def has_errors(self) -> bool:
        return bool(self.issues)

    def line_text(self, line: int) -> str:
        """Return the text of a 1-based line, or '' past the end of file."""
        if 1 <= line <= len(self.lines):
            return self.lines[line - 1]
        return ""

    def read_lines(self, start: int, end: int) -> str:
        """Return lines start..end (1-based, inclusive) joined with newlines."""
        return "\n".join(self.lines[max(start, 1) - 1 : end])

    def warning_text(self) -> str:
        """Warning prefix for output produced from a partial tree."""
        if not self.issues:
            return ""
        rendered = "\n".join(issue.render(str(self.path)) for issue in self.issues)
        return f"WARNING: Syntax errors found, analysis may be incomplete:\n{rendered}\n\n"


def node_text(node: Any) -> str:
    """Decode a tree-sitter node's source text."""
    return node.text.decode("utf-8", errors="replace") if node.text else ""


def start_line(node: Any) -> int:
    return int(node.start_point[0]) + 1


def end_line(node: Any) -> int:
    return int(node.end_point[0]) + 1


def split_lines(source: bytes) -> list[str]:
    """Split source into lines, dropping a trailing carriage return on each."""
    text = source.decode("utf-8", errors="replace")
    if text.endswith("\n"):
        text = text[:-1]
    return [line.removesuffix("\r") for line in text.split("\n")]


class GoParser:
    """Tree-sitter parser for Go files.

    tree-sitter parser objects are not thread-safe, so a fresh parser is
    created per call; the compiled Go language is shared.
    """

    def parse_path(self, path: Path) -> SourceFile:
        """Read and parse a file from disk.

        The modification time is taken before the read so a concurrent write
        can only make the entry look stale, never fresh.
        """
        try:
            mtime_ns = os.stat(path).st_mtime_ns
            content = path.read_bytes()
        except FileNotFoundError as e:
            raise TargetError.file_not_found(str(path)) from e
        except OSError as e:
            raise ParseError.failure(str(path), f"failed to read file: {e}") from e
        return self.parse(path, content, mtime_ns=mtime_ns)

    def parse(self, path: Path, content: bytes, *, mtime_ns: int = 0) -> SourceFile:
        """Parse Go source content.

        Raises:
            ParseError: If no usable tree was produced.
        """
        parser = tree_sitter.Parser()
        parser.language = _GO_LANGUAGE
        tree = parser.parse(content)
        if tree is None:
            raise ParseError.failure(str(path), "no syntax tree generated")

        package_name = _package_name(tree.root_node)
        if package_name is None:
            raise ParseError.failure(str(path), "expected 'package' clause, no syntax tree generated")

        return SourceFile(
            path=path,
            source=content,
            lines=split_lines(content),
            tree=tree,
            package_name=package_name,
            issues=_collect_issues(tree.root_node),
            mtime_ns=mtime_ns,
        )


def _package_name(root: Any) -> str | None:
    """Name from the leading package clause, or None if absent or broken."""
    for child in root.named_children:
        if child.type == "comment":
            continue
        if child.type != "package_clause" or child.has_error:
            return None
        for part in child.named_children:
            if part.type == "package_identifier":
                return node_text(part)
        return None
    return None


def _collect_issues(root: Any) -> list[SyntaxIssue]:
    """Collect ERROR and MISSING nodes in document order."""
    issues: list[SyntaxIssue] = []

    def walk(node: Any) -> None:
        if node.is_missing:
            issues.append(
                SyntaxIssue(
                    line=start_line(node),
                    column=int(node.start_point[1]) + 1,
                    message=f"missing {node.type}",
                )
            )
            return
        if node.type == "ERROR":
            issues.append(
                SyntaxIssue(
                    line=start_line(node),
                    column=int(node.start_point[1]) + 1,
                    message="syntax error",
                )
            )
            return
        if node.has_error:
            for child in node.children:
                walk(child)

    walk(root)
    return issues
