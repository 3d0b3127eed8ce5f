"""Lexical scope hierarchy for a line of a Go file.

Frames are recomputed top-down on every query by range containment; the
syntax tree is never annotated with parent links.
"""

from __future__ import annotations

from typing import Any

from goinspect.analysis.declarations import extract_declarations
from goinspect.analysis.models import Declaration, DeclKind, ScopeFrame
from goinspect.parsing.treesitter import SourceFile, end_line, start_line

_BLOCK_LABELS = {
    "if_statement": "if",
    "expression_switch_statement": "switch",
    "type_switch_statement": "type-switch",
    "select_statement": "select",
    "block": "block",
}

# Constructs whose direct child block is their own body.
_BODY_OWNERS = frozenset(
    {
        "if_statement",
        "for_statement",
        "func_literal",
        "function_declaration",
        "method_declaration",
        "expression_case",
        "default_case",
        "type_case",
        "communication_case",
    }
)


def build_scope(
    source_file: SourceFile,
    line: int,
    decls: list[Declaration] | None = None,
) -> list[ScopeFrame]:
    """Scope frames containing line, outermost first.

    The package frame is always first. Type frames come from top-level type
    specs, function frames from top-level functions and methods, followed by
    the block constructs of that function's body that contain the line.
    """
    if decls is None:
        decls = extract_declarations(source_file)

    frames = [ScopeFrame(kind="package", label=f"package {source_file.package_name}")]

    for decl in decls:
        if decl.kind is DeclKind.TYPE and decl.contains(line):
            frames.append(
                ScopeFrame(
                    kind="type",
                    label=f"type {decl.name}",
                    start_line=decl.start_line,
                    end_line=decl.end_line,
                )
            )

    for decl in decls:
        if not decl.kind.is_callable or not decl.contains(line):
            continue
        if decl.kind is DeclKind.METHOD:
            frame = ScopeFrame(
                kind="method",
                label=f"method {decl.receiver}.{decl.name}",
                start_line=decl.start_line,
                end_line=decl.end_line,
            )
        else:
            frame = ScopeFrame(
                kind="function",
                label=f"function {decl.name}",
                start_line=decl.start_line,
                end_line=decl.end_line,
            )
        frames.append(frame)

        body = decl.node.child_by_field_name("body") if decl.node is not None else None
        if body is not None:
            frames.extend(block_frames(body, line, owner=decl.node.type))

    return frames


def block_frames(node: Any, line: int, owner: str | None = None) -> list[ScopeFrame]:
    """Block construct frames containing line, found by a pre-order walk.

    ``owner`` is the type of the node whose child is being visited. A block
    directly owned by an if, for, case clause or function is that
    construct's body and gets no frame of its own.
    """
    frames: list[ScopeFrame] = []
    _walk(node, line, owner, frames)
    return frames


def _walk(node: Any, line: int, owner: str | None, frames: list[ScopeFrame]) -> None:
    first, last = start_line(node), end_line(node)
    if line < first or line > last:
        return

    label = _label(node)
    if label is not None and not (node.type == "block" and owner in _BODY_OWNERS):
        frames.append(ScopeFrame(kind="block", label=label, start_line=first, end_line=last))

    # statement_list is a transparent wrapper; its children keep the block's owner.
    child_owner = owner if node.type == "statement_list" else node.type
    for child in node.named_children:
        _walk(child, line, child_owner, frames)


def _label(node: Any) -> str | None:
    if node.type == "for_statement":
        for child in node.named_children:
            if child.type == "range_clause":
                return "range"
        return "for"
    return _BLOCK_LABELS.get(node.type)


def render_scope(frames: list[ScopeFrame]) -> str:
    """Frames one per line, indented two spaces per nesting depth."""
    return "\n".join(f"{'  ' * depth}{frame.render()}" for depth, frame in enumerate(frames))
