"""Top-level declaration extraction from a parsed Go file.

Walks the direct children of the source file only. Grouped declarations
(``var (...)``, ``const (...)``, ``type (...)``) yield one Declaration per
spec, each carrying the group's doc comment as a fallback.
"""

from __future__ import annotations

import re
from typing import Any

from goinspect.analysis.models import Declaration, DeclKind
from goinspect.parsing.treesitter import SourceFile, end_line, node_text, start_line

_DIRECTIVE_RE = re.compile(r"^[a-z0-9]+:[a-z0-9]")
_DIRECTIVE_PREFIXES = ("line ", "extern ", "export ")

_SPEC_TYPES = {
    "type_declaration": ("type_spec", "type_alias"),
    "var_declaration": ("var_spec",),
    "const_declaration": ("const_spec",),
}

_VALUE_KINDS = {
    "var_declaration": DeclKind.VARIABLE,
    "const_declaration": DeclKind.CONSTANT,
}


def extract_declarations(source_file: SourceFile) -> list[Declaration]:
    """All top-level declarations in source order."""
    decls: list[Declaration] = []
    siblings = source_file.root_node.named_children
    for index, node in enumerate(siblings):
        if node.type == "function_declaration":
            decls.append(_function(node, _doc_before(source_file, siblings, index)))
        elif node.type == "method_declaration":
            decls.append(_method(node, _doc_before(source_file, siblings, index)))
        elif node.type in _SPEC_TYPES:
            group_doc = _doc_before(source_file, siblings, index)
            decls.extend(_specs(source_file, node, group_doc))
    return decls


def file_doc(source_file: SourceFile) -> str | None:
    """Doc comment immediately preceding the package clause."""
    siblings = source_file.root_node.named_children
    for index, node in enumerate(siblings):
        if node.type == "package_clause":
            return _doc_before(source_file, siblings, index)
    return None


def import_lines(source_file: SourceFile) -> list[str]:
    """Source text of every import spec, whitespace-trimmed."""
    imports: list[str] = []
    for node in source_file.root_node.named_children:
        if node.type != "import_declaration":
            continue
        for spec in _iter_specs(node, ("import_spec",)):
            text = source_file.read_lines(start_line(spec), end_line(spec))
            imports.append(text.strip())
    return imports


def find_type_at_line(decls: list[Declaration], line: int) -> Declaration | None:
    for decl in decls:
        if decl.kind is DeclKind.TYPE and decl.contains(line):
            return decl
    return None


def find_callable_at_line(decls: list[Declaration], line: int) -> Declaration | None:
    """Top-level function or method whose range contains line."""
    for decl in decls:
        if decl.kind.is_callable and decl.contains(line):
            return decl
    return None


def methods_of(decls: list[Declaration], type_name: str) -> list[Declaration]:
    return [d for d in decls if d.kind is DeclKind.METHOD and d.receiver_base == type_name]


def comment_text(comments: list[str]) -> str | None:
    """Text of a comment group with comment markers removed.

    Line comments lose ``//`` and one following space, block comments lose
    ``/*`` and ``*/``. Directive comments such as ``//go:generate`` are
    dropped. Trailing whitespace is removed from each line, runs of blank
    lines collapse to one and leading and trailing blank lines are removed.
    Returns None when nothing remains.
    """
    lines: list[str] = []
    for raw in comments:
        if raw.startswith("//"):
            body = raw[2:]
            if _is_directive(body):
                continue
            if body.startswith(" "):
                body = body[1:]
            lines.append(body)
        elif raw.startswith("/*"):
            lines.extend(raw[2:].removesuffix("*/").split("\n"))
        else:
            lines.append(raw)

    cleaned: list[str] = []
    for line in lines:
        line = line.rstrip()
        if not line and (not cleaned or not cleaned[-1]):
            continue
        cleaned.append(line)
    while cleaned and not cleaned[-1]:
        cleaned.pop()

    text = "\n".join(cleaned).strip()
    return text or None


def _is_directive(body: str) -> bool:
    if body.startswith(_DIRECTIVE_PREFIXES):
        return True
    return bool(_DIRECTIVE_RE.match(body))


def _doc_before(source_file: SourceFile, siblings: list[Any], index: int) -> str | None:
    """Comment group ending on the line right before siblings[index].

    Every comment in the group must stand on its own line: a trailing
    comment after code on the same line never counts as documentation.
    """
    expected_row = siblings[index].start_point[0] - 1
    collected: list[str] = []
    i = index - 1
    while i >= 0:
        node = siblings[i]
        if node.type != "comment" or node.end_point[0] != expected_row:
            break
        if not _starts_own_line(source_file.source, node.start_byte):
            break
        collected.append(node_text(node))
        expected_row = node.start_point[0] - 1
        i -= 1
    if not collected:
        return None
    collected.reverse()
    return comment_text(collected)


def _starts_own_line(source: bytes, start_byte: int) -> bool:
    line_start = source.rfind(b"\n", 0, start_byte) + 1
    return not source[line_start:start_byte].strip()


def _spec_container(decl_node: Any) -> Any:
    """Node whose named children are the specs (and their comments)."""
    for child in decl_node.named_children:
        if child.type.endswith("_spec_list"):
            return child
    return decl_node


def _iter_specs(decl_node: Any, spec_types: tuple[str, ...]) -> list[Any]:
    return [c for c in _spec_container(decl_node).named_children if c.type in spec_types]


def _is_grouped(decl_node: Any) -> bool:
    for child in decl_node.children:
        if child.type == "(" or child.type.endswith("_spec_list"):
            return True
    return False


def _specs(source_file: SourceFile, decl_node: Any, group_doc: str | None) -> list[Declaration]:
    spec_types = _SPEC_TYPES[decl_node.type]
    grouped = _is_grouped(decl_node)
    siblings = _spec_container(decl_node).named_children

    decls: list[Declaration] = []
    for index, spec in enumerate(siblings):
        if spec.type not in spec_types:
            continue
        own_doc = _doc_before(source_file, siblings, index) if grouped else None
        if decl_node.type == "type_declaration":
            decl = _type_spec(spec)
        else:
            decl = _value_spec(spec, _VALUE_KINDS[decl_node.type])
        if decl is None:
            continue
        decl.doc = own_doc
        decl.group_doc = group_doc
        decls.append(decl)
    return decls


def _type_spec(spec: Any) -> Declaration | None:
    name_node = spec.child_by_field_name("name")
    if name_node is None:
        return None
    type_node = spec.child_by_field_name("type")
    return Declaration(
        kind=DeclKind.TYPE,
        name=node_text(name_node),
        start_line=start_line(spec),
        end_line=end_line(spec),
        is_interface=type_node is not None and type_node.type == "interface_type",
        node=spec,
    )


def _value_spec(spec: Any, kind: DeclKind) -> Declaration | None:
    names = [node_text(n) for n in spec.children_by_field_name("name")]
    if not names:
        return None
    return Declaration(
        kind=kind,
        name=names[0],
        names=names,
        start_line=start_line(spec),
        end_line=end_line(spec),
        node=spec,
    )


def _signature_end(node: Any) -> int:
    body = node.child_by_field_name("body")
    if body is None:
        return end_line(node)
    return start_line(body)


def _function(node: Any, doc: str | None) -> Declaration:
    name_node = node.child_by_field_name("name")
    return Declaration(
        kind=DeclKind.FUNCTION,
        name=node_text(name_node) if name_node is not None else "",
        start_line=start_line(node),
        end_line=end_line(node),
        doc=doc,
        signature_end_line=_signature_end(node),
        node=node,
    )


def _method(node: Any, doc: str | None) -> Declaration:
    name_node = node.child_by_field_name("name")
    receiver, base = receiver_type(node)
    return Declaration(
        kind=DeclKind.METHOD,
        name=node_text(name_node) if name_node is not None else "",
        start_line=start_line(node),
        end_line=end_line(node),
        doc=doc,
        signature_end_line=_signature_end(node),
        receiver=receiver,
        receiver_base=base,
        node=node,
    )


def receiver_type(method_node: Any) -> tuple[str, str]:
    """Receiver type as written (keeping ``*``) and its base type name.

    Type arguments of a generic receiver are dropped: ``*List[T]`` yields
    ``("*List", "List")``.
    """
    params = method_node.child_by_field_name("receiver")
    if params is None:
        return "unknown", ""
    for param in params.named_children:
        if param.type != "parameter_declaration":
            continue
        type_node = param.child_by_field_name("type")
        if type_node is None:
            break
        pointer = False
        if type_node.type == "pointer_type":
            pointer = True
            if type_node.named_children:
                type_node = type_node.named_children[0]
        if type_node.type == "generic_type":
            base_node = type_node.child_by_field_name("type")
            if base_node is not None:
                type_node = base_node
        base = node_text(type_node)
        return ("*" + base if pointer else base), base
    return "unknown", ""
