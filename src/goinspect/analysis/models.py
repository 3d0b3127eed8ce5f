"""Data types shared by the analysis layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DeclKind(Enum):
    FUNCTION = "function"
    METHOD = "method"
    TYPE = "type"
    VARIABLE = "variable"
    CONSTANT = "constant"

    @property
    def is_callable(self) -> bool:
        return self in (DeclKind.FUNCTION, DeclKind.METHOD)

    @property
    def is_value(self) -> bool:
        return self in (DeclKind.VARIABLE, DeclKind.CONSTANT)


@dataclass
class Declaration:
    """A top-level Go declaration.

    Value specs may declare several names (``var a, b = 1, 2``); ``name`` is
    the first of ``names``. ``doc`` is the comment directly attached to this
    declaration, ``group_doc`` the comment of the enclosing ``var (...)``-style
    group or of the declaration keyword for a single spec.
    """

    kind: DeclKind
    name: str
    start_line: int
    end_line: int
    names: list[str] = field(default_factory=list)
    doc: str | None = None
    group_doc: str | None = None
    signature_end_line: int | None = None
    receiver: str | None = None
    receiver_base: str | None = None
    is_interface: bool = False
    node: Any = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.names:
            self.names = [self.name]

    @property
    def exported(self) -> bool:
        return any(is_exported(n) for n in self.names)

    @property
    def docstring(self) -> str | None:
        return self.doc or self.group_doc

    def contains(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line

    def declares(self, name: str) -> bool:
        return name in self.names


def is_exported(name: str) -> bool:
    """Go visibility: an uppercase initial letter makes a name public."""
    return bool(name) and name[0].isupper()


@dataclass(frozen=True)
class ScopeFrame:
    """One level of lexical nesting containing a line."""

    kind: str  # package, type, function, method, block
    label: str
    start_line: int = 0
    end_line: int = 0

    def render(self) -> str:
        if self.kind == "package":
            return self.label
        return f"{self.label} (lines {self.start_line}-{self.end_line})"


@dataclass(frozen=True)
class Location:
    """A ``path:line:startCol-endCol`` location reported by gopls."""

    path: str
    line: int
    start_column: int
    end_column: int

    @classmethod
    def parse(cls, text: str) -> Location | None:
        """Parse one output line, returning None when it is not a location.

        The path may contain ``:`` itself, so the last two fields are split
        off from the right.
        """
        parts = text.strip().rsplit(":", 2)
        if len(parts) != 3 or not parts[0]:
            return None
        path, line_part, col_part = parts
        start_col, _, end_col = col_part.partition("-")
        try:
            line = int(line_part)
            start = int(start_col)
            end = int(end_col) if end_col else start
        except ValueError:
            return None
        return cls(path=path, line=line, start_column=start, end_column=end)


@dataclass(frozen=True)
class FunctionScope:
    """Grouping key for locations inside a top-level function or method."""

    path: str
    start_line: int
    name: str


@dataclass(frozen=True)
class PackageScope:
    """Grouping key for locations outside any function."""

    path: str


@dataclass(frozen=True)
class InspectTarget:
    """A parsed target string."""

    path: str
    line: int | None = None
    symbol: str | None = None

    @property
    def is_file(self) -> bool:
        return self.path.endswith(".go")

    def classify(self) -> str:
        """Return ``symbol``, ``file`` or ``package``."""
        if self.line is not None or self.symbol:
            return "symbol"
        if self.is_file:
            return "file"
        return "package"


@dataclass(frozen=True)
class FormatOptions:
    include_references: bool = False
    include_implementers: bool = False
    include_methods: bool = False
    include_scope: bool = False
    include_call_hierarchy: bool = False
    include_body: bool = False

    @classmethod
    def full(cls, *, include_body: bool = False) -> FormatOptions:
        """All sections on, used for a single looked-up declaration."""
        return cls(
            include_references=True,
            include_implementers=True,
            include_methods=True,
            include_scope=True,
            include_call_hierarchy=True,
            include_body=include_body,
        )

    @property
    def any_cross_file(self) -> bool:
        return self.include_references or self.include_implementers or self.include_call_hierarchy
