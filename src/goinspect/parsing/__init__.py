"""Go source parsing: tree-sitter trees, the parse cache and positions."""

from goinspect.parsing.cache import ParseCache, ReadWriteLock
from goinspect.parsing.position import Position, find_symbol_column, resolve_position
from goinspect.parsing.treesitter import GoParser, SourceFile, SyntaxIssue

__all__ = [
    "GoParser",
    "ParseCache",
    "Position",
    "ReadWriteLock",
    "SourceFile",
    "SyntaxIssue",
    "find_symbol_column",
    "resolve_position",
]
