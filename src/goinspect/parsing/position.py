"""Resolve a symbol on a source line to a gopls position."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from goinspect.core.errors import SymbolError, TargetError
from goinspect.parsing.treesitter import split_lines


@dataclass(frozen=True)
class Position:
    """Absolute file position as gopls expects it (1-based, byte column)."""

    path: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"


def _is_ident_char(ch: str) -> bool:
    return ch == "_" or ch.isalnum()


def find_symbol_column(line_text: str, symbol: str) -> int:
    """Find the first whole-word occurrence of symbol in line_text.

    Both neighbours of a match must be absent or non-identifier characters,
    so ``Per`` never matches inside ``Person``.

    Returns:
        1-based column in UTF-8 bytes.

    Raises:
        SymbolError: If no occurrence sits on word boundaries.
    """
    if not symbol:
        raise SymbolError.position_not_found(symbol, 0, "empty symbol")

    start = 0
    while True:
        idx = line_text.find(symbol, start)
        if idx < 0:
            break
        end = idx + len(symbol)
        before_ok = idx == 0 or not _is_ident_char(line_text[idx - 1])
        after_ok = end >= len(line_text) or not _is_ident_char(line_text[end])
        if before_ok and after_ok:
            return len(line_text[:idx].encode("utf-8")) + 1
        start = idx + 1

    raise SymbolError.position_not_found(symbol, 0, f"no whole-word match in line {line_text!r}")


def resolve_position(path: str | Path, line: int, symbol: str) -> Position:
    """Resolve symbol on a 1-based line of a file to an absolute Position.

    Raises:
        TargetError: On a non-positive line, empty symbol or missing file.
        SymbolError: If the line is past the end of file or holds no match.
    """
    if line <= 0:
        raise TargetError.invalid(f"Line number must be positive, got {line}", line=line)
    if not symbol:
        raise TargetError.invalid("Symbol name must not be empty")

    abs_path = os.path.abspath(path)
    try:
        content = Path(abs_path).read_bytes()
    except FileNotFoundError as e:
        raise TargetError.file_not_found(str(path)) from e

    lines = split_lines(content)
    if line > len(lines):
        raise SymbolError.position_not_found(
            symbol, line, f"line {line} is out of range (file has {len(lines)} lines)"
        )

    try:
        column = find_symbol_column(lines[line - 1], symbol)
    except SymbolError as e:
        raise SymbolError.position_not_found(symbol, line, e.details["reason"]) from e
    return Position(path=abs_path, line=line, column=column)
