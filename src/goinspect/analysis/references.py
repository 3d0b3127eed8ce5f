"""Grouping of gopls locations by enclosing declaration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from goinspect.analysis.declarations import (
    extract_declarations,
    find_callable_at_line,
    find_type_at_line,
)
from goinspect.analysis.models import FormatOptions, FunctionScope, Location, PackageScope
from goinspect.core.errors import InspectorError
from goinspect.parsing.cache import ParseCache

if TYPE_CHECKING:
    from goinspect.analysis.formatter import DeclarationFormatter

log = structlog.get_logger(__name__)

ReferenceScope = FunctionScope | PackageScope
ReferenceGroups = dict[ReferenceScope, list[Location]]


def parse_locations(raw_output: str) -> list[Location]:
    """Parse gopls location lines, skipping anything malformed."""
    locations = []
    for line in raw_output.splitlines():
        loc = Location.parse(line)
        if loc is not None:
            locations.append(loc)
    return locations


def _indent(text: str) -> str:
    return "\n".join(f"  {line}" for line in text.split("\n") if line)


def _sort_key(scope: ReferenceScope) -> tuple[str, int]:
    if isinstance(scope, FunctionScope):
        return (scope.path, scope.start_line)
    return (scope.path, 0)


class ReferenceAggregator:
    """Groups locations by the top-level function containing them.

    Locations outside any function, or in files that cannot be parsed,
    fall back to a package scope group for their file. Groups render in
    (path, line) order.
    """

    def __init__(self, cache: ParseCache, formatter: DeclarationFormatter) -> None:
        self._cache = cache
        self._formatter = formatter

    def aggregate(self, raw_output: str) -> ReferenceGroups:
        groups: ReferenceGroups = {}
        for loc in parse_locations(raw_output):
            groups.setdefault(self._scope_of(loc), []).append(loc)
        return groups

    def _scope_of(self, loc: Location) -> ReferenceScope:
        try:
            source_file = self._cache.get_or_parse(loc.path)
        except InspectorError as e:
            log.debug("reference_scope_fallback", path=loc.path, error=e.message)
            return PackageScope(path=loc.path)
        fn = find_callable_at_line(extract_declarations(source_file), loc.line)
        if fn is None:
            return PackageScope(path=loc.path)
        return FunctionScope(path=loc.path, start_line=fn.start_line, name=fn.name)

    def render(self, groups: ReferenceGroups) -> str:
        blocks = []
        for scope in sorted(groups, key=_sort_key):
            if isinstance(scope, PackageScope):
                blocks.append(f"  Package scope: {scope.path}")
            else:
                blocks.append(self._render_function(scope))
        return "\n\n".join(blocks)

    def _render_function(self, scope: FunctionScope) -> str:
        try:
            source_file = self._cache.get_or_parse(scope.path)
        except InspectorError as e:
            return f"  Error parsing file {scope.path}: {e.message}"
        decls = extract_declarations(source_file)
        for decl in decls:
            if decl.kind.is_callable and decl.start_line == scope.start_line:
                return _indent(self._formatter.format(decl, source_file, FormatOptions(), decls))
        return f"  Package scope: {scope.path}"

    def render_references(self, raw_output: str) -> str:
        return self.render(self.aggregate(raw_output))

    def render_implementers(self, raw_output: str) -> str:
        """Render each implementing type found at the reported locations."""
        blocks = []
        locations = sorted(parse_locations(raw_output), key=lambda loc: (loc.path, loc.line))
        for loc in locations:
            try:
                source_file = self._cache.get_or_parse(loc.path)
            except InspectorError as e:
                blocks.append(f"  Error parsing file {loc.path}: {e.message}")
                continue
            decls = extract_declarations(source_file)
            type_decl = find_type_at_line(decls, loc.line)
            if type_decl is None:
                blocks.append(f"  No type found at {loc.path}:{loc.line}")
                continue
            blocks.append(_indent(self._formatter.format(type_decl, source_file, FormatOptions())))
        return "\n\n".join(blocks)
