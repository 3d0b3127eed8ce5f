"""Declaration analysis: extraction, scopes, formatting and inspection."""

from goinspect.analysis.formatter import DeclarationFormatter
from goinspect.analysis.models import (
    Declaration,
    DeclKind,
    FormatOptions,
    InspectTarget,
    Location,
    ScopeFrame,
)
from goinspect.analysis.ops import InspectionEngine
from goinspect.analysis.references import ReferenceAggregator
from goinspect.analysis.scope import build_scope
from goinspect.analysis.targets import parse_target, resolve_file

__all__ = [
    "Declaration",
    "DeclKind",
    "DeclarationFormatter",
    "FormatOptions",
    "InspectTarget",
    "InspectionEngine",
    "Location",
    "ReferenceAggregator",
    "ScopeFrame",
    "build_scope",
    "parse_target",
    "resolve_file",
]
