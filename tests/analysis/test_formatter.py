"""Tests for declaration formatting."""

from dataclasses import replace
from pathlib import Path
from types import SimpleNamespace

import pytest

from goinspect.analysis.declarations import extract_declarations
from goinspect.analysis.formatter import DeclarationFormatter, is_in_workspace
from goinspect.analysis.models import Declaration, FormatOptions
from goinspect.core.errors import ExternalToolError, InternalError
from goinspect.parsing.cache import ParseCache
from goinspect.parsing.treesitter import SourceFile


@pytest.fixture
def cache() -> ParseCache:
    return ParseCache()


@pytest.fixture
def main_file(cache: ParseCache, go_workspace: Path) -> SourceFile:
    return cache.get_or_parse(go_workspace / "main.go")


def _decl(source_file: SourceFile, name: str) -> Declaration:
    return next(d for d in extract_declarations(source_file) if d.declares(name))


class TestHeader:
    """Lines, docstring and code sections."""

    def test_function_signature_only(
        self, cache: ParseCache, main_file: SourceFile, stub_intelligence
    ) -> None:
        """Functions show the signature without the opening brace."""
        formatter = DeclarationFormatter(cache, stub_intelligence)

        output = formatter.format(_decl(main_file, "NewMyStruct"), main_file)

        assert output == (
            "Lines: 31-36\n"
            "Docstring: NewMyStruct creates a new MyStruct\n"
            "Code:\n"
            "func NewMyStruct(name string, age int) *MyStruct"
        )

    def test_function_with_body(
        self, cache: ParseCache, main_file: SourceFile, stub_intelligence
    ) -> None:
        """include_body shows the full span."""
        formatter = DeclarationFormatter(cache, stub_intelligence)

        output = formatter.format(
            _decl(main_file, "Method1"), main_file, FormatOptions(include_body=True)
        )

        assert output.endswith(
            "Code:\nfunc (m *MyStruct) Method1() string {\n    return m.Name\n}"
        )

    def test_single_line_value(
        self, cache: ParseCache, main_file: SourceFile, stub_intelligence
    ) -> None:
        """Single-line declarations show one line number and the group doc."""
        formatter = DeclarationFormatter(cache, stub_intelligence)

        output = formatter.format(_decl(main_file, "DefaultAge"), main_file)

        assert output == (
            "Lines: 41\nDocstring: Constants for testing\nCode:\n    DefaultAge  = 25"
        )

    def test_unknown_kind_is_internal_error(
        self, cache: ParseCache, main_file: SourceFile, stub_intelligence
    ) -> None:
        """Dispatch is exhaustive over DeclKind."""
        formatter = DeclarationFormatter(cache, stub_intelligence)
        bogus_kind = SimpleNamespace(is_callable=False, is_value=False)
        decl = replace(_decl(main_file, "MyStruct"), kind=bogus_kind)

        with pytest.raises(InternalError):
            formatter.format(decl, main_file)


class TestSections:
    """Trailing sections and their order."""

    def test_type_with_methods_and_references(
        self, cache: ParseCache, main_file: SourceFile, stub_intelligence, go_workspace: Path
    ) -> None:
        """Types list their same-file methods, then references."""
        formatter = DeclarationFormatter(cache, stub_intelligence, go_workspace)

        output = formatter.format(_decl(main_file, "MyStruct"), main_file, FormatOptions.full())

        sections = output.split("\n\n")
        assert sections[0].startswith("Lines: 12-15\nDocstring: MyStruct is a test struct\n")
        assert sections[1] == (
            "Lines: 18-20\nDocstring: Method1 implements TestInterface\n"
            "Code:\nfunc (m *MyStruct) Method1() string"
        )
        assert sections[2].startswith("Lines: 23-28\n")
        assert sections[3] == "References:\nNo references found"
        assert "Implementers:" not in output

    def test_interface_gets_implementers_section(
        self, cache: ParseCache, main_file: SourceFile, stub_intelligence, go_workspace: Path
    ) -> None:
        """Interfaces ask gopls for implementers at the name's position."""
        stub_intelligence.responses["implementers"] = f"{go_workspace / 'main.go'}:12:6-14"
        formatter = DeclarationFormatter(cache, stub_intelligence, go_workspace)

        output = formatter.format(
            _decl(main_file, "TestInterface"), main_file, FormatOptions.full()
        )

        assert "Implementers:\n  Lines: 12-15\n" in output
        assert "  type MyStruct struct {" in output
        command, position, _ = stub_intelligence.calls[0]
        assert command == "implementers"
        assert (position.line, position.column) == (6, 6)

    def test_variable_scope_and_references_per_name(
        self, cache: ParseCache, stub_intelligence, tmp_path: Path
    ) -> None:
        """Each name of a multi-name spec gets its own References section."""
        go_file = tmp_path / "v.go"
        go_file.write_text("package v\n\nvar a, B = 1, 2\n")
        source_file = cache.get_or_parse(go_file)
        formatter = DeclarationFormatter(cache, stub_intelligence, tmp_path)

        output = formatter.format(
            extract_declarations(source_file)[0], source_file, FormatOptions.full()
        )

        assert output.split("\n\n")[1:] == [
            "Scope:\npackage v",
            "References:\nNo references found",
            "References:\nNo references found",
        ]
        assert [p.column for _, p, _ in stub_intelligence.calls] == [5, 8]

    def test_call_hierarchy_verbatim(
        self, cache: ParseCache, main_file: SourceFile, stub_intelligence, go_workspace: Path
    ) -> None:
        """Call hierarchy output is passed through unchanged."""
        text = "identifier: function NewMyStruct\ncaller[0]: ranges 3:1-12 in x.go"
        stub_intelligence.responses["call_hierarchy"] = text
        formatter = DeclarationFormatter(cache, stub_intelligence, go_workspace)

        output = formatter.format(_decl(main_file, "NewMyStruct"), main_file, FormatOptions.full())

        assert output.endswith("Call Hierarchy:\n" + text)

    def test_tool_failure_degrades_only_its_section(
        self, cache: ParseCache, main_file: SourceFile, stub_intelligence, go_workspace: Path
    ) -> None:
        """A failing references call leaves the rest of the output intact."""
        stub_intelligence.responses["references"] = ExternalToolError.failure(
            "gopls", "references", "exit status 1"
        )
        formatter = DeclarationFormatter(cache, stub_intelligence, go_workspace)

        output = formatter.format(_decl(main_file, "NewMyStruct"), main_file, FormatOptions.full())

        assert "References:\ngopls references failed: exit status 1" in output
        assert "Call Hierarchy:\nNo call hierarchy found" in output

    def test_outside_workspace_omits_cross_file_sections(
        self, cache: ParseCache, main_file: SourceFile, stub_intelligence, tmp_path: Path
    ) -> None:
        """Files outside the workspace get no references at all."""
        other = tmp_path / "elsewhere"
        other.mkdir()
        formatter = DeclarationFormatter(cache, stub_intelligence, other)

        output = formatter.format(_decl(main_file, "NewMyStruct"), main_file, FormatOptions.full())

        assert "References:" not in output
        assert "Call Hierarchy:" not in output
        assert stub_intelligence.calls == []

    def test_position_failure_message(
        self, cache: ParseCache, main_file: SourceFile, stub_intelligence, go_workspace: Path
    ) -> None:
        """A name missing from its declaration line reports a position failure."""
        formatter = DeclarationFormatter(cache, stub_intelligence, go_workspace)
        decl = replace(_decl(main_file, "NewMyStruct"), name="Missing", names=["Missing"])

        output = formatter.format(decl, main_file, FormatOptions(include_references=True))

        assert "References:\nFailed to find references: " in output
        assert stub_intelligence.calls == []


class TestIsInWorkspace:
    """Workspace containment."""

    def test_inside_and_outside(self, tmp_path: Path) -> None:
        """Only paths under the root count."""
        assert is_in_workspace(tmp_path / "a" / "b.go", tmp_path / "a")
        assert not is_in_workspace(tmp_path / "ab" / "b.go", tmp_path / "a")
        assert not is_in_workspace(tmp_path / "b.go", None)
