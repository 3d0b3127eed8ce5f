"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides a small Go module workspace plus a stub gopls backend.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from goinspect.parsing.position import Position  # noqa: E402

MAIN_GO = """\
package testpkg

import "fmt"

// TestInterface is a test interface
type TestInterface interface {
    Method1() string
    Method2(int) error
}

// MyStruct is a test struct
type MyStruct struct {
    Name string
    Age  int
}

// Method1 implements TestInterface
func (m *MyStruct) Method1() string {
    return m.Name
}

// Method2 implements TestInterface
func (m *MyStruct) Method2(val int) error {
    if val < 0 {
        return fmt.Errorf("negative value")
    }
    return nil
}

// NewMyStruct creates a new MyStruct
func NewMyStruct(name string, age int) *MyStruct {
    return &MyStruct{
        Name: name,
        Age:  age,
    }
}

// Constants for testing
const (
    DefaultName = "default"
    DefaultAge  = 25
)

// Variables for testing
var (
    GlobalCounter int
    GlobalMessage string = "hello"
)
"""

HELPER_GO = """\
package testpkg

import "fmt"

// Helper is a helper function
func Helper() {
    fmt.Println("helper function")
}

// privateHelper is not exported
func privateHelper() int {
    return 42
}
"""


class StubIntelligence:
    """CodeIntelligence test double returning canned output and recording calls."""

    def __init__(self) -> None:
        self.responses: dict[str, str | Exception] = {}
        self.calls: list[tuple[str, Position, str | None]] = []

    def _answer(self, command: str, position: Position) -> str:
        self.calls.append((command, position, None))
        response = self.responses.get(command, "")
        if isinstance(response, Exception):
            raise response
        return response

    def references(self, position: Position) -> str:
        return self._answer("references", position)

    def implementers(self, position: Position) -> str:
        return self._answer("implementers", position)

    def call_hierarchy(self, position: Position) -> str:
        return self._answer("call_hierarchy", position)

    def rename(self, position: Position, new_name: str) -> None:
        self.calls.append(("rename", position, new_name))
        response = self.responses.get("rename")
        if isinstance(response, Exception):
            raise response


@pytest.fixture
def go_workspace(tmp_path: Path) -> Path:
    """A Go module with main.go, helper.go and a test file that must be ignored."""
    workspace = tmp_path / "ws"
    workspace.mkdir()
    (workspace / "go.mod").write_text("module testmodule\n\ngo 1.21\n")
    (workspace / "main.go").write_text(MAIN_GO)
    (workspace / "helper.go").write_text(HELPER_GO)
    (workspace / "helper_test.go").write_text("package testpkg\n\nfunc TestHidden() {}\n")
    return workspace


@pytest.fixture
def stub_intelligence() -> StubIntelligence:
    return StubIntelligence()
