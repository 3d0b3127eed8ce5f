"""Tests for error types and codes."""

import pytest

from goinspect.core.errors import (
    ConfigError,
    ErrorCode,
    ExternalToolError,
    InspectorError,
    InternalError,
    ParseError,
    SymbolError,
    TargetError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.INVALID_TARGET, 3000),
            (ErrorCode.FILE_NOT_FOUND, 3000),
            (ErrorCode.MODULE_NOT_FOUND, 3000),
            (ErrorCode.PARSE_FAILURE, 4000),
            (ErrorCode.SYMBOL_NOT_FOUND, 5000),
            (ErrorCode.POSITION_NOT_FOUND, 5000),
            (ErrorCode.EXTERNAL_TOOL_FAILURE, 6000),
            (ErrorCode.INTERNAL_ERROR, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        assert expected_range <= code.value < expected_range + 1000


class TestInspectorError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = InspectorError(
            code=ErrorCode.FILE_NOT_FOUND,
            message="File not found: x.go",
            details={"path": "x.go"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 3002,
            "error": "FILE_NOT_FOUND",
            "message": "File not found: x.go",
            "retryable": False,
            "details": {"path": "x.go"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        """Error string representation is human readable."""
        error = InspectorError(code=ErrorCode.INTERNAL_ERROR, message="Something broke")

        assert str(error) == "[9001] INTERNAL_ERROR: Something broke"

    def test_given_subclass_when_raised_then_caught_as_base(self) -> None:
        """Every specific error is catchable as InspectorError."""
        with pytest.raises(InspectorError):
            raise SymbolError.not_found("Foo", "main.go")


class TestConfigError:
    """ConfigError factory method tests."""

    @pytest.mark.parametrize(
        ("factory", "kwargs", "expected_code"),
        [
            ("parse_error", {"path": "/foo", "reason": "bad yaml"}, ErrorCode.CONFIG_PARSE_ERROR),
            (
                "invalid_value",
                {"field": "server.port", "value": -1, "reason": "negative"},
                ErrorCode.CONFIG_INVALID_VALUE,
            ),
        ],
    )
    def test_given_factory_when_called_then_correct_code(
        self, factory: str, kwargs: dict[str, object], expected_code: ErrorCode
    ) -> None:
        """Factory methods produce errors with correct error codes."""
        error = getattr(ConfigError, factory)(**kwargs)

        assert error.code == expected_code

    def test_given_parse_error_when_created_then_path_in_details(self) -> None:
        """Parse error includes file path in details."""
        error = ConfigError.parse_error("/config.yaml", "invalid syntax")

        assert error.details["path"] == "/config.yaml"
        assert "invalid syntax" in error.message


class TestTargetError:
    """TargetError factory tests."""

    def test_file_not_found_mentions_search_root(self) -> None:
        """The searched workspace is part of the message when given."""
        error = TargetError.file_not_found("main.go", searched="/ws")

        assert error.code == ErrorCode.FILE_NOT_FOUND
        assert error.message == "File not found: main.go (searched relative to /ws)"

    def test_file_not_found_without_search_root(self) -> None:
        """No suffix when the path was absolute."""
        error = TargetError.file_not_found("/abs/main.go")

        assert error.message == "File not found: /abs/main.go"

    def test_no_source_files_is_module_not_found(self) -> None:
        """A package without eligible files reports MODULE_NOT_FOUND."""
        error = TargetError.no_source_files("./empty")

        assert error.code == ErrorCode.MODULE_NOT_FOUND
        assert "no eligible Go source files" in error.message

    def test_invalid_keeps_details(self) -> None:
        """Extra keyword arguments become details."""
        error = TargetError.invalid("bad", target="x")

        assert error.code == ErrorCode.INVALID_TARGET
        assert error.details == {"target": "x"}


class TestSymbolAndParseErrors:
    """SymbolError and ParseError tests."""

    def test_not_found_names_symbol_and_location(self) -> None:
        """Message names both the symbol and where it was searched."""
        error = SymbolError.not_found("Missing", "/ws/main.go")

        assert error.code == ErrorCode.SYMBOL_NOT_FOUND
        assert error.message == "Symbol 'Missing' not found in /ws/main.go"

    def test_position_not_found_code(self) -> None:
        """Position failures have their own code."""
        error = SymbolError.position_not_found("Per", 3, "no match")

        assert error.code == ErrorCode.POSITION_NOT_FOUND
        assert error.details["line"] == 3

    def test_parse_failure_message(self) -> None:
        """Parse failures name the file."""
        error = ParseError.failure("/ws/bad.go", "no syntax tree generated")

        assert error.code == ErrorCode.PARSE_FAILURE
        assert error.message.startswith("Failed to parse file /ws/bad.go")


class TestExternalToolError:
    """ExternalToolError tests."""

    def test_failure_is_retryable_and_names_command(self) -> None:
        """Tool failures render as '<tool> <command> failed: <reason>'."""
        error = ExternalToolError.failure("gopls", "references", "exit status 1")

        assert error.retryable is True
        assert error.message == "gopls references failed: exit status 1"


class TestInternalError:
    """InternalError tests."""

    def test_given_unexpected_error_when_created_then_includes_extras(self) -> None:
        """Unexpected error captures arbitrary extra details."""
        error = InternalError.unexpected("boom", foo="bar", count=42)

        assert error.details == {"foo": "bar", "count": 42}
        assert error.code == ErrorCode.INTERNAL_ERROR
