"""
Tests for rim.errors and rim.error_messages.
"""

import pytest

from rim.error_messages import ERROR_MESSAGES, format_error
from rim.errors import (
    CommandExecutionError,
    ConfigurationError,
    CounterParseError,
    ErrorCode,
    HostConnectionError,
    IncompleteRunError,
    InvalidSortKeyError,
    MalformedOutputError,
    RimError,
    RimException,
)


class TestRimError:
    """Tests for the RimError dataclass."""

    def test_str_includes_code_and_message(self):
        error = RimError(code=ErrorCode.INTERNAL_ERROR, message="Something broke")
        assert str(error).startswith("[E901] Something broke")

    def test_str_includes_details_and_suggestion(self):
        error = RimError(code=ErrorCode.COMMAND_FAILED, message="Failed",
                         details="Exit code: 1", suggestion="Retry")
        text = str(error)
        assert "Exit code: 1" in text
        assert "Retry" in text


class TestExceptions:
    """Tests for the exception hierarchy."""

    @pytest.mark.parametrize("exc", [
        ConfigurationError("bad"),
        InvalidSortKeyError("x", ["rx-dps"]),
        HostConnectionError("down"),
        CommandExecutionError("failed"),
        MalformedOutputError("garbled"),
        CounterParseError("nan"),
        IncompleteRunError(1, 2),
    ])
    def test_all_are_rim_exceptions(self, exc):
        assert isinstance(exc, RimException)
        assert exc.suggestion

    def test_configuration_error_details(self):
        e = ConfigurationError("Invalid limit", parameter="limit", expected=">= 0", actual=-1)
        assert e.code == ErrorCode.CONFIG_INVALID_VALUE
        assert e.short() == "Invalid limit (Parameter: limit; Expected: >= 0; Actual: -1)"

    def test_short_without_details(self):
        assert ConfigurationError("Plain").short() == "Plain"

    def test_host_connection_error(self):
        e = HostConnectionError("Connection failed", host="fw1:22", reason="refused")
        assert e.code == ErrorCode.SSH_CONNECTION_FAILED
        assert "Reason: refused" in e.short()

    def test_command_error_truncates_stderr(self):
        e = CommandExecutionError("failed", stderr="x" * 600)
        assert "x" * 500 + "..." in e.short()
        assert "x" * 501 not in e.short()

    def test_command_not_found_suggestion(self):
        assert "PATH" in CommandExecutionError("failed", exit_code=127).suggestion

    def test_malformed_output_segments(self):
        e = MalformedOutputError("bad", segments=3)
        assert e.code == ErrorCode.OUTPUT_MALFORMED
        assert "Segments found: 3" in e.short()

    def test_counter_parse_error_fields(self):
        e = CounterParseError("nan", line="eth0: x", column=4, value="x")
        assert e.code == ErrorCode.COUNTER_PARSE_FAILED
        assert "Column: 4" in e.short()

    def test_incomplete_run_error(self):
        e = IncompleteRunError(submitted=3, total=10)
        assert e.submitted == 3
        assert e.total == 10
        assert e.code == ErrorCode.RUN_INCOMPLETE
        assert "3 of 10" in e.short()


class TestFormatError:
    """Tests for format_error."""

    def test_formats_template(self):
        assert "/etc/rim/hosts" in format_error('HOSTS_FILE_NOT_FOUND', path='/etc/rim/hosts')

    def test_unknown_key(self):
        assert format_error('NOPE', a=1).startswith("Unknown error: NOPE")

    def test_missing_parameter(self):
        assert "Missing format parameter" in format_error('HOST_UNREACHABLE')

    def test_templates_without_parameters_format(self):
        assert format_error('NO_HOSTS') == ERROR_MESSAGES['NO_HOSTS']
