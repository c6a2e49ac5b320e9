"""
Custom exceptions for RIM.

This module provides custom exception classes with user-friendly messaging
that include:
- Clear error descriptions
- Technical details for debugging
- Actionable suggestions for resolution

Host-local failures (connection, command, malformed output, counter parsing)
never abort a run: they are carried inside an InterfaceRecord for the failing
host. IncompleteRunError is raised once per run and InvalidSortKeyError is
raised before any host is contacted.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Any
from enum import Enum


class ErrorCode(Enum):
    """Machine-readable error codes for RIM errors."""
    # Configuration errors (1xx)
    CONFIG_MISSING_REQUIRED = "E101"
    CONFIG_INVALID_VALUE = "E102"
    CONFIG_FILE_NOT_FOUND = "E103"
    CONFIG_PARSE_ERROR = "E104"
    CONFIG_NO_HOSTS = "E105"
    CONFIG_INVALID_SORT_KEY = "E106"

    # Connection errors (2xx)
    SSH_CONNECTION_FAILED = "E201"
    SSH_CONNECT_TIMEOUT = "E202"
    SSH_CLIENT_MISSING = "E203"

    # Remote execution and output errors (3xx)
    COMMAND_FAILED = "E301"
    COMMAND_TIMEOUT = "E302"
    OUTPUT_MALFORMED = "E303"
    COUNTER_PARSE_FAILED = "E304"

    # Run errors (4xx)
    RUN_INCOMPLETE = "E401"

    # Internal errors (9xx)
    INTERNAL_ERROR = "E901"


@dataclass
class RimError:
    """
    Structured error information for RIM.

    Attributes:
        code: Machine-readable error code.
        message: User-facing error message.
        details: Technical details for debugging.
        suggestion: How to fix the issue.
        context: Additional context information.
    """
    code: ErrorCode
    message: str
    details: str = ""
    suggestion: str = ""
    context: dict = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        lines = [f"[{self.code.value}] {self.message}"]
        if self.details:
            lines.append(f"  Details: {self.details}")
        if self.suggestion:
            lines.append(f"  Suggestion: {self.suggestion}")
        return "\n".join(lines)


class RimException(Exception):
    """
    Base exception class for RIM.

    All custom exceptions inherit from this class and provide
    structured error information.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INTERNAL_ERROR,
                 details: str = "", suggestion: str = "", **context):
        self.error = RimError(
            code=code,
            message=message,
            details=details,
            suggestion=suggestion,
            context=context
        )
        super().__init__(str(self.error))

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def suggestion(self) -> str:
        return self.error.suggestion

    def short(self) -> str:
        """One-line form used in per-host error rows."""
        if self.error.details:
            return f"{self.error.message} ({self.error.details})"
        return self.error.message


class ConfigurationError(RimException):
    """
    Raised when configuration is invalid or missing.

    Examples:
        - Hosts file not found or empty
        - Invalid parameter value
        - Config file cannot be parsed
    """

    def __init__(self, message: str, parameter: str = None,
                 expected: Any = None, actual: Any = None,
                 suggestion: str = None,
                 code: ErrorCode = ErrorCode.CONFIG_INVALID_VALUE):
        details_parts = []
        if parameter:
            details_parts.append(f"Parameter: {parameter}")
        if expected is not None:
            details_parts.append(f"Expected: {expected}")
        if actual is not None:
            details_parts.append(f"Actual: {actual}")

        super().__init__(
            message=message,
            code=code,
            details="; ".join(details_parts) if details_parts else "",
            suggestion=suggestion or self._default_suggestion(code),
            parameter=parameter,
            expected=expected,
            actual=actual
        )

    @staticmethod
    def _default_suggestion(code: ErrorCode) -> str:
        suggestions = {
            ErrorCode.CONFIG_MISSING_REQUIRED: "Provide the required parameter via command line or config file",
            ErrorCode.CONFIG_INVALID_VALUE: "Check the parameter value and correct it",
            ErrorCode.CONFIG_FILE_NOT_FOUND: "Verify the file path exists",
            ErrorCode.CONFIG_PARSE_ERROR: "Check config file syntax (YAML format)",
            ErrorCode.CONFIG_NO_HOSTS: "List one host per line as <hostname>[:port]",
            ErrorCode.CONFIG_INVALID_SORT_KEY: "Use one of the documented sort keys",
        }
        return suggestions.get(code, "Check the configuration and try again")


class InvalidSortKeyError(ConfigurationError):
    """Raised before any host is contacted when a sort key cannot be resolved."""

    def __init__(self, key: str, valid_keys: List[str]):
        self.key = key
        self.valid_keys = list(valid_keys)
        super().__init__(
            f"Invalid sort key: {key}",
            parameter="sort key",
            expected=self.valid_keys,
            actual=key,
            suggestion=f"Use one in {', '.join(self.valid_keys)}",
            code=ErrorCode.CONFIG_INVALID_SORT_KEY
        )


class HostConnectionError(RimException):
    """
    Raised when a host cannot be reached or refuses authentication.

    Examples:
        - DNS resolution failure
        - Connection refused or timed out
        - Password and agent authentication both rejected
        - ssh client not installed
    """

    def __init__(self, message: str, host: str = None, reason: str = None,
                 suggestion: str = None,
                 code: ErrorCode = ErrorCode.SSH_CONNECTION_FAILED):
        details_parts = []
        if host:
            details_parts.append(f"Host: {host}")
        if reason:
            details_parts.append(f"Reason: {reason}")

        super().__init__(
            message=message,
            code=code,
            details="; ".join(details_parts) if details_parts else "",
            suggestion=suggestion or self._default_suggestion(code),
            host=host,
            reason=reason
        )

    @staticmethod
    def _default_suggestion(code: ErrorCode) -> str:
        suggestions = {
            ErrorCode.SSH_CONNECTION_FAILED: "Verify the host is online and the credentials are accepted",
            ErrorCode.SSH_CONNECT_TIMEOUT: "Increase --connect-timeout or check network reachability",
            ErrorCode.SSH_CLIENT_MISSING: "Install an OpenSSH client and make sure 'ssh' is in PATH",
        }
        return suggestions.get(code, "Check SSH connectivity")


class CommandExecutionError(RimException):
    """
    Raised when the probe command fails on the remote host.

    Examples:
        - Non-zero exit code from the remote shell
        - Remote session killed or timed out
    """

    def __init__(self, message: str, host: str = None, exit_code: int = None,
                 stderr: str = None, suggestion: str = None,
                 code: ErrorCode = ErrorCode.COMMAND_FAILED):
        details_parts = []
        if host:
            details_parts.append(f"Host: {host}")
        if exit_code is not None:
            details_parts.append(f"Exit code: {exit_code}")
        if stderr:
            # Truncate long error output
            stderr_display = stderr[:500] + "..." if len(stderr) > 500 else stderr
            details_parts.append(f"Error output: {stderr_display}")

        super().__init__(
            message=message,
            code=code,
            details="; ".join(details_parts) if details_parts else "",
            suggestion=suggestion or self._default_suggestion(code, exit_code),
            host=host,
            exit_code=exit_code,
            stderr=stderr
        )

    @staticmethod
    def _default_suggestion(code: ErrorCode, exit_code: int = None) -> str:
        if exit_code == 127:
            return "Command not found - the remote host needs cat and sleep in PATH"
        suggestions = {
            ErrorCode.COMMAND_FAILED: "Check that /proc/net/dev is readable on the remote host",
            ErrorCode.COMMAND_TIMEOUT: "Increase --command-timeout or check the remote host load",
        }
        return suggestions.get(code, "Check the remote host")


class MalformedOutputError(RimException):
    """Raised when the probe output is not two snapshots split by one sentinel."""

    def __init__(self, message: str, segments: int = None, suggestion: str = None):
        details = f"Segments found: {segments}" if segments is not None else ""
        super().__init__(
            message=message,
            code=ErrorCode.OUTPUT_MALFORMED,
            details=details,
            suggestion=suggestion or "Check that the remote shell prints nothing besides the probe output",
            segments=segments
        )


class CounterParseError(RimException):
    """Raised when a /proc/net/dev row cannot be turned into counters."""

    def __init__(self, message: str, line: str = None, column: int = None,
                 value: str = None, suggestion: str = None):
        details_parts = []
        if line is not None:
            details_parts.append(f"Line: {line.strip()}")
        if column is not None:
            details_parts.append(f"Column: {column}")
        if value is not None:
            details_parts.append(f"Value: {value!r}")

        super().__init__(
            message=message,
            code=ErrorCode.COUNTER_PARSE_FAILED,
            details="; ".join(details_parts) if details_parts else "",
            suggestion=suggestion or "The remote /proc/net/dev format is not supported",
            line=line,
            column=column,
            value=value
        )


class IncompleteRunError(RimException):
    """
    Raised once per run when an interrupt stopped task submission.

    Tasks that were already queued ran to completion; tasks that were never
    queued did not run and carry no result.
    """

    def __init__(self, submitted: int = None, total: int = None, suggestion: str = None):
        details = ""
        if submitted is not None and total is not None:
            details = f"{submitted} of {total} tasks submitted"
        super().__init__(
            message="Interrupt received, not all tasks have been completed",
            code=ErrorCode.RUN_INCOMPLETE,
            details=details,
            suggestion=suggestion or "Re-run to poll the remaining hosts",
            submitted=submitted,
            total=total
        )
        self.submitted = submitted
        self.total = total
