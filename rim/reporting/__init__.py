"""
Presentation of ranked interface records.

display_results() truncates the ranked list to the requested limit, renders
it with one of the registered formats and writes it out. With the table
format, failed hosts are written to the error stream as "[ERROR] host reason"
lines while the table itself goes to the output stream.
"""

import sys
from typing import List, Optional, TextIO, TYPE_CHECKING

from rim.errors import ConfigurationError
from rim.reporting.formats import FormatConfig, FormatRegistry, ReportFormat

if TYPE_CHECKING:
    from rim.sampler import InterfaceRecord


def apply_limit(records: List['InterfaceRecord'], limit: int = 0) -> List['InterfaceRecord']:
    """Keep the first limit records; 0 means no limit."""
    if limit and limit > 0:
        return records[:limit]
    return records


def get_formatter(format_name: str, config: Optional[FormatConfig] = None) -> ReportFormat:
    format_class = FormatRegistry.get(format_name)
    if format_class is None:
        available = FormatRegistry.available_formats()
        raise ConfigurationError(
            f"Unknown output format: {format_name}",
            parameter="format",
            expected=available,
            actual=format_name
        )
    return format_class(config)


def display_results(records: List['InterfaceRecord'], format_name: str = "table",
                    config: Optional[FormatConfig] = None, limit: int = 0,
                    stream: Optional[TextIO] = None, error_stream: Optional[TextIO] = None) -> None:
    """
    Render records and write them to the given streams.

    Args:
        records: Ranked records.
        format_name: Name of a registered format.
        config: Format configuration; output_path redirects the report to a file.
        limit: Show at most this many records; 0 means all.
        stream: Output stream, stdout by default.
        error_stream: Stream for failed hosts, stderr by default.
    """
    stream = stream or sys.stdout
    error_stream = error_stream or sys.stderr
    config = config or FormatConfig()
    formatter = get_formatter(format_name, config)
    shown = apply_limit(records, limit)

    if not formatter.includes_errors:
        errors = formatter.format_errors(shown)
        if errors:
            error_stream.write(errors + "\n")
            error_stream.flush()

    if config.output_path:
        formatter.generate_to_file(shown, config.output_path)
        return

    content = formatter.generate(shown)
    if content:
        stream.write(content if content.endswith("\n") else content + "\n")
        stream.flush()


__all__ = [
    'apply_limit',
    'get_formatter',
    'display_results',
]
