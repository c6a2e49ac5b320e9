"""
Report format handlers for RIM results.

This package provides multiple output formats for ranked interface records:
- Table: Fixed-width columns for terminal display
- CSV: Flat CSV rows for spreadsheets and scripts
- JSON: JSON documents for programmatic access

Usage:
    from rim.reporting.formats import FormatRegistry, FormatConfig

    formatter = FormatRegistry.get('table')(FormatConfig(extended=True))
    print(formatter.generate(records))
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from rim.sampler import InterfaceRecord


def to_kbps(bytes_per_second: int) -> int:
    """Convert a bytes-per-second rate to kilobits per second."""
    return bytes_per_second * 8 // 1024


@dataclass
class FormatConfig:
    """Configuration for report format generation."""
    output_path: Optional[str] = None
    no_head: bool = False
    extended: bool = False
    use_colors: bool = True


class ReportFormat(ABC):
    """Abstract base class for report format handlers."""

    def __init__(self, config: Optional[FormatConfig] = None):
        """
        Initialize the format handler.

        Args:
            config: Optional configuration for the format.
        """
        self.config = config or FormatConfig()

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the format name."""
        pass

    @property
    @abstractmethod
    def extension(self) -> str:
        """Return the file extension for this format."""
        pass

    @property
    def content_type(self) -> str:
        """Return the MIME content type for this format."""
        return "text/plain"

    @property
    def includes_errors(self) -> bool:
        """Whether generate() renders failed hosts itself."""
        return True

    @abstractmethod
    def generate(self, records: List['InterfaceRecord']) -> str:
        """
        Generate the report in this format.

        Args:
            records: Ranked interface records.

        Returns:
            The formatted report.
        """
        pass

    def generate_to_file(self, records: List['InterfaceRecord'], output_path: str) -> str:
        """
        Generate the report and write to a file.

        Returns:
            Path to the written file.
        """
        content = self.generate(records)
        with open(output_path, 'w') as f:
            f.write(content)
        return output_path


class FormatRegistry:
    """Registry for available report formats."""

    _formats: Dict[str, type] = {}

    @classmethod
    def register(cls, format_class: type) -> type:
        """
        Register a format class.

        Can be used as a decorator:
            @FormatRegistry.register
            class MyFormat(ReportFormat):
                ...
        """
        instance = format_class()
        cls._formats[instance.name] = format_class
        return format_class

    @classmethod
    def get(cls, name: str) -> Optional[type]:
        """Get a format class by name."""
        return cls._formats.get(name)

    @classmethod
    def available_formats(cls) -> List[str]:
        """Get list of available format names."""
        return list(cls._formats.keys())


# Import format implementations to register them
from rim.reporting.formats.table import TableFormat
from rim.reporting.formats.csv_format import CSVFormat
from rim.reporting.formats.json_format import JSONFormat

__all__ = [
    'ReportFormat',
    'FormatConfig',
    'FormatRegistry',
    'TableFormat',
    'CSVFormat',
    'JSONFormat',
    'to_kbps',
]
