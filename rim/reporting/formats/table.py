"""
Table format handler for RIM results.

Provides fixed-width columns for terminal display. The header is repeated
every few rows so long listings stay readable while scrolling. Failed hosts
are not part of the table; format_errors() renders them as separate lines.
"""

from typing import List, Optional, Tuple, TYPE_CHECKING

from rim.config import HEADER_REPEAT_ROWS
from rim.reporting.formats import ReportFormat, FormatRegistry, FormatConfig, to_kbps

if TYPE_CHECKING:
    from rim.sampler import InterfaceRecord


# (title, width, rate key, converts bytes to Kb)
BASE_COLUMNS: List[Tuple[str, int, str, bool]] = [
    ("Rx-Kb/s", 9, "rx-Bps", True),
    ("Tx-Kb/s", 9, "tx-Bps", True),
    ("Rx-Pckts/s", 12, "rx-pps", False),
    ("Tx-Pckts/s", 12, "tx-pps", False),
    ("Rx-Drp/s", 12, "rx-dps", False),
    ("Tx-Drp/s", 12, "tx-dps", False),
]
EXTENDED_COLUMNS: List[Tuple[str, int, str, bool]] = [
    ("Rx-Err/s", 12, "rx-eps", False),
    ("Tx-Err/s", 12, "tx-eps", False),
]
HOST_WIDTH = 20
INTERFACE_WIDTH = 12


@FormatRegistry.register
class TableFormat(ReportFormat):
    """Format records as fixed-width columns for terminal display."""

    # Terminal colors
    COLORS = {
        'reset': '\033[0m',
        'bold': '\033[1m',
        'red': '\033[91m',
    }

    def __init__(self, config: Optional[FormatConfig] = None,
                 header_every: int = HEADER_REPEAT_ROWS):
        """
        Initialize the table formatter.

        Args:
            config: Optional configuration.
            header_every: Repeat the header after this many rows.
        """
        super().__init__(config)
        self.header_every = header_every

    @property
    def name(self) -> str:
        return "table"

    @property
    def extension(self) -> str:
        return "txt"

    @property
    def includes_errors(self) -> bool:
        return False

    @property
    def columns(self) -> List[Tuple[str, int, str, bool]]:
        if self.config.extended:
            return BASE_COLUMNS + EXTENDED_COLUMNS
        return BASE_COLUMNS

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if self.config.use_colors and color in self.COLORS:
            return f"{self.COLORS[color]}{text}{self.COLORS['reset']}"
        return text

    def format_header(self) -> str:
        header = f"{'Host':>{HOST_WIDTH}}{'Interface':>{INTERFACE_WIDTH}}"
        header += "".join(f"{title:>{width}}" for title, width, _, _ in self.columns)
        return header

    def format_row(self, record: 'InterfaceRecord') -> str:
        row = f"{record.host:>{HOST_WIDTH}}{record.name:>{INTERFACE_WIDTH}}"
        for _, width, key, kilobits in self.columns:
            value = record.rates.get(key, 0)
            if kilobits:
                value = to_kbps(value)
            row += f"{value:>{width}d}"
        return row

    def format_error(self, record: 'InterfaceRecord') -> str:
        return f"{self._color('[ERROR]', 'red')} {record.host} {record.error_message()}"

    def format_errors(self, records: List['InterfaceRecord']) -> str:
        return "\n".join(self.format_error(r) for r in records if r.failed)

    def generate(self, records: List['InterfaceRecord']) -> str:
        lines = []
        data_rows = [r for r in records if not r.failed]
        for i, record in enumerate(data_rows):
            if i % self.header_every == 0 and not self.config.no_head:
                lines.append(self.format_header())
            lines.append(self.format_row(record))
        return "\n".join(lines)
