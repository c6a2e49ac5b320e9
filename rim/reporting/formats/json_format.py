"""
JSON format handler for RIM results.

Provides JSON export for programmatic access.
"""

import json
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from rim.reporting.formats import ReportFormat, FormatRegistry, FormatConfig, to_kbps

if TYPE_CHECKING:
    from rim.sampler import InterfaceRecord


@FormatRegistry.register
class JSONFormat(ReportFormat):
    """Format records as a JSON array."""

    def __init__(self, config: Optional[FormatConfig] = None, indent: int = 2):
        """
        Initialize the JSON formatter.

        Args:
            config: Optional configuration.
            indent: JSON indentation level.
        """
        super().__init__(config)
        self.indent = indent

    @property
    def name(self) -> str:
        return "json"

    @property
    def extension(self) -> str:
        return "json"

    @property
    def content_type(self) -> str:
        return "application/json"

    def _record_to_dict(self, record: 'InterfaceRecord') -> Dict[str, Any]:
        data = record.to_dict()
        if not record.failed:
            data['rx-Kbps'] = to_kbps(record.rates.get('rx-Bps', 0))
            data['tx-Kbps'] = to_kbps(record.rates.get('tx-Bps', 0))
        return data

    def generate(self, records: List['InterfaceRecord']) -> str:
        return json.dumps([self._record_to_dict(r) for r in records], indent=self.indent)
