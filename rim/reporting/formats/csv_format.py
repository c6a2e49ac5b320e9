"""
CSV format handler for RIM results.

Provides flat CSV rows, one per interface, for data analysis.
"""

import csv
import io
from typing import List, Optional, TYPE_CHECKING

from rim.config import COUNTER_KEYS
from rim.reporting.formats import ReportFormat, FormatRegistry, FormatConfig, to_kbps

if TYPE_CHECKING:
    from rim.sampler import InterfaceRecord


@FormatRegistry.register
class CSVFormat(ReportFormat):
    """Format records as CSV."""

    FIELDS = ['host', 'interface', 'rx-Kbps', 'tx-Kbps'] + list(COUNTER_KEYS) + ['error']

    def __init__(self, config: Optional[FormatConfig] = None):
        super().__init__(config)

    @property
    def name(self) -> str:
        return "csv"

    @property
    def extension(self) -> str:
        return "csv"

    @property
    def content_type(self) -> str:
        return "text/csv"

    def generate(self, records: List['InterfaceRecord']) -> str:
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=self.FIELDS, lineterminator='\n')
        if not self.config.no_head:
            writer.writeheader()
        for record in records:
            row = {'host': record.host, 'interface': record.name, 'error': record.error_message()}
            if not record.failed:
                row.update(record.rates)
                row['rx-Kbps'] = to_kbps(record.rates.get('rx-Bps', 0))
                row['tx-Kbps'] = to_kbps(record.rates.get('tx-Bps', 0))
            writer.writerow(row)
        return output.getvalue()
