"""
Test fixtures package for RIM tests.

This package provides reusable mock classes and sample probe output
for testing the parser, the ssh layer and the worker pool.
"""

from tests.fixtures.mock_logger import MockLogger, create_mock_logger
from tests.fixtures.mock_runner import MockSSHRunner
from tests.fixtures.sample_data import (
    SAMPLE_PROBE_OUTPUT,
    SAMPLE_NET_DEV_T1,
    SAMPLE_NET_DEV_T2,
    SAMPLE_EXPECTED_RATES,
    SAMPLE_HOSTS_FILE,
    net_dev_row,
    make_probe_output,
)

__all__ = [
    # Mock classes
    'MockLogger',
    'create_mock_logger',
    'MockSSHRunner',
    # Sample data
    'SAMPLE_PROBE_OUTPUT',
    'SAMPLE_NET_DEV_T1',
    'SAMPLE_NET_DEV_T2',
    'SAMPLE_EXPECTED_RATES',
    'SAMPLE_HOSTS_FILE',
    'net_dev_row',
    'make_probe_output',
]
