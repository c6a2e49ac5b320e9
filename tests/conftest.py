"""
Shared pytest fixtures for RIM tests.

These fixtures provide sample probe output, loggers, connection settings and
a fake ssh runner so that no test ever opens a network connection.
"""

from argparse import Namespace
from unittest.mock import MagicMock

import pytest

from rim.ssh import ConnectionConfig, SSHConnector
from tests.fixtures import MockLogger, MockSSHRunner, SAMPLE_PROBE_OUTPUT


# =============================================================================
# Logger Fixtures
# =============================================================================

@pytest.fixture
def mock_logger():
    """
    Create a mock logger that accepts every RIM log level.

    Usage:
        def test_something(mock_logger):
            some_function(logger=mock_logger)
            mock_logger.warning.assert_called_once()
    """
    logger = MagicMock()
    for level in ['trace', 'debug', 'verbose', 'info', 'status', 'warning',
                  'result', 'error', 'critical', 'log']:
        setattr(logger, level, MagicMock())
    return logger


@pytest.fixture
def capturing_logger():
    """
    Create a MockLogger that keeps messages per level.

    Usage:
        def test_something(capturing_logger):
            some_function(logger=capturing_logger)
            capturing_logger.assert_logged('debug', 'expected')
    """
    return MockLogger()


# =============================================================================
# Probe Fixtures
# =============================================================================

@pytest.fixture
def sample_probe_output():
    """Probe output with bnep0, wlan0 and lo interfaces."""
    return SAMPLE_PROBE_OUTPUT


@pytest.fixture
def connection_config():
    """Connection settings without password or agent."""
    return ConnectionConfig(username="monitor", use_agent=False, connect_timeout=5)


@pytest.fixture
def mock_runner(sample_probe_output):
    """MockSSHRunner answering every host with the sample probe output."""
    return MockSSHRunner(default_response=(sample_probe_output, '', 0))


@pytest.fixture
def connector(connection_config, mock_runner, capturing_logger):
    """SSHConnector wired to the mock runner."""
    return SSHConnector(connection_config, runner=mock_runner, logger=capturing_logger)


# =============================================================================
# Args Fixtures
# =============================================================================

@pytest.fixture
def basic_args():
    """Namespace with the defaults produced by parse_arguments([])."""
    return Namespace(
        hosts_file=None,
        hosts=None,
        user="root",
        password=None,
        no_agent=False,
        connect_timeout=10,
        command_timeout=None,
        ssh_options=(),
        workers=None,
        sort1="rx-dps",
        sort2="rx-Kbps",
        sort_keys=["rx-dps", "rx-Kbps"],
        limit=0,
        no_head=False,
        extended=False,
        format="table",
        output=None,
        config_file=None,
        debug=False,
        verbose=False,
        trace=False,
        stream_log_level=None,
    )
