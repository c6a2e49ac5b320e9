"""
Per-host sampling task.

RemoteSampler connects to one host, runs the probe command, parses the two
/proc/net/dev snapshots and stores one InterfaceRecord per interface in its
result attribute. Any failure along the way is stored as a single record with
an empty interface name and the error, so one bad host never stops the run.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from rim.errors import RimException
from rim.interfaces.task import Task
from rim.netdev import compute_rates_from_output
from rim.rim_logging import TRACE
from rim.ssh import ConnectionConfig, HostTarget, SSHConnector


@dataclass(frozen=True)
class InterfaceRecord:
    """
    Rates of one network interface on one host.

    A record with an empty name and an error stands for a host whose sampling
    failed; it is the only record produced for that host.

    Attributes:
        host: Host address as listed by the user.
        name: Interface name, empty for failed hosts.
        rates: Per-second deltas keyed like a counter snapshot.
        error: Exception that stopped sampling, if any.
    """
    host: str
    name: str = ""
    rates: Dict[str, int] = field(default_factory=dict)
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def error_message(self) -> str:
        if self.error is None:
            return ""
        if isinstance(self.error, RimException):
            return self.error.short()
        return str(self.error) or type(self.error).__name__

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'host': self.host,
            'interface': self.name,
            'rates': dict(self.rates),
            'error': self.error_message() or None,
        }


def pack_result(host: str, error: Optional[Exception] = None,
                rates: Optional[Dict[str, Dict[str, int]]] = None) -> List[InterfaceRecord]:
    """
    Turn the outcome of one host into InterfaceRecords.

    Returns:
        A single error record when error is set, otherwise one record per
        interface in rates.
    """
    if error is not None:
        return [InterfaceRecord(host=host, error=error)]
    return [
        InterfaceRecord(host=host, name=iface, rates=iface_rates)
        for iface, iface_rates in (rates or {}).items()
    ]


class RemoteSampler(Task):
    """Samples the interface counters of a single host.

    Attributes:
        target: Host to sample.
        connector: Shared SSHConnector used to run the probe.
        result: Records produced by execute(); empty until it ran.
    """

    def __init__(self, target: HostTarget, connector: Optional[SSHConnector] = None, logger=None):
        self.target = target
        self.connector = connector or SSHConnector(target.config, logger=logger)
        self.logger = logger or logging.getLogger(__name__)
        self.result: List[InterfaceRecord] = []

    @property
    def host(self) -> str:
        return self.target.address

    @property
    def error(self) -> Optional[Exception]:
        if len(self.result) == 1 and self.result[0].failed:
            return self.result[0].error
        return None

    def __repr__(self) -> str:
        return f"RemoteSampler({self.host!r})"

    def execute(self) -> None:
        try:
            output = self.connector.run(self.target)
            self.logger.log(TRACE, f"Probe output from {self.host}:\n{output}")
            rates = compute_rates_from_output(output, logger=self.logger)
        except RimException as e:
            self.logger.debug(f"Sampling {self.host} failed: {e.short()}")
            self.result = pack_result(self.host, error=e)
            return
        except Exception as e:
            self.logger.warning(f"Unexpected error sampling {self.host}: {e}")
            self.result = pack_result(self.host, error=e)
            return

        self.logger.debug(f"Sampled {len(rates)} interfaces on {self.host}")
        self.result = pack_result(self.host, rates=rates)


def make_tasks(hosts: Iterable[str], config: ConnectionConfig,
               connector: Optional[SSHConnector] = None, logger=None) -> List[RemoteSampler]:
    """Create one RemoteSampler per host, all sharing the same connector."""
    connector = connector or SSHConnector(config, logger=logger)
    return [
        RemoteSampler(HostTarget(host, config), connector=connector, logger=logger)
        for host in hosts
    ]


def collect_records(tasks: Iterable[RemoteSampler]) -> List[InterfaceRecord]:
    """Concatenate the records of all tasks, in task order."""
    records = []
    for task in tasks:
        records.extend(task.result)
    return records


__all__ = [
    "InterfaceRecord",
    "RemoteSampler",
    "pack_result",
    "make_tasks",
    "collect_records",
]
