"""
Parsing of /proc/net/dev dumps and rate calculation.

The remote probe prints /proc/net/dev, a sentinel line, sleeps for one second
and prints /proc/net/dev again. This module splits that output into the two
snapshots, turns each snapshot into counters keyed by interface name and
computes per-second rates from the pair.

Snapshot format:
    {"eth0": {"rx-Bps": 391914, "rx-pps": 760, ..., "tx-dps": 0}, ...}

Before calculate_rates() runs the values are absolute counters; afterwards the
same keys hold deltas over the probe interval, which is trusted to be one
second since no elapsed time is measured.
"""

import logging
import re
from typing import Dict, Tuple

from rim.config import (
    COUNTER_COLUMNS,
    COUNTER_MAX,
    COUNTER_MODULUS,
    HEADER_MARKER,
    MIN_COUNTER_COLUMNS,
    PROBE_SENTINEL,
)
from rim.errors import CounterParseError, MalformedOutputError
from rim.rim_logging import TRACE

CounterSnapshot = Dict[str, Dict[str, int]]

_SENTINEL_LINE = re.compile(rf"^{re.escape(PROBE_SENTINEL)}[ \t]*\r?$\n?", re.MULTILINE)

module_logger = logging.getLogger(__name__)


def split_probe_output(output: str) -> Tuple[str, str]:
    """
    Split probe output into the snapshot at t1 and the snapshot at t2.

    Args:
        output: Everything the probe command printed on stdout.

    Returns:
        Tuple of (text before the sentinel, text after the sentinel).

    Raises:
        MalformedOutputError: If the sentinel is missing or repeated.
    """
    segments = _SENTINEL_LINE.split(output)
    if len(segments) != 2:
        raise MalformedOutputError(
            f"Expected exactly one '{PROBE_SENTINEL}' separator in probe output",
            segments=len(segments)
        )
    return segments[0], segments[1]


def parse_counter(value: str, column: int = None, line: str = None) -> int:
    """Convert one column to an unsigned 64 bit integer."""
    if not (value.isascii() and value.isdigit()):
        raise CounterParseError("Counter is not an unsigned integer", line=line, column=column, value=value)
    converted = int(value)
    if converted > COUNTER_MAX:
        raise CounterParseError("Counter exceeds 64 bits", line=line, column=column, value=value)
    return converted


def parse_row(line: str) -> Tuple[str, Dict[str, int]]:
    """
    Parse one interface row of /proc/net/dev.

    Format: "<iface>: <c0> <c1> ... <c15>". Columns 0-3 are the receive
    bytes, packets, errs and drop counters, columns 8-11 the transmit ones.
    All columns must be numeric even when they are not kept.

    Returns:
        Tuple of (interface name, counters by rate key).

    Raises:
        CounterParseError: If the row has no interface name, too few columns
            or a non-numeric column.
    """
    iface, separator, counters_text = line.partition(":")
    if not separator:
        raise CounterParseError("Row has no interface separator", line=line)
    iface = iface.replace(" ", "").strip()
    if not iface:
        raise CounterParseError("Row has an empty interface name", line=line)

    columns = counters_text.strip().split()
    if len(columns) < MIN_COUNTER_COLUMNS:
        raise CounterParseError(
            f"Expected at least {MIN_COUNTER_COLUMNS} counter columns, found {len(columns)}",
            line=line
        )

    parsed = [parse_counter(value, column, line) for column, value in enumerate(columns)]
    counters = {key: parsed[column] for column, key in COUNTER_COLUMNS.items()}
    return iface, counters


def parse_snapshot(content: str, logger=None) -> CounterSnapshot:
    """
    Parse one /proc/net/dev dump into a CounterSnapshot.

    Header rows (anything containing '|') and blank rows are skipped.
    """
    logger = logger or module_logger
    snapshot = {}
    for line in content.splitlines():
        if HEADER_MARKER in line or not line.strip():
            continue
        iface, counters = parse_row(line)
        logger.log(TRACE, f"Parsed counters for {iface}: {counters}")
        snapshot[iface] = counters
    return snapshot


def calculate_rates(snapshot_t1: CounterSnapshot, snapshot_t2: CounterSnapshot) -> CounterSnapshot:
    """
    Compute per-second rates for every interface present at t2.

    An interface or key missing at t1 counts as zero. Subtraction wraps modulo
    2**64, so a counter that went backwards (interface reset) yields a very
    large rate instead of a negative one.
    """
    rates = {}
    for iface, counters_t2 in snapshot_t2.items():
        counters_t1 = snapshot_t1.get(iface, {})
        rates[iface] = {
            key: (value - counters_t1.get(key, 0)) % COUNTER_MODULUS
            for key, value in counters_t2.items()
        }
    return rates


def compute_rates_from_output(output: str, logger=None) -> CounterSnapshot:
    """Split, parse and diff raw probe output in one step."""
    raw_t1, raw_t2 = split_probe_output(output)
    snapshot_t1 = parse_snapshot(raw_t1, logger=logger)
    snapshot_t2 = parse_snapshot(raw_t2, logger=logger)
    return calculate_rates(snapshot_t1, snapshot_t2)


__all__ = [
    "CounterSnapshot",
    "split_probe_output",
    "parse_counter",
    "parse_row",
    "parse_snapshot",
    "calculate_rates",
    "compute_rates_from_output",
]
