"""
RIM - Remote Interfaces Monitor.

Agentless network interface monitor for Linux firewalls and servers. Counters
are read over SSH from every target host, turned into per-second rates and
ranked across the whole fleet.
"""

from rim.config import VERSION

__all__ = ['VERSION']
