"""
CLI argument builders for RIM.

Modules:
    - common_args: Help messages and argument group builders
"""

from rim.cli.common_args import (
    HELP_MESSAGES,
    PROGRAM_DESCRIPTION,
    add_host_arguments,
    add_output_arguments,
    add_sort_arguments,
    add_ssh_arguments,
    add_universal_arguments,
)

__all__ = [
    'HELP_MESSAGES',
    'PROGRAM_DESCRIPTION',
    'add_host_arguments',
    'add_output_arguments',
    'add_sort_arguments',
    'add_ssh_arguments',
    'add_universal_arguments',
]
