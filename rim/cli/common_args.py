"""
CLI arguments and help messages for RIM.

This module contains:
- Help message definitions
- Argument group builders used by rim.cli_parser
"""

from rim.config import (
    CONF_FILE_ENV,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_SORT_KEYS,
    DEFAULT_SSH_USER,
    OUTPUT_FORMATS,
    SORT_KEYS,
)


# Help messages dictionary - shared across all argument builders
HELP_MESSAGES = {
    'hosts_file': (
        "[FILE] file containing target hosts. One per line formatted as <hostname>[:port]. "
        "Hosts are read from standard input when neither --hosts-file nor --hosts is given."
    ),
    'hosts': "Space-separated list of target hosts formatted as <hostname>[:port].",
    'user': "[USERNAME] ssh username.",
    'password': "[PASSWORD] ssh password for remote hosts. ssh-agent is used as fallback.",
    'no_agent': "Do not offer ssh-agent keys.",
    'connect_timeout': "Seconds allowed to establish each ssh connection.",
    'command_timeout': "Optional limit in seconds for the whole remote probe. No limit by default.",
    'ssh_option': "Extra ssh option passed as '-o OPTION'. May be repeated.",
    'workers': "Number of hosts polled in parallel. Defaults to the number of CPUs.",
    'sort_key': (
        f"Sort key. Valid keys: {', '.join(SORT_KEYS)}. "
        "Prefix with '+' for ascending order."
    ),
    'sort_keys': "Ordered list of sort keys. Overrides -k1/-k2.",
    'limit': "Limit printed results to this number; 0 means no limits.",
    'no_head': "Do not show titles in output.",
    'extended': "Enable extended output (error rates).",
    'format': f"Output format. Supported options: {', '.join(OUTPUT_FORMATS)}.",
    'output': "Write the report to this file instead of standard output.",
    'config_file': (
        "Path to YAML file with default values for any option. Command line options take "
        f"precedence. Defaults to the value of ${CONF_FILE_ENV}."
    ),
}

PROGRAM_DESCRIPTION = (
    "Agentless network interfaces monitor for Linux firewalls/servers. "
    "Samples /proc/net/dev over ssh on every host and ranks interfaces by rate."
)


def add_host_arguments(parser):
    """Add target host arguments.

    Args:
        parser: Argparse parser to add arguments to.
    """
    host_args = parser.add_argument_group("Hosts")
    host_args.add_argument(
        '--hosts-file', '-f',
        type=str,
        default=None,
        help=HELP_MESSAGES['hosts_file']
    )
    host_args.add_argument(
        '--hosts', '-s',
        nargs="+",
        default=None,
        help=HELP_MESSAGES['hosts']
    )


def add_ssh_arguments(parser):
    """Add ssh connection arguments.

    Args:
        parser: Argparse parser to add arguments to.
    """
    ssh_args = parser.add_argument_group("SSH")
    ssh_args.add_argument(
        '--user', '-u',
        type=str,
        default=DEFAULT_SSH_USER,
        help=HELP_MESSAGES['user']
    )
    ssh_args.add_argument(
        '--password', '-p',
        type=str,
        default=None,
        help=HELP_MESSAGES['password']
    )
    ssh_args.add_argument(
        '--no-agent',
        action="store_true",
        help=HELP_MESSAGES['no_agent']
    )
    ssh_args.add_argument(
        '--connect-timeout',
        type=int,
        default=DEFAULT_CONNECT_TIMEOUT,
        help=HELP_MESSAGES['connect_timeout']
    )
    ssh_args.add_argument(
        '--command-timeout',
        type=float,
        default=None,
        help=HELP_MESSAGES['command_timeout']
    )
    ssh_args.add_argument(
        '--ssh-option',
        dest="ssh_options",
        action="append",
        default=None,
        metavar="OPTION",
        help=HELP_MESSAGES['ssh_option']
    )
    ssh_args.add_argument(
        '--workers', '-w',
        type=int,
        default=None,
        help=HELP_MESSAGES['workers']
    )


def add_sort_arguments(parser):
    """Add ranking arguments.

    Args:
        parser: Argparse parser to add arguments to.
    """
    sort_args = parser.add_argument_group("Sorting")
    sort_args.add_argument(
        '-k1',
        dest="sort1",
        type=str,
        default=DEFAULT_SORT_KEYS[0],
        help="First " + HELP_MESSAGES['sort_key'].lower()
    )
    sort_args.add_argument(
        '-k2',
        dest="sort2",
        type=str,
        default=DEFAULT_SORT_KEYS[1],
        help="Second " + HELP_MESSAGES['sort_key'].lower()
    )
    sort_args.add_argument(
        '--sort-keys',
        nargs="+",
        default=None,
        metavar="KEY",
        help=HELP_MESSAGES['sort_keys']
    )


def add_output_arguments(parser):
    """Add result presentation arguments.

    Args:
        parser: Argparse parser to add arguments to.
    """
    output_args = parser.add_argument_group("Output")
    output_args.add_argument(
        '--limit', '-l',
        type=int,
        default=0,
        help=HELP_MESSAGES['limit']
    )
    output_args.add_argument(
        '--no-head', '-n',
        action="store_true",
        help=HELP_MESSAGES['no_head']
    )
    output_args.add_argument(
        '--extended', '-e',
        action="store_true",
        help=HELP_MESSAGES['extended']
    )
    output_args.add_argument(
        '--format',
        choices=OUTPUT_FORMATS,
        default=DEFAULT_OUTPUT_FORMAT,
        help=HELP_MESSAGES['format']
    )
    output_args.add_argument(
        '--output', '-o',
        type=str,
        default=None,
        help=HELP_MESSAGES['output']
    )


def add_universal_arguments(parser):
    """Add configuration file and logging arguments.

    Args:
        parser: Argparse parser to add arguments to.
    """
    standard_args = parser.add_argument_group("Standard Arguments")
    standard_args.add_argument(
        '--config-file', '-c',
        type=str,
        default=None,
        help=HELP_MESSAGES['config_file']
    )

    output_control = parser.add_argument_group("Output Control")
    output_control.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode"
    )
    output_control.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose mode"
    )
    output_control.add_argument(
        "--trace",
        action="store_true",
        help="Log raw probe output and parsed counters"
    )
    output_control.add_argument(
        "--stream-log-level",
        type=str,
        default=None
    )
