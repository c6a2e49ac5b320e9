"""
CLI argument parsing for RIM.

This module provides the main argument parsing entry point,
using the argument builders from the cli package, plus loading of the
host list.
"""

import argparse
import os
import sys
from typing import Any, Dict, List, Optional, Sequence, TextIO

import yaml

from rim.cli import (
    PROGRAM_DESCRIPTION,
    add_host_arguments,
    add_output_arguments,
    add_sort_arguments,
    add_ssh_arguments,
    add_universal_arguments,
)
from rim.config import BUILD_TIME, CONF_FILE_ENV, PROGRAM_NAME, VERSION
from rim.error_messages import format_error
from rim.errors import ConfigurationError, ErrorCode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rim", description=PROGRAM_DESCRIPTION)
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"{PROGRAM_NAME} {VERSION} (built {BUILD_TIME})"
    )
    add_host_arguments(parser)
    add_ssh_arguments(parser)
    add_sort_arguments(parser)
    add_output_arguments(parser)
    add_universal_arguments(parser)
    return parser


def parse_arguments(argv: Optional[Sequence[str]] = None, logger=None) -> argparse.Namespace:
    """Parse command-line arguments for RIM.

    Values from the YAML config file become parser defaults, so any option
    given on the command line takes precedence over the file.

    Args:
        argv: Arguments to parse, sys.argv[1:] when None.
        logger: Optional logger for warnings about the config file.

    Returns:
        argparse.Namespace: Parsed and validated arguments.

    Raises:
        ConfigurationError: If the config file cannot be used or a value is
            out of range.
    """
    parser = build_parser()

    # First pass only locates the config file
    known_args, _ = parser.parse_known_args(argv)
    config_file = known_args.config_file or os.environ.get(CONF_FILE_ENV) or None
    if config_file:
        parser.set_defaults(**load_yaml_config_defaults(parser, config_file, logger=logger))

    parsed_args = parser.parse_args(argv)
    parsed_args.config_file = config_file

    validate_args(parsed_args)
    update_args(parsed_args)
    return parsed_args


def load_yaml_config_defaults(parser: argparse.ArgumentParser, config_file: str,
                              logger=None) -> Dict[str, Any]:
    """
    Load option defaults from a YAML config file.

    Keys are long option names or their destinations, with either dashes or
    underscores ("connect-timeout", "connect_timeout", "ssh-option" or
    "ssh_options"). Every value is converted the way argparse converts the
    same option on the command line.

    Args:
        parser: Parser whose options the file may set.
        config_file: Path to the YAML file.
        logger: Optional logger for warnings about skipped keys

    Returns:
        dict: Option destinations mapped to converted values, ready for
        parser.set_defaults().

    Raises:
        ConfigurationError: If the file is missing, is not a YAML mapping or
            holds a value the option does not accept.
    """
    try:
        with open(config_file, 'r') as f:
            yaml_config = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Config file not found: {config_file}",
            parameter="config-file",
            actual=config_file,
            code=ErrorCode.CONFIG_FILE_NOT_FOUND
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(
            format_error('CONFIG_PARSE_ERROR', path=config_file, error=e),
            parameter="config-file",
            code=ErrorCode.CONFIG_PARSE_ERROR
        ) from e

    if not yaml_config:
        if logger:
            logger.warning(f"Config file {config_file} is empty")
        return {}

    if not isinstance(yaml_config, dict):
        raise ConfigurationError(
            f"Config file {config_file} must contain a mapping of option names to values",
            parameter="config-file",
            expected="mapping",
            actual=type(yaml_config).__name__,
            code=ErrorCode.CONFIG_PARSE_ERROR
        )

    # Options are known by their destination and by their long option names
    actions = {}
    for action in parser._actions:
        if action.default is argparse.SUPPRESS or action.dest == 'config_file':
            continue
        actions[action.dest] = action
        for option in action.option_strings:
            if option.startswith('--'):
                actions[option[2:].replace('-', '_')] = action

    defaults = {}
    for key, value in yaml_config.items():
        key = str(key).replace('-', '_')
        if key not in actions:
            if logger:
                logger.warning(f"Config file contains unknown parameter '{key}', skipping")
            continue

        # Skip None values to keep the built-in default
        if value is None:
            continue

        action = actions[key]
        defaults[action.dest] = convert_config_value(action, value)

    return defaults


def convert_config_value(action: argparse.Action, value: Any) -> Any:
    """Convert a config file value with the type and choices of its option.

    Flags take a YAML boolean. Options that accept several values take a list
    or a comma separated string.

    Raises:
        ConfigurationError: If the value is not valid for the option.
    """
    parameter = action.dest.replace('_', '-')

    def invalid(expected):
        return ConfigurationError(
            f"Invalid value for '{parameter}' in config file",
            parameter=parameter,
            expected=expected,
            actual=repr(value)
        )

    def convert(item):
        if isinstance(item, (list, dict)):
            raise invalid("a single value")
        # argparse hands strings to the type callable, so do the same
        try:
            converted = action.type(str(item)) if action.type else str(item)
        except (TypeError, ValueError, argparse.ArgumentTypeError) as e:
            raise invalid(getattr(action.type, '__name__', 'valid value')) from e
        if action.choices is not None and converted not in action.choices:
            raise invalid(f"one of {', '.join(map(str, action.choices))}")
        return converted

    if action.nargs == 0:
        if not isinstance(value, bool):
            raise invalid("true or false")
        return value

    if action.nargs in ('+', '*') or isinstance(action, argparse._AppendAction):
        if isinstance(value, str):
            value = [item.strip() for item in value.split(',') if item.strip()]
        elif not isinstance(value, list):
            raise invalid("list or comma separated string")
        return [convert(item) for item in value]

    return convert(value)


def validate_args(args: argparse.Namespace) -> None:
    """Check value ranges that argparse cannot express.

    Raises:
        ConfigurationError: On the first invalid value.
    """
    if args.limit is not None and args.limit < 0:
        raise ConfigurationError(
            "Limit must be zero or positive",
            parameter="limit", expected=">= 0", actual=args.limit
        )
    if args.workers is not None and args.workers < 1:
        raise ConfigurationError(
            "At least one worker is required",
            parameter="workers", expected=">= 1", actual=args.workers
        )
    if args.connect_timeout is not None and args.connect_timeout < 1:
        raise ConfigurationError(
            "Connect timeout must be at least one second",
            parameter="connect-timeout", expected=">= 1", actual=args.connect_timeout
        )
    if args.command_timeout is not None and args.command_timeout <= 0:
        raise ConfigurationError(
            "Command timeout must be positive",
            parameter="command-timeout", expected="> 0", actual=args.command_timeout
        )


def update_args(args: argparse.Namespace) -> None:
    """
    Normalize arguments for the rest of the program.

    --sort-keys wins over -k1/-k2; ssh_options becomes a tuple.
    """
    if not args.sort_keys:
        args.sort_keys = [key for key in (args.sort1, args.sort2) if key]
    args.ssh_options = tuple(args.ssh_options or ())


def parse_hosts(lines: Sequence[str]) -> List[str]:
    """Return host entries, skipping blank lines and '#' comments."""
    hosts = []
    for line in lines:
        entry = line.split('#', 1)[0].strip()
        if entry:
            hosts.append(entry)
    return hosts


def read_hosts(args: argparse.Namespace, stdin: Optional[TextIO] = None) -> List[str]:
    """
    Collect the target hosts from --hosts, --hosts-file or standard input.

    Raises:
        ConfigurationError: If the hosts file does not exist or no host is
            left after removing blank lines and comments.
    """
    hosts = list(args.hosts or [])
    if args.hosts_file:
        try:
            with open(args.hosts_file, 'r') as f:
                hosts.extend(parse_hosts(f.readlines()))
        except FileNotFoundError as e:
            raise ConfigurationError(
                format_error('HOSTS_FILE_NOT_FOUND', path=args.hosts_file),
                parameter="hosts-file",
                actual=args.hosts_file,
                code=ErrorCode.CONFIG_FILE_NOT_FOUND
            ) from e
    elif not hosts:
        stream = stdin or sys.stdin
        hosts.extend(parse_hosts(stream.readlines()))

    hosts = parse_hosts(hosts)
    if not hosts:
        raise ConfigurationError(
            format_error('NO_HOSTS'),
            parameter="hosts",
            code=ErrorCode.CONFIG_NO_HOSTS
        )
    return hosts


__all__ = [
    'build_parser',
    'parse_arguments',
    'load_yaml_config_defaults',
    'convert_config_value',
    'validate_args',
    'update_args',
    'parse_hosts',
    'read_hosts',
]
