#!/usr/bin/env python3
"""
RIM - Remote Interfaces Monitor - Main Entry Point

Polls every host in parallel over ssh, samples /proc/net/dev twice one
second apart, ranks the resulting interface rates and prints them.
"""

import signal
import sys
import traceback

from rim.cli_parser import parse_arguments, read_hosts
from rim.config import EXIT_CODE, RIM_DEBUG, default_workers
from rim.error_messages import format_error
from rim.errors import (
    ConfigurationError,
    IncompleteRunError,
    RimException,
)
from rim.progress import progress_context
from rim.ranking import rank, validate_sort_keys
from rim.reporting import display_results
from rim.reporting.formats import FormatConfig
from rim.rim_logging import setup_logging, apply_logging_options
from rim.sampler import collect_records, make_tasks
from rim.ssh import ConnectionConfig, SSHConnector
from rim.worker_pool import InterruptToken, WorkerPool

logger = setup_logging("RIM")
show_traceback = RIM_DEBUG


def poll_hosts(hosts, config, workers, interrupt, connector=None):
    """
    Sample every host on a worker pool.

    Args:
        hosts: Host entries formatted as <hostname>[:port].
        config: Shared connection settings.
        workers: Number of hosts polled in parallel.
        interrupt: Token that stops submission of further hosts.
        connector: SSHConnector to share between tasks.

    Returns:
        Tuple of (records, incomplete_error). incomplete_error is the
        IncompleteRunError raised by the pool, or None.
    """
    tasks = make_tasks(hosts, config, connector=connector, logger=logger)
    incomplete = None
    with progress_context(f"Polling {len(tasks)} hosts", total=len(tasks), logger=logger) as (update, _):
        pool = WorkerPool(
            workers=min(workers, len(tasks)) or 1,
            interrupt=interrupt,
            on_task_done=lambda task: update(),
            logger=logger
        )
        try:
            pool.run(tasks)
        except IncompleteRunError as e:
            incomplete = e
    return collect_records(tasks), incomplete


def _main_impl(argv=None):
    """
    Main implementation with error handling.

    This is the actual implementation of main(), separated out
    so that main() can wrap it with exception handling.
    """
    global show_traceback

    args = parse_arguments(argv, logger=logger)
    apply_logging_options(logger, args)
    show_traceback = show_traceback or args.debug

    # Fail on a bad key before any host is contacted
    sort_keys = validate_sort_keys(args.sort_keys)
    hosts = read_hosts(args)
    logger.verbose(f"Polling {len(hosts)} hosts, sorting by {', '.join(k.name for k in sort_keys)}")

    config = ConnectionConfig.from_environment(
        username=args.user,
        password=args.password,
        use_agent=not args.no_agent,
        connect_timeout=args.connect_timeout,
        command_timeout=args.command_timeout,
        ssh_options=args.ssh_options,
    )
    if not config.auth_methods():
        logger.warning("No password given and no ssh-agent available, relying on default ssh keys")

    interrupt = InterruptToken()
    interrupt.install_signal_handler((signal.SIGINT, signal.SIGTERM), logger=logger)
    try:
        connector = SSHConnector(config, logger=logger)
        records, incomplete = poll_hosts(
            hosts, config, args.workers or default_workers(), interrupt, connector=connector
        )
    finally:
        interrupt.restore_signal_handlers()

    failed = sum(1 for r in records if r.failed)
    logger.debug(f"Collected {len(records)} records, {failed} failed hosts")

    ranked = rank(records, sort_keys)
    format_config = FormatConfig(
        output_path=args.output,
        no_head=args.no_head,
        extended=args.extended,
        use_colors=sys.stdout.isatty(),
    )
    display_results(ranked, format_name=args.format, config=format_config, limit=args.limit)

    if incomplete is not None:
        logger.warning(format_error('RUN_INCOMPLETE', submitted=incomplete.submitted, total=incomplete.total))
        return EXIT_CODE.INCOMPLETE
    return EXIT_CODE.SUCCESS


def main(argv=None):
    """
    Main entry point with comprehensive error handling.

    This function wraps _main_impl() to catch and handle all
    exceptions with user-friendly error messages.
    """
    try:
        return _main_impl(argv)

    except ConfigurationError as e:
        logger.error(str(e))
        if e.suggestion:
            logger.info(f"Suggestion: {e.suggestion}")
        return EXIT_CODE.INVALID_ARGUMENTS

    except RimException as e:
        # Catch-all for any other custom exceptions
        logger.error(str(e))
        if e.suggestion:
            logger.info(f"Suggestion: {e.suggestion}")
        return EXIT_CODE.FAILURE

    except ValueError as e:
        logger.error(str(e))
        return EXIT_CODE.INVALID_ARGUMENTS

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return EXIT_CODE.INTERRUPTED

    except SystemExit:
        # Re-raise SystemExit to allow clean exits
        raise

    except Exception as e:
        logger.error(format_error('INTERNAL_ERROR', error=str(e)))
        if show_traceback:
            logger.debug("Stack trace:")
            traceback.print_exc()
        else:
            logger.info("Run with --debug for full stack trace")
        return EXIT_CODE.GENERAL_ERROR


if __name__ == "__main__":
    sys.exit(main())
