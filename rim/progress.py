"""Progress indication utilities using Rich library.

In interactive terminals a Rich progress bar tracks the hosts polled so far.
In non-interactive terminals (cron, pipes, logs) a status message is logged
instead and the update function does nothing.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator, Optional, Tuple

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

if TYPE_CHECKING:
    from logging import Logger

# Type aliases for yielded functions
UpdateFunc = Callable[..., None]
SetDescriptionFunc = Callable[[str], None]


def is_interactive_terminal() -> bool:
    """Detect if running in an interactive terminal.

    Progress is drawn on stderr so that piping the table elsewhere keeps the
    bar visible.
    """
    console = Console(stderr=True)
    return console.is_terminal


@contextmanager
def progress_context(
    description: str,
    total: Optional[int] = None,
    logger: Optional["Logger"] = None,
    transient: bool = True,
) -> Iterator[Tuple[UpdateFunc, SetDescriptionFunc]]:
    """Context manager for progress indication with automatic TTY detection.

    Args:
        description: Initial description text for the progress indicator.
        total: Total count for determinate progress. If None, shows an
            indeterminate spinner.
        logger: Logger instance for non-interactive mode status messages.
        transient: If True, progress is cleared when complete (default True).

    Yields:
        Tuple of (update_func, set_description_func):
            - update_func(advance=1, completed=None): Advances progress
            - set_description_func(desc): Updates description text

    Example:
        >>> with progress_context("Polling hosts", total=len(tasks)) as (update, _):
        ...     pool = WorkerPool(on_task_done=lambda task: update())
        ...     pool.run(tasks)
    """
    if not is_interactive_terminal():
        if logger is not None:
            logger.status(f"{description}...")

        def noop_update(advance: int = 1, completed: Optional[int] = None) -> None:
            pass

        def noop_set_description(desc: str) -> None:
            pass

        yield (noop_update, noop_set_description)
        return

    if total is None:
        columns = [
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
        ]
    else:
        columns = [
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            TimeElapsedColumn(),
        ]

    progress = Progress(*columns, transient=transient, console=Console(stderr=True))
    task_id: TaskID = TaskID(0)

    try:
        progress.start()
        task_id = progress.add_task(description, total=total)

        def update_func(advance: int = 1, completed: Optional[int] = None) -> None:
            """Update progress by advancing or setting completed value."""
            if completed is not None:
                progress.update(task_id, completed=completed)
            else:
                progress.update(task_id, advance=advance)

        def set_description_func(desc: str) -> None:
            """Update the progress description text."""
            progress.update(task_id, description=desc)

        yield (update_func, set_description_func)
    finally:
        progress.stop()


__all__ = [
    "is_interactive_terminal",
    "progress_context",
]
