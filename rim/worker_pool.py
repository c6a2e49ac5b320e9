"""
Bounded worker pool for running independent tasks in parallel.

A producer thread feeds tasks into a bounded queue that holds at most as many
pending tasks as the configured queue size, so submission blocks while every
slot is taken. A fixed number of worker threads pull tasks from the queue and
execute them one at a time. Before each push the producer checks an
InterruptToken; once it is set no further task is queued, the tasks already
queued still run to completion and run() raises IncompleteRunError after every
worker has exited.

If a task raises SystemExit, KeyboardInterrupt or another BaseException, the
remaining tasks are skipped and run() re-raises it once the workers are gone.

Usage:
    pool = WorkerPool(workers=8)
    pool.run(tasks)   # blocks until all tasks ran, or raises IncompleteRunError
"""

import logging
import queue
import signal
import threading
from typing import Callable, Iterable, List, Optional, Sequence

from rim.config import default_workers
from rim.errors import IncompleteRunError
from rim.interfaces.task import Task

# Queued once per worker to close the jobs queue
_STOP = object()

# Events posted to the completion queue
_WORKER_DONE = object()
_PREMATURE_END = object()


class InterruptToken:
    """Cooperative cancellation flag checked by the WorkerPool producer.

    The token can be set directly or from a signal handler registered with
    install_signal_handler(). Setting it never stops a task that is already
    running.
    """

    def __init__(self):
        self._event = threading.Event()
        self._original_handlers = {}
        self.signal_received = None

    def set(self) -> None:
        self._event.set()

    def clear(self) -> None:
        self._event.clear()
        self.signal_received = None

    def is_set(self) -> bool:
        return self._event.is_set()

    def install_signal_handler(self, signals: Iterable[int] = (signal.SIGINT,), logger=None) -> None:
        """Set this token whenever one of the given signals is received.

        Must be called from the main thread. The previous handlers are kept
        and put back by restore_signal_handlers().
        """
        def signal_handler(sig, frame):
            self.signal_received = sig
            if logger is not None:
                logger.warning(f"Received signal {signal.Signals(sig).name}, finishing queued hosts")
            self._event.set()

        for sig in signals:
            if sig not in self._original_handlers:
                self._original_handlers[sig] = signal.getsignal(sig)
            signal.signal(sig, signal_handler)

    def restore_signal_handlers(self) -> None:
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers = {}


class WorkerPool:
    """Runs tasks on a fixed number of worker threads.

    Attributes:
        workers: Number of worker threads started by each run().
        queue_size: Maximum number of tasks waiting in the queue.
        interrupt: Token checked by the producer before each push.
        on_task_done: Optional callback invoked with each task after it ran.
            It is called from worker threads.
        submitted: Number of tasks queued by the last run().
    """

    def __init__(
        self,
        workers: Optional[int] = None,
        queue_size: Optional[int] = None,
        interrupt: Optional[InterruptToken] = None,
        on_task_done: Optional[Callable[[Task], None]] = None,
        logger=None
    ):
        self.workers = workers if workers is not None else default_workers()
        if self.workers < 1:
            raise ValueError(f"WorkerPool needs at least one worker, got {self.workers}")
        self.queue_size = queue_size if queue_size is not None else self.workers
        if self.queue_size < 1:
            raise ValueError(f"WorkerPool queue size must be positive, got {self.queue_size}")
        self.interrupt = interrupt if interrupt is not None else InterruptToken()
        self.on_task_done = on_task_done
        self.logger = logger or logging.getLogger(__name__)
        self.submitted = 0
        self._abort = threading.Event()
        self._fatal: Optional[BaseException] = None
        self._fatal_lock = threading.Lock()

    def run(self, tasks: Sequence[Task]) -> None:
        """Execute every task once and block until all workers have exited.

        Raises:
            IncompleteRunError: If the interrupt token was set before every
                task could be queued. Tasks that were never queued did not run.
            BaseException: The first SystemExit, KeyboardInterrupt or other
                non-Exception raised by a task or by on_task_done. Tasks not
                started yet are skipped and the exception is re-raised here
                once every worker has exited.
        """
        tasks = list(tasks)
        self.submitted = 0
        self._abort.clear()
        self._fatal = None
        jobs_queue = queue.Queue(maxsize=self.queue_size)
        events = queue.Queue()

        self.logger.debug(f"Starting {self.workers} workers for {len(tasks)} tasks")
        producer = threading.Thread(
            target=self._populate_queue,
            args=(jobs_queue, events, tasks),
            name="rim-producer"
        )
        workers = self._start_workers(jobs_queue, events)
        producer.start()

        premature_end = False
        total_done = 0
        while total_done < self.workers:
            event = events.get()
            if event is _PREMATURE_END:
                premature_end = True
            else:
                total_done += 1

        # Every worker has exited, so the producer is past its last push
        producer.join()
        for worker in workers:
            worker.join()
        while not events.empty():
            if events.get_nowait() is _PREMATURE_END:
                premature_end = True

        self.logger.debug(f"All workers done, {self.submitted}/{len(tasks)} tasks queued")
        if self._fatal is not None:
            raise self._fatal
        if premature_end:
            raise IncompleteRunError(submitted=self.submitted, total=len(tasks))

    def _start_workers(self, jobs_queue: queue.Queue, events: queue.Queue) -> List[threading.Thread]:
        workers = []
        for i in range(self.workers):
            worker = threading.Thread(
                target=self._evaluate_queue,
                args=(jobs_queue, events),
                name=f"rim-worker-{i}"
            )
            worker.start()
            workers.append(worker)
        return workers

    def _populate_queue(self, jobs_queue: queue.Queue, events: queue.Queue, tasks: List[Task]) -> None:
        for task in tasks:
            if self.interrupt.is_set():
                self.logger.warning(
                    f"Interrupt received, {len(tasks) - self.submitted} tasks will not be executed"
                )
                events.put(_PREMATURE_END)
                break
            if self._abort.is_set():
                self.logger.debug(
                    f"Run aborted, {len(tasks) - self.submitted} tasks will not be executed"
                )
                break
            jobs_queue.put(task)
            self.submitted += 1

        for _ in range(self.workers):
            jobs_queue.put(_STOP)

    def _evaluate_queue(self, jobs_queue: queue.Queue, events: queue.Queue) -> None:
        try:
            while True:
                task = jobs_queue.get()
                if task is _STOP:
                    break
                if self._abort.is_set():
                    # Keep draining so the producer can push the stop markers
                    continue
                try:
                    task.execute()
                except Exception as e:
                    self.logger.error(f"Task {task!r} raised an unexpected exception: {e}")
                except BaseException as e:
                    self._record_fatal(task, e)
                    continue
                if self.on_task_done is not None:
                    try:
                        self.on_task_done(task)
                    except Exception as e:
                        self.logger.debug(f"on_task_done callback failed: {e}")
                    except BaseException as e:
                        self._record_fatal(task, e)
        finally:
            events.put(_WORKER_DONE)

    def _record_fatal(self, task: Task, exc: BaseException) -> None:
        self.logger.error(f"Task {task!r} raised {type(exc).__name__}, aborting the run")
        with self._fatal_lock:
            if self._fatal is None:
                self._fatal = exc
        self._abort.set()


__all__ = [
    "InterruptToken",
    "WorkerPool",
]
