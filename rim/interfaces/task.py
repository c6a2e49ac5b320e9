"""
Task interface definitions for RIM.

A task is an opaque unit of work handed to the WorkerPool. It exposes a single
operation, execute(), returns nothing and keeps its outcome in its own state.
Each task is owned by exactly one worker while it runs, so implementations do
not need any locking around their result attributes.
"""

from abc import ABC, abstractmethod


class Task(ABC):
    """Interface for units of work run by the WorkerPool.

    Example:
        class Sleeper(Task):
            def __init__(self, seconds):
                self.seconds = seconds
                self.done = False

            def execute(self):
                time.sleep(self.seconds)
                self.done = True
    """

    @abstractmethod
    def execute(self) -> None:
        """Run the task to completion, storing any outcome on the instance.

        Implementations should capture their own failures; an exception that
        escapes execute() is logged by the worker and otherwise ignored.
        """
        pass
