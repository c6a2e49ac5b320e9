"""
Interface definitions for RIM.

Available Interfaces:
    - Task: unit of work executed by rim.worker_pool.WorkerPool
"""

from rim.interfaces.task import Task

__all__ = [
    'Task',
]
