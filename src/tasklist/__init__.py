"""
Ordered task list.

The core is importable without FastAPI being loaded:

    from tasklist import TaskStore, ReorderController

The HTTP app lives in tasklist.main.
"""

from .errors import IndexOutOfRange, InvalidInput, TaskListError
from .models import Task
from .reorder import Bounds, ReorderController
from .store import TaskStore

__all__ = [
    "Bounds",
    "IndexOutOfRange",
    "InvalidInput",
    "ReorderController",
    "Task",
    "TaskListError",
    "TaskStore",
]
