from __future__ import annotations


class TaskListError(Exception):
    """Base class for task list errors."""


# PUBLIC_INTERFACE
class InvalidInput(TaskListError, ValueError):
    """
    Task text is empty or whitespace-only.

    The store itself never raises this: an empty add is ignored and an
    empty edit returns False. Callers raise it when they want to report
    the rejection.
    """


# PUBLIC_INTERFACE
class IndexOutOfRange(TaskListError, IndexError):
    """A position outside [0, length) was used for a reorder request."""

    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"index {index} out of range for {length} task(s)")
        self.index = index
        self.length = length
