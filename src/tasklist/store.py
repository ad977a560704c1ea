from __future__ import annotations

import itertools
import logging
from dataclasses import replace
from datetime import datetime
from threading import RLock
from typing import Callable, List, Optional, Set, Tuple, Union

from .errors import IndexOutOfRange
from .models import Task

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
IdSource = Callable[[], int]
Subscriber = Callable[[], None]

# A task may be referenced by value or by id; the store only trusts the id.
TaskRef = Union[Task, int]


def _ref_id(task: TaskRef) -> int:
    return task.id if isinstance(task, Task) else int(task)


# PUBLIC_INTERFACE
class TaskStore:
    """
    In-memory ordered task collection with observable mutation.

    The store is the only owner of the sequence and of every Task in it.
    Order is the user's display/drag order and has nothing to do with
    created_at.

    Notification rules:
    - subscribers are called synchronously, in subscription order
    - exactly once per public call that changed something, after the change
    - never for no-ops (empty add, repeated complete, missing id, ...)

    Every public operation runs under one re-entrant lock, so a call is a
    single atomic unit even when invoked from a worker thread pool.
    Subscribers run inside that lock and may call snapshot().
    """

    def __init__(self, clock: Optional[Clock] = None, id_source: Optional[IdSource] = None) -> None:
        self._lock = RLock()
        self._items: List[Task] = []
        self._subscribers: List[Subscriber] = []
        self._clock: Clock = clock or datetime.now
        self._id_source: IdSource = id_source or itertools.count(1).__next__
        # Only ids from an injected source need checking; the built-in counter never repeats.
        self._issued_ids: Optional[Set[int]] = set() if id_source is not None else None

    def _allocate_id(self) -> int:
        new_id = int(self._id_source())
        if self._issued_ids is not None:
            if new_id in self._issued_ids:
                raise RuntimeError(f"id source returned an already issued id: {new_id}")
            self._issued_ids.add(new_id)
        return new_id

    def _position(self, task_id: int) -> Optional[int]:
        for i, item in enumerate(self._items):
            if item.id == task_id:
                return i
        return None

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            try:
                callback()
            except Exception:
                logger.exception("Task store subscriber %r failed", callback)

    # ---- subscriptions ----

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a zero-argument change callback.

        Returns a function that removes the subscription again.
        """
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            self.unsubscribe(callback)

        return _unsubscribe

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    # ---- reads ----

    def snapshot(self) -> Tuple[Task, ...]:
        """Return the tasks in their current order as an immutable tuple."""
        with self._lock:
            return tuple(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    # ---- mutations ----

    def add_todo(self, text: str) -> Optional[Task]:
        """
        Append a new task at the end of the list.

        Text is trimmed first; blank text is ignored and None is returned.
        """
        cleaned = (text or "").strip()
        if not cleaned:
            logger.debug("Ignoring add with blank text")
            return None
        with self._lock:
            task = Task(id=self._allocate_id(), text=cleaned, created_at=self._clock())
            self._items.append(task)
            logger.debug("Task added id=%s position=%s", task.id, len(self._items) - 1)
            self._notify()
            return task

    def complete(self, task: TaskRef) -> bool:
        """Mark a task done. Returns False when nothing changed."""
        return self._set_done(_ref_id(task), True)

    def incomplete(self, task: TaskRef) -> bool:
        """Mark a task not done. Returns False when nothing changed."""
        return self._set_done(_ref_id(task), False)

    def _set_done(self, task_id: int, done: bool) -> bool:
        with self._lock:
            pos = self._position(task_id)
            if pos is None:
                logger.debug("Ignoring done=%s for missing task id=%s", done, task_id)
                return False
            if self._items[pos].done == done:
                return False
            self._items[pos] = replace(self._items[pos], done=done)
            logger.debug("Task id=%s done=%s", task_id, done)
            self._notify()
            return True

    def delete(self, task: TaskRef) -> bool:
        """
        Remove a task by id.

        Deleting a task that is already gone is a no-op, since a UI can
        easily send the same delete twice.
        """
        task_id = _ref_id(task)
        with self._lock:
            pos = self._position(task_id)
            if pos is None:
                logger.debug("Ignoring delete for missing task id=%s", task_id)
                return False
            del self._items[pos]
            logger.debug("Task deleted id=%s", task_id)
            self._notify()
            return True

    def edit_text(self, task: TaskRef, new_text: str) -> bool:
        """
        Replace a task's text.

        Returns False, leaving the task untouched, when the trimmed text is
        empty or the task does not exist.
        """
        task_id = _ref_id(task)
        cleaned = (new_text or "").strip()
        if not cleaned:
            logger.debug("Rejected blank edit for task id=%s", task_id)
            return False
        with self._lock:
            pos = self._position(task_id)
            if pos is None:
                logger.debug("Ignoring edit for missing task id=%s", task_id)
                return False
            self._items[pos] = replace(self._items[pos], text=cleaned)
            logger.debug("Task edited id=%s", task_id)
            self._notify()
            return True

    def move_item(self, from_index: int, to_index: int) -> None:
        """
        Move the task at from_index so that it ends up at to_index.

        Both positions must lie in [0, len). Negative positions are not
        counted from the end. Invalid positions raise IndexOutOfRange and
        leave the order untouched.
        """
        with self._lock:
            length = len(self._items)
            for index in (from_index, to_index):
                if not 0 <= index < length:
                    raise IndexOutOfRange(index, length)
            if from_index == to_index:
                return
            task = self._items.pop(from_index)
            self._items.insert(to_index, task)
            logger.debug("Task moved id=%s from=%s to=%s", task.id, from_index, to_index)
            self._notify()
