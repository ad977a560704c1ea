from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import RLock
from typing import List, Optional, Tuple, Union

from .errors import IndexOutOfRange
from .models import Task
from .store import TaskStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bounds:
    """Vertical extent of a rendered list item, in client coordinates."""

    top: float
    bottom: float


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    origin_index: int
    current_index: int
    task_id: int


DragState = Union[Idle, Dragging]

IDLE = Idle()


# PUBLIC_INTERFACE
class ReorderController:
    """
    Turns a drag gesture over the rendered list into one store move.

    While the pointer moves, swaps are applied to a local provisional order
    only, so subscribers of the store are not woken up for every pixel.
    end() commits the net displacement with a single move_item call;
    cancel() throws the provisional order away.

    A hover only moves the dragged task once the pointer has crossed the
    vertical middle of the hovered item in the direction of travel. This
    keeps the list from flickering when the pointer rests near a boundary.

    The commit is resolved by task id against the store's order at drop
    time: the dragged task lands right after the task it follows in the
    preview, wherever those tasks sit by then. A drop of a task that was
    deleted during the gesture commits nothing.
    """

    def __init__(self, store: TaskStore) -> None:
        self._lock = RLock()
        self._store = store
        self._state: DragState = IDLE
        self._preview: List[Task] = []

    @property
    def state(self) -> DragState:
        with self._lock:
            return self._state

    @property
    def dragging(self) -> bool:
        with self._lock:
            return isinstance(self._state, Dragging)

    def preview(self) -> Tuple[Task, ...]:
        """Provisional order during a drag, the committed order otherwise."""
        with self._lock:
            if isinstance(self._state, Dragging):
                return tuple(self._preview)
            return self._store.snapshot()

    def start(self, index: int) -> None:
        with self._lock:
            if isinstance(self._state, Dragging):
                logger.debug("Drag restarted; dropping previous gesture %s", self._state)
                self._reset()
            order = list(self._store.snapshot())
            if not 0 <= index < len(order):
                raise IndexOutOfRange(index, len(order))
            self._preview = order
            self._state = Dragging(origin_index=index, current_index=index, task_id=order[index].id)
            logger.debug("Drag started index=%s task id=%s", index, order[index].id)

    def hover(self, index: int, pointer_y: float, bounds: Bounds) -> bool:
        """
        Handle the pointer moving over the item at ``index``.

        Returns True if the dragged task was provisionally moved there.
        """
        with self._lock:
            state = self._state
            if not isinstance(state, Dragging):
                return False
            if not 0 <= index < len(self._preview):
                raise IndexOutOfRange(index, len(self._preview))

            drag_index = state.current_index
            if index == drag_index:
                return False

            hover_middle_y = (bounds.bottom - bounds.top) / 2
            hover_client_y = pointer_y - bounds.top

            # Dragging downwards, not yet past the middle of the lower item
            if drag_index < index and hover_client_y < hover_middle_y:
                return False
            # Dragging upwards, not yet past the middle of the higher item
            if drag_index > index and hover_client_y > hover_middle_y:
                return False

            self._preview.insert(index, self._preview.pop(drag_index))
            self._state = Dragging(
                origin_index=state.origin_index,
                current_index=index,
                task_id=state.task_id,
            )
            return True

    def end(self) -> Optional[Tuple[int, int]]:
        """
        Finish the gesture.

        Returns the (from, to) pair handed to the store, or None when no
        move was needed or the dragged task no longer exists.
        """
        with self._lock:
            state = self._state
            preview = self._preview
            self._reset()
            if not isinstance(state, Dragging):
                return None
            if state.origin_index == state.current_index:
                logger.debug("Drag ended at its origin index=%s", state.origin_index)
                return None

            current_ids = [t.id for t in self._store.snapshot()]
            if state.task_id not in current_ids:
                logger.warning("Dropped task id=%s was deleted during the drag", state.task_id)
                return None
            from_index = current_ids.index(state.task_id)
            to_index = self._target_index(state, preview, current_ids)
            if from_index == to_index:
                return None
            self._store.move_item(from_index, to_index)
            logger.debug("Drag committed task id=%s from=%s to=%s", state.task_id, from_index, to_index)
            return from_index, to_index

    @staticmethod
    def _target_index(state: Dragging, preview: List[Task], current_ids: List[int]) -> int:
        # Position right after the nearest preview predecessor still present.
        others = [i for i in current_ids if i != state.task_id]
        for task in reversed(preview[:state.current_index]):
            if task.id in others:
                return others.index(task.id) + 1
        return 0

    def cancel(self) -> None:
        with self._lock:
            if isinstance(self._state, Dragging):
                logger.debug("Drag cancelled %s", self._state)
            self._reset()

    def _reset(self) -> None:
        self._state = IDLE
        self._preview = []
