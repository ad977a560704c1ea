from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field

from ..errors import InvalidInput
from ..models import Task
from ..reorder import Bounds, ReorderController
from ..schemas import (
    DragHover,
    DragStart,
    DragStateOut,
    MoveRequest,
    TaskCreate,
    TaskCreated,
    TaskEdit,
    TaskOut,
)
from ..state import AppState, get_app_state
from ..store import TaskStore
from ..utils import list_envelope

router = APIRouter(
    prefix="/api/v1/tasks",
    tags=["tasks"],
)


class TaskListEnvelope(BaseModel):
    """
    Envelope for the task list: every task, in display order.
    """
    items: List[TaskOut] = Field(..., description="Tasks in display order")
    total: int = Field(..., description="Total number of tasks")
    revision: int = Field(..., description="Change counter; re-read the list when it moves")


def _get_store(state: AppState = Depends(get_app_state)) -> TaskStore:
    return state.store


def _get_reorder(state: AppState = Depends(get_app_state)) -> ReorderController:
    return state.reorder


def _find(store: TaskStore, task_id: int) -> Task:
    for task in store.snapshot():
        if task.id == task_id:
            return task
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


def _drag_out(
    reorder: ReorderController,
    moved: Optional[bool] = None,
    committed: Optional[List[int]] = None,
) -> DragStateOut:
    state = reorder.state
    return DragStateOut(
        dragging=reorder.dragging,
        origin_index=getattr(state, "origin_index", None),
        current_index=getattr(state, "current_index", None),
        order=[t.id for t in reorder.preview()],
        moved=moved,
        committed=committed,
    )


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=TaskListEnvelope,
    summary="List Tasks",
    description=(
        "Return all tasks in their display order.\n\n"
        "The revision field changes whenever the list changes."
    ),
)
def list_tasks(state: AppState = Depends(get_app_state)) -> TaskListEnvelope:
    """
    List tasks in display order.
    """
    snapshot = state.store.snapshot()
    envelope = list_envelope(
        items=[TaskOut.from_task(t) for t in snapshot],
        revision=state.revisions.value,
    )
    return TaskListEnvelope(**envelope)


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TaskCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Add Task",
    description="Append a new task to the end of the list.",
    responses={
        201: {"description": "Task added"},
        422: {"description": "Blank or too long text"},
    },
)
def add_task(payload: TaskCreate, store: TaskStore = Depends(_get_store)) -> TaskCreated:
    created = store.add_todo(payload.text)
    if created is None:
        # Unreachable with a validated payload; the store trims the same way.
        raise InvalidInput("text must not be blank")
    return TaskCreated(**TaskOut.from_task(created).model_dump())


# PUBLIC_INTERFACE
@router.post(
    "/move",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Move Task",
    description="Move the task at from_index so that it ends up at to_index.",
    responses={
        204: {"description": "Order updated"},
        400: {"description": "Index out of range"},
    },
)
def move_task(payload: MoveRequest, store: TaskStore = Depends(_get_store)) -> Response:
    store.move_item(payload.from_index, payload.to_index)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# PUBLIC_INTERFACE
@router.post("/drag/start", response_model=DragStateOut, summary="Start Drag")
def drag_start(payload: DragStart, reorder: ReorderController = Depends(_get_reorder)) -> DragStateOut:
    reorder.start(payload.index)
    return _drag_out(reorder)


# PUBLIC_INTERFACE
@router.post(
    "/drag/hover",
    response_model=DragStateOut,
    summary="Drag Hover",
    description="Report the pointer over an item; may move the dragged task provisionally.",
)
def drag_hover(payload: DragHover, reorder: ReorderController = Depends(_get_reorder)) -> DragStateOut:
    moved = reorder.hover(payload.index, payload.pointer_y, Bounds(top=payload.top, bottom=payload.bottom))
    return _drag_out(reorder, moved=moved)


# PUBLIC_INTERFACE
@router.post(
    "/drag/end",
    response_model=DragStateOut,
    summary="End Drag",
    description="Drop the dragged task and commit its new position to the list.",
)
def drag_end(reorder: ReorderController = Depends(_get_reorder)) -> DragStateOut:
    committed = reorder.end()
    return _drag_out(reorder, committed=list(committed) if committed else None)


# PUBLIC_INTERFACE
@router.post("/drag/cancel", response_model=DragStateOut, summary="Cancel Drag")
def drag_cancel(reorder: ReorderController = Depends(_get_reorder)) -> DragStateOut:
    reorder.cancel()
    return _drag_out(reorder)


# PUBLIC_INTERFACE
@router.post(
    "/{task_id}/complete",
    response_model=TaskOut,
    summary="Complete Task",
    responses={404: {"description": "Task not found"}},
)
def complete_task(task_id: int, store: TaskStore = Depends(_get_store)) -> TaskOut:
    store.complete(task_id)
    return TaskOut.from_task(_find(store, task_id))


# PUBLIC_INTERFACE
@router.post(
    "/{task_id}/incomplete",
    response_model=TaskOut,
    summary="Reopen Task",
    responses={404: {"description": "Task not found"}},
)
def incomplete_task(task_id: int, store: TaskStore = Depends(_get_store)) -> TaskOut:
    store.incomplete(task_id)
    return TaskOut.from_task(_find(store, task_id))


# PUBLIC_INTERFACE
@router.patch(
    "/{task_id}",
    response_model=TaskOut,
    summary="Edit Task",
    description="Replace the task text. Blank text is rejected and the old text kept.",
    responses={
        200: {"description": "Task updated"},
        404: {"description": "Task not found"},
        422: {"description": "Blank text rejected"},
    },
)
def edit_task(task_id: int, payload: TaskEdit, store: TaskStore = Depends(_get_store)) -> TaskOut:
    if not payload.text.strip():
        _find(store, task_id)
        raise InvalidInput("text must not be blank")
    if not store.edit_text(task_id, payload.text):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return TaskOut.from_task(_find(store, task_id))


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Task",
    description="Delete a task. Deleting a task that is already gone also returns 204.",
)
def delete_task(task_id: int, store: TaskStore = Depends(_get_store)) -> Response:
    store.delete(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
