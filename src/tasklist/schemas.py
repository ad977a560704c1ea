from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import Task
from .settings import get_settings

# Display formats of the creation stamp shown next to each task.
TASK_CREATION_TIME_FORMAT = "%H:%M"
TASK_CREATION_DATE_FORMAT = "%d %b %y"


def _check_length(v: str) -> str:
    limit = get_settings().max_text_length
    if len(v.strip()) > limit:
        raise ValueError(f"text must be at most {limit} characters")
    return v


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for adding a task.

    Blank text is rejected here, before the store is called, the way the
    add form keeps its button disabled for empty input.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"text": "Buy groceries"}})

    text: str = Field(..., description="Task text; surrounding whitespace is trimmed")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        """
        Strip whitespace and enforce 1..max_text_length characters.
        """
        s = v.strip()
        if not s:
            raise ValueError("text must not be blank")
        return _check_length(s)


# PUBLIC_INTERFACE
class TaskEdit(BaseModel):
    """
    Schema for replacing a task's text.

    Blank text is let through on purpose: the store decides and the route
    reports its rejection as InvalidInput.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"text": "Buy groceries and milk"}})

    text: str = Field(..., description="New task text")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _check_length(v)


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 3,
                "text": "Buy groceries",
                "done": False,
                "created_at": "2025-01-25T10:15:30.123456",
                "created_time": "10:15",
                "created_date": "25 Jan 25",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the task")
    text: str = Field(..., description="Task text")
    done: bool = Field(..., description="Completion flag")
    created_at: datetime = Field(..., description="Creation timestamp")
    created_time: str = Field(..., description="Creation time formatted for display (HH:MM)")
    created_date: str = Field(..., description="Creation date formatted for display (DD Mon YY)")

    @classmethod
    def from_task(cls, task: Task) -> "TaskOut":
        return cls(
            id=task.id,
            text=task.text,
            done=task.done,
            created_at=task.created_at,
            created_time=task.created_at.strftime(TASK_CREATION_TIME_FORMAT),
            created_date=task.created_at.strftime(TASK_CREATION_DATE_FORMAT),
        )


class TaskCreated(TaskOut):
    """TaskOut plus the confirmation message shown to the user."""

    notification: str = Field("Task added", description="User-facing confirmation text")


# PUBLIC_INTERFACE
class MoveRequest(BaseModel):
    """Move the task at from_index so it ends up at to_index."""

    model_config = ConfigDict(json_schema_extra={"example": {"from_index": 0, "to_index": 2}})

    from_index: int = Field(..., description="Current position of the task")
    to_index: int = Field(..., description="Target position of the task")


class DragStart(BaseModel):
    index: int = Field(..., description="Position of the item the drag starts on")


class DragHover(BaseModel):
    """Pointer movement over a rendered item during a drag."""

    index: int = Field(..., description="Position of the hovered item")
    pointer_y: float = Field(..., description="Pointer client y coordinate")
    top: float = Field(..., description="Top of the hovered item's bounding box")
    bottom: float = Field(..., description="Bottom of the hovered item's bounding box")


# PUBLIC_INTERFACE
class DragStateOut(BaseModel):
    """
    Current drag gesture state plus the order to render.

    order lists task ids in provisional order while dragging, and in the
    committed order otherwise.
    """

    dragging: bool = Field(..., description="Whether a drag gesture is active")
    origin_index: Optional[int] = Field(default=None, description="Where the dragged task started")
    current_index: Optional[int] = Field(default=None, description="Where the dragged task is shown now")
    order: List[int] = Field(..., description="Task ids in render order")
    moved: Optional[bool] = Field(default=None, description="Whether the last hover moved the task")
    committed: Optional[List[int]] = Field(
        default=None, description="The [from, to] move sent to the store by the last drag end"
    )
