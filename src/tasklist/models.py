from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Task:
    """
    A single entry of the task list.

    Fields:
    - id: Unique integer identifier, assigned by the store and never reused
    - text: Task text, never empty or whitespace-only
    - created_at: Creation timestamp; display only, never used for ordering
    - done: Completion flag

    Instances are immutable. The store applies changes by swapping in a new
    value for the same id, so callers only ever hold read-only copies.
    """

    id: int
    text: str
    created_at: datetime
    done: bool = False
