from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from .reorder import ReorderController
from .store import Clock, IdSource, TaskStore

logger = logging.getLogger(__name__)


class RevisionCounter:
    """
    Store subscriber counting change notifications.

    Clients compare revisions to know when their copy of the list is stale
    and should be read again.
    """

    def __init__(self) -> None:
        self.value = 0

    def __call__(self) -> None:
        self.value += 1
        logger.debug("Task list changed revision=%s", self.value)


# PUBLIC_INTERFACE
@dataclass
class AppState:
    """The single store of the process and the collaborators wired to it."""

    store: TaskStore
    reorder: ReorderController
    revisions: RevisionCounter

    @classmethod
    def create(cls, clock: Optional[Clock] = None, id_source: Optional[IdSource] = None) -> "AppState":
        store = TaskStore(clock=clock, id_source=id_source)
        revisions = RevisionCounter()
        store.subscribe(revisions)
        return cls(store=store, reorder=ReorderController(store), revisions=revisions)


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_app_state() -> AppState:
    """Return the process-wide AppState, creating it on first use."""
    logger.info("Creating in-memory task list")
    return AppState.create()
