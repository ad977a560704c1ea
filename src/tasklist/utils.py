from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence, Union


# PUBLIC_INTERFACE
def list_envelope(
    items: Union[Sequence[Any], Iterable[Any]],
    revision: int,
) -> Dict[str, Any]:
    """
    Build the standard envelope for the task list endpoint.

    Args:
        items: Every task of the list, in display order.
        revision: Change counter of the store at the time of the read.

    Returns:
        Dict with keys: items, total, revision.
    """
    # Ensure items is materialized as a list (in case an iterator is passed)
    materialized: List[Any] = list(items) if not isinstance(items, list) else items
    return {
        "items": materialized,
        "total": len(materialized),
        "revision": int(revision),
    }
