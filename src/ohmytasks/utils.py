from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union


# PUBLIC_INTERFACE
def tasks_envelope(
    items: Union[Sequence[Any], Iterable[Any]],
    source: str,
    cached_at: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Build the standard envelope for task list endpoints.

    Args:
        items: The tasks to return (already filtered for the requested view).
        source: Where the list came from: 'cache' or 'network'.
        cached_at: Epoch seconds the cached list was stored at, for cache hits.

    Returns:
        Dict with keys: items, total, source, cached_at (ISO8601 UTC or None).
    """
    # Ensure items is materialized as a list (in case an iterator is passed)
    materialized: List[Any] = list(items) if not isinstance(items, list) else items
    return {
        "items": materialized,
        "total": len(materialized),
        "source": source,
        "cached_at": (
            datetime.fromtimestamp(cached_at, tz=timezone.utc).isoformat() if cached_at is not None else None
        ),
    }
