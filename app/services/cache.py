"""In-memory cache for computed aggregate views (history, progress).

Writes never clear the cache directly: the record store flags the session
(``mark_aggregates_changed``) and ``app.db.session.get_db`` calls
``invalidate_if_changed`` once that session has committed.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

AGGREGATES_CHANGED = "aggregates_changed"


class AggregateCache:
    """Simple in-memory cache keyed by view + query parameters.

    ``generation`` increases on every invalidation; a value computed under an
    older generation is not stored.
    """

    def __init__(self, max_size: int = 128):
        self._cache: dict[tuple, Any] = {}
        self._max_size = max_size
        self.generation = 0

    def get(self, key: tuple) -> Any | None:
        return self._cache.get(key)

    def set(self, key: tuple, value: Any, generation: int | None = None) -> bool:
        """Store ``value``; returns False when it was computed before the last invalidation."""
        if generation is not None and generation != self.generation:
            return False
        # Simple FIFO eviction at capacity
        if key not in self._cache and len(self._cache) >= self._max_size:
            oldest_key = next(iter(self._cache))
            del self._cache[oldest_key]
        self._cache[key] = value
        return True

    def invalidate(self) -> None:
        """Drop every cached view."""
        self.generation += 1
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)


# Singleton cache instance
_aggregate_cache = AggregateCache()


def get_aggregate_cache() -> AggregateCache:
    """Get the aggregate cache singleton (FastAPI dependency)."""
    return _aggregate_cache


def mark_aggregates_changed(session: Session) -> None:
    """Flag ``session`` so its next commit clears the aggregate cache."""
    session.info[AGGREGATES_CHANGED] = True


def invalidate_if_changed(session: Session) -> bool:
    """Clear the cache if ``session`` wrote records. Call only after its commit."""
    if not session.info.pop(AGGREGATES_CHANGED, False):
        return False
    _aggregate_cache.invalidate()
    return True
