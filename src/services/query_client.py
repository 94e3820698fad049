# src/services/query_client.py

"""Keyed async query cache with invalidation, plus one-shot mutations."""

import logging
import time
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Any

from src.config.settings import Settings

logger = logging.getLogger("catalog_admin.queries")

QueryKey = tuple[Hashable, ...]
Listener = Callable[[QueryKey], None]

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_SUCCESS = "success"
STATUS_ERROR = "error"


@dataclass
class QueryState:
    """Observable state of one cached query."""

    key: QueryKey
    status: str = STATUS_IDLE
    data: Any = None
    error: Exception | None = None
    updated_at: float = 0.0
    is_stale: bool = False

    @property
    def is_loading(self) -> bool:
        return self.status == STATUS_LOADING

    @property
    def is_error(self) -> bool:
        return self.status == STATUS_ERROR

    @property
    def is_success(self) -> bool:
        return self.status == STATUS_SUCCESS


def _matches(key: QueryKey, prefix: QueryKey) -> bool:
    return key[: len(prefix)] == prefix


class QueryClient:
    """In-memory cache of query results keyed by tuples.

    A successful result is served without re-running its fetch function
    until it goes stale, either by age (``stale_seconds``) or through
    :meth:`invalidate_queries`.  A different key is a different entry,
    so changing a filter or token always runs a fresh fetch.

    Entries not refreshed within ``gc_seconds`` are evicted on the next
    fetch, so rotated tokens and one-off filters do not pile up.
    """

    def __init__(
        self,
        stale_seconds: float = Settings.QUERY_STALE_SECONDS,
        gc_seconds: float = Settings.QUERY_GC_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[QueryKey, QueryState] = {}
        self._listeners: list[tuple[QueryKey, Listener]] = []
        self._stale_seconds = stale_seconds
        self._gc_seconds = gc_seconds
        self._clock = clock

    def get_query_state(self, key: QueryKey) -> QueryState | None:
        return self._entries.get(key)

    def _is_fresh(self, state: QueryState) -> bool:
        if state.status != STATUS_SUCCESS or state.is_stale:
            return False
        return self._clock() - state.updated_at < self._stale_seconds

    async def fetch_query(
        self,
        key: QueryKey,
        fn: Callable[[], Awaitable[Any]],
        enabled: bool = True,
    ) -> QueryState:
        """Return cached data for *key* or run *fn* to load it.

        Errors raised by *fn* are stored on the returned state rather
        than propagated.
        """
        self._evict_expired(self._clock())

        if not enabled:
            return self._entries.get(key) or QueryState(key=key)

        state = self._entries.get(key)
        if state is not None and self._is_fresh(state):
            logger.debug("Query cache hit for %s", key[0])
            return state

        if state is None:
            state = QueryState(key=key)
            self._entries[key] = state
        state.status = STATUS_LOADING

        try:
            data = await fn()
        except Exception as exc:
            logger.error(
                "Query %s failed: %s", key[0], exc, exc_info=True
            )
            state.status = STATUS_ERROR
            state.error = exc
            state.updated_at = self._clock()
            return state

        state.status = STATUS_SUCCESS
        state.data = data
        state.error = None
        state.updated_at = self._clock()
        state.is_stale = False
        return state

    def invalidate_queries(self, prefix: QueryKey) -> int:
        """Mark every entry under *prefix* stale and notify listeners.

        Returns the number of entries invalidated.
        """
        invalidated: list[QueryKey] = []
        for key, state in self._entries.items():
            if _matches(key, prefix):
                state.is_stale = True
                invalidated.append(key)

        logger.info(
            "Invalidated %d queries under %s", len(invalidated), prefix
        )
        for key in invalidated:
            for listen_prefix, listener in list(self._listeners):
                if _matches(key, listen_prefix):
                    listener(key)
        return len(invalidated)

    def subscribe(
        self, prefix: QueryKey, listener: Listener
    ) -> Callable[[], None]:
        """Call *listener* with each invalidated key under *prefix*.

        Returns a function that removes the subscription.
        """
        entry = (prefix, listener)
        self._listeners.append(entry)

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    def clear(self) -> int:
        """Drop all cached entries; returns how many were removed."""
        count = len(self._entries)
        self._entries.clear()
        logger.info("Query cache cleared (%d entries removed)", count)
        return count

    def _evict_expired(self, now: float) -> None:
        """Remove settled entries older than the GC window."""
        expired = [
            key
            for key, state in self._entries.items()
            if state.status != STATUS_LOADING
            and now - state.updated_at >= self._gc_seconds
        ]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Evicted %d expired query entries", len(expired))


@dataclass
class MutationResult:
    """Outcome of a single mutation run."""

    status: str
    data: Any = None
    error: Exception | None = None

    @property
    def is_success(self) -> bool:
        return self.status == STATUS_SUCCESS


class Mutation:
    """Runs an async write once, then fires success/error callbacks.

    Mutations are never retried.
    """

    def __init__(
        self,
        fn: Callable[..., Awaitable[Any]],
        on_success: Callable[[Any], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ) -> None:
        self._fn = fn
        self._on_success = on_success
        self._on_error = on_error
        self.last_result: MutationResult | None = None

    async def mutate(self, *args: Any, **kwargs: Any) -> MutationResult:
        """Run the mutation; failures are captured, not raised."""
        try:
            data = await self._fn(*args, **kwargs)
        except Exception as exc:
            logger.error("Mutation failed: %s", exc, exc_info=True)
            self.last_result = MutationResult(
                status=STATUS_ERROR, error=exc
            )
            if self._on_error is not None:
                self._on_error(exc)
            return self.last_result

        self.last_result = MutationResult(status=STATUS_SUCCESS, data=data)
        if self._on_success is not None:
            self._on_success(data)
        return self.last_result
