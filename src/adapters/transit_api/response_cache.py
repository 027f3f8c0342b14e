from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping


def _canonical_filters(filters: Mapping[str, Any] | None) -> tuple[tuple[str, str], ...]:
    if not filters:
        return ()
    return tuple(sorted((k, str(v)) for k, v in filters.items() if v is not None))


@dataclass(frozen=True, slots=True)
class CacheKey:
    """Canonicalized (resource, operator, route id, filters) tuple."""

    resource: str
    operator: str | None = None
    route_id: int | None = None
    filters: tuple[tuple[str, str], ...] = ()

    @classmethod
    def of(
        cls,
        resource: str,
        *,
        operator: str | None = None,
        route_id: int | None = None,
        filters: Mapping[str, Any] | None = None,
    ) -> "CacheKey":
        return cls(
            resource=resource,
            operator=operator,
            route_id=route_id,
            filters=_canonical_filters(filters),
        )


@dataclass(slots=True)
class _Entry:
    value: Any
    stored_at: float


@dataclass(slots=True)
class ResponseCache:
    """In-process read cache for upstream responses.

    - Entries expire after `ttl_s` (per call override allowed).
    - Concurrent reads of the same key share one in-flight fetch.
    - Invalidation drops matching entries and in-flight fetches; a fetch
      started before an invalidation never writes its (stale) result back.
    """

    ttl_s: float = 30.0

    _entries: dict[CacheKey, _Entry] = field(default_factory=dict, init=False, repr=False)
    _in_flight: dict[CacheKey, asyncio.Task] = field(
        default_factory=dict, init=False, repr=False
    )
    _generation: int = field(default=0, init=False, repr=False)

    async def get_or_fetch(
        self,
        key: CacheKey,
        fetch: Callable[[], Awaitable[Any]],
        *,
        ttl_s: float | None = None,
    ) -> Any:
        ttl = self.ttl_s if ttl_s is None else ttl_s
        entry = self._entries.get(key)
        if entry is not None and (time.monotonic() - entry.stored_at) < ttl:
            return entry.value

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fill(key, fetch, self._generation))
            self._in_flight[key] = task

        # Shielded so one cancelled caller does not cancel the shared fetch.
        return await asyncio.shield(task)

    async def _fill(
        self, key: CacheKey, fetch: Callable[[], Awaitable[Any]], generation: int
    ) -> Any:
        try:
            value = await fetch()
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]

        if generation == self._generation:
            self._entries[key] = _Entry(value=value, stored_at=time.monotonic())
        return value

    def invalidate(
        self,
        *,
        resources: tuple[str, ...] = (),
        operator: str | None = None,
        route_id: int | None = None,
    ) -> int:
        """Drop keys matching any of the given criteria. Returns the count dropped."""

        def matches(key: CacheKey) -> bool:
            return (
                key.resource in resources
                or (operator is not None and key.operator == operator)
                or (route_id is not None and key.route_id == route_id)
            )

        self._generation += 1
        dropped = [k for k in self._entries if matches(k)]
        for k in dropped:
            del self._entries[k]
        for k in [k for k in self._in_flight if matches(k)]:
            del self._in_flight[k]
        return len(dropped)
