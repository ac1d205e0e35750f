"""Per-process read-through cache for remote lookups.

One instance is shared by every client built for a catalog. Results are keyed
by (namespace, identifier) and kept for the lifetime of the object; absent
results (None) are cached like any other value. Concurrent first requests for
the same key share a single in-flight task.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar("T")

CacheKey = tuple[str, str]


class FetchCache:
    def __init__(self) -> None:
        self._values: dict[CacheKey, Any] = {}
        self._inflight: dict[CacheKey, asyncio.Task] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def clear(self) -> None:
        self._values.clear()
        self._inflight.clear()

    def _store(self, key: CacheKey, task: asyncio.Task) -> None:
        # a clear() while the fetch was running discards its result
        if self._inflight.get(key) is not task:
            return
        del self._inflight[key]
        if task.cancelled() or task.exception() is not None:
            return
        self._values[key] = task.result()

    async def get_or_fetch(
        self,
        namespace: str,
        identifier: str,
        fetch: Callable[[], Awaitable[T]],
    ) -> T:
        key = (namespace, identifier)
        if key in self._values:
            return self._values[key]

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(fetch())
            self._inflight[key] = task
            task.add_done_callback(lambda done: self._store(key, done))

        # shield: cancelling any caller, the creator included, leaves the shared fetch running
        return await asyncio.shield(task)
