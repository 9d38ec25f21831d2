"""Queue-backed live query subscription shared by the store backends.

A producer coroutine runs as a background task and pushes full snapshots;
consumers iterate the subscription. cancel() stops the producer once.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from propdesk.application.dtos.store import Snapshot

logger = logging.getLogger(__name__)

_CLOSED = object()


@dataclass(frozen=True)
class _ProducerFailure:
    error: Exception


Producer = Callable[["QueueSubscription"], Awaitable[None]]


class QueueSubscription:
    """Ordered snapshot stream fed by a producer task.

    - Snapshots are delivered in the order the producer pushed them.
    - A producer error is raised once from the iterator, then the stream ends.
    - cancel() is idempotent; only the first call stops the producer.
    """

    def __init__(self, name: str, producer: Producer) -> None:
        """Start the producer task. Must be called inside a running event loop."""
        self.name = name
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._closed = False
        self._finished = False
        self._task = asyncio.get_running_loop().create_task(
            self._run(producer), name=f"subscription:{name}"
        )

    @property
    def closed(self) -> bool:
        return self._closed

    async def _run(self, producer: Producer) -> None:
        try:
            await producer(self)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("Subscription %s producer failed: %s", self.name, e)
            self._queue.put_nowait(_ProducerFailure(e))
        self._queue.put_nowait(_CLOSED)

    def push(self, snapshot: Snapshot) -> None:
        """Queue a snapshot for consumers (dropped after cancel)."""
        if not self._closed:
            self._queue.put_nowait(snapshot)

    def __aiter__(self) -> QueueSubscription:
        return self

    async def __anext__(self) -> Snapshot:
        if self._finished:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            self._finished = True
            raise StopAsyncIteration
        if isinstance(item, _ProducerFailure):
            self._finished = True
            raise item.error
        return item

    async def cancel(self) -> None:
        """Stop the producer and end the stream. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._queue.put_nowait(_CLOSED)
        logger.debug("Subscription %s cancelled", self.name)

    async def __aenter__(self) -> QueueSubscription:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.cancel()
