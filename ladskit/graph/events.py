"""Single-consumer event channel bridging graph notifications into asyncio."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Dict, Optional

from .nodes import DeviceNode

logger = logging.getLogger(__name__)

_CLOSED = object()


class EventChannel:
    """Queue fed by a node's event subscription and drained by one consumer.

    Notifications are pushed synchronously from the producer side and read
    back in arrival order. ``close()`` drops the subscription and wakes the
    consumer; anything already queued is still delivered.
    """

    def __init__(self, source: Optional[DeviceNode] = None) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._source = source
        self._subscription: Optional[str] = None
        self._closed = False
        if source is not None:
            self._subscription = source.subscribe(self.put_nowait)

    @property
    def closed(self) -> bool:
        return self._closed

    def put_nowait(self, notification: Dict[str, Any]) -> None:
        if self._closed:
            logger.debug("Dropping notification on closed channel")
            return
        self._queue.put_nowait(notification)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._source is not None and self._subscription is not None:
            self._source.unsubscribe(self._subscription)
            self._subscription = None
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> AsyncIterator[Dict[str, Any]]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Dict[str, Any]]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item


__all__ = ["EventChannel"]
