"""
In-process change feed.

Store adapters publish after a successful commit; resident-side clients
subscribe per collection + event type and refresh reactively.
"""
import asyncio
import enum
from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, AsyncIterator, Callable, Dict, Iterable, Optional, Set, Tuple

import structlog

logger = structlog.get_logger()


class ChangeEvent(str, enum.Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class Change:
    collection: str
    event: ChangeEvent
    record: Dict[str, Any]
    published_at: datetime = field(default_factory=datetime.utcnow)


class Subscription:
    """Async iterator over changes delivered to one subscriber"""

    def __init__(self, queue: "asyncio.Queue[Change]", predicate: Optional[Callable[[Change], bool]] = None):
        self._queue = queue
        self._predicate = predicate

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> Change:
        return await self.get()

    async def get(self, timeout: Optional[float] = None) -> Change:
        while True:
            if timeout is None:
                change = await self._queue.get()
            else:
                change = await asyncio.wait_for(self._queue.get(), timeout=timeout)
            if self._predicate is None or self._predicate(change):
                return change

    def pending(self) -> int:
        return self._queue.qsize()


class ChangeFeed:
    def __init__(self, max_queue_size: int = 100):
        self.max_queue_size = max_queue_size
        self._subscribers: Dict[Tuple[str, ChangeEvent], Set["asyncio.Queue[Change]"]] = defaultdict(set)

    def publish(self, collection: str, event: ChangeEvent, record: Dict[str, Any]) -> int:
        """Fan a change out to current subscribers; returns how many received it"""
        change = Change(collection=collection, event=event, record=record)
        delivered = 0
        for queue in list(self._subscribers.get((collection, event), ())):
            try:
                queue.put_nowait(change)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning("change_feed_subscriber_lagging", collection=collection, change_event=event.value)
        return delivered

    @asynccontextmanager
    async def subscribe(
        self,
        collections: Iterable[str],
        events: Iterable[ChangeEvent] = (ChangeEvent.INSERT, ChangeEvent.UPDATE),
        predicate: Optional[Callable[[Change], bool]] = None,
    ) -> AsyncIterator[Subscription]:
        queue: "asyncio.Queue[Change]" = asyncio.Queue(maxsize=self.max_queue_size)
        keys = [(collection, ChangeEvent(event)) for collection in collections for event in events]
        for key in keys:
            self._subscribers[key].add(queue)
        try:
            yield Subscription(queue, predicate)
        finally:
            for key in keys:
                self._subscribers[key].discard(queue)
                if not self._subscribers[key]:
                    del self._subscribers[key]

    def subscriber_count(self, collection: str, event: ChangeEvent) -> int:
        return len(self._subscribers.get((collection, event), ()))
