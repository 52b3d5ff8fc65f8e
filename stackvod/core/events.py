import asyncio
from typing import Any
from typing import Protocol

from stackvod.core.unit_types import UnitKind


class EventSink(Protocol):
    def emit(self, event: str, payload: dict[str, Any]) -> None:
        ...


class BroadcastEventSink:
    """
    Fans events out to subscriber queues.

    No backpressure: a subscriber with a full queue misses the event.
    """

    def __init__(self, queue_size: int = 256):
        self._queue_size = queue_size
        self._subscribers: set[asyncio.Queue] = set()

    def subscribe(self) -> asyncio.Queue:
        queue = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)

    @property
    def subscribers_count(self) -> int:
        return len(self._subscribers)

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        message = {'event': event, 'payload': payload}
        for queue in list(self._subscribers):
            try:
                queue.put_nowait(message)
            except asyncio.QueueFull:
                pass


def topic(kind: UnitKind, action: str) -> str:
    return f'{kind.value}:{action}'
