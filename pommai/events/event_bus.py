"""Async fan-out bus for session and resolution events."""

import asyncio
import logging
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

_DEFAULT_QUEUE_SIZE = 256

T = TypeVar("T")


class EventBus(Generic[T]):
    """Fan-out event bus backed by one asyncio.Queue per subscriber.

    Recognizer hooks run synchronously on the event loop, so events are
    published with the non-blocking :meth:`publish`; :meth:`emit` is the
    awaitable spelling for coroutine callers.  A full subscriber queue
    drops the event for that subscriber only, so a stalled SSE client
    never holds up the listening session.
    """

    def __init__(self, maxsize: int = _DEFAULT_QUEUE_SIZE) -> None:
        self._subscribers: list[asyncio.Queue[T]] = []
        self._maxsize = maxsize

    def publish(self, event: T) -> int:
        """Push *event* to every subscriber queue; return deliveries made."""
        delivered = 0
        for queue in list(self._subscribers):
            try:
                queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(
                    "Subscriber queue full, dropping %s event for one subscriber",
                    getattr(getattr(event, "type", None), "value", type(event).__name__),
                )
        return delivered

    async def emit(self, event: T) -> None:
        self.publish(event)

    async def subscribe(self) -> asyncio.Queue[T]:
        """Create and return a new subscriber queue."""
        queue: asyncio.Queue[T] = asyncio.Queue(maxsize=self._maxsize)
        self._subscribers.append(queue)
        logger.debug("Subscriber added (total: %d)", len(self._subscribers))
        return queue

    async def unsubscribe(self, queue: asyncio.Queue[T]) -> None:
        """Remove a subscriber queue.  No-op if the queue is not registered."""
        try:
            self._subscribers.remove(queue)
        except ValueError:
            logger.debug("Attempted to unsubscribe an unknown queue, ignoring")
            return
        logger.debug("Subscriber removed (remaining: %d)", len(self._subscribers))

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
