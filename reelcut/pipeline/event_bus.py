"""Per-export event channel."""

import asyncio
import logging
from collections.abc import AsyncIterator

from reelcut.pipeline.schemas import ExportEvent

logger = logging.getLogger(__name__)


class Subscription:
    """A queue of events for one export, consumed as an async iterator.

    Iteration ends after a terminal (completed or failed) event.
    """

    def __init__(self, bus: "ExportEventBus", export_id: str) -> None:
        self.export_id = export_id
        self._bus = bus
        self._queue: asyncio.Queue[ExportEvent] = asyncio.Queue()

    def put(self, event: ExportEvent) -> None:
        self._queue.put_nowait(event)

    async def get(self) -> ExportEvent:
        return await self._queue.get()

    def close(self) -> None:
        self._bus.unsubscribe(self)

    async def __aiter__(self) -> AsyncIterator[ExportEvent]:
        try:
            while True:
                event = await self._queue.get()
                yield event
                if event.is_terminal:
                    return
        finally:
            self.close()


class ExportEventBus:
    """Routes export events to the subscribers of that export id only.

    The latest event of every export is kept and replayed to late
    subscribers. Only the newest ``max_retained`` finished exports keep
    theirs; running exports are never forgotten.
    """

    def __init__(self, max_retained: int = 256) -> None:
        self.max_retained = max_retained
        self._subscribers: dict[str, list[Subscription]] = {}
        self._latest: dict[str, ExportEvent] = {}
        self._finished: dict[str, None] = {}

    def subscribe(self, export_id: str) -> Subscription:
        subscription = Subscription(self, export_id)
        self._subscribers.setdefault(export_id, []).append(subscription)
        latest = self._latest.get(export_id)
        if latest is not None:
            subscription.put(latest)
        logger.debug(
            "[export=%s] subscriber added (total: %d)", export_id, len(self._subscribers[export_id])
        )
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subscribers = self._subscribers.get(subscription.export_id)
        if not subscribers:
            return
        if subscription in subscribers:
            subscribers.remove(subscription)
        if not subscribers:
            del self._subscribers[subscription.export_id]

    def publish(self, event: ExportEvent) -> None:
        self._latest[event.export_id] = event
        if event.is_terminal:
            self._retire(event.export_id)
        else:
            self._finished.pop(event.export_id, None)
        for subscription in list(self._subscribers.get(event.export_id, [])):
            subscription.put(event)

    def _retire(self, export_id: str) -> None:
        self._finished.pop(export_id, None)
        self._finished[export_id] = None
        while len(self._finished) > self.max_retained:
            oldest = next(iter(self._finished))
            del self._finished[oldest]
            self._latest.pop(oldest, None)
            logger.debug("[export=%s] dropped retained event", oldest)

    def latest(self, export_id: str) -> ExportEvent | None:
        return self._latest.get(export_id)

    def subscriber_count(self, export_id: str) -> int:
        return len(self._subscribers.get(export_id, []))
