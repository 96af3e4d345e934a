"""
Event Bus — Asyncio fan-out of events to handlers, keyed by event kind.

One background task takes events off the queue in publish order and awaits
the handlers of the event's kind, then the wildcard ("*") handlers. A failing
handler is logged and counted; the remaining handlers still run.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping

from seqmatch.shared.settings import BUS_MAX_QUEUE_SIZE

from .event_types import Event

logger = logging.getLogger("seqmatch.events.bus")


EventHandler = Callable[[Any], Awaitable[None]]
"""Type alias for async event handler functions."""

WILDCARD = "*"


def event_kind(event: Any) -> str | None:
    """Kind of an Event or event mapping, None for anything else."""
    if isinstance(event, Event):
        return event.type
    if isinstance(event, Mapping):
        kind = event.get("type")
        return kind if isinstance(kind, str) else None
    return None


def _normalize_kind(event_type: str | Enum) -> str:
    if isinstance(event_type, Enum):
        return event_type.value
    return event_type


class EventBus:
    """
    Queue-backed pub/sub for event mappings and Event records.

    Usage:
        bus = EventBus()
        await bus.start()

        async def on_loaded(event):
            logger.info(f"Loaded {event['payload']}")

        bus.subscribe("LOADED", on_loaded)
        await bus.publish({"type": "LOADED", "payload": [1, 2]})
        await bus.drain()

        await bus.stop()
    """

    def __init__(
        self,
        max_queue_size: int | None = None,
        poll_interval: float = 1.0,
        shutdown_timeout: float = 5.0,
    ):
        """
        Args:
            max_queue_size: Queue capacity (defaults to settings)
            poll_interval: Seconds the idle loop waits before rechecking for stop
            shutdown_timeout: Seconds stop() waits before cancelling the loop
        """
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._queue: asyncio.Queue[Any] = asyncio.Queue(
            maxsize=max_queue_size if max_queue_size is not None else BUS_MAX_QUEUE_SIZE
        )
        self._poll_interval = poll_interval
        self._shutdown_timeout = shutdown_timeout
        self._running = False
        self._task: asyncio.Task | None = None
        self._event_count = 0
        self._error_count = 0

    # ========================================================================
    # Handlers
    # ========================================================================

    def subscribe(self, event_type: str | Enum, handler: EventHandler) -> None:
        """Call handler for every event of this kind ("*" for every event)."""
        kind = _normalize_kind(event_type)
        self._handlers[kind].append(handler)
        logger.debug(f"Handler added for '{kind}'")

    def unsubscribe(self, event_type: str | Enum, handler: EventHandler) -> bool:
        """Remove handler; False when it was not subscribed to this kind."""
        kind = _normalize_kind(event_type)
        handlers = self._handlers.get(kind, [])
        if handler not in handlers:
            logger.warning(f"Handler not subscribed to '{kind}'")
            return False
        handlers.remove(handler)
        logger.debug(f"Handler removed from '{kind}'")
        return True

    @property
    def subscriber_count(self) -> int:
        return sum(len(handlers) for handlers in self._handlers.values())

    # ========================================================================
    # Publishing
    # ========================================================================

    def _accepting(self, event: Any) -> bool:
        if not self._running:
            logger.warning(f"EventBus not running, dropping event: {event_kind(event)}")
        return self._running

    async def publish(self, event: Any) -> None:
        """Queue event for delivery, waiting while the queue is full."""
        if self._accepting(event):
            await self._queue.put(event)

    def publish_nowait(self, event: Any) -> None:
        """
        Queue event from synchronous code, such as a sequence reaction.

        An event that does not fit in the queue is dropped and counted as an error.
        """
        if not self._accepting(event):
            return
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.error(f"Event queue full, dropping event: {event_kind(event)}")
            self._error_count += 1

    async def drain(self) -> None:
        """Wait until every queued event, including ones published meanwhile, is handled."""
        await self._queue.join()

    # ========================================================================
    # Delivery
    # ========================================================================

    async def _run(self) -> None:
        while self._running:
            try:
                event = await asyncio.wait_for(self._queue.get(), timeout=self._poll_interval)
            except asyncio.TimeoutError:
                continue
            try:
                await self._deliver(event)
            finally:
                self._queue.task_done()

    async def _deliver(self, event: Any) -> None:
        kind = event_kind(event)
        handlers = list(self._handlers.get(kind, [])) if kind else []
        handlers.extend(self._handlers.get(WILDCARD, []))

        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                logger.exception(f"Handler for '{kind}' failed: {e}")
                self._error_count += 1

        self._event_count += 1

    # ========================================================================
    # Lifecycle
    # ========================================================================

    async def start(self) -> None:
        if self._running:
            logger.warning("EventBus already running")
            return
        self._running = True
        self._task = asyncio.create_task(self._run())
        logger.info("EventBus started")

    async def stop(self) -> None:
        """Stop delivery; events still queued stay queued."""
        if not self._running:
            logger.warning("EventBus not running")
            return

        self._running = False
        task, self._task = self._task, None
        if task is not None:
            done, _ = await asyncio.wait({task}, timeout=self._shutdown_timeout)
            if not done:
                logger.warning("EventBus did not stop in time, cancelling")
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass

        logger.info(f"EventBus stopped ({self._event_count} events, {self._error_count} errors)")

    @property
    def is_running(self) -> bool:
        return self._running

    def get_stats(self) -> dict[str, Any]:
        return {
            "event_count": self._event_count,
            "error_count": self._error_count,
            "queue_size": self._queue.qsize(),
            "subscribers": self.subscriber_count,
            "running": self._running,
        }

    def __repr__(self) -> str:
        return f"EventBus(running={self._running}, subscribers={self.subscriber_count})"
