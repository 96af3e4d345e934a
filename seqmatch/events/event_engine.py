"""
Event Engine — Runs a SequenceEngine on top of an EventBus.

Every event published on the bus is fed to the sequence engine from the
bus's single processing task; reactions are published back onto the bus,
so they reach ordinary subscribers and other sequences in turn.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

from seqmatch.engine.engine import SequenceBuilder, SequenceEngine
from seqmatch.engine.registry import UnregisterHandle
from seqmatch.shared.settings import REQUIRE_VALID_EVENTS

from .event_bus import WILDCARD, EventBus, EventHandler
from .event_types import is_valid_event

logger = logging.getLogger("seqmatch.events.engine")


class EventEngine:
    """
    Event Engine — Bus lifecycle plus sequence matching.

    Usage:
        engine = EventEngine()
        await engine.start()

        engine.when(lambda s: s.times("PING", 3), "THREE_PINGS")

        await engine.publish({"type": "PING"})
        ...

        await engine.stop()
    """

    def __init__(
        self,
        max_queue_size: int | None = None,
        poll_interval: float = 1.0,
        is_valid: Callable[[Any], bool] = is_valid_event,
        require_valid: bool | None = None,
        log_resolutions: bool | None = None,
    ):
        """
        Initialize EventEngine.

        Args:
            max_queue_size: Maximum events in the bus queue
            poll_interval: Bus shutdown check interval in seconds
            is_valid: Predicate deciding which events are matched
            require_valid: Apply is_valid (defaults to settings)
            log_resolutions: Log completed sequences at INFO
        """
        self.event_bus = EventBus(max_queue_size=max_queue_size, poll_interval=poll_interval)
        self.sequences = SequenceEngine(
            dispatch=self.event_bus.publish_nowait,
            log_resolutions=log_resolutions,
        )
        self.is_valid = is_valid
        self.require_valid = REQUIRE_VALID_EVENTS if require_valid is None else require_valid

        logger.info("EventEngine initialized")

    # ========================================================================
    # Lifecycle Management
    # ========================================================================

    async def start(self) -> None:
        """Start the bus and feed all of its events to the sequences."""
        if self.event_bus.is_running:
            logger.warning("EventEngine already running")
            return

        logger.info("Starting EventEngine...")
        await self.event_bus.start()
        self.event_bus.subscribe(WILDCARD, self._feed)
        logger.info(f"EventEngine started ({self.sequences.live_count} sequences registered)")

    async def stop(self) -> None:
        """Stop the bus; registered sequences are kept."""
        if not self.event_bus.is_running:
            logger.warning("EventEngine not running")
            return

        logger.info("Stopping EventEngine...")
        self.event_bus.unsubscribe(WILDCARD, self._feed)
        await self.event_bus.stop()

        stats = self.get_stats()
        logger.info(
            f"EventEngine stopped "
            f"(processed {stats['event_count']} events, "
            f"{stats['reactions_dispatched']} reactions)"
        )

    @property
    def is_running(self) -> bool:
        return self.event_bus.is_running

    async def _feed(self, event: Any) -> None:
        if not self.sequences.live_count:
            return
        if self.require_valid and not self.is_valid(event):
            logger.debug(f"Skipped malformed event: {event!r}")
            return
        self.sequences.process_event(event)

    # ========================================================================
    # Sequence API
    # ========================================================================

    def register(self, matcher: Any, reaction: Any) -> UnregisterHandle:
        return self.sequences.register(matcher, reaction)

    def when(self, builder: SequenceBuilder, reaction: Any, once: bool = False) -> UnregisterHandle:
        return self.sequences.when(builder, reaction, once=once)

    def clear_all(self) -> int:
        return self.sequences.clear_all()

    # ========================================================================
    # Event Publishing API
    # ========================================================================

    async def publish(self, event: Any) -> None:
        await self.event_bus.publish(event)

    def publish_nowait(self, event: Any) -> None:
        self.event_bus.publish_nowait(event)

    async def drain(self) -> None:
        """Wait until the bus has handled every event, reactions included."""
        await self.event_bus.drain()

    def subscribe(self, event_type: str | Enum, handler: EventHandler) -> None:
        self.event_bus.subscribe(event_type, handler)

    def unsubscribe(self, event_type: str | Enum, handler: EventHandler) -> None:
        self.event_bus.unsubscribe(event_type, handler)

    # ========================================================================
    # Monitoring and Statistics
    # ========================================================================

    def get_stats(self) -> dict[str, Any]:
        """Bus statistics merged with sequence engine statistics."""
        stats = self.event_bus.get_stats()
        stats.update(self.sequences.get_stats())
        return stats

    def __repr__(self) -> str:
        return (
            f"EventEngine(running={self.is_running}, "
            f"sequences={self.sequences.live_count})"
        )
