"""
SEQMATCH Event Types and Bus.

Core Components:
- Event: Immutable flux-standard event record
- EventCreator: Callable building events of one kind (also a pattern token)
- is_valid_event: Well-formedness check applied before matching
- EventBus: Asynchronous pub/sub dispatcher

The bus-to-engine bridge lives in seqmatch.events.event_engine.

Usage:
    from seqmatch.events import EventBus, Event

    bus = EventBus()
    await bus.start()
    await bus.publish(Event("LOADED", payload={"items": []}))
"""

from .event_types import Event, EventCreator, as_event_mapping, is_valid_event
from .event_bus import EventBus

__all__ = [
    "Event",
    "EventCreator",
    "as_event_mapping",
    "is_valid_event",
    "EventBus",
]
