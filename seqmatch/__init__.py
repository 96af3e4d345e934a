"""
SEQMATCH — Declarative event sequence matching.

Watches a stream of typed events for composed patterns and dispatches a
reaction every time (or the first time) a pattern completes.

Main Components:
- seqmatch.matching: Pattern tokens, matchers and combinators
- seqmatch.engine: Registry, dispatch driver, middleware
- seqmatch.events: Event records and the async event bus
- seqmatch.shared: Errors, logging and settings

Usage:
    from seqmatch import SequenceEngine

    engine = SequenceEngine(dispatch=print)
    engine.when(lambda s: s.queue(["OPEN", "CLOSE"]), "CYCLED")
    engine.process_event({"type": "OPEN"})
    engine.process_event({"type": "CLOSE"})
"""

__version__ = "1.0.0"

from seqmatch.engine import (
    EngineSnapshot,
    SequenceDispatcher,
    SequenceEngine,
    SequenceMiddleware,
    UnregisterHandle,
    template,
)
from seqmatch.events import Event, EventBus, EventCreator, is_valid_event
from seqmatch.events.event_engine import EventEngine
from seqmatch.matching import (
    FALSEY,
    MISSING,
    PRESENT,
    SEQ,
    TRUTHY,
    Matcher,
    SequenceApi,
    Signal,
    all_,
    any_,
    exact,
    once,
    queue,
    queue_strict,
    simple,
    times,
    times_strict,
)
from seqmatch.shared.errors import (
    ConstructionError,
    InvalidArgumentError,
    InvalidReactionError,
    InvalidSequenceError,
    InvalidTokenError,
    SeqMatchError,
)
from seqmatch.shared.logging import get_logger

__all__ = [
    "__version__",
    # Engine
    "SequenceEngine",
    "SequenceDispatcher",
    "SequenceMiddleware",
    "UnregisterHandle",
    "EngineSnapshot",
    "template",
    # Events
    "Event",
    "EventBus",
    "EventCreator",
    "EventEngine",
    "is_valid_event",
    # Matching
    "SEQ",
    "SequenceApi",
    "Matcher",
    "Signal",
    "simple",
    "exact",
    "once",
    "times",
    "times_strict",
    "all_",
    "any_",
    "queue",
    "queue_strict",
    "PRESENT",
    "MISSING",
    "TRUTHY",
    "FALSEY",
    # Errors
    "SeqMatchError",
    "ConstructionError",
    "InvalidTokenError",
    "InvalidArgumentError",
    "InvalidSequenceError",
    "InvalidReactionError",
    # Logging
    "get_logger",
]
