"""
Middleware — Synchronous dispatch integration.

SequenceMiddleware wraps a host's dispatch function so every event that
passes through it is also fed to a SequenceEngine. SequenceDispatcher is
a minimal store-like host built from it: thunks, then the middleware,
then a recorder of everything dispatched.

Usage:
    host = SequenceDispatcher()
    host.dispatch(host.engine.dispatch_when("READY", lambda s: s.times("PING", 2)))
    host.dispatch({"type": "PING"})
    host.dispatch({"type": "PING"})
    host.get_events()  # [{"type": "PING"}, {"type": "PING"}, {"type": "READY", ...}]
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

from seqmatch.events.event_types import Event, is_valid_event
from seqmatch.shared.settings import REQUIRE_VALID_EVENTS

from .engine import Dispatch, SequenceEngine

logger = logging.getLogger("seqmatch.engine.middleware")


Middleware = Callable[[Dispatch], Dispatch]


class SequenceMiddleware:
    """
    Feeds dispatched events to an engine after they reach the next dispatch.

    Args:
        engine: Engine receiving the events
        is_valid: Predicate deciding which events are fed to the engine
        require_valid: Apply is_valid (defaults to settings.REQUIRE_VALID_EVENTS)
    """

    def __init__(
        self,
        engine: SequenceEngine,
        is_valid: Callable[[Any], bool] = is_valid_event,
        require_valid: bool | None = None,
    ):
        self.engine = engine
        self.is_valid = is_valid
        self.require_valid = REQUIRE_VALID_EVENTS if require_valid is None else require_valid

    def accepts(self, event: Any) -> bool:
        if not self.require_valid:
            return True
        return self.is_valid(event)

    def __call__(self, next_dispatch: Dispatch) -> Dispatch:
        def dispatch(event: Any) -> Any:
            result = next_dispatch(event)
            if self.engine.live_count and self.accepts(event):
                self.engine.process_event(event)
            elif self.engine.live_count:
                logger.debug(f"Skipped malformed event: {event!r}")
            return result

        return dispatch


def thunk_middleware(get_dispatch: Callable[[], Dispatch]) -> Middleware:
    """Run dispatched callables with the full dispatch instead of passing them on."""

    def middleware(next_dispatch: Dispatch) -> Dispatch:
        def dispatch(action: Any) -> Any:
            if callable(action) and not isinstance(action, (Mapping, Event)):
                return action(get_dispatch())
            return next_dispatch(action)

        return dispatch

    return middleware


class SequenceDispatcher:
    """
    Store-like host: thunks, extra middleware, the sequence middleware, a recorder.

    The engine's reactions are dispatched through the full chain, so they
    are recorded and can complete other sequences.
    """

    def __init__(
        self,
        engine: SequenceEngine | None = None,
        middlewares: Sequence[Middleware] = (),
        require_valid: bool | None = None,
    ):
        self.engine = engine or SequenceEngine()
        self._events: list[Any] = []

        chain: list[Middleware] = [
            thunk_middleware(lambda: self.dispatch),
            *middlewares,
            SequenceMiddleware(self.engine, require_valid=require_valid),
        ]

        dispatch: Dispatch = self._record
        for middleware in reversed(chain):
            dispatch = middleware(dispatch)
        self.dispatch: Dispatch = dispatch

        self.engine.bind(self.dispatch)

    def _record(self, event: Any) -> Any:
        self._events.append(event)
        return event

    def get_events(self) -> list[Any]:
        """Everything dispatched so far, in order."""
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()

    def __repr__(self) -> str:
        return f"SequenceDispatcher(events={len(self._events)}, engine={self.engine!r})"
