"""
Sequence Engine — Feeds events to live matchers and dispatches reactions.

Each engine owns its own registry; engines never share state.

Usage:
    engine = SequenceEngine(dispatch=store.dispatch)

    unregister = engine.when(
        lambda s: s.queue_strict(["FETCH", "FETCH_OK"]),
        "READY",
    )

    engine.process_event({"type": "FETCH"})
    engine.process_event({"type": "FETCH_OK"})   # dispatches READY

    unregister()
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from seqmatch.events.event_types import as_event_mapping
from seqmatch.matching.api import SEQ, SequenceApi
from seqmatch.matching.base import Matcher
from seqmatch.matching.combinators import once as once_
from seqmatch.matching.signals import Signal
from seqmatch.matching.tokens import simple
from seqmatch.shared.errors import ConfigurationError, InvalidSequenceError, InvalidTokenError
from seqmatch.shared.settings import LOG_RESOLUTIONS

from .reactions import resolve_reaction
from .registry import Registration, SequenceRegistry, UnregisterHandle
from .snapshots import EngineSnapshot, snapshot_registration

logger = logging.getLogger("seqmatch.engine")


Dispatch = Callable[[Any], Any]
SequenceBuilder = Callable[[SequenceApi], Any]


class SequenceEngine:
    """
    Dispatch driver over a sequence registry.

    process_event() must run to completion before the next event is fed,
    except for events dispatched by its own reactions on the same thread.
    """

    def __init__(
        self,
        dispatch: Dispatch | None = None,
        log_resolutions: bool | None = None,
    ):
        """
        Initialize SequenceEngine.

        Args:
            dispatch: Called with every effect produced by a reaction
            log_resolutions: Log completed sequences at INFO (defaults to settings)
        """
        self.registry = SequenceRegistry()
        self._dispatch = dispatch
        self.log_resolutions = LOG_RESOLUTIONS if log_resolutions is None else log_resolutions
        self._event_count = 0
        self._reaction_count = 0

    # ========================================================================
    # Registration
    # ========================================================================

    def bind(self, dispatch: Dispatch) -> None:
        """Set the function reactions are dispatched through."""
        self._dispatch = dispatch

    def register(self, matcher: Matcher | Any, reaction: Any) -> UnregisterHandle:
        """
        Start watching for a pattern.

        Args:
            matcher: Matcher or any pattern token
            reaction: Kind string, template(), callable or literal event

        Returns:
            Handle that unregisters the sequence when called

        Raises:
            InvalidTokenError: If matcher is not a valid token
            InvalidReactionError: If reaction has an unsupported shape
        """
        matcher = simple(matcher)
        resolved = resolve_reaction(reaction)
        registration = self.registry.add(matcher, resolved)
        return registration.unregister

    def when(
        self,
        builder: SequenceBuilder,
        reaction: Any,
        once: bool = False,
    ) -> UnregisterHandle:
        """
        Register the sequence returned by builder(SEQ).

        Args:
            builder: Callback receiving the SequenceApi
            reaction: Reaction to dispatch on completion
            once: Unregister after the first completion

        Raises:
            InvalidSequenceError: If builder is not callable or returns no usable pattern
        """
        if not callable(builder):
            raise InvalidSequenceError("when", builder, "sequence builder must be callable")

        result = builder(SEQ)
        try:
            matcher = simple(result)
        except InvalidTokenError as e:
            raise InvalidSequenceError(
                "when", result, "sequence builder must return a matcher or pattern token"
            ) from e

        if once and matcher.repeatable:
            matcher = once_(matcher)
        return self.register(matcher, reaction)

    def dispatch_when(
        self,
        reaction: Any,
        builder: SequenceBuilder,
        once: bool = False,
    ) -> Callable[[Dispatch], UnregisterHandle]:
        """
        Thunk form of when(), for hosts that dispatch callables.

        The sequence is registered when the thunk is dispatched; an engine
        without a dispatch function adopts the host's.
        """

        def thunk(dispatch: Dispatch) -> UnregisterHandle:
            if self._dispatch is None:
                self._dispatch = dispatch
            return self.when(builder, reaction, once=once)

        return thunk

    def clear_all(self) -> int:
        """Unregister every sequence. Returns how many were live."""
        count = self.registry.clear()
        if count:
            logger.debug(f"Cleared {count} sequences")
        return count

    @property
    def live_count(self) -> int:
        return len(self.registry)

    # ========================================================================
    # Event Processing
    # ========================================================================

    def process_event(self, event: Any) -> int:
        """
        Feed one event to every live sequence, in registration order.

        Args:
            event: Event mapping or Event

        Returns:
            Number of sequences completed by this event

        Raises:
            Exception: The first error raised by a reaction or by dispatch,
                after every live sequence has seen the event
        """
        view = as_event_mapping(event)
        completed = 0
        error: Exception | None = None

        with self.registry.lock:
            self._event_count += 1

            for registration in self.registry.snapshot():
                # Unregistered earlier in this tick
                if not self.registry.is_live(registration.id):
                    continue

                signal = registration.run.step(view)

                if signal is Signal.REJECT:
                    registration.accumulated_events.clear()
                    continue

                registration.accumulated_events.append(event)
                if signal is Signal.CONTINUE:
                    continue

                events = list(registration.accumulated_events)
                registration.accumulated_events.clear()
                if not registration.repeatable:
                    registration.unregister()

                completed += 1
                try:
                    self._react(registration, events)
                except Exception as e:
                    # Remaining sequences still see this event
                    logger.error(f"{registration.description}: reaction failed: {e}")
                    if error is None:
                        error = e

        if error is not None:
            raise error
        return completed

    def _react(self, registration: Registration, events: list[Any]) -> None:
        if self.log_resolutions:
            logger.info(f"{registration.description}: RESOLVED")

        effect = registration.reaction.resolve(events, registration.unregister)
        if effect is None:
            return

        if self._dispatch is None:
            raise ConfigurationError(
                f"No dispatch function bound for {registration.description}"
            )

        self._reaction_count += 1
        self._dispatch(effect)

    # ========================================================================
    # Inspection
    # ========================================================================

    def snapshot(self) -> EngineSnapshot:
        """Copy of every live registration and its progress."""
        with self.registry.lock:
            return EngineSnapshot(
                registrations=[snapshot_registration(r) for r in self.registry.snapshot()],
                events_processed=self._event_count,
                reactions_dispatched=self._reaction_count,
            )

    def get_stats(self) -> dict[str, int]:
        """
        Get engine statistics.

        Returns:
            Dictionary with event_count, reaction_count and live_registrations
        """
        return {
            "events_processed": self._event_count,
            "reactions_dispatched": self._reaction_count,
            "live_registrations": self.live_count,
        }

    def __repr__(self) -> str:
        return (
            f"SequenceEngine(live={self.live_count}, "
            f"events_processed={self._event_count})"
        )
