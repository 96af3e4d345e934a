"""
Sequence Registry — Live matchers, their reactions and their buffers.

The registry is the only shared mutable resource of an engine. All
mutations happen under its re-entrant lock, so a reaction dispatched from
inside process_event may register or unregister sequences on the same
thread, while other threads wait.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Any

from seqmatch.matching.base import Matcher, MatcherRun

from .reactions import Reaction

logger = logging.getLogger("seqmatch.engine.registry")


@dataclass
class Registration:
    """
    A live pairing of matcher, reaction and matched events.

    Attributes:
        id: Unique among live registrations
        matcher: Matcher definition
        reaction: Resolved reaction
        run: Current matcher state
        accumulated_events: Events accepted since the matcher last reset
        unregister: Handle removing this registration
    """

    id: int
    matcher: Matcher
    reaction: Reaction
    run: MatcherRun
    accumulated_events: list[Any] = field(default_factory=list)
    unregister: UnregisterHandle | None = None

    @property
    def description(self) -> str:
        return f"SEQUENCE: {self.matcher.description} => {self.reaction.description}"

    @property
    def repeatable(self) -> bool:
        return self.matcher.repeatable


class UnregisterHandle:
    """
    Removes one registration when called.

    Calling it again, or after clear_all(), does nothing and returns False.
    """

    def __init__(self, registry: SequenceRegistry, registration_id: int):
        self._registry = registry
        self.registration_id = registration_id

    def __call__(self) -> bool:
        return self._registry.unregister(self.registration_id)

    @property
    def active(self) -> bool:
        return self._registry.is_live(self.registration_id)

    def __repr__(self) -> str:
        return f"UnregisterHandle(id={self.registration_id}, active={self.active})"


class SequenceRegistry:
    """Ordered set of live registrations."""

    def __init__(self):
        self.lock = threading.RLock()
        self._registrations: dict[int, Registration] = {}
        self._ids = itertools.count(1)

    def add(self, matcher: Matcher, reaction: Reaction) -> Registration:
        """Register matcher with an empty buffer and a fresh state."""
        with self.lock:
            registration_id = next(self._ids)
            registration = Registration(
                id=registration_id,
                matcher=matcher,
                reaction=reaction,
                run=matcher.run(),
            )
            registration.unregister = UnregisterHandle(self, registration_id)
            self._registrations[registration_id] = registration

        logger.debug(f"Registered #{registration_id}: {registration.description}")
        return registration

    def unregister(self, registration_id: int) -> bool:
        """
        Remove a registration and drop its buffer.

        Returns:
            True if the registration was live
        """
        with self.lock:
            registration = self._registrations.pop(registration_id, None)
            if registration is None:
                return False
            registration.accumulated_events.clear()

        logger.debug(f"Unregistered #{registration_id}")
        return True

    def clear(self) -> int:
        """Remove every registration. Returns how many were live."""
        with self.lock:
            ids = list(self._registrations)
            for registration_id in ids:
                self.unregister(registration_id)
        return len(ids)

    def is_live(self, registration_id: int) -> bool:
        return registration_id in self._registrations

    def get(self, registration_id: int) -> Registration | None:
        return self._registrations.get(registration_id)

    def snapshot(self) -> list[Registration]:
        """Live registrations in registration order."""
        with self.lock:
            return list(self._registrations.values())

    def __len__(self) -> int:
        return len(self._registrations)

    def __repr__(self) -> str:
        return f"SequenceRegistry(live={len(self)})"
