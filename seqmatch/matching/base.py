"""
Matcher base — Immutable matcher definitions with explicit state.

A Matcher never stores progress itself. It describes how to build its
initial state and how one event moves that state forward; MatcherRun binds
a matcher to the state of one live sequence.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from .signals import Signal


class Matcher(ABC):
    """
    Base class for all matchers.

    Attributes:
        kind: Variant tag ("simple", "exact", "once", "times", "all", "any", "queue")
        description: Human-readable form, for logs and diagnostics only
        repeatable: False when the sequence must fire only once
    """

    kind: ClassVar[str] = "matcher"
    repeatable: bool = True

    def __init__(self, description: str):
        self.description = description

    def initial_state(self) -> Any:
        """State of a matcher that has seen nothing (or was just reset)."""
        return None

    @abstractmethod
    def transition(self, state: Any, event: Any) -> tuple[Any, Signal]:
        """
        Feed one event to the matcher.

        Must never raise for unexpected event shapes; those are REJECTed.

        Args:
            state: Current state, as produced by initial_state() or transition()
            event: Event mapping

        Returns:
            (next_state, signal)
        """

    def run(self) -> MatcherRun:
        """Start a fresh, independent run of this matcher."""
        return MatcherRun(self)

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.description}>"


class MatcherRun:
    """
    One live run of a matcher.

    Usage:
        run = matcher.run()
        signal = run.step({"type": "LOADED"})
        run.reset()
    """

    def __init__(self, matcher: Matcher):
        self.matcher = matcher
        self.state = matcher.initial_state()

    def step(self, event: Any) -> Signal:
        self.state, signal = self.matcher.transition(self.state, event)
        return signal

    def reset(self) -> None:
        self.state = self.matcher.initial_state()

    def __repr__(self) -> str:
        return f"MatcherRun({self.matcher.description}, state={self.state!r})"


def describe_state(state: Any) -> Any:
    """Convert matcher state into plain data (dicts, lists, scalars)."""
    if dataclasses.is_dataclass(state) and not isinstance(state, type):
        return dataclasses.asdict(state)
    return state
