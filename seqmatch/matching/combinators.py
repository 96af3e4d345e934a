"""
Combinators — Matchers composed from other matchers.

Every combinator normalizes its tokens with simple(), keeps the state of
its branches inside its own state dataclass and returns to its initial
state whenever it completes or rejects after progress.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Sequence

from seqmatch.shared.errors import InvalidArgumentError, InvalidTokenError

from .base import Matcher
from .signals import Signal
from .tokens import simple


# ============================================================================
# State
# ============================================================================


@dataclass(frozen=True)
class CountState:
    """Progress of times(): matches counted since the last completion."""

    count: int
    inner: Any


@dataclass(frozen=True)
class AllState:
    """Progress of all(): which branches completed since the last reset."""

    satisfied: tuple[bool, ...]
    branches: tuple[Any, ...]


@dataclass(frozen=True)
class AnyState:
    branches: tuple[Any, ...]


@dataclass(frozen=True)
class QueueState:
    """Progress of queue(): index of the branch waiting for its event."""

    cursor: int
    branches: tuple[Any, ...]


# ============================================================================
# Helpers
# ============================================================================


def _normalize_tokens(combinator: str, tokens: Any) -> list[Matcher]:
    if not isinstance(tokens, (list, tuple)) or not tokens:
        raise InvalidTokenError(combinator, tokens, "non-empty list of tokens expected")
    matchers = []
    for position, token in enumerate(tokens):
        try:
            matchers.append(simple(token))
        except InvalidTokenError as e:
            raise InvalidTokenError(
                combinator, token, f"invalid token at position {position}"
            ) from e
    return matchers


def _normalize_token(combinator: str, token: Any) -> Matcher:
    try:
        return simple(token)
    except InvalidTokenError as e:
        raise InvalidTokenError(combinator, token, "invalid token") from e


def _join(matchers: Sequence[Matcher]) -> str:
    return ", ".join(m.description for m in matchers)


# ============================================================================
# Matchers
# ============================================================================


class OnceMatcher(Matcher):
    """Forwards to the inner matcher; the engine drops it after one completion."""

    kind = "once"
    repeatable = False

    def __init__(self, inner: Matcher):
        super().__init__(f"once({inner.description})")
        self.inner = inner

    def initial_state(self) -> Any:
        return self.inner.initial_state()

    def transition(self, state: Any, event: Any) -> tuple[Any, Signal]:
        return self.inner.transition(state, event)


class TimesMatcher(Matcher):
    kind = "times"

    def __init__(self, inner: Matcher, count: int, strict: bool = False):
        name = "times_strict" if strict else "times"
        super().__init__(f"{name}({inner.description} x {count})")
        self.inner = inner
        self.count = count
        self.strict = strict

    def initial_state(self) -> CountState:
        return CountState(count=0, inner=self.inner.initial_state())

    def transition(self, state: CountState, event: Any) -> tuple[CountState, Signal]:
        inner_state, signal = self.inner.transition(state.inner, event)

        if signal is Signal.COMPLETE:
            count = (state.count + 1) % self.count
            if count == 0:
                return CountState(count=0, inner=inner_state), Signal.COMPLETE
            return CountState(count=count, inner=inner_state), Signal.CONTINUE

        if signal is Signal.CONTINUE:
            return replace(state, inner=inner_state), Signal.CONTINUE

        if self.strict:
            return self.initial_state(), Signal.REJECT

        # Non-strict: unrelated events are noise, progress is kept
        return replace(state, inner=inner_state), Signal.CONTINUE


class AllMatcher(Matcher):
    kind = "all"

    def __init__(self, branches: list[Matcher], strict: bool = False):
        name = "all_strict" if strict else "all"
        super().__init__(f"{name}({_join(branches)})")
        self.branches = tuple(branches)
        self.strict = strict

    def initial_state(self) -> AllState:
        return AllState(
            satisfied=(False,) * len(self.branches),
            branches=tuple(b.initial_state() for b in self.branches),
        )

    def transition(self, state: AllState, event: Any) -> tuple[AllState, Signal]:
        satisfied = []
        branch_states = []
        # Every branch sees every event so its own counters stay correct
        for branch, done, branch_state in zip(self.branches, state.satisfied, state.branches):
            branch_state, signal = branch.transition(branch_state, event)
            branch_states.append(branch_state)
            satisfied.append(done or signal is Signal.COMPLETE)

        ready = sum(satisfied)
        if self.strict and ready - sum(state.satisfied) != 1:
            return self.initial_state(), Signal.REJECT

        if ready == len(self.branches):
            return self.initial_state(), Signal.COMPLETE

        return AllState(tuple(satisfied), tuple(branch_states)), Signal.CONTINUE


class AnyMatcher(Matcher):
    kind = "any"

    def __init__(self, branches: list[Matcher], strict: bool = False):
        name = "any_strict" if strict else "any"
        super().__init__(f"{name}({_join(branches)})")
        self.branches = tuple(branches)
        self.strict = strict

    def initial_state(self) -> AnyState:
        return AnyState(branches=tuple(b.initial_state() for b in self.branches))

    def transition(self, state: AnyState, event: Any) -> tuple[AnyState, Signal]:
        signals = []
        branch_states = []
        for branch, branch_state in zip(self.branches, state.branches):
            branch_state, signal = branch.transition(branch_state, event)
            branch_states.append(branch_state)
            signals.append(signal)

        if Signal.COMPLETE in signals:
            return self.initial_state(), Signal.COMPLETE

        if self.strict:
            return self.initial_state(), Signal.REJECT

        return AnyState(tuple(branch_states)), Signal.CONTINUE


class QueueMatcher(Matcher):
    kind = "queue"

    def __init__(self, branches: list[Matcher], strict: bool = False):
        name = "queue_strict" if strict else "queue"
        super().__init__(f"{name}({_join(branches)})")
        self.branches = tuple(branches)
        self.strict = strict

    def initial_state(self) -> QueueState:
        return QueueState(cursor=0, branches=tuple(b.initial_state() for b in self.branches))

    def transition(self, state: QueueState, event: Any) -> tuple[QueueState, Signal]:
        cursor = state.cursor
        branch_state, signal = self.branches[cursor].transition(state.branches[cursor], event)
        branch_states = state.branches[:cursor] + (branch_state,) + state.branches[cursor + 1:]

        if signal is Signal.COMPLETE:
            cursor += 1
            if cursor == len(self.branches):
                return self.initial_state(), Signal.COMPLETE
            return QueueState(cursor, branch_states), Signal.CONTINUE

        if signal is Signal.CONTINUE:
            return QueueState(cursor, branch_states), Signal.CONTINUE

        if self.strict:
            return self.initial_state(), Signal.REJECT

        # Nothing matched yet: not progress
        if cursor == 0:
            return QueueState(cursor, branch_states), Signal.REJECT
        return QueueState(cursor, branch_states), Signal.CONTINUE


# ============================================================================
# Public combinators
# ============================================================================


def once(token: Any) -> Matcher:
    """Match token, then let the engine unregister the sequence."""
    return OnceMatcher(_normalize_token("once", token))


def times(token: Any, count: int, strict: bool = False) -> Matcher:
    """
    Complete every count-th time token completes.

    Args:
        token: Pattern token
        count: Positive number of completions required
        strict: Reset the count on any event the token rejects

    Raises:
        InvalidTokenError: If token is invalid
        InvalidArgumentError: If count is not a positive integer
    """
    name = "times_strict" if strict else "times"
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise InvalidArgumentError(name, count, "count must be a positive integer")
    return TimesMatcher(_normalize_token(name, token), count, strict=strict)


def times_strict(token: Any, count: int) -> Matcher:
    """times() that resets on any non-matching event."""
    return times(token, count, strict=True)


def all_(tokens: Any, strict: bool = False) -> Matcher:
    """
    Complete once every token has completed at least once, in any order.

    In strict mode each event must satisfy exactly one new token; anything
    else resets the group.
    """
    return AllMatcher(_normalize_tokens("all_strict" if strict else "all", tokens), strict=strict)


def any_(tokens: Any, strict: bool = False) -> Matcher:
    """
    Complete as soon as one of the tokens completes.

    In strict mode an event that completes no token resets every token.
    """
    return AnyMatcher(_normalize_tokens("any_strict" if strict else "any", tokens), strict=strict)


def queue(tokens: Any, strict: bool = False) -> Matcher:
    """
    Complete when the tokens complete one after another, in order.

    Non-strict queues skip unrelated events; strict queues reset on them.
    """
    return QueueMatcher(_normalize_tokens("queue_strict" if strict else "queue", tokens), strict=strict)


def queue_strict(tokens: Any) -> Matcher:
    """queue() that resets on any out-of-order or unrelated event."""
    return queue(tokens, strict=True)
