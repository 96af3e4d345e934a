"""
Tokens — Normalization of pattern descriptions into matchers.

simple() accepts every supported token shape and returns a Matcher:

- "LOADED"                         -> kind match
- EventCreator("LOADED")           -> kind match
- {"type": "LOADED"}               -> kind match
- {"type": "LOADED", "error": TRUTHY} -> exact (subset) match
- ["A", "B"]                       -> queue(["A", "B"])
- an existing Matcher              -> itself
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from seqmatch.events.event_types import Event
from seqmatch.shared.errors import InvalidTokenError

from .base import Matcher
from .signals import ABSENT, Signal, Wildcard, event_field


class KindMatcher(Matcher):
    """Completes on every event whose "type" equals the kind."""

    kind = "simple"

    def __init__(self, event_kind: str):
        super().__init__(f"simple({event_kind})")
        self.event_kind = event_kind

    def transition(self, state: Any, event: Any) -> tuple[Any, Signal]:
        if event_field(event, "type") == self.event_kind:
            return state, Signal.COMPLETE
        return state, Signal.REJECT


class ExactMatcher(Matcher):
    """Completes on every event containing the template (subset match)."""

    kind = "exact"

    def __init__(self, template: Mapping[str, Any]):
        super().__init__(f"exact({_describe_template(template)})")
        self.template = template

    def transition(self, state: Any, event: Any) -> tuple[Any, Signal]:
        if _matches_template(self.template, event):
            return state, Signal.COMPLETE
        return state, Signal.REJECT


def _describe_template(template: Mapping[str, Any]) -> str:
    parts = []
    for key, value in template.items():
        if isinstance(value, Mapping):
            parts.append(f"{key}: {_describe_template(value)}")
        else:
            parts.append(f"{key}: {value!r}")
    return "{" + ", ".join(parts) + "}"


def _strict_equal(expected: Any, actual: Any) -> bool:
    # True == 1 in Python; templates must not conflate them
    if isinstance(expected, bool) or isinstance(actual, bool):
        return type(expected) is type(actual) and expected == actual
    return expected == actual


def _matches_template(template: Mapping[str, Any], event: Any) -> bool:
    if not isinstance(event, Mapping):
        return False
    for key, expected in template.items():
        actual = event_field(event, key)
        if isinstance(expected, Wildcard):
            if not expected.accepts(actual):
                return False
        elif isinstance(expected, Mapping):
            if actual is ABSENT or not _matches_template(expected, actual):
                return False
        elif not _strict_equal(expected, actual):
            return False
    return True


def _token_kind(token: Any) -> str | None:
    """Kind string for tokens that stand for a whole event kind."""
    if isinstance(token, str):
        return token
    if isinstance(token, Wildcard):
        return None
    if isinstance(token, Enum) and isinstance(token.value, str):
        return token.value
    if not isinstance(token, Mapping):
        kind = getattr(token, "type", None)
        if isinstance(kind, str):
            return kind
    return None


def exact(template: Any) -> Matcher:
    """
    Build a matcher comparing events against a structural template.

    Template values may be literals, nested mappings or wildcard markers.
    Keys of the event that the template does not mention are ignored.

    Raises:
        InvalidTokenError: If template is not a non-empty mapping
    """
    if isinstance(template, Event):
        template = template.to_dict()
    if not isinstance(template, Mapping) or not template:
        raise InvalidTokenError("exact", template, "template must be a non-empty mapping")
    return ExactMatcher(template)


def simple(token: Any) -> Matcher:
    """
    Normalize any supported token into a matcher.

    Matchers pass through unchanged; every other token yields a new,
    independent matcher on each call.

    Raises:
        InvalidTokenError: If the token shape is not supported
    """
    if isinstance(token, Matcher):
        return token

    if isinstance(token, (list, tuple)):
        from .combinators import queue

        return queue(token)

    if isinstance(token, Event):
        token = token.to_dict()

    if isinstance(token, Mapping):
        if not token:
            raise InvalidTokenError("simple", token, "empty template")
        kind = token.get("type")
        if len(token) == 1 and isinstance(kind, str) and kind:
            return KindMatcher(kind)
        return exact(token)

    kind = _token_kind(token)
    if not kind:
        raise InvalidTokenError("simple", token, "unsupported token")
    return KindMatcher(kind)
