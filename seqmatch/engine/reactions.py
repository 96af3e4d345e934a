"""
Reactions — What to dispatch when a sequence completes.

A reaction is resolved once, at registration time, into a Reaction whose
resolve(events, unregister) builds the effect to dispatch:

- "DONE" (kind)             -> {"type": "DONE", "payload": {"events": [...]},
                                "meta": {"unregister": <handle>}}
- template({"type": ...})   -> copy with "events" merged into its payload
- callable(unregister, events) -> whatever it returns (None dispatches nothing)
- {"type": "DONE"} (literal) -> dispatched as-is
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Mapping

from seqmatch.events.event_types import Event
from seqmatch.shared.errors import InvalidReactionError


Resolver = Callable[[list[Any], Callable[[], Any]], Any]


class Reaction:
    """
    Resolved reaction.

    Attributes:
        kind: "kind", "template", "callable" or "literal"
        description: Short form for logs
    """

    def __init__(self, kind: str, description: str, resolver: Resolver):
        self.kind = kind
        self.description = description
        self._resolver = resolver

    def resolve(self, events: list[Any], unregister: Callable[[], Any]) -> Any:
        """Build the effect for one completion."""
        return self._resolver(list(events), unregister)

    def __repr__(self) -> str:
        return f"Reaction({self.kind}: {self.description})"


def _kind_reaction(event_kind: str) -> Reaction:
    def resolver(events: list[Any], unregister: Callable[[], Any]) -> dict[str, Any]:
        return {
            "type": event_kind,
            "payload": {"events": events},
            "meta": {"unregister": unregister},
        }

    return Reaction("kind", event_kind, resolver)


def template(event: Mapping[str, Any] | Event) -> Reaction:
    """
    Dispatch a copy of event with the matched events added to its payload.

    Raises:
        InvalidReactionError: If event is not a mapping with a mapping payload
    """
    if isinstance(event, Event):
        event = event.to_dict()
    if not isinstance(event, Mapping) or not isinstance(event.get("type"), str):
        raise InvalidReactionError("template", event, "event mapping with a string 'type' expected")
    payload = event.get("payload")
    if payload is not None and not isinstance(payload, Mapping):
        raise InvalidReactionError("template", event, "payload must be a mapping")
    base = dict(event)

    def resolver(events: list[Any], unregister: Callable[[], Any]) -> dict[str, Any]:
        result = dict(base)
        result["payload"] = {**(payload or {}), "events": events}
        return result

    return Reaction("template", base["type"], resolver)


def resolve_reaction(reaction: Any) -> Reaction:
    """
    Turn any supported reaction shape into a Reaction.

    Raises:
        InvalidReactionError: If the shape is not supported
    """
    if isinstance(reaction, Reaction):
        return reaction

    if isinstance(reaction, str) and reaction:
        return _kind_reaction(reaction)

    if isinstance(reaction, Enum) and isinstance(reaction.value, str):
        return _kind_reaction(reaction.value)

    if isinstance(reaction, (Mapping, Event)):
        literal = reaction
        description = literal.type if isinstance(literal, Event) else repr(literal.get("type"))
        return Reaction("literal", description, lambda events, unregister: literal)

    # Event creators stand for their kind, even though they are callable
    kind = getattr(reaction, "type", None)
    if isinstance(kind, str) and kind:
        return _kind_reaction(kind)

    if callable(reaction):
        name = getattr(reaction, "__name__", type(reaction).__name__)
        return Reaction("callable", name, lambda events, unregister: reaction(unregister, events))

    raise InvalidReactionError("register", reaction, "unsupported reaction")
