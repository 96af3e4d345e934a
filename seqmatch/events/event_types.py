"""
Event Types — Event records, creators and the well-formedness check.

Events follow the flux-standard shape: a "type" string plus optional
"payload", "error" and "meta" fields. The engine itself works on plain
mappings; Event is a convenience record that converts to one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


EVENT_KEYS = frozenset({"type", "payload", "error", "meta"})


@dataclass(frozen=True)
class Event:
    """
    Immutable event record.

    Attributes:
        type: Event kind
        payload: Event-specific data (optional)
        error: True when the payload describes an error
        meta: Additional context (optional)
    """

    type: str
    payload: Any = None
    error: bool = False
    meta: dict[str, Any] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        """Convert event to mapping form, leaving out unset fields."""
        data: dict[str, Any] = {"type": self.type}
        if self.payload is not None:
            data["payload"] = self.payload
        if self.error:
            data["error"] = True
        if self.meta is not None:
            data["meta"] = self.meta
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Event:
        """Create event from mapping form."""
        return cls(
            type=data["type"],
            payload=data.get("payload"),
            error=bool(data.get("error", False)),
            meta=data.get("meta"),
        )

    def __repr__(self) -> str:
        return f"Event(type={self.type})"


class EventCreator:
    """
    Callable producing events of one kind.

    Also usable directly as a pattern token, standing for its kind.

    Usage:
        loaded = EventCreator("LOADED")
        bus_event = loaded({"items": []})
        engine.register(loaded, "READY")
    """

    def __init__(self, kind: str):
        if not isinstance(kind, str) or not kind:
            raise ValueError(f"EventCreator needs a non-empty kind, got {kind!r}")
        self.type = kind

    def __call__(
        self,
        payload: Any = None,
        *,
        error: bool = False,
        meta: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return Event(self.type, payload, error, meta).to_dict()

    def __str__(self) -> str:
        return self.type

    def __repr__(self) -> str:
        return f"EventCreator({self.type!r})"


def as_event_mapping(event: Any) -> Any:
    """Return the mapping view of an event; other values pass through."""
    if isinstance(event, Event):
        return event.to_dict()
    return event


def is_valid_event(event: Any) -> bool:
    """
    Check that an event has the flux-standard shape.

    A valid event is a mapping (or Event) with a string "type" and no keys
    other than type, payload, error and meta.
    """
    if isinstance(event, Event):
        return isinstance(event.type, str)
    if not isinstance(event, Mapping):
        return False
    if not isinstance(event.get("type"), str):
        return False
    return all(isinstance(key, str) and key in EVENT_KEYS for key in event)
