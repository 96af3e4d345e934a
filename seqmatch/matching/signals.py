"""
Signals — Tri-state results and wildcard markers.

Every matcher answers one event with a Signal:

- REJECT: the event does not fit; any partial progress was dropped
- CONTINUE: the event was absorbed, the pattern is not finished yet
- COMPLETE: the pattern is finished (and the matcher is back at its start)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping


class Signal(Enum):
    """Result of feeding one event to a matcher."""

    REJECT = "reject"
    CONTINUE = "continue"
    COMPLETE = "complete"

    def __bool__(self) -> bool:
        return self is not Signal.REJECT


class _Absent:
    """Marker for a key missing from an event."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<absent>"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


def event_field(event: Any, key: str) -> Any:
    """Read one field from an event, ABSENT when it is not there."""
    if not isinstance(event, Mapping):
        return ABSENT
    return event.get(key, ABSENT)


class Wildcard(Enum):
    """
    Markers usable in structural templates in place of a literal value.

    PRESENT: key must exist
    MISSING: key must not exist
    TRUTHY: value must be truthy
    FALSEY: value must be falsey (a missing key counts as falsey)
    """

    PRESENT = "present"
    MISSING = "missing"
    TRUTHY = "truthy"
    FALSEY = "falsey"

    def accepts(self, value: Any) -> bool:
        if self is Wildcard.PRESENT:
            return value is not ABSENT
        if self is Wildcard.MISSING:
            return value is ABSENT
        if self is Wildcard.TRUTHY:
            return bool(value)
        return not value

    def __repr__(self) -> str:
        return self.name


PRESENT = Wildcard.PRESENT
MISSING = Wildcard.MISSING
TRUTHY = Wildcard.TRUTHY
FALSEY = Wildcard.FALSEY
