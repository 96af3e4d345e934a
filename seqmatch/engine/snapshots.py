"""
Snapshots — Pydantic models describing an engine for inspection.

Snapshots are read-only copies: changing one never changes the engine.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from seqmatch.matching.base import describe_state


class RegistrationSnapshot(BaseModel):
    """State of one live registration."""

    id: int = Field(..., description="Registration id")
    description: str = Field(..., description="Matcher and reaction, human-readable")
    matcher_kind: str = Field(..., description="Matcher variant tag")
    reaction_kind: str = Field(..., description="Reaction variant tag")
    repeatable: bool = Field(True, description="False for one-shot sequences")
    buffered_events: int = Field(0, ge=0, description="Events accumulated so far")
    state: Any = Field(None, description="Matcher progress as plain data")


class EngineSnapshot(BaseModel):
    """All live registrations plus engine counters."""

    registrations: list[RegistrationSnapshot] = Field(default_factory=list)
    events_processed: int = Field(0, ge=0)
    reactions_dispatched: int = Field(0, ge=0)

    @property
    def live_registrations(self) -> int:
        return len(self.registrations)


def snapshot_registration(registration: Any) -> RegistrationSnapshot:
    """Build a RegistrationSnapshot from a live Registration."""
    return RegistrationSnapshot(
        id=registration.id,
        description=registration.description,
        matcher_kind=registration.matcher.kind,
        reaction_kind=registration.reaction.kind,
        repeatable=registration.repeatable,
        buffered_events=len(registration.accumulated_events),
        state=describe_state(registration.run.state),
    )
