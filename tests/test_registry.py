"""SequenceRegistry tests."""

from __future__ import annotations

import threading

from seqmatch.engine.engine import SequenceEngine
from seqmatch.engine.reactions import resolve_reaction
from seqmatch.engine.registry import SequenceRegistry
from seqmatch.matching.combinators import times
from seqmatch.matching.tokens import simple


def add(registry: SequenceRegistry, kind: str):
    return registry.add(simple(kind), resolve_reaction("DONE"))


def test_ids_are_unique_and_ordered() -> None:
    registry = SequenceRegistry()
    regs = [add(registry, kind) for kind in ("A", "B", "C")]
    assert [r.id for r in regs] == [1, 2, 3]
    assert registry.snapshot() == regs

    regs[1].unregister()
    new = add(registry, "D")
    assert new.id == 4
    assert [r.id for r in registry.snapshot()] == [1, 3, 4]


def test_new_registration_has_empty_buffer_and_initial_state() -> None:
    registry = SequenceRegistry()
    registration = registry.add(times("A", 3), resolve_reaction("DONE"))
    assert registration.accumulated_events == []
    assert registration.run.state == registration.matcher.initial_state()
    assert registration.description == "SEQUENCE: times(simple(A) x 3) => DONE"
    assert registration.repeatable is True


def test_unregister_drops_buffer() -> None:
    registry = SequenceRegistry()
    registration = add(registry, "A")
    registration.accumulated_events.append({"type": "A"})

    assert registry.unregister(registration.id) is True
    assert registration.accumulated_events == []
    assert registry.get(registration.id) is None
    assert registry.unregister(registration.id) is False


def test_clear_returns_count() -> None:
    registry = SequenceRegistry()
    for kind in ("A", "B"):
        add(registry, kind)
    assert registry.clear() == 2
    assert len(registry) == 0
    assert registry.clear() == 0


def test_handle_repr_reports_activity() -> None:
    registry = SequenceRegistry()
    handle = add(registry, "A").unregister
    assert repr(handle) == "UnregisterHandle(id=1, active=True)"
    handle()
    assert repr(handle) == "UnregisterHandle(id=1, active=False)"


def test_concurrent_callers_are_serialized() -> None:
    dispatched: list = []
    engine = SequenceEngine(dispatch=dispatched.append, log_resolutions=False)
    engine.register(times("A", 2), "PAIR")

    def worker() -> None:
        for _ in range(500):
            engine.process_event({"type": "A"})

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(dispatched) == 1000
    assert engine.get_stats()["events_processed"] == 2000
