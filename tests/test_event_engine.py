"""EventEngine (bus + sequences) tests."""

from __future__ import annotations

import pytest

from seqmatch.events.event_engine import EventEngine


@pytest.fixture
async def engine():
    engine = EventEngine(poll_interval=0.05, log_resolutions=False)
    await engine.start()
    yield engine
    if engine.is_running:
        await engine.stop()


async def test_reactions_are_published_on_the_bus(engine) -> None:
    received: list = []

    async def on_ready(event) -> None:
        received.append(event)

    engine.subscribe("READY", on_ready)
    engine.when(lambda s: s.queue_strict(["FETCH", "FETCH_OK"]), "READY")

    for kind in ("FETCH", "FETCH_OK", "FETCH", "NOISE", "FETCH_OK"):
        await engine.publish({"type": kind})
    await engine.drain()

    assert len(received) == 1
    assert [e["type"] for e in received[0]["payload"]["events"]] == ["FETCH", "FETCH_OK"]


async def test_reactions_can_complete_other_sequences(engine) -> None:
    received: list = []

    async def on_done(event) -> None:
        received.append(event)

    engine.subscribe("DONE", on_done)
    engine.register("PING", {"type": "PONG"})
    engine.when(lambda s: s.times("PONG", 2), {"type": "DONE"})

    await engine.publish({"type": "PING"})
    await engine.publish({"type": "PING"})
    await engine.drain()

    assert received == [{"type": "DONE"}]


async def test_once_and_clear_all(engine) -> None:
    engine.when(lambda s: s.any(["A", "B"]), {"type": "FIRST"}, once=True)
    engine.register("A", {"type": "EVERY"})

    await engine.publish({"type": "A"})
    await engine.publish({"type": "B"})
    await engine.drain()

    stats = engine.get_stats()
    assert stats["reactions_dispatched"] == 2
    assert stats["live_registrations"] == 1

    assert engine.clear_all() == 1
    await engine.publish({"type": "A"})
    await engine.drain()
    assert engine.get_stats()["reactions_dispatched"] == 2


async def test_malformed_events_are_skipped(engine) -> None:
    engine.register("A", {"type": "SEEN"})
    await engine.publish({"type": "A", "bogus": True})
    await engine.drain()
    assert engine.get_stats()["reactions_dispatched"] == 0


async def test_stop_keeps_sequences(engine) -> None:
    engine.register("A", "DONE")
    await engine.stop()
    assert engine.is_running is False
    assert engine.sequences.live_count == 1
    assert engine.event_bus.subscriber_count == 0
