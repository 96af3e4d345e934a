"""Run a SEQMATCH demo from project root."""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Settings are read at import time
load_dotenv()

from seqmatch.events.event_engine import EventEngine
from seqmatch.shared.logging import ROOT_LOGGER, get_logger

logger = get_logger(ROOT_LOGGER)


async def demo() -> None:
    engine = EventEngine(poll_interval=0.1)

    async def on_checkout_ready(event) -> None:
        events = event["payload"]["events"]
        logger.info(f"Checkout ready after {len(events)} events")

    engine.subscribe("CHECKOUT_READY", on_checkout_ready)

    engine.when(
        lambda s: s.queue([
            "CART_OPENED",
            s.times("ITEM_ADDED", 2),
            s.exact({"type": "ADDRESS_SET", "payload": {"country": s.present}}),
        ]),
        "CHECKOUT_READY",
    )
    engine.when(lambda s: s.any(["LOGGED_OUT", "SESSION_EXPIRED"]), {"type": "CLEANUP"}, once=True)

    await engine.start()
    for event in (
        {"type": "CART_OPENED"},
        {"type": "ITEM_ADDED", "payload": {"sku": "A-1"}},
        {"type": "PAGE_VIEWED"},
        {"type": "ITEM_ADDED", "payload": {"sku": "B-2"}},
        {"type": "ADDRESS_SET", "payload": {"country": "NL"}},
        {"type": "SESSION_EXPIRED"},
    ):
        await engine.publish(event)

    await engine.drain()
    logger.info(f"Stats: {engine.get_stats()}")
    await engine.stop()


if __name__ == "__main__":
    asyncio.run(demo())
