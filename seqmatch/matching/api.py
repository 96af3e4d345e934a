"""
Sequence API — The capability object handed to sequence builders.

Usage:
    engine.when(lambda s: s.queue(["OPEN", s.times("CLICK", 2)]), "DONE")
"""

from __future__ import annotations

from .combinators import all_, any_, once, queue, queue_strict, times, times_strict
from .signals import FALSEY, MISSING, PRESENT, TRUTHY
from .tokens import exact, simple


class SequenceApi:
    """Pattern-building functions and wildcard markers, grouped in one object."""

    simple = staticmethod(simple)
    exact = staticmethod(exact)
    once = staticmethod(once)
    times = staticmethod(times)
    times_strict = staticmethod(times_strict)
    all = staticmethod(all_)
    any = staticmethod(any_)
    queue = staticmethod(queue)
    queue_strict = staticmethod(queue_strict)

    present = PRESENT
    missing = MISSING
    truthy = TRUTHY
    falsey = FALSEY

    def __repr__(self) -> str:
        return "SequenceApi()"


SEQ = SequenceApi()
