"""
Matching — Pattern tokens, matchers and combinators.

Usage:
    from seqmatch.matching import queue, times, PRESENT

    matcher = queue(["OPEN", times("CLICK", 2)])
    run = matcher.run()
    run.step({"type": "OPEN"})
"""

from .api import SEQ, SequenceApi
from .base import Matcher, MatcherRun, describe_state
from .combinators import (
    AllMatcher,
    AnyMatcher,
    OnceMatcher,
    QueueMatcher,
    TimesMatcher,
    all_,
    any_,
    once,
    queue,
    queue_strict,
    times,
    times_strict,
)
from .signals import FALSEY, MISSING, PRESENT, TRUTHY, Signal, Wildcard
from .tokens import ExactMatcher, KindMatcher, exact, simple

__all__ = [
    "SEQ",
    "SequenceApi",
    "Matcher",
    "MatcherRun",
    "describe_state",
    "KindMatcher",
    "ExactMatcher",
    "OnceMatcher",
    "TimesMatcher",
    "AllMatcher",
    "AnyMatcher",
    "QueueMatcher",
    "simple",
    "exact",
    "once",
    "times",
    "times_strict",
    "all_",
    "any_",
    "queue",
    "queue_strict",
    "Signal",
    "Wildcard",
    "PRESENT",
    "MISSING",
    "TRUTHY",
    "FALSEY",
]
