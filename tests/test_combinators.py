"""Combinator state machine tests."""

from __future__ import annotations

import pytest

from seqmatch.matching.api import SEQ
from seqmatch.matching.base import Matcher
from seqmatch.matching.combinators import (
    AllState,
    CountState,
    QueueState,
    all_,
    any_,
    once,
    queue,
    queue_strict,
    times,
    times_strict,
)
from seqmatch.matching.signals import PRESENT, Signal
from seqmatch.matching.tokens import simple
from seqmatch.shared.errors import InvalidArgumentError, InvalidTokenError

R, C, K = Signal.REJECT, Signal.CONTINUE, Signal.COMPLETE


def feed(matcher: Matcher, *kinds: str) -> list[Signal]:
    run = matcher.run()
    return [run.step({"type": kind}) for kind in kinds]


# ============================================================================
# times
# ============================================================================


def test_times_completes_on_nth_match_ignoring_noise() -> None:
    assert feed(times("A", 2), "A", "B", "A", "A", "A") == [C, C, K, C, K]


def test_times_strict_resets_on_noise() -> None:
    assert feed(times_strict("A", 2), "A", "B", "A", "A") == [C, R, C, K]


def test_times_one_completes_every_time() -> None:
    assert feed(times("A", 1), "A", "A") == [K, K]


def test_times_strict_restores_initial_state() -> None:
    matcher = times_strict("A", 3)
    run = matcher.run()
    run.step({"type": "A"})
    run.step({"type": "A"})
    assert run.state.count == 2
    run.step({"type": "B"})
    assert run.state == matcher.initial_state()


def test_times_passes_inner_continue_through() -> None:
    assert feed(times(["A", "B"], 2), "A", "B", "A", "B") == [C, C, C, K]


@pytest.mark.parametrize("count", [0, -1, 1.5, True, "2", None])
def test_times_rejects_bad_counts(count) -> None:
    with pytest.raises(InvalidArgumentError) as exc_info:
        times("A", count)
    assert exc_info.value.combinator == "times"


def test_times_strict_error_names_strict_variant() -> None:
    with pytest.raises(InvalidTokenError) as exc_info:
        times_strict(None, 2)
    assert exc_info.value.combinator == "times_strict"


# ============================================================================
# queue
# ============================================================================


def test_queue_completes_in_order_and_skips_noise() -> None:
    assert feed(queue(["A", "B"]), "B", "A", "C", "B") == [R, C, C, K]


def test_queue_does_not_complete_out_of_order() -> None:
    assert feed(queue(["A", "B"]), "B", "B", "A") == [R, R, C]


def test_queue_strict_resets_on_intervening_event() -> None:
    assert feed(queue_strict(["A", "B"]), "A", "C", "B") == [C, R, R]


def test_queue_strict_completes_each_pair() -> None:
    assert feed(queue_strict(["A", "B"]), "A", "B", "A", "B") == [C, K, C, K]


def test_queue_state_tracks_cursor() -> None:
    matcher = queue(["A", "B", "C"])
    run = matcher.run()
    run.step({"type": "A"})
    run.step({"type": "B"})
    assert isinstance(run.state, QueueState)
    assert run.state.cursor == 2
    run.step({"type": "C"})
    assert run.state == matcher.initial_state()


def test_queue_can_reuse_one_matcher_in_several_positions() -> None:
    a = simple("A")
    assert feed(queue([a, a, "B"]), "A", "A", "B") == [C, C, K]


def test_nested_reset_propagates() -> None:
    matcher = queue_strict([times_strict("A", 2), "B"])
    run = matcher.run()
    assert run.step({"type": "A"}) is C
    assert run.state.branches[0] == CountState(count=1, inner=None)
    assert run.step({"type": "X"}) is R
    assert run.state == matcher.initial_state()
    assert [run.step({"type": k}) for k in ("A", "A", "B")] == [C, C, K]


# ============================================================================
# all / any
# ============================================================================


def test_all_completes_in_any_order() -> None:
    assert feed(all_(["A", "B"]), "B", "C", "A") == [C, C, K]
    assert feed(all_(["A", "B"]), "A", "A", "B") == [C, C, K]


def test_all_resets_after_completion() -> None:
    matcher = all_(["A", "B"])
    run = matcher.run()
    for kind in ("A", "B"):
        run.step({"type": kind})
    assert run.state == matcher.initial_state()
    assert run.step({"type": "A"}) is C


def test_all_keeps_satisfied_branches() -> None:
    run = all_(["A", "B", "C"]).run()
    run.step({"type": "B"})
    run.step({"type": "X"})
    assert isinstance(run.state, AllState)
    assert run.state.satisfied == (False, True, False)


def test_all_feeds_every_branch_every_event() -> None:
    # Both counters must see both A events
    assert feed(all_([times("A", 2), times("A", 2)]), "A", "A") == [C, K]


def test_all_strict_rejects_event_satisfying_nothing() -> None:
    assert feed(all_(["A", "B"], strict=True), "A", "C", "B", "A") == [C, R, C, K]


def test_all_strict_rejects_event_satisfying_two_branches() -> None:
    tokens = ["A", {"type": "A", "payload": PRESENT}]
    event = {"type": "A", "payload": 1}

    strict_run = all_(tokens, strict=True).run()
    assert strict_run.step(event) is R

    assert all_(tokens).run().step(event) is K

    # Completing the last branch does not excuse satisfying two at once
    assert feed(all_(["A", {"type": "A"}], strict=True), "A") == [R]


def test_any_completes_on_first_branch() -> None:
    assert feed(any_(["A", "B"]), "C", "B", "A") == [C, K, K]


def test_any_strict_rejects_unmatched_event() -> None:
    assert feed(any_(["A", "B"], strict=True), "C", "A") == [R, K]


def test_any_strict_rejects_noise_despite_branch_progress() -> None:
    matcher = any_([times("A", 2), "B"], strict=True)
    assert feed(matcher, "X", "Y", "A") == [R, R, R]
    # Partial progress is discarded with the reset
    assert feed(matcher, "A", "A", "B") == [R, R, K]


def test_any_resets_every_branch_on_completion() -> None:
    matcher = any_([times("A", 2), "B"])
    run = matcher.run()
    run.step({"type": "A"})
    assert run.state.branches[0].count == 1
    run.step({"type": "B"})
    assert run.state == matcher.initial_state()


@pytest.mark.parametrize("combinator,name", [(all_, "all"), (any_, "any"), (queue, "queue")])
@pytest.mark.parametrize("tokens", [[], (), None, "AB"])
def test_group_combinators_require_token_lists(combinator, name, tokens) -> None:
    with pytest.raises(InvalidTokenError) as exc_info:
        combinator(tokens)
    assert exc_info.value.combinator == name


def test_group_error_names_bad_position() -> None:
    with pytest.raises(InvalidTokenError) as exc_info:
        queue_strict(["A", None])
    assert exc_info.value.combinator == "queue_strict"
    assert "position 1" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, InvalidTokenError)


# ============================================================================
# once / descriptions / api
# ============================================================================


def test_once_forwards_and_is_not_repeatable() -> None:
    matcher = once(["A", "B"])
    assert matcher.repeatable is False
    assert queue(["A", "B"]).repeatable is True
    assert feed(matcher, "A", "B") == [C, K]


def test_descriptions() -> None:
    assert queue(["A", "B"]).description == "queue(simple(A), simple(B))"
    assert times_strict("A", 3).description == "times_strict(simple(A) x 3)"
    assert once(any_(["A", "B"])).description == "once(any(simple(A), simple(B)))"
    assert str(all_(["A"], strict=True)) == "all_strict(simple(A))"


def test_normalization_is_idempotent_over_a_stream() -> None:
    stream = ("A", "C", "B", "A", "B", "B")
    for token in ("A", ["A", "B"], {"type": "B"}, times("A", 2), any_(["A", "C"])):
        assert feed(simple(simple(token)), *stream) == feed(simple(token), *stream)


def test_runs_of_one_matcher_are_independent() -> None:
    matcher = times("A", 2)
    first, second = matcher.run(), matcher.run()
    first.step({"type": "A"})
    assert second.state.count == 0
    assert second.step({"type": "A"}) is C
    assert first.step({"type": "A"}) is K


def test_reset_returns_run_to_initial_state() -> None:
    matcher = queue(["A", "B"])
    run = matcher.run()
    run.step({"type": "A"})
    run.reset()
    assert run.state == matcher.initial_state()
    assert run.step({"type": "B"}) is R


def test_sequence_api_exposes_combinators_and_markers() -> None:
    assert SEQ.all is all_
    assert SEQ.any is any_
    assert SEQ.present is PRESENT
    assert isinstance(SEQ.queue(["A"]), Matcher)
