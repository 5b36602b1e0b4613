"""Sliding Window: trailing-window admission decisions.

Tests cover:
    - up to max_requests allowed, the next refused
    - hits leave the window after `window` has elapsed
    - retry_after_ms counts down to the oldest hit's expiry
"""

from datetime import datetime, timedelta, timezone

from bookcircle.core.sliding_window import evaluate_window

NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
WINDOW = timedelta(seconds=60)


def test_empty_window_allows_with_remaining():
    decision = evaluate_window([], NOW, 5, WINDOW)
    assert decision.allowed
    assert decision.remaining == 4


def test_sixth_operation_in_window_is_refused():
    hits = [NOW - timedelta(seconds=s) for s in (50, 40, 30, 20, 10)]
    decision = evaluate_window(hits, NOW, 5, WINDOW)
    assert not decision.allowed
    assert decision.remaining == 0
    assert decision.retry_after_ms == 10_000


def test_expired_hits_do_not_count():
    hits = [NOW - timedelta(seconds=60)] + [
        NOW - timedelta(seconds=s) for s in (40, 30, 20, 10)
    ]
    decision = evaluate_window(hits, NOW, 5, WINDOW)
    assert decision.allowed
    assert decision.remaining == 0


def test_future_hits_are_ignored():
    hits = [NOW + timedelta(seconds=5)] * 5
    assert evaluate_window(hits, NOW, 5, WINDOW).allowed
