"""Sliding Window: decide whether one more operation fits in the trailing window.

Invariants:
    - Only hits strictly inside (now - window, now] count
    - allowed is False once max_requests hits are already in the window
    - retry_after_ms is the time until the oldest counted hit leaves the window
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class WindowDecision:
    allowed: bool
    remaining: int
    retry_after_ms: int | None = None


def window_start(now: datetime, window: timedelta) -> datetime:
    return now - window


def evaluate_window(
    hits: Iterable[datetime],
    now: datetime,
    max_requests: int,
    window: timedelta,
) -> WindowDecision:
    """Decide for the next operation given the recorded hit times."""
    start = window_start(now, window)
    in_window = sorted(h for h in hits if start < h <= now)
    if len(in_window) >= max_requests:
        oldest = in_window[len(in_window) - max_requests]
        wait = (oldest + window) - now
        return WindowDecision(
            allowed=False,
            remaining=0,
            retry_after_ms=max(0, int(wait.total_seconds() * 1000)),
        )
    return WindowDecision(
        allowed=True, remaining=max_requests - len(in_window) - 1,
    )
