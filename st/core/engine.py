"""Stopwatch state and transitions: pure logic, no I/O.

Elapsed time is never counted by a ticking loop.  A run is remembered by the
wall-clock instant it started (the anchor) and everything is recomputed from
``now``, so a timer keeps accruing while no window is open and any number of
processes agree on the value.  All arithmetic is in integer milliseconds;
``now`` is always passed in so tests can drive the clock by hand.
"""

import math
import time
from dataclasses import dataclass


def now_ms():
    """Wall clock in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def _is_number(value):
    # bool is an int subclass, but a bool is never a valid timestamp
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # json happily reads Infinity, NaN and 1e400, none of which fit an int
    return math.isfinite(value)


@dataclass(frozen=True)
class TimerState:
    """Whole-record timer state.  Replaced on every transition, never edited."""

    base_elapsed_ms: int = 0
    start_ms: int | None = None
    running: bool = False

    def to_dict(self):
        return {
            "baseElapsedMs": self.base_elapsed_ms,
            "startMs": self.start_ms,
            "running": self.running,
        }

    @classmethod
    def from_dict(cls, data):
        """Build a state from its stored/wire form.

        Raises ValueError when the shape is wrong or when ``running`` and
        ``startMs`` disagree.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Timer state must be an object, got {type(data).__name__}")
        base = data.get("baseElapsedMs")
        start = data.get("startMs")
        running = data.get("running")
        if not _is_number(base):
            raise ValueError(f"baseElapsedMs must be a number, got {base!r}")
        if start is not None and not _is_number(start):
            raise ValueError(f"startMs must be a number or null, got {start!r}")
        if not isinstance(running, bool):
            raise ValueError(f"running must be a boolean, got {running!r}")
        if base < 0:
            raise ValueError(f"baseElapsedMs must not be negative, got {base!r}")
        if running != (start is not None):
            raise ValueError(f"running={running} does not match startMs={start!r}")
        return cls(
            base_elapsed_ms=int(base),
            start_ms=None if start is None else int(start),
            running=running,
        )


def elapsed(state, now):
    """Elapsed milliseconds at ``now``.

    If the clock went backwards past the anchor the current run counts as zero,
    so the result never drops below the consolidated base (and never below 0).
    """
    if state.running and state.start_ms is not None:
        return state.base_elapsed_ms + max(0, now - state.start_ms)
    return state.base_elapsed_ms


def toggle(state, now):
    if state.running:
        return TimerState(base_elapsed_ms=elapsed(state, now), start_ms=None, running=False)
    return TimerState(base_elapsed_ms=state.base_elapsed_ms, start_ms=now, running=True)


def reset(state, now):
    """Zero the base.  A running timer keeps running, now from zero."""
    if state.running:
        return TimerState(base_elapsed_ms=0, start_ms=now, running=True)
    return TimerState()


def stop(state, now):
    """Consolidate and halt.  Returns ``(new_state, total_seconds)``; calling it again is a no-op."""
    total_ms = elapsed(state, now)
    return TimerState(base_elapsed_ms=total_ms, start_ms=None, running=False), total_ms // 1000
