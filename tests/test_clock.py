"""Tests for the frame clock."""
from __future__ import annotations

from miffy_runner.core.clock import FrameClock


def test_delta_is_time_since_last_tick():
    clock = FrameClock(max_delta_ms=34.0, start_ms=0.0)
    assert clock.tick(16.0) == 16.0
    assert clock.tick(30.0) == 14.0
    assert clock.last_ms == 30.0


def test_spikes_are_clamped():
    """A long stall produces at most max_delta_ms of simulated time."""
    clock = FrameClock(max_delta_ms=34.0, start_ms=0.0)
    assert clock.tick(1000.0) == 34.0
    assert clock.last_ms == 1000.0


def test_backwards_clock_yields_zero():
    clock = FrameClock(max_delta_ms=34.0, start_ms=500.0)
    assert clock.tick(400.0) == 0.0
    assert clock.tick(410.0) == 10.0


def test_time_source_used_without_explicit_now():
    times = iter([0.0, 20.0, 45.0])
    clock = FrameClock(max_delta_ms=34.0, time_source=lambda: next(times))
    assert clock.tick() == 20.0
    assert clock.tick() == 25.0
    assert clock.frame == 2
    assert clock.delta_ms == 25.0
