#!/usr/bin/env python3
"""
Tests for the rest timer.
"""

import threading

from pump_core.catalog import find_exercise
from pump_core.timer import RestTimer, format_clock, rest_seconds_for


def test_format_clock():
    assert format_clock(90) == "01:30"
    assert format_clock(5) == "00:05"
    assert format_clock(0) == "00:00"
    assert format_clock(-3) == "00:00"


def test_rest_seconds_for():
    """The main lift rests longer."""
    assert rest_seconds_for(find_exercise("db-bench")) == 90
    assert rest_seconds_for(find_exercise("curl")) == 60
    assert rest_seconds_for(find_exercise("curl"), main_rest=120, accessory_rest=45) == 45


def test_countdown_ticks_to_zero_and_expires():
    """Each tick reports the remaining count; expiry fires once."""
    ticks = []
    expired = threading.Event()
    timer = RestTimer(interval=0.01)
    timer.start(3, on_tick=ticks.append, on_expire=expired.set)

    assert timer.wait(timeout=5)
    assert expired.is_set()
    assert ticks == [2, 1, 0]
    assert timer.remaining == 0
    assert not timer.is_running


def test_cancel_does_not_expire():
    """A cancelled countdown never calls on_expire."""
    expired = threading.Event()
    timer = RestTimer(interval=10)
    timer.start(5, on_expire=expired.set)
    assert timer.is_running
    assert timer.remaining == 5

    timer.cancel()
    assert not timer.is_running
    assert timer.remaining == 0
    assert not expired.is_set()


def test_start_replaces_running_countdown():
    """Only one countdown runs at a time."""
    first_expired = threading.Event()
    second_expired = threading.Event()
    timer = RestTimer(interval=0.01)
    timer.start(1000, on_expire=first_expired.set)
    timer.start(2, on_expire=second_expired.set)

    assert timer.wait(timeout=5)
    assert second_expired.is_set()
    assert not first_expired.is_set()


def test_non_positive_duration_does_nothing():
    timer = RestTimer(interval=0.01)
    timer.start(0)
    assert not timer.is_running
    assert timer.wait(timeout=1)
