"""Tests for the phase countdown."""

from timer.clock import Clock
from timer.models import Phase, format_time


def test_tick_does_nothing_while_paused():
    clock = Clock(Phase.FOCUS, 90)
    assert clock.tick() is False
    assert clock.seconds_remaining == 90


def test_tick_reports_completion_at_zero_and_stays_there():
    clock = Clock(Phase.BREAK, 2)
    clock.start()
    assert clock.tick() is False
    assert clock.tick() is True
    assert clock.seconds_remaining == 0
    assert clock.tick() is True
    assert clock.seconds_remaining == 0


def test_pause_keeps_remaining_time_and_reset_restores_full():
    clock = Clock(Phase.FOCUS, 60)
    clock.start()
    clock.tick()
    clock.pause()
    clock.pause()
    assert clock.seconds_remaining == 59
    assert not clock.running

    clock.start()
    clock.reset(60)
    assert clock.seconds_remaining == 60
    assert not clock.running


def test_assign_switches_phase():
    clock = Clock(Phase.FOCUS, 0)
    clock.assign(300, phase=Phase.BREAK)
    assert clock.state.phase == Phase.BREAK
    assert clock.seconds_remaining == 300


def test_format_time():
    assert format_time(1500) == "25:00"
    assert format_time(61) == "01:01"
    assert format_time(0) == "00:00"
