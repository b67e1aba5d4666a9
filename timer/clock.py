# timer/clock.py

from __future__ import annotations

from timer.models import Phase, TimerState


class Clock:
    """
    Countdown for the active phase.

    tick() is expected once per second. It only counts while running
    and reports True when the countdown has reached zero; from then on
    it stays at zero until assign() starts the next countdown.
    """

    def __init__(self, phase: Phase, full_seconds: int) -> None:
        self.state = TimerState(phase=phase, seconds_remaining=int(full_seconds))

    @property
    def running(self) -> bool:
        return self.state.running

    @property
    def seconds_remaining(self) -> int:
        return self.state.seconds_remaining

    def start(self) -> None:
        self.state.running = True

    def pause(self) -> None:
        self.state.running = False

    def reset(self, full_seconds: int) -> None:
        self.state.running = False
        self.state.seconds_remaining = int(full_seconds)

    def assign(self, seconds: int, phase: Phase | None = None) -> None:
        """Give the clock a new countdown (and optionally a new phase)."""
        if phase is not None:
            self.state.phase = phase
        self.state.seconds_remaining = int(seconds)

    def tick(self) -> bool:
        """
        Advance one second. Returns True when the phase is complete.
        """
        if not self.state.running:
            return False
        if self.state.seconds_remaining > 0:
            self.state.seconds_remaining -= 1
        return self.state.seconds_remaining == 0
