# timer/phase_controller.py

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from monitoring.i_object_detector import DetectionStatus
from timer.accumulator import SessionAccumulator
from timer.clock import Clock
from timer.models import (
    DURATION_BOUNDS,
    Phase,
    PhaseAlert,
    SessionSummary,
    TimerSnapshot,
    clamp_minutes,
)

logger = logging.getLogger(__name__)


class SummaryRecorder(Protocol):
    def record(self, user_id: str, summary: SessionSummary) -> None:
        ...


class PhaseController:
    """
    Focus / Break state machine.

    States are {FOCUS, BREAK} x {running, paused}; the initial state is
    (FOCUS, paused) with the full focus duration on the clock.

    - start / pause / reset come from the user.
    - tick(status) comes once per second from the runner, together with
      the latest DetectionStatus published by the sampler.
    - When a Focus phase runs out, a SessionSummary is handed to the
      recorder (only when a user is attached), counters are cleared and
      the Break phase begins. A finished Break goes back to Focus.

    There is no terminal state. Nothing raised by the recorder or the
    alert sink reaches the caller of tick().
    """

    def __init__(
        self,
        *,
        focus_minutes: int = DURATION_BOUNDS[Phase.FOCUS][2],
        break_minutes: int = DURATION_BOUNDS[Phase.BREAK][2],
        user_id: Optional[str] = None,
        recorder: Optional[SummaryRecorder] = None,
        alert_sink: Optional[Callable[[PhaseAlert], None]] = None,
        auto_continue: bool = True,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.focus_minutes = clamp_minutes(Phase.FOCUS, focus_minutes)
        self.break_minutes = clamp_minutes(Phase.BREAK, break_minutes)
        self.user_id = user_id
        self.recorder = recorder
        self.alert_sink = alert_sink
        self.auto_continue = auto_continue
        self._now = now

        self.clock = Clock(Phase.FOCUS, self.focus_minutes * 60)
        self.accumulator = SessionAccumulator()
        self.completed_focus_sessions = 0

        # optional listeners (runner / UI)
        self.on_phase_change: Optional[Callable[[Phase], None]] = None
        self.on_session_complete: Optional[Callable[[SessionSummary], None]] = None

    # ------------------------------------------------------------------ #
    # State accessors
    # ------------------------------------------------------------------ #

    @property
    def phase(self) -> Phase:
        return self.clock.state.phase

    @property
    def running(self) -> bool:
        return self.clock.running

    @property
    def seconds_remaining(self) -> int:
        return self.clock.seconds_remaining

    @property
    def studying_seconds(self) -> int:
        return self.accumulator.studying_seconds

    @property
    def distracted_seconds(self) -> int:
        return self.accumulator.distracted_seconds

    def duration_seconds(self, phase: Optional[Phase] = None) -> int:
        phase = phase or self.phase
        minutes = self.focus_minutes if phase == Phase.FOCUS else self.break_minutes
        return minutes * 60

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            phase=self.phase,
            seconds_remaining=self.seconds_remaining,
            running=self.running,
            focus_minutes=self.focus_minutes,
            break_minutes=self.break_minutes,
            tally=self.accumulator.snapshot(),
            completed_focus_sessions=self.completed_focus_sessions,
        )

    # ------------------------------------------------------------------ #
    # User actions
    # ------------------------------------------------------------------ #

    def start(self) -> None:
        if self.running:
            return
        self.clock.start()
        # only a fresh phase clears the counters; resuming keeps them
        if self.seconds_remaining == self.duration_seconds():
            self.accumulator.reset()
            logger.info("Timer started fresh (%s)", self.phase.value)
        else:
            logger.info("Timer resumed (%s)", self.phase.value)

    def pause(self) -> None:
        if not self.running:
            return
        self.clock.pause()
        logger.info("Timer paused at %ss", self.seconds_remaining)

    def reset(self) -> None:
        self.clock.reset(self.duration_seconds())
        self.accumulator.reset()
        logger.info("Timer reset (%s)", self.phase.value)

    def set_focus_duration(self, minutes: int) -> bool:
        """Returns False (and changes nothing) while the timer runs."""
        return self._set_duration(Phase.FOCUS, minutes)

    def set_break_duration(self, minutes: int) -> bool:
        return self._set_duration(Phase.BREAK, minutes)

    def _set_duration(self, phase: Phase, minutes: int) -> bool:
        if self.running:
            logger.debug("Ignoring %s duration edit while running", phase.value)
            return False

        value = clamp_minutes(phase, minutes)
        if phase == Phase.FOCUS:
            self.focus_minutes = value
        else:
            self.break_minutes = value

        if self.phase == phase:
            self.clock.assign(value * 60)
        return True

    # ------------------------------------------------------------------ #
    # Clock
    # ------------------------------------------------------------------ #

    def tick(self, status: DetectionStatus = DetectionStatus.LOADING) -> None:
        if not self.running:
            return

        phase_complete = self.clock.tick()
        if self.phase == Phase.FOCUS:
            self.accumulator.on_second_tick(status)

        if phase_complete:
            self._complete_phase()

    def _complete_phase(self) -> None:
        if self.phase == Phase.FOCUS:
            summary = SessionSummary.from_tally(self.accumulator.snapshot(), self._now())
            self.completed_focus_sessions += 1
            self._hand_off(summary)
            self.accumulator.reset()
            self._alert(PhaseAlert(
                title="Focus session complete!",
                body=f"Take a break for {self.break_minutes} minutes.",
            ))
            next_phase = Phase.BREAK
        else:
            self._alert(PhaseAlert(
                title="Break ended!",
                body=f"Start your next focus session for {self.focus_minutes} minutes.",
            ))
            next_phase = Phase.FOCUS

        self.clock.assign(self.duration_seconds(next_phase), phase=next_phase)
        if not self.auto_continue:
            self.clock.pause()
        logger.info("Phase complete, now %s", next_phase.value)

        if self.on_phase_change is not None:
            try:
                self.on_phase_change(next_phase)
            except Exception:
                logger.exception("Phase change listener failed")

    def _hand_off(self, summary: SessionSummary) -> None:
        if self.on_session_complete is not None:
            try:
                self.on_session_complete(summary)
            except Exception:
                logger.exception("Session listener failed")

        if self.user_id is None or self.recorder is None:
            logger.info("No user attached, session not saved")
            return

        try:
            self.recorder.record(self.user_id, summary)
        except Exception:
            logger.exception("Could not hand session to recorder")

    def _alert(self, alert: PhaseAlert) -> None:
        if self.alert_sink is None:
            return
        try:
            self.alert_sink(alert)
        except Exception:
            logger.exception("Phase alert failed")
