# timer/session_runner.py

from __future__ import annotations

import logging
from typing import Optional

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from core.session_tracker import SessionRecorder
from monitoring.activity_sampler import ActivitySampler
from monitoring.i_object_detector import DetectionStatus
from timer.models import Phase, SessionSummary, TimerSnapshot
from timer.phase_controller import PhaseController

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000


class PomodoroRunner(QObject):
    """
    Drives a PhaseController from the Qt event loop.

    - A 1 s QTimer ticks the controller with the sampler's latest status.
    - The sampler runs on its own worker; the clock never waits for it.
    - shutdown() stops both and releases the camera.

    Signals carry plain values so widgets can connect directly.
    """

    ticked = pyqtSignal(object)          # TimerSnapshot
    phase_changed = pyqtSignal(str)      # Phase value
    status_changed = pyqtSignal(str)     # DetectionStatus value
    session_completed = pyqtSignal(object)  # SessionSummary

    def __init__(
        self,
        controller: PhaseController,
        *,
        sampler: Optional[ActivitySampler] = None,
        recorder: Optional[SessionRecorder] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.controller = controller
        self.sampler = sampler
        self.recorder = recorder
        self._last_status = DetectionStatus.LOADING
        self._closed = False

        controller.on_phase_change = self._on_phase_change
        controller.on_session_complete = self._on_session_complete

        self._timer = QTimer(self)
        self._timer.setInterval(TICK_INTERVAL_MS)
        self._timer.timeout.connect(self._on_tick)

    # ===================== Lifecycle =========================

    def enable_camera(self) -> bool:
        """
        Start the sampler. Returns False when the camera could not be
        opened; the timer keeps working without detection.
        """
        if self.sampler is None:
            return False
        self.sampler.start()
        if self.sampler.capture_error:
            logger.warning("Detection disabled: %s", self.sampler.capture_error)
            return False
        return True

    def shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._timer.stop()
        if self.sampler is not None:
            self.sampler.stop()
        if self.recorder is not None:
            self.recorder.wait()
        logger.info("Session runner shut down")

    # ===================== User actions =========================

    def start(self) -> None:
        self.controller.start()
        if not self._timer.isActive():
            self._timer.start()
        self.ticked.emit(self.controller.snapshot())

    def pause(self) -> None:
        self.controller.pause()
        self._timer.stop()
        self.ticked.emit(self.controller.snapshot())

    def reset(self) -> None:
        self.controller.reset()
        self._timer.stop()
        self.ticked.emit(self.controller.snapshot())

    def set_focus_duration(self, minutes: int) -> bool:
        accepted = self.controller.set_focus_duration(minutes)
        if accepted:
            self.ticked.emit(self.controller.snapshot())
        return accepted

    def set_break_duration(self, minutes: int) -> bool:
        accepted = self.controller.set_break_duration(minutes)
        if accepted:
            self.ticked.emit(self.controller.snapshot())
        return accepted

    @property
    def is_ticking(self) -> bool:
        return self._timer.isActive()

    @property
    def current_status(self) -> DetectionStatus:
        if self.sampler is None:
            return DetectionStatus.LOADING
        return self.sampler.status

    def snapshot(self) -> TimerSnapshot:
        return self.controller.snapshot()

    # ===================== Timer slot =========================

    def _on_tick(self) -> None:
        status = self.current_status
        if status != self._last_status:
            self._last_status = status
            self.status_changed.emit(status.value)

        self.controller.tick(status)
        if not self.controller.running:
            # auto_continue off: controller paused itself on phase change
            self._timer.stop()
        self.ticked.emit(self.controller.snapshot())

    # ===================== Controller callbacks =========================

    def _on_phase_change(self, phase: Phase) -> None:
        self.phase_changed.emit(phase.value)

    def _on_session_complete(self, summary: SessionSummary) -> None:
        self.session_completed.emit(summary)
