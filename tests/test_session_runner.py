"""Tests for the Qt timer driver (slots called directly)."""

import pytest

from monitoring.i_object_detector import DetectionStatus
from tests.conftest import FakeRecorder
from timer.models import Phase
from timer.phase_controller import PhaseController
from timer.session_runner import PomodoroRunner


class StubSampler:
    def __init__(self, status=DetectionStatus.LOADING, capture_error=None):
        self.status = status
        self.capture_error = capture_error
        self.started = 0
        self.stopped = 0

    def start(self):
        self.started += 1

    def stop(self):
        self.stopped += 1


@pytest.fixture
def runner_parts(qt_core_app):
    controller = PhaseController(focus_minutes=1, break_minutes=1, user_id="alice",
                                 recorder=FakeRecorder())
    sampler = StubSampler()
    recorder = FakeRecorder()
    runner = PomodoroRunner(controller, sampler=sampler, recorder=recorder)
    yield runner, controller, sampler, recorder
    runner.shutdown()


def test_start_and_pause_control_the_qtimer(runner_parts):
    runner, controller, _, _ = runner_parts
    runner.start()
    assert runner.is_ticking
    assert controller.running

    runner.pause()
    assert not runner.is_ticking
    assert not controller.running


def test_tick_feeds_sampler_status_to_controller(runner_parts):
    runner, controller, sampler, _ = runner_parts
    statuses, snapshots = [], []
    runner.status_changed.connect(statuses.append)
    runner.ticked.connect(snapshots.append)

    runner.start()
    sampler.status = DetectionStatus.STUDYING
    runner._on_tick()
    runner._on_tick()
    sampler.status = DetectionStatus.DISTRACTED
    runner._on_tick()

    assert controller.studying_seconds == 2
    assert controller.distracted_seconds == 1
    assert statuses == ["Studying", "Distracted"]
    assert snapshots[-1].seconds_remaining == 57


def test_phase_change_is_signalled(runner_parts):
    runner, controller, sampler, _ = runner_parts
    phases, sessions = [], []
    runner.phase_changed.connect(phases.append)
    runner.session_completed.connect(sessions.append)

    sampler.status = DetectionStatus.STUDYING
    runner.start()
    for _ in range(60):
        runner._on_tick()

    assert phases == ["Break"]
    assert len(sessions) == 1
    assert sessions[0].duration_seconds == 60
    assert controller.phase == Phase.BREAK
    assert runner.is_ticking


def test_timer_stops_when_controller_pauses_itself(qt_core_app):
    controller = PhaseController(focus_minutes=1, auto_continue=False)
    runner = PomodoroRunner(controller, sampler=StubSampler(DetectionStatus.STUDYING))
    runner.start()
    for _ in range(60):
        runner._on_tick()

    assert controller.phase == Phase.BREAK
    assert not runner.is_ticking
    runner.shutdown()


def test_duration_edits_go_through_controller(runner_parts):
    runner, controller, _, _ = runner_parts
    assert runner.set_focus_duration(100) is True
    assert controller.focus_minutes == 60

    runner.start()
    assert runner.set_break_duration(10) is False


def test_enable_camera_reports_capture_error(qt_core_app):
    sampler = StubSampler(capture_error="Camera error: cannot open camera")
    runner = PomodoroRunner(PhaseController(), sampler=sampler)
    assert runner.enable_camera() is False
    assert sampler.started == 1
    runner.shutdown()


def test_without_sampler_status_stays_loading(qt_core_app):
    runner = PomodoroRunner(PhaseController())
    assert runner.enable_camera() is False
    assert runner.current_status == DetectionStatus.LOADING
    runner.shutdown()


def test_shutdown_is_idempotent(runner_parts):
    runner, _, sampler, recorder = runner_parts
    runner.start()
    runner.shutdown()
    runner.shutdown()

    assert not runner.is_ticking
    assert sampler.stopped == 1
    assert recorder.waited is True
