"""Tests for the camera sampler."""

import threading
import time

import pytest

from monitoring.activity_sampler import ActivitySampler
from monitoring.i_monitor import IMonitor
from monitoring.i_object_detector import Detection, DetectionStatus
from tests.conftest import FakeCapture, FakeDetector


def make_sampler(detector, capture=None, **kwargs):
    capture = capture or FakeCapture()
    sampler = ActivitySampler(detector, capture_factory=lambda index: capture, **kwargs)
    return sampler, capture


def wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_status_is_loading_before_first_sample(fake_detector):
    sampler, _ = make_sampler(fake_detector)
    assert sampler.status == DetectionStatus.LOADING


def test_sample_once_publishes_classification():
    detector = FakeDetector([Detection("person", 0.9), Detection("cell phone", 0.8)])
    updates = []
    sampler, _ = make_sampler(detector, on_status_update=updates.append)
    assert sampler.open_camera()

    assert sampler.sample_once() == DetectionStatus.DISTRACTED
    assert sampler.detected_labels == ["person", "cell phone"]
    assert updates == [DetectionStatus.DISTRACTED]

    # unchanged status does not notify again
    sampler.sample_once()
    assert updates == [DetectionStatus.DISTRACTED]


def test_detector_error_keeps_previous_status():
    detector = FakeDetector([Detection("person", 0.9)])
    sampler, _ = make_sampler(detector)
    sampler.open_camera()
    sampler.sample_once()
    assert sampler.status == DetectionStatus.STUDYING

    detector.results = RuntimeError("model crashed")
    assert sampler.sample_once() == DetectionStatus.STUDYING
    assert sampler.capture_error is None


def test_camera_that_cannot_open_sets_capture_error(fake_detector):
    sampler, capture = make_sampler(fake_detector, FakeCapture(opened=False))
    sampler.start()

    assert sampler.capture_error is not None
    assert sampler.is_running is False
    assert sampler.status == DetectionStatus.LOADING
    assert capture.released is True
    assert fake_detector.calls == 0


def test_capture_factory_exception_sets_capture_error(fake_detector):
    def denied(index):
        raise PermissionError("camera access denied")

    sampler = ActivitySampler(fake_detector, capture_factory=denied)
    assert sampler.open_camera() is False
    assert "denied" in sampler.capture_error


def test_frame_read_failure_leaves_status(fake_detector):
    sampler, _ = make_sampler(fake_detector, FakeCapture(readable=False))
    sampler.open_camera()
    assert sampler.sample_once() == DetectionStatus.LOADING
    assert sampler.capture_error == "Camera error: frame read failed"
    assert fake_detector.calls == 0


def test_start_samples_immediately_and_stop_releases_camera(fake_detector):
    sampler, capture = make_sampler(fake_detector, sample_interval=60.0)
    sampler.start()
    try:
        assert wait_for(lambda: sampler.status == DetectionStatus.STUDYING)
        assert fake_detector.calls == 1
    finally:
        sampler.stop()

    assert capture.released is True
    assert sampler.is_running is False


def test_samples_repeat_on_interval(fake_detector):
    sampler, _ = make_sampler(fake_detector, sample_interval=0.02)
    sampler.start()
    try:
        assert wait_for(lambda: fake_detector.calls >= 3)
    finally:
        sampler.stop()


def test_stop_without_start_is_safe(fake_detector):
    sampler, _ = make_sampler(fake_detector)
    sampler.stop()
    sampler.stop()
    assert sampler.is_running is False


def test_capture_error_clears_after_successful_read(fake_detector):
    class FlakyCapture(FakeCapture):
        def __init__(self):
            super().__init__()
            self.reads = 0

        def read(self):
            self.reads += 1
            if self.reads == 1:
                return False, None
            return super().read()

    sampler, _ = make_sampler(fake_detector, FlakyCapture())
    sampler.open_camera()

    sampler.sample_once()
    assert sampler.capture_error == "Camera error: frame read failed"

    assert sampler.sample_once() == DetectionStatus.STUDYING
    assert sampler.capture_error is None


class SlowDetector(FakeDetector):
    """Blocks inside detect() until `gate` is set; tracks concurrent calls."""

    def __init__(self):
        super().__init__()
        self.gate = threading.Event()
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def detect(self, frame):
        with self._lock:
            self.calls += 1
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            self.gate.wait(2.0)
            return list(self.results)
        finally:
            with self._lock:
                self.active -= 1


def test_restart_while_detection_is_stuck_never_overlaps():
    detector = SlowDetector()
    captures = []

    def factory(index):
        captures.append(FakeCapture())
        return captures[-1]

    sampler = ActivitySampler(detector, capture_factory=factory, sample_interval=0.01)
    sampler.stop_timeout = 0.05

    sampler.start()
    try:
        assert wait_for(lambda: detector.calls == 1)

        # worker is stuck in detect(), so stop() gives up waiting
        sampler.stop()
        assert captures[0].released is False

        sampler.start()
        time.sleep(0.1)
        assert detector.calls == 1

        detector.gate.set()
        assert wait_for(lambda: detector.calls >= 2)
        assert wait_for(lambda: captures[0].released)
        assert wait_for(lambda: sampler.status == DetectionStatus.STUDYING)
    finally:
        detector.gate.set()
        sampler.stop()

    assert detector.max_active == 1
    assert wait_for(lambda: captures[1].released)


def test_monitor_interface_requires_is_running():
    class Incomplete(IMonitor):
        def start(self):
            pass

        def stop(self):
            pass

    with pytest.raises(TypeError):
        Incomplete()

    assert isinstance(ActivitySampler(FakeDetector()), IMonitor)
