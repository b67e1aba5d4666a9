# monitoring/activity_sampler.py

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Optional

import cv2

from monitoring.distraction_rules import classify_detections
from monitoring.i_monitor import IMonitor
from monitoring.i_object_detector import DetectionStatus, IObjectDetector

logger = logging.getLogger(__name__)


class ActivitySampler(IMonitor):
    """
    Camera sampler with 3 states:
      - LOADING     (nothing classified yet)
      - STUDYING
      - DISTRACTED

    Every `sample_interval` seconds (and once right after start) it
    grabs one frame, runs the object detector on it and publishes the
    classified status. Only one detect() call is ever in flight, even
    across a stop()/start() while the previous worker is still stuck in
    the model, so a slow detector only delays the next sample.

    Each worker owns the capture handle it was started with and
    releases it when it exits, whatever the exit path.
    """

    # how long stop() waits for the worker before leaving it to finish alone
    stop_timeout = 2.0

    def __init__(
        self,
        detector: IObjectDetector,
        *,
        camera_index: int = 0,
        sample_interval: float = 5.0,
        on_status_update: Optional[Callable[[DetectionStatus], None]] = None,
        capture_factory: Optional[Callable[[int], Any]] = None,
    ) -> None:
        self.detector = detector
        self.camera_index = camera_index
        self.sample_interval = float(sample_interval)
        self.on_status_update = on_status_update
        self._capture_factory = capture_factory or cv2.VideoCapture

        self._status: DetectionStatus = DetectionStatus.LOADING
        self._detected_labels: List[str] = []
        self.capture_error: Optional[str] = None

        self._cap: Any = None
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None
        self._detect_lock = threading.Lock()

    # -------------------------------------------------
    # Published state
    # -------------------------------------------------

    @property
    def status(self) -> DetectionStatus:
        return self._status

    @property
    def detected_labels(self) -> List[str]:
        return list(self._detected_labels)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # -------------------------------------------------
    # IMonitor interface
    # -------------------------------------------------

    def start(self) -> None:
        if self.is_running:
            return

        if not self.open_camera():
            return

        # the worker takes over this handle; stop() no longer touches it
        cap, self._cap = self._cap, None
        stop_event = threading.Event()
        self._stop_event = stop_event
        self._thread = threading.Thread(
            target=self._loop, args=(cap, stop_event), daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=self.stop_timeout)
            if self._thread.is_alive():
                logger.warning("Sampler worker still busy; it will release the camera when done")
        self._thread = None
        self._stop_event = None
        # a camera opened without a worker (open_camera + sample_once)
        self.release_camera()

    # -------------------------------------------------
    # Camera handling
    # -------------------------------------------------

    def open_camera(self) -> bool:
        """
        Acquire the capture device. On failure `capture_error` is set
        and the status stays as it was (LOADING on a fresh sampler).
        """
        if self._cap is not None:
            return True

        try:
            cap = self._capture_factory(self.camera_index)
        except Exception as exc:
            self._set_capture_error(f"Camera error: {exc}")
            return False

        if not cap.isOpened():
            cap.release()
            self._set_capture_error("Camera error: cannot open camera")
            return False

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, 640)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, 480)
        cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        self._cap = cap
        self.capture_error = None
        logger.info("Camera %s opened", self.camera_index)
        return True

    def release_camera(self) -> None:
        cap, self._cap = self._cap, None
        self._release(cap)

    def _release(self, cap: Any) -> None:
        if cap is None:
            return
        try:
            cap.release()
        except Exception:
            logger.exception("Camera release failed")
        else:
            logger.info("Camera %s released", self.camera_index)

    def _set_capture_error(self, message: str) -> None:
        self.capture_error = message
        logger.warning(message)

    # -------------------------------------------------
    # Loop
    # -------------------------------------------------

    def _loop(self, cap: Any, stop_event: threading.Event) -> None:
        try:
            while not stop_event.is_set():
                self._sample(cap, stop_event)
                # wait() returns early when stop() is called
                if stop_event.wait(self.sample_interval):
                    break
        finally:
            self._release(cap)

    def sample_once(self) -> DetectionStatus:
        """
        Read one frame from the camera opened with open_camera(),
        classify it and publish the result.
        Returns the status after this sample.
        """
        return self._sample(self._cap, None)

    def _sample(self, cap: Any, stop_event: Optional[threading.Event]) -> DetectionStatus:
        if cap is None:
            return self._status

        try:
            ok, frame = cap.read()
        except Exception:
            logger.exception("Frame read failed")
            ok, frame = False, None
        if not ok or frame is None:
            self._set_capture_error("Camera error: frame read failed")
            return self._status
        self.capture_error = None

        with self._detect_lock:
            if stop_event is not None and stop_event.is_set():
                return self._status
            try:
                detections = self.detector.detect(frame)
            except Exception:
                # keep previous status for this cycle
                logger.exception("Object detection failed")
                return self._status

        if stop_event is not None and stop_event.is_set():
            # stopped while the model was busy; drop the stale result
            return self._status

        self._detected_labels = [d.label for d in detections]
        logger.debug(
            "Detected objects: %s",
            ", ".join(f"{d.label} ({round(d.confidence * 100)}%)" for d in detections),
        )

        self._publish(classify_detections(detections))
        return self._status

    def _publish(self, status: DetectionStatus) -> None:
        changed = status != self._status
        self._status = status
        if changed:
            logger.info("Detection status: %s", status.value)
            if self.on_status_update is not None:
                try:
                    self.on_status_update(status)
                except Exception:
                    logger.exception("Status callback failed")
