"""
Pytest configuration and shared fixtures for the Focus Pomodoro tests.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.database import Database  # noqa: E402
from monitoring.i_object_detector import Detection, IObjectDetector  # noqa: E402


FIXED_NOW = datetime(2026, 10, 16, 12, 0, 0, tzinfo=timezone.utc)


class FakeDetector(IObjectDetector):
    """Returns whatever `results` holds; raises if it holds an exception."""

    def __init__(self, results=None):
        self.results = results if results is not None else [Detection("person", 0.9)]
        self.calls = 0
        self._loaded = False

    @property
    def is_loaded(self):
        return self._loaded

    def load(self):
        self._loaded = True

    def detect(self, frame):
        self.calls += 1
        if isinstance(self.results, Exception):
            raise self.results
        return list(self.results)


class FakeCapture:
    """Stand-in for cv2.VideoCapture."""

    def __init__(self, opened=True, readable=True):
        self.opened = opened
        self.readable = readable
        self.released = False
        self.props = {}

    def isOpened(self):
        return self.opened

    def set(self, prop, value):
        self.props[prop] = value
        return True

    def read(self):
        if not self.readable:
            return False, None
        return True, np.zeros((480, 640, 3), dtype=np.uint8)

    def release(self):
        self.released = True


class FakeRecorder:
    def __init__(self, fail=False):
        self.records = []
        self.fail = fail
        self.waited = False

    def record(self, user_id, summary):
        if self.fail:
            raise RuntimeError("database offline")
        self.records.append((user_id, summary))

    def wait(self, timeout=None):
        self.waited = True


@pytest.fixture
def db(tmp_path):
    database = Database(str(tmp_path / "test.db"))
    yield database
    database.close()


@pytest.fixture
def fake_detector():
    return FakeDetector()


@pytest.fixture
def fake_recorder():
    return FakeRecorder()


@pytest.fixture(scope="session")
def qt_core_app():
    """QCoreApplication for QObject/QTimer based tests (no display needed)."""
    from PyQt5.QtCore import QCoreApplication

    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
