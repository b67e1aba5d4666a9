# core/settings.py

from __future__ import annotations

import os
from typing import Optional

from PyQt5.QtCore import QSettings

from timer.models import Phase, clamp_minutes

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
MODELS_DIR = os.path.join(BASE_DIR, "models")


# -----------------------------
# Defaults
# -----------------------------
DEFAULTS = {
    "timer/focus_minutes": 25,
    "timer/break_minutes": 5,
    "timer/auto_continue": True,
    "camera/enabled": True,
    "camera/index": 0,
    "camera/sample_interval": 5.0,
    "detector/model_path": os.path.join(MODELS_DIR, "frozen_inference_graph.pb"),
    "detector/config_path": os.path.join(MODELS_DIR, "ssd_mobilenet_v2_coco.pbtxt"),
    "detector/min_confidence": 0.3,
    "database/path": os.path.join(BASE_DIR, "pomodoro.db"),
    "alarm/sound_path": os.path.join(BASE_DIR, "alarm.wav"),
    "logging/level": "INFO",
}


class AppSettings:
    """
    Persistent application settings.

    Uses the platform QSettings store by default; pass `ini_path` to
    read/write a plain INI file instead (handy for tests and for
    portable installs).
    """

    def __init__(self, ini_path: Optional[str] = None):
        if ini_path:
            self._settings = QSettings(ini_path, QSettings.IniFormat)
        else:
            self._settings = QSettings("FocusPomodoro", "FocusPomodoro")

    def _get(self, key: str, kind):
        return self._settings.value(key, DEFAULTS[key], type=kind)

    # -----------------------------
    # Timer
    # -----------------------------
    @property
    def focus_minutes(self) -> int:
        return clamp_minutes(Phase.FOCUS, self._get("timer/focus_minutes", int))

    @property
    def break_minutes(self) -> int:
        return clamp_minutes(Phase.BREAK, self._get("timer/break_minutes", int))

    @property
    def auto_continue(self) -> bool:
        return self._get("timer/auto_continue", bool)

    def save_durations(self, focus_minutes: int, break_minutes: int) -> None:
        self._settings.setValue("timer/focus_minutes", clamp_minutes(Phase.FOCUS, focus_minutes))
        self._settings.setValue("timer/break_minutes", clamp_minutes(Phase.BREAK, break_minutes))
        self._settings.sync()

    # -----------------------------
    # Camera / detector
    # -----------------------------
    @property
    def camera_enabled(self) -> bool:
        return self._get("camera/enabled", bool)

    @property
    def camera_index(self) -> int:
        return self._get("camera/index", int)

    @property
    def sample_interval(self) -> float:
        return max(0.5, self._get("camera/sample_interval", float))

    @property
    def detector_model_path(self) -> str:
        return self._get("detector/model_path", str)

    @property
    def detector_config_path(self) -> str:
        return self._get("detector/config_path", str)

    @property
    def detector_min_confidence(self) -> float:
        return self._get("detector/min_confidence", float)

    # -----------------------------
    # Misc
    # -----------------------------
    @property
    def database_path(self) -> str:
        return self._get("database/path", str)

    @property
    def alarm_sound_path(self) -> str:
        return self._get("alarm/sound_path", str)

    @property
    def log_level(self) -> str:
        return self._get("logging/level", str)

    def set_value(self, key: str, value) -> None:
        if key not in DEFAULTS:
            raise KeyError(f"Unknown setting: {key}")
        self._settings.setValue(key, value)
        self._settings.sync()
