# timer/alerts.py

from __future__ import annotations

import logging
import os
from typing import Optional

from PyQt5.QtWidgets import QApplication, QStyle, QSystemTrayIcon

from timer.models import PhaseAlert

# optional beep (Windows)
try:
    import winsound
except ImportError:
    winsound = None

logger = logging.getLogger(__name__)


class TrayNotifier:
    """
    Shows phase alerts as system tray balloons.
    Suppressed when there is no GUI application or no tray available.
    """

    def __init__(self, tray_icon: Optional[QSystemTrayIcon] = None):
        self._tray = tray_icon

    @property
    def available(self) -> bool:
        if not isinstance(QApplication.instance(), QApplication):
            return False
        return QSystemTrayIcon.isSystemTrayAvailable() and QSystemTrayIcon.supportsMessages()

    def notify(self, alert: PhaseAlert) -> None:
        if not self.available:
            logger.debug("Notification suppressed: %s", alert.title)
            return
        if self._tray is None:
            self._tray = QSystemTrayIcon()
            self._tray.setIcon(QApplication.style().standardIcon(QStyle.SP_MessageBoxInformation))
            self._tray.show()
        self._tray.showMessage(alert.title, alert.body, QSystemTrayIcon.Information, 5000)


class AlarmPlayer:
    """
    Plays the alarm sound on phase completion (best effort).
    """

    def __init__(self, sound_path: Optional[str] = None):
        self.sound_path = sound_path

    def play(self) -> None:
        try:
            if self.sound_path and os.path.isfile(self.sound_path):
                from PyQt5.QtMultimedia import QSound
                QSound.play(self.sound_path)
            elif winsound:
                winsound.Beep(1000, 400)
            else:
                app = QApplication.instance()
                if isinstance(app, QApplication):
                    app.beep()
        except Exception:
            logger.warning("Alarm sound failed", exc_info=True)


class AlertDispatcher:
    """Fans one PhaseAlert out to the log, the notifier and the alarm."""

    def __init__(self, notifier: Optional[TrayNotifier] = None, alarm: Optional[AlarmPlayer] = None):
        self.notifier = notifier
        self.alarm = alarm

    def __call__(self, alert: PhaseAlert) -> None:
        logger.info("%s %s", alert.title, alert.body)
        if self.alarm is not None:
            self.alarm.play()
        if self.notifier is not None:
            try:
                self.notifier.notify(alert)
            except Exception:
                logger.warning("Notification failed", exc_info=True)
