# core/session_tracker.py

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from core.services.session_service import SessionService
from timer.models import SessionSummary

logger = logging.getLogger(__name__)


class SessionRecorder:
    """
    Connects the timer to the SQLite database.

    record(user_id, summary) is fire-and-forget: the write happens on a
    short-lived daemon thread so the timer never waits for the disk.
    Each summary is written at most once; failures are logged and
    dropped (no retry queue).
    """

    def __init__(self, session_service: SessionService):
        self.session_service = session_service
        self._threads: List[threading.Thread] = []
        self._lock = threading.Lock()
        self.saved_count = 0
        self.failed_count = 0

    # ------------------------------------------------------------------ #
    # PUBLIC API
    # ------------------------------------------------------------------ #

    def record(self, user_id: str, summary: SessionSummary) -> None:
        thread = threading.Thread(
            target=self._save, args=(user_id, summary), daemon=True
        )
        with self._lock:
            self._threads = [t for t in self._threads if t.is_alive()]
            self._threads.append(thread)
        thread.start()

    def wait(self, timeout: Optional[float] = 5.0) -> None:
        """Join pending writes (used on shutdown)."""
        with self._lock:
            pending = list(self._threads)
        for thread in pending:
            thread.join(timeout=timeout)

    # ------------------------------------------------------------------ #
    # INTERNAL
    # ------------------------------------------------------------------ #

    def _save(self, user_id: str, summary: SessionSummary) -> None:
        logger.info(
            "Saving session for %s: %ss studied, %s min distracted",
            user_id, summary.duration_seconds, summary.distraction_minutes,
        )
        try:
            result = self.session_service.create_session(
                user_id=user_id,
                duration_seconds=summary.duration_seconds,
                completed_at=summary.completed_at,
                session_type="focus",
                distraction_count=summary.distraction_minutes,
                was_completed=summary.completed,
            )
        except Exception:
            logger.exception("Error saving session for %s", user_id)
            result = None

        with self._lock:
            if result is None:
                self.failed_count += 1
            else:
                self.saved_count += 1

        if result is None:
            logger.error("Failed to save session for %s", user_id)
        else:
            logger.info("Session %s saved", result.id)
