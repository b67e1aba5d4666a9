# core/services/session_service.py

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timedelta
from typing import List, Optional

from core.database import Database
from core.models.pomodoro_session import SESSION_TYPES, PomodoroSession
from core.models.stats import UserStats
from core.services.user_service import UserService
from core.timeutil import (
    iso_date,
    months_ago,
    round_minutes,
    to_utc_iso,
    utc_day_bounds,
    utc_now,
)

logger = logging.getLogger(__name__)


class SessionService:
    """
    Read/write access for the `pomodoro_sessions` table, plus the
    per-user statistics derived from it and from the profile totals.
    """

    def __init__(self, db: Database):
        self.db = db
        self.conn = db.get_connection()
        self.users = UserService(db)

    # ------------------------------------------------------------------ #
    # Write
    # ------------------------------------------------------------------ #

    def create_session(
        self,
        user_id: str,
        duration_seconds: int,
        completed_at,
        session_type: str = "focus",
        distraction_count: int = 0,
        was_completed: bool = True,
    ) -> Optional[PomodoroSession]:
        """
        Insert one finished session.

        Focus sessions also roll into the profile totals and streak in
        the same transaction. Returns None when the database rejects
        the write.
        """
        if session_type not in SESSION_TYPES:
            raise ValueError(f"Unknown session type: {session_type!r}")
        if duration_seconds < 0 or distraction_count < 0:
            raise ValueError("duration and distraction count must be non-negative")

        completed_iso = to_utc_iso(completed_at)
        created_iso = to_utc_iso(utc_now())

        try:
            with self.db.lock:
                cur = self.conn.cursor()
                cur.execute(
                    """
                    INSERT OR IGNORE INTO user_profiles (id, created_at, updated_at)
                    VALUES (?, ?, ?)
                    """,
                    (user_id, created_iso, created_iso),
                )
                cur.execute(
                    """
                    INSERT INTO pomodoro_sessions (
                        user_id, duration, completed_at, session_type,
                        distractions_detected, was_completed, created_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        user_id,
                        int(duration_seconds),
                        completed_iso,
                        session_type,
                        int(distraction_count),
                        1 if was_completed else 0,
                        created_iso,
                    ),
                )
                session_id = cur.lastrowid

                if session_type == "focus":
                    self._roll_into_profile(cur, user_id, int(duration_seconds), completed_iso)

                self.conn.commit()
        except sqlite3.Error:
            with self.db.lock:
                self.conn.rollback()
            logger.exception("Error creating session for user %s", user_id)
            return None

        return PomodoroSession(
            id=session_id,
            user_id=user_id,
            duration=int(duration_seconds),
            completed_at=completed_iso,
            session_type=session_type,
            distractions_detected=int(distraction_count),
            was_completed=bool(was_completed),
            created_at=created_iso,
        )

    def _roll_into_profile(self, cur, user_id: str, duration: int, completed_iso: str) -> None:
        cur.execute(
            """
            SELECT current_streak, longest_streak, last_session_date
            FROM user_profiles WHERE id = ?
            """,
            (user_id,),
        )
        row = cur.fetchone()

        session_day = iso_date(completed_iso)
        current, longest = next_streak(
            row["current_streak"], row["longest_streak"], row["last_session_date"], session_day
        )
        last_day = row["last_session_date"]
        if last_day is None or session_day.isoformat() > last_day:
            last_day = session_day.isoformat()

        cur.execute(
            """
            UPDATE user_profiles
            SET total_study_time = total_study_time + ?,
                total_sessions = total_sessions + 1,
                current_streak = ?,
                longest_streak = ?,
                last_session_date = ?,
                updated_at = ?
            WHERE id = ?
            """,
            (duration, current, longest, last_day, to_utc_iso(utc_now()), user_id),
        )

    # ------------------------------------------------------------------ #
    # Read
    # ------------------------------------------------------------------ #

    def get_user_sessions(self, user_id: str, limit: int = 50) -> List[PomodoroSession]:
        """Latest sessions first."""
        return self._select(
            """
            SELECT * FROM pomodoro_sessions
            WHERE user_id = ?
            ORDER BY completed_at DESC, id DESC
            LIMIT ?
            """,
            (user_id, int(limit)),
        )

    def get_user_sessions_today(
        self, user_id: str, now: Optional[datetime] = None
    ) -> List[PomodoroSession]:
        start, end = utc_day_bounds(now or utc_now())
        return self._select(
            """
            SELECT * FROM pomodoro_sessions
            WHERE user_id = ? AND completed_at >= ? AND completed_at < ?
            ORDER BY completed_at DESC, id DESC
            """,
            (user_id, start, end),
        )

    def get_sessions_since(self, user_id: str, since: datetime) -> List[PomodoroSession]:
        return self._select(
            """
            SELECT * FROM pomodoro_sessions
            WHERE user_id = ? AND completed_at >= ?
            ORDER BY completed_at DESC, id DESC
            """,
            (user_id, to_utc_iso(since)),
        )

    def _select(self, sql: str, params: tuple) -> List[PomodoroSession]:
        try:
            with self.db.lock:
                cur = self.conn.cursor()
                cur.execute(sql, params)
                rows = cur.fetchall()
        except sqlite3.Error:
            logger.exception("Error fetching sessions")
            return []
        return [PomodoroSession.from_row(row) for row in rows]

    # ------------------------------------------------------------------ #
    # Statistics
    # ------------------------------------------------------------------ #

    def get_user_stats(self, user_id: str, now: Optional[datetime] = None) -> UserStats:
        now = now or utc_now()
        profile = self.users.get_user_profile(user_id)

        today = self.get_user_sessions_today(user_id, now)
        today_minutes = sum(round_minutes(s.duration) for s in today)
        today_sessions = sum(1 for s in today if s.session_type == "focus")

        week = self.get_sessions_since(user_id, now - timedelta(days=7))
        week_minutes = sum(round_minutes(s.duration) for s in week)

        month = self.get_sessions_since(user_id, months_ago(now, 1))
        month_minutes = sum(round_minutes(s.duration) for s in month)

        total_minutes = round_minutes(profile.total_study_time) if profile else 0
        total_sessions = profile.total_sessions if profile else 0
        average = int(total_minutes / total_sessions + 0.5) if total_sessions > 0 else 0

        return UserStats(
            today_minutes=today_minutes,
            today_sessions=today_sessions,
            week_minutes=week_minutes,
            month_minutes=month_minutes,
            total_minutes=total_minutes,
            total_sessions=total_sessions,
            average_session_length=average,
            streak=profile.current_streak if profile else 0,
        )


def next_streak(current: int, longest: int, last_session_date: Optional[str], session_day):
    """
    Day streak after a focus session on `session_day`.

    Same day as the last session => unchanged (at least 1)
    The following day             => +1
    Anything else                 => restart at 1
    Sessions older than the last recorded day leave the streak alone.
    """
    if last_session_date is None:
        current = 1
    else:
        last_day = datetime.strptime(last_session_date, "%Y-%m-%d").date()
        gap = (session_day - last_day).days
        if gap == 0:
            current = max(current, 1)
        elif gap == 1:
            current = current + 1
        elif gap > 1:
            current = 1
    return current, max(longest, current)
