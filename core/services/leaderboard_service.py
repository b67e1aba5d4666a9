# core/services/leaderboard_service.py

import logging
import sqlite3
from typing import List

from core.database import Database
from core.models.stats import LeaderboardEntry

logger = logging.getLogger(__name__)


class LeaderboardService:
    """Ranking of users by total study time."""

    def __init__(self, db: Database):
        self.db = db
        self.conn = db.get_connection()

    def get_leaderboard(self, limit: int = 10) -> List[LeaderboardEntry]:
        """
        Top `limit` users by total study time (descending).
        Ties keep the order in which profiles were created.
        """
        if limit < 1:
            raise ValueError("limit must be at least 1")

        try:
            with self.db.lock:
                cur = self.conn.cursor()
                cur.execute(
                    """
                    SELECT id, display_name, total_study_time, total_sessions
                    FROM user_profiles
                    ORDER BY total_study_time DESC, rowid ASC
                    LIMIT ?
                    """,
                    (int(limit),),
                )
                rows = cur.fetchall()
        except sqlite3.Error:
            logger.exception("Error fetching leaderboard")
            return []

        return [
            LeaderboardEntry(
                id=row["id"],
                display_name=row["display_name"] or "Anonymous",
                total_study_time=row["total_study_time"],
                total_sessions=row["total_sessions"],
                rank=index + 1,
            )
            for index, row in enumerate(rows)
        ]

    def get_user_rank(self, user_id: str) -> int:
        """
        1 + number of users with strictly more study time.
        Returns 0 for an unknown user.
        """
        try:
            with self.db.lock:
                cur = self.conn.cursor()
                cur.execute(
                    "SELECT total_study_time FROM user_profiles WHERE id = ?",
                    (user_id,),
                )
                row = cur.fetchone()
                if row is None:
                    return 0

                cur.execute(
                    "SELECT COUNT(*) FROM user_profiles WHERE total_study_time > ?",
                    (row["total_study_time"],),
                )
                ahead = cur.fetchone()[0]
        except sqlite3.Error:
            logger.exception("Error calculating rank for user %s", user_id)
            return 0

        return ahead + 1
