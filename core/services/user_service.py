# core/services/user_service.py

import logging
import sqlite3
from typing import Optional

from core.database import Database
from core.models.user_profile import UserProfile
from core.timeutil import to_utc_iso, utc_now

logger = logging.getLogger(__name__)

# columns a caller may change through update_user_profile()
EDITABLE_FIELDS = (
    "username",
    "display_name",
    "total_study_time",
    "total_sessions",
    "longest_streak",
    "current_streak",
    "last_session_date",
)


class UserService:
    """Access to the `user_profiles` table."""

    def __init__(self, db: Database):
        self.db = db
        self.conn = db.get_connection()

    # ---------------------------------------------------
    # Add user
    # ---------------------------------------------------
    def add_user(
        self,
        user_id: str,
        display_name: Optional[str] = None,
        username: Optional[str] = None,
    ) -> Optional[UserProfile]:
        """Create a profile. Returns None if the id is taken or the write fails."""
        now = to_utc_iso(utc_now())
        with self.db.lock:
            try:
                cur = self.conn.cursor()
                cur.execute(
                    """
                    INSERT INTO user_profiles (id, username, display_name, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (user_id, username, display_name, now, now),
                )
                self.conn.commit()
            except sqlite3.IntegrityError:
                self.conn.rollback()
                logger.warning("Profile for user %s already exists", user_id)
                return None
            except sqlite3.Error:
                self.conn.rollback()
                logger.exception("Error creating profile for user %s", user_id)
                return None
        logger.info("Created profile for user %s", user_id)
        return self.get_user_profile(user_id)

    def ensure_user(self, user_id: str, display_name: Optional[str] = None) -> Optional[UserProfile]:
        """Return the profile, creating an empty one if it does not exist yet."""
        profile = self.get_user_profile(user_id)
        if profile is None:
            profile = self.add_user(user_id, display_name=display_name)
        return profile

    # ---------------------------------------------------
    # Read / update
    # ---------------------------------------------------
    def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        try:
            with self.db.lock:
                cur = self.conn.cursor()
                cur.execute("SELECT * FROM user_profiles WHERE id = ?", (user_id,))
                row = cur.fetchone()
        except sqlite3.Error:
            logger.exception("Error fetching user profile %s", user_id)
            return None

        if row is None:
            return None
        return UserProfile.from_row(row)

    def update_user_profile(self, user_id: str, **updates) -> bool:
        unknown = set(updates) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
        if not updates:
            return True

        columns = ", ".join(f"{name} = ?" for name in updates)
        values = list(updates.values()) + [to_utc_iso(utc_now()), user_id]

        try:
            with self.db.lock:
                cur = self.conn.cursor()
                cur.execute(
                    f"UPDATE user_profiles SET {columns}, updated_at = ? WHERE id = ?",
                    values,
                )
                self.conn.commit()
        except sqlite3.Error:
            logger.exception("Error updating user profile %s", user_id)
            return False
        return cur.rowcount > 0

    # ---------------------------------------------------
    # Delete
    # ---------------------------------------------------
    def delete_user(self, user_id: str) -> bool:
        """
        Deletes a user and all of their sessions.
        Returns True if a profile was removed. On a database error nothing
        is removed and False is returned.
        """
        with self.db.lock:
            try:
                cur = self.conn.cursor()
                # Delete dependents first (order matters)
                cur.execute("DELETE FROM pomodoro_sessions WHERE user_id = ?", (user_id,))
                cur.execute("DELETE FROM user_profiles WHERE id = ?", (user_id,))
                removed = cur.rowcount > 0
                self.conn.commit()
            except sqlite3.Error:
                self.conn.rollback()
                logger.exception("Error deleting user %s", user_id)
                return False
        if removed:
            logger.info("Deleted user %s", user_id)
        return removed
