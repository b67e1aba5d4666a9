# core/database.py
import logging
import os
import sqlite3
import threading

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, db_path=None):
        if db_path is None:
            base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
            db_path = os.path.join(base_dir, "pomodoro.db")
        self.db_path = db_path

        # recorder threads write through the same connection; `lock` serialises them
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")
        self.lock = threading.RLock()

        self._create_tables()
        logger.debug("Database ready at %s", self.db_path)

    def get_connection(self):
        return self.conn

    def close(self):
        with self.lock:
            self.conn.close()

    def _create_tables(self):
        cur = self.conn.cursor()

        cur.execute("""
            CREATE TABLE IF NOT EXISTS user_profiles (
                id TEXT PRIMARY KEY,
                username TEXT,
                display_name TEXT,
                total_study_time INTEGER NOT NULL DEFAULT 0,
                total_sessions INTEGER NOT NULL DEFAULT 0,
                longest_streak INTEGER NOT NULL DEFAULT 0,
                current_streak INTEGER NOT NULL DEFAULT 0,
                last_session_date TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        cur.execute("""
            CREATE TABLE IF NOT EXISTS pomodoro_sessions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                duration INTEGER NOT NULL,
                completed_at TEXT NOT NULL,
                session_type TEXT NOT NULL,
                distractions_detected INTEGER NOT NULL DEFAULT 0,
                was_completed INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL,
                FOREIGN KEY (user_id) REFERENCES user_profiles(id)
            )
        """)

        cur.execute("""
            CREATE INDEX IF NOT EXISTS idx_sessions_user_completed
            ON pomodoro_sessions (user_id, completed_at)
        """)

        self.conn.commit()
