# core/models/stats.py

from dataclasses import dataclass


@dataclass
class UserStats:
    today_minutes: int = 0
    today_sessions: int = 0
    week_minutes: int = 0
    month_minutes: int = 0
    total_minutes: int = 0
    total_sessions: int = 0
    average_session_length: int = 0
    streak: int = 0


@dataclass
class LeaderboardEntry:
    id: str
    display_name: str
    total_study_time: int
    total_sessions: int
    rank: int
