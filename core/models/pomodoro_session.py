# core/models/pomodoro_session.py

SESSION_TYPES = ("focus", "short_break", "long_break")


class PomodoroSession:
    def __init__(
        self,
        id,
        user_id,
        duration,
        completed_at,
        session_type,
        distractions_detected,
        was_completed,
        created_at,
    ):
        self.id = id
        self.user_id = user_id
        self.duration = duration  # studied seconds
        self.completed_at = completed_at  # ISO-8601 string
        self.session_type = session_type
        self.distractions_detected = distractions_detected  # minutes
        self.was_completed = was_completed
        self.created_at = created_at

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            duration=row["duration"],
            completed_at=row["completed_at"],
            session_type=row["session_type"],
            distractions_detected=row["distractions_detected"],
            was_completed=bool(row["was_completed"]),
            created_at=row["created_at"],
        )

    def __repr__(self):
        return (
            f"<PomodoroSession id={self.id} user_id={self.user_id} "
            f"type={self.session_type} duration={self.duration}s>"
        )
