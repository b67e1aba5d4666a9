# core/models/user_profile.py

class UserProfile:
    def __init__(
        self,
        id,
        username,
        display_name,
        total_study_time=0,
        total_sessions=0,
        longest_streak=0,
        current_streak=0,
        last_session_date=None,
        created_at=None,
        updated_at=None,
    ):
        self.id = id
        self.username = username
        self.display_name = display_name
        self.total_study_time = total_study_time  # seconds
        self.total_sessions = total_sessions
        self.longest_streak = longest_streak  # days
        self.current_streak = current_streak
        self.last_session_date = last_session_date  # 'YYYY-MM-DD'
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def from_row(cls, row):
        return cls(**{key: row[key] for key in row.keys()})

    def __repr__(self):
        return (
            f"<UserProfile id={self.id} name={self.display_name} "
            f"study={self.total_study_time}s sessions={self.total_sessions}>"
        )
