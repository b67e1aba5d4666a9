# timer/models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Phase(str, Enum):
    FOCUS = "Focus"
    BREAK = "Break"


# (min, max, default) minutes per phase
DURATION_BOUNDS = {
    Phase.FOCUS: (1, 60, 25),
    Phase.BREAK: (1, 30, 5),
}


def clamp_minutes(phase: Phase, minutes: int) -> int:
    low, high, _default = DURATION_BOUNDS[phase]
    return max(low, min(high, int(minutes)))


def format_time(seconds: int) -> str:
    """Format seconds as 'MM:SS' (minutes are not wrapped at 60)."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


@dataclass
class TimerState:
    phase: Phase
    seconds_remaining: int
    running: bool = False


@dataclass(frozen=True)
class ActivityTally:
    studying_seconds: int = 0
    distracted_seconds: int = 0


@dataclass(frozen=True)
class SessionSummary:
    """
    Outcome of one completed Focus phase.
    Built once by the PhaseController and handed to the recorder.
    """
    duration_seconds: int
    completed_at: datetime
    distraction_minutes: int
    completed: bool = True

    @classmethod
    def from_tally(cls, tally: ActivityTally, completed_at: datetime) -> "SessionSummary":
        return cls(
            duration_seconds=tally.studying_seconds,
            completed_at=completed_at,
            distraction_minutes=tally.distracted_seconds // 60,
            completed=True,
        )


@dataclass(frozen=True)
class TimerSnapshot:
    """
    Read-only view of the controller for display code.
    """
    phase: Phase
    seconds_remaining: int
    running: bool
    focus_minutes: int
    break_minutes: int
    tally: ActivityTally
    completed_focus_sessions: int

    @property
    def full_seconds(self) -> int:
        minutes = self.focus_minutes if self.phase == Phase.FOCUS else self.break_minutes
        return minutes * 60

    @property
    def progress(self) -> float:
        """Elapsed fraction of the current phase, 0.0 .. 1.0."""
        full = self.full_seconds
        if full <= 0:
            return 0.0
        return (full - self.seconds_remaining) / full

    @property
    def display_time(self) -> str:
        return format_time(self.seconds_remaining)


@dataclass(frozen=True)
class PhaseAlert:
    title: str
    body: str
