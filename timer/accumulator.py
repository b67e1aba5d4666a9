# timer/accumulator.py

from __future__ import annotations

from monitoring.i_object_detector import DetectionStatus
from timer.models import ActivityTally


class SessionAccumulator:
    """Counts studying vs distracted seconds of the running Focus phase."""

    def __init__(self) -> None:
        self.studying_seconds: int = 0
        self.distracted_seconds: int = 0

    def on_second_tick(self, status: DetectionStatus) -> None:
        if status == DetectionStatus.STUDYING:
            self.studying_seconds += 1
        elif status == DetectionStatus.DISTRACTED:
            self.distracted_seconds += 1
        # LOADING: nothing known yet, count neither

    def reset(self) -> None:
        self.studying_seconds = 0
        self.distracted_seconds = 0

    def snapshot(self) -> ActivityTally:
        return ActivityTally(
            studying_seconds=self.studying_seconds,
            distracted_seconds=self.distracted_seconds,
        )
