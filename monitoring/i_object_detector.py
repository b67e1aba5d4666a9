# monitoring/i_object_detector.py

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, List


class DetectionStatus(str, Enum):
    LOADING = "Loading"
    STUDYING = "Studying"
    DISTRACTED = "Distracted"


@dataclass(frozen=True)
class Detection:
    """One labelled object found in a frame."""
    label: str
    confidence: float


class DetectorNotLoadedError(RuntimeError):
    """Raised when detect() is called before the model was loaded."""


class IObjectDetector(ABC):
    """
    Interface for anything that can find labelled objects
    in a single camera frame.
    """

    @property
    @abstractmethod
    def is_loaded(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def load(self) -> None:
        """
        One-time model initialisation.
        Must be called before the sampler is started.
        """
        raise NotImplementedError

    @abstractmethod
    def detect(self, frame: Any) -> List[Detection]:
        """
        Takes a single video frame (OpenCV image) and returns
        the detected objects with their confidence in [0, 1].
        """
        raise NotImplementedError
