# monitoring/distraction_rules.py

from __future__ import annotations

from typing import Iterable

from monitoring.i_object_detector import Detection, DetectionStatus


PERSON_LABEL = "person"

# Objects that may pull attention away from the desk (substring match)
DISTRACTOR_LABELS = (
    "cell phone",
    "phone",
    "remote",
    "book",
    "laptop",
    "keyboard",
    "mouse",
    "cup",
    "bottle",
)

HANDHELD_DEVICE_LABELS = ("cell phone", "phone")
DEVICE_CONFIDENCE_THRESHOLD = 0.5


def _matches(label: str, vocabulary: Iterable[str]) -> bool:
    label = label.lower()
    return any(word in label for word in vocabulary)


def classify_detections(detections: Iterable[Detection]) -> DetectionStatus:
    """
    Map one frame's detections to STUDYING / DISTRACTED.

    1) no person in frame             => DISTRACTED (user is away)
    2) person + phone above 0.5       => DISTRACTED
    3) person + other desk objects    => STUDYING
    4) person alone                   => STUDYING

    Never returns LOADING; that state only exists before the
    first classification.
    """
    detections = list(detections)

    has_person = any(PERSON_LABEL in d.label.lower() for d in detections)
    if not has_person:
        return DetectionStatus.DISTRACTED

    has_distractor = any(_matches(d.label, DISTRACTOR_LABELS) for d in detections)
    if not has_distractor:
        return DetectionStatus.STUDYING

    high_confidence_device = any(
        _matches(d.label, HANDHELD_DEVICE_LABELS)
        and d.confidence > DEVICE_CONFIDENCE_THRESHOLD
        for d in detections
    )
    if high_confidence_device:
        return DetectionStatus.DISTRACTED
    return DetectionStatus.STUDYING
