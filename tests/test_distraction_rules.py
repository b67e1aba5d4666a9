"""Tests for the frame classification rule."""

import pytest

from monitoring.distraction_rules import classify_detections
from monitoring.i_object_detector import Detection, DetectionStatus


@pytest.mark.parametrize(
    "detections, expected",
    [
        ([Detection("person", 0.8)], DetectionStatus.STUDYING),
        ([], DetectionStatus.DISTRACTED),
        ([Detection("person", 0.8), Detection("cell phone", 0.9)], DetectionStatus.DISTRACTED),
        ([Detection("person", 0.8), Detection("book", 0.3)], DetectionStatus.STUDYING),
        ([Detection("cell phone", 0.9)], DetectionStatus.DISTRACTED),
    ],
)
def test_rule_table(detections, expected):
    assert classify_detections(detections) == expected


def test_low_confidence_phone_with_person_is_studying():
    detections = [Detection("person", 0.9), Detection("cell phone", 0.5)]
    assert classify_detections(detections) == DetectionStatus.STUDYING


def test_labels_match_case_insensitively():
    detections = [Detection("Person", 0.9), Detection("Cell Phone", 0.7)]
    assert classify_detections(detections) == DetectionStatus.DISTRACTED


def test_unrelated_objects_with_person_are_studying():
    detections = [Detection("person", 0.9), Detection("chair", 0.9), Detection("laptop", 0.95)]
    assert classify_detections(detections) == DetectionStatus.STUDYING


def test_never_returns_loading():
    assert classify_detections([Detection("dog", 0.9)]) != DetectionStatus.LOADING
