# monitoring/coco_detector.py

from __future__ import annotations

import logging
import os
from typing import Any, List, Optional

import cv2

from monitoring.i_object_detector import (
    Detection,
    DetectorNotLoadedError,
    IObjectDetector,
)

logger = logging.getLogger(__name__)


# COCO label map used by the TensorFlow SSD models (ids 1..90, gaps included)
COCO_LABELS = {
    1: "person", 2: "bicycle", 3: "car", 4: "motorcycle", 5: "airplane",
    6: "bus", 7: "train", 8: "truck", 9: "boat", 10: "traffic light",
    11: "fire hydrant", 13: "stop sign", 14: "parking meter", 15: "bench",
    16: "bird", 17: "cat", 18: "dog", 19: "horse", 20: "sheep", 21: "cow",
    22: "elephant", 23: "bear", 24: "zebra", 25: "giraffe", 27: "backpack",
    28: "umbrella", 31: "handbag", 32: "tie", 33: "suitcase", 34: "frisbee",
    35: "skis", 36: "snowboard", 37: "sports ball", 38: "kite",
    39: "baseball bat", 40: "baseball glove", 41: "skateboard",
    42: "surfboard", 43: "tennis racket", 44: "bottle", 46: "wine glass",
    47: "cup", 48: "fork", 49: "knife", 50: "spoon", 51: "bowl",
    52: "banana", 53: "apple", 54: "sandwich", 55: "orange", 56: "broccoli",
    57: "carrot", 58: "hot dog", 59: "pizza", 60: "donut", 61: "cake",
    62: "chair", 63: "couch", 64: "potted plant", 65: "bed",
    67: "dining table", 70: "toilet", 72: "tv", 73: "laptop", 74: "mouse",
    75: "remote", 76: "keyboard", 77: "cell phone", 78: "microwave",
    79: "oven", 80: "toaster", 81: "sink", 82: "refrigerator", 84: "book",
    85: "clock", 86: "vase", 87: "scissors", 88: "teddy bear",
    89: "hair drier", 90: "toothbrush",
}


class CocoObjectDetector(IObjectDetector):
    """
    SSD MobileNet (COCO) object detector running on OpenCV's DNN module.

    Expects the TensorFlow frozen graph (`frozen_inference_graph.pb`)
    and its text graph (`ssd_mobilenet_v2_coco.pbtxt`). Input is
    resized to 300x300, matching how the model was trained.
    """

    INPUT_SIZE = (300, 300)

    def __init__(
        self,
        model_path: str,
        config_path: str,
        *,
        min_confidence: float = 0.3,
        nms_threshold: float = 0.4,
    ) -> None:
        self.model_path = model_path
        self.config_path = config_path
        self.min_confidence = float(min_confidence)
        self.nms_threshold = float(nms_threshold)
        self._model: Optional[cv2.dnn_DetectionModel] = None

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    def load(self) -> None:
        if self._model is not None:
            return

        for path in (self.model_path, self.config_path):
            if not path or not os.path.isfile(path):
                raise FileNotFoundError(f"Detector model file not found: {path}")

        model = cv2.dnn_DetectionModel(self.model_path, self.config_path)
        model.setInputSize(*self.INPUT_SIZE)
        model.setInputScale(1.0 / 127.5)
        model.setInputMean((127.5, 127.5, 127.5))
        model.setInputSwapRB(True)

        self._model = model
        logger.info("COCO detector loaded from %s", self.model_path)

    def detect(self, frame: Any) -> List[Detection]:
        if self._model is None:
            raise DetectorNotLoadedError("call load() before detect()")

        class_ids, scores, _boxes = self._model.detect(
            frame,
            confThreshold=self.min_confidence,
            nmsThreshold=self.nms_threshold,
        )

        detections: List[Detection] = []
        for class_id, score in zip(_flatten(class_ids), _flatten(scores)):
            label = COCO_LABELS.get(int(class_id))
            if label is None:
                continue
            detections.append(Detection(label=label, confidence=float(score)))
        return detections


def _flatten(values) -> list:
    # detect() returns an empty tuple or an (N,) / (N, 1) array depending on the OpenCV build
    if values is None or len(values) == 0:
        return []
    return [v for v in (values.flatten() if hasattr(values, "flatten") else values)]
