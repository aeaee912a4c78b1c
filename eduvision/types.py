import math
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Deque, Literal, Optional, Tuple


BBox = Tuple[float, float, float, float]

EmotionLabel = Literal["happy", "neutral", "sad", "angry", "surprised", "fearful", "disgust"]
EngagementCategory = Literal["Attentive", "Distracted"]
Trend = Literal["improving", "stable", "declining", "insufficient-data"]

EMOTIONS: Tuple[str, ...] = ("happy", "neutral", "sad", "angry", "surprised", "fearful", "disgust")
ATTENTIVE = "Attentive"
DISTRACTED = "Distracted"
ENGAGEMENT_CATEGORIES: Tuple[str, ...] = (ATTENTIVE, DISTRACTED)


class DetectionError(ValueError):
    """Raised when a raw detection cannot be ingested."""


class UnknownEmotionError(DetectionError):
    pass


class InvalidBoundingBoxError(DetectionError):
    pass


@dataclass(frozen=True)
class RawDetection:
    bbox: BBox
    emotion: str
    confidence: float


@dataclass(frozen=True)
class EmotionSample:
    subject_id: int
    emotion: EmotionLabel
    confidence: float
    engagement: EngagementCategory
    timestamp: float
    bbox: BBox


@dataclass
class Subject:
    id: int
    name: str
    current_emotion: Optional[EmotionLabel] = None
    current_engagement: Optional[EngagementCategory] = None
    current_confidence: Optional[float] = None
    current_bbox: Optional[BBox] = None
    last_seen: Optional[float] = None
    history: Deque[EmotionSample] = field(default_factory=deque)

    def record(self, sample: EmotionSample):
        """Append a sample and mirror it into the current_* fields."""
        self.history.append(sample)
        self.current_emotion = sample.emotion
        self.current_engagement = sample.engagement
        self.current_confidence = sample.confidence
        self.current_bbox = sample.bbox
        self.last_seen = sample.timestamp

    def snapshot(self) -> "Subject":
        # Samples are frozen, so copying the container is enough.
        return replace(self, history=deque(self.history, maxlen=self.history.maxlen))


def validate_detection(detection: RawDetection) -> RawDetection:
    """
    Reject detections the engine cannot use: labels outside the emotion set,
    boxes with negative size or non-finite coordinates, and confidences
    outside [0, 1]. Returns a copy with the box and confidence as plain floats.
    """
    if detection.emotion not in EMOTIONS:
        raise UnknownEmotionError(f"unknown emotion label {detection.emotion!r}")

    try:
        x, y, w, h = (float(v) for v in detection.bbox)
    except (TypeError, ValueError) as exc:
        raise InvalidBoundingBoxError(f"malformed bounding box {detection.bbox!r}") from exc
    if not all(math.isfinite(v) for v in (x, y, w, h)):
        raise InvalidBoundingBoxError(f"non-finite bounding box {detection.bbox!r}")
    if w < 0 or h < 0:
        raise InvalidBoundingBoxError(f"negative bounding box size {detection.bbox!r}")

    if isinstance(detection.confidence, bool):
        raise DetectionError(f"confidence must be a number, got {detection.confidence!r}")
    try:
        conf = float(detection.confidence)
    except (TypeError, ValueError) as exc:
        raise DetectionError(f"malformed confidence {detection.confidence!r}") from exc
    if not math.isfinite(conf) or not 0.0 <= conf <= 1.0:
        raise DetectionError(f"confidence {conf!r} outside [0, 1]")
    return replace(detection, bbox=(x, y, w, h), confidence=conf)
