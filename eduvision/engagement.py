from typing import Dict

from .types import ATTENTIVE, DISTRACTED, EmotionLabel, EngagementCategory


ENGAGEMENT_BY_EMOTION: Dict[str, EngagementCategory] = {
    "happy": ATTENTIVE,
    "neutral": ATTENTIVE,
    "surprised": ATTENTIVE,
    "sad": DISTRACTED,
    "angry": DISTRACTED,
    "fearful": DISTRACTED,
    "disgust": DISTRACTED,
}


def classify(emotion: EmotionLabel) -> EngagementCategory:
    """Map an emotion label to its engagement category (labels are validated at ingestion)."""
    return ENGAGEMENT_BY_EMOTION[emotion]
