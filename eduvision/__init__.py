"""EduVision: subject tracking and class engagement aggregation."""

from .aggregation import AggregateMetrics, compute_metrics, current_distribution
from .config import EngineConfig
from .engagement import classify
from .events import SessionEventLog
from .insights import Finding, generate_insights
from .report import EngagementSummary, ReportGenerator
from .session import SessionSnapshot, TrackingSession
from .simulator import SimulatedDetectionSource
from .store import SubjectStore
from .tracker import IdentityTracker
from .types import (
    ATTENTIVE,
    DISTRACTED,
    EMOTIONS,
    ENGAGEMENT_CATEGORIES,
    DetectionError,
    EmotionSample,
    InvalidBoundingBoxError,
    RawDetection,
    Subject,
    UnknownEmotionError,
)

__version__ = "0.1.0"

__all__ = [
    "AggregateMetrics",
    "ATTENTIVE",
    "DISTRACTED",
    "DetectionError",
    "EMOTIONS",
    "ENGAGEMENT_CATEGORIES",
    "EmotionSample",
    "EngagementSummary",
    "EngineConfig",
    "Finding",
    "IdentityTracker",
    "InvalidBoundingBoxError",
    "RawDetection",
    "ReportGenerator",
    "SessionEventLog",
    "SessionSnapshot",
    "SimulatedDetectionSource",
    "Subject",
    "SubjectStore",
    "TrackingSession",
    "UnknownEmotionError",
    "classify",
    "compute_metrics",
    "current_distribution",
    "generate_insights",
]
