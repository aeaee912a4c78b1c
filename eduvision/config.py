from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    """Tunable thresholds for tracking, aggregation and insights."""

    # Tracking
    match_distance: float = 150.0  # max centroid distance (px) to keep an identity
    subject_timeout: float = 10.0  # seconds unseen before a subject is purged
    history_size: int = 50  # samples kept per subject
    event_log_size: int = 5000  # samples kept in the session event log

    # Aggregation
    window_size: int = 100  # trailing samples used for class metrics
    trend_margin: float = 10.0  # percentage points
    min_trend_samples: int = 6

    # Insights
    distracted_warning_pct: float = 50.0
    attentive_good_pct: float = 70.0
    low_confidence: float = 0.5

    # Session loop
    tick_interval: float = 2.0  # seconds between detection ticks

    def __post_init__(self):
        if self.match_distance < 0:
            raise ValueError("match_distance must be >= 0")
        if self.subject_timeout < 0:
            raise ValueError("subject_timeout must be >= 0")
        for name in ("history_size", "event_log_size", "window_size"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1")
        if self.window_size > self.event_log_size:
            raise ValueError("window_size cannot exceed event_log_size")
        if self.min_trend_samples < 2:
            raise ValueError("min_trend_samples must be >= 2")
        if self.trend_margin < 0:
            raise ValueError("trend_margin must be >= 0")
        for name in ("distracted_warning_pct", "attentive_good_pct"):
            if not 0.0 <= getattr(self, name) <= 100.0:
                raise ValueError(f"{name} must be within [0, 100]")
        if not 0.0 <= self.low_confidence <= 1.0:
            raise ValueError("low_confidence must be within [0, 1]")
        if self.tick_interval <= 0:
            raise ValueError("tick_interval must be > 0")
