from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Sequence

import pandas as pd

from .config import EngineConfig
from .events import samples_to_dataframe
from .types import ATTENTIVE, ENGAGEMENT_CATEGORIES, EmotionSample, EngagementCategory, Subject, Trend


@dataclass(frozen=True)
class AggregateMetrics:
    total_samples: int = 0
    counts: Dict[str, int] = field(default_factory=lambda: {c: 0 for c in ENGAGEMENT_CATEGORIES})
    percentages: Dict[str, float] = field(default_factory=lambda: {c: 0.0 for c in ENGAGEMENT_CATEGORIES})
    mean_confidence: float = 0.0
    trend: Trend = "insufficient-data"
    earlier_attentive_pct: Optional[float] = None
    later_attentive_pct: Optional[float] = None

    def percentage(self, category: EngagementCategory) -> float:
        return self.percentages.get(category, 0.0)


def _attentive_pct(engagement: pd.Series) -> float:
    if engagement.empty:
        return 0.0
    return float((engagement == ATTENTIVE).mean() * 100.0)


def classify_trend(engagement: pd.Series, margin: float, min_samples: int):
    """
    Compare the Attentive share of the earlier half of the window with the later
    half. Returns (trend, earlier_pct, later_pct).
    """
    n = len(engagement)
    if n < min_samples:
        return "insufficient-data", None, None

    half = n // 2
    earlier = _attentive_pct(engagement.iloc[:half])
    later = _attentive_pct(engagement.iloc[half:])
    if later < earlier - margin:
        trend = "declining"
    elif later > earlier + margin:
        trend = "improving"
    else:
        trend = "stable"
    return trend, round(earlier, 1), round(later, 1)


def compute_metrics(
    samples: Sequence[EmotionSample],
    config: Optional[EngineConfig] = None,
) -> AggregateMetrics:
    """
    Class-wide metrics over the trailing `window_size` samples (the whole
    input when it is shorter). Pure: no state is kept between calls.
    """
    config = config or EngineConfig()
    df = samples_to_dataframe(samples[-config.window_size:] if samples else ())
    return metrics_from_dataframe(df, config)


def metrics_from_dataframe(df: pd.DataFrame, config: Optional[EngineConfig] = None) -> AggregateMetrics:
    config = config or EngineConfig()
    if df.empty:
        return AggregateMetrics()

    window = df.sort_values("timestamp", kind="stable").tail(config.window_size)
    total = len(window)

    value_counts = window["engagement"].value_counts()
    counts = {c: int(value_counts.get(c, 0)) for c in ENGAGEMENT_CATEGORIES}
    percentages = {c: round(counts[c] / total * 100.0, 1) for c in ENGAGEMENT_CATEGORIES}

    mean_conf = float(window["confidence"].astype(float).mean())
    mean_conf = min(1.0, max(0.0, mean_conf))

    trend, earlier, later = classify_trend(
        window["engagement"].reset_index(drop=True),
        config.trend_margin,
        config.min_trend_samples,
    )
    return AggregateMetrics(
        total_samples=total,
        counts=counts,
        percentages=percentages,
        mean_confidence=round(mean_conf, 4),
        trend=trend,
        earlier_attentive_pct=earlier,
        later_attentive_pct=later,
    )


def current_distribution(subjects: Iterable[Subject]) -> Dict[str, int]:
    """How many live subjects sit in each category right now."""
    counts = {c: 0 for c in ENGAGEMENT_CATEGORIES}
    for s in subjects:
        if s.current_engagement is not None:
            counts[s.current_engagement] += 1
    return counts
