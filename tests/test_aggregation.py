"""Tests for class-wide aggregate metrics."""

import pytest

from eduvision.aggregation import compute_metrics, current_distribution
from eduvision.config import EngineConfig
from eduvision.engagement import classify
from eduvision.types import ATTENTIVE, DISTRACTED, EmotionSample, Subject


# ── Helpers ──

def _make_samples(emotions, confidence=0.8, start=0.0, subject_id=1):
    return [
        EmotionSample(
            subject_id=subject_id,
            emotion=e,
            confidence=confidence,
            engagement=classify(e),
            timestamp=start + i,
            bbox=(0.0, 0.0, 10.0, 10.0),
        )
        for i, e in enumerate(emotions)
    ]


class TestEmpty:
    def test_empty_input_is_neutral(self):
        m = compute_metrics([])
        assert m.total_samples == 0
        assert m.counts == {ATTENTIVE: 0, DISTRACTED: 0}
        assert m.percentages == {ATTENTIVE: 0.0, DISTRACTED: 0.0}
        assert m.mean_confidence == 0.0
        assert m.trend == "insufficient-data"


class TestDistribution:
    def test_counts_and_percentages(self):
        m = compute_metrics(_make_samples(["happy", "sad", "neutral", "angry"]))
        assert m.counts == {ATTENTIVE: 2, DISTRACTED: 2}
        assert m.percentages[ATTENTIVE] == 50.0
        assert m.percentages[DISTRACTED] == 50.0

    def test_percentages_sum_to_100(self):
        emotions = ["happy", "sad", "sad", "neutral", "fearful", "surprised", "angry"]
        m = compute_metrics(_make_samples(emotions))
        assert sum(m.percentages.values()) == pytest.approx(100.0, abs=0.2)

    def test_mean_confidence(self):
        samples = _make_samples(["happy"], confidence=0.6) + _make_samples(["sad"], confidence=1.0, start=1.0)
        m = compute_metrics(samples)
        assert m.mean_confidence == pytest.approx(0.8)
        assert 0.0 <= m.mean_confidence <= 1.0

    def test_window_keeps_only_recent_samples(self):
        samples = _make_samples(["sad"] * 10 + ["happy"] * 4)
        m = compute_metrics(samples, EngineConfig(window_size=4))
        assert m.total_samples == 4
        assert m.counts[ATTENTIVE] == 4

    def test_short_session_uses_everything(self):
        m = compute_metrics(_make_samples(["happy"] * 3), EngineConfig(window_size=100))
        assert m.total_samples == 3


class TestTrend:
    def test_twenty_point_drop_is_declining(self):
        earlier = ["happy"] * 10
        later = ["happy"] * 8 + ["sad"] * 2
        m = compute_metrics(_make_samples(earlier + later), EngineConfig(trend_margin=10.0))
        assert m.earlier_attentive_pct == 100.0
        assert m.later_attentive_pct == 80.0
        assert m.trend == "declining"

    def test_flat_sequence_is_stable(self):
        m = compute_metrics(_make_samples(["happy", "sad"] * 10))
        assert m.trend == "stable"

    def test_rise_is_improving(self):
        m = compute_metrics(_make_samples(["sad"] * 6 + ["happy"] * 6))
        assert m.trend == "improving"

    def test_change_within_margin_is_stable(self):
        earlier = ["happy"] * 10
        later = ["happy"] * 9 + ["sad"]
        m = compute_metrics(_make_samples(earlier + later), EngineConfig(trend_margin=10.0))
        assert m.trend == "stable"

    def test_too_few_samples(self):
        m = compute_metrics(_make_samples(["happy", "sad", "sad"]), EngineConfig(min_trend_samples=6))
        assert m.trend == "insufficient-data"
        assert m.earlier_attentive_pct is None


class TestCurrentDistribution:
    def test_counts_live_subjects(self):
        subjects = [
            Subject(id=1, name="Student 1", current_engagement=ATTENTIVE),
            Subject(id=2, name="Student 2", current_engagement=DISTRACTED),
            Subject(id=3, name="Student 3", current_engagement=ATTENTIVE),
        ]
        assert current_distribution(subjects) == {ATTENTIVE: 2, DISTRACTED: 1}

    def test_empty(self):
        assert current_distribution([]) == {ATTENTIVE: 0, DISTRACTED: 0}
