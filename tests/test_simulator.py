"""Tests for the simulated detection source."""

import pytest

from eduvision.config import EngineConfig
from eduvision.session import TrackingSession
from eduvision.simulator import SimulatedDetectionSource
from eduvision.types import EMOTIONS, validate_detection


class TestSimulatedDetectionSource:
    def test_batches_are_valid(self):
        source = SimulatedDetectionSource(seed=3)
        for _ in range(50):
            batch = source()
            assert 1 <= len(batch) <= 3
            for det in batch:
                validate_detection(det)
                assert det.emotion in EMOTIONS
                assert 0.7 <= det.confidence < 1.0
                x, y, w, h = det.bbox
                assert 0 <= x and x + w <= 640 + 1e-6
                assert 0 <= y and y + h <= 480 + 1e-6

    def test_same_seed_same_batches(self):
        a = SimulatedDetectionSource(seed=11)
        b = SimulatedDetectionSource(seed=11)
        assert [a() for _ in range(5)] == [b() for _ in range(5)]

    def test_rejects_zero_students(self):
        with pytest.raises(ValueError):
            SimulatedDetectionSource(max_students=0)

    def test_tracker_keeps_seats_as_identities(self):
        session = TrackingSession(EngineConfig(subject_timeout=1000.0))
        source = SimulatedDetectionSource(max_students=3, seed=5)
        for t in range(40):
            session.process_batch(source(), now=float(t))
        subjects = session.subjects()
        assert 1 <= len(subjects) <= 3
        assert max(s.id for s in subjects) <= 3
