import logging
import time
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .config import EngineConfig
from .engagement import classify
from .events import SessionEventLog
from .store import SubjectStore
from .types import BBox, DetectionError, EmotionSample, RawDetection, Subject, validate_detection


logger = logging.getLogger(__name__)


class IdentityTracker:
    """
    Centroid-based tracker that assigns stable subject IDs to identity-less
    detections. Pairs are matched greedily, nearest first, and only while the
    centroids are within `match_distance` pixels of each other.
    """

    def __init__(
        self,
        store: SubjectStore,
        events: Optional[SessionEventLog] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.config = config or EngineConfig()
        self.store = store
        self.events = events
        self._last_update: Optional[float] = None

    @staticmethod
    def _centroid(box: BBox) -> Tuple[float, float]:
        x, y, w, h = box
        return x + w / 2.0, y + h / 2.0

    def update(self, detections: Sequence[RawDetection], now: Optional[float] = None) -> List[Subject]:
        """Apply one frame of detections and return snapshots of the live subjects."""
        now = self._clock(now)
        valid = self._filter_valid(detections)

        with self.store.lock:
            # Subjects past the timeout are not live and must not be revived by a match.
            self._sweep(now)

            subjects = self.store.live()
            pairs = self._match(subjects, valid)

            assigned_cols = set()
            for r, c in pairs:
                sample = self._build_sample(subjects[r].id, valid[c], now)
                self.store.append(subjects[r].id, sample)
                self._log_event(sample)
                assigned_cols.add(c)

            # Unassigned detections -> new IDs
            for c, det in enumerate(valid):
                if c in assigned_cols:
                    continue
                sample = self._build_sample(self.store.allocate_id(), det, now)
                subject = self.store.register(sample)
                self._log_event(sample)
                logger.info("Created subject %d (%s) at %s", subject.id, subject.current_engagement, subject.current_bbox)

            logger.debug(
                "Frame at %.3f: %d detections, %d matched, %d live subjects",
                now, len(valid), len(pairs), len(self.store),
            )
            return self.store.snapshot()

    def sweep(self, now: Optional[float] = None) -> List[int]:
        """Drop subjects unseen for longer than the timeout; returns the removed ids."""
        now = self._clock(now)
        with self.store.lock:
            return self._sweep(now)

    def reset(self):
        self._last_update = None

    # ----------------------------
    # Internal helpers
    # ----------------------------

    def _clock(self, now: Optional[float]) -> float:
        if now is None:
            now = time.time()
        if self._last_update is not None and now < self._last_update:
            # Keeps every history non-decreasing in time.
            logger.warning("Timestamp %.3f is older than the last update %.3f; clamping", now, self._last_update)
            now = self._last_update
        self._last_update = now
        return now

    def _filter_valid(self, detections: Sequence[RawDetection]) -> List[RawDetection]:
        valid: List[RawDetection] = []
        for det in detections or ():
            try:
                det = validate_detection(det)
            except DetectionError as exc:
                logger.warning("Dropping detection: %s", exc)
                continue
            valid.append(det)
        return valid

    def _match(self, subjects: List[Subject], detections: List[RawDetection]) -> List[Tuple[int, int]]:
        """Return (subject row, detection column) pairs."""
        if not subjects or not detections:
            return []

        subject_centroids = np.array([self._centroid(s.current_bbox) for s in subjects], dtype=float)
        input_centroids = np.array([self._centroid(d.bbox) for d in detections], dtype=float)
        distances = np.linalg.norm(
            subject_centroids[:, None, :] - input_centroids[None, :, :], axis=2
        )

        rows, cols = np.nonzero(distances <= self.config.match_distance)
        # Nearest first; ties go to the lowest subject id (rows are id-ordered), then the earliest detection.
        order = np.lexsort((cols, rows, distances[rows, cols]))

        assigned_rows = set()
        assigned_cols = set()
        pairs: List[Tuple[int, int]] = []
        for idx in order:
            r, c = int(rows[idx]), int(cols[idx])
            if r in assigned_rows or c in assigned_cols:
                continue
            assigned_rows.add(r)
            assigned_cols.add(c)
            pairs.append((r, c))
        return pairs

    def _sweep(self, now: float) -> List[int]:
        removed = self.store.expired(now, self.config.subject_timeout)
        for sid in removed:
            self.store.remove(sid)
            logger.info("Retired subject %d (unseen for more than %.1fs)", sid, self.config.subject_timeout)
        return removed

    @staticmethod
    def _build_sample(subject_id: int, det: RawDetection, now: float) -> EmotionSample:
        return EmotionSample(
            subject_id=subject_id,
            emotion=det.emotion,
            confidence=det.confidence,
            engagement=classify(det.emotion),
            timestamp=now,
            bbox=det.bbox,
        )

    def _log_event(self, sample: EmotionSample):
        if self.events is not None:
            self.events.append(sample)
