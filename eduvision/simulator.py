from typing import List, Optional, Tuple

import numpy as np

from .types import BBox, RawDetection


SIM_EMOTIONS = ("happy", "neutral", "sad", "angry", "surprised", "fearful", "disgust")
SIM_WEIGHTS = (0.4, 0.3, 0.1, 0.05, 0.05, 0.05, 0.05)


class SimulatedDetectionSource:
    """
    Stand-in for the camera + classifier collaborators, for demos and tests.

    Each simulated student owns a seat (centred in one column of the frame) and
    wobbles a few pixels around it per tick, so the tracker can keep their
    identity. Every call returns detections for a random 1..max_students of
    them, with emotions drawn from the classroom demo's weights.
    """

    def __init__(
        self,
        frame_size: Tuple[int, int] = (640, 480),
        max_students: int = 3,
        jitter: float = 6.0,
        seed: Optional[int] = None,
    ):
        if max_students < 1:
            raise ValueError("max_students must be >= 1")
        self.frame_w, self.frame_h = frame_size
        self.max_students = max_students
        self.jitter = jitter
        self.rng = np.random.default_rng(seed)
        self.seats: List[BBox] = [self._seat_box(i) for i in range(max_students)]

    def _seat_box(self, index: int) -> BBox:
        column_w = self.frame_w / self.max_students
        box_w = min(150 + self.rng.random() * 100, column_w)
        box_h = min(180 + self.rng.random() * 120, float(self.frame_h))
        x = index * column_w + (column_w - box_w) / 2.0
        y = self.rng.random() * (self.frame_h - box_h)
        return (float(x), float(y), float(box_w), float(box_h))

    def _jitter(self, box: BBox) -> BBox:
        x, y, w, h = box
        dx, dy = self.rng.uniform(-self.jitter, self.jitter, size=2)
        x = float(np.clip(x + dx, 0, self.frame_w - w))
        y = float(np.clip(y + dy, 0, self.frame_h - h))
        return (x, y, w, h)

    def __call__(self) -> List[RawDetection]:
        visible = int(self.rng.integers(1, self.max_students + 1))
        seats = sorted(self.rng.choice(self.max_students, size=visible, replace=False))

        detections: List[RawDetection] = []
        for i in seats:
            emotion = str(self.rng.choice(SIM_EMOTIONS, p=SIM_WEIGHTS))
            confidence = float(0.7 + self.rng.random() * 0.3)
            detections.append(RawDetection(bbox=self._jitter(self.seats[i]), emotion=emotion, confidence=confidence))
        return detections
