import threading
from collections import deque
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from .types import EmotionSample


EVENT_FIELDS = [
    "timestamp",
    "subject_id",
    "emotion",
    "engagement",
    "confidence",
    "bbox_x",
    "bbox_y",
    "bbox_w",
    "bbox_h",
]


class SessionEventLog:
    """
    Append-only record of every emotion sample seen during the session, across
    all subjects. Capped at `maxlen`; the oldest samples fall off first.
    """

    def __init__(self, maxlen: int = 5000):
        self.maxlen = maxlen
        self._samples: deque = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def append(self, sample: EmotionSample):
        with self._lock:
            self._samples.append(sample)

    def samples(self, last_n: Optional[int] = None) -> Tuple[EmotionSample, ...]:
        """Return the logged samples in order, optionally only the trailing `last_n`."""
        with self._lock:
            items = tuple(self._samples)
        if last_n is not None:
            items = items[-last_n:] if last_n > 0 else ()
        return items

    def clear(self):
        with self._lock:
            self._samples.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)

    def to_dataframe(self, last_n: Optional[int] = None) -> pd.DataFrame:
        """Flatten the log into one row per sample, columns in EVENT_FIELDS order."""
        return samples_to_dataframe(self.samples(last_n))


def _build_row(sample: EmotionSample) -> dict:
    bx, by, bw, bh = sample.bbox
    return {
        "timestamp": sample.timestamp,
        "subject_id": sample.subject_id,
        "emotion": sample.emotion,
        "engagement": sample.engagement,
        "confidence": float(sample.confidence),
        "bbox_x": float(bx),
        "bbox_y": float(by),
        "bbox_w": float(bw),
        "bbox_h": float(bh),
    }


def samples_to_dataframe(samples: Iterable[EmotionSample]) -> pd.DataFrame:
    rows: List[dict] = [_build_row(s) for s in samples]
    if not rows:
        return pd.DataFrame(columns=EVENT_FIELDS)
    return pd.DataFrame(rows, columns=EVENT_FIELDS)
