import threading
from collections import deque
from typing import Dict, List, Optional

from .types import EmotionSample, Subject


class SubjectStore:
    """
    Authoritative table of tracked subjects keyed by id.

    Written only by the IdentityTracker. Readers go through snapshot() / get(),
    which hand back copies so a half-updated subject is never observed.
    """

    def __init__(self, history_size: int = 50):
        self.history_size = history_size
        self.next_id = 1
        self._subjects: Dict[int, Subject] = {}
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def allocate_id(self) -> int:
        """Ids are never reused within a session, even after a subject is purged."""
        with self._lock:
            sid = self.next_id
            self.next_id += 1
            return sid

    def register(self, first_sample: EmotionSample) -> Subject:
        sid = first_sample.subject_id
        with self._lock:
            if sid in self._subjects:
                raise KeyError(f"subject {sid} already registered")
            subject = Subject(id=sid, name=f"Student {sid}", history=deque(maxlen=self.history_size))
            subject.record(first_sample)
            self._subjects[sid] = subject
            return subject

    def append(self, subject_id: int, sample: EmotionSample):
        with self._lock:
            self._subjects[subject_id].record(sample)

    def remove(self, subject_id: int) -> Optional[Subject]:
        with self._lock:
            return self._subjects.pop(subject_id, None)

    def expired(self, now: float, timeout: float) -> List[int]:
        with self._lock:
            return [
                sid
                for sid, s in self._subjects.items()
                if s.last_seen is not None and now - s.last_seen > timeout
            ]

    def live(self) -> List[Subject]:
        """Stored records in id order. Writer side only: these are not copies."""
        with self._lock:
            return [self._subjects[sid] for sid in sorted(self._subjects)]

    def get(self, subject_id: int) -> Optional[Subject]:
        with self._lock:
            subject = self._subjects.get(subject_id)
            return subject.snapshot() if subject is not None else None

    def snapshot(self) -> List[Subject]:
        with self._lock:
            return [self._subjects[sid].snapshot() for sid in sorted(self._subjects)]

    def clear(self):
        with self._lock:
            self._subjects.clear()
            self.next_id = 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._subjects)

    def __contains__(self, subject_id: int) -> bool:
        with self._lock:
            return subject_id in self._subjects
