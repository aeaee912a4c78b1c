import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from .aggregation import AggregateMetrics, compute_metrics, current_distribution
from .config import EngineConfig
from .events import SessionEventLog
from .insights import Finding, generate_insights
from .store import SubjectStore
from .tracker import IdentityTracker
from .types import RawDetection, Subject


logger = logging.getLogger(__name__)

DetectionSource = Callable[[], Sequence[RawDetection]]


@dataclass(frozen=True)
class SessionSnapshot:
    subjects: List[Subject]
    metrics: AggregateMetrics
    findings: List[Finding]
    live_distribution: Dict[str, int] = field(default_factory=dict)


class TrackingSession:
    """
    Ties together the subject store, event log, tracker, aggregation and insights
    for one live session, plus the fixed-interval loop that pulls detections.

    Frames are applied one at a time under a lock; every read method returns
    copies taken under the same lock.
    """

    def __init__(self, config: Optional[EngineConfig] = None, source: Optional[DetectionSource] = None):
        self.config = config or EngineConfig()
        self.store = SubjectStore(history_size=self.config.history_size)
        self.events = SessionEventLog(maxlen=self.config.event_log_size)
        self.tracker = IdentityTracker(self.store, self.events, self.config)
        self.source = source

        self.frames_processed = 0
        self.ticks_skipped = 0

        self._frame_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._worker_thread: Optional[threading.Thread] = None

    # ----------------------------
    # Writes
    # ----------------------------

    def process_batch(self, detections: Sequence[RawDetection], now: Optional[float] = None) -> List[Subject]:
        """Apply one frame atomically and return the live subjects after it."""
        with self._frame_lock:
            subjects = self.tracker.update(detections, now)
            self.frames_processed += 1
            return subjects

    def reset(self):
        """Forget every subject and sample; ids start again from 1."""
        with self._frame_lock:
            self.store.clear()
            self.events.clear()
            self.tracker.reset()
            self.frames_processed = 0
            self.ticks_skipped = 0
        logger.info("Session reset")

    # ----------------------------
    # Reads
    # ----------------------------

    def subjects(self) -> List[Subject]:
        with self._frame_lock:
            return self.store.snapshot()

    def metrics(self) -> AggregateMetrics:
        with self._frame_lock:
            return compute_metrics(self.events.samples(self.config.window_size), self.config)

    def insights(self) -> List[Finding]:
        return self.snapshot().findings

    def snapshot(self) -> SessionSnapshot:
        with self._frame_lock:
            subjects = self.store.snapshot()
            metrics = compute_metrics(self.events.samples(self.config.window_size), self.config)
        return SessionSnapshot(
            subjects=subjects,
            metrics=metrics,
            findings=generate_insights(metrics, len(subjects), self.config),
            live_distribution=current_distribution(subjects),
        )

    # ----------------------------
    # Tick loop
    # ----------------------------

    @property
    def is_running(self) -> bool:
        return self._worker_thread is not None and self._worker_thread.is_alive()

    def start(self, source: Optional[DetectionSource] = None):
        """Begin pulling detections every `tick_interval` seconds. Existing subjects are kept."""
        if self.is_running:
            return
        source = source or self.source
        if source is None:
            raise ValueError("a detection source is required to start tracking")
        self.source = source

        self._stop_event.clear()
        self._worker_thread = threading.Thread(
            target=self._run_loop, args=(source,), name="eduvision-ticks", daemon=True
        )
        self._worker_thread.start()
        logger.info("Tracking started (tick every %.2fs)", self.config.tick_interval)

    def stop(self, timeout: Optional[float] = None):
        """
        Halt the loop. A frame already being applied finishes first; history is kept.
        Waits at most `timeout` seconds (default: three ticks, at least one second)
        so a hung detection source cannot block the caller.
        """
        thread = self._worker_thread
        if thread is None:
            return
        if timeout is None:
            timeout = max(3 * self.config.tick_interval, 1.0)
        self._stop_event.set()
        thread.join(timeout)
        if thread.is_alive():
            logger.warning("Tick loop did not exit within %.2fs", timeout)
            return
        self._worker_thread = None
        logger.info(
            "Tracking stopped after %d frames (%d ticks skipped, %d subjects live)",
            self.frames_processed, self.ticks_skipped, len(self.store),
        )

    def _run_loop(self, source: DetectionSource):
        interval = self.config.tick_interval
        next_tick = time.monotonic()
        while not self._stop_event.is_set():
            try:
                detections = source()
            except Exception:
                # A failed tick is the same as an empty one.
                logger.exception("Detection source failed; treating tick as empty")
                detections = []

            # Stop requested while the source was busy: drop the batch.
            if self._stop_event.is_set():
                break

            try:
                self.process_batch(detections or [])
            except Exception:
                logger.exception("Error applying frame; skipping tick")

            next_tick += interval
            now = time.monotonic()
            if now > next_tick:
                missed = int((now - next_tick) // interval) + 1
                self.ticks_skipped += missed
                next_tick += missed * interval
                logger.debug("Running late; skipped %d tick(s)", missed)
            self._stop_event.wait(max(0.0, next_tick - now))
