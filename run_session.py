"""
Run a demo tracking session against the simulated detection source and print
the class overview, per-student summary and insights.

Usage (from project root, with venv activated):

    python run_session.py --ticks 30 --seed 7
    python run_session.py --live --interval 0.5 --ticks 10
"""

import argparse
import logging
import time

from eduvision.config import EngineConfig
from eduvision.report import ReportGenerator
from eduvision.session import SessionSnapshot, TrackingSession
from eduvision.simulator import SimulatedDetectionSource


def print_snapshot(snapshot: SessionSnapshot):
    n = len(snapshot.subjects)
    print(f"{n} {'Student' if n == 1 else 'Students'} Detected")
    for s in snapshot.subjects:
        print(
            f"  [{s.id}] {s.name}: {s.current_emotion} / {s.current_engagement} "
            f"(conf={s.current_confidence:.2f}, samples={len(s.history)})"
        )

    m = snapshot.metrics
    print("\nClass Engagement Overview")
    print(f"  samples in window: {m.total_samples}")
    for category, count in m.counts.items():
        print(f"  {category:<10} {count:>5}  {m.percentages[category]:5.1f}%")
    print(f"  mean confidence: {m.mean_confidence:.2f}")
    print(f"  trend: {m.trend}")

    print("\nInsights")
    for f in snapshot.findings:
        print(f"  [{f.severity}] {f.message}")


def main():
    parser = argparse.ArgumentParser(description="Run a simulated EduVision engagement tracking session.")
    parser.add_argument("--ticks", type=int, default=30, help="Number of detection ticks to run (default: 30)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for the simulated source")
    parser.add_argument("--max-students", type=int, default=3, help="Maximum students in view (default: 3)")
    parser.add_argument(
        "--interval",
        type=float,
        default=EngineConfig.tick_interval,
        help="Seconds between ticks (default: %(default)s)",
    )
    parser.add_argument("--live", action="store_true", help="Run the real threaded tick loop instead of a simulated clock")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    if args.ticks < 1:
        raise SystemExit("--ticks must be at least 1")

    config = EngineConfig(tick_interval=args.interval)
    source = SimulatedDetectionSource(max_students=args.max_students, seed=args.seed)
    session = TrackingSession(config, source=source)

    if args.live:
        session.start()
        try:
            time.sleep(args.ticks * args.interval)
        finally:
            session.stop()
    else:
        start = time.time()
        for i in range(args.ticks):
            session.process_batch(source(), now=start + i * args.interval)

    print()
    print_snapshot(session.snapshot())

    summary = ReportGenerator(session.events.to_dataframe()).summarize()
    if summary.per_subject.empty:
        print("\nWarning: no samples were recorded.")
        return
    print("\nPer-Student Summary")
    print(summary.per_subject.to_string(index=False))
    print(f"\nMost attentive: Student {summary.highest_subject}")
    print(f"Least attentive: Student {summary.lowest_subject}")


if __name__ == "__main__":
    main()
