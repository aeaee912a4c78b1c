from dataclasses import dataclass
from typing import Callable, List, Literal, Optional, Tuple

from .aggregation import AggregateMetrics
from .config import EngineConfig
from .types import ATTENTIVE, DISTRACTED


Severity = Literal["info", "warning"]


@dataclass(frozen=True)
class Finding:
    code: str
    severity: Severity
    message: str


Rule = Callable[[AggregateMetrics, int, EngineConfig], Optional[Finding]]


def _no_subjects(m: AggregateMetrics, count: int, cfg: EngineConfig) -> Optional[Finding]:
    if count == 0:
        return Finding("no-subjects", "info", "No students are currently in view.")
    return None


def _high_distraction(m: AggregateMetrics, count: int, cfg: EngineConfig) -> Optional[Finding]:
    pct = m.percentage(DISTRACTED)
    if pct > cfg.distracted_warning_pct:
        return Finding(
            "high-distraction",
            "warning",
            f"{pct:.0f}% of recent observations look distracted. Consider a change of pace or a quick check-in.",
        )
    return None


def _strong_engagement(m: AggregateMetrics, count: int, cfg: EngineConfig) -> Optional[Finding]:
    pct = m.percentage(ATTENTIVE)
    if pct >= cfg.attentive_good_pct:
        return Finding("strong-engagement", "info", f"Class is engaged: {pct:.0f}% of recent observations are attentive.")
    return None


def _declining(m: AggregateMetrics, count: int, cfg: EngineConfig) -> Optional[Finding]:
    if m.trend == "declining":
        return Finding(
            "declining-trend",
            "warning",
            f"Attention is dropping ({m.earlier_attentive_pct:.0f}% -> {m.later_attentive_pct:.0f}% attentive).",
        )
    return None


def _improving(m: AggregateMetrics, count: int, cfg: EngineConfig) -> Optional[Finding]:
    if m.trend == "improving":
        return Finding(
            "improving-trend",
            "info",
            f"Attention is improving ({m.earlier_attentive_pct:.0f}% -> {m.later_attentive_pct:.0f}% attentive).",
        )
    return None


def _warming_up(m: AggregateMetrics, count: int, cfg: EngineConfig) -> Optional[Finding]:
    if m.trend == "insufficient-data":
        return Finding("warming-up", "info", "Collecting more observations before reporting a trend.")
    return None


def _low_confidence(m: AggregateMetrics, count: int, cfg: EngineConfig) -> Optional[Finding]:
    if m.total_samples and m.mean_confidence < cfg.low_confidence:
        return Finding(
            "low-confidence",
            "warning",
            f"Detection confidence is low (mean {m.mean_confidence:.2f}); check lighting and camera angle.",
        )
    return None


# Group order is report order; within a group the first rule that fires wins.
RULE_GROUPS: Tuple[Tuple[Rule, ...], ...] = (
    (_no_subjects,),
    (_high_distraction, _strong_engagement),
    (_declining, _improving, _warming_up),
    (_low_confidence,),
)


def generate_insights(
    metrics: AggregateMetrics,
    subject_count: int,
    config: Optional[EngineConfig] = None,
) -> List[Finding]:
    """Evaluate the rule groups in order and collect at most one finding per group."""
    config = config or EngineConfig()
    if subject_count == 0 and metrics.total_samples == 0:
        return [Finding("no-data", "info", "No students detected yet. Start tracking to collect data.")]

    findings: List[Finding] = []
    for group in RULE_GROUPS:
        for rule in group:
            finding = rule(metrics, subject_count, config)
            if finding is not None:
                findings.append(finding)
                break
    return findings
