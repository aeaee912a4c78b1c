from dataclasses import dataclass
from typing import Optional

import pandas as pd

from .types import ATTENTIVE


SUMMARY_COLUMNS = ["subject_id", "samples", "attentive_pct", "mean_confidence", "dominant_emotion"]


@dataclass
class EngagementSummary:
    per_subject: pd.DataFrame
    highest_subject: Optional[int]
    lowest_subject: Optional[int]


class ReportGenerator:
    """Per-subject engagement summary built from the session event log dataframe."""

    def __init__(self, df: pd.DataFrame):
        self.df = df

    def summarize(self) -> EngagementSummary:
        if self.df.empty:
            return EngagementSummary(
                per_subject=pd.DataFrame(columns=SUMMARY_COLUMNS),
                highest_subject=None,
                lowest_subject=None,
            )

        df = self.df.assign(attentive=(self.df["engagement"] == ATTENTIVE).astype(float))
        grouped = df.groupby("subject_id").agg(
            samples=("engagement", "size"),
            attentive_pct=("attentive", "mean"),
            mean_confidence=("confidence", "mean"),
        )
        grouped["attentive_pct"] = (grouped["attentive_pct"] * 100.0).round(1)
        grouped["mean_confidence"] = grouped["mean_confidence"].round(4)
        # Most frequent label; ties resolve alphabetically.
        grouped["dominant_emotion"] = df.groupby("subject_id")["emotion"].agg(lambda s: s.value_counts().sort_index().idxmax())

        grouped = grouped.reset_index()
        grouped = grouped.sort_values(["attentive_pct", "subject_id"], ascending=[False, True]).reset_index(drop=True)
        highest = int(grouped.iloc[0]["subject_id"])
        lowest = int(grouped.iloc[-1]["subject_id"])
        return EngagementSummary(per_subject=grouped[SUMMARY_COLUMNS], highest_subject=highest, lowest_subject=lowest)
