"""Tests for the event log dataframe and the per-subject report."""

from eduvision.engagement import classify
from eduvision.events import EVENT_FIELDS, SessionEventLog
from eduvision.report import SUMMARY_COLUMNS, ReportGenerator
from eduvision.types import EmotionSample


def _sample(subject_id, emotion, t, confidence=0.8):
    return EmotionSample(
        subject_id=subject_id,
        emotion=emotion,
        confidence=confidence,
        engagement=classify(emotion),
        timestamp=t,
        bbox=(1.0, 2.0, 3.0, 4.0),
    )


class TestSessionEventLog:
    def test_empty_dataframe_has_columns(self):
        df = SessionEventLog().to_dataframe()
        assert df.empty
        assert list(df.columns) == EVENT_FIELDS

    def test_rows_in_order(self):
        log = SessionEventLog()
        log.append(_sample(1, "happy", 0.0))
        log.append(_sample(2, "sad", 1.0))
        df = log.to_dataframe()
        assert list(df["subject_id"]) == [1, 2]
        assert list(df["engagement"]) == ["Attentive", "Distracted"]
        assert df.iloc[0]["bbox_h"] == 4.0

    def test_cap_drops_oldest(self):
        log = SessionEventLog(maxlen=3)
        for t in range(5):
            log.append(_sample(1, "happy", float(t)))
        assert len(log) == 3
        assert [s.timestamp for s in log.samples()] == [2.0, 3.0, 4.0]

    def test_trailing_samples(self):
        log = SessionEventLog()
        for t in range(5):
            log.append(_sample(1, "happy", float(t)))
        assert [s.timestamp for s in log.samples(2)] == [3.0, 4.0]
        assert log.samples(0) == ()


class TestReportGenerator:
    def test_empty(self):
        summary = ReportGenerator(SessionEventLog().to_dataframe()).summarize()
        assert summary.per_subject.empty
        assert list(summary.per_subject.columns) == SUMMARY_COLUMNS
        assert summary.highest_subject is None
        assert summary.lowest_subject is None

    def test_per_subject_summary(self):
        log = SessionEventLog()
        for t, emotion in enumerate(["happy", "happy", "neutral", "sad"]):
            log.append(_sample(1, emotion, float(t), confidence=0.9))
        for t, emotion in enumerate(["sad", "angry"]):
            log.append(_sample(2, emotion, float(t), confidence=0.7))

        summary = ReportGenerator(log.to_dataframe()).summarize()
        rows = summary.per_subject.set_index("subject_id")

        assert rows.loc[1, "samples"] == 4
        assert rows.loc[1, "attentive_pct"] == 75.0
        assert rows.loc[1, "dominant_emotion"] == "happy"
        assert rows.loc[2, "attentive_pct"] == 0.0
        assert rows.loc[2, "mean_confidence"] == 0.7
        # Tie between angry and sad resolves alphabetically.
        assert rows.loc[2, "dominant_emotion"] == "angry"
        assert summary.highest_subject == 1
        assert summary.lowest_subject == 2
