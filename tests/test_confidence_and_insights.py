from __future__ import annotations

import pytest

from analytics.characteristics import extract_characteristics
from analytics.confidence import score_confidence
from analytics.insights import (
    BALANCED,
    FREQUENT_INTERRUPTIONS,
    POLITE_TURN_TAKING,
    conversation_dynamics,
    meeting_balance,
    synthesize_insights,
)
from domain.models import ParticipationMetrics, SpeakerProfile, SpeakingPatterns, TurnTakingStructure
from conftest import seg


def _profile(thresholds, sid: str, speaking: float, dominance: float, engagement: float,
             confidence: float = 0.8) -> SpeakerProfile:
    return SpeakerProfile(
        id=sid,
        name=None,
        confidence=confidence,
        voice_characteristics=extract_characteristics(sid, [seg(0, 1)], thresholds),
        speaking_patterns=SpeakingPatterns(0.0, 0.0, 0.0, 0.0, 0.0),
        participation_metrics=ParticipationMetrics(speaking, 1, 1, dominance, engagement),
    )


def test_confidence_summary(thresholds) -> None:
    speakers = [_profile(thresholds, "a", 1, 0.1, 0.1, 0.9), _profile(thresholds, "b", 1, 0.1, 0.1, 0.3)]
    segments = [seg(0, 1, confidence=0.42), seg(2, 3)]
    summary = score_confidence(speakers, segments, thresholds)

    assert summary.overall == pytest.approx(0.6)
    assert summary.by_speaker == {"a": 0.9, "b": 0.3}
    assert [(t.timestamp, t.confidence) for t in summary.temporal] == [(0, 0.42), (2, 0.8)]
    assert summary.acoustic_by_speaker == {"a": 0.0, "b": 0.0}
    assert summary.below_threshold == ["b"]


def test_confidence_with_no_speakers(thresholds) -> None:
    summary = score_confidence([], [], thresholds)
    assert summary.overall == 0.0
    assert summary.temporal == []


def test_zero_segment_confidence_is_kept(thresholds) -> None:
    summary = score_confidence([], [seg(0, 1, confidence=0.0)], thresholds)
    assert summary.temporal[0].confidence == 0.0


def test_conversation_dynamics_labels() -> None:
    assert conversation_dynamics(5, 2) == FREQUENT_INTERRUPTIONS
    assert conversation_dynamics(4, 2) == BALANCED
    assert conversation_dynamics(2, 2) == BALANCED
    assert conversation_dynamics(1, 2) == POLITE_TURN_TAKING
    assert conversation_dynamics(0, 1) == POLITE_TURN_TAKING


def test_meeting_balance() -> None:
    assert meeting_balance([]) == 0.0
    assert meeting_balance([0.0]) == 1.0
    assert meeting_balance([0.0, 0.0]) == 0.0
    assert meeting_balance([30.0, 30.0]) == 1.0
    # mean 20, std 10
    assert meeting_balance([10.0, 30.0]) == pytest.approx(0.5)
    assert meeting_balance([0.0, 0.0, 100.0]) == 0.0


def test_insight_ties_go_to_first_speaker(thresholds) -> None:
    speakers = [_profile(thresholds, "a", 30, 0.5, 0.4), _profile(thresholds, "b", 30, 0.5, 0.4)]
    insights = synthesize_insights(speakers, TurnTakingStructure())
    assert insights.dominant_speaker == "a"
    assert insights.most_engaged == "a"
    assert insights.collaboration_level == pytest.approx(0.48)
    assert insights.meeting_balance == 1.0


def test_insights_pick_maximum(thresholds) -> None:
    speakers = [_profile(thresholds, "a", 10, 0.2, 0.9), _profile(thresholds, "b", 40, 0.8, 0.1)]
    structure = TurnTakingStructure(interruption_matrix={"a": {"b": 3}, "b": {"a": 2}})
    insights = synthesize_insights(speakers, structure)
    assert insights.dominant_speaker == "b"
    assert insights.most_engaged == "a"
    assert insights.conversation_dynamics == FREQUENT_INTERRUPTIONS
    assert insights.collaboration_level == pytest.approx(0.6)


def test_insights_with_no_speakers() -> None:
    insights = synthesize_insights([], TurnTakingStructure())
    assert insights.dominant_speaker is None
    assert insights.most_engaged is None
    assert insights.conversation_dynamics == BALANCED
    assert insights.collaboration_level == 0.0
    assert insights.meeting_balance == 0.0
