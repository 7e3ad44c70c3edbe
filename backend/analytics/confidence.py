"""Confidence scoring.

Per-speaker confidence is the identification confidence produced during
identity assignment. This module only aggregates it, so a calibrated model
can replace the identification heuristic without touching insights.
"""

from typing import List

from config import Thresholds
from domain.models import ConfidenceSummary, Segment, SpeakerProfile, TemporalConfidence


def score_confidence(
    speakers: List[SpeakerProfile],
    segments: List[Segment],
    thresholds: Thresholds,
) -> ConfidenceSummary:
    by_speaker = {speaker.id: speaker.confidence for speaker in speakers}
    overall = sum(by_speaker.values()) / len(by_speaker) if by_speaker else 0.0

    temporal = [
        TemporalConfidence(
            timestamp=seg.start,
            confidence=seg.confidence if seg.confidence is not None else thresholds.default_segment_confidence,
        )
        for seg in segments
    ]

    return ConfidenceSummary(
        overall=overall,
        by_speaker=by_speaker,
        temporal=temporal,
        acoustic_by_speaker={
            speaker.id: speaker.voice_characteristics.acoustic_confidence for speaker in speakers
        },
        below_threshold=[
            speaker.id for speaker in speakers if speaker.confidence < thresholds.confidence_threshold
        ],
    )
