"""Participation metrics: speaking time, word count, dominance and engagement."""

from typing import List

from config import Thresholds
from domain.models import ParticipationMetrics, Segment
from analytics.text_metrics import is_question, word_count


def conversation_span(segments: List[Segment]) -> float:
    """last segment end - first segment start; 0 for an empty transcript."""
    if not segments:
        return 0.0
    return segments[-1].end - segments[0].start


def count_responses(
    speaker_id: str,
    segments: List[Segment],
    labels: List[str],
    response_window: float,
) -> int:
    """Segments where the speaker replies to a different speaker within response_window."""
    responses = 0
    for i in range(1, len(segments)):
        if labels[i] != speaker_id or labels[i - 1] == speaker_id:
            continue
        if segments[i].start - segments[i - 1].end <= response_window:
            responses += 1
    return responses


def engagement_level(question_rate: float, response_rate: float) -> float:
    return min(1.0, (question_rate * 0.4 + response_rate * 0.6) * 2)


def compute_participation(
    speaker_id: str,
    speaker_segments: List[Segment],
    segments: List[Segment],
    labels: List[str],
    thresholds: Thresholds,
) -> ParticipationMetrics:
    """Participation of one speaker.

    Args:
        speaker_id: the speaker being measured.
        speaker_segments: that speaker's segments in order.
        segments: the full chronological transcript.
        labels: speaker id per transcript segment, aligned with segments.
        thresholds: supplies the response window.
    """
    speaking_time = sum(seg.duration for seg in speaker_segments)
    span = conversation_span(segments)
    count = len(speaker_segments)

    if count:
        question_rate = sum(1 for seg in speaker_segments if is_question(seg.text)) / count
        response_rate = count_responses(speaker_id, segments, labels, thresholds.response_window) / count
    else:
        question_rate = response_rate = 0.0

    return ParticipationMetrics(
        total_speaking_time=speaking_time,
        segment_count=count,
        word_count=sum(word_count(seg.text) for seg in speaker_segments),
        dominance_score=speaking_time / span if span > 0 else 0.0,
        engagement_level=engagement_level(question_rate, response_rate),
    )
