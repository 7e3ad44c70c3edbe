"""Turn-taking analysis over the chronological, speaker-labelled transcript.

Every speaker change between consecutive segments is classified by the gap
between them:

    gap < -interruption_overlap  -> interruption
    gap > turn_gap               -> gap
    otherwise                    -> smooth
"""

import logging
from typing import Dict, List

from config import Thresholds
from domain.models import (
    Segment,
    SpeakingPatterns,
    Turn,
    TurnEntry,
    TurnTakingStructure,
    TurnTransition,
)

logger = logging.getLogger(__name__)

SMOOTH = "smooth"
INTERRUPTION = "interruption"
GAP = "gap"


def classify_transition(gap: float, thresholds: Thresholds) -> str:
    if gap < -thresholds.interruption_overlap:
        return INTERRUPTION
    if gap > thresholds.turn_gap:
        return GAP
    return SMOOTH


def group_turns(segments: List[Segment], labels: List[str]) -> List[Turn]:
    """Group consecutive same-speaker segments into turns."""
    if not segments:
        return []

    turns: List[Turn] = []
    current = Turn(labels[0], segments[0].start, segments[0].end, 1)
    for seg, speaker_id in zip(segments[1:], labels[1:]):
        if speaker_id != current.speaker_id:
            turns.append(current)
            current = Turn(speaker_id, seg.start, seg.end, 1)
        else:
            current.end = max(current.end, seg.end)
            current.segment_count += 1
    turns.append(current)
    return turns


def analyze_turn_taking(
    segments: List[Segment],
    labels: List[str],
    thresholds: Thresholds,
) -> TurnTakingStructure:
    structure = TurnTakingStructure()
    durations: Dict[str, List[float]] = {}

    for i, (seg, speaker_id) in enumerate(zip(segments, labels)):
        structure.pattern.append(TurnEntry(speaker_id, seg.start, seg.end))
        durations.setdefault(speaker_id, []).append(seg.duration)

        if i == 0 or labels[i - 1] == speaker_id:
            continue

        previous_id = labels[i - 1]
        gap = seg.start - segments[i - 1].end
        kind = classify_transition(gap, thresholds)
        if kind == INTERRUPTION:
            row = structure.interruption_matrix.setdefault(speaker_id, {})
            row[previous_id] = row.get(previous_id, 0) + 1
        structure.turn_transitions.append(
            TurnTransition(previous_id, speaker_id, seg.start, kind, gap)
        )

    structure.average_turn_length = {
        speaker_id: sum(values) / len(values) for speaker_id, values in durations.items()
    }
    structure.turns = group_turns(segments, labels)

    logger.debug(
        f"Turn-taking: {len(structure.turns)} turns, {len(structure.turn_transitions)} transitions, "
        f"{structure.total_interruptions()} interruptions"
    )
    return structure


def speaking_patterns(
    speaker_id: str,
    segments: List[Segment],
    labels: List[str],
    structure: TurnTakingStructure,
    thresholds: Thresholds,
) -> SpeakingPatterns:
    """Summarise how one speaker takes turns."""
    own = [seg for seg, label in zip(segments, labels) if label == speaker_id]
    if not own:
        return SpeakingPatterns(0.0, 0.0, 0.0, 0.0, 0.0)

    own_turns = [t for t in structure.turns if t.speaker_id == speaker_id]
    interruptions_made = sum(structure.interruption_matrix.get(speaker_id, {}).values())
    latencies = [max(0.0, t.gap) for t in structure.turn_transitions if t.to_speaker == speaker_id]

    initiations = 0
    for i, label in enumerate(labels):
        if label != speaker_id:
            continue
        if i == 0 or segments[i].start - segments[i - 1].end > thresholds.turn_gap:
            initiations += 1

    return SpeakingPatterns(
        average_segment_length=sum(seg.duration for seg in own) / len(own),
        average_turn_length=(
            sum(t.end - t.start for t in own_turns) / len(own_turns) if own_turns else 0.0
        ),
        interruption_frequency=interruptions_made / len(own),
        response_latency=sum(latencies) / len(latencies) if latencies else 0.0,
        topic_initiation_rate=initiations / len(own),
    )
