"""Conversation-level insights derived from speaker profiles and turn-taking.

All outputs are defined for zero, one and many speakers:

- dominant_speaker / most_engaged: None with no speakers; ties go to the
  speaker who appeared first.
- conversation_dynamics: always one of the three labels below.
- collaboration_level: 0.0 with no speakers.
- meeting_balance: 1.0 with exactly one speaker, 0.0 when the mean speaking
  time is zero (including no speakers).
"""

from typing import Callable, List, Optional

import numpy as np

from domain.models import Insights, SpeakerProfile, TurnTakingStructure

FREQUENT_INTERRUPTIONS = "dynamic with frequent interruptions"
POLITE_TURN_TAKING = "structured with polite turn-taking"
BALANCED = "balanced"


def _first_max(speakers: List[SpeakerProfile], key: Callable[[SpeakerProfile], float]) -> Optional[str]:
    best = None
    for speaker in speakers:
        if best is None or key(speaker) > key(best):
            best = speaker
    return best.id if best else None


def conversation_dynamics(total_interruptions: int, speaker_count: int) -> str:
    if total_interruptions > 2 * speaker_count:
        return FREQUENT_INTERRUPTIONS
    if total_interruptions < speaker_count:
        return POLITE_TURN_TAKING
    return BALANCED


def meeting_balance(speaking_times: List[float]) -> float:
    if len(speaking_times) == 1:
        return 1.0
    if not speaking_times:
        return 0.0
    mean = float(np.mean(speaking_times))
    if mean <= 0:
        return 0.0
    return max(0.0, 1.0 - float(np.std(speaking_times)) / mean)


def synthesize_insights(
    speakers: List[SpeakerProfile],
    turn_taking: TurnTakingStructure,
) -> Insights:
    engagement = [s.participation_metrics.engagement_level for s in speakers]
    collaboration = min(1.0, float(np.mean(engagement)) * 1.2) if engagement else 0.0

    return Insights(
        dominant_speaker=_first_max(speakers, lambda s: s.participation_metrics.dominance_score),
        most_engaged=_first_max(speakers, lambda s: s.participation_metrics.engagement_level),
        conversation_dynamics=conversation_dynamics(turn_taking.total_interruptions(), len(speakers)),
        collaboration_level=collaboration,
        meeting_balance=meeting_balance(
            [s.participation_metrics.total_speaking_time for s in speakers]
        ),
    )
