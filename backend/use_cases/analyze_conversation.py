"""AnalyzeConversationUseCase: orchestrates the speaker analytics pipeline.

Accepts all ports via dependency injection. Stages run strictly forward:

    1. clustering          (sequential)
    2. identity assignment (sequential)
    3. characteristics     (one task per speaker)
    4. participation       (one task per speaker)
    5. turn-taking         (sequential, whole transcript)
    6. confidence
    7. insights

The input segment list is never mutated; identical input gives identical
output.
"""

import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from config import DEFAULT_MAX_WORKERS, Thresholds
from domain.models import (
    ConversationAnalysis,
    ParticipationMetrics,
    Segment,
    SpeakerProfile,
    VoiceCharacteristics,
)
from exceptions import InvalidInputError
from ports.acoustics import AcousticFeaturePort
from ports.clustering import SegmentClusteringPort
from ports.identity_lookup import IdentityLookupPort
from ports.progress import (
    CLUSTERING,
    CONFIDENCE,
    EXTRACTING,
    IDENTIFYING,
    INSIGHTS,
    PARTICIPATION,
    PROFILING,
    TURN_TAKING,
    VALIDATING,
    ProgressPort,
)
from analytics.characteristics import extract_characteristics
from analytics.confidence import score_confidence
from analytics.identity import assign_identities, label_segments
from analytics.insights import synthesize_insights
from analytics.participation import compute_participation
from analytics.turn_taking import analyze_turn_taking, speaking_patterns

logger = logging.getLogger(__name__)


@dataclass
class AnalyzeRequest:
    """All parameters for one analysis run."""
    segments: List[Segment]
    speaker_names: Dict[str, str] = field(default_factory=dict)
    job_id: Optional[str] = None


def validate_segments(segments: List[Segment]) -> None:
    """Reject input that breaks the ordering and timing preconditions."""
    for i, seg in enumerate(segments):
        if seg.end < seg.start:
            raise InvalidInputError(f"Segment {seg.id!r} ends ({seg.end}) before it starts ({seg.start})")
        if not seg.text or not seg.text.strip():
            raise InvalidInputError(f"Segment {seg.id!r} has empty text")
        if seg.confidence is not None and not 0.0 <= seg.confidence <= 1.0:
            raise InvalidInputError(f"Segment {seg.id!r} confidence {seg.confidence} is outside [0, 1]")
        if i > 0 and seg.start < segments[i - 1].start:
            raise InvalidInputError(
                f"Segments are not in chronological order: {seg.id!r} starts at {seg.start} "
                f"before {segments[i - 1].id!r} at {segments[i - 1].start}"
            )


class AnalyzeConversationUseCase:
    def __init__(
        self,
        clusterer: SegmentClusteringPort,
        progress: ProgressPort,
        thresholds: Optional[Thresholds] = None,
        identity_lookup: Optional[IdentityLookupPort] = None,
        acoustic_provider: Optional[AcousticFeaturePort] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self._clusterer = clusterer
        self._progress = progress
        self._thresholds = thresholds or Thresholds()
        self._identity_lookup = identity_lookup
        self._acoustic_provider = acoustic_provider
        self._max_workers = max_workers

    def execute(self, req: AnalyzeRequest) -> ConversationAnalysis:
        """Run the full pipeline over one complete transcript."""
        job_id = req.job_id or uuid.uuid4().hex[:12]
        segments = list(req.segments)
        thresholds = self._thresholds

        # 1. Validate
        self._progress.report(job_id, VALIDATING, detail=f"{len(segments)} segments")
        validate_segments(segments)

        # 2. Cluster
        self._progress.report(job_id, CLUSTERING)
        clusters = self._clusterer.cluster(segments)

        # 3. Identities
        self._progress.report(job_id, IDENTIFYING, detail=f"{len(clusters)} clusters")
        assignments = assign_identities(
            clusters, thresholds, req.speaker_names, self._identity_lookup
        )
        labels = label_segments(segments, clusters, assignments)
        speaker_segments = {
            assignment.identity.id: clusters[cluster_id]
            for cluster_id, assignment in assignments.items()
        }
        speaker_ids = list(speaker_segments)

        # 4. Characteristics + participation, one task per speaker
        voice: Dict[str, VoiceCharacteristics] = {}
        participation: Dict[str, ParticipationMetrics] = {}
        if speaker_ids:
            self._progress.report(job_id, EXTRACTING, detail=f"{len(speaker_ids)} speakers")
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                voice_futures = {
                    sid: pool.submit(
                        extract_characteristics,
                        sid, speaker_segments[sid], thresholds, self._acoustic_provider,
                    )
                    for sid in speaker_ids
                }
                participation_futures = {
                    sid: pool.submit(
                        compute_participation,
                        sid, speaker_segments[sid], segments, labels, thresholds,
                    )
                    for sid in speaker_ids
                }
                for sid in speaker_ids:
                    voice[sid] = voice_futures[sid].result()
                self._progress.report(job_id, PARTICIPATION)
                for sid in speaker_ids:
                    participation[sid] = participation_futures[sid].result()

        # 5. Turn-taking
        self._progress.report(job_id, TURN_TAKING)
        turn_taking = analyze_turn_taking(segments, labels, thresholds)

        # 6. Profiles
        self._progress.report(job_id, PROFILING)
        speakers: List[SpeakerProfile] = []
        for assignment in assignments.values():
            sid = assignment.identity.id
            speakers.append(SpeakerProfile(
                id=sid,
                name=assignment.identity.name,
                confidence=assignment.confidence,
                voice_characteristics=voice[sid],
                speaking_patterns=speaking_patterns(sid, segments, labels, turn_taking, thresholds),
                participation_metrics=participation[sid],
                recognition_history=list(assignment.history),
            ))

        # 7. Confidence
        self._progress.report(job_id, CONFIDENCE)
        confidence = score_confidence(speakers, segments, thresholds)

        # 8. Insights
        self._progress.report(job_id, INSIGHTS)
        insights = synthesize_insights(speakers, turn_taking)

        logger.info(
            f"[{job_id}] Analysed {len(segments)} segments: {len(speakers)} speakers, "
            f"{len(turn_taking.turn_transitions)} transitions, dynamics={insights.conversation_dynamics!r}"
        )
        return ConversationAnalysis(
            speakers=speakers,
            speaking_time={s.id: s.participation_metrics.total_speaking_time for s in speakers},
            turn_taking=turn_taking,
            voice_characteristics=voice,
            confidence=confidence,
            insights=insights,
        )
