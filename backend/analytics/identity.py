"""Identity assignment: relabel clusters as speakers.

No clustering or inference happens here. Speaker ids are the cluster ids in
order of first appearance; display names come from caller hints or from an
optional identity lookup.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from config import Thresholds
from domain.models import RecognitionEntry, Segment, SpeakerIdentity
from exceptions import SpeakerAnalyticsError
from ports.identity_lookup import IdentityLookupPort

logger = logging.getLogger(__name__)


@dataclass
class IdentityAssignment:
    identity: SpeakerIdentity
    confidence: float
    history: List[RecognitionEntry] = field(default_factory=list)


def _cluster_confidence(cluster_id: str, segments: List[Segment], thresholds: Thresholds) -> float:
    """Mean per-segment assignment confidence: hinted segments are trusted more."""
    if not segments:
        return 0.0
    total = sum(
        thresholds.hint_confidence if seg.speaker_hint == cluster_id else thresholds.inferred_confidence
        for seg in segments
    )
    return total / len(segments)


def _clustering_clues(cluster_id: str, segments: List[Segment]) -> List[str]:
    hinted = sum(1 for seg in segments if seg.speaker_hint == cluster_id)
    clues = []
    if hinted:
        clues.append("speaker_hint")
    if hinted < len(segments):
        clues.append("inferred")
    return clues


def assign_identities(
    clusters: Dict[str, List[Segment]],
    thresholds: Thresholds,
    speaker_names: Optional[Dict[str, str]] = None,
    identity_lookup: Optional[IdentityLookupPort] = None,
) -> Dict[str, IdentityAssignment]:
    """Map each cluster id to its speaker identity, confidence and recognition history.

    Args:
        clusters: cluster id -> segments, as produced by the clusterer.
        thresholds: supplies per-segment hint/inferred confidences.
        speaker_names: optional cluster id -> display name hints.
        identity_lookup: optional cross-run recognition capability.

    Returns:
        cluster id -> IdentityAssignment, ordered by first appearance in the
        transcript.
    """
    names = speaker_names or {}
    ordered = sorted(clusters.items(), key=lambda item: item[1][0].start if item[1] else float("inf"))

    assignments: Dict[str, IdentityAssignment] = {}
    for cluster_id, segments in ordered:
        first_seen = segments[0].start if segments else 0.0
        confidence = _cluster_confidence(cluster_id, segments, thresholds)
        assignment = IdentityAssignment(
            identity=SpeakerIdentity(id=cluster_id, name=names.get(cluster_id)),
            confidence=confidence,
            history=[RecognitionEntry(first_seen, confidence, _clustering_clues(cluster_id, segments))],
        )

        if assignment.identity.name is not None:
            assignment.history.append(RecognitionEntry(first_seen, confidence, ["name_hint"]))

        if identity_lookup is not None:
            match = identity_lookup.lookup(cluster_id, segments)
            if match is not None:
                logger.debug(f"Identity lookup matched {cluster_id} -> {match.name} ({match.confidence:.2f})")
                if assignment.identity.name is None:
                    assignment.identity.name = match.name
                assignment.confidence = match.confidence
                assignment.history.append(RecognitionEntry(first_seen, match.confidence, ["identity_lookup"]))

        assignments[cluster_id] = assignment

    return assignments


def label_segments(
    segments: List[Segment],
    clusters: Dict[str, List[Segment]],
    assignments: Dict[str, IdentityAssignment],
) -> List[str]:
    """Speaker id for each input segment, aligned with the input order.

    Segments are matched by value, so a clusterer may return copies.
    Equal segments are handed out in cluster order.
    """
    owners: Dict[Segment, List[str]] = {}
    for cluster_id, members in clusters.items():
        for seg in members:
            owners.setdefault(seg, []).append(assignments[cluster_id].identity.id)

    labels = []
    for seg in segments:
        candidates = owners.get(seg)
        if not candidates:
            raise SpeakerAnalyticsError(f"Clusterer did not return segment {seg.id!r} in any cluster")
        labels.append(candidates.pop(0))
    return labels
