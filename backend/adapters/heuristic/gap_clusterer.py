"""GapHeuristicClusterer: groups segments by speaker hints and timing gaps.

Segments carrying a speaker hint go straight to that hint's cluster. For
hint-less segments a silence longer than speaker_change_gap is read as a
speaker change; anything shorter keeps the previous speaker. The heuristic is
conservative and weak compared to real diarization: it only ever reuses a
speaker already seen in the conversation unless the previous speaker is the
only one seen so far.
"""

import logging

from config import DEFAULT_SPEAKER_CHANGE_GAP
from domain.models import Segment
from ports.clustering import SegmentClusteringPort

logger = logging.getLogger(__name__)

FIRST_CLUSTER_ID = "speaker_0"
CLUSTER_PREFIX = "speaker_"


class GapHeuristicClusterer(SegmentClusteringPort):
    def __init__(self, speaker_change_gap: float = DEFAULT_SPEAKER_CHANGE_GAP):
        self._speaker_change_gap = speaker_change_gap

    def cluster(self, segments: list[Segment]) -> dict[str, list[Segment]]:
        clusters: dict[str, list[Segment]] = {}
        previous_id = None
        previous_end = 0.0
        boundaries = 0

        for segment in segments:
            if segment.speaker_hint:
                cluster_id = segment.speaker_hint
            elif previous_id is None:
                cluster_id = FIRST_CLUSTER_ID
            elif segment.start - previous_end > self._speaker_change_gap:
                cluster_id = self._next_cluster_id(list(clusters), previous_id)
                boundaries += 1
            else:
                cluster_id = previous_id

            clusters.setdefault(cluster_id, []).append(segment)
            previous_id = cluster_id
            previous_end = segment.end

        logger.debug(
            f"Clustered {len(segments)} segments into {len(clusters)} clusters "
            f"({boundaries} gap-triggered speaker changes)"
        )
        return clusters

    @staticmethod
    def _next_cluster_id(seen: list[str], previous_id: str) -> str:
        """Round-robin over seen clusters after previous_id; mint one if none other exists."""
        if len(seen) > 1:
            index = seen.index(previous_id)
            return seen[(index + 1) % len(seen)]

        n = len(seen)
        candidate = f"{CLUSTER_PREFIX}{n}"
        while candidate in seen:
            n += 1
            candidate = f"{CLUSTER_PREFIX}{n}"
        return candidate
