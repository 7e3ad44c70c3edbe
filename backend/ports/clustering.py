"""SegmentClusteringPort: abstract interface for grouping segments by speaker."""

from abc import ABC, abstractmethod

from domain.models import Segment


class SegmentClusteringPort(ABC):
    @abstractmethod
    def cluster(self, segments: list[Segment]) -> dict[str, list[Segment]]:
        """Group chronologically ordered segments into speaker clusters.

        Returns cluster id -> segments in input order. Cluster ids appear in
        the mapping in order of first appearance. Empty input returns {}.
        Every input segment must appear in exactly one cluster; returning
        equal copies instead of the same objects is fine.
        """
