"""AcousticFeaturePort: abstract interface for real acoustic measurements."""

from abc import ABC, abstractmethod

from domain.models import AcousticFeatures, Segment


class AcousticFeaturePort(ABC):
    @abstractmethod
    def extract(self, segments: list[Segment]) -> list[AcousticFeatures]:
        """Measure each segment. Returns one AcousticFeatures per input segment."""
