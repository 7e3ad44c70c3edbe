"""IdentityLookupPort: abstract interface for recognising known speakers."""

from abc import ABC, abstractmethod
from typing import Optional

from domain.models import IdentityMatch, Segment


class IdentityLookupPort(ABC):
    @abstractmethod
    def lookup(self, cluster_id: str, segments: list[Segment]) -> Optional[IdentityMatch]:
        """Return the known speaker behind a cluster, or None if unrecognised."""
