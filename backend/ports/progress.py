"""ProgressPort: abstract interface for reporting analysis progress.

Stages are reported in the order of STAGES. The extracting and
participation stages are skipped when a transcript has no speakers.
"""

from abc import ABC, abstractmethod
from typing import Literal, Optional

VALIDATING = "validating"
CLUSTERING = "clustering"
IDENTIFYING = "identifying"
EXTRACTING = "extracting"
PARTICIPATION = "participation"
TURN_TAKING = "turn_taking"
PROFILING = "profiling"
CONFIDENCE = "confidence"
INSIGHTS = "insights"

Stage = Literal[
    "validating", "clustering", "identifying", "extracting", "participation",
    "turn_taking", "profiling", "confidence", "insights",
]

STAGES: tuple[Stage, ...] = (
    VALIDATING, CLUSTERING, IDENTIFYING, EXTRACTING, PARTICIPATION,
    TURN_TAKING, PROFILING, CONFIDENCE, INSIGHTS,
)


class ProgressPort(ABC):
    @abstractmethod
    def report(
        self,
        job_id: str,
        stage: Stage,
        progress: float = 0.0,
        detail: Optional[str] = None,
    ) -> None:
        """Report that a job entered a stage, with optional fraction done and detail."""
