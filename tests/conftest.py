from __future__ import annotations

from typing import Optional

import pytest

from adapters.heuristic.gap_clusterer import GapHeuristicClusterer
from config import Thresholds
from domain.models import Segment
from ports.progress import ProgressPort
from use_cases.analyze_conversation import AnalyzeConversationUseCase


class RecordingProgress(ProgressPort):
    def __init__(self) -> None:
        self.stages: list[str] = []

    def report(self, job_id: str, stage: str, progress: float = 0.0, detail: Optional[str] = None) -> None:
        self.stages.append(stage)


def seg(
    start: float,
    end: float,
    text: str = "hello there",
    hint: Optional[str] = None,
    confidence: Optional[float] = None,
    sid: Optional[str] = None,
) -> Segment:
    return Segment(
        id=sid or f"s{start:g}",
        start=start,
        end=end,
        text=text,
        speaker_hint=hint,
        confidence=confidence,
    )


@pytest.fixture
def thresholds() -> Thresholds:
    return Thresholds()


@pytest.fixture
def progress() -> RecordingProgress:
    return RecordingProgress()


@pytest.fixture
def use_case(progress: RecordingProgress) -> AnalyzeConversationUseCase:
    return AnalyzeConversationUseCase(
        clusterer=GapHeuristicClusterer(),
        progress=progress,
        max_workers=2,
    )


@pytest.fixture
def alternating_segments() -> list[Segment]:
    """Speakers "a" and "b" alternate every two segments, 5s each, over 60s."""
    hints = ["a", "a", "b", "b"] * 3
    return [
        seg(i * 5.0, (i + 1) * 5.0, f"point number {i} is made here", hint=h, sid=f"seg-{i}")
        for i, h in enumerate(hints)
    ]
