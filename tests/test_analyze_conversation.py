from __future__ import annotations

import dataclasses
import logging

import pytest

from adapters.local.json_voiceprint_store import InMemoryVoiceprintStore
from domain.models import MEASURED, PLACEHOLDER, AcousticFeatures, Segment
from exceptions import InvalidInputError
from mappers import analysis_to_dto
from ports.acoustics import AcousticFeaturePort
from ports.clustering import SegmentClusteringPort
from ports.progress import STAGES
from use_cases.analyze_conversation import AnalyzeConversationUseCase, AnalyzeRequest
from adapters.heuristic.gap_clusterer import GapHeuristicClusterer
from conftest import RecordingProgress, seg


class PickyAcoustics(AcousticFeaturePort):
    """Fails for any speaker whose segments mention "static"."""

    def extract(self, segments: list[Segment]) -> list[AcousticFeatures]:
        if any("static" in s.text for s in segments):
            raise ValueError("unreadable audio")
        return [AcousticFeatures(pitch_hz=180.0, energy=0.3, clarity=0.95) for _ in segments]


def test_empty_input_gives_well_formed_analysis(use_case, progress) -> None:
    analysis = use_case.execute(AnalyzeRequest(segments=[], job_id="job"))

    assert analysis.speakers == []
    assert analysis.speaking_time == {}
    assert analysis.turn_taking.pattern == []
    assert analysis.confidence.overall == 0.0
    assert analysis.insights.meeting_balance == 0.0
    assert analysis.insights.dominant_speaker is None
    assert progress.stages[0] == "validating"
    assert "extracting" not in progress.stages
    assert progress.stages[-1] == "insights"


def test_single_speaker(use_case) -> None:
    segments = [seg(i * 3.0, i * 3.0 + 2.0, "Solo talk here.", hint="solo") for i in range(4)]
    analysis = use_case.execute(AnalyzeRequest(segments=segments))

    assert [s.id for s in analysis.speakers] == ["solo"]
    assert analysis.turn_taking.turn_transitions == []
    assert analysis.turn_taking.interruption_matrix == {}
    assert analysis.insights.meeting_balance == 1.0
    assert analysis.insights.conversation_dynamics == "structured with polite turn-taking"
    assert analysis.insights.dominant_speaker == "solo"


def test_two_balanced_speakers_tie_breaks_to_first(use_case, alternating_segments) -> None:
    analysis = use_case.execute(AnalyzeRequest(segments=alternating_segments))

    assert [s.id for s in analysis.speakers] == ["a", "b"]
    assert analysis.speaking_time == {"a": pytest.approx(30.0), "b": pytest.approx(30.0)}
    assert analysis.insights.dominant_speaker == "a"
    assert analysis.insights.meeting_balance == pytest.approx(1.0)
    assert analysis.insights.most_engaged == "b"
    assert len(analysis.turn_taking.turn_transitions) == 5
    assert all(t.type == "smooth" for t in analysis.turn_taking.turn_transitions)


def test_interruption_scenario(use_case) -> None:
    segments = [
        seg(0, 5, "I was saying that", hint="speaker1"),
        seg(4, 8, "Sorry, but wait", hint="speaker2"),
    ]
    analysis = use_case.execute(AnalyzeRequest(segments=segments))

    assert analysis.turn_taking.turn_transitions[0].type == "interruption"
    assert analysis.turn_taking.interruption_matrix["speaker2"]["speaker1"] == 1
    speaker2 = analysis.speakers[1]
    assert speaker2.speaking_patterns.interruption_frequency == 1.0


def test_hintless_gaps_every_third_segment(use_case) -> None:
    starts = [0, 1, 2, 5, 6, 7, 10, 11, 12]
    segments = [seg(s, s + 0.9, "just talking") for s in starts]
    analysis = use_case.execute(AnalyzeRequest(segments=segments))

    assert [s.id for s in analysis.speakers] == ["speaker_0", "speaker_1"]
    assert [t.to_speaker for t in analysis.turn_taking.turn_transitions] == ["speaker_1", "speaker_0"]
    assert all(s.confidence == pytest.approx(0.6) for s in analysis.speakers)
    assert analysis.confidence.below_threshold == []


def test_conservation_of_speaking_time(use_case) -> None:
    segments = [
        seg(0.0, 1.3), seg(1.4, 2.9, hint="x"), seg(6.0, 7.7), seg(7.8, 9.1),
        seg(12.5, 13.05, hint="y"), seg(13.0, 15.2), seg(19.9, 21.0),
    ]
    analysis = use_case.execute(AnalyzeRequest(segments=segments))
    total = sum(s.end - s.start for s in segments)
    assert sum(analysis.speaking_time.values()) == pytest.approx(total)


def test_determinism_and_idempotence(use_case, alternating_segments) -> None:
    segments = list(alternating_segments)
    snapshot = list(segments)

    first = analysis_to_dto(use_case.execute(AnalyzeRequest(segments=segments, job_id="one"))).to_json()
    second = analysis_to_dto(use_case.execute(AnalyzeRequest(segments=segments, job_id="two"))).to_json()

    assert first == second
    assert segments == snapshot


def test_out_of_order_segments_are_rejected(use_case) -> None:
    with pytest.raises(InvalidInputError, match="chronological"):
        use_case.execute(AnalyzeRequest(segments=[seg(5, 6), seg(1, 2)]))


def test_segment_ending_before_start_is_rejected(use_case) -> None:
    with pytest.raises(InvalidInputError, match="before it starts"):
        use_case.execute(AnalyzeRequest(segments=[seg(5, 4)]))


def test_empty_text_and_bad_confidence_are_rejected(use_case) -> None:
    with pytest.raises(InvalidInputError):
        use_case.execute(AnalyzeRequest(segments=[seg(0, 1, "   ")]))
    with pytest.raises(InvalidInputError):
        use_case.execute(AnalyzeRequest(segments=[seg(0, 1, confidence=1.5)]))


def test_acoustic_failure_degrades_only_that_speaker(progress, caplog) -> None:
    use_case = AnalyzeConversationUseCase(
        clusterer=GapHeuristicClusterer(),
        progress=progress,
        acoustic_provider=PickyAcoustics(),
    )
    segments = [
        seg(0, 2, "clear words", hint="clean"),
        seg(2.5, 4, "lots of static", hint="noisy"),
    ]
    with caplog.at_level(logging.WARNING):
        analysis = use_case.execute(AnalyzeRequest(segments=segments))

    voice = analysis.voice_characteristics
    assert voice["clean"].acoustic_source == MEASURED
    assert voice["clean"].pitch.average == pytest.approx(180.0)
    assert voice["noisy"].acoustic_source == PLACEHOLDER
    assert analysis.confidence.acoustic_by_speaker == {"clean": 1.0, "noisy": 0.0}
    assert "noisy" in caplog.text


def test_names_and_identity_lookup_flow_into_profiles(progress, alternating_segments) -> None:
    store = InMemoryVoiceprintStore()
    store.enroll("b", "Bea", 0.4)
    use_case = AnalyzeConversationUseCase(
        clusterer=GapHeuristicClusterer(),
        progress=progress,
        identity_lookup=store,
    )
    analysis = use_case.execute(AnalyzeRequest(segments=alternating_segments, speaker_names={"a": "Ann"}))

    a, b = analysis.speakers
    assert (a.name, b.name) == ("Ann", "Bea")
    assert len(a.recognition_history) == 2
    assert len(b.recognition_history) == 2
    assert analysis.confidence.by_speaker["b"] == pytest.approx(0.4)
    assert analysis.confidence.below_threshold == ["b"]


def test_progress_reports_every_stage(use_case, progress, alternating_segments) -> None:
    use_case.execute(AnalyzeRequest(segments=alternating_segments))
    assert progress.stages == list(STAGES)
    assert progress.stages[3:5] == ["extracting", "participation"]


class CopyingClusterer(SegmentClusteringPort):
    """Stands in for a model-backed clusterer that rebuilds its segments."""

    def cluster(self, segments: list[Segment]) -> dict[str, list[Segment]]:
        clusters = GapHeuristicClusterer().cluster(segments)
        return {cid: [dataclasses.replace(s) for s in members] for cid, members in clusters.items()}


def test_substitute_clusterer_returning_copies(progress, alternating_segments) -> None:
    expected = AnalyzeConversationUseCase(
        clusterer=GapHeuristicClusterer(), progress=RecordingProgress()
    ).execute(AnalyzeRequest(segments=alternating_segments))

    analysis = AnalyzeConversationUseCase(
        clusterer=CopyingClusterer(), progress=progress
    ).execute(AnalyzeRequest(segments=alternating_segments))

    assert analysis == expected


class TextualAcoustics(AcousticFeaturePort):
    def extract(self, segments: list[Segment]) -> list[AcousticFeatures]:
        return [AcousticFeatures(pitch_hz="n/a", energy=0.5) for _ in segments]


def test_non_numeric_acoustics_degrade_instead_of_aborting(progress, caplog) -> None:
    use_case = AnalyzeConversationUseCase(
        clusterer=GapHeuristicClusterer(),
        progress=progress,
        acoustic_provider=TextualAcoustics(),
    )
    with caplog.at_level(logging.WARNING):
        analysis = use_case.execute(AnalyzeRequest(segments=[seg(0, 2, hint="a"), seg(2.5, 4, hint="b")]))

    assert {v.acoustic_source for v in analysis.voice_characteristics.values()} == {PLACEHOLDER}
    assert progress.stages[-1] == "insights"
