"""Framework-agnostic domain models for the speaker analytics engine.

Segments are the immutable input. Everything else is built fresh for each
analysis run. Pydantic DTOs in models.py mirror the output types for the
serialized contract, with mappers at the boundary.
"""

from dataclasses import dataclass, field
from typing import Optional

PLACEHOLDER = "placeholder"
MEASURED = "measured"


@dataclass(frozen=True)
class Segment:
    """One transcribed utterance with timing and an optional speaker hint."""
    id: str
    start: float
    end: float
    text: str
    speaker_hint: Optional[str] = None
    confidence: Optional[float] = None

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass
class SpeakerIdentity:
    id: str
    name: Optional[str] = None


@dataclass
class PitchMetrics:
    average: float
    range: float
    variance: float


@dataclass
class PaceMetrics:
    words_per_minute: float
    variance: float
    pause_frequency: float


@dataclass
class TonalityMetrics:
    emotional_variance: float
    energy_level: float
    clarity: float


@dataclass
class LinguisticMetrics:
    vocabulary_complexity: float
    sentence_length: float
    filler_word_frequency: float


@dataclass
class VoiceCharacteristics:
    """Per-speaker voice and linguistic features.

    pitch and tonality come from an acoustic feature provider when one is
    supplied. Otherwise they hold fixed placeholder values, acoustic_source is
    PLACEHOLDER and acoustic_confidence is 0.0.
    """
    pitch: PitchMetrics
    pace: PaceMetrics
    tonality: TonalityMetrics
    linguistic: LinguisticMetrics
    acoustic_source: str = PLACEHOLDER
    acoustic_confidence: float = 0.0


@dataclass
class SpeakingPatterns:
    average_segment_length: float
    average_turn_length: float
    interruption_frequency: float
    response_latency: float
    topic_initiation_rate: float


@dataclass
class ParticipationMetrics:
    total_speaking_time: float
    segment_count: int
    word_count: int
    dominance_score: float
    engagement_level: float


@dataclass
class RecognitionEntry:
    timestamp: float
    confidence: float
    context_clues: list[str] = field(default_factory=list)


@dataclass
class SpeakerProfile:
    id: str
    name: Optional[str]
    confidence: float
    voice_characteristics: VoiceCharacteristics
    speaking_patterns: SpeakingPatterns
    participation_metrics: ParticipationMetrics
    recognition_history: list[RecognitionEntry] = field(default_factory=list)


@dataclass
class TurnEntry:
    speaker_id: str
    start: float
    end: float


@dataclass
class Turn:
    """A contiguous run of segments from one speaker."""
    speaker_id: str
    start: float
    end: float
    segment_count: int


@dataclass
class TurnTransition:
    from_speaker: str
    to_speaker: str
    timestamp: float
    type: str  # "smooth" | "interruption" | "gap"
    gap: float


@dataclass
class TurnTakingStructure:
    pattern: list[TurnEntry] = field(default_factory=list)
    interruption_matrix: dict[str, dict[str, int]] = field(default_factory=dict)
    average_turn_length: dict[str, float] = field(default_factory=dict)
    turn_transitions: list[TurnTransition] = field(default_factory=list)
    turns: list[Turn] = field(default_factory=list)

    def total_interruptions(self) -> int:
        return sum(sum(row.values()) for row in self.interruption_matrix.values())


@dataclass
class TemporalConfidence:
    timestamp: float
    confidence: float


@dataclass
class ConfidenceSummary:
    overall: float = 0.0
    by_speaker: dict[str, float] = field(default_factory=dict)
    temporal: list[TemporalConfidence] = field(default_factory=list)
    acoustic_by_speaker: dict[str, float] = field(default_factory=dict)
    below_threshold: list[str] = field(default_factory=list)


@dataclass
class Insights:
    dominant_speaker: Optional[str]
    most_engaged: Optional[str]
    conversation_dynamics: str
    collaboration_level: float
    meeting_balance: float


@dataclass
class ConversationAnalysis:
    """Complete analysis output for one transcript."""
    speakers: list[SpeakerProfile]
    speaking_time: dict[str, float]
    turn_taking: TurnTakingStructure
    voice_characteristics: dict[str, VoiceCharacteristics]
    confidence: ConfidenceSummary
    insights: Insights


@dataclass
class AcousticFeatures:
    """Low-level measurements for one segment from an acoustic provider."""
    pitch_hz: Optional[float] = None
    energy: Optional[float] = None
    clarity: Optional[float] = None
    confidence: Optional[float] = None


@dataclass
class IdentityMatch:
    """A known speaker recognised by an identity lookup."""
    name: str
    confidence: float
