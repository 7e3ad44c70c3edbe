from typing import List, Optional, Dict

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base DTO: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SegmentIn(CamelModel):
    """One transcript segment as supplied by the transcription collaborator"""
    id: str
    start: float
    end: float
    text: str = Field(min_length=1)
    speaker_hint: Optional[str] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def check_timing(self):
        if self.end < self.start:
            raise ValueError(f"end ({self.end}) is before start ({self.start})")
        if not self.text.strip():
            raise ValueError("text must not be blank")
        return self


class AnalysisRequestIn(CamelModel):
    segments: List[SegmentIn] = []
    speaker_names: Dict[str, str] = {}


class Pitch(CamelModel):
    average: float
    range: float
    variance: float


class Pace(CamelModel):
    words_per_minute: float
    variance: float
    pause_frequency: float


class Tonality(CamelModel):
    emotional_variance: float
    energy_level: float
    clarity: float


class Linguistic(CamelModel):
    vocabulary_complexity: float
    sentence_length: float
    filler_word_frequency: float


class VoiceCharacteristicsOut(CamelModel):
    pitch: Pitch
    pace: Pace
    tonality: Tonality
    linguistic: Linguistic
    acoustic_source: str
    acoustic_confidence: float


class SpeakingPatternsOut(CamelModel):
    average_segment_length: float
    average_turn_length: float
    interruption_frequency: float
    response_latency: float
    topic_initiation_rate: float


class ParticipationOut(CamelModel):
    total_speaking_time: float
    segment_count: int
    word_count: int
    dominance_score: float
    engagement_level: float


class RecognitionEntryOut(CamelModel):
    timestamp: float
    confidence: float
    context_clues: List[str] = []


class SpeakerProfileOut(CamelModel):
    id: str
    name: Optional[str] = None
    confidence: float
    voice_characteristics: VoiceCharacteristicsOut
    speaking_patterns: SpeakingPatternsOut
    participation_metrics: ParticipationOut
    recognition_history: List[RecognitionEntryOut] = []


class TurnEntryOut(CamelModel):
    speaker_id: str
    start: float
    end: float


class TurnOut(CamelModel):
    speaker_id: str
    start: float
    end: float
    segment_count: int


class TurnTransitionOut(CamelModel):
    # "from" is a Python keyword
    from_speaker: str = Field(alias="from")
    to_speaker: str = Field(alias="to")
    timestamp: float
    type: str
    gap: float


class TurnTakingOut(CamelModel):
    pattern: List[TurnEntryOut] = []
    interruption_matrix: Dict[str, Dict[str, int]] = {}
    average_turn_length: Dict[str, float] = {}
    turn_transitions: List[TurnTransitionOut] = []
    turns: List[TurnOut] = []


class TemporalConfidenceOut(CamelModel):
    timestamp: float
    confidence: float


class ConfidenceOut(CamelModel):
    overall: float
    by_speaker: Dict[str, float] = {}
    temporal: List[TemporalConfidenceOut] = []
    acoustic_by_speaker: Dict[str, float] = {}
    below_threshold: List[str] = []


class InsightsOut(CamelModel):
    dominant_speaker: Optional[str] = None
    most_engaged: Optional[str] = None
    conversation_dynamics: str
    collaboration_level: float
    meeting_balance: float


class ConversationAnalysisResponse(CamelModel):
    """Serialized Conversation Analysis returned to callers"""
    speakers: List[SpeakerProfileOut] = []
    speaking_time: Dict[str, float] = {}
    turn_taking: TurnTakingOut
    voice_characteristics: Dict[str, VoiceCharacteristicsOut] = {}
    confidence: ConfidenceOut
    insights: InsightsOut

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
