"""Domain <-> DTO mappers.

Converts between pydantic DTOs (models.py) and domain dataclasses
(domain/models.py). Pydantic validation failures surface as
InvalidInputError so callers handle a single error type.
"""

from dataclasses import asdict
from typing import Any

from pydantic import ValidationError

from domain.models import ConversationAnalysis, Segment
from exceptions import InvalidInputError
from models import AnalysisRequestIn, ConversationAnalysisResponse, SegmentIn
from use_cases.analyze_conversation import AnalyzeRequest


def dto_to_segment(dto: SegmentIn) -> Segment:
    """Convert a SegmentIn DTO to a domain Segment."""
    return Segment(
        id=dto.id,
        start=dto.start,
        end=dto.end,
        text=dto.text,
        speaker_hint=dto.speaker_hint,
        confidence=dto.confidence,
    )


def parse_segments(raw: list[dict[str, Any]]) -> list[Segment]:
    """Validate raw segment dicts (camelCase or snake_case keys), preserving order."""
    try:
        dtos = [SegmentIn.model_validate(item) for item in raw]
    except ValidationError as e:
        raise InvalidInputError(f"Invalid segment: {e}") from e
    return [dto_to_segment(dto) for dto in dtos]


def parse_request(payload: dict[str, Any]) -> AnalyzeRequest:
    """Validate a raw request payload into an AnalyzeRequest."""
    try:
        dto = AnalysisRequestIn.model_validate(payload)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid analysis request: {e}") from e
    return AnalyzeRequest(
        segments=[dto_to_segment(s) for s in dto.segments],
        speaker_names=dict(dto.speaker_names),
    )


def analysis_to_dto(analysis: ConversationAnalysis) -> ConversationAnalysisResponse:
    """Convert a domain ConversationAnalysis to its response DTO."""
    return ConversationAnalysisResponse.model_validate(asdict(analysis))
