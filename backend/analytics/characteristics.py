"""Per-speaker voice and linguistic characteristics.

Linguistic and pace metrics are derived from text and timestamps. Pitch and
tonality need real audio; they come from an AcousticFeaturePort when the
caller supplies one, otherwise fixed placeholders flagged with
acoustic_confidence 0.0.
"""

import logging
from typing import List, Optional

import numpy as np

from config import Thresholds
from domain.models import (
    MEASURED,
    PLACEHOLDER,
    AcousticFeatures,
    LinguisticMetrics,
    PaceMetrics,
    PitchMetrics,
    Segment,
    TonalityMetrics,
    VoiceCharacteristics,
)
from exceptions import ComputationError
from ports.acoustics import AcousticFeaturePort
from analytics.text_metrics import count_fillers, split_sentences, tokenize

logger = logging.getLogger(__name__)

# Stand-ins for signal analysis that is not available.
PLACEHOLDER_PITCH = PitchMetrics(average=150.0, range=50.0, variance=0.3)
PLACEHOLDER_TONALITY = TonalityMetrics(emotional_variance=0.4, energy_level=0.6, clarity=0.8)


def _safe_div(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def words_per_minute(segments: List[Segment]) -> float:
    words = sum(len(tokenize(seg.text)) for seg in segments)
    minutes = sum(seg.duration for seg in segments) / 60.0
    return _safe_div(words, minutes)


def pace_variance(segments: List[Segment]) -> float:
    """Coefficient of variation of per-segment speaking rate."""
    rates = [len(tokenize(seg.text)) / (seg.duration / 60.0) for seg in segments if seg.duration > 0]
    if len(rates) < 2:
        return 0.0
    mean = float(np.mean(rates))
    return _safe_div(float(np.std(rates)), mean)


def pause_frequency(segments: List[Segment], pause_gap: float) -> float:
    """Pauses longer than pause_gap between the speaker's own segments, per minute of span."""
    if len(segments) < 2:
        return 0.0
    pauses = sum(
        1 for prev, seg in zip(segments, segments[1:]) if seg.start - prev.end > pause_gap
    )
    span_minutes = (segments[-1].end - segments[0].start) / 60.0
    return _safe_div(pauses, span_minutes)


def linguistic_metrics(segments: List[Segment]) -> LinguisticMetrics:
    text = " ".join(seg.text for seg in segments)
    tokens = tokenize(text)
    sentences = split_sentences(text)
    sentence_length = _safe_div(sum(len(tokenize(s)) for s in sentences), len(sentences))
    return LinguisticMetrics(
        vocabulary_complexity=_safe_div(len(set(tokens)), len(tokens)),
        sentence_length=sentence_length,
        filler_word_frequency=_safe_div(count_fillers(text), len(tokens)),
    )


def _measurements(speaker_id: str, name: str, values: list) -> List[float]:
    """Coerce provider values to finite floats, dropping absent ones."""
    present = [v for v in values if v is not None]
    try:
        measured = np.asarray(present, dtype=float)
    except (TypeError, ValueError) as e:
        raise ComputationError(speaker_id, f"acoustic provider returned non-numeric {name}: {e}") from e
    if measured.ndim != 1:
        raise ComputationError(speaker_id, f"acoustic provider returned non-scalar {name}")
    if not np.all(np.isfinite(measured)):
        raise ComputationError(speaker_id, f"acoustic provider returned non-finite {name}")
    return [float(v) for v in measured]


def _measure_acoustics(
    speaker_id: str,
    segments: List[Segment],
    provider: AcousticFeaturePort,
) -> tuple[PitchMetrics, TonalityMetrics, float]:
    """Aggregate provider measurements. Any provider failure becomes a ComputationError."""
    try:
        features = provider.extract(segments)
    except Exception as e:
        raise ComputationError(speaker_id, f"acoustic provider failed: {e}") from e

    if (
        not isinstance(features, list)
        or len(features) != len(segments)
        or not all(isinstance(f, AcousticFeatures) for f in features)
    ):
        raise ComputationError(speaker_id, "acoustic provider returned a malformed feature list")

    pitches = _measurements(speaker_id, "pitch", [f.pitch_hz for f in features])
    energies = _measurements(speaker_id, "energy", [f.energy for f in features])
    clarities = _measurements(speaker_id, "clarity", [f.clarity for f in features])
    reported = _measurements(speaker_id, "confidence", [f.confidence for f in features])
    if not pitches and not energies and not clarities:
        raise ComputationError(speaker_id, "acoustic provider returned no measurements")

    pitch = PitchMetrics(**vars(PLACEHOLDER_PITCH))
    if pitches:
        mean_pitch = float(np.mean(pitches))
        pitch = PitchMetrics(
            average=mean_pitch,
            range=float(np.max(pitches) - np.min(pitches)),
            variance=_safe_div(float(np.std(pitches)), mean_pitch),
        )
    tonality = TonalityMetrics(
        emotional_variance=float(np.std(energies)) if energies else PLACEHOLDER_TONALITY.emotional_variance,
        energy_level=float(np.mean(energies)) if energies else PLACEHOLDER_TONALITY.energy_level,
        clarity=float(np.mean(clarities)) if clarities else PLACEHOLDER_TONALITY.clarity,
    )
    confidence = float(np.mean(reported)) if reported else 1.0
    return pitch, tonality, confidence


def extract_characteristics(
    speaker_id: str,
    segments: List[Segment],
    thresholds: Thresholds,
    acoustic_provider: Optional[AcousticFeaturePort] = None,
) -> VoiceCharacteristics:
    """Derive one speaker's characteristics from their ordered segments."""
    pace = PaceMetrics(
        words_per_minute=words_per_minute(segments),
        variance=pace_variance(segments),
        pause_frequency=pause_frequency(segments, thresholds.pause_gap),
    )
    characteristics = VoiceCharacteristics(
        pitch=PitchMetrics(**vars(PLACEHOLDER_PITCH)),
        pace=pace,
        tonality=TonalityMetrics(**vars(PLACEHOLDER_TONALITY)),
        linguistic=linguistic_metrics(segments),
        acoustic_source=PLACEHOLDER,
        acoustic_confidence=0.0,
    )

    if acoustic_provider is None or not segments:
        return characteristics

    try:
        pitch, tonality, confidence = _measure_acoustics(speaker_id, segments, acoustic_provider)
    except ComputationError as e:
        logger.warning(f"Acoustic features degraded to placeholders for speaker {speaker_id}: {e}")
        return characteristics

    characteristics.pitch = pitch
    characteristics.tonality = tonality
    characteristics.acoustic_source = MEASURED
    characteristics.acoustic_confidence = confidence
    return characteristics
