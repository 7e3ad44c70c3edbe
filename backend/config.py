import os
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Any

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()

# A hint-less segment starting more than this many seconds after the previous
# one ends is attributed to a different speaker. Ambiguous cases keep the
# current speaker.
DEFAULT_SPEAKER_CHANGE_GAP = 2.0
# Silence between a speaker's own consecutive segments counted as a pause.
DEFAULT_PAUSE_GAP = 1.0
# A segment starting within this many seconds of another speaker's segment
# counts as a response.
DEFAULT_RESPONSE_WINDOW = 5.0
# Overlap (seconds) beyond which a speaker change is an interruption.
DEFAULT_INTERRUPTION_OVERLAP = 0.5
# Silence (seconds) beyond which a speaker change is a gap transition.
DEFAULT_TURN_GAP = 2.0
DEFAULT_SEGMENT_CONFIDENCE = 0.8
DEFAULT_HINT_CONFIDENCE = 0.95
DEFAULT_INFERRED_CONFIDENCE = 0.6
DEFAULT_CONFIDENCE_THRESHOLD = 0.5
DEFAULT_MAX_WORKERS = 4


@dataclass(frozen=True)
class Thresholds:
    """Tunable constants shared by the analysis stages."""
    speaker_change_gap: float = DEFAULT_SPEAKER_CHANGE_GAP
    pause_gap: float = DEFAULT_PAUSE_GAP
    response_window: float = DEFAULT_RESPONSE_WINDOW
    interruption_overlap: float = DEFAULT_INTERRUPTION_OVERLAP
    turn_gap: float = DEFAULT_TURN_GAP
    default_segment_confidence: float = DEFAULT_SEGMENT_CONFIDENCE
    hint_confidence: float = DEFAULT_HINT_CONFIDENCE
    inferred_confidence: float = DEFAULT_INFERRED_CONFIDENCE
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD


class Config:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self.debug = os.environ.get("DEBUG", "0") == "1"
        self.speaker_change_gap = float(os.environ.get("SPEAKER_CHANGE_GAP", DEFAULT_SPEAKER_CHANGE_GAP))
        self.pause_gap = float(os.environ.get("PAUSE_GAP", DEFAULT_PAUSE_GAP))
        self.response_window = float(os.environ.get("RESPONSE_WINDOW", DEFAULT_RESPONSE_WINDOW))
        self.interruption_overlap = float(os.environ.get("INTERRUPTION_OVERLAP", DEFAULT_INTERRUPTION_OVERLAP))
        self.turn_gap = float(os.environ.get("TURN_GAP", DEFAULT_TURN_GAP))
        self.default_segment_confidence = float(
            os.environ.get("DEFAULT_SEGMENT_CONFIDENCE", DEFAULT_SEGMENT_CONFIDENCE)
        )
        self.hint_confidence = float(os.environ.get("HINT_CONFIDENCE", DEFAULT_HINT_CONFIDENCE))
        self.inferred_confidence = float(os.environ.get("INFERRED_CONFIDENCE", DEFAULT_INFERRED_CONFIDENCE))
        self.confidence_threshold = float(os.environ.get("CONFIDENCE_THRESHOLD", DEFAULT_CONFIDENCE_THRESHOLD))
        self.max_workers = int(os.environ.get("MAX_WORKERS", DEFAULT_MAX_WORKERS))
        self.voiceprint_store = os.environ.get("VOICEPRINT_STORE", "").strip() or None

        if self.max_workers < 1:
            raise ValueError(f"MAX_WORKERS must be >= 1, got {self.max_workers}")

    def thresholds(self) -> Thresholds:
        return Thresholds(
            speaker_change_gap=self.speaker_change_gap,
            pause_gap=self.pause_gap,
            response_window=self.response_window,
            interruption_overlap=self.interruption_overlap,
            turn_gap=self.turn_gap,
            default_segment_confidence=self.default_segment_confidence,
            hint_confidence=self.hint_confidence,
            inferred_confidence=self.inferred_confidence,
            confidence_threshold=self.confidence_threshold,
        )

    def get_voiceprint_store(self) -> Optional[str]:
        return self.voiceprint_store

    def as_dict(self) -> Dict[str, Any]:
        return {
            "debug": self.debug,
            "speaker_change_gap": self.speaker_change_gap,
            "pause_gap": self.pause_gap,
            "response_window": self.response_window,
            "interruption_overlap": self.interruption_overlap,
            "turn_gap": self.turn_gap,
            "default_segment_confidence": self.default_segment_confidence,
            "hint_confidence": self.hint_confidence,
            "inferred_confidence": self.inferred_confidence,
            "confidence_threshold": self.confidence_threshold,
            "max_workers": self.max_workers,
            "has_voiceprint_store": self.voiceprint_store is not None,
        }


config = Config()


def get_config() -> Config:
    return config


def create_analysis_adapters(cfg: Config):
    """Create the default clustering, identity and progress adapters.

    Uses lazy imports so adapters that are not configured are never loaded.
    The acoustic feature provider has no default: it is supplied by callers
    that have real audio measurements.
    """
    from adapters.heuristic.gap_clusterer import GapHeuristicClusterer
    from adapters.local.log_progress import LogProgressAdapter

    clusterer = GapHeuristicClusterer(speaker_change_gap=cfg.speaker_change_gap)

    identity_lookup = None
    store_path = cfg.get_voiceprint_store()
    if store_path:
        from adapters.local.json_voiceprint_store import JsonFileVoiceprintStore
        identity_lookup = JsonFileVoiceprintStore(store_path)

    adapters = {
        "clusterer": clusterer,
        "identity_lookup": identity_lookup,
        "progress": LogProgressAdapter(),
    }
    logger.info(
        "Analysis adapters: "
        + ", ".join(f"{k}={type(v).__name__ if v else 'none'}" for k, v in adapters.items())
    )
    return adapters


def create_analysis_use_case(cfg: Config, acoustic_provider=None):
    """Wire the analysis use case from config, optionally with an acoustic provider."""
    from use_cases.analyze_conversation import AnalyzeConversationUseCase
    from logging_setup import configure_logging

    configure_logging(cfg.debug)

    adapters = create_analysis_adapters(cfg)
    return AnalyzeConversationUseCase(
        clusterer=adapters["clusterer"],
        progress=adapters["progress"],
        thresholds=cfg.thresholds(),
        identity_lookup=adapters["identity_lookup"],
        acoustic_provider=acoustic_provider,
        max_workers=cfg.max_workers,
    )
