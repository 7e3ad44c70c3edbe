"""Typed errors raised by the speaker analytics engine."""


class SpeakerAnalyticsError(Exception):
    """Base class for all engine errors."""


class InvalidInputError(SpeakerAnalyticsError):
    """The segment list violates an input precondition.

    Raised for out-of-order segments, segments ending before they start,
    empty text and confidence values outside [0, 1]. Segments are never
    reordered or repaired silently.
    """


class ComputationError(SpeakerAnalyticsError):
    """A caller-supplied acoustic feature provider failed."""

    def __init__(self, speaker_id: str, message: str):
        super().__init__(f"{speaker_id}: {message}")
        self.speaker_id = speaker_id
