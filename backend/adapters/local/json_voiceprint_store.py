"""Local identity lookups: a JSON file of enrolled speakers, and an in-memory store.

The JSON file is maintained by the caller, e.g.:

    {"speakers": [{"key": "spk-42", "name": "Alice", "confidence": 0.9, "active": true}]}

A cluster is recognised when its id (the transcript's speaker hint) matches an
enrolled key. The engine only ever reads through these adapters.
"""

import json
import logging
from typing import Optional

from domain.models import IdentityMatch, Segment
from ports.identity_lookup import IdentityLookupPort

logger = logging.getLogger(__name__)

DEFAULT_MATCH_CONFIDENCE = 0.9


class JsonFileVoiceprintStore(IdentityLookupPort):
    def __init__(self, store_file: str):
        self._store_file = store_file

    def _load(self) -> dict:
        try:
            with open(self._store_file) as f:
                data = json.load(f)
            return {s["key"]: s for s in data.get("speakers", []) if s.get("active", True)}
        except (FileNotFoundError, json.JSONDecodeError) as e:
            logger.warning(f"Could not load voiceprint store: {e}")
            return {}

    def lookup(self, cluster_id: str, segments: list[Segment]) -> Optional[IdentityMatch]:
        entry = self._load().get(cluster_id)
        if not entry or not entry.get("name"):
            return None
        return IdentityMatch(
            name=entry["name"],
            confidence=float(entry.get("confidence", DEFAULT_MATCH_CONFIDENCE)),
        )


class InMemoryVoiceprintStore(IdentityLookupPort):
    """Identity lookup backed by a dict, for callers that keep enrolments in memory."""

    def __init__(self, known: Optional[dict[str, IdentityMatch]] = None):
        self._known = dict(known or {})

    def enroll(self, key: str, name: str, confidence: float = DEFAULT_MATCH_CONFIDENCE) -> None:
        self._known[key] = IdentityMatch(name=name, confidence=confidence)

    def lookup(self, cluster_id: str, segments: list[Segment]) -> Optional[IdentityMatch]:
        return self._known.get(cluster_id)
