"""Text helpers shared by the analysis stages.

Tokenization is deliberately simple: lowercase word tokens, no language
specific handling.
"""

import re
from typing import List

_TOKEN_PATTERN = re.compile(r"[\w']+")

# Filler word pattern: whole-word match, case-insensitive.
# Ordered longest-first so "you know" matches before "you".
FILLER_PHRASES = [
    r"you know",
    r"i mean",
    r"sort of",
    r"kind of",
    r"basically",
    r"actually",
    r"like",
    r"um",
    r"uh",
]
_FILLER_PATTERN = re.compile(
    r"\b(?:" + "|".join(FILLER_PHRASES) + r")\b",
    re.IGNORECASE,
)
_SENTENCE_SPLIT = re.compile(r"[.!?]+")


def tokenize(text: str) -> List[str]:
    """Lowercased word tokens of text."""
    return _TOKEN_PATTERN.findall(text.lower())


def word_count(text: str) -> int:
    return len(tokenize(text))


def count_fillers(text: str) -> int:
    """Number of filler words and phrases in text.

    "like" as a filler is indistinguishable from "like" as a verb here, so
    "I like this" counts one filler.
    """
    return len(_FILLER_PATTERN.findall(text))


def split_sentences(text: str) -> List[str]:
    """Split on runs of . ! ? and drop fragments with no words."""
    return [s.strip() for s in _SENTENCE_SPLIT.split(text) if tokenize(s)]


def is_question(text: str) -> bool:
    return text.rstrip().endswith("?")
