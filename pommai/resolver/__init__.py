"""Transcript normalization and tiered trigger matching."""

from pommai.resolver.matcher import TriggerMatcher
from pommai.resolver.normalizer import normalize, tokenize
from pommai.resolver.registry import TriggerRegistry, build_triggers
from pommai.resolver.types import (
    LetterInfo,
    MatchResult,
    MatchTier,
    TriggerCategory,
    TriggerEntry,
    WordInfo,
)

__all__ = [
    "LetterInfo",
    "MatchResult",
    "MatchTier",
    "TriggerCategory",
    "TriggerEntry",
    "TriggerMatcher",
    "TriggerRegistry",
    "WordInfo",
    "build_triggers",
    "normalize",
    "tokenize",
]
