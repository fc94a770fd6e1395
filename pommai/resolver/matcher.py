"""Maps a normalized transcript to the best trigger in a registry.

Uses a fixed priority chain of matching tiers (first success wins):

1. Exact: a transcript token equals a trigger.  Words beat letters, letters
   beat commands, so a spoken word that is also a letter name shows the word.
   With ``match_phrases`` on, multi-word triggers also match a contiguous
   run of tokens here, ahead of the partial tier.
2. Partial: the longest letter or command trigger contained in a token.
   Commands must be at least ``min_command_length`` long; words never take
   part.
3. Single character: a clipped one-glyph utterance that contains a letter's
   display form.
"""

from __future__ import annotations

import logging

from pommai.config import (
    MATCH_PHRASES,
    MIN_PARTIAL_COMMAND_LENGTH,
    MIN_PARTIAL_LETTER_LENGTH,
)
from pommai.resolver.normalizer import tokenize
from pommai.resolver.registry import TriggerRegistry
from pommai.resolver.types import (
    LetterInfo,
    MatchResult,
    MatchTier,
    TriggerCategory,
    TriggerEntry,
)

logger = logging.getLogger(__name__)

# Exact-tier lookup order.
_EXACT_PRIORITY = (TriggerCategory.WORD, TriggerCategory.LETTER, TriggerCategory.COMMAND)


class TriggerMatcher:
    """Resolves transcripts against an immutable :class:`TriggerRegistry`.

    All indexes are built in ``__init__``; ``resolve`` only reads them, so a
    single matcher can serve concurrent callers.
    """

    def __init__(
        self,
        registry: TriggerRegistry,
        *,
        min_letter_length: int = MIN_PARTIAL_LETTER_LENGTH,
        min_command_length: int = MIN_PARTIAL_COMMAND_LENGTH,
        match_phrases: bool = MATCH_PHRASES,
    ) -> None:
        self._registry = registry
        self._match_phrases = match_phrases
        self._min_length = {
            TriggerCategory.LETTER: min_letter_length,
            TriggerCategory.COMMAND: min_command_length,
        }

        # First entry wins for duplicate normalized text within a category.
        self._exact: dict[TriggerCategory, dict[str, TriggerEntry]] = {
            c: {} for c in TriggerCategory
        }
        self._phrases: dict[TriggerCategory, list[tuple[list[str], TriggerEntry]]] = {
            c: [] for c in TriggerCategory
        }
        for entry in registry:
            self._exact[entry.category].setdefault(entry.normalized_text, entry)
            if " " in entry.normalized_text:
                self._phrases[entry.category].append(
                    (entry.normalized_text.split(" "), entry)
                )

        # sorted() is stable: equal lengths keep registry order.
        self._partial: list[TriggerEntry] = sorted(
            (
                e
                for e in registry
                if e.category in (TriggerCategory.LETTER, TriggerCategory.COMMAND)
            ),
            key=lambda e: e.length,
            reverse=True,
        )
        self._letters: list[TriggerEntry] = registry.by_category(TriggerCategory.LETTER)

    @property
    def registry(self) -> TriggerRegistry:
        return self._registry

    def resolve_text(self, transcript: str) -> MatchResult:
        """Normalize, tokenize and resolve a raw transcript."""
        return self.resolve(tokenize(transcript))

    def resolve(self, words: list[str]) -> MatchResult:
        """Resolve already-normalized transcript *words*.

        Returns ``MatchResult.no_match()`` when no tier finds anything.
        """
        words = [w for w in words if w]
        if not words:
            return MatchResult.no_match()

        result = self._try_exact(words)
        if result is None:
            result = self._try_partial(words)
        if result is None:
            result = self._try_single_char(words)
        if result is None:
            logger.debug("No match for %r", " ".join(words))
            return MatchResult.no_match()

        logger.debug(
            "Matched %r via %s tier (%s: %s)",
            result.token,
            result.tier.value,
            result.category.value,
            result.matched_trigger,
        )
        return result

    # --------------------------------------------------------------------- #
    # Tier 1: exact
    # --------------------------------------------------------------------- #

    def _try_exact(self, words: list[str]) -> MatchResult | None:
        for token in words:
            for category in _EXACT_PRIORITY:
                entry = self._exact[category].get(token)
                if entry is not None:
                    return MatchResult.from_entry(entry, MatchTier.EXACT, token)

        # Multi-word triggers can never equal a single token.
        if self._match_phrases and len(words) > 1:
            for category in _EXACT_PRIORITY:
                for parts, entry in self._phrases[category]:
                    if _contains_run(words, parts):
                        return MatchResult.from_entry(
                            entry, MatchTier.EXACT, " ".join(parts)
                        )
        return None

    # --------------------------------------------------------------------- #
    # Tier 2: longest partial
    # --------------------------------------------------------------------- #

    def _try_partial(self, words: list[str]) -> MatchResult | None:
        for entry in self._partial:
            if entry.length < self._min_length[entry.category]:
                continue
            for token in words:
                if entry.normalized_text in token:
                    return MatchResult.from_entry(entry, MatchTier.PARTIAL, token)
        return None

    # --------------------------------------------------------------------- #
    # Tier 3: single character fallback
    # --------------------------------------------------------------------- #

    def _try_single_char(self, words: list[str]) -> MatchResult | None:
        joined = " ".join(words)
        if len(joined) != 1 and not any(len(w) == 1 for w in words):
            return None

        for entry in self._letters:
            info = entry.payload
            if not isinstance(info, LetterInfo) or not info.display_form:
                continue
            if info.display_form in joined or info.display_form in words:
                return MatchResult.from_entry(entry, MatchTier.SINGLE_CHAR, joined)
        return None


def _contains_run(words: list[str], parts: list[str]) -> bool:
    """Whether *parts* appears as a contiguous run inside *words*."""
    size = len(parts)
    return any(words[i : i + size] == parts for i in range(len(words) - size + 1))
