"""Builds the flat trigger list from command, letter and word tables.

Every raw trigger is normalized once here; the matcher only ever compares
the cached ``normalized_text``.  Malformed vocabulary records are dropped
with a warning instead of aborting the build.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from pommai.config import LETTER_NAME_SUFFIXES
from pommai.resolver.normalizer import normalize, strip_marks
from pommai.resolver.types import (
    LetterInfo,
    TriggerCategory,
    TriggerEntry,
    TriggerPayload,
    WordInfo,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Vocabulary records (input side)
# ---------------------------------------------------------------------------


class LetterRecord(BaseModel):
    """One row of the letter table."""

    letter: str
    name: str = ""
    sound: str = ""
    kind: Literal["vowel", "consonant"] = "consonant"

    @field_validator("letter")
    @classmethod
    def _letter_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("letter must not be blank")
        return value.strip()


class WordRecord(BaseModel):
    """One row of the word table."""

    word: str
    transliteration: str = ""
    english: str = ""
    pronunciation: str = ""
    meaning: str = ""
    category: str = ""
    image: str | None = Field(
        default=None, validation_alias=AliasChoices("image", "imageUrl")
    )
    icon: str | None = Field(default=None, validation_alias=AliasChoices("icon", "emoji"))

    @field_validator("word")
    @classmethod
    def _word_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("word must not be blank")
        return value.strip()


# ---------------------------------------------------------------------------
# Trigger derivation
# ---------------------------------------------------------------------------


def letter_display_form(record: LetterRecord) -> str:
    """Consonants lose their combining marks; vowels are shown as written."""
    if record.kind == "vowel":
        return record.letter
    return strip_marks(record.letter) or record.letter


def strip_name_suffix(name: str, suffixes: Iterable[str] = LETTER_NAME_SUFFIXES) -> str:
    """Drop the first matching suffix morpheme from a spoken letter name."""
    for suffix in sorted(suffixes, key=len, reverse=True):
        if suffix and name.endswith(suffix):
            return name[: -len(suffix)]
    return name


def letter_triggers(record: LetterRecord) -> list[str]:
    """Raw trigger spellings for one letter, in derivation order."""
    candidates = [record.letter]
    base = letter_display_form(record)
    if base != record.letter:
        candidates.append(base)
    if record.name:
        candidates.append(record.name)
        candidates.append(strip_name_suffix(record.name))
    return candidates


def _make_entry(
    raw: str, category: TriggerCategory, payload: TriggerPayload
) -> TriggerEntry | None:
    normalized = normalize(raw)
    if not normalized:
        return None
    return TriggerEntry(
        trigger_text=raw,
        normalized_text=normalized,
        length=len(normalized),
        category=category,
        payload=payload,
    )


def _entries_for(
    raws: Iterable[str], category: TriggerCategory, payload: TriggerPayload
) -> list[TriggerEntry]:
    """Build entries for one payload, skipping empty and duplicate spellings."""
    entries: list[TriggerEntry] = []
    seen: set[str] = set()
    for raw in raws:
        entry = _make_entry(raw, category, payload)
        if entry is None or entry.normalized_text in seen:
            continue
        seen.add(entry.normalized_text)
        entries.append(entry)
    return entries


def _coerce(model: type[BaseModel], row: Any, table: str) -> Any | None:
    if isinstance(row, model):
        return row
    try:
        return model.model_validate(row)
    except ValidationError as exc:
        logger.warning(
            "Dropping %s entry %r: %s", table, row, exc.errors()[0].get("msg", exc)
        )
        return None


def build_command_triggers(commands: Mapping[str, Iterable[str]]) -> list[TriggerEntry]:
    entries: list[TriggerEntry] = []
    for key, raw_phrases in commands.items():
        if isinstance(raw_phrases, str):
            raw_phrases = [raw_phrases]
        phrases = [p for p in raw_phrases if isinstance(p, str)]
        if not key or not phrases:
            logger.warning("Skipping command %r with no trigger phrases", key)
            continue
        entries.extend(_entries_for(phrases, TriggerCategory.COMMAND, key))
    return entries


def build_letter_triggers(letters: Iterable[Any]) -> list[TriggerEntry]:
    entries: list[TriggerEntry] = []
    for row in letters:
        record = _coerce(LetterRecord, row, "letter")
        if record is None:
            continue
        info = LetterInfo(
            display_form=letter_display_form(record),
            name=record.name,
            letter=record.letter,
            sound=record.sound,
        )
        entries.extend(
            _entries_for(letter_triggers(record), TriggerCategory.LETTER, info)
        )
    return entries


def build_word_triggers(words: Iterable[Any]) -> list[TriggerEntry]:
    entries: list[TriggerEntry] = []
    for row in words:
        record = _coerce(WordRecord, row, "word")
        if record is None:
            continue
        info = WordInfo(
            surface_form=record.word,
            transliteration=record.transliteration,
            gloss_english=record.english,
            pronunciation=record.pronunciation,
            meaning=record.meaning,
            category=record.category,
            illustration=record.image,
            icon=record.icon,
        )
        raws = [record.word, record.transliteration, record.pronunciation]
        entries.extend(_entries_for(raws, TriggerCategory.WORD, info))
    return entries


def build_triggers(
    commands: Mapping[str, Iterable[str]] | None = None,
    letters: Iterable[Any] | None = None,
    words: Iterable[Any] | None = None,
) -> list[TriggerEntry]:
    """Flatten the three vocabulary tables into trigger entries.

    Order is commands, then letters, then words.  Order carries no priority;
    the matcher decides precedence between categories.
    """
    entries = build_command_triggers(commands or {})
    entries += build_letter_triggers(letters or [])
    entries += build_word_triggers(words or [])
    logger.debug("Built %d triggers", len(entries))
    return entries


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TriggerRegistry:
    """Immutable collection of trigger entries."""

    def __init__(self, entries: Iterable[TriggerEntry]) -> None:
        self._entries: tuple[TriggerEntry, ...] = tuple(
            e for e in entries if e.normalized_text
        )

    @classmethod
    def from_tables(
        cls,
        commands: Mapping[str, Iterable[str]] | None = None,
        letters: Iterable[Any] | None = None,
        words: Iterable[Any] | None = None,
    ) -> "TriggerRegistry":
        return cls(build_triggers(commands, letters, words))

    @property
    def entries(self) -> tuple[TriggerEntry, ...]:
        return self._entries

    def by_category(self, category: TriggerCategory) -> list[TriggerEntry]:
        return [e for e in self._entries if e.category == category]

    def counts(self) -> dict[str, int]:
        """Number of triggers per category value."""
        return {c.value: len(self.by_category(c)) for c in TriggerCategory}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TriggerEntry]:
        return iter(self._entries)
