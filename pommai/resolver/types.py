"""Pydantic models and enums for command resolution."""

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict


class TriggerCategory(str, Enum):
    """What a trigger selects when it matches."""

    COMMAND = "command"
    LETTER = "letter"
    WORD = "word"


class MatchTier(str, Enum):
    """Which matching strategy produced a result."""

    EXACT = "exact"
    PARTIAL = "partial"
    SINGLE_CHAR = "single_char"


class LetterInfo(BaseModel):
    """A letter to display.

    ``display_form`` is the consonant with its pulli or other combining
    marks stripped; vowels keep the glyph as written.
    """

    model_config = ConfigDict(frozen=True)

    display_form: str
    name: str
    letter: str = ""
    sound: str = ""


class WordInfo(BaseModel):
    """A vocabulary word to display."""

    model_config = ConfigDict(frozen=True)

    surface_form: str
    transliteration: str = ""
    gloss_english: str = ""
    pronunciation: str = ""
    meaning: str = ""
    category: str = ""
    illustration: str | None = None
    icon: str | None = None


# Command payloads are plain animation keys such as "walk".
TriggerPayload = Union[LetterInfo, WordInfo, str]


class TriggerEntry(BaseModel):
    """One pre-normalized trigger phrase and what it selects."""

    model_config = ConfigDict(frozen=True)

    trigger_text: str
    normalized_text: str
    length: int
    category: TriggerCategory
    payload: TriggerPayload


class MatchResult(BaseModel):
    """Outcome of resolving one transcript."""

    found: bool
    category: TriggerCategory | None = None
    payload: TriggerPayload | None = None
    matched_trigger: str | None = None
    tier: MatchTier | None = None
    token: str | None = None

    @classmethod
    def no_match(cls) -> "MatchResult":
        return cls(found=False)

    @classmethod
    def from_entry(cls, entry: TriggerEntry, tier: MatchTier, token: str) -> "MatchResult":
        return cls(
            found=True,
            category=entry.category,
            payload=entry.payload,
            matched_trigger=entry.trigger_text,
            tier=tier,
            token=token,
        )
