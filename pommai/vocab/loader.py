"""Loads vocabulary tables from JSON and flattens their grouped layouts.

Accepted file layout::

    {
      "commands": {"walk": ["நட", "நடை"], ...},
      "letters": [...] | {"vowels": [...], "consonants": [...]},
      "words": [...] | {"animals": [...], "family": [...], ...}
    }

Grouped letters take their ``kind`` from the group name; grouped words take
their ``category`` from the group name unless the record has one.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from pommai.resolver.registry import TriggerRegistry
from pommai.vocab import defaults

logger = logging.getLogger(__name__)

_LETTER_GROUPS = {"vowels": "vowel", "consonants": "consonant"}


class VocabularyTables(BaseModel):
    """The three raw tables the trigger registry is built from."""

    commands: dict[str, list[str]] = Field(default_factory=dict)
    letters: list[dict[str, Any]] = Field(default_factory=list)
    words: list[dict[str, Any]] = Field(default_factory=list)

    def build_registry(self) -> TriggerRegistry:
        return TriggerRegistry.from_tables(self.commands, self.letters, self.words)


def flatten_letters(raw: Any) -> list[dict[str, Any]]:
    """Return a flat letter list from a list or a vowels/consonants mapping."""
    if isinstance(raw, list):
        return [row for row in raw if isinstance(row, dict)]
    if not isinstance(raw, dict):
        return []

    rows: list[dict[str, Any]] = []
    for group, items in raw.items():
        kind = _LETTER_GROUPS.get(group)
        if kind is None:
            logger.warning("Ignoring unknown letter group %r", group)
            continue
        for row in items or []:
            if isinstance(row, dict):
                rows.append({"kind": kind, **row})
    return rows


def flatten_words(raw: Any) -> list[dict[str, Any]]:
    """Return a flat word list from a list or a category -> words mapping."""
    if isinstance(raw, list):
        return [row for row in raw if isinstance(row, dict)]
    if not isinstance(raw, dict):
        return []

    rows: list[dict[str, Any]] = []
    for category, items in raw.items():
        if not isinstance(items, list):
            continue
        for row in items:
            if isinstance(row, dict):
                rows.append({"category": category, **row})
    return rows


def tables_from_data(data: dict[str, Any]) -> VocabularyTables:
    """Build :class:`VocabularyTables` from already-parsed JSON data."""
    commands = data.get("commands") or {}
    if not isinstance(commands, dict):
        logger.warning("Ignoring malformed commands table (%s)", type(commands).__name__)
        commands = {}
    return VocabularyTables(
        commands={
            str(key): [phrases] if isinstance(phrases, str) else list(phrases or [])
            for key, phrases in commands.items()
        },
        letters=flatten_letters(data.get("letters")),
        words=flatten_words(data.get("words")),
    )


def default_tables() -> VocabularyTables:
    """The built-in Tamil commands, letters and words."""
    return tables_from_data(
        {
            "commands": defaults.COMMANDS,
            "letters": {"vowels": defaults.VOWELS, "consonants": defaults.CONSONANTS},
            "words": defaults.WORDS,
        }
    )


def load_tables(path: Path | None = None) -> VocabularyTables:
    """Load tables from *path*, or the built-in tables when *path* is None.

    Raises ``OSError`` or ``json.JSONDecodeError`` when the file cannot be
    read; a vocabulary file that was asked for and is unusable is a
    configuration error, not something to paper over.
    """
    if path is None:
        return default_tables()

    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Vocabulary file {path} must contain a JSON object")
    tables = tables_from_data(data)
    logger.info(
        "Loaded vocabulary from %s (%d commands, %d letters, %d words)",
        path,
        len(tables.commands),
        len(tables.letters),
        len(tables.words),
    )
    return tables


def load_registry(path: Path | None = None) -> TriggerRegistry:
    return load_tables(path).build_registry()
