"""Tests for pommai.resolver.registry."""

import logging

import pytest

from pommai.resolver.registry import (
    LetterRecord,
    TriggerRegistry,
    build_triggers,
    letter_display_form,
    letter_triggers,
    strip_name_suffix,
)
from pommai.resolver.types import LetterInfo, TriggerCategory, WordInfo
from pommai.vocab.loader import default_tables


def _texts(entries, category):
    return [e.normalized_text for e in entries if e.category == category]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class TestCommandTriggers:
    def test_one_entry_per_phrase(self):
        entries = build_triggers({"sit": ["உட்கார்", "உட்காரு"]})
        assert [e.trigger_text for e in entries] == ["உட்கார்", "உட்காரு"]
        assert all(e.payload == "sit" for e in entries)
        assert all(e.category == TriggerCategory.COMMAND for e in entries)

    def test_length_is_cached_from_normalized_text(self):
        (entry,) = build_triggers({"walk": [" நட! "]})
        assert entry.trigger_text == " நட! "
        assert entry.normalized_text == "நட"
        assert entry.length == 2

    def test_command_without_phrases_skipped(self, caplog):
        with caplog.at_level(logging.WARNING):
            entries = build_triggers({"jump": [], "walk": ["நட"]})
        assert [e.payload for e in entries] == ["walk"]
        assert "jump" in caplog.text

    def test_single_string_phrase_accepted(self):
        entries = build_triggers({"walk": "நட"})
        assert _texts(entries, TriggerCategory.COMMAND) == ["நட"]

    def test_phrase_normalizing_to_empty_dropped(self):
        entries = build_triggers({"walk": ["...", "நட"]})
        assert _texts(entries, TriggerCategory.COMMAND) == ["நட"]


# ---------------------------------------------------------------------------
# Letters
# ---------------------------------------------------------------------------


class TestLetterTriggers:
    def test_consonant_triggers(self):
        record = LetterRecord(letter="க்", name="ககரம்", kind="consonant")
        assert letter_triggers(record) == ["க்", "க", "ககரம்", "க"]

    def test_consonant_display_form_strips_pulli(self):
        record = LetterRecord(letter="க்", name="ககரம்", kind="consonant")
        assert letter_display_form(record) == "க"

    def test_vowel_with_length_mark_keeps_single_glyph(self):
        # U+0B94 decomposes to U+0B92 plus the au length mark.
        record = LetterRecord(letter="ஔ", name="ஔகாரம்", kind="vowel")
        triggers = letter_triggers(record)
        assert "ஒ" not in triggers
        assert triggers == ["ஔ", "ஔகாரம்", "ஔ"]

    def test_vowel_display_form_unchanged(self):
        record = LetterRecord(letter="ஆ", name="ஆகாரம்", kind="vowel")
        assert letter_display_form(record) == "ஆ"

    def test_name_suffix_longest_first(self):
        assert strip_name_suffix("ஆகாரம்") == "ஆ"
        assert strip_name_suffix("அகரம்") == "அ"
        assert strip_name_suffix("ka") == "ka"

    def test_duplicate_spellings_collapsed(self):
        entries = build_triggers(
            letters=[{"letter": "க்", "name": "ககரம்", "kind": "consonant"}]
        )
        assert _texts(entries, TriggerCategory.LETTER) == ["க்", "க", "ககரம்"]

    def test_payload_is_letter_info(self):
        entries = build_triggers(letters=[{"letter": "அ", "name": "அகரம்", "kind": "vowel"}])
        info = entries[0].payload
        assert isinstance(info, LetterInfo)
        assert info.display_form == "அ"
        assert info.name == "அகரம்"

    def test_letter_missing_glyph_dropped(self, caplog):
        with caplog.at_level(logging.WARNING):
            entries = build_triggers(
                letters=[{"name": "ககரம்"}, {"letter": "அ", "kind": "vowel"}]
            )
        assert _texts(entries, TriggerCategory.LETTER) == ["அ"]
        assert "Dropping letter entry" in caplog.text

    def test_blank_glyph_dropped(self):
        assert build_triggers(letters=[{"letter": "  "}]) == []


# ---------------------------------------------------------------------------
# Words
# ---------------------------------------------------------------------------


class TestWordTriggers:
    def test_three_triggers_per_word(self):
        entries = build_triggers(
            words=[
                {
                    "word": "பூனை",
                    "transliteration": "Poonai",
                    "pronunciation": "poo-nai",
                    "english": "cat",
                }
            ]
        )
        assert _texts(entries, TriggerCategory.WORD) == ["பூனை", "poonai", "poo nai"]

    def test_word_info_fields(self):
        entries = build_triggers(
            words=[
                {
                    "word": "மீன்",
                    "english": "fish",
                    "category": "animals",
                    "imageUrl": "https://example.com/fish.svg",
                    "emoji": "🐠",
                }
            ]
        )
        info = entries[0].payload
        assert isinstance(info, WordInfo)
        assert info.surface_form == "மீன்"
        assert info.gloss_english == "fish"
        assert info.illustration == "https://example.com/fish.svg"
        assert info.icon == "🐠"

    def test_word_missing_surface_form_dropped(self, caplog):
        with caplog.at_level(logging.WARNING):
            entries = build_triggers(words=[{"english": "cat"}, {"word": "நாய்"}])
        assert _texts(entries, TriggerCategory.WORD) == ["நாய்"]
        assert "Dropping word entry" in caplog.text

    def test_missing_optional_forms_skipped(self):
        entries = build_triggers(words=[{"word": "நாய்", "transliteration": ""}])
        assert len(entries) == 1


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestTriggerRegistry:
    def test_every_entry_has_normalized_text(self):
        registry = default_tables().build_registry()
        assert len(registry) > 0
        for entry in registry:
            assert entry.normalized_text
            assert entry.length == len(entry.normalized_text)

    def test_by_category(self, registry: TriggerRegistry):
        letters = registry.by_category(TriggerCategory.LETTER)
        assert letters
        assert all(e.category == TriggerCategory.LETTER for e in letters)

    def test_counts(self, registry: TriggerRegistry):
        counts = registry.counts()
        assert set(counts) == {"command", "letter", "word"}
        assert sum(counts.values()) == len(registry)

    def test_entries_are_immutable(self, registry: TriggerRegistry):
        entry = registry.entries[0]
        with pytest.raises(Exception):
            entry.normalized_text = "x"
