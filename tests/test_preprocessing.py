"""Tests for text normalization, tokenization and frequency tables."""

from __future__ import annotations

import re

from textbayes.preprocessing import (
    default_tokenizer,
    frequency_table,
    normalize_text,
    remove_empty_tokens,
    strip_pattern,
)


class TestNormalizeText:
    def test_uppercases(self) -> None:
        assert normalize_text("Hello World") == "HELLO WORLD"

    def test_cyrillic(self) -> None:
        assert normalize_text("привет") == "ПРИВЕТ"

    def test_empty(self) -> None:
        assert normalize_text("") == ""


class TestStripPattern:
    def test_no_pattern_is_identity(self) -> None:
        assert strip_pattern("A B C", None) == "A B C"

    def test_replaces_every_match_with_space(self) -> None:
        pattern = re.compile(r"\d+")
        assert strip_pattern("A1B22C", pattern) == "A B C"


class TestDefaultTokenizer:
    def test_splits_on_whitespace_runs(self) -> None:
        assert default_tokenizer("HELLO   THERE\n\tFRIEND") == ["HELLO", "THERE", "FRIEND"]

    def test_punctuation_becomes_separator(self) -> None:
        assert default_tokenizer("AMAZING,AWESOME MOVIE!! YEAH!!") == [
            "AMAZING", "AWESOME", "MOVIE", "YEAH",
        ]

    def test_keeps_digits_and_underscore(self) -> None:
        assert default_tokenizer("ROOM_101 IS 2B") == ["ROOM_101", "IS", "2B"]

    def test_keeps_cyrillic_letters(self) -> None:
        assert default_tokenizer("ПРИВЕТ, МИР!") == ["ПРИВЕТ", "МИР"]

    def test_no_empty_tokens_at_edges(self) -> None:
        assert default_tokenizer("  !!HELLO!!  ") == ["HELLO"]

    def test_empty_text(self) -> None:
        assert default_tokenizer("") == []


class TestRemoveEmptyTokens:
    def test_drops_blank_tokens(self) -> None:
        assert remove_empty_tokens(["A", "", "  ", "B", "\t"]) == ["A", "B"]

    def test_accepts_generators(self) -> None:
        assert remove_empty_tokens(t for t in ["X", ""]) == ["X"]


class TestFrequencyTable:
    def test_counts_occurrences(self) -> None:
        assert frequency_table(["A", "B", "A", "C", "A"]) == {"A": 3, "B": 1, "C": 1}

    def test_empty(self) -> None:
        assert frequency_table([]) == {}

    def test_fresh_mapping_per_call(self) -> None:
        first = frequency_table(["A"])
        first["A"] = 99
        assert frequency_table(["A"]) == {"A": 1}

    def test_no_inherited_keys(self) -> None:
        """Names of dict attributes are ordinary tokens, not pre-existing keys."""
        table = frequency_table(["KEYS", "ITEMS", "__PROTO__", "CONSTRUCTOR"])
        assert table == {"KEYS": 1, "ITEMS": 1, "__PROTO__": 1, "CONSTRUCTOR": 1}
        assert type(table) is dict
